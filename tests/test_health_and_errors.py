def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert "timestamp" in payload


def test_missing_patient_is_validation_error(client):
    response = client.post("/api/report/cards", json={"risks": {"ascvd": 0.1}})
    assert response.status_code == 422
    payload = response.json()
    assert payload["statusCode"] == 422
    assert payload["error"] == "ValidationError"
    assert payload["details"]["errors"][0]["loc"] == ["body", "patient"]


def test_non_object_body_is_validation_error(client):
    response = client.post("/api/report/preview/ldl", json=[150])
    assert response.status_code == 422
    assert response.json()["message"] == "Invalid request payload"


def test_get_on_preview_is_rejected(client):
    response = client.get("/api/report/preview/ldl")
    assert response.status_code == 405
    assert response.json()["error"] == "MethodNotAllowed"


def test_unknown_route_uses_error_envelope(client):
    response = client.post("/api/report/preview/cholesterol", json={})
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "message": "Not Found", "error": "NotFound"}


def test_run_configures_logging_then_starts_server(monkeypatch):
    from health_report import main

    calls = []
    monkeypatch.setattr(main.logging, "basicConfig", lambda **kwargs: calls.append(("logging", kwargs)))
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append(("uvicorn", app, kwargs)))

    main.run()

    assert [call[0] for call in calls] == ["logging", "uvicorn"]
    assert calls[0][1]["level"] == main.settings.log_level.upper()
    assert calls[1][1] == "health_report.main:app"
    assert calls[1][2]["port"] == main.settings.app_port
