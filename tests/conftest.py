from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from health_report.main import app


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def cardiac_patient() -> dict:
    return {
        "biomarkers": {"ldl": 165, "hba1c": 6.2, "triglycerides": 230, "vitaminD": 24},
        "risk": {"ascvd": 12},
        "medications": [{"name": "Atorvastatin", "category": "statin"}],
        "supplements": [{"name": "Vitamin D3", "dose": 1000}],
        "dietary": {"fishServingsPerWeek": 1},
    }
