from fastapi import HTTPException, Query

from health_report.config import settings
from health_report.services.rendering import Renderer, get_renderer


def get_content_renderer(format: str | None = Query(default=None)) -> Renderer:
    try:
        return get_renderer(format or settings.default_content_format)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
