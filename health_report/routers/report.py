from fastapi import APIRouter, Depends

from health_report.routers.deps import get_content_renderer
from health_report.schemas.payloads import ReportRequest
from health_report.services.rendering import Renderer
from health_report.services.report_generator import generate_report_cards

router = APIRouter(prefix="/api/report", tags=["report"])


@router.post("/cards")
def report_cards(request: ReportRequest, renderer: Renderer = Depends(get_content_renderer)):
    cards = generate_report_cards(request.patient, request.risks, renderer=renderer)
    return {
        "statusCode": 200,
        "message": "Success",
        "data": {"cards": {key: card.model_dump(mode="json", by_alias=True) for key, card in cards.items()}},
    }
