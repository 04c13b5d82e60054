from fastapi import APIRouter, Depends

from health_report.pipelines import (
    GlycemicCardResult,
    LDLCardResult,
    Omega3CardResult,
    VitaminDCardResult,
    build_glycemic_card_result,
    build_ldl_card_result,
    build_omega3_card_result,
    build_vitamin_d_card_result,
)
from health_report.routers.deps import get_content_renderer
from health_report.schemas.payloads import ProbePayload
from health_report.services.rendering import Renderer
from health_report.services.report_generator import log_card_outcome

router = APIRouter(prefix="/api/report/preview", tags=["preview"])


@router.post("/hba1c", response_model=GlycemicCardResult)
def preview_hba1c(payload: ProbePayload, renderer: Renderer = Depends(get_content_renderer)):
    result = build_glycemic_card_result(payload.to_record(), renderer=renderer)
    log_card_outcome("hba1c", result)
    return result


@router.post("/ldl", response_model=LDLCardResult)
def preview_ldl(payload: ProbePayload, renderer: Renderer = Depends(get_content_renderer)):
    # The probe carries its risk record inline under "risk".
    result = build_ldl_card_result(payload.to_record(), renderer=renderer)
    log_card_outcome("ldl", result)
    return result


@router.post("/vitaminD", response_model=VitaminDCardResult)
def preview_vitamin_d(payload: ProbePayload, renderer: Renderer = Depends(get_content_renderer)):
    result = build_vitamin_d_card_result(payload.to_record(), renderer=renderer)
    log_card_outcome("vitaminD", result)
    return result


@router.post("/omega3", response_model=Omega3CardResult)
def preview_omega3(payload: ProbePayload, renderer: Renderer = Depends(get_content_renderer)):
    result = build_omega3_card_result(payload.to_record(), renderer=renderer)
    log_card_outcome("omega3", result)
    return result
