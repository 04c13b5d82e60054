from health_report.pipelines.glycemic import GlycemicCardResult, build_glycemic_card_result
from health_report.pipelines.ldl import LDLCardResult, build_ldl_card_result
from health_report.pipelines.omega3 import Omega3CardResult, build_omega3_card_result
from health_report.pipelines.vitamin_d import VitaminDCardResult, build_vitamin_d_card_result

__all__ = [
    "GlycemicCardResult",
    "LDLCardResult",
    "Omega3CardResult",
    "VitaminDCardResult",
    "build_glycemic_card_result",
    "build_ldl_card_result",
    "build_omega3_card_result",
    "build_vitamin_d_card_result",
]
