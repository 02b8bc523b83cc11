# services/recommendation_service.py
"""
Reglas fijas de recomendación sobre los KPIs de una temporada.

Se evalúan en orden de declaración; cada regla dispara a lo más una vez.
Si la entrada de una regla es None (sin datos) la regla se omite: la falta
de datos no es un problema de operación.
"""
from typing import Callable, List, NamedTuple, Optional

from enums.enums import PriorityEnum
from schemas.analytics import KpiSet, Recommendation, WaterQualitySummary

PH_MIN, PH_MAX = 7.5, 8.5
DO_MIN = 5.0
FCR_MAX = 2.0
UTILIZATION_MIN = 80.0


class _Inputs(NamedTuple):
    avg_ph: Optional[float]
    avg_dissolved_oxygen: Optional[float]
    average_fcr: Optional[float]
    pond_utilization: Optional[float]


def _ph_rule(inp: _Inputs) -> Optional[Recommendation]:
    ph = inp.avg_ph
    if ph is None or PH_MIN <= ph <= PH_MAX:
        return None
    return Recommendation(
        category="Water Quality",
        priority=PriorityEnum.high,
        issue="pH levels outside optimal range (7.5-8.5)",
        recommendation="Monitor and adjust pH levels using appropriate chemicals",
        current_value=ph,
        target_range="7.5-8.5",
    )


def _oxygen_rule(inp: _Inputs) -> Optional[Recommendation]:
    oxygen = inp.avg_dissolved_oxygen
    if oxygen is None or oxygen >= DO_MIN:
        return None
    return Recommendation(
        category="Water Quality",
        priority=PriorityEnum.high,
        issue="Low dissolved oxygen levels",
        recommendation="Increase aeration or reduce stocking density",
        current_value=oxygen,
        target_range=">5 mg/L",
    )


def _fcr_rule(inp: _Inputs) -> Optional[Recommendation]:
    fcr = inp.average_fcr
    if fcr is None or fcr <= FCR_MAX:
        return None
    return Recommendation(
        category="Feed Management",
        priority=PriorityEnum.medium,
        issue="High Feed Conversion Ratio",
        recommendation="Review feeding schedule and feed quality",
        current_value=round(fcr, 2),
        target_range="<1.8",
    )


def _utilization_rule(inp: _Inputs) -> Optional[Recommendation]:
    utilization = inp.pond_utilization
    if utilization is None or utilization >= UTILIZATION_MIN:
        return None
    return Recommendation(
        category="Pond Management",
        priority=PriorityEnum.low,
        issue="Low pond utilization rate",
        recommendation="Consider activating more ponds or reassess pond capacity",
        current_value=f"{utilization:.1f}%",
        target_range=">80%",
    )


RULES: List[Callable[[_Inputs], Optional[Recommendation]]] = [
    _ph_rule,
    _oxygen_rule,
    _fcr_rule,
    _utilization_rule,
]


def generate_recommendations(
        kpis: KpiSet,
        water_quality: Optional[WaterQualitySummary] = None,
) -> List[Recommendation]:
    """
    Recomendaciones para la temporada.
    Si no se pasa resumen de calidad de agua se usa el contenido en el KpiSet.
    """
    water_quality = water_quality or kpis.water_quality
    inputs = _Inputs(
        avg_ph=water_quality.avg_ph,
        avg_dissolved_oxygen=water_quality.avg_dissolved_oxygen,
        average_fcr=kpis.average_fcr,
        pond_utilization=kpis.pond_utilization,
    )
    return [rec for rec in (rule(inputs) for rule in RULES) if rec is not None]
