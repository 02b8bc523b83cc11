"""
Servicio de cálculos para métricas de acuacultura.

Funciones puras sobre números ya normalizados. Ninguna divide entre cero:
si el denominador no es positivo o no hay datos, devuelven None.
"""
from typing import Iterable, List, Optional, Sequence

from schemas.records import MetricReading


# ==================== CÁLCULOS BÁSICOS ====================

def field_values(readings: Iterable[MetricReading], field: str) -> List[float]:
    """Valores presentes de un campo; las lecturas sin ese campo no cuentan."""
    return [r.values[field] for r in readings if r.values.get(field) is not None]


def safe_mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def safe_ratio(numerator: float, denominator: Optional[float]) -> Optional[float]:
    if denominator is None or denominator <= 0:
        return None
    return numerator / denominator


def percentage(part: float, whole: Optional[float]) -> Optional[float]:
    """
    Porcentaje part / whole × 100.
    """
    ratio = safe_ratio(part, whole)
    return ratio * 100 if ratio is not None else None


# ==================== CÁLCULOS DE CULTIVO ====================

def calculate_fcr(feed_consumed: float, biomass: float) -> Optional[float]:
    """
    Factor de conversión alimenticia.

    Fórmula:
    FCR = alimento consumido / biomasa producida

    Solo definido con biomasa > 0. Se devuelve a precisión completa;
    el redondeo a 2 decimales es de presentación.
    """
    return safe_ratio(feed_consumed, biomass)


def calculate_weighted_avg_weight(total_weight: float, total_count: float) -> Optional[float]:
    """
    Peso promedio ponderado por tamaño de muestra.

    Fórmula:
    peso_prom = Σ peso_total / Σ conteo_total

    IMPORTANTE:
    - NO es el promedio de los pesos promedio de cada muestreo.
    - Ejemplo: muestreo A 10 kg / 1000 org, muestreo B 1 kg / 10 org
      - Promedio de promedios: (0.010 + 0.100) / 2 = 0.055  ❌
      - Ponderado: 11 / 1010 = 0.0109  ✅
    """
    return safe_ratio(total_weight, total_count)


def calculate_average_weight_g(total_weight_kg: float, total_count: float) -> Optional[float]:
    """Peso promedio individual en gramos de un muestreo (kg × 1000 / conteo)."""
    ratio = safe_ratio(total_weight_kg, total_count)
    return ratio * 1000 if ratio is not None else None


def calculate_survival_rate(shrimp_count: float, capacity: float) -> Optional[float]:
    """
    Supervivencia estimada (%).

    Fórmula:
    supervivencia = organismos contados / capacidad × 100
    """
    if shrimp_count <= 0:
        return None
    return percentage(shrimp_count, capacity)
