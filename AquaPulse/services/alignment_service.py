# services/alignment_service.py
"""
Alineación temporal de dos series sobre un eje común.

- absolute: llave = fecha calendario 'YYYY-MM-DD' del timestamp almacenado.
- relative: llave = día de cultivo N desde el origen de CADA serie
  (floor((ts - origen) / 1 día) + 1). Dos lecturas de estanques/temporadas
  distintas se alinean si caen en el mismo día N, sin importar la fecha real.

El conjunto de llaves es la unión de las llaves de ambas series; el lado que
no tiene lectura para una llave queda en None. Orden ascendente: lexicográfico
para fechas, numérico para días ("Day 10" va después de "Day 2").
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Union

from enums.enums import AlignmentModeEnum
from schemas.comparison import SeriesPoint
from utils.datetime_utils import cultivation_day, date_key, day_label
from utils.errors import ValidationError

Key = Union[str, int]
Reducer = Callable[[List[float]], float]


def reduce_mean(values: List[float]) -> float:
    return sum(values) / len(values)


def reduce_sum(values: List[float]) -> float:
    return sum(values)


@dataclass(frozen=True)
class AlignedPoint:
    key: Key
    label: str
    pond_a_value: Optional[float]
    pond_b_value: Optional[float]


def _key_for(ts: datetime, mode: AlignmentModeEnum, origin: Optional[datetime]) -> Key:
    if mode == AlignmentModeEnum.absolute:
        return date_key(ts)
    return cultivation_day(ts, origin)


def _label_for(key: Key, mode: AlignmentModeEnum) -> str:
    return key if mode == AlignmentModeEnum.absolute else day_label(key)


def _keyed(
        series: Sequence[SeriesPoint],
        mode: AlignmentModeEnum,
        origin: Optional[datetime],
        reducer: Reducer,
) -> Dict[Key, float]:
    grouped: Dict[Key, List[float]] = defaultdict(list)
    for point in series:
        grouped[_key_for(point.timestamp, mode, origin)].append(point.value)
    return {key: reducer(values) for key, values in grouped.items()}


def align(
        series_a: Sequence[SeriesPoint],
        series_b: Sequence[SeriesPoint],
        mode: AlignmentModeEnum,
        origin_a: Optional[datetime] = None,
        origin_b: Optional[datetime] = None,
        reducer: Reducer = reduce_mean,
) -> List[AlignedPoint]:
    """
    Une dos series por llave temporal.

    Varias lecturas de una misma serie bajo la misma llave se combinan con
    `reducer` (promedio por defecto). Función pura: no hace I/O ni muta las
    series de entrada.
    """
    mode = AlignmentModeEnum(mode)
    if mode == AlignmentModeEnum.relative and (origin_a is None or origin_b is None):
        raise ValidationError("El modo relativo requiere la fecha de origen de ambos estanques")

    keyed_a = _keyed(series_a, mode, origin_a, reducer)
    keyed_b = _keyed(series_b, mode, origin_b, reducer)

    keys = sorted(set(keyed_a) | set(keyed_b))
    return [
        AlignedPoint(
            key=key,
            label=_label_for(key, mode),
            pond_a_value=keyed_a.get(key),
            pond_b_value=keyed_b.get(key),
        )
        for key in keys
    ]


def joined_keys(
        series_a: Sequence[SeriesPoint],
        series_b: Sequence[SeriesPoint],
        mode: AlignmentModeEnum,
        origin_a: Optional[datetime] = None,
        origin_b: Optional[datetime] = None,
) -> List[Key]:
    return [p.key for p in align(series_a, series_b, mode, origin_a, origin_b)]
