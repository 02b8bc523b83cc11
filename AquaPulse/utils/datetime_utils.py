"""
Utilidades centralizadas para manejo de fechas, llaves de bucket y días de cultivo.

Convención del sistema:
- Los timestamps de las lecturas se usan tal como fueron almacenados. No se
  normaliza zona horaria: la fecha calendario de una lectura es la fecha de
  su timestamp almacenado.
- El "ahora" por defecto se calcula en settings.DEFAULT_TZ y se devuelve
  naive, igual que los timestamps persistidos.
"""
from datetime import datetime, date, time, timedelta
from typing import Union
from zoneinfo import ZoneInfo

from config.settings import settings

DateLike = Union[date, datetime]


def _local_tz() -> ZoneInfo:
    try:
        return ZoneInfo(settings.DEFAULT_TZ or "UTC")
    except Exception:
        return ZoneInfo("UTC")


def now_local() -> datetime:
    """
    Retorna el datetime actual en la zona configurada (naive, sin microsegundos).
    """
    return datetime.now(_local_tz()).replace(tzinfo=None, microsecond=0)


def as_datetime(value: DateLike) -> datetime:
    """Convierte un date a datetime a medianoche; los datetime se devuelven tal cual."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def date_key(ts: DateLike) -> str:
    """Llave de bucket diario: 'YYYY-MM-DD' truncado del timestamp almacenado."""
    if isinstance(ts, datetime):
        return ts.date().isoformat()
    return ts.isoformat()


def week_key(ts: DateLike) -> str:
    """Llave de bucket semanal: fecha del lunes (ISO) de la semana del timestamp."""
    d = ts.date() if isinstance(ts, datetime) else ts
    return (d - timedelta(days=d.weekday())).isoformat()


def cultivation_day(ts: DateLike, origin: DateLike) -> int:
    """
    Día de cultivo relativo a un origen (día 0 = origen).

    Fórmula:
    dia = floor((ts - origen) / 1 día) + 1

    Se compara en la misma referencia (naive vs naive). Si uno trae tzinfo y
    el otro no, se descarta la tzinfo para no mezclar referencias.
    """
    a = as_datetime(ts)
    b = as_datetime(origin)
    if (a.tzinfo is None) != (b.tzinfo is None):
        a = a.replace(tzinfo=None)
        b = b.replace(tzinfo=None)
    return (a - b) // timedelta(days=1) + 1


def day_label(day: int) -> str:
    return f"Day {day}"


def to_day_bounds(start: DateLike, end: DateLike) -> tuple[datetime, datetime]:
    """
    Convierte un rango inclusivo a (inicio, fin) en datetimes.
    Si el fin es un date, cubre el día completo.
    """
    start_dt = as_datetime(start)
    if isinstance(end, datetime):
        end_dt = end
    else:
        end_dt = datetime.combine(end, time.max)
    return start_dt, end_dt
