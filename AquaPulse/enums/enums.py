from enum import Enum

# =====================================================
# 🔁 TEMPORADAS
# =====================================================
class SeasonStatusEnum(str, Enum):
    planning = "Planning"
    active = "Active"
    completed = "Completed"


# =====================================================
# 🧱 ESTANQUES
# =====================================================
class PondStatusEnum(str, Enum):
    active = "Active"
    completed = "Completed"
    inactive = "Inactive"
    maintenance = "Maintenance"  # cuenta como inactivo en KPIs


# =====================================================
# 📅 EVENTOS OPERATIVOS
# =====================================================
class EventTypeEnum(str, Enum):
    stocking = "Stocking"
    partial_harvest = "PartialHarvest"
    full_harvest = "FullHarvest"
    water_exchange = "WaterExchange"
    treatment = "Treatment"
    other = "Other"


HARVEST_EVENT_TYPES = (EventTypeEnum.partial_harvest, EventTypeEnum.full_harvest)


# =====================================================
# 📊 ANALYTICS
# =====================================================
class TimeRangeEnum(str, Enum):
    week = "week"
    month = "month"
    quarter = "quarter"


class BucketSizeEnum(str, Enum):
    day = "day"
    week = "week"


class ReadingKindEnum(str, Enum):
    feed = "feed"
    water_quality = "water_quality"
    growth = "growth"


class AlignmentModeEnum(str, Enum):
    absolute = "absolute"  # misma temporada / rango de fechas explícito
    relative = "relative"  # entre temporadas, "día N" desde el origen


class DayZeroOriginEnum(str, Enum):
    season_start = "season_start"
    stocking_date = "stocking_date"


class ComparisonMetricEnum(str, Enum):
    temperature = "temperature"
    ph = "ph"
    dissolved_oxygen = "dissolved_oxygen"
    ammonia = "ammonia"
    salinity = "salinity"
    feed_consumption = "feed_consumption"
    average_weight = "average_weight"


class PriorityEnum(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"


class ReportFormatEnum(str, Enum):
    json = "json"
    csv = "csv"
