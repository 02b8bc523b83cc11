# models/__init__.py
from utils.db import Base  # re-export
from .season import Season
from .pond import Pond
from .inventory_item import InventoryItem
from .feed_input import FeedInput
from .water_quality import WaterQualityInput
from .growth_sampling import GrowthSampling
from .event import Event
