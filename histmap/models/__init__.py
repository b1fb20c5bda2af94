"""Data models for the historical map."""

from .geo_transform import (
    BLUE_MARBLE_EAST,
    MAX_ZOOM_LEVEL,
    MIN_ZOOM_LEVEL,
    GeoTransform,
    zoom_multiplier,
)
from .map_settings import MapSettings, StyleSettings, TileGridSettings
from .place import Place, PlaceKind
from .river import River
from .snapshot import HistoricalDate, Snapshot
from .viewport import ViewportState

__all__ = [
    "BLUE_MARBLE_EAST",
    "MAX_ZOOM_LEVEL",
    "MIN_ZOOM_LEVEL",
    "GeoTransform",
    "zoom_multiplier",
    "MapSettings",
    "StyleSettings",
    "TileGridSettings",
    "Place",
    "PlaceKind",
    "River",
    "HistoricalDate",
    "Snapshot",
    "ViewportState",
]
