"""Map compositing and annotation services."""

from .label_service import LabelPlacer, PilTextMeasurer, PlacedLabel, TextBounds
from .render_service import FrameReport, MapRenderer
from .river_service import RiverRenderer
from .tile_service import DirectoryTileStore, InMemoryTileStore, TileCache, TileGrid, TileKey
from .timeline_service import SpatialTemporalDatabase, load_snapshots

__all__ = [
    "LabelPlacer",
    "PilTextMeasurer",
    "PlacedLabel",
    "TextBounds",
    "FrameReport",
    "MapRenderer",
    "RiverRenderer",
    "DirectoryTileStore",
    "InMemoryTileStore",
    "TileCache",
    "TileGrid",
    "TileKey",
    "SpatialTemporalDatabase",
    "load_snapshots",
]
