"""Shared test fixtures."""

import pytest
from PIL import Image, ImageFont

from histmap.models.geo_transform import GeoTransform
from histmap.models.map_settings import MapSettings, StyleSettings, TileGridSettings
from histmap.models.place import Place, PlaceKind
from histmap.models.river import River
from histmap.models.snapshot import Snapshot
from histmap.models.viewport import ViewportState
from histmap.services.label_service import TextBounds
from histmap.services.tile_service import InMemoryTileStore, TileKey

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


class FakeTextMeasurer:
    """Fixed-width glyphs: each character is ``size`` wide and ``size`` tall.

    Ink sits 0.8 * size above the baseline and 0.2 * size below it.
    """

    def __init__(self):
        self.calls: list[tuple[str, float]] = []

    def measure(self, text: str, size: float) -> TextBounds:
        self.calls.append((text, size))
        return TextBounds(width=len(text) * size, height=size, center_offset=-0.3 * size)

    def font(self, size: float):
        return ImageFont.load_default(size=max(1, round(size)))


@pytest.fixture
def fake_measurer():
    return FakeTextMeasurer()


@pytest.fixture
def small_transform():
    """0.01 degree pixels with the top-left pixel at (100E, 40N)."""
    return GeoTransform(x_scale=0.01, y_scale=-0.01, origin_lon=100.0, origin_lat=40.0)


@pytest.fixture
def small_grid():
    """4 x 3 grid of 16 px tiles starting at the raster origin."""
    return TileGridSettings(tiles_x=4, tiles_y=3, map_left=0, map_top=0, tile_size=16)


@pytest.fixture
def small_settings(small_transform, small_grid):
    return MapSettings(
        transform=small_transform,
        grid=small_grid,
        style=StyleSettings(),
        density=1.0,
        initial_lon=100.0,
        initial_lat=40.0,
    )


@pytest.fixture
def tile_images():
    """Solid-colour zoom 0 tiles for the first two columns of the small grid."""
    return {
        TileKey(0, 0, 0): Image.new("RGB", (16, 16), RED),
        TileKey(0, 0, 1): Image.new("RGB", (16, 16), GREEN),
        TileKey(0, 1, 0): Image.new("RGB", (16, 16), BLUE),
        TileKey(0, 1, 1): Image.new("RGB", (16, 16), RED),
    }


@pytest.fixture
def memory_store(tile_images):
    return InMemoryTileStore(tile_images)


@pytest.fixture
def corner_viewport():
    """64 x 48 canvas whose centre sits on the raster's top-left corner."""
    return ViewportState(center_lon=100.0, center_lat=40.0, zoom_level=0, width=64, height=48)


@pytest.fixture
def label_viewport():
    """200 x 100 canvas centred on (100E, 40N); the centre is screen (100, 50)."""
    return ViewportState(center_lon=100.0, center_lat=40.0, zoom_level=0, width=200, height=100)


@pytest.fixture
def sample_places():
    return [
        Place(name="Luo", lat=40.0, lon=100.0, kind=PlaceKind.CAPITAL),
        Place(name="Ye", lat=39.8, lon=100.3, kind=PlaceKind.PREFECTURE),
        Place(name="Xu", lat=40.2, lon=99.5, kind=PlaceKind.COUNTY),
    ]


@pytest.fixture
def sample_river():
    return River(name="Test River", width=10, points=((100.0, 40.0), (100.5, 40.0)))


@pytest.fixture
def sample_snapshot(sample_places, sample_river):
    return Snapshot(date="0220-01-01", title="Test", places=sample_places, rivers=[sample_river])


@pytest.fixture
def snapshot_records():
    """Three snapshot records, deliberately out of date order."""
    return [
        {"date": "0813-01-01", "title": "Tang", "places": [{"name": "B", "lat": 34.0, "lon": 108.9}]},
        {"date": "-0221-01-01", "title": "Qin", "places": []},
        {"date": "0220-01-01", "title": "Three Kingdoms", "places": [{"name": "A", "lat": 34.6, "lon": 112.4}]},
    ]
