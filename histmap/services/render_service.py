"""Per-frame composition of tiles, rivers and place labels."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image, ImageDraw

from ..models.map_settings import MapSettings
from ..models.snapshot import Snapshot
from ..models.viewport import ViewportState
from .label_service import LabelPlacer, PilTextMeasurer, PlacedLabel, TextMeasurer
from .river_service import RiverRenderer
from .tile_service import TileCache, TileGrid, TileKey, TileStore

logger = logging.getLogger(__name__)


@dataclass
class FrameReport:
    """What one call to ``MapRenderer.draw`` put on the canvas."""

    tiles: list[TileKey] = field(default_factory=list)
    labels: list[PlacedLabel] = field(default_factory=list)
    rivers: int = 0

    @property
    def placed_names(self) -> list[str]:
        return [placed.place.name for placed in self.labels]


class MapRenderer:
    """Draws one frame of the historical map.

    Order per frame: clear, tiles, rivers, labels. The only state kept
    between frames is the tile cache; viewport and snapshot are passed in
    on every call.
    """

    def __init__(
        self,
        settings: MapSettings,
        tile_store: TileStore,
        text_measurer: Optional[TextMeasurer] = None,
    ):
        self.settings = settings
        self.tile_cache = TileCache(tile_store)
        self.tile_grid = TileGrid(settings.grid, settings.transform)
        self.river_renderer = RiverRenderer(settings.transform, settings.style, settings.density)
        self.label_placer = LabelPlacer(
            settings.transform,
            text_measurer or PilTextMeasurer(settings.style.font_path),
            settings.style,
            settings.density,
        )

    def draw(self, canvas: Image.Image, viewport: ViewportState, snapshot: Snapshot) -> FrameReport:
        """Draw a frame onto *canvas*, which must match the viewport size.

        Raises:
            ValueError: If the canvas size differs from the viewport size.
        """
        if canvas.size != (viewport.width, viewport.height):
            raise ValueError(
                f"Canvas is {canvas.size[0]}x{canvas.size[1]}, "
                f"viewport is {viewport.width}x{viewport.height}"
            )

        report = FrameReport()
        if viewport.is_empty:
            self.tile_cache.clear()
            return report

        draw = ImageDraw.Draw(canvas)
        draw.rectangle((0, 0, viewport.width, viewport.height), fill=self.settings.style.background_color)

        report.tiles = self.tile_grid.composite(canvas, viewport, self.tile_cache)
        report.rivers = self.river_renderer.draw(draw, snapshot.rivers, viewport)
        report.labels = self.label_placer.place(snapshot.place_list, viewport)
        self.label_placer.draw(draw, report.labels)

        logger.debug(
            "Frame at (%.4f, %.4f) zoom %d: %d tiles, %d rivers, %d labels",
            viewport.center_lon,
            viewport.center_lat,
            viewport.zoom_level,
            len(report.tiles),
            report.rivers,
            len(report.labels),
        )
        return report

    def render(self, viewport: ViewportState, snapshot: Snapshot) -> tuple[Image.Image, FrameReport]:
        """Allocate a canvas of the viewport size and draw a frame onto it."""
        canvas = Image.new("RGB", (viewport.width, viewport.height), self.settings.style.background_color)
        report = self.draw(canvas, viewport, snapshot)
        return canvas, report
