"""Greedy placement and drawing of place markers and labels.

Places are visited in snapshot order, which is their priority order. A place
is drawn only if its marker and its label both fit inside the canvas and
neither overlaps anything already accepted this frame. Otherwise the place
is dropped entirely. There is no joint optimisation: later places simply
lose contested space.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from PIL import ImageDraw, ImageFont

from ..models.geo_transform import GeoTransform
from ..models.map_settings import StyleSettings
from ..models.place import Place, PlaceKind
from ..models.viewport import ViewportState
from ..utils.geometry import Rect
from ..utils.units import dp_to_px, sp_to_px

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerStyle:
    """Glyph tier for one place kind, in half-dp units.

    ``box_radius`` is the half-size of the marker's bounding square. The
    glyph is concentric circles: ``stroked_radii`` are outlined,
    ``filled_radius`` (if any) is a solid disc.
    """

    box_radius: float
    stroked_radii: tuple[float, ...]
    filled_radius: Optional[float]
    text_size_sp: int


MARKER_STYLES: dict[PlaceKind, MarkerStyle] = {
    PlaceKind.CAPITAL: MarkerStyle(18, (16, 12), 8, 18),
    PlaceKind.PROVINCE: MarkerStyle(16, (14,), 6, 16),
    PlaceKind.PREFECTURE: MarkerStyle(14, (12,), 6, 14),
    PlaceKind.COUNTY: MarkerStyle(12, (10,), 5, 12),
    PlaceKind.TOWN: MarkerStyle(10, (), 8, 10),
}


@dataclass(frozen=True)
class TextBounds:
    """Ink box of a measured string.

    ``center_offset`` is the vertical centre of the ink box relative to the
    baseline (negative when the text sits above the baseline). ``left`` is
    where the ink starts relative to the drawing origin (the left side
    bearing of the first glyph).
    """

    width: float
    height: float
    center_offset: float
    left: float = 0.0


class TextMeasurer(Protocol):
    """Text measurement and font lookup used for labels."""

    def measure(self, text: str, size: float) -> TextBounds:
        ...

    def font(self, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        ...


# Candidate fonts, CJK-capable first since place names are Chinese
_SYSTEM_FONT_CANDIDATES = [
    # Linux
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/arphic/uming.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    # macOS
    "/System/Library/Fonts/PingFang.ttc",
    "/System/Library/Fonts/STHeiti Light.ttc",
    "/Library/Fonts/Arial Unicode.ttf",
    # Windows
    "C:/Windows/Fonts/msyh.ttc",
    "C:/Windows/Fonts/simsun.ttc",
    "C:/Windows/Fonts/arial.ttf",
]


class PilTextMeasurer:
    """Measures and draws text with Pillow fonts, cached per pixel size."""

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path or self._find_system_font()
        self._font_cache: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def font(self, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        px = max(1, round(size))
        if px not in self._font_cache:
            self._font_cache[px] = self._load_font(px)
        return self._font_cache[px]

    def measure(self, text: str, size: float) -> TextBounds:
        left, top, right, bottom = self.font(size).getbbox(text, anchor="ls")
        return TextBounds(
            width=right - left,
            height=bottom - top,
            center_offset=(top + bottom) / 2,
            left=left,
        )

    def _load_font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        if self.font_path:
            try:
                return ImageFont.truetype(self.font_path, size)
            except OSError:
                logger.warning("Could not load font %s; using default", self.font_path)
        return ImageFont.load_default(size=size)

    @staticmethod
    def _find_system_font() -> Optional[str]:
        for path in _SYSTEM_FONT_CANDIDATES:
            try:
                ImageFont.truetype(path, 12)
                return path
            except OSError:
                continue
        logger.warning("No system font found; labels use the Pillow default font")
        return None


@dataclass(frozen=True)
class PlacedLabel:
    """A place accepted for drawing this frame."""

    place: Place
    x: float
    y: float
    marker_rect: Rect
    label_rect: Rect
    text_size: float
    baseline_y: float
    origin_x: float


class LabelPlacer:
    """Decides which places get a marker and label, and draws them."""

    def __init__(
        self,
        transform: GeoTransform,
        measurer: TextMeasurer,
        style: Optional[StyleSettings] = None,
        density: float = 1.0,
    ):
        self.transform = transform
        self.measurer = measurer
        self.style = style or StyleSettings()
        self.density = density
        self.base_unit = 0.5 * dp_to_px(1, density)

    def text_size(self, kind: PlaceKind) -> float:
        """Label text size in device pixels for *kind*."""
        return sp_to_px(MARKER_STYLES[kind].text_size_sp, self.density, self.style.font_scale)

    def anchor(self, place: Place, viewport: ViewportState) -> tuple[float, float]:
        """Screen position of *place* for this viewport."""
        ref_x, ref_y = viewport.center_screen
        return self.transform.geo_to_screen(
            place.lon,
            place.lat,
            viewport.center_lon,
            viewport.center_lat,
            ref_x,
            ref_y,
            viewport.zoom_level,
        )

    def place(self, places: Sequence[Place], viewport: ViewportState) -> list[PlacedLabel]:
        """Greedily accept places in order.

        Args:
            places: Places in priority order.
            viewport: Frame geometry.

        Returns:
            Accepted placements in acceptance order. No two of their marker
            or label rectangles overlap and all lie inside the canvas.
        """
        canvas_rect = viewport.canvas_rect
        occupied: list[Rect] = []
        accepted: list[PlacedLabel] = []

        for place in places:
            placed = self._try_place(place, viewport, canvas_rect, occupied)
            if placed is None:
                continue
            occupied.append(placed.marker_rect)
            occupied.append(placed.label_rect)
            accepted.append(placed)

        logger.debug("Placed %d of %d places", len(accepted), len(places))
        return accepted

    def _try_place(
        self,
        place: Place,
        viewport: ViewportState,
        canvas_rect: Rect,
        occupied: list[Rect],
    ) -> Optional[PlacedLabel]:
        x, y = self.anchor(place, viewport)
        half = self.base_unit * MARKER_STYLES[place.kind].box_radius
        marker_rect = Rect.around(x, y, half)
        if not canvas_rect.contains(marker_rect):
            return None

        size = self.text_size(place.kind)
        bounds = self.measurer.measure(place.name, size)
        top = y - bounds.height / 2
        label_rect = Rect(x + half, top, x + half + bounds.width, top + bounds.height)
        if not canvas_rect.contains(label_rect):
            logger.debug("Skipped '%s': label outside canvas", place.name)
            return None

        if marker_rect.intersects_any(occupied) or label_rect.intersects_any(occupied):
            logger.debug("Skipped '%s': overlaps an accepted label", place.name)
            return None

        return PlacedLabel(
            place=place,
            x=x,
            y=y,
            marker_rect=marker_rect,
            label_rect=label_rect,
            text_size=size,
            baseline_y=y - bounds.center_offset,
            origin_x=label_rect.left - bounds.left,
        )

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, draw: ImageDraw.ImageDraw, placements: Sequence[PlacedLabel]) -> None:
        """Paint markers and labels for accepted placements."""
        for placed in placements:
            self.draw_marker(draw, placed.x, placed.y, placed.place.kind)
            self.draw_text(draw, placed)

    def draw_marker(self, draw: ImageDraw.ImageDraw, x: float, y: float, kind: PlaceKind) -> None:
        style = MARKER_STYLES[kind]
        color = self.style.marker_color
        stroke = max(1, round(2 * self.base_unit))
        for radius in style.stroked_radii:
            r = radius * self.base_unit
            draw.ellipse((x - r, y - r, x + r, y + r), outline=color, width=stroke)
        if style.filled_radius is not None:
            r = style.filled_radius * self.base_unit
            draw.ellipse((x - r, y - r, x + r, y + r), fill=color)

    def draw_text(self, draw: ImageDraw.ImageDraw, placed: PlacedLabel) -> None:
        # Shift the origin so the ink, not the pen position, starts at the rect edge
        draw.text(
            (placed.origin_x, placed.baseline_y),
            placed.place.name,
            fill=self.style.label_color,
            font=self.measurer.font(placed.text_size),
            anchor="ls",
        )
