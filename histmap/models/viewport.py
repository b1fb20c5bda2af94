"""Viewport state passed in for each frame."""

from pydantic import BaseModel, Field

from ..utils.geometry import Rect
from .geo_transform import MAX_ZOOM_LEVEL, MIN_ZOOM_LEVEL


class ViewportState(BaseModel):
    """What the host layer is looking at: centre, zoom level and canvas size.

    The renderer only reads this; panning and pinching update it between
    frames.
    """

    center_lon: float = Field(default=110.0, ge=-180, le=180, description="Longitude at the canvas centre")
    center_lat: float = Field(default=30.0, ge=-90, le=90, description="Latitude at the canvas centre")
    zoom_level: int = Field(
        default=0,
        ge=MIN_ZOOM_LEVEL,
        le=MAX_ZOOM_LEVEL,
        description="Discrete zoom level; negative values zoom in",
    )
    width: int = Field(default=1024, ge=0, description="Canvas width in pixels")
    height: int = Field(default=768, ge=0, description="Canvas height in pixels")

    @property
    def canvas_rect(self) -> Rect:
        return Rect.from_size(self.width, self.height)

    @property
    def center_screen(self) -> tuple[int, int]:
        """Integer screen position of the centre point."""
        return (self.width // 2, self.height // 2)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def zoomed_in(self) -> "ViewportState":
        """Return a copy one zoom step closer, clamped at the minimum level."""
        return self.model_copy(update={"zoom_level": max(MIN_ZOOM_LEVEL, self.zoom_level - 1)})

    def zoomed_out(self) -> "ViewportState":
        """Return a copy one zoom step further, clamped at the maximum level."""
        return self.model_copy(update={"zoom_level": min(MAX_ZOOM_LEVEL, self.zoom_level + 1)})
