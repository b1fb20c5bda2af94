"""River polyline rendering."""

from typing import Optional, Sequence

import numpy as np
from PIL import ImageDraw

from ..models.geo_transform import GeoTransform, zoom_multiplier
from ..models.map_settings import StyleSettings
from ..models.river import River
from ..models.viewport import ViewportState
from ..utils.units import dp_to_px


class RiverRenderer:
    """Strokes rivers as connected straight segments.

    Rivers are drawn before places so markers and labels sit on top of
    them. No culling or collision checks are done: PIL clips anything that
    falls outside the canvas.
    """

    def __init__(
        self,
        transform: GeoTransform,
        style: Optional[StyleSettings] = None,
        density: float = 1.0,
    ):
        self.transform = transform
        self.style = style or StyleSettings()
        self.density = density

    def stroke_width(self, width_tier: int) -> int:
        """Device-pixel stroke width for a river width tier."""
        return max(1, round(dp_to_px(width_tier * self.style.river_width_dp, self.density)))

    def screen_points(self, river: River, viewport: ViewportState) -> np.ndarray:
        """Screen coordinates of a river's vertices as an ``(n, 2)`` array."""
        coords = np.asarray(river.points, dtype=np.float64)
        m = zoom_multiplier(viewport.zoom_level)
        ref_x, ref_y = viewport.center_screen
        xs = ref_x + m * (coords[:, 0] - viewport.center_lon) / self.transform.x_scale
        ys = ref_y + m * (coords[:, 1] - viewport.center_lat) / self.transform.y_scale
        return np.column_stack((xs, ys))

    def draw(
        self,
        draw: ImageDraw.ImageDraw,
        rivers: Sequence[River],
        viewport: ViewportState,
    ) -> int:
        """Draw every river.

        Returns:
            Number of rivers drawn.
        """
        for river in rivers:
            points = self.screen_points(river, viewport)
            draw.line(
                points.ravel().tolist(),
                fill=self.style.river_color,
                width=self.stroke_width(river.width),
                joint="curve",
            )
        return len(rivers)
