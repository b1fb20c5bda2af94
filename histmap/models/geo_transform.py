"""Affine mapping between raster pixels, geographic coordinates and the screen."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Only zoom level 0 source imagery exists. Negative levels upscale it on the fly.
MIN_ZOOM_LEVEL = -2
MAX_ZOOM_LEVEL = 0


def zoom_multiplier(zoom_level: int) -> int:
    """Return the on-screen size multiplier for a raster pixel.

    Each negative zoom step doubles the displayed size: 0 -> 1, -1 -> 2,
    -2 -> 4.

    Raises:
        ValueError: If the zoom level is outside ``[MIN_ZOOM_LEVEL, MAX_ZOOM_LEVEL]``.
    """
    if not MIN_ZOOM_LEVEL <= zoom_level <= MAX_ZOOM_LEVEL:
        raise ValueError(
            f"Zoom level {zoom_level} not supported "
            f"(expected {MIN_ZOOM_LEVEL}..{MAX_ZOOM_LEVEL})"
        )
    return 2 ** (-zoom_level)


class GeoTransform(BaseModel):
    """World file parameters for one raster asset.

    ``lon = x_scale * px + origin_lon`` and ``lat = y_scale * py + origin_lat``.
    Rotation terms are assumed to be zero. ``y_scale`` is negative for
    north-up rasters because pixel rows grow southward.
    """

    model_config = ConfigDict(frozen=True)

    x_scale: float = Field(..., description="Pixel size in X (degrees of longitude)")
    y_scale: float = Field(..., description="Pixel size in Y (degrees of latitude, negative)")
    origin_lon: float = Field(..., description="Longitude of the centre of the top-left pixel")
    origin_lat: float = Field(..., description="Latitude of the centre of the top-left pixel")

    @field_validator("x_scale", "y_scale")
    @classmethod
    def _non_degenerate(cls, value: float) -> float:
        if value == 0 or not math.isfinite(value):
            raise ValueError("pixel scale must be finite and non-zero")
        return value

    @field_validator("origin_lon", "origin_lat")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("origin must be finite")
        return value

    @classmethod
    def from_world_file(cls, lines: list[str]) -> "GeoTransform":
        """Build from the six lines of a world file (A, D, B, E, C, F).

        Raises:
            ValueError: If the file is malformed or has rotation terms.
        """
        values = [float(line) for line in lines if line.strip()]
        if len(values) != 6:
            raise ValueError(f"World file needs 6 values, got {len(values)}")
        a, d, b, e, c, f = values
        if d != 0 or b != 0:
            raise ValueError("Rotated world files are not supported")
        return cls(x_scale=a, y_scale=e, origin_lon=c, origin_lat=f)

    # ------------------------------------------------------------------
    # Raster <-> geographic
    # ------------------------------------------------------------------

    def longitude(self, px: float) -> float:
        return self.x_scale * px + self.origin_lon

    def latitude(self, py: float) -> float:
        return self.y_scale * py + self.origin_lat

    def to_geo(self, px: float, py: float) -> tuple[float, float]:
        """Return ``(lon, lat)`` for raster pixel ``(px, py)``."""
        return (self.longitude(px), self.latitude(py))

    def to_pixel(self, lon: float, lat: float) -> tuple[float, float]:
        """Return raster pixel ``(px, py)`` for ``(lon, lat)``."""
        return (
            (lon - self.origin_lon) / self.x_scale,
            (lat - self.origin_lat) / self.y_scale,
        )

    def lon_diff(self, pixel_diff: float) -> float:
        """Longitude difference spanned by a pixel difference in X."""
        return self.x_scale * pixel_diff

    def lat_diff(self, pixel_diff: float) -> float:
        """Latitude difference spanned by a pixel difference in Y."""
        return self.y_scale * pixel_diff

    def x_diff(self, lon_diff: float) -> float:
        """Pixel difference in X spanned by a longitude difference."""
        return lon_diff / self.x_scale

    def y_diff(self, lat_diff: float) -> float:
        """Pixel difference in Y spanned by a latitude difference."""
        return lat_diff / self.y_scale

    pixel_delta_for_lon_delta = x_diff
    pixel_delta_for_lat_delta = y_diff

    # ------------------------------------------------------------------
    # Screen placement
    # ------------------------------------------------------------------

    def screen_x(self, ref_lon: float, ref_screen_x: float, pixel_x: float, zoom_level: int) -> float:
        """Screen X of raster column *pixel_x*, given where *ref_lon* sits on screen."""
        m = zoom_multiplier(zoom_level)
        return ref_screen_x + m * (pixel_x + (self.origin_lon - ref_lon) / self.x_scale)

    def screen_y(self, ref_lat: float, ref_screen_y: float, pixel_y: float, zoom_level: int) -> float:
        """Screen Y of raster row *pixel_y*, given where *ref_lat* sits on screen."""
        m = zoom_multiplier(zoom_level)
        return ref_screen_y + m * (pixel_y + (self.origin_lat - ref_lat) / self.y_scale)

    def geo_to_screen(
        self,
        lon: float,
        lat: float,
        ref_lon: float,
        ref_lat: float,
        ref_screen_x: float,
        ref_screen_y: float,
        zoom_level: int,
    ) -> tuple[float, float]:
        """Screen position of ``(lon, lat)`` relative to a reference point."""
        m = zoom_multiplier(zoom_level)
        return (
            ref_screen_x + m * self.x_diff(lon - ref_lon),
            ref_screen_y + m * self.y_diff(lat - ref_lat),
        )


# Blue Marble land surface, shallow water and shaded topography, eastern
# hemisphere (http://grasswiki.osgeo.org/wiki/Blue_Marble).
BLUE_MARBLE_EAST = GeoTransform(
    x_scale=0.008333333333333,
    y_scale=-0.008333333333333,
    origin_lon=0.00416666666666665,
    origin_lat=89.99583333333334,
)
