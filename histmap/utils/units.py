"""Density-independent unit conversion.

Marker radii and text sizes are specified in density-independent pixels
(dp) and scale-independent pixels (sp), then converted to device pixels with
the display density so the map looks the same on dense and sparse screens.
"""


def dp_to_px(dp: float, density: float) -> float:
    """Convert density-independent pixels to device pixels."""
    return dp * density


def sp_to_px(sp: float, density: float, font_scale: float = 1.0) -> float:
    """Convert scale-independent pixels (text sizes) to device pixels."""
    return sp * density * font_scale
