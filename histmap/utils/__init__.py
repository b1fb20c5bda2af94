"""Utility functions for the historical map."""

from .geometry import Rect
from .image_utils import crop_region, load_image, resize_image, save_image
from .units import dp_to_px, sp_to_px

__all__ = [
    "Rect",
    "crop_region",
    "load_image",
    "resize_image",
    "save_image",
    "dp_to_px",
    "sp_to_px",
]
