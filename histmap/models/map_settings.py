"""Settings for one map asset: raster transform, tile grid and drawing style."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .geo_transform import BLUE_MARBLE_EAST, GeoTransform


class TileGridSettings(BaseModel):
    """How the base raster was cropped and cut into square tiles."""

    tiles_x: int = Field(default=35, ge=1, description="Number of tile columns (west-east)")
    tiles_y: int = Field(default=16, ge=1, description="Number of tile rows (north-south)")
    map_left: int = Field(default=6836, ge=0, description="Raster column of the west edge of the crop")
    map_top: int = Field(default=5000, ge=0, description="Raster row of the north edge of the crop")
    tile_size: int = Field(default=256, ge=16, le=4096, description="Tile side in pixels")

    @property
    def map_width(self) -> int:
        """Cropped map width in pixels."""
        return self.tiles_x * self.tile_size

    @property
    def map_height(self) -> int:
        """Cropped map height in pixels."""
        return self.tiles_y * self.tile_size

    def tile_origin(self, col: int, row: int) -> tuple[int, int]:
        """Raster pixel of the top-left corner of tile ``(col, row)``."""
        return (self.map_left + col * self.tile_size, self.map_top + row * self.tile_size)


class StyleSettings(BaseModel):
    """Colours and sizes used when painting a frame."""

    background_color: str = Field(default="#000000", description="Canvas clear colour")
    marker_color: str = Field(default="#0F98D4", description="Place marker colour")
    label_color: str = Field(default="#FFFFFF", description="Place label text colour")
    river_color: str = Field(default="#3A7BBF", description="River stroke colour")
    river_width_dp: float = Field(
        default=0.5,
        gt=0,
        le=5.0,
        description="Stroke width in dp for each river width tier",
    )
    font_scale: float = Field(default=1.0, ge=0.5, le=3.0, description="Global text size multiplier")
    font_path: Optional[str] = Field(default=None, description="TrueType/OpenType font for labels")


class MapSettings(BaseModel):
    """Complete configuration for rendering one map asset."""

    transform: GeoTransform = Field(default=BLUE_MARBLE_EAST)
    grid: TileGridSettings = Field(default_factory=TileGridSettings)
    style: StyleSettings = Field(default_factory=StyleSettings)
    density: float = Field(default=1.0, gt=0, le=8.0, description="Device pixels per dp")
    initial_lon: float = Field(default=110.0, ge=-180, le=180)
    initial_lat: float = Field(default=30.0, ge=-90, le=90)

    @classmethod
    def from_yaml(cls, path: Path) -> "MapSettings":
        """Load settings from a YAML file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
