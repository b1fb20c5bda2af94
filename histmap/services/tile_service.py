"""Tile storage, caching and compositing for the base map.

The base raster is cut into square tiles named ``map_{zoom}_{col}_{row}``.
Only zoom level 0 tiles exist; negative screen zoom levels reuse them and
upscale on the fly, so very dense screens still get a readable map.
"""

import logging
import math
from pathlib import Path
from typing import NamedTuple, Optional, Protocol, Union

from PIL import Image, UnidentifiedImageError

from ..models.geo_transform import GeoTransform, zoom_multiplier
from ..models.map_settings import TileGridSettings
from ..models.viewport import ViewportState
from ..utils.geometry import Rect
from ..utils.image_utils import crop_region, load_image, resize_image, save_image

logger = logging.getLogger(__name__)


class TileKey(NamedTuple):
    """Composite key of a source tile."""

    zoom: int
    col: int
    row: int


def tile_resource_name(zoom: int, col: int, row: int) -> str:
    """Name under which a tile is stored, e.g. ``map_0_3_7``."""
    return f"map_{zoom}_{col}_{row}"


class TileStore(Protocol):
    """Anything that can hand out decoded tile images by key."""

    def load(self, key: TileKey) -> Optional[Image.Image]:
        """Return the decoded tile, or ``None`` if it is absent."""
        ...


class DirectoryTileStore:
    """Tiles stored as image files in one directory."""

    def __init__(self, tile_dir: Union[str, Path], extension: str = "png"):
        self.tile_dir = Path(tile_dir)
        self.extension = extension.lstrip(".")

    def path_for(self, key: TileKey) -> Path:
        return self.tile_dir / f"{tile_resource_name(*key)}.{self.extension}"

    def load(self, key: TileKey) -> Optional[Image.Image]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return load_image(path)
        except (OSError, UnidentifiedImageError) as exc:
            logger.debug("Could not decode tile %s: %s", path, exc)
            return None


class InMemoryTileStore:
    """Tiles held in a dict; used for fixtures and pre-decoded assets."""

    def __init__(self, tiles: Optional[dict[TileKey, Image.Image]] = None):
        self.tiles: dict[TileKey, Image.Image] = dict(tiles or {})
        self.load_count = 0

    def load(self, key: TileKey) -> Optional[Image.Image]:
        self.load_count += 1
        return self.tiles.get(TileKey(*key))


class TileCache:
    """Decoded tiles for one renderer, filled lazily while drawing.

    A tile is released as soon as it scrolls out of view and fetched again
    the next time it becomes visible. Missing tiles are not remembered, so a
    tile that appears in the store later is picked up on the next frame.
    """

    def __init__(self, store: TileStore):
        self.store = store
        self._tiles: dict[TileKey, Image.Image] = {}

    def get(self, key: TileKey) -> Optional[Image.Image]:
        tile = self._tiles.get(key)
        if tile is None:
            tile = self.store.load(key)
            if tile is None:
                logger.debug("Tile %s missing", tile_resource_name(*key))
                return None
            self._tiles[key] = tile
        return tile

    def release(self, key: TileKey) -> None:
        self._tiles.pop(key, None)

    def clear(self) -> None:
        self._tiles.clear()

    def keys(self) -> list[TileKey]:
        return list(self._tiles)

    def __contains__(self, key: object) -> bool:
        return key in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)


class TileGrid:
    """Decides which tiles cover the canvas and draws them.

    Every frame scans the whole grid. The grid is only tens of tiles on a
    side, so no spatial index is needed.
    """

    def __init__(self, grid: TileGridSettings, transform: GeoTransform):
        self.grid = grid
        self.transform = transform

    def display_tile_size(self, zoom_level: int) -> int:
        """On-screen side of one tile at *zoom_level*."""
        return self.grid.tile_size * zoom_multiplier(zoom_level)

    def tile_rect(self, col: int, row: int, viewport: ViewportState) -> Rect:
        """Screen rectangle covered by tile ``(col, row)``."""
        ref_x, ref_y = viewport.center_screen
        px, py = self.grid.tile_origin(col, row)
        left = math.floor(
            self.transform.screen_x(viewport.center_lon, ref_x, px, viewport.zoom_level)
        )
        top = math.floor(
            self.transform.screen_y(viewport.center_lat, ref_y, py, viewport.zoom_level)
        )
        size = self.display_tile_size(viewport.zoom_level)
        return Rect(left, top, left + size, top + size)

    @staticmethod
    def source_zoom(screen_zoom: int) -> int:
        """Zoom level of the source tiles used for *screen_zoom*."""
        return 0 if screen_zoom < 0 else screen_zoom

    def visible_tiles(self, viewport: ViewportState) -> list[tuple[TileKey, Rect]]:
        """Tiles whose screen rectangle overlaps the canvas, in column-major order."""
        canvas_rect = viewport.canvas_rect
        zoom = self.source_zoom(viewport.zoom_level)
        visible = []
        for col in range(self.grid.tiles_x):
            for row in range(self.grid.tiles_y):
                rect = self.tile_rect(col, row, viewport)
                if rect.intersects(canvas_rect):
                    visible.append((TileKey(zoom, col, row), rect))
        return visible

    def composite(
        self,
        canvas: Image.Image,
        viewport: ViewportState,
        cache: TileCache,
    ) -> list[TileKey]:
        """Draw visible tiles onto *canvas* and release the rest from *cache*.

        Returns:
            Keys of the tiles actually drawn. Missing tiles are skipped.
        """
        visible = self.visible_tiles(viewport)
        visible_keys = {key for key, _rect in visible}
        for key in cache.keys():
            if key not in visible_keys:
                cache.release(key)

        size = self.display_tile_size(viewport.zoom_level)
        drawn: list[TileKey] = []
        for key, rect in visible:
            tile = cache.get(key)
            if tile is None:
                continue

            scaled = resize_image(tile, (size, size))
            position = (int(rect.left), int(rect.top))
            if scaled.mode == "RGBA":
                canvas.paste(scaled, position, scaled)
            else:
                canvas.paste(scaled, position)
            drawn.append(key)

        return drawn


def cut_tiles(
    image: Image.Image,
    output_dir: Union[str, Path],
    grid: TileGridSettings,
    zoom: int = 0,
    extension: str = "png",
) -> list[Path]:
    """Cut the cropped map area of a base raster into named tiles.

    Args:
        image: Full base raster the world file refers to.
        output_dir: Directory that receives ``map_{zoom}_{col}_{row}`` files.
        grid: Crop offset, grid shape and tile size.
        zoom: Zoom level recorded in the tile names.
        extension: Image format extension.

    Returns:
        Paths of the written tiles.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if image.width < grid.map_left + grid.map_width or image.height < grid.map_top + grid.map_height:
        logger.warning(
            "Raster %dx%d smaller than tile grid extent; edge tiles will be padded",
            image.width,
            image.height,
        )

    written = []
    for col in range(grid.tiles_x):
        for row in range(grid.tiles_y):
            left, top = grid.tile_origin(col, row)
            tile = crop_region(image, left, top, grid.tile_size)
            path = output_dir / f"{tile_resource_name(zoom, col, row)}.{extension}"
            save_image(tile, path)
            written.append(path)

    logger.info("Wrote %d tiles to %s", len(written), output_dir)
    return written
