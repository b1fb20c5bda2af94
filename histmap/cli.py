"""Command-line interface for the historical map."""

import logging
from pathlib import Path
from typing import Optional

import click
import yaml
from PIL import Image
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import get_config
from .models.geo_transform import MAX_ZOOM_LEVEL, MIN_ZOOM_LEVEL
from .models.map_settings import MapSettings
from .models.viewport import ViewportState
from .services.render_service import MapRenderer
from .services.tile_service import DirectoryTileStore, cut_tiles
from .services.timeline_service import SpatialTemporalDatabase
from .utils.image_utils import save_image

console = Console()


def _load_settings(settings_path: Optional[str]) -> MapSettings:
    config = get_config()
    if settings_path:
        config = config.model_copy(update={"settings_file": Path(settings_path)})
    try:
        return config.load_map_settings()
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Could not load map settings: {e}")
        raise SystemExit(1)


def _load_database(data_path: Optional[str]) -> SpatialTemporalDatabase:
    path = Path(data_path) if data_path else get_config().data_file
    try:
        return SpatialTemporalDatabase.from_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Could not load snapshots from {path}: {e}")
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """Historical Map - pannable map of places and rivers through time."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@main.command()
@click.option("--lon", type=float, default=None, help="Centre longitude (default from settings)")
@click.option("--lat", type=float, default=None, help="Centre latitude (default from settings)")
@click.option(
    "--zoom",
    type=click.IntRange(MIN_ZOOM_LEVEL, MAX_ZOOM_LEVEL),
    default=0,
    help="Zoom level; negative values zoom in",
)
@click.option("--width", type=click.IntRange(min=0), default=1024, help="Frame width in pixels")
@click.option("--height", type=click.IntRange(min=0), default=768, help="Frame height in pixels")
@click.option("--snapshot", "snapshot_index", type=int, default=0, help="Snapshot index (clamped)")
@click.option("--tiles", "tile_dir", type=click.Path(file_okay=False), help="Tile directory")
@click.option("--data", "data_path", type=click.Path(exists=True, dir_okay=False), help="Snapshot YAML")
@click.option("--settings", "settings_path", type=click.Path(exists=True, dir_okay=False), help="Map settings YAML")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output PNG path")
def render(
    lon: Optional[float],
    lat: Optional[float],
    zoom: int,
    width: int,
    height: int,
    snapshot_index: int,
    tile_dir: Optional[str],
    data_path: Optional[str],
    settings_path: Optional[str],
    output: Optional[str],
):
    """Render one frame of the map to an image file."""
    config = get_config()
    settings = _load_settings(settings_path)
    try:
        viewport = ViewportState(
            center_lon=settings.initial_lon if lon is None else lon,
            center_lat=settings.initial_lat if lat is None else lat,
            zoom_level=zoom,
            width=width,
            height=height,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    database = _load_database(data_path)
    database.go_to(snapshot_index)
    snapshot = database.current_snapshot()

    tile_path = Path(tile_dir) if tile_dir else config.tile_dir
    if not tile_path.is_dir():
        console.print(f"[yellow]Tile directory {tile_path} not found; rendering without tiles[/yellow]")

    renderer = MapRenderer(settings, DirectoryTileStore(tile_path))
    image, report = renderer.render(viewport, snapshot)

    if output:
        output_path = Path(output)
    else:
        config.ensure_directories()
        output_path = config.output_dir / f"map_{snapshot.date}_{viewport.zoom_level}.png"
    save_image(image, output_path)

    title = f" ({snapshot.title})" if snapshot.title else ""
    console.print(f"[bold]Snapshot:[/bold] {database.index} - {snapshot.date}{title}")
    console.print(f"[bold]Centre:[/bold] {viewport.center_lon:.4f}E, {viewport.center_lat:.4f}N, zoom {viewport.zoom_level}")
    console.print(f"[bold]Tiles drawn:[/bold] {len(report.tiles)}")
    console.print(f"[bold]Rivers:[/bold] {report.rivers}")
    console.print(f"[bold]Places labelled:[/bold] {len(report.labels)} of {len(snapshot.places)}")
    console.print(f"[green]Saved:[/green] {output_path}")


@main.command()
@click.option("--data", "data_path", type=click.Path(exists=True, dir_okay=False), help="Snapshot YAML")
def snapshots(data_path: Optional[str]):
    """List the snapshots in the data feed."""
    database = _load_database(data_path)

    table = Table(title="Snapshots")
    table.add_column("#", justify="right")
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Places", justify="right")
    table.add_column("Rivers", justify="right")

    for index, snapshot in enumerate(database.snapshots):
        table.add_row(
            str(index),
            f"{snapshot.date} {snapshot.date.era_label}",
            snapshot.title or "",
            str(len(snapshot.places)),
            str(len(snapshot.rivers)),
        )
    console.print(table)


@main.command("make-tiles")
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(file_okay=False), help="Tile directory")
@click.option("--settings", "settings_path", type=click.Path(exists=True, dir_okay=False), help="Map settings YAML")
def make_tiles(image_path: str, output: Optional[str], settings_path: Optional[str]):
    """Cut a base raster into map_0_{col}_{row}.png tiles."""
    settings = _load_settings(settings_path)
    output_dir = Path(output) if output else get_config().tile_dir

    # Full-resolution Blue Marble rasters exceed Pillow's bomb guard
    Image.MAX_IMAGE_PIXELS = None
    with Image.open(image_path) as source:
        source.load()
        grid = settings.grid
        console.print(f"[bold]Raster:[/bold] {source.width} x {source.height} px")
        console.print(f"[bold]Tile grid:[/bold] {grid.tiles_x} x {grid.tiles_y} = {grid.tiles_x * grid.tiles_y} tiles")
        written = cut_tiles(source.convert("RGB"), output_dir, grid)

    console.print(f"[green]Wrote {len(written)} tiles to:[/green] {output_dir}")


@main.command("init-settings")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_settings(path: str, force: bool):
    """Write default map settings to a YAML file."""
    settings_path = Path(path)
    if settings_path.exists() and not force:
        console.print(f"[red]Error:[/red] {settings_path} exists (use --force to overwrite)")
        raise SystemExit(1)

    settings_path.parent.mkdir(parents=True, exist_ok=True)
    MapSettings().to_yaml(settings_path)
    console.print(f"[green]Created settings:[/green] {settings_path}")


if __name__ == "__main__":
    main()
