"""Tests for the histmap CLI."""

import pytest
from click.testing import CliRunner
from PIL import Image

from histmap import __version__
from histmap import config as config_module
from histmap.cli import main
from histmap.models.map_settings import MapSettings, TileGridSettings


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the CLI away from the user's real config and output directories."""
    monkeypatch.setenv("HISTMAP_TILE_DIR", str(tmp_path / "tiles"))
    monkeypatch.setenv("HISTMAP_OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.delenv("HISTMAP_SETTINGS_FILE", raising=False)
    monkeypatch.delenv("HISTMAP_DATA_FILE", raising=False)
    monkeypatch.delenv("HISTMAP_DENSITY", raising=False)
    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def small_settings_file(tmp_path):
    path = tmp_path / "map.yaml"
    MapSettings(
        grid=TileGridSettings(tiles_x=2, tiles_y=2, map_left=0, map_top=0, tile_size=16),
    ).to_yaml(path)
    return path


class TestMainGroup:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("render", "snapshots", "make-tiles", "init-settings"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSnapshotsCommand:
    def test_lists_packaged_snapshots(self, runner):
        result = runner.invoke(main, ["snapshots"])
        assert result.exit_code == 0
        assert "0220-01-01" in result.output
        assert "0813-01-01" in result.output

    def test_bad_feed(self, runner, tmp_path):
        feed = tmp_path / "feed.yaml"
        feed.write_text("nothing: here\n", encoding="utf-8")
        result = runner.invoke(main, ["snapshots", "--data", str(feed)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_malformed_place_exits_cleanly(self, runner, tmp_path):
        feed = tmp_path / "feed.yaml"
        feed.write_text("snapshots:\n  - date: '0220'\n    places: [洛阳]\n", encoding="utf-8")
        result = runner.invoke(main, ["snapshots", "--data", str(feed)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error" in result.output


class TestRenderCommand:
    def test_renders_png(self, runner, tmp_path):
        output = tmp_path / "frame.png"
        result = runner.invoke(
            main,
            ["render", "--width", "160", "--height", "120", "--tiles", str(tmp_path / "tiles"), "-o", str(output)],
        )
        assert result.exit_code == 0, result.output
        assert output.exists()
        with Image.open(output) as image:
            assert image.size == (160, 120)
        assert "Saved" in result.output

    def test_default_output_path(self, runner, tmp_path):
        result = runner.invoke(main, ["render", "--width", "32", "--height", "32", "--snapshot", "1"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "output" / "map_0813-01-01_0.png").exists()

    def test_zoom_out_of_range(self, runner, tmp_path):
        result = runner.invoke(main, ["render", "--zoom", "1", "-o", str(tmp_path / "x.png")])
        assert result.exit_code == 2

    def test_bad_latitude(self, runner, tmp_path):
        result = runner.invoke(main, ["render", "--lat", "95", "-o", str(tmp_path / "x.png")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_uses_tiles(self, runner, tmp_path, small_settings_file):
        tile_dir = tmp_path / "tiles"
        tile_dir.mkdir()
        Image.new("RGB", (16, 16), (255, 0, 0)).save(tile_dir / "map_0_0_0.png")
        settings = MapSettings.from_yaml(small_settings_file)
        lon, lat = settings.transform.to_geo(8, 8)
        output = tmp_path / "frame.png"

        result = runner.invoke(
            main,
            [
                "render",
                "--lon", str(lon),
                "--lat", str(lat),
                "--width", "8",
                "--height", "8",
                "--tiles", str(tile_dir),
                "--settings", str(small_settings_file),
                "--data", str(_empty_feed(tmp_path)),
                "-o", str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Tiles drawn: 1" in result.output
        with Image.open(output) as image:
            assert image.convert("RGB").getpixel((4, 4)) == (255, 0, 0)


def _empty_feed(tmp_path):
    feed = tmp_path / "empty.yaml"
    feed.write_text("snapshots:\n  - date: '0220-01-01'\n", encoding="utf-8")
    return feed


class TestMakeTilesCommand:
    def test_cuts_grid(self, runner, tmp_path, small_settings_file):
        source = tmp_path / "world.png"
        Image.new("RGB", (32, 32), (0, 0, 255)).save(source)
        out_dir = tmp_path / "cut"

        result = runner.invoke(
            main,
            ["make-tiles", str(source), "-o", str(out_dir), "--settings", str(small_settings_file)],
        )

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "map_0_0_0.png",
            "map_0_0_1.png",
            "map_0_1_0.png",
            "map_0_1_1.png",
        ]

    def test_missing_image(self, runner, tmp_path):
        result = runner.invoke(main, ["make-tiles", str(tmp_path / "nope.png")])
        assert result.exit_code == 2


class TestInitSettingsCommand:
    def test_writes_defaults(self, runner, tmp_path):
        path = tmp_path / "conf" / "map.yaml"
        result = runner.invoke(main, ["init-settings", str(path)])
        assert result.exit_code == 0
        assert MapSettings.from_yaml(path) == MapSettings()

    def test_refuses_overwrite(self, runner, tmp_path):
        path = tmp_path / "map.yaml"
        path.write_text("density: 2.0\n", encoding="utf-8")
        result = runner.invoke(main, ["init-settings", str(path)])
        assert result.exit_code == 1
        assert path.read_text(encoding="utf-8") == "density: 2.0\n"

    def test_force(self, runner, tmp_path):
        path = tmp_path / "map.yaml"
        path.write_text("density: 2.0\n", encoding="utf-8")
        result = runner.invoke(main, ["init-settings", str(path), "--force"])
        assert result.exit_code == 0
        assert MapSettings.from_yaml(path).density == 1.0
