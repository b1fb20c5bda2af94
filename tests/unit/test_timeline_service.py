"""Tests for SpatialTemporalDatabase navigation and data loading."""

import pytest
import yaml

from histmap.models.place import PlaceKind
from histmap.models.snapshot import HistoricalDate
from histmap.services.timeline_service import (
    DEFAULT_DATA_FILE,
    SpatialTemporalDatabase,
    load_snapshots,
)


@pytest.fixture
def database(snapshot_records):
    return SpatialTemporalDatabase.from_records(snapshot_records)


class TestDatabaseConstruction:
    def test_sorted_by_date(self, database):
        dates = [str(s.date) for s in database.snapshots]
        assert dates == ["-0221-01-01", "0220-01-01", "0813-01-01"]

    def test_starts_at_first(self, database):
        assert database.index == 0
        assert database.current_date() == HistoricalDate(-221)
        assert database.current_snapshot().title == "Qin"

    def test_len(self, database):
        assert len(database) == 3

    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="at least one"):
            SpatialTemporalDatabase([])


class TestNavigation:
    def test_previous_at_start_is_noop(self, database):
        assert database.previous() == 0
        assert database.index == 0

    def test_next_at_end_is_noop(self, database):
        database.go_to(2)
        assert database.next() == 2
        assert database.current_snapshot().title == "Tang"

    def test_previous_then_next_returns(self, database):
        database.go_to(1)
        before = database.current_date()
        database.previous()
        assert database.index == 0
        database.next()
        assert database.index == 1
        assert database.current_date() == before

    def test_walk_forward(self, database):
        titles = [database.current_snapshot().title]
        for _ in range(4):
            database.next()
            titles.append(database.current_snapshot().title)
        assert titles == ["Qin", "Three Kingdoms", "Tang", "Tang", "Tang"]

    @pytest.mark.parametrize("target,expected", [(-5, 0), (1, 1), (99, 2)])
    def test_go_to_clamped(self, database, target, expected):
        assert database.go_to(target) == expected
        assert database.index == expected

    def test_index_always_valid(self, database):
        for step in [database.next, database.next, database.next, database.previous] * 3:
            step()
            assert 0 <= database.index < len(database)

    def test_single_snapshot(self, snapshot_records):
        database = SpatialTemporalDatabase.from_records(snapshot_records[:1])
        assert database.next() == 0
        assert database.previous() == 0


class TestLoadSnapshots:
    def test_load_yaml(self, tmp_path, snapshot_records):
        path = tmp_path / "feed.yaml"
        path.write_text(yaml.safe_dump({"snapshots": snapshot_records}, allow_unicode=True), encoding="utf-8")
        snapshots = load_snapshots(path)
        assert [s.title for s in snapshots] == ["Tang", "Qin", "Three Kingdoms"]

    def test_missing_top_level_list(self, tmp_path):
        path = tmp_path / "feed.yaml"
        path.write_text("foo: 1\n", encoding="utf-8")
        with pytest.raises(ValueError, match="snapshots"):
            load_snapshots(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshots(tmp_path / "nope.yaml")

    def test_invalid_place(self, tmp_path):
        path = tmp_path / "feed.yaml"
        path.write_text(
            "snapshots:\n  - date: '0220'\n    places:\n      - {name: A, lat: 200, lon: 0}\n",
            encoding="utf-8",
        )
        with pytest.raises(ValueError):
            load_snapshots(path)

    def test_unquoted_date(self, tmp_path):
        path = tmp_path / "feed.yaml"
        path.write_text("snapshots:\n  - date: 1200-06-01\n    places: []\n", encoding="utf-8")
        [snapshot] = load_snapshots(path)
        assert snapshot.date == HistoricalDate(1200, 6, 1)

    @pytest.mark.parametrize(
        "places",
        ["places:\n", "places: [洛阳]\n"],
    )
    def test_malformed_places(self, tmp_path, places):
        path = tmp_path / "feed.yaml"
        path.write_text(f"snapshots:\n  - date: '0220'\n    {places}", encoding="utf-8")
        with pytest.raises(ValueError):
            load_snapshots(path)

    def test_entry_must_be_mapping(self, tmp_path):
        path = tmp_path / "feed.yaml"
        path.write_text("snapshots:\n  - just a string\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_snapshots(path)


class TestPackagedData:
    """The bundled feed loads and carries both periods."""

    @pytest.fixture
    def packaged(self):
        return SpatialTemporalDatabase.from_yaml()

    def test_default_path_exists(self):
        assert DEFAULT_DATA_FILE.is_file()

    def test_two_periods(self, packaged):
        assert len(packaged) == 2
        assert [s.date.year for s in packaged.snapshots] == [220, 813]

    def test_three_kingdoms(self, packaged):
        snapshot = packaged.snapshots[0]
        assert snapshot.title == "三國"
        assert len(snapshot.places) == 117
        first = snapshot.place_list[0]
        assert first.name == "洛阳"
        assert first.kind == PlaceKind.CAPITAL
        assert {"成都", "建业"} <= set(snapshot.places)
        assert snapshot.places["成都"].kind == PlaceKind.CAPITAL

    def test_tang(self, packaged):
        snapshot = packaged.snapshots[1]
        assert len(snapshot.places) == 102
        assert len(snapshot.rivers) == 4

    def test_rivers_valid(self, packaged):
        for snapshot in packaged.snapshots:
            for river in snapshot.rivers:
                assert 1 <= river.width <= 10
                assert len(river.points) >= 2
