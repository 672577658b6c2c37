"""
Tests for exporting and importing line snapshots.
"""

import pytest

from dice_roller.core.constants import SNAPSHOT_VERSION, ApplyTo
from dice_roller.lines.line_manager import LineManager
from dice_roller.lines.line_serializer import LineSerializer, SnapshotError


@pytest.fixture
def manager(engine) -> LineManager:
    manager = LineManager(engine=engine)
    manager.update_line(1, {"count": 4, "dropLowest": 1, "modifier": 2})
    manager.add_line(
        {"count": 3, "sides": 8, "modifier": 1, "applyTo": "each", "label": "Fireball"}
    )
    manager.add_line({"count": 2, "sides": 20, "minCap": 5, "showAdvanced": True})
    return manager


def test_export_configuration(manager, clock):
    snapshot = manager.export_configuration()

    assert snapshot["version"] == SNAPSHOT_VERSION
    assert snapshot["timestamp"] == clock().isoformat()
    assert [line["id"] for line in snapshot["lines"]] == [1, 2, 3]

    fireball = snapshot["lines"][1]
    assert fireball["label"] == "Fireball"
    assert fireball["applyTo"] == "each"
    assert fireball["dropLowest"] == 0
    assert fireball["minCap"] is None
    assert snapshot["lines"][2]["showAdvanced"] is True


def test_export_copies_lines(manager):
    snapshot = manager.export_configuration()
    snapshot["lines"][0]["count"] = 99
    assert manager.get_line(1).count == 4


def test_round_trip_renumbers_identities(manager, engine):
    manager.remove_line(1)
    snapshot = manager.export_configuration()

    restored = LineManager(engine=engine)
    assert restored.import_configuration(snapshot) is True

    lines = restored.get_all_lines()
    assert [line.id for line in lines] == [1, 2]
    assert [line.label for line in lines] == ["Fireball", "Line 3"]
    assert lines[0].apply_to is ApplyTo.EACH
    assert lines[1].min_cap == 5
    assert [s.expression for s in restored.get_lines_summary()] == [
        "3d8+1(each)",
        "2d20min5",
    ]
    assert restored.add_line().id == 3


def test_import_replaces_existing_lines(manager):
    assert manager.import_configuration({"lines": [{"label": "Only", "sides": 12}]})
    lines = manager.get_all_lines()
    assert [(line.id, line.label, line.sides) for line in lines] == [(1, "Only", 12)]


def test_import_revalidates_entries(manager):
    snapshot = {
        "version": "1.0",
        "lines": [{"count": 500, "sides": "x", "applyTo": "weird", "maxCap": 0}],
    }
    assert manager.import_configuration(snapshot) is True
    line = manager.get_line(1)
    assert line.count == 100
    assert line.sides == 6
    assert line.apply_to is ApplyTo.SUM
    assert line.max_cap == 1


def test_import_empty_lines_leaves_one_default_line(manager):
    assert manager.import_configuration({"lines": []}) is True
    lines = manager.get_all_lines()
    assert [(line.id, line.label) for line in lines] == [(1, "Line 1")]


@pytest.mark.parametrize(
    "snapshot",
    [None, "lines", {}, {"lines": "abc"}, {"lines": {"a": 1}}, {"lines": [{"count": 2}, 3]}],
)
def test_malformed_import_resets(manager, mocker, snapshot):
    mock_error = mocker.patch("dice_roller.lines.line_manager.log_error")

    assert manager.import_configuration(snapshot) is False

    lines = manager.get_all_lines()
    assert [(line.id, line.label, line.count) for line in lines] == [(1, "Line 1", 1)]
    mock_error.assert_called_once()


def test_snapshot_lines_rejects_bad_shapes():
    with pytest.raises(SnapshotError):
        LineSerializer.snapshot_lines([])
    with pytest.raises(SnapshotError):
        LineSerializer.snapshot_lines({"lines": None})
    assert LineSerializer.snapshot_lines({"lines": [{"count": 1}]}) == [{"count": 1}]
