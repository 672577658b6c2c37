"""
Snapshot serialization for line collections.

A snapshot is the only structure the dice roller exchanges with the outside
world:

    {"version": "1.0", "timestamp": "<ISO-8601>", "lines": [<line fields>]}

Line fields use the camelCase wire names, so snapshots stay readable by
clients that speak that format.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from dice_roller.core.constants import SNAPSHOT_VERSION

from .line import Line


class SnapshotError(ValueError):
    """Raised when a snapshot does not have the expected shape."""


class LineSerializer:
    """Centralized serialization for lines and line snapshots."""

    @staticmethod
    def serialize(line: Line) -> dict[str, Any]:
        """
        Serialize a line to its wire dictionary.

        Args:
            line (Line): The line to serialize.

        Returns:
            dict[str, Any]: The line fields, keyed by their camelCase names.

        """
        return line.model_dump(mode="json", by_alias=True)

    @staticmethod
    def build_snapshot(lines: Iterable[Line], timestamp: datetime) -> dict[str, Any]:
        """
        Build a versioned snapshot of a line collection.

        Args:
            lines (Iterable[Line]): The lines, in order.
            timestamp (datetime): The export time.

        Returns:
            dict[str, Any]: The snapshot.

        """
        return {
            "version": SNAPSHOT_VERSION,
            "timestamp": timestamp.isoformat(),
            "lines": [LineSerializer.serialize(line) for line in lines],
        }

    @staticmethod
    def snapshot_lines(snapshot: Any) -> list[Mapping[str, Any]]:
        """
        Extract the line entries from a snapshot, checking its shape.

        Args:
            snapshot (Any): The snapshot to read.

        Returns:
            list[Mapping[str, Any]]: The raw line entries.

        Raises:
            SnapshotError: If the snapshot is not a mapping, has no "lines"
                list, or contains an entry that is not a mapping.

        """
        if not isinstance(snapshot, Mapping):
            raise SnapshotError(
                f"Snapshot must be a mapping, got {type(snapshot).__name__}"
            )
        lines = snapshot.get("lines")
        if not isinstance(lines, list):
            raise SnapshotError("Snapshot 'lines' must be a list")
        for position, entry in enumerate(lines):
            if not isinstance(entry, Mapping):
                raise SnapshotError(
                    f"Snapshot line {position} must be a mapping, "
                    f"got {type(entry).__name__}"
                )
        return lines
