"""
Line manager for the dice roller.

Owns an ordered collection of independently configured roll lines. Lines can
be added, removed, duplicated, updated, reordered, rolled one at a time or
all together, and exported to or restored from a versioned snapshot.

Unknown ids, attempts to remove the last line and malformed snapshots are
operational failures: they are reported through False/None return values,
never through exceptions.
"""

from collections.abc import Callable, Iterator, Mapping
from datetime import datetime
from typing import Any

from catchery import log_error, log_warning

from dice_roller.core.logging import log_debug
from dice_roller.core.validation import validate_fields, validate_line_fields
from dice_roller.engine.models import RollResult
from dice_roller.engine.roll_engine import RollEngine

from .line import Line, LineConfigView, LineSummary
from .line_serializer import LineSerializer, SnapshotError


class LineManager:
    """Ordered collection of named roll lines backed by a roll engine."""

    def __init__(
        self,
        engine: RollEngine | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the LineManager with a single default line.

        Args:
            engine (RollEngine | None):
                The engine used to roll lines, a new one when None.
            clock (Callable[[], datetime] | None):
                Timestamp source for exports, the engine clock when None.

        """
        self.engine: RollEngine = engine or RollEngine()
        self.clock: Callable[[], datetime] = clock or self.engine.clock
        self._lines: list[Line] = []
        self._next_line_id: int = 1
        self.add_line()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(list(self._lines))

    # === Line Creation ===

    @staticmethod
    def _build_line(line_id: int, config: Mapping[str, Any] | None) -> Line:
        """Validates a configuration and builds a line with the given identity."""
        fields = validate_line_fields(config)
        if not fields["label"]:
            fields["label"] = f"Line {line_id}"
        return Line(id=line_id, **fields)

    def _generate_line_id(self) -> int:
        line_id = self._next_line_id
        self._next_line_id += 1
        return line_id

    def validate_line_config(self, config: Mapping[str, Any] | None) -> dict[str, Any]:
        """
        Validates a line configuration without creating a line.

        Args:
            config (Mapping[str, Any] | None): Line fields, snake_case or camelCase.

        Returns:
            dict[str, Any]: Every line field, defaults merged and values clamped.

        """
        return validate_line_fields(config)

    def add_line(self, config: Mapping[str, Any] | None = None) -> Line:
        """
        Adds a line at the end of the collection.

        Args:
            config (Mapping[str, Any] | None):
                Line fields merged over the defaults. Any "id" is ignored.

        Returns:
            Line: The created line.

        """
        line = self._build_line(self._generate_line_id(), config)
        self._lines.append(line)
        log_debug(f"Added line {line.id}", {"label": line.label})
        return line

    def remove_line(self, line_id: int) -> bool:
        """
        Removes a line. The last remaining line can never be removed.

        Args:
            line_id (int): Identity of the line to remove.

        Returns:
            bool: True if the line was removed.

        """
        if len(self._lines) <= 1:
            return False
        index = self._index_of(line_id)
        if index is None:
            return False
        del self._lines[index]
        return True

    def duplicate_line(self, line_id: int) -> Line | None:
        """
        Appends a copy of a line with a fresh identity.

        Args:
            line_id (int): Identity of the line to copy.

        Returns:
            Line | None: The copy, labelled "<label> (Copy)", or None if unknown.

        """
        original = self.get_line(line_id)
        if original is None:
            return None
        fields = original.model_dump(exclude={"id"})
        fields["label"] = f"{original.label} (Copy)"
        return self.add_line(fields)

    # === Lookup ===

    def _index_of(self, line_id: int) -> int | None:
        for index, line in enumerate(self._lines):
            if line.id == line_id:
                return index
        return None

    def get_line(self, line_id: int) -> Line | None:
        """Returns the line with the given identity, or None."""
        index = self._index_of(line_id)
        return None if index is None else self._lines[index]

    def get_all_lines(self) -> list[Line]:
        """Returns the lines in their current order."""
        return list(self._lines)

    def get_line_count(self) -> int:
        """Returns the number of lines."""
        return len(self._lines)

    # === Updates ===

    def update_line(self, line_id: int, updates: Mapping[str, Any]) -> bool:
        """
        Validates the supplied fields and assigns them to a line in place.

        Args:
            line_id (int): Identity of the line to update.
            updates (Mapping[str, Any]): Field updates, snake_case or camelCase.

        Returns:
            bool: False if the line is unknown or updates is not a mapping.

        """
        line = self.get_line(line_id)
        if line is None:
            return False
        try:
            fields = validate_fields(updates)
        except TypeError as e:
            log_warning(
                f"Ignoring update for line {line_id}: {e}",
                {"line_id": line_id, "updates": updates},
            )
            return False
        if "label" in fields and not fields["label"]:
            fields["label"] = f"Line {line.id}"
        for name, value in fields.items():
            setattr(line, name, value)
        return True

    def move_line(self, line_id: int, new_index: int) -> bool:
        """
        Moves a line to a new position.

        Args:
            line_id (int): Identity of the line to move.
            new_index (int): Target position, in [0, line count - 1].

        Returns:
            bool: False if the line is unknown or the index is out of range.

        """
        current_index = self._index_of(line_id)
        if current_index is None or not 0 <= new_index < len(self._lines):
            return False
        line = self._lines.pop(current_index)
        self._lines.insert(new_index, line)
        return True

    def reset_lines(self) -> None:
        """Discards every line, restarts identities at 1 and adds a default line."""
        self._lines = []
        self._next_line_id = 1
        self.add_line()

    # === Rolling ===

    def roll_line(self, line_id: int) -> RollResult | None:
        """
        Rolls a line through the engine.

        Args:
            line_id (int): Identity of the line to roll.

        Returns:
            RollResult | None: The result stamped with the line identity and
            label, or None if the line is unknown.

        """
        line = self.get_line(line_id)
        if line is None:
            return None
        result = self.engine.execute_roll(line.to_roll_config())
        return result.model_copy(update={"line_id": line.id, "line_label": line.label})

    def roll_all_lines(self) -> list[RollResult]:
        """Rolls every line, in line order."""
        results = [self.roll_line(line.id) for line in list(self._lines)]
        return [result for result in results if result is not None]

    def get_lines_summary(self) -> list[LineSummary]:
        """Projects every line to its label, expression and condensed config."""
        return [
            LineSummary(
                id=line.id,
                label=line.label,
                expression=self.engine.build_roll_expression(line),
                config=LineConfigView(
                    count=line.count,
                    sides=line.sides,
                    modifier=line.modifier,
                    apply_to=line.apply_to,
                    has_advanced=line.has_advanced_options(),
                ),
            )
            for line in self._lines
        ]

    # === Import / Export ===

    def export_configuration(self) -> dict[str, Any]:
        """
        Exports every line as a versioned snapshot.

        Returns:
            dict[str, Any]: {"version", "timestamp", "lines"}.

        """
        return LineSerializer.build_snapshot(self._lines, self.clock())

    def import_configuration(self, snapshot: Any) -> bool:
        """
        Replaces the whole collection with the lines of a snapshot.

        Every entry goes through the same validation as add_line and gets a
        new identity, counting from 1. On any failure the collection is reset
        to a single default line.

        Args:
            snapshot (Any): A snapshot as produced by export_configuration.

        Returns:
            bool: True if the snapshot was imported.

        """
        try:
            entries = LineSerializer.snapshot_lines(snapshot)
            imported = [
                self._build_line(line_id, entry)
                for line_id, entry in enumerate(entries, start=1)
            ]
        except (SnapshotError, TypeError, ValueError) as e:
            log_error(
                f"Error importing configuration: {e}",
                {"error": str(e), "context": "line_import"},
            )
            self.reset_lines()
            return False

        self._lines = imported
        self._next_line_id = len(imported) + 1
        if not self._lines:
            self.add_line()
        return True
