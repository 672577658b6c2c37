"""
Roll engine for the dice roller.

Rolls dice pools, runs the cap/reroll/drop pipeline, applies modifiers and
keeps a bounded history of the results. Every engine is an explicit object
owning its own history; the random source and the clock are injectable.
"""

import math
import random
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from dice_roller.core.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_STATISTICS_LIMIT,
    MAX_DICE_COUNT,
    MAX_HISTORY_SIZE,
    MAX_SIDES,
    MIN_DICE_COUNT,
    MIN_SIDES,
    ApplyTo,
)
from dice_roller.core.error_handling import require_int_in_range
from dice_roller.core.logging import log_debug

from .expression import build_roll_expression
from .models import (
    AdvancedOptions,
    Calculation,
    DiceFields,
    DroppedDie,
    PipelineResult,
    RerolledDie,
    RollConfig,
    RollResult,
    RollStatistics,
)


def utc_now() -> datetime:
    """Returns the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _rank(rolls: Sequence[int]) -> list[int]:
    """
    Orders die indices by ascending value, lower index first on ties.

    Args:
        rolls (Sequence[int]): The die values.

    Returns:
        list[int]: Indices of the dice, lowest value first.

    """
    return sorted(range(len(rolls)), key=lambda index: (rolls[index], index))


def cap_rolls(
    rolls: Sequence[int],
    min_cap: int | None,
    max_cap: int | None,
) -> list[int]:
    """
    Clamps every die to [min_cap, max_cap], a None bound leaving that side open.

    Args:
        rolls (Sequence[int]): The die values.
        min_cap (int | None): Lowest allowed value.
        max_cap (int | None): Highest allowed value.

    Returns:
        list[int]: The capped values, in the same order.

    """
    capped = []
    for roll in rolls:
        if min_cap is not None and roll < min_cap:
            roll = min_cap
        if max_cap is not None and roll > max_cap:
            roll = max_cap
        capped.append(roll)
    return capped


class RollEngine:
    """Stateless dice math plus a bounded, most-recent-first roll history."""

    def __init__(
        self,
        rng: Callable[[], float] = random.random,
        clock: Callable[[], datetime] = utc_now,
        max_history_size: int = MAX_HISTORY_SIZE,
    ) -> None:
        """
        Initialize the RollEngine.

        Args:
            rng (Callable[[], float]):
                Uniform random source returning floats in [0, 1).
            clock (Callable[[], datetime]):
                Timestamp source for roll results.
            max_history_size (int):
                Number of results kept in the history.

        """
        self.rng = rng
        self.clock = clock
        self.max_history_size = max_history_size
        self.history: list[RollResult] = []

    # === Rolling ===

    def roll_single_die(self, sides: int) -> int:
        """
        Rolls one die.

        Args:
            sides (int): Number of faces, between 2 and 100.

        Returns:
            int: A uniform value in [1, sides].

        Raises:
            InvalidDomainError: If sides is outside [2, 100].

        """
        require_int_in_range(sides, "sides", MIN_SIDES, MAX_SIDES)
        return math.floor(self.rng() * sides) + 1

    def roll_multiple_dice(self, count: int, sides: int) -> list[int]:
        """
        Rolls a pool of dice.

        Args:
            count (int): Number of dice, between 1 and 100.
            sides (int): Number of faces per die, between 2 and 100.

        Returns:
            list[int]: The values in roll order.

        Raises:
            InvalidDomainError: If count or sides is outside its domain.

        """
        require_int_in_range(count, "count", MIN_DICE_COUNT, MAX_DICE_COUNT)
        return [self.roll_single_die(sides) for _ in range(count)]

    # === Pipeline ===

    def apply_advanced_options(
        self,
        rolls: Sequence[int],
        options: AdvancedOptions | Mapping[str, Any] | None = None,
    ) -> PipelineResult:
        """
        Runs the cap, reroll and drop steps, strictly in that order.

        Args:
            rolls (Sequence[int]): The freshly rolled dice.
            options (AdvancedOptions | Mapping[str, Any] | None): The pipeline
                options, as a model or a snake_case/camelCase mapping.

        Returns:
            PipelineResult: Kept, dropped and rerolled dice.

        """
        if options is None:
            options = AdvancedOptions()
        elif not isinstance(options, AdvancedOptions):
            options = AdvancedOptions.model_validate(options)
        processed = cap_rolls(rolls, options.min_cap, options.max_cap)
        rerolled = self._reroll(processed, options)
        kept, dropped = self._drop(processed, options)
        return PipelineResult(
            kept_rolls=kept,
            dropped_rolls=dropped,
            rerolled_rolls=rerolled,
        )

    def _reroll(self, processed: list[int], options: AdvancedOptions) -> list[RerolledDie]:
        """Rerolls the lowest then the highest ranked dice in place."""
        rerolled: list[RerolledDie] = []
        if options.reroll_lowest <= 0 and options.reroll_highest <= 0:
            return rerolled

        # Both passes share the ranking of the capped values.
        ranked = _rank(processed)
        low_count = min(options.reroll_lowest, len(ranked))
        high_count = min(options.reroll_highest, len(ranked))
        selected = ranked[:low_count] + ranked[len(ranked) - high_count :]

        for index in selected:
            new_roll = self.roll_single_die(options.sides)
            rerolled.append(
                RerolledDie(original=processed[index], new=new_roll, index=index)
            )
            processed[index] = new_roll
        return rerolled

    @staticmethod
    def _drop(
        processed: list[int], options: AdvancedOptions
    ) -> tuple[list[int], list[DroppedDie]]:
        """Splits the pool into kept and dropped dice."""
        pool_size = len(processed)
        max_drops = max(0, pool_size - 1)
        if max_drops == 0 or (options.drop_lowest <= 0 and options.drop_highest <= 0):
            return list(processed), []

        ranked = _rank(processed)
        low_count = min(options.drop_lowest, max_drops)
        high_count = min(options.drop_highest, max_drops)
        candidates = ranked[:low_count] + ranked[pool_size - high_count :]

        to_drop: list[int] = []
        for index in candidates:
            if len(to_drop) >= max_drops:
                break
            if index not in to_drop:
                to_drop.append(index)

        dropped = [DroppedDie(value=processed[index], index=index) for index in to_drop]
        kept = [roll for index, roll in enumerate(processed) if index not in to_drop]
        return kept, dropped

    # === Calculation ===

    def calculate_result(
        self,
        kept_rolls: Sequence[int],
        modifier: int = 0,
        apply_to: ApplyTo = ApplyTo.SUM,
    ) -> Calculation:
        """
        Sums the kept dice and applies the modifier.

        Applied to each die, every modified die is floored at 1. Applied to
        the sum, the total is floored at one point per kept die.

        Args:
            kept_rolls (Sequence[int]): The dice surviving the pipeline.
            modifier (int): Value to add.
            apply_to (ApplyTo): Where to add the modifier.

        Returns:
            Calculation: The base sum, final result and modifier details.

        """
        base_sum = sum(kept_rolls)
        if modifier == 0:
            return Calculation(base_sum=base_sum, final_result=base_sum)

        apply_to = ApplyTo.from_value(apply_to)
        if apply_to is ApplyTo.EACH:
            modified_rolls = [max(1, roll + modifier) for roll in kept_rolls]
            return Calculation(
                base_sum=base_sum,
                final_result=sum(modified_rolls),
                modifier=modifier,
                apply_to=apply_to,
                modified_rolls=modified_rolls,
            )

        return Calculation(
            base_sum=base_sum,
            final_result=max(len(kept_rolls), base_sum + modifier),
            modifier=modifier,
            apply_to=apply_to,
        )

    # === Orchestration ===

    def execute_roll(self, config: RollConfig | Mapping[str, Any]) -> RollResult:
        """
        Rolls, runs the pipeline, sums, and records the result in the history.

        Args:
            config (RollConfig | Mapping[str, Any]):
                The roll configuration, or a mapping of its fields.

        Returns:
            RollResult: The complete roll.

        Raises:
            InvalidDomainError: If count or sides is outside its domain.
            pydantic.ValidationError: If a mapping has fields of the wrong type.

        """
        if not isinstance(config, RollConfig):
            config = RollConfig.model_validate(config)

        initial_rolls = self.roll_multiple_dice(config.count, config.sides)
        processed = self.apply_advanced_options(
            initial_rolls, config.advanced_options()
        )
        calculation = self.calculate_result(
            processed.kept_rolls, config.modifier, config.apply_to
        )

        result = RollResult(
            id=self.generate_roll_id(),
            timestamp=self.clock(),
            config=config,
            initial_rolls=initial_rolls,
            processed_results=processed,
            calculation=calculation,
            roll_expression=self.build_roll_expression(config),
        )
        log_debug(
            f"Rolled {result.roll_expression} → {calculation.final_result}",
            {"initial": initial_rolls, "kept": processed.kept_rolls},
        )
        self.add_to_history(result)
        return result

    def generate_roll_id(self) -> str:
        """
        Generates an identifier for a roll.

        Returns:
            str: "roll_<epoch millis>_<random hex>".

        """
        millis = int(self.clock().timestamp() * 1000)
        return f"roll_{millis}_{uuid.uuid4().hex}"

    def build_roll_expression(self, config: DiceFields | Mapping[str, Any]) -> str:
        """Renders the canonical expression for a configuration."""
        return build_roll_expression(config)

    # === History ===

    def add_to_history(self, result: RollResult) -> None:
        """Adds a result at the front of the history, evicting the oldest on overflow."""
        self.history.insert(0, result)
        del self.history[self.max_history_size :]

    def get_history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[RollResult]:
        """
        Returns the most recent results, newest first.

        Args:
            limit (int): Maximum number of results.

        Returns:
            list[RollResult]: Up to limit results.

        """
        return self.history[: max(0, limit)]

    def clear_history(self) -> None:
        """Empties the history."""
        self.history = []

    def get_statistics(
        self, limit: int = DEFAULT_STATISTICS_LIMIT
    ) -> RollStatistics | None:
        """
        Computes aggregate figures over the most recent results.

        Args:
            limit (int): Number of recent results to include.

        Returns:
            RollStatistics | None: The statistics, None if there is no history.

        """
        recent = self.get_history(limit)
        if not recent:
            return None

        results = [roll.final_result for roll in recent]
        total = sum(results)
        return RollStatistics(
            total_rolls=len(results),
            average=round(total / len(results), 2),
            min=min(results),
            max=max(results),
            sum=total,
        )
