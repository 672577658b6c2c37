"""
Data models for the roll engine.

Defines the roll configuration handed to the engine, the intermediate
results of the cap/reroll/drop pipeline, and the final roll result kept in
the engine history.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dice_roller.core.constants import (
    DEFAULT_DICE_COUNT,
    DEFAULT_MODIFIER,
    DEFAULT_SIDES,
    MAX_CAP,
    MIN_CAP,
    ApplyTo,
)


class DiceFields(BaseModel):
    """
    The dice fields shared by roll configurations and lines.

    Fields are snake_case in Python and camelCase on the wire; both spellings
    are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    count: int = Field(
        default=DEFAULT_DICE_COUNT,
        description="Number of dice to roll (1-100).",
    )
    sides: int = Field(
        default=DEFAULT_SIDES,
        description="Number of faces per die (2-100).",
    )
    modifier: int = Field(
        default=DEFAULT_MODIFIER,
        description="Value added to the result, any sign.",
    )
    apply_to: ApplyTo = Field(
        default=ApplyTo.SUM,
        description="Whether the modifier is added once to the sum or to each kept die.",
    )
    drop_highest: int = Field(
        default=0,
        ge=0,
        description="Number of highest dice to drop after rerolling.",
    )
    drop_lowest: int = Field(
        default=0,
        ge=0,
        description="Number of lowest dice to drop after rerolling.",
    )
    reroll_highest: int = Field(
        default=0,
        ge=0,
        description="Number of highest dice to reroll once.",
    )
    reroll_lowest: int = Field(
        default=0,
        ge=0,
        description="Number of lowest dice to reroll once.",
    )
    min_cap: int | None = Field(
        default=None,
        ge=MIN_CAP,
        le=MAX_CAP,
        description="Lowest value a single die can show, None for no cap.",
    )
    max_cap: int | None = Field(
        default=None,
        ge=MIN_CAP,
        le=MAX_CAP,
        description="Highest value a single die can show, None for no cap.",
    )


class AdvancedOptions(BaseModel):
    """Options consumed by the cap/reroll/drop pipeline."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    sides: int = Field(
        default=DEFAULT_SIDES,
        description="Number of faces used when a die is rerolled.",
    )
    drop_highest: int = Field(default=0, ge=0)
    drop_lowest: int = Field(default=0, ge=0)
    reroll_highest: int = Field(default=0, ge=0)
    reroll_lowest: int = Field(default=0, ge=0)
    min_cap: int | None = None
    max_cap: int | None = None


class RollConfig(DiceFields):
    """An immutable description of a single roll."""

    model_config = ConfigDict(frozen=True)

    def advanced_options(self) -> AdvancedOptions:
        """
        Projects the fields consumed by the pipeline.

        Returns:
            AdvancedOptions: The pipeline options for this configuration.

        """
        return AdvancedOptions(
            sides=self.sides,
            drop_highest=self.drop_highest,
            drop_lowest=self.drop_lowest,
            reroll_highest=self.reroll_highest,
            reroll_lowest=self.reroll_lowest,
            min_cap=self.min_cap,
            max_cap=self.max_cap,
        )


class RerolledDie(BaseModel):
    """A die that was rerolled, with its value before and after."""

    model_config = ConfigDict(frozen=True)

    original: int = Field(description="Value before the reroll.")
    new: int = Field(description="Value after the reroll.")
    index: int = Field(description="Position of the die in the roll order.")


class DroppedDie(BaseModel):
    """A die removed from the pool before summation."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(description="Value of the die when it was dropped.")
    index: int = Field(description="Position of the die in the roll order.")


class PipelineResult(BaseModel):
    """Outcome of the cap/reroll/drop pipeline."""

    model_config = ConfigDict(frozen=True)

    kept_rolls: list[int] = Field(
        default_factory=list,
        description="Surviving dice, in roll order.",
    )
    dropped_rolls: list[DroppedDie] = Field(
        default_factory=list,
        description="Dropped dice, lowest rank first.",
    )
    rerolled_rolls: list[RerolledDie] = Field(
        default_factory=list,
        description="Rerolls, in the order they happened.",
    )


class Calculation(BaseModel):
    """Summation of the kept dice with the modifier applied."""

    model_config = ConfigDict(frozen=True)

    base_sum: int
    final_result: int
    modifier: int = 0
    apply_to: ApplyTo = ApplyTo.SUM
    modified_rolls: list[int] | None = Field(
        default=None,
        description="Per-die values after the modifier, only when applied to each die.",
    )


class RollResult(BaseModel):
    """A complete, immutable roll as stored in the engine history."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    config: RollConfig
    initial_rolls: list[int]
    processed_results: PipelineResult
    calculation: Calculation
    roll_expression: str
    line_id: int | None = Field(
        default=None,
        description="Identity of the line that produced this roll, if any.",
    )
    line_label: str | None = None

    @property
    def final_result(self) -> int:
        return self.calculation.final_result

    @property
    def kept_rolls(self) -> list[int]:
        return self.processed_results.kept_rolls

    @property
    def dropped_rolls(self) -> list[DroppedDie]:
        return self.processed_results.dropped_rolls


class RollStatistics(BaseModel):
    """Aggregate figures over the most recent rolls."""

    total_rolls: int
    average: float
    min: int
    max: int
    sum: int
