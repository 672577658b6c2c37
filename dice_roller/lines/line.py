"""
Line models for the line manager.

A line is a named, persistent roll configuration plus the UI-facing state
that travels with it in exported snapshots.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dice_roller.core.constants import ApplyTo
from dice_roller.engine.models import DiceFields, RollConfig


class Line(DiceFields):
    """A roll configuration tracked by the line manager."""

    id: int = Field(
        description="Manager-assigned identity, unique within one manager.",
    )
    label: str = Field(
        default="",
        description="Display label, defaults to 'Line {id}'.",
    )
    show_advanced: bool = Field(
        default=False,
        description="Whether the advanced options panel is expanded.",
    )

    def to_roll_config(self) -> RollConfig:
        """
        Builds the roll configuration for this line.

        Returns:
            RollConfig: The dice fields of the line.

        """
        return RollConfig(
            count=self.count,
            sides=self.sides,
            modifier=self.modifier,
            apply_to=self.apply_to,
            drop_highest=self.drop_highest,
            drop_lowest=self.drop_lowest,
            reroll_highest=self.reroll_highest,
            reroll_lowest=self.reroll_lowest,
            min_cap=self.min_cap,
            max_cap=self.max_cap,
        )

    def has_advanced_options(self) -> bool:
        """Check whether any drop, reroll or cap option is in effect."""
        return (
            self.drop_highest > 0
            or self.drop_lowest > 0
            or self.reroll_highest > 0
            or self.reroll_lowest > 0
            or self.min_cap is not None
            or self.max_cap is not None
        )


class LineConfigView(BaseModel):
    """Condensed view of a line configuration."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    count: int
    sides: int
    modifier: int
    apply_to: ApplyTo
    has_advanced: bool


class LineSummary(BaseModel):
    """Read-only projection of a line, built without rolling."""

    id: int
    label: str
    expression: str
    config: LineConfigView
