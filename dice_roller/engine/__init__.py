"""
Roll engine: dice rolling, the cap/reroll/drop pipeline, and roll history.
"""

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
from .roll_engine import RollEngine, cap_rolls, utc_now

__all__ = [
    "build_roll_expression",
    "AdvancedOptions",
    "Calculation",
    "DiceFields",
    "DroppedDie",
    "PipelineResult",
    "RerolledDie",
    "RollConfig",
    "RollResult",
    "RollStatistics",
    "RollEngine",
    "cap_rolls",
    "utc_now",
]
