"""
Dice line roller.

A roll engine that rolls dice pools through a cap/reroll/drop pipeline and
sums them with a configurable modifier, and a line manager that keeps an
ordered collection of named roll configurations.
"""

from .core import ApplyTo, DiceRollerError, InvalidDomainError, setup_logging
from .engine import RollConfig, RollEngine, RollResult, RollStatistics
from .lines import Line, LineManager, LineSummary

__all__ = [
    "ApplyTo",
    "DiceRollerError",
    "InvalidDomainError",
    "setup_logging",
    "RollConfig",
    "RollEngine",
    "RollResult",
    "RollStatistics",
    "Line",
    "LineManager",
    "LineSummary",
]

__version__ = "1.0.0"
