"""
Canonical expression rendering for roll configurations.
"""

from collections.abc import Mapping
from typing import Any

from dice_roller.core.constants import ApplyTo

from .models import DiceFields, RollConfig


def build_roll_expression(config: DiceFields | Mapping[str, Any]) -> str:
    """
    Renders a configuration as a short dice expression, e.g. "4d6dl1+2".

    Tokens always appear in the same order: dice, drop highest, drop lowest,
    reroll highest, reroll lowest, min cap, max cap, modifier. Zero counts,
    missing caps and a zero modifier are left out.

    Args:
        config (DiceFields | Mapping[str, Any]): A roll configuration, a line,
            or a mapping of roll fields.

    Returns:
        str: The rendered expression.

    """
    if not isinstance(config, DiceFields):
        config = RollConfig.model_validate(config)
    expression = f"{config.count}d{config.sides}"
    if config.drop_highest > 0:
        expression += f"dh{config.drop_highest}"
    if config.drop_lowest > 0:
        expression += f"dl{config.drop_lowest}"
    if config.reroll_highest > 0:
        expression += f"rh{config.reroll_highest}"
    if config.reroll_lowest > 0:
        expression += f"rl{config.reroll_lowest}"
    if config.min_cap is not None:
        expression += f"min{config.min_cap}"
    if config.max_cap is not None:
        expression += f"max{config.max_cap}"
    if config.modifier != 0:
        expression += f"{config.modifier:+d}"
        if config.apply_to is ApplyTo.EACH:
            expression += "(each)"
    return expression
