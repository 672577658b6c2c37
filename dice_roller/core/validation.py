"""
Field validation and clamping for user-supplied line configuration.

Every value coming from a caller (form fields, imported snapshots, partial
updates) goes through the coercers in this module before it is stored on a
line. Coercion never raises: values that cannot be parsed fall back to a
default, out-of-range values are clamped, and every correction is reported
as a warning.
"""

import math
import re
from collections.abc import Callable, Mapping
from typing import Any

from catchery import log_warning

from .constants import (
    DEFAULT_DICE_COUNT,
    DEFAULT_MODIFIER,
    DEFAULT_SIDES,
    MAX_CAP,
    MAX_DICE_COUNT,
    MAX_SIDES,
    MIN_CAP,
    MIN_DICE_COUNT,
    MIN_SIDES,
    ApplyTo,
)

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")
_MAX_DIGITS = 18

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})

# Wire (camelCase) names accepted alongside the Python field names.
FIELD_ALIASES: dict[str, str] = {
    "applyTo": "apply_to",
    "dropHighest": "drop_highest",
    "dropLowest": "drop_lowest",
    "rerollHighest": "reroll_highest",
    "rerollLowest": "reroll_lowest",
    "minCap": "min_cap",
    "maxCap": "max_cap",
    "showAdvanced": "show_advanced",
}

ROLL_FIELDS = (
    "count",
    "sides",
    "modifier",
    "apply_to",
    "drop_highest",
    "drop_lowest",
    "reroll_highest",
    "reroll_lowest",
    "min_cap",
    "max_cap",
)

LINE_FIELDS = ROLL_FIELDS + ("label", "show_advanced")

DEFAULT_LINE_FIELDS: dict[str, Any] = {
    "count": DEFAULT_DICE_COUNT,
    "sides": DEFAULT_SIDES,
    "modifier": DEFAULT_MODIFIER,
    "apply_to": ApplyTo.SUM,
    "drop_highest": 0,
    "drop_lowest": 0,
    "reroll_highest": 0,
    "reroll_lowest": 0,
    "min_cap": None,
    "max_cap": None,
    "show_advanced": False,
    "label": "",
}


def parse_int(value: Any) -> int | None:
    """
    Parses the leading integer of a value.

    Strings are read up to the first non-digit ("12abc" gives 12), floats
    are truncated toward zero. Booleans, None and anything without a leading
    integer are parse failures.

    Args:
        value (Any): The raw value.

    Returns:
        int | None: The parsed integer, or None when parsing fails.

    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        limit = 10**_MAX_DIGITS
        return max(-limit, min(limit, value))
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return None
        sign, digits = match.group(1), match.group(2).lstrip("0") or "0"
        # Overlong digit runs saturate; callers clamp to the field bounds.
        parsed = int(digits) if len(digits) <= _MAX_DIGITS else 10**_MAX_DIGITS
        return -parsed if sign == "-" else parsed
    return None


def _clamp(value: int, min_val: int | None, max_val: int | None) -> int:
    if min_val is not None and value < min_val:
        return min_val
    if max_val is not None and value > max_val:
        return max_val
    return value


def coerce_int(
    value: Any,
    param_name: str,
    default: int,
    min_val: int | None = None,
    max_val: int | None = None,
) -> int:
    """
    Coerces a value into an integer, clamping it to an optional range.

    Args:
        value (Any): The raw value.
        param_name (str): Field name used in warnings.
        default (int): Value used when parsing fails.
        min_val (int | None): Inclusive lower bound, None for unbounded.
        max_val (int | None): Inclusive upper bound, None for unbounded.

    Returns:
        int: The coerced integer.

    """
    parsed = parse_int(value)
    if parsed is None:
        log_warning(
            f"{param_name} is not an integer, using default {default}",
            {"param_name": param_name, "value": value, "corrected_to": default},
        )
        return default
    if isinstance(value, int):
        value = parsed
    clamped = _clamp(parsed, min_val, max_val)
    if clamped != parsed:
        log_warning(
            f"{param_name} corrected from {value!r} to {clamped}",
            {
                "param_name": param_name,
                "value": value,
                "min_val": min_val,
                "max_val": max_val,
                "corrected_to": clamped,
            },
        )
    return clamped


def coerce_optional_cap(value: Any, param_name: str) -> int | None:
    """
    Coerces a per-die cap, None when the value cannot be parsed.

    Args:
        value (Any): The raw value.
        param_name (str): Field name used in warnings.

    Returns:
        int | None: The cap clamped to [MIN_CAP, MAX_CAP], or None.

    """
    if value is None:
        return None
    parsed = parse_int(value)
    if parsed is None:
        if value != "":
            log_warning(
                f"{param_name} is not an integer, clearing the cap",
                {"param_name": param_name, "value": value},
            )
        return None
    return coerce_int(parsed, param_name, MIN_CAP, MIN_CAP, MAX_CAP)


def coerce_apply_to(value: Any) -> ApplyTo:
    """
    Coerces a value into an ApplyTo member, SUM for anything unrecognised.

    Args:
        value (Any): An ApplyTo member or one of "sum" / "each".

    Returns:
        ApplyTo: The coerced member.

    """
    apply_to = ApplyTo.from_value(value)
    if apply_to is ApplyTo.SUM and value not in (ApplyTo.SUM, ApplyTo.SUM.value):
        log_warning(
            f"applyTo must be 'sum' or 'each', got {value!r}, using 'sum'",
            {"param_name": "apply_to", "value": value},
        )
    return apply_to


def _coerce_label(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def coerce_bool(value: Any, param_name: str) -> bool:
    """
    Coerces a flag, reading "true"/"false"/"1"/"0" style strings by meaning.

    Args:
        value (Any): The raw value.
        param_name (str): Field name used in warnings.

    Returns:
        bool: The coerced flag, False for unrecognised strings.

    """
    if not isinstance(value, str):
        return bool(value)
    text = value.strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text not in _FALSE_STRINGS:
        log_warning(
            f"{param_name} is not a boolean, using False",
            {"param_name": param_name, "value": value},
        )
    return False


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "count": lambda v: coerce_int(
        v, "count", DEFAULT_DICE_COUNT, MIN_DICE_COUNT, MAX_DICE_COUNT
    ),
    "sides": lambda v: coerce_int(v, "sides", DEFAULT_SIDES, MIN_SIDES, MAX_SIDES),
    "modifier": lambda v: coerce_int(v, "modifier", DEFAULT_MODIFIER),
    "apply_to": coerce_apply_to,
    "drop_highest": lambda v: coerce_int(v, "drop_highest", 0, 0),
    "drop_lowest": lambda v: coerce_int(v, "drop_lowest", 0, 0),
    "reroll_highest": lambda v: coerce_int(v, "reroll_highest", 0, 0),
    "reroll_lowest": lambda v: coerce_int(v, "reroll_lowest", 0, 0),
    "min_cap": lambda v: coerce_optional_cap(v, "min_cap"),
    "max_cap": lambda v: coerce_optional_cap(v, "max_cap"),
    "label": _coerce_label,
    "show_advanced": lambda v: coerce_bool(v, "show_advanced"),
}


def normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Maps camelCase wire names onto Python field names.

    Keys that are neither a field name nor a known alias are dropped.

    Args:
        raw (Mapping[str, Any]): The raw field mapping.

    Returns:
        dict[str, Any]: The mapping keyed by Python field names.

    """
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        name = FIELD_ALIASES.get(key, key)
        if name in LINE_FIELDS:
            normalized[name] = value
    return normalized


def validate_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validates only the fields present in a partial update.

    Args:
        raw (Mapping[str, Any]): Field updates, snake_case or camelCase.

    Returns:
        dict[str, Any]: The coerced fields, keyed by Python field names.

    Raises:
        TypeError: If raw is not a mapping.

    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"Line fields must be a mapping, got {type(raw).__name__}")
    return {
        name: _COERCERS[name](value) for name, value in normalize_keys(raw).items()
    }


def validate_line_fields(raw: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """
    Validates a full line configuration, merging it over the defaults.

    Args:
        raw (Mapping[str, Any] | None): Line fields, snake_case or camelCase.

    Returns:
        dict[str, Any]: Every line field, validated.

    """
    fields = dict(DEFAULT_LINE_FIELDS)
    fields.update(validate_fields(raw or {}))
    return fields
