"""Validators and coercions shared by both input surfaces.

Pure functions only.  A validator returns ``True`` when the value is
acceptable, or a non-empty list of human-readable messages.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from icli_kit.core.models import (
    INTEGER_TYPES,
    ChoiceSource,
    Coercion,
    ValidationResult,
    Validator,
    resolve_choices,
)


# ---------------------------------------------------------------------------
# Coercions
# ---------------------------------------------------------------------------

def coerce_integer(value: str) -> int:
    """Parse a whole number, tolerating surrounding whitespace."""
    return int(str(value).strip())


def coerce_comma_list(value: str) -> list[str]:
    """Split ``"a, b,c"`` into ``["a", "b", "c"]``."""
    return [item.strip() for item in str(value).split(",")]


def coercion_for_type(param_type: str) -> Coercion | None:
    """Return the default coercion for a parameter type, or ``None``."""
    if param_type in INTEGER_TYPES:
        return coerce_integer
    if param_type == "checkbox":
        return coerce_comma_list
    return None


# ---------------------------------------------------------------------------
# List validation
# ---------------------------------------------------------------------------

def generate_list_validation(source: ChoiceSource | None, label: str = "value") -> Validator:
    """Build a validator checking that every provided value is a known choice.

    Dynamic choice sources are resolved each time the validator runs,
    with the same ``answers`` and ``cli_values`` it receives.
    """

    def list_validation(
        provided: Any,
        answers: Mapping[str, Any] | None = None,
        cli_values: Mapping[str, Any] | None = None,
    ) -> ValidationResult:
        values = provided if isinstance(provided, (list, tuple)) else [provided]
        available = [choice.value for choice in resolve_choices(source, answers or {}, cli_values or {})]

        if len(available) == 1:
            help_text = f"available value: {available[0]}"
        elif available:
            help_text = "available values: " + ", ".join(str(item) for item in available)
        else:
            help_text = "no values are available"

        messages = [
            f"{value} is not a valid {label} - {help_text}"
            for value in values
            if value not in available
        ]
        return messages or True

    return list_validation


# ---------------------------------------------------------------------------
# Pattern validation
# ---------------------------------------------------------------------------

def generate_pattern_validation(pattern: str, description: str) -> Validator:
    """Build a validator matching the whole value against *pattern*."""
    compiled = re.compile(pattern, re.IGNORECASE)

    def pattern_validation(value: Any, *_context: Any) -> ValidationResult:
        if isinstance(value, str) and compiled.fullmatch(value):
            return True
        return [f"{value} is not valid - {description}"]

    return pattern_validation


# ---------------------------------------------------------------------------
# Result normalisation
# ---------------------------------------------------------------------------

def validation_messages(result: ValidationResult, value: Any, name: str) -> list[str]:
    """Convert any validator return value into a list of messages.

    ``True`` maps to an empty list; ``False`` to a generic message.
    """
    if result is True:
        return []
    if result is False or result is None:
        return [f"{value} is not a valid value for {name}"]
    if isinstance(result, str):
        return [result]
    messages: Sequence[str] = list(result)
    return [str(message) for message in messages] or [f"{value} is not a valid value for {name}"]
