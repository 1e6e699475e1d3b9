"""Reconcile command-line values and prompt answers into one mapping.

Two phases:

1. **CLI phase** — :func:`process_cli_input` maps raw positional and
   option values to parameter names, coerces them and validates them
   eagerly.  Any failure raises :class:`ValidationFailedError` before a
   single question is asked.
2. **Merge phase** — :func:`merge_answers` installs prompt answers for
   every name the command line left without a truthy value.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from icli_kit.core.models import ParameterSpec, RawCliInput
from icli_kit.core.spec_parser import arguments_of, options_of
from icli_kit.core.validation import validation_messages
from icli_kit.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)


def cli_input_to_parameters(raw: RawCliInput, specs: Sequence[ParameterSpec]) -> dict[str, Any]:
    """Map raw values to parameter names.

    Positionals are matched by argument declaration order, options by
    derived name.  Every argument and option gets a key, ``None`` when
    it was not supplied.
    """
    values: dict[str, Any] = {}
    for index, spec in enumerate(arguments_of(specs)):
        values[spec.name] = raw.arguments[index] if index < len(raw.arguments) else None
    for spec in options_of(specs):
        values[spec.name] = raw.options.get(spec.name)
    return values


def _coerce(spec: ParameterSpec, value: Any) -> Any:
    """Apply the parameter coercion to string values (element-wise for lists)."""
    if spec.coercion is None:
        return value
    if isinstance(value, (list, tuple)):
        coerced: list[Any] = []
        for item in value:
            result = _coerce(spec, item)
            if spec.type == "checkbox" and isinstance(result, list):
                coerced.extend(result)
            else:
                coerced.append(result)
        return coerced
    if isinstance(value, str):
        return spec.coercion(value)
    return value


def coerce_parameters(
    values: Mapping[str, Any],
    specs: Sequence[ParameterSpec],
) -> tuple[dict[str, Any], dict[str, list[str]]]:
    """Coerce every truthy value.

    Returns the coerced mapping and the coercion errors keyed by name.
    A value that fails coercion is kept raw.
    """
    coerced = dict(values)
    errors: dict[str, list[str]] = {}
    for spec in specs:
        value = values.get(spec.name)
        if not value:
            continue
        try:
            coerced[spec.name] = _coerce(spec, value)
        except (TypeError, ValueError):
            errors[spec.name] = [f"{value} is not a valid {spec.type} for {spec.name}"]
    return coerced, errors


def validate_parameters(
    values: Mapping[str, Any],
    specs: Sequence[ParameterSpec],
    coercion_errors: Mapping[str, list[str]] | None = None,
) -> list[str]:
    """Run validators over truthy values, in declaration order.

    Returns the concatenated error messages; empty when all pass.
    """
    coercion_errors = coercion_errors or {}
    messages: list[str] = []
    for spec in specs:
        if spec.name in coercion_errors:
            messages.extend(coercion_errors[spec.name])
            continue
        value = values.get(spec.name)
        if not value or spec.validate is None:
            continue
        result = spec.validate(value, {}, values)
        messages.extend(validation_messages(result, value, spec.name))
    return messages


def process_cli_input(raw: RawCliInput, specs: Sequence[ParameterSpec]) -> dict[str, Any]:
    """Turn raw command-line input into the validated baseline mapping.

    Raises
    ------
    ValidationFailedError
        When at least one value fails coercion or validation.
    """
    values = cli_input_to_parameters(raw, specs)
    coerced, coercion_errors = coerce_parameters(values, specs)
    messages = validate_parameters(coerced, specs, coercion_errors)
    if messages:
        raise ValidationFailedError(messages)
    logger.debug("Command-line values: %s", coerced)
    return coerced


def merge_answers(cli_values: Mapping[str, Any], answers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge prompt answers into a copy of the CLI baseline.

    An answer is installed only when the baseline holds no truthy value
    for its name.  A falsy flag (``0``, ``""``) is therefore replaced by
    the answer to the same question.
    """
    merged = dict(cli_values)
    for name, answer in answers.items():
        if not merged.get(name):
            merged[name] = answer
    return merged
