"""Turn parameter specs into questions for the prompt runtime.

The prompt runtime evaluates ``when``, ``choices`` and ``validate`` per
question, after the earlier questions have been answered, so every
callable built here is a closure over the CLI baseline and is re-run on
each call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from icli_kit.core.models import (
    INTEGER_TYPES,
    Choice,
    ParameterSpec,
    Question,
    ValidationResult,
    as_choice_source,
    resolve_choices,
)


def _question_choices(
    spec: ParameterSpec,
    cli_values: Mapping[str, Any],
) -> Callable[[Mapping[str, Any]], tuple[Choice, ...]] | None:
    template_choices = spec.question.choices
    if template_choices is not None:
        # Question-level callables only receive the answers.
        if callable(template_choices):
            source = as_choice_source(lambda answers, _cli: template_choices(answers))
        else:
            source = as_choice_source(template_choices)
    elif spec.choices is not None:
        source = spec.choices
    else:
        return None

    def choices(answers: Mapping[str, Any]) -> tuple[Choice, ...]:
        return resolve_choices(source, answers, cli_values)

    return choices


def _question_validate(
    spec: ParameterSpec,
    cli_values: Mapping[str, Any],
) -> Callable[[Any, Mapping[str, Any]], ValidationResult] | None:
    if spec.question.validate is not None:
        return spec.question.validate
    validate = spec.validate
    if validate is None:
        return None

    def validate_answer(value: Any, answers: Mapping[str, Any]) -> ValidationResult:
        return validate(value, answers, cli_values)

    return validate_answer


def _question_when(
    spec: ParameterSpec,
    cli_values: Mapping[str, Any],
) -> Callable[[Mapping[str, Any]], bool]:
    if spec.question.when is not None:
        return spec.question.when
    when = spec.when
    if when is not None:
        return lambda answers: bool(when(answers, cli_values))
    name = spec.name
    return lambda answers: not cli_values.get(name)


def parameter_to_question(spec: ParameterSpec, cli_values: Mapping[str, Any]) -> Question:
    """Build the :class:`Question` for one parameter."""
    template = spec.question
    question_type = template.type or spec.type
    return Question(
        name=template.name or spec.name,
        type=question_type,
        message=template.message,
        when=_question_when(spec, cli_values),
        choices=_question_choices(spec, cli_values),
        validate=_question_validate(spec, cli_values),
        default=template.default if template.default is not None else spec.default,
        coercion=spec.coercion if question_type in INTEGER_TYPES else None,
    )


def parameters_to_questions(
    specs: Sequence[ParameterSpec],
    cli_values: Mapping[str, Any],
) -> list[Question]:
    """Build one question per parameter, in declaration order."""
    return [parameter_to_question(spec, cli_values) for spec in specs]
