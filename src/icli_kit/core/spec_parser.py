"""Derive canonical parameter specs from declarative definitions.

The derivation runs once per command registration.  It never mutates
its input: each :class:`ParameterDefinition` yields a new
:class:`ParameterSpec`, so running it twice gives equal results.

Naming rules
------------
* Argument ``[policy-identifiers]`` → ``policy_identifiers``.
* Option ``-e, --environment <env>`` → ``environment`` (the short flag
  is dropped when a second flag follows it).
* Prompt-only parameters use ``name`` or ``question.name``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from icli_kit.core.models import (
    LIST_TYPES,
    ParameterDefinition,
    ParameterKind,
    ParameterSpec,
    as_choice_source,
)
from icli_kit.core.validation import coercion_for_type, generate_list_validation
from icli_kit.exceptions import ParameterSpecError

_FLAG_SPLIT = re.compile(r"[ ,|]+")
_WORDS = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")


def to_snake_case(token: str) -> str:
    """Case-normalise a flag or argument token.

    ``"--dry-run"``, ``"dryRun"`` and ``"[dry_run]"`` all become ``"dry_run"``.
    """
    return "_".join(word.lower() for word in _WORDS.findall(token))


def split_flags(cmd_spec: str) -> list[str]:
    """Split an option spec such as ``"-e, --environment <env>"`` into tokens."""
    return [token for token in _FLAG_SPLIT.split(cmd_spec.strip()) if token]


def is_option_spec(cmd_spec: str | None) -> bool:
    return bool(cmd_spec) and cmd_spec.lstrip().startswith("-")


def option_name(cmd_spec: str) -> str:
    """Return the canonical name of an option spec."""
    flags = split_flags(cmd_spec)
    if len(flags) > 1 and not flags[1].startswith(("[", "<")):
        flags = flags[1:]
    return to_snake_case(flags[0].lstrip("-"))


def argument_name(cmd_spec: str) -> str:
    """Return the canonical name of a positional argument spec."""
    return to_snake_case(cmd_spec.strip())


# ---------------------------------------------------------------------------
# Per-parameter derivation
# ---------------------------------------------------------------------------

def _derive_option(definition: ParameterDefinition, cmd_spec: str) -> ParameterSpec:
    tokens = split_flags(cmd_spec)
    flags = tuple(token for token in tokens if token.startswith("-"))
    placeholder = next((token for token in tokens if token.startswith(("[", "<"))), None)
    return _enrich(
        definition,
        name=option_name(cmd_spec),
        kind=ParameterKind.OPTION,
        flags=flags,
        placeholder=placeholder,
    )


def _derive_argument(definition: ParameterDefinition, cmd_spec: str) -> ParameterSpec:
    token = cmd_spec.strip()
    placeholder = token if token.startswith(("[", "<")) else None
    if placeholder is None and token.endswith("..."):
        placeholder = f"<{token}>"
    return _enrich(
        definition,
        name=argument_name(token),
        kind=ParameterKind.ARGUMENT,
        placeholder=placeholder,
    )


def _derive_prompt_only(definition: ParameterDefinition) -> ParameterSpec:
    name = definition.name or definition.question.name
    if not name:
        raise ParameterSpecError(
            "A parameter without cmd_spec needs a name.",
            hint=f"Set name= on the parameter asking {definition.question.message!r}.",
        )
    return _enrich(definition, name=name, kind=ParameterKind.PROMPT)


def _enrich(
    definition: ParameterDefinition,
    *,
    name: str,
    kind: ParameterKind,
    flags: tuple[str, ...] = (),
    placeholder: str | None = None,
) -> ParameterSpec:
    if not name:
        raise ParameterSpecError(f"Cannot derive a parameter name from {definition.cmd_spec!r}.")

    choices = as_choice_source(definition.choices)
    validate = definition.validate
    if validate is None and definition.type in LIST_TYPES:
        validate = generate_list_validation(choices, definition.validation_label)

    return ParameterSpec(
        definition=definition,
        name=name,
        kind=kind,
        flags=flags,
        placeholder=placeholder,
        choices=choices,
        validate=validate,
        coercion=definition.coercion or coercion_for_type(definition.type),
    )


def derive_parameter(definition: ParameterDefinition) -> ParameterSpec:
    """Derive the :class:`ParameterSpec` of a single definition."""
    cmd_spec = definition.cmd_spec
    if not cmd_spec or not cmd_spec.strip():
        return _derive_prompt_only(definition)
    if is_option_spec(cmd_spec):
        return _derive_option(definition, cmd_spec)
    return _derive_argument(definition, cmd_spec)


def derive_parameters(definitions: Iterable[ParameterDefinition]) -> tuple[ParameterSpec, ...]:
    """Derive specs for a command, preserving declaration order.

    Raises
    ------
    ParameterSpecError
        When two parameters end up with the same canonical name.
    """
    specs = tuple(derive_parameter(definition) for definition in definitions)
    seen: set[str] = set()
    for spec in specs:
        if spec.name in seen:
            raise ParameterSpecError(f"Duplicate parameter name: {spec.name!r}.")
        seen.add(spec.name)
    return specs


def arguments_of(specs: Iterable[ParameterSpec]) -> list[ParameterSpec]:
    return [spec for spec in specs if spec.kind is ParameterKind.ARGUMENT]


def options_of(specs: Iterable[ParameterSpec]) -> list[ParameterSpec]:
    return [spec for spec in specs if spec.kind is ParameterKind.OPTION]
