"""Parameter model for interactive commands.

A command is described by an ordered tuple of
:class:`ParameterDefinition` values.  Each definition can be satisfied
from the command line (when it has a ``cmd_spec``), from an interactive
question, or both.  All models are frozen dataclasses: the parameter parser
derives new :class:`ParameterSpec` values instead of mutating them.

Callable signatures
-------------------
Parameter-level callables receive the answers collected so far **and**
the values supplied on the command line:

* ``choices(answers, cli_values) -> Sequence``
* ``validate(value, answers, cli_values) -> ValidationResult``
* ``when(answers, cli_values) -> bool``

Question-level callables (on :class:`QuestionTemplate`) follow the
prompt contract and only receive ``answers`` (plus the value for
``validate``).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

ValidationResult = Union[bool, str, Sequence[str]]
Validator = Callable[[Any, Mapping[str, Any], Mapping[str, Any]], ValidationResult]
Coercion = Callable[[str], Any]
WhenPredicate = Callable[[Mapping[str, Any], Mapping[str, Any]], bool]

LIST_TYPES: frozenset[str] = frozenset({"list", "checkbox"})
INTEGER_TYPES: frozenset[str] = frozenset({"integer", "int"})


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Choice:
    """One selectable value of a ``list`` or ``checkbox`` parameter."""

    value: Any
    """Value stored in the resolved parameters when selected."""

    label: str | None = None
    """Text shown in the prompt.  Defaults to ``str(value)``."""

    @property
    def title(self) -> str:
        return self.label if self.label is not None else str(self.value)


def as_choice(item: Any) -> Choice:
    """Normalise a plain value or a :class:`Choice` into a :class:`Choice`."""
    if isinstance(item, Choice):
        return item
    return Choice(value=item)


@dataclass(frozen=True, slots=True)
class Static:
    """A value known at declaration time."""

    value: Any

    def resolve(self, answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Dynamic:
    """A value computed on demand from the answers and CLI values."""

    func: Callable[[Mapping[str, Any], Mapping[str, Any]], Any]

    def resolve(self, answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> Any:
        return self.func(answers, cli_values)


ChoiceSource = Union[Static, Dynamic]


def as_choice_source(choices: Any) -> ChoiceSource | None:
    """Wrap declared ``choices`` into a :class:`Static` or :class:`Dynamic`."""
    if choices is None or isinstance(choices, (Static, Dynamic)):
        return choices
    if callable(choices):
        return Dynamic(choices)
    return Static(tuple(as_choice(item) for item in choices))


def resolve_choices(
    source: ChoiceSource | None,
    answers: Mapping[str, Any],
    cli_values: Mapping[str, Any],
) -> tuple[Choice, ...]:
    """Evaluate *source* and normalise every entry to a :class:`Choice`."""
    if source is None:
        return ()
    return tuple(as_choice(item) for item in source.resolve(answers, cli_values) or ())


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class QuestionTemplate:
    """Interactive question attached to a parameter.

    Fields left as ``None`` are filled in from the parameter.
    """

    message: str
    type: str | None = None
    name: str | None = None
    choices: Any = None
    validate: Callable[[Any, Mapping[str, Any]], ValidationResult] | None = None
    when: Callable[[Mapping[str, Any]], bool] | None = None
    default: Any = None


@dataclass(frozen=True, slots=True)
class ParameterDefinition:
    """Declarative description of one command input."""

    question: QuestionTemplate
    cmd_spec: str | None = None
    type: str = "input"
    name: str | None = None
    description: str = ""
    choices: Any = None
    validate: Validator | None = None
    coercion: Coercion | None = None
    when: WhenPredicate | None = None
    default: Any = None
    validation_label: str = "value"


class ParameterKind(str, Enum):
    """Where a parameter appears on the command line."""

    ARGUMENT = "argument"
    OPTION = "option"
    PROMPT = "prompt"


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """A :class:`ParameterDefinition` enriched by :mod:`icli_kit.core.spec_parser`."""

    definition: ParameterDefinition
    name: str
    kind: ParameterKind
    flags: tuple[str, ...] = ()
    """Option flags such as ``("-e", "--environment")``."""

    placeholder: str | None = None
    """Value placeholder token, e.g. ``<memory>`` or ``[items...]``."""

    choices: ChoiceSource | None = None
    validate: Validator | None = None
    coercion: Coercion | None = None

    @property
    def type(self) -> str:
        return self.definition.type

    @property
    def question(self) -> QuestionTemplate:
        return self.definition.question

    @property
    def when(self) -> WhenPredicate | None:
        return self.definition.when

    @property
    def default(self) -> Any:
        return self.definition.default

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def required(self) -> bool:
        """``True`` for ``<value>`` placeholders and bare argument tokens."""
        if self.placeholder is None:
            return self.kind is ParameterKind.ARGUMENT
        return not self.placeholder.startswith("[")

    @property
    def variadic(self) -> bool:
        return self.placeholder is not None and self.placeholder.rstrip("]>").endswith("...")


# ---------------------------------------------------------------------------
# Commands and invocation data
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RawCliInput:
    """Values read from the command line before coercion."""

    arguments: tuple[Any, ...] = ()
    """Positional values, in argument declaration order."""

    options: Mapping[str, Any] = field(default_factory=dict)
    """Option values keyed by derived option name."""


@dataclass(frozen=True, slots=True)
class CommandConfig:
    """Everything needed to register one interactive command."""

    cmd: str
    description: str
    parameters: tuple[ParameterDefinition, ...]
    section: str | None = None
    """Plugin label shown next to the command in the help output."""

    cli_action_hook: Callable[[RawCliInput], RawCliInput] | None = None
    """Post-processes raw command-line values before validation."""

    prompt_answers_hook: Callable[[dict[str, Any], dict[str, Any]], Any] | None = None
    """Receives ``(answers, cli_values)`` and replaces the default merge."""


@dataclass(frozen=True, slots=True)
class Question:
    """A fully resolved question handed to the prompt runtime.

    Every callable takes the answers collected so far; the CLI values
    are already bound in.
    """

    name: str
    type: str
    message: str
    when: Callable[[Mapping[str, Any]], bool]
    choices: Callable[[Mapping[str, Any]], tuple[Choice, ...]] | None = None
    validate: Callable[[Any, Mapping[str, Any]], ValidationResult] | None = None
    default: Any = None
    coercion: Coercion | None = None
    """Applied to free-text answers (integer questions)."""
