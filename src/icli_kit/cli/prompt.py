"""Interactive question runtime backed by questionary.

:class:`QuestionaryPrompt` satisfies
:class:`~icli_kit.core.protocols.PromptRuntime`.  Questions are asked
one at a time: before each question its ``when`` predicate is evaluated
against the answers collected so far, then its choices are computed,
then the user is asked.  Nothing is cached between questions.

Question types map onto questionary as follows:

============  ===============
type          questionary
============  ===============
input         ``text``
integer/int   ``text`` + int conversion
password      ``password``
list          ``select``
rawlist       ``rawselect``
checkbox      ``checkbox``
confirm       ``confirm``
============  ===============
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from icli_kit.core.models import Choice, Question
from icli_kit.core.validation import validation_messages
from icli_kit.exceptions import MissingDependencyError, ParameterSpecError, PromptAbortedError

logger = logging.getLogger(__name__)

_TEXT_TYPES = frozenset({"input", "integer", "int", "password"})
_SELECT_TYPES = frozenset({"list", "rawlist"})


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompting."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


# ---------------------------------------------------------------------------
# Validation adapter
# ---------------------------------------------------------------------------

def build_validator(
    question: Question,
    answers: Mapping[str, Any],
) -> Callable[[Any], bool | str] | None:
    """Adapt a question validator to questionary's ``True | str`` contract.

    Integer questions are also rejected when the text is not a number.
    """
    if question.validate is None and question.coercion is None:
        return None

    def validate(value: Any) -> bool | str:
        if question.coercion is not None:
            try:
                value = question.coercion(value)
            except (TypeError, ValueError):
                return f"{value} is not a valid {question.type}"
        if question.validate is None:
            return True
        messages = validation_messages(question.validate(value, answers), value, question.name)
        return "; ".join(messages) if messages else True

    return validate


# ---------------------------------------------------------------------------
# Runtime
# ---------------------------------------------------------------------------

class QuestionaryPrompt:
    """Sequential prompt session rendered with questionary."""

    def prompt(self, questions: Sequence[Question]) -> dict[str, Any]:
        """Ask every question whose ``when`` holds and return the answers.

        Raises
        ------
        PromptAbortedError
            If the user cancels a question (Ctrl+C / Esc).
        """
        answers: dict[str, Any] = {}
        questionary: Any = None
        for question in questions:
            if not question.when(answers):
                logger.debug("Skipping question %s", question.name)
                continue
            if questionary is None:
                questionary = _import_questionary()
            answers[question.name] = self._ask(questionary, question, answers)
        return answers

    def _ask(self, questionary: Any, question: Question, answers: Mapping[str, Any]) -> Any:
        choices: Sequence[Choice] = question.choices(answers) if question.choices else ()
        validate = build_validator(question, answers)
        default = question.default

        # questionary cannot render a list without entries.
        if not choices and (question.type in _SELECT_TYPES or question.type == "checkbox"):
            logger.debug("No choices available for %s", question.name)
            return [] if question.type == "checkbox" else None

        if question.type in _TEXT_TYPES:
            factory = questionary.password if question.type == "password" else questionary.text
            kwargs: dict[str, Any] = {"default": "" if default is None else str(default)}
            if validate is not None:
                kwargs["validate"] = validate
            prompt = factory(question.message, **kwargs)
        elif question.type in _SELECT_TYPES:
            factory = questionary.rawselect if question.type == "rawlist" else questionary.select
            values = [choice.value for choice in choices]
            prompt = factory(
                question.message,
                choices=[questionary.Choice(title=c.title, value=c.value) for c in choices],
                default=default if default in values else None,
            )
        elif question.type == "checkbox":
            selected = default if isinstance(default, (list, tuple)) else ()
            kwargs = {}
            if validate is not None:
                kwargs["validate"] = validate
            prompt = questionary.checkbox(
                question.message,
                choices=[
                    questionary.Choice(title=c.title, value=c.value, checked=c.value in selected)
                    for c in choices
                ],
                **kwargs,
            )
        elif question.type == "confirm":
            prompt = questionary.confirm(
                question.message,
                default=True if default is None else bool(default),
            )
        else:
            raise ParameterSpecError(f"Unsupported question type {question.type!r} for {question.name}.")

        answer = prompt.ask()  # Returns None on Ctrl+C / Esc
        if answer is None:
            raise PromptAbortedError(
                f"No answer given for {question.name}.",
                hint="Answer the question, or pass the value on the command line.",
            )
        if question.coercion is not None and isinstance(answer, str):
            answer = question.coercion(answer)
        return answer
