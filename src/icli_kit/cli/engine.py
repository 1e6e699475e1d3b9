"""Command registration facade for interactive commands.

An :class:`Icli` instance owns the top-level argparse parser and the
prompt runtime.  It is created once at process start and passed to
every command module, which registers itself with
:meth:`Icli.create_sub_command`.

Invocation flow for one command::

    argparse namespace
      → read_cli_input            (CLI surface)
      → cli_action_hook           (optional)
      → process_cli_input         (coerce + validate, fail fast)
      → parameters_to_questions   (prompt surface)
      → prompt runtime            (asks unanswered questions)
      → prompt_answers_hook | merge_answers + execute_command
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from typing import Any

from icli_kit.cli import exit_codes
from icli_kit.cli.console import console, error, escape
from icli_kit.cli.surface import bind_parameters, read_cli_input
from icli_kit.core.models import CommandConfig, ParameterSpec
from icli_kit.core.protocols import PromptRuntime
from icli_kit.core.questions import parameters_to_questions
from icli_kit.core.reconciliation import merge_answers, process_cli_input
from icli_kit.core.spec_parser import derive_parameters
from icli_kit.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)

ExecuteCommand = Callable[[dict[str, Any]], Any]
Action = Callable[[argparse.Namespace], Any]

ACTION_ATTR = "_icli_action"


def report_validation_error(exc: ValidationFailedError) -> None:
    """Print ``error:`` followed by one indented line per message."""
    lines = "\n".join(f"    {message}" for message in exc.messages)
    console.print(f"\n  {error('error')}:\n{escape(lines)}\n")


class Icli:
    """Interactive command-line engine.

    Parameters
    ----------
    program:
        The top-level argument parser; one sub-parser is added per command.
    prompt:
        Any object satisfying :class:`PromptRuntime`.
    """

    def __init__(self, program: argparse.ArgumentParser, prompt: PromptRuntime) -> None:
        self.program = program
        self.prompt = prompt
        self._subparsers: Any = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _commands(self) -> Any:
        if self._subparsers is None:
            self._subparsers = self.program.add_subparsers(title="commands", metavar="<command>")
        return self._subparsers

    def create_sub_command(self, config: CommandConfig, execute_command: ExecuteCommand) -> None:
        """Register *config* as a sub-command bound to *execute_command*.

        Parameter specs are derived here, once.  Nothing is invoked until
        the user runs the command.
        """
        specs = derive_parameters(config.parameters)
        summary = f"{config.description} ({config.section})" if config.section else config.description
        parser = self._commands().add_parser(
            config.cmd,
            help=summary,
            description=config.description,
        )
        bind_parameters(parser, specs)
        parser.set_defaults(**{ACTION_ATTR: self._build_action(config, specs, execute_command)})
        logger.debug("Registered command %s with parameters %s", config.cmd, [s.name for s in specs])

    def _build_action(
        self,
        config: CommandConfig,
        specs: Sequence[ParameterSpec],
        execute_command: ExecuteCommand,
    ) -> Action:
        def action(namespace: argparse.Namespace) -> Any:
            raw = read_cli_input(namespace, specs)
            if config.cli_action_hook is not None:
                raw = config.cli_action_hook(raw)
            cli_values = process_cli_input(raw, specs)

            answers = self.prompt.prompt(parameters_to_questions(specs, cli_values))
            if config.prompt_answers_hook is not None:
                return config.prompt_answers_hook(answers, dict(cli_values))
            return execute_command(merge_answers(cli_values, answers))

        return action

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def parse(self, argv: Sequence[str] | None = None) -> argparse.Namespace:
        return self.program.parse_args(argv)

    def dispatch(self, namespace: argparse.Namespace) -> Any:
        """Run the command selected in *namespace*.

        Returns the value of the execution callback, or
        :data:`exit_codes.GENERAL_ERROR` when command-line values fail
        validation.  Without a command, prints the help.
        """
        action: Action | None = getattr(namespace, ACTION_ATTR, None)
        if action is None:
            self.program.print_help()
            return exit_codes.SUCCESS
        try:
            return action(namespace)
        except ValidationFailedError as exc:
            report_validation_error(exc)
            return exit_codes.GENERAL_ERROR

    def run(self, argv: Sequence[str] | None = None) -> Any:
        return self.dispatch(self.parse(argv))
