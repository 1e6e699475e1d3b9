"""CLI application entry point for icli-kit.

This module is the **outer error boundary** of the application.
:func:`cli` catches :class:`~icli_kit.exceptions.IcliError`,
``KeyboardInterrupt`` and any unexpected ``Exception``, renders a
message via Rich and exits with a well-defined code.

Architecture notes
------------------
* Commands are registered on an explicit :class:`Icli` engine built
  by :func:`build_icli`; nothing is stored in module globals.
* Validation errors are reported by the engine itself and come back
  here as :data:`exit_codes.GENERAL_ERROR`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from icli_kit.cli import exit_codes
from icli_kit.cli.console import configure_logging, console, escape
from icli_kit.cli.engine import Icli
from icli_kit.config import Settings, load_settings
from icli_kit.core.protocols import IamBackend, PromptRuntime
from icli_kit.exceptions import IcliError
from icli_kit.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands are added by the plugin command modules.
    """
    parser = argparse.ArgumentParser(
        prog="icli-kit",
        description="Scaffold and deploy serverless application artifacts.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    return parser


def build_icli(
    settings: Settings,
    *,
    prompt: PromptRuntime | None = None,
    backend: IamBackend | None = None,
) -> Icli:
    """Create the engine and register every plugin command on it."""
    from icli_kit.cli.commands import register_commands

    if prompt is None:
        from icli_kit.cli.prompt import QuestionaryPrompt

        prompt = QuestionaryPrompt()

    icli = Icli(_build_parser(), prompt)
    register_commands(icli, settings, backend)
    return icli


def _log_level(settings: Settings, verbosity: int) -> int | str:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return settings.log_level


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    prompt: PromptRuntime | None = None,
    backend: IamBackend | None = None,
) -> int:
    """Run the icli-kit CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None``, ``sys.argv[1:]`` is used.
    settings, prompt, backend:
        Optional collaborators; defaults load the project settings, use
        questionary and boto3.

    Returns
    -------
    int
        OS process exit code.
    """
    settings = settings or load_settings()
    icli = build_icli(settings, prompt=prompt, backend=backend)
    namespace = icli.parse(argv)
    configure_logging(_log_level(settings, namespace.verbose))

    result = icli.dispatch(namespace)
    return result if isinstance(result, int) else exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point."""
    try:
        code = main()
        sys.exit(code)
    except IcliError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(exc)}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unhandled exception", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Run again with -vv for the full traceback.\n"
            f"  {type(exc).__name__}: {escape(exc)}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
