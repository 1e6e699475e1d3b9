"""CLI console helpers: Rich output, colour markup and logging setup.

Rich is imported lazily so that bootstrap paths (``--help``,
``--version``) keep working even when it is not installed.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

from icli_kit.exceptions import MissingDependencyError

_STYLE_TAG = re.compile(r"\[/?(?:bold ?)?(?:red|green|yellow|cyan)?\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` or raise ``MissingDependencyError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True, highlight=False)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with a plain stderr fallback."""

    def print(self, *objects: object) -> None:
        try:
            rich_console = get_rich_console()
        except MissingDependencyError:
            print(*(_strip_markup(str(obj)) for obj in objects), file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


# ---------------------------------------------------------------------------
# Markup helpers
# ---------------------------------------------------------------------------

def escape(text: object) -> str:
    """Escape Rich markup in *text*."""
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return str(text)
    return rich_escape(str(text))


def _strip_markup(text: str) -> str:
    """Drop the style tags produced by :func:`style` for plain output."""
    return _STYLE_TAG.sub("", text)


def style(text: object, markup: str) -> str:
    """Wrap *text* (escaped) in a Rich style tag."""
    return f"[{markup}]{escape(text)}[/{markup}]"


def cmd(text: object) -> str:
    return style(text, "yellow")


def info(text: object) -> str:
    return style(text, "cyan")


def error(text: object) -> str:
    return style(text, "red")


def success(text: object) -> str:
    return style(text, "green")


ko = error
ok = success


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(level: int | str) -> None:
    """Route the ``icli_kit`` loggers to stderr at *level*.

    Uses ``rich.logging.RichHandler`` when Rich is available.
    """
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(console=get_rich_console(), show_path=False, markup=False)

    package_logger = logging.getLogger("icli_kit")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level if isinstance(level, int) else level.upper())
    package_logger.propagate = False
