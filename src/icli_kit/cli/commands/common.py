"""Helpers shared by the plugin commands."""

from __future__ import annotations

from icli_kit.cli.console import console, error, escape
from icli_kit.core.validation import generate_pattern_validation
from icli_kit.exceptions import DeploymentError

IDENTIFIER_PATTERN = r"[a-z0-9_-]+"

identifier_validation = generate_pattern_validation(
    IDENTIFIER_PATTERN,
    'alphanumeric characters, "_" and "-" accepted',
)


def is_permission_error(exc: DeploymentError, codes: frozenset[str]) -> bool:
    """``True`` when *exc* carries one of *codes* and a backend cause."""
    return exc.code in codes and exc.__cause__ is not None and bool(str(exc.__cause__))


def print_permission_remediation(exc: DeploymentError) -> None:
    console.print(f"\n    {error('Insufficient permissions to perform the action')}\n")
    console.print(
        "The IAM user/role you are using to perform this action "
        "does not have sufficient permissions.\n"
    )
    console.print(f"{escape(exc.__cause__)}\n")
    console.print("Please update the policies of the user/role before trying again.\n")
