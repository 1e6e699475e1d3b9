"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from icli_kit import __version__
from icli_kit.cli import exit_codes
from icli_kit.cli.app import main
from icli_kit.config import Settings
from icli_kit.exceptions import (
    ConfigurationError,
    DeploymentError,
    IcliError,
    MissingDependencyError,
    ParameterSpecError,
    PromptAbortedError,
    ScaffoldError,
    ValidationFailedError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ParameterSpecError,
            ValidationFailedError,
            PromptAbortedError,
            ConfigurationError,
            ScaffoldError,
            DeploymentError,
            MissingDependencyError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[IcliError]) -> None:
        assert issubclass(exc_class, IcliError)

    def test_hint_is_stored(self) -> None:
        err = IcliError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert IcliError("boom").hint is None

    def test_validation_error_keeps_messages(self) -> None:
        err = ValidationFailedError(["first", "second"])
        assert err.messages == ("first", "second")
        assert str(err) == "first\nsecond"

    def test_deployment_error_code(self) -> None:
        err = DeploymentError("denied", code="AccessDenied")
        assert err.code == "AccessDenied"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI bootstrap
# ---------------------------------------------------------------------------

class TestCliBootstrap:
    def test_no_command_prints_help(self, settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([], settings=settings) == exit_codes.SUCCESS
        assert "deploy-policies" in capsys.readouterr().out

    def test_help_exits_zero(self, settings: Settings) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"], settings=settings)
        assert exc_info.value.code == 0

    def test_version_flag(self, settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"], settings=settings)
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    @pytest.mark.parametrize(
        "command",
        ["deploy-policies", "deploy-roles", "create-node-lambda", "create-node-module"],
    )
    def test_every_command_is_registered(self, settings: Settings, command: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([command, "--help"], settings=settings)
        assert exc_info.value.code == 0


class TestErrorBoundary:
    def test_icli_error_exits_general_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        from icli_kit.cli.app import cli

        with patch("icli_kit.cli.app.main", side_effect=ConfigurationError("bad", hint="fix it")):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "bad" in err
        assert "fix it" in err

    def test_keyboard_interrupt(self) -> None:
        from icli_kit.cli.app import cli

        with patch("icli_kit.cli.app.main", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        from icli_kit.cli.app import cli

        with patch("icli_kit.cli.app.main", side_effect=RuntimeError("kaboom")):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: kaboom" in capsys.readouterr().err

    def test_success_exit_code(self) -> None:
        from icli_kit.cli.app import cli

        with patch("icli_kit.cli.app.main", return_value=exit_codes.SUCCESS):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.SUCCESS
