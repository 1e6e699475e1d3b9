"""Custom exception hierarchy for icli-kit.

Every error condition that should reach the user as a clean message
inherits from :class:`IcliError`.  Third-party exceptions (boto3,
filesystem errors) are caught in the infrastructure layer and re-raised
as one of the subclasses below, chained with ``raise ... from``.

Hierarchy
---------
IcliError
├── ParameterSpecError
├── ValidationFailedError
├── PromptAbortedError
├── ConfigurationError
├── ScaffoldError
├── DeploymentError
└── MissingDependencyError
"""

from __future__ import annotations

from collections.abc import Sequence


class IcliError(Exception):
    """Base exception for all icli-kit errors.

    The CLI error boundary renders the message and the optional hint
    without a stack trace.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Declarations ----------------------------------------------------------

class ParameterSpecError(IcliError):
    """Raised when a command declares its parameters inconsistently."""


# --- Parameter values ------------------------------------------------------

class ValidationFailedError(IcliError):
    """Raised when command-line values are rejected by their validators.

    All messages are collected before raising so they can be reported
    together, in parameter declaration order.
    """

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages: tuple[str, ...] = tuple(messages)
        super().__init__("\n".join(self.messages))


class PromptAbortedError(IcliError):
    """Raised when the user cancels an interactive question."""


# --- Project / environment -------------------------------------------------

class ConfigurationError(IcliError):
    """Raised when project settings cannot be loaded or validated."""


class ScaffoldError(IcliError):
    """Raised when an artifact directory or file cannot be written."""


class DeploymentError(IcliError):
    """Raised when the remote deployment API rejects an operation.

    ``code`` carries the backend error code (e.g. ``AccessDenied``) so
    that commands can special-case well-known failures.  The original
    backend exception is available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code: str | None = code


class MissingDependencyError(IcliError):
    """Raised when an optional third-party package is not installed."""
