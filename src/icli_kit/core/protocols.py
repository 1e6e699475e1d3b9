"""Protocols (interfaces) consumed by the core layer.

Core code depends only on these contracts.  The CLI layer provides the
questionary-backed prompt runtime; the infrastructure layer provides
the boto3-backed IAM backend.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from icli_kit.core.models import Question


class PromptRuntime(Protocol):
    """Asks questions and returns the answers keyed by question name.

    Questions are asked strictly in order.  Before each one the runtime
    evaluates ``question.when(answers)`` with the answers collected so
    far and skips the question when it returns ``False``.
    """

    def prompt(self, questions: Sequence[Question]) -> dict[str, Any]:
        ...  # pragma: no cover


class IamBackend(Protocol):
    """Contract for the remote IAM provisioning API.

    Implementations must raise
    :class:`~icli_kit.exceptions.DeploymentError` with the backend error
    code and chain the original exception.
    """

    def put_policy(self, name: str, document: Mapping[str, Any], description: str) -> str:
        """Create or update the managed policy *name* and return its ARN."""
        ...  # pragma: no cover

    def put_role(
        self,
        name: str,
        assume_role_policy: Mapping[str, Any],
        description: str,
        policy_names: Sequence[str],
    ) -> str:
        """Create or update the role *name*, attach policies, return its ARN."""
        ...  # pragma: no cover
