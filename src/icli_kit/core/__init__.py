"""Core layer — the parameter engine and domain entities.

Rules
-----
* No ``print()`` calls and no terminal interaction.
* No imports from ``cli`` or ``infra``.
* Collaborators (prompt runtime, IAM backend) are injected through the
  protocols in :mod:`icli_kit.core.protocols`.
"""

from icli_kit.core.iam import DeployContext, Policy, Role
from icli_kit.core.models import (
    Choice,
    CommandConfig,
    Dynamic,
    ParameterDefinition,
    ParameterKind,
    ParameterSpec,
    Question,
    QuestionTemplate,
    RawCliInput,
    Static,
)
from icli_kit.core.protocols import IamBackend, PromptRuntime

__all__: list[str] = [
    "Choice",
    "CommandConfig",
    "DeployContext",
    "Dynamic",
    "IamBackend",
    "ParameterDefinition",
    "ParameterKind",
    "ParameterSpec",
    "Policy",
    "PromptRuntime",
    "Question",
    "QuestionTemplate",
    "RawCliInput",
    "Role",
    "Static",
]
