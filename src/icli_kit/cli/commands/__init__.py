"""Plugin commands built on the interactive parameter engine.

Each module exposes ``register(icli, ...)``; :func:`register_commands`
wires all of them onto one :class:`~icli_kit.cli.engine.Icli`.
"""

from __future__ import annotations

from icli_kit.cli.commands import (
    create_node_lambda,
    create_node_module,
    deploy_policies,
    deploy_roles,
)
from icli_kit.cli.engine import Icli
from icli_kit.config import Settings
from icli_kit.core.protocols import IamBackend
from icli_kit.infra.iam_repository import IamRepository


def register_commands(icli: Icli, settings: Settings, backend: IamBackend | None = None) -> None:
    """Register every plugin command on *icli*.

    *backend* defaults to the boto3 IAM backend; it is only contacted
    when a deploy command runs.
    """
    if backend is None:
        from icli_kit.infra.iam_backend import Boto3IamBackend

        backend = Boto3IamBackend(region=settings.aws_region)

    repository = IamRepository(settings.policies_dir, settings.roles_dir, backend)
    deploy_policies.register(icli, settings, repository)
    deploy_roles.register(icli, settings, repository)
    create_node_lambda.register(icli, settings, repository)
    create_node_module.register(icli, settings)
