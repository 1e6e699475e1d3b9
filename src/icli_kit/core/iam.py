"""IAM policy and role entities.

Entities are frozen dataclasses bound to an :class:`IamBackend` at load
time.  :meth:`Policy.deploy` and :meth:`Role.deploy` return a new
entity carrying the ARN reported by the backend.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from icli_kit.core.protocols import IamBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeployContext:
    """Environment prefix and stage suffix applied to deployed names."""

    stage: str
    environment: str

    def qualify(self, name: str) -> str:
        """Return the remote resource name, e.g. ``DEV_reader_v0``."""
        return f"{self.environment}_{name}_{self.stage}"


@dataclass(frozen=True, slots=True)
class Policy:
    """A managed policy defined in the project."""

    name: str
    document: Mapping[str, Any]
    description: str = ""
    arn: str | None = None
    backend: IamBackend | None = field(default=None, repr=False, compare=False)

    def deploy(self, context: DeployContext) -> Policy:
        if self.backend is None:
            raise RuntimeError(f"Policy {self.name!r} is not bound to a backend.")
        remote_name = context.qualify(self.name)
        logger.info("Deploying policy %s as %s", self.name, remote_name)
        arn = self.backend.put_policy(remote_name, self.document, self.description)
        return replace(self, arn=arn)


@dataclass(frozen=True, slots=True)
class Role:
    """An IAM role defined in the project.

    ``managed_policies`` lists project policy names; they are qualified
    with the same context as the role when attached.
    """

    name: str
    assume_role_policy: Mapping[str, Any]
    description: str = ""
    managed_policies: tuple[str, ...] = ()
    arn: str | None = None
    backend: IamBackend | None = field(default=None, repr=False, compare=False)

    def deploy(self, context: DeployContext) -> Role:
        if self.backend is None:
            raise RuntimeError(f"Role {self.name!r} is not bound to a backend.")
        remote_name = context.qualify(self.name)
        logger.info("Deploying role %s as %s", self.name, remote_name)
        arn = self.backend.put_role(
            remote_name,
            self.assume_role_policy,
            self.description,
            [context.qualify(policy) for policy in self.managed_policies],
        )
        return replace(self, arn=arn)
