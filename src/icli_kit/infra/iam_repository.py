"""Load IAM policy and role definitions from the project directory.

Layout
------
* ``<policies>/<name>.json`` — ``{"description": str, "document": {...}}``
* ``<roles>/<name>.json`` — ``{"description": str,
  "assumeRolePolicyDocument": {...}, "managedPolicies": [str, ...]}``

A missing directory means "no definitions".  Unreadable or malformed
files raise :class:`~icli_kit.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from icli_kit.core.iam import Policy, Role
from icli_kit.core.models import Choice
from icli_kit.core.protocols import IamBackend
from icli_kit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _read_definitions(directory: Path) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(name, data)`` pairs for every JSON file, sorted by name."""
    if not directory.is_dir():
        logger.debug("Definition directory %s does not exist", directory)
        return []
    definitions: list[tuple[str, dict[str, Any]]] = []
    for path in sorted(directory.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a JSON object.")
        definitions.append((path.stem, data))
    return definitions


def _with_description(name: str, description: str) -> str:
    return f"{name} - {description}" if description else name


class IamRepository:
    """Lazy, cached access to the project's policies and roles."""

    def __init__(self, policies_dir: Path, roles_dir: Path, backend: IamBackend | None) -> None:
        self._policies_dir = policies_dir
        self._roles_dir = roles_dir
        self._backend = backend
        self._policies: list[Policy] | None = None
        self._roles: list[Role] | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_policies(self) -> list[Policy]:
        if self._policies is None:
            self._policies = [
                Policy(
                    name=name,
                    document=data.get("document", {}),
                    description=data.get("description", ""),
                    backend=self._backend,
                )
                for name, data in _read_definitions(self._policies_dir)
            ]
            logger.debug("Loaded %d policies from %s", len(self._policies), self._policies_dir)
        return self._policies

    def load_roles(self) -> list[Role]:
        if self._roles is None:
            self._roles = [
                Role(
                    name=name,
                    assume_role_policy=data.get("assumeRolePolicyDocument", {}),
                    description=data.get("description", ""),
                    managed_policies=tuple(data.get("managedPolicies", ())),
                    backend=self._backend,
                )
                for name, data in _read_definitions(self._roles_dir)
            ]
            logger.debug("Loaded %d roles from %s", len(self._roles), self._roles_dir)
        return self._roles

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_policies(self, names: Sequence[str] | None) -> list[Policy]:
        """Return the named policies in request order, or all when *names* is ``None``."""
        return _select(self.load_policies(), names, "policy")

    def find_roles(self, names: Sequence[str] | None) -> list[Role]:
        """Return the named roles in request order, or all when *names* is ``None``."""
        return _select(self.load_roles(), names, "role")

    # ------------------------------------------------------------------
    # Choices
    # ------------------------------------------------------------------

    def policy_choices(self) -> list[Choice]:
        return [
            Choice(value=policy.name, label=_with_description(policy.name, policy.description))
            for policy in self.load_policies()
        ]

    def role_choices(self) -> list[Choice]:
        return [
            Choice(value=role.name, label=_with_description(role.name, role.description))
            for role in self.load_roles()
        ]


def _select(items: Iterable[Any], names: Sequence[str] | None, kind: str) -> list[Any]:
    by_name = {item.name: item for item in items}
    if names is None:
        return list(by_name.values())
    missing = [name for name in names if name not in by_name]
    if missing:
        raise ConfigurationError(f"Unknown {kind}: {', '.join(missing)}")
    return [by_name[name] for name in names]
