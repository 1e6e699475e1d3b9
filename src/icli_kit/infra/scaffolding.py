"""Infrastructure: write Lambda and Node module artifacts to disk.

Each artifact is a directory named after its identifier.  Directory
creation is recursive and idempotent; existing files are overwritten.
Every ``OSError`` is re-raised as
:class:`~icli_kit.exceptions.ScaffoldError`.
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

from icli_kit.exceptions import ScaffoldError

logger = logging.getLogger(__name__)

LAMBDA_CONFIG_FILE = "config.json"
LAMBDA_HANDLER_FILE = "lambda.js"
LAMBDA_EXEC_FILE = "exec.js"
MODULE_PACKAGE_FILE = "package.json"
PACKAGE_NAMESPACE = "x-lager"
EXEC_TEMPLATES: tuple[str, ...] = ("none", "api-endpoints")


@dataclass(frozen=True, slots=True)
class LambdaSpec:
    """Values written to a Lambda ``config.json``."""

    identifier: str
    timeout: int | None = None
    memory: str | None = None
    role: str | None = None
    template: str = "none"
    modules: Sequence[str] = field(default_factory=tuple)

    def to_config(self) -> dict[str, Any]:
        return {
            "params": {
                "Timeout": self.timeout,
                "MemorySize": self.memory,
                "Role": self.role,
            },
            "includeEndpoints": self.template == "api-endpoints",
            "modules": list(self.modules),
        }


def _write_json(path: Path, data: Any) -> None:
    try:
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ScaffoldError(f"Cannot write {path}: {exc}") from exc


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ScaffoldError(f"Cannot create directory {path}: {exc}") from exc


def _copy_template(relative: str, destination: Path) -> None:
    source = resources.files("icli_kit").joinpath("templates", *relative.split("/"))
    try:
        with resources.as_file(source) as source_path:
            shutil.copyfile(source_path, destination)
    except OSError as exc:
        raise ScaffoldError(f"Cannot copy template {relative} to {destination}: {exc}") from exc


# ---------------------------------------------------------------------------
# Lambdas
# ---------------------------------------------------------------------------

def create_lambda(lambdas_dir: Path, spec: LambdaSpec) -> Path:
    """Create ``<lambdas_dir>/<identifier>`` and return its path.

    Writes ``config.json``, the fixed handler ``lambda.js`` and the
    execution file chosen from :data:`EXEC_TEMPLATES` as ``exec.js``.
    """
    if spec.template not in EXEC_TEMPLATES:
        raise ScaffoldError(
            f"Unknown Lambda template: {spec.template}",
            hint=f"Choose one of: {', '.join(EXEC_TEMPLATES)}",
        )
    target = lambdas_dir / spec.identifier
    _make_dir(target)
    _write_json(target / LAMBDA_CONFIG_FILE, spec.to_config())
    _copy_template(LAMBDA_HANDLER_FILE, target / LAMBDA_HANDLER_FILE)
    _copy_template(f"exec-files/{spec.template}.js", target / LAMBDA_EXEC_FILE)
    logger.info("Created Lambda %s in %s", spec.identifier, target)
    return target


# ---------------------------------------------------------------------------
# Node modules
# ---------------------------------------------------------------------------

def create_node_module(modules_dir: Path, name: str, dependencies: Sequence[str] | None) -> Path:
    """Create ``<modules_dir>/<name>/package.json`` and return the directory."""
    target = modules_dir / name
    _make_dir(target)
    _write_json(
        target / MODULE_PACKAGE_FILE,
        {PACKAGE_NAMESPACE: {"dependencies": list(dependencies or [])}},
    )
    logger.info("Created node module %s in %s", name, target)
    return target


def list_node_modules(modules_dir: Path) -> list[str]:
    """Return the names of module directories holding a ``package.json``."""
    if not modules_dir.is_dir():
        return []
    return sorted(
        child.name
        for child in modules_dir.iterdir()
        if child.is_dir() and (child / MODULE_PACKAGE_FILE).is_file()
    )
