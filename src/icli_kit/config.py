"""Project configuration.

:class:`Settings` is a ``pydantic-settings`` model combining values from
the project file ``icli.json`` and ``ICLI_``-prefixed environment
variables.  Environment variables take precedence over the file; the
file takes precedence over the defaults.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from icli_kit.exceptions import ConfigurationError

PROJECT_FILE = "icli.json"
ENV_PREFIX = "ICLI_"


class Settings(BaseSettings):
    """Settings of the project the commands operate on."""

    project_dir: Path = Field(
        default_factory=Path.cwd, description="Root directory of the serverless project."
    )
    policies_path: Path = Field(Path("policies"), description="Policy definitions directory.")
    roles_path: Path = Field(Path("roles"), description="Role definitions directory.")
    lambdas_path: Path = Field(Path("lambdas"), description="Lambda functions directory.")
    modules_path: Path = Field(Path("modules"), description="Node modules directory.")
    environment: str | None = Field(
        None, description="Default environment prefix for deployed resources."
    )
    stage: str | None = Field(None, description="Default stage suffix for deployed resources.")
    aws_region: str | None = Field(None, description="AWS region used by the IAM backend.")
    log_level: str = Field("WARNING", description="Logging verbosity level.")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    def resolve(self, relative: Path) -> Path:
        """Resolve a configured directory against :attr:`project_dir`."""
        return relative if relative.is_absolute() else self.project_dir / relative

    @property
    def policies_dir(self) -> Path:
        return self.resolve(self.policies_path)

    @property
    def roles_dir(self) -> Path:
        return self.resolve(self.roles_path)

    @property
    def lambdas_dir(self) -> Path:
        return self.resolve(self.lambdas_path)

    @property
    def modules_dir(self) -> Path:
        return self.resolve(self.modules_path)


def _read_project_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object.")
    return data


def load_settings(project_dir: Path | str | None = None) -> Settings:
    """Load and validate the project settings.

    Args:
        project_dir: Project root.  Defaults to ``ICLI_PROJECT_DIR`` or
            the current working directory.

    Raises:
        ConfigurationError: If the project file or a value is invalid.
    """
    root = Path(project_dir or os.environ.get(f"{ENV_PREFIX}PROJECT_DIR") or Path.cwd())
    file_values = _read_project_file(root / PROJECT_FILE)
    # Values passed to the constructor beat the environment, so drop
    # any file value that an environment variable overrides.
    env_names = {name.upper() for name in os.environ}
    overrides = {
        key: value
        for key, value in file_values.items()
        if f"{ENV_PREFIX}{key}".upper() not in env_names
    }
    overrides["project_dir"] = root
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(
            f"Invalid configuration: {details}",
            hint=f"Check {root / PROJECT_FILE} and the {ENV_PREFIX}* environment variables.",
        ) from exc
