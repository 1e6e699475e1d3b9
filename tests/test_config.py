"""Tests for project settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from icli_kit.config import Settings, load_settings
from icli_kit.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PROJECT_DIR", "ENVIRONMENT", "STAGE", "LAMBDAS_PATH", "LOG_LEVEL", "AWS_REGION"):
        monkeypatch.delenv(f"ICLI_{name}", raising=False)


class TestDefaults:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path)
        assert settings.project_dir == tmp_path
        assert settings.environment is None
        assert settings.stage is None
        assert settings.log_level == "WARNING"

    def test_directories_resolve_against_project(self, tmp_path: Path) -> None:
        settings = Settings(project_dir=tmp_path)
        assert settings.policies_dir == tmp_path / "policies"
        assert settings.roles_dir == tmp_path / "roles"
        assert settings.lambdas_dir == tmp_path / "lambdas"
        assert settings.modules_dir == tmp_path / "modules"

    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        elsewhere = tmp_path / "elsewhere"
        settings = Settings(project_dir=tmp_path / "project", lambdas_path=elsewhere)
        assert settings.lambdas_dir == elsewhere


class TestProjectFile:
    def test_values_are_read(self, tmp_path: Path) -> None:
        (tmp_path / "icli.json").write_text(
            '{"environment": "QA", "stage": "v3", "lambdas_path": "functions"}', encoding="utf-8"
        )
        settings = load_settings(tmp_path)
        assert settings.environment == "QA"
        assert settings.stage == "v3"
        assert settings.lambdas_dir == tmp_path / "functions"

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "icli.json").write_text('{"plugins": ["iam"]}', encoding="utf-8")
        assert load_settings(tmp_path).environment is None

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "icli.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="icli.json"):
            load_settings(tmp_path)

    def test_non_object(self, tmp_path: Path) -> None:
        (tmp_path / "icli.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_settings(tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "icli.json").write_text('{"stage": {"nested": true}}', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="stage") as exc_info:
            load_settings(tmp_path)
        assert exc_info.value.hint is not None


class TestEnvironment:
    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "icli.json").write_text('{"stage": "v3", "environment": "QA"}', encoding="utf-8")
        monkeypatch.setenv("ICLI_STAGE", "v9")
        settings = load_settings(tmp_path)
        assert settings.stage == "v9"
        assert settings.environment == "QA"

    def test_project_dir_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ICLI_PROJECT_DIR", str(tmp_path))
        assert load_settings().project_dir == tmp_path
