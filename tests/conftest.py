"""Shared pytest fixtures and configuration for the icli-kit test suite.

Guidelines
----------
* No network access: the IAM backend is always faked or boto3 mocked.
* No terminal interaction: prompts are scripted or questionary mocked.
* Filesystem work happens under ``tmp_path`` only.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from icli_kit.config import Settings
from icli_kit.core.models import Question


class ScriptedPrompt:
    """Prompt runtime answering from a fixed mapping.

    Honours ``when`` exactly like the real runtime and records which
    questions were actually asked.
    """

    def __init__(self, answers: Mapping[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[str] = []
        self.questions: list[Question] = []

    def prompt(self, questions: Sequence[Question]) -> dict[str, Any]:
        self.questions = list(questions)
        collected: dict[str, Any] = {}
        for question in questions:
            if not question.when(collected):
                continue
            self.asked.append(question.name)
            collected[question.name] = self.answers.get(question.name)
        return collected


class RecordingBackend:
    """In-memory IAM backend recording every call."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.policies: list[str] = []
        self.roles: list[tuple[str, list[str]]] = []

    def put_policy(self, name: str, document: Mapping[str, Any], description: str) -> str:
        if self.error is not None:
            raise self.error
        self.policies.append(name)
        return f"arn:aws:iam::123456789012:policy/{name}"

    def put_role(
        self,
        name: str,
        assume_role_policy: Mapping[str, Any],
        description: str,
        policy_names: Sequence[str],
    ) -> str:
        if self.error is not None:
            raise self.error
        self.roles.append((name, list(policy_names)))
        return f"arn:aws:iam::123456789012:role/{name}"


@pytest.fixture
def make_prompt() -> type[ScriptedPrompt]:
    return ScriptedPrompt


@pytest.fixture
def make_backend() -> type[RecordingBackend]:
    return RecordingBackend


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with two policies and one role."""
    policies = tmp_path / "policies"
    roles = tmp_path / "roles"
    policies.mkdir()
    roles.mkdir()
    (policies / "reader.json").write_text(
        '{"description": "Read access", "document": {"Version": "2012-10-17", "Statement": []}}',
        encoding="utf-8",
    )
    (policies / "writer.json").write_text(
        '{"document": {"Version": "2012-10-17", "Statement": []}}',
        encoding="utf-8",
    )
    (roles / "lambda-exec.json").write_text(
        '{"description": "Lambda execution", "assumeRolePolicyDocument": {}, '
        '"managedPolicies": ["reader"]}',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def settings(project_dir: Path) -> Settings:
    return Settings(project_dir=project_dir)
