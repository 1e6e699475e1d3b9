"""``deploy-policies`` — deploy the project's IAM managed policies."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from icli_kit.cli import exit_codes
from icli_kit.cli.commands.common import is_permission_error, print_permission_remediation
from icli_kit.cli.console import console, escape, success
from icli_kit.cli.engine import Icli
from icli_kit.config import Settings
from icli_kit.core.iam import DeployContext
from icli_kit.core.models import CommandConfig, ParameterDefinition, QuestionTemplate
from icli_kit.exceptions import DeploymentError
from icli_kit.infra.iam_repository import IamRepository

logger = logging.getLogger(__name__)

ACCESS_DENIED_CODES: frozenset[str] = frozenset({"AccessDenied"})


def build_config(settings: Settings, repository: IamRepository) -> CommandConfig:
    def ask_environment(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> bool:
        return cli_values.get("environment") is None and settings.environment is None

    def ask_stage(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> bool:
        return cli_values.get("stage") is None and settings.stage is None

    return CommandConfig(
        cmd="deploy-policies",
        description="deploy policies",
        section="IAM plugin",
        parameters=(
            ParameterDefinition(
                cmd_spec="[policy-identifiers]",
                type="checkbox",
                choices=lambda answers, cli_values: repository.policy_choices(),
                validation_label="policy",
                question=QuestionTemplate(message="Which policies do you want to deploy?"),
            ),
            ParameterDefinition(
                cmd_spec="-e, --environment <environment>",
                description="An environment identifier that will be used as a prefix",
                default="DEV",
                when=ask_environment,
                question=QuestionTemplate(
                    message="Enter an environment identifier that will be used as a prefix",
                ),
            ),
            ParameterDefinition(
                cmd_spec="-s, --stage <stage>",
                description="A stage identifier that will be used as a suffix",
                default="v0",
                when=ask_stage,
                question=QuestionTemplate(
                    message="Enter a stage identifier that will be used as a suffix",
                ),
            ),
        ),
    )


def execute(parameters: dict[str, Any], settings: Settings, repository: IamRepository) -> int:
    """Deploy the selected policies and list them."""
    context = DeployContext(
        stage=parameters.get("stage") or settings.stage or "",
        environment=parameters.get("environment") or settings.environment or "",
    )
    selected = repository.find_policies(parameters.get("policy_identifiers"))
    if not selected:
        console.print("\n    No policy selected, nothing to deploy\n")
        return exit_codes.SUCCESS
    try:
        policies = [policy.deploy(context) for policy in selected]
    except DeploymentError as exc:
        if is_permission_error(exc, ACCESS_DENIED_CODES):
            print_permission_remediation(exc)
            return exit_codes.GENERAL_ERROR
        raise

    logger.info("Deployed %d policies", len(policies))
    console.print(f"\n    {success('The following policies have been successfully deployed:')}")
    console.print("".join(f"      - {escape(policy.name)}\n" for policy in policies))
    return exit_codes.SUCCESS


def register(icli: Icli, settings: Settings, repository: IamRepository) -> None:
    icli.create_sub_command(
        build_config(settings, repository),
        lambda parameters: execute(parameters, settings, repository),
    )
