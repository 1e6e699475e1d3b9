"""``deploy-roles`` — deploy the project's IAM roles."""

from __future__ import annotations

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

# IAM reports AccessDenied; some STS paths report AccessDeniedException.
ACCESS_DENIED_CODES: frozenset[str] = frozenset({"AccessDenied", "AccessDeniedException"})


def build_config(settings: Settings, repository: IamRepository) -> CommandConfig:
    return CommandConfig(
        cmd="deploy-roles",
        description="deploy roles",
        section="IAM plugin",
        parameters=(
            ParameterDefinition(
                cmd_spec="[role-identifiers]",
                type="checkbox",
                choices=lambda answers, cli_values: repository.role_choices(),
                validation_label="role",
                question=QuestionTemplate(message="Which roles do you want to deploy?"),
            ),
            ParameterDefinition(
                cmd_spec="-e, --environment <environment>",
                description="An environment identifier that will be used as a prefix",
                default=settings.environment or "DEV",
                question=QuestionTemplate(
                    message="Enter an environment identifier that will be used as a prefix",
                ),
            ),
            ParameterDefinition(
                cmd_spec="-s, --stage <stage>",
                description="A stage identifier that will be used as a suffix",
                default=settings.stage or "v0",
                question=QuestionTemplate(
                    message="Enter a stage identifier that will be used as a suffix",
                ),
            ),
        ),
    )


def execute(parameters: dict[str, Any], repository: IamRepository) -> int:
    """Deploy the selected roles and list them."""
    context = DeployContext(
        stage=parameters.get("stage") or "",
        environment=parameters.get("environment") or "",
    )
    selected = repository.find_roles(parameters.get("role_identifiers"))
    if not selected:
        console.print("\n    No role selected, nothing to deploy\n")
        return exit_codes.SUCCESS
    try:
        roles = [role.deploy(context) for role in selected]
    except DeploymentError as exc:
        if is_permission_error(exc, ACCESS_DENIED_CODES):
            print_permission_remediation(exc)
            return exit_codes.GENERAL_ERROR
        raise

    console.print(f"\n    {success('The following roles have been successfully deployed:')}")
    console.print("".join(f"      - {escape(role.name)}\n" for role in roles))
    return exit_codes.SUCCESS


def register(icli: Icli, settings: Settings, repository: IamRepository) -> None:
    icli.create_sub_command(
        build_config(settings, repository),
        lambda parameters: execute(parameters, repository),
    )
