"""``create-node-lambda`` — scaffold a new Node.js Lambda function."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from icli_kit.cli import exit_codes
from icli_kit.cli.commands.common import identifier_validation
from icli_kit.cli.console import console, info
from icli_kit.cli.engine import Icli
from icli_kit.config import Settings
from icli_kit.core.models import Choice, CommandConfig, ParameterDefinition, QuestionTemplate
from icli_kit.infra.iam_repository import IamRepository
from icli_kit.infra.scaffolding import LambdaSpec, create_lambda, list_node_modules

MEMORY_CHOICES: tuple[Choice, ...] = tuple(
    Choice(value=str(size), label=f"{size:>4} MB") for size in range(128, 1536 + 1, 64)
)

TEMPLATE_CHOICES: tuple[Choice, ...] = (
    Choice(
        value="none",
        label="none - Do not add a specific template to the Lambda, you will write a custom one",
    ),
    Choice(
        value="api-endpoints",
        label="api-endpoints - With this template, the Lambda will execute endpoints "
        "defined by the api-gateway plugin",
    ),
)

MANUAL_ROLE = Choice(value="", label="Enter value manually")


def build_config(settings: Settings, repository: IamRepository) -> CommandConfig:
    def module_choices(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> list[str]:
        return list_node_modules(settings.modules_dir)

    def role_choices(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> list[Choice]:
        return [*repository.role_choices(), MANUAL_ROLE]

    def ask_modules(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> bool:
        return not cli_values.get("modules") and bool(list_node_modules(settings.modules_dir))

    def ask_role_manually(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> bool:
        return not answers.get("role") and not cli_values.get("role")

    return CommandConfig(
        cmd="create-node-lambda",
        description="create a new lambda",
        section="Node Lambda plugin",
        parameters=(
            ParameterDefinition(
                cmd_spec="[identifier]",
                validate=identifier_validation,
                question=QuestionTemplate(
                    message='Choose a unique identifier for the Lambda '
                    '(alphanumeric characters, "_" and "-" accepted)',
                ),
            ),
            ParameterDefinition(
                cmd_spec="-t, --timeout <timeout>",
                description="select the timeout (in seconds)",
                type="integer",
                question=QuestionTemplate(message="Choose the timeout (in seconds)"),
            ),
            ParameterDefinition(
                cmd_spec="-m, --memory <memory>",
                description="select the memory (in MB)",
                type="list",
                choices=MEMORY_CHOICES,
                validation_label="memory size",
                question=QuestionTemplate(message="Choose the memory"),
            ),
            ParameterDefinition(
                cmd_spec="--modules <modules>",
                description="select the modules that must be included in the Lambda",
                type="checkbox",
                choices=module_choices,
                validation_label="module",
                when=ask_modules,
                question=QuestionTemplate(
                    message="Choose the node packages that must be included in the Lambda",
                ),
            ),
            ParameterDefinition(
                cmd_spec="-r, --role <role>",
                description="select the execution role",
                type="list",
                choices=role_choices,
                validation_label="role",
                question=QuestionTemplate(message="Choose the execution role"),
            ),
            ParameterDefinition(
                name="role_manually",
                when=ask_role_manually,
                question=QuestionTemplate(
                    message="Enter a valid IAM role that will be used to execute the Lambda function",
                ),
            ),
            ParameterDefinition(
                cmd_spec="--template <template>",
                description="select a template to initialise the Lambda function (aka handler)",
                type="list",
                choices=TEMPLATE_CHOICES,
                default=TEMPLATE_CHOICES[0].value,
                validation_label="template",
                question=QuestionTemplate(
                    message="Select a template to initialise the Lambda function (aka handler)",
                ),
            ),
        ),
    )


def execute(parameters: dict[str, Any], settings: Settings) -> int:
    """Write the Lambda configuration and copy its handler templates."""
    role = parameters.get("role") or parameters.get("role_manually")
    spec = LambdaSpec(
        identifier=parameters["identifier"],
        timeout=parameters.get("timeout"),
        memory=parameters.get("memory"),
        role=role,
        template=parameters.get("template") or TEMPLATE_CHOICES[0].value,
        modules=tuple(parameters.get("modules") or ()),
    )
    target = create_lambda(settings.lambdas_dir, spec)
    console.print(
        f"\n  The Lambda {info(spec.identifier)} has been created\n\n"
        f"  Its configuration and its handler function are available in {info(target)}\n"
    )
    return exit_codes.SUCCESS


def register(icli: Icli, settings: Settings, repository: IamRepository) -> None:
    icli.create_sub_command(
        build_config(settings, repository),
        lambda parameters: execute(parameters, settings),
    )
