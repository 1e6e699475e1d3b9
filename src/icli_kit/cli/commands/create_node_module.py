"""``create-node-module`` — scaffold a Node module that Lambdas can embed."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from icli_kit.cli import exit_codes
from icli_kit.cli.commands.common import identifier_validation
from icli_kit.cli.console import console, info
from icli_kit.cli.engine import Icli
from icli_kit.config import Settings
from icli_kit.core.models import CommandConfig, ParameterDefinition, QuestionTemplate
from icli_kit.infra.scaffolding import LAMBDA_CONFIG_FILE, create_node_module, list_node_modules


def build_config(settings: Settings) -> CommandConfig:
    def dependency_choices(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> list[str]:
        return list_node_modules(settings.modules_dir)

    def ask_dependencies(answers: Mapping[str, Any], cli_values: Mapping[str, Any]) -> bool:
        return not cli_values.get("dependencies") and bool(list_node_modules(settings.modules_dir))

    return CommandConfig(
        cmd="create-node-module",
        description="create a node module that can be embedded in Lambdas",
        section="Node Lambda plugin",
        parameters=(
            ParameterDefinition(
                cmd_spec="[name]",
                validate=identifier_validation,
                question=QuestionTemplate(
                    message='Choose a unique name for the module '
                    '(alphanumeric characters, "_" and "-" accepted)',
                ),
            ),
            ParameterDefinition(
                cmd_spec="-d, --dependencies <dependent-modules>",
                description="select the node modules that are dependencies of this new one",
                type="checkbox",
                choices=dependency_choices,
                validation_label="module",
                when=ask_dependencies,
                question=QuestionTemplate(
                    message="Choose the node modules that are dependencies of this new one",
                ),
            ),
        ),
    )


def execute(parameters: dict[str, Any], settings: Settings) -> int:
    """Write the module ``package.json`` and explain how to use it."""
    name = parameters["name"]
    target = create_node_module(settings.modules_dir, name, parameters.get("dependencies"))
    lambda_config = settings.lambdas_dir / "<lambda-identifier>" / LAMBDA_CONFIG_FILE
    console.print(
        f"\n  The node module {info(name)} has been created\n\n"
        f"  It is located in {info(target)} you can start to implement it there.\n\n"
        f"  To import it in an existing Lambda, edit the file {info(lambda_config)}"
        f" and add {info(name)} in the section {info('modules')}\n"
    )
    return exit_codes.SUCCESS


def register(icli: Icli, settings: Settings) -> None:
    icli.create_sub_command(
        build_config(settings),
        lambda parameters: execute(parameters, settings),
    )
