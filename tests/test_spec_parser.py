"""Tests for parameter spec derivation."""

from __future__ import annotations

from typing import Any

import pytest

from icli_kit.core.models import (
    Choice,
    Dynamic,
    ParameterDefinition,
    ParameterKind,
    QuestionTemplate,
    Static,
)
from icli_kit.core.spec_parser import (
    argument_name,
    arguments_of,
    derive_parameter,
    derive_parameters,
    option_name,
    options_of,
    split_flags,
    to_snake_case,
)
from icli_kit.core.validation import coerce_comma_list, coerce_integer
from icli_kit.exceptions import ParameterSpecError


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _param(**overrides: Any) -> ParameterDefinition:
    defaults: dict[str, Any] = {"question": QuestionTemplate(message="?")}
    defaults.update(overrides)
    return ParameterDefinition(**defaults)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

class TestToSnakeCase:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("--dry-run", "dry_run"),
            ("dryRun", "dry_run"),
            ("[dry_run]", "dry_run"),
            ("[policy-identifiers]", "policy_identifiers"),
            ("<name>", "name"),
            ("timeout", "timeout"),
        ],
    )
    def test_tokens(self, token: str, expected: str) -> None:
        assert to_snake_case(token) == expected


class TestOptionName:
    def test_short_flag_dropped_when_long_flag_follows(self) -> None:
        assert option_name("-e, --environment <environment>") == "environment"

    def test_long_flag_only(self) -> None:
        assert option_name("--environment <environment>") == "environment"

    def test_placeholder_name_is_ignored(self) -> None:
        assert option_name("-d, --dependencies <dependent-modules>") == "dependencies"

    def test_short_flag_kept_when_placeholder_follows(self) -> None:
        assert option_name("-m <memory>") == "m"

    def test_short_flag_alone(self) -> None:
        assert option_name("-v") == "v"

    def test_switch_with_dashes(self) -> None:
        assert option_name("--dry-run") == "dry_run"

    def test_pipe_separator(self) -> None:
        assert option_name("-m|--memory <memory>") == "memory"


class TestArgumentName:
    def test_optional_argument(self) -> None:
        assert argument_name("[policy-identifiers]") == "policy_identifiers"

    def test_required_argument(self) -> None:
        assert argument_name("<name>") == "name"

    def test_variadic_argument(self) -> None:
        assert argument_name("[files...]") == "files"


def test_split_flags() -> None:
    assert split_flags("-e, --environment <env>") == ["-e", "--environment", "<env>"]


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------

class TestDeriveParameter:
    def test_option_flags_and_placeholder(self) -> None:
        spec = derive_parameter(_param(cmd_spec="-e, --environment <environment>"))
        assert spec.kind is ParameterKind.OPTION
        assert spec.flags == ("-e", "--environment")
        assert spec.placeholder == "<environment>"
        assert spec.required

    def test_switch_has_no_placeholder(self) -> None:
        spec = derive_parameter(_param(cmd_spec="--force"))
        assert spec.placeholder is None
        assert not spec.required

    def test_optional_argument(self) -> None:
        spec = derive_parameter(_param(cmd_spec="[identifier]"))
        assert spec.kind is ParameterKind.ARGUMENT
        assert spec.name == "identifier"
        assert not spec.required
        assert not spec.variadic

    def test_required_variadic_argument(self) -> None:
        spec = derive_parameter(_param(cmd_spec="<files...>"))
        assert spec.required
        assert spec.variadic

    def test_prompt_only_uses_name(self) -> None:
        spec = derive_parameter(_param(name="role_manually"))
        assert spec.kind is ParameterKind.PROMPT
        assert spec.name == "role_manually"

    def test_prompt_only_falls_back_to_question_name(self) -> None:
        spec = derive_parameter(_param(question=QuestionTemplate(message="?", name="confirm_it")))
        assert spec.name == "confirm_it"

    def test_prompt_only_without_name_raises(self) -> None:
        with pytest.raises(ParameterSpecError):
            derive_parameter(_param())

    def test_blank_cmd_spec_is_prompt_only(self) -> None:
        spec = derive_parameter(_param(cmd_spec="  ", name="extra"))
        assert spec.kind is ParameterKind.PROMPT


class TestEnrichment:
    def test_list_type_gets_list_validation(self) -> None:
        spec = derive_parameter(_param(cmd_spec="[color]", type="list", choices=["red", "blue"]))
        assert spec.validate is not None
        assert spec.validate("red", {}, {}) is True
        assert spec.validate("green", {}, {}) != True  # noqa: E712

    def test_checkbox_type_gets_list_validation_and_coercion(self) -> None:
        spec = derive_parameter(_param(cmd_spec="[items]", type="checkbox", choices=["x"]))
        assert spec.validate is not None
        assert spec.coercion is coerce_comma_list

    def test_custom_validator_is_kept(self) -> None:
        def validate(value: Any, answers: Any, cli_values: Any) -> bool:
            return True

        spec = derive_parameter(_param(cmd_spec="[color]", type="list", choices=["red"], validate=validate))
        assert spec.validate is validate

    def test_input_type_has_no_validator(self) -> None:
        spec = derive_parameter(_param(cmd_spec="[name]"))
        assert spec.validate is None
        assert spec.coercion is None

    def test_integer_coercion(self) -> None:
        spec = derive_parameter(_param(cmd_spec="-t, --timeout <timeout>", type="integer"))
        assert spec.coercion is coerce_integer

    def test_custom_coercion_is_kept(self) -> None:
        spec = derive_parameter(_param(cmd_spec="[size]", type="integer", coercion=float))
        assert spec.coercion is float

    def test_static_choices(self) -> None:
        spec = derive_parameter(_param(cmd_spec="[color]", type="list", choices=["red"]))
        assert spec.choices == Static((Choice("red"),))

    def test_callable_choices_are_dynamic(self) -> None:
        def source(answers: Any, cli_values: Any) -> list[str]:
            return ["a"]

        spec = derive_parameter(_param(cmd_spec="[letter]", type="list", choices=source))
        assert spec.choices == Dynamic(source)

    def test_definition_is_not_mutated(self) -> None:
        definition = _param(cmd_spec="[color]", type="list", choices=["red"])
        derive_parameter(definition)
        assert definition.validate is None
        assert definition.coercion is None
        assert definition.name is None


class TestDeriveParameters:
    def _definitions(self) -> tuple[ParameterDefinition, ...]:
        return (
            _param(cmd_spec="[identifier]"),
            _param(cmd_spec="-t, --timeout <timeout>", type="integer"),
            _param(cmd_spec="-m, --memory <memory>", type="list", choices=["128"]),
            _param(name="role_manually"),
        )

    def test_order_is_preserved(self) -> None:
        specs = derive_parameters(self._definitions())
        assert [spec.name for spec in specs] == ["identifier", "timeout", "memory", "role_manually"]

    def test_running_twice_is_stable(self) -> None:
        first = derive_parameters(self._definitions())
        second = derive_parameters(first_spec.definition for first_spec in first)
        assert [(s.name, s.kind, s.flags, s.placeholder, s.choices, s.coercion) for s in first] == [
            (s.name, s.kind, s.flags, s.placeholder, s.choices, s.coercion) for s in second
        ]

    def test_generated_validators_behave_the_same(self) -> None:
        first = derive_parameters(self._definitions())
        second = derive_parameters(self._definitions())
        for left, right in zip(first, second):
            assert (left.validate is None) == (right.validate is None)
            if left.validate is None:
                continue
            for value in ("128", "256", ["128", "bad"]):
                assert left.validate(value, {}, {}) == right.validate(value, {}, {})

    def test_duplicate_names_raise(self) -> None:
        with pytest.raises(ParameterSpecError, match="environment"):
            derive_parameters(
                [
                    _param(cmd_spec="-e, --environment <environment>"),
                    _param(cmd_spec="[environment]"),
                ]
            )

    def test_arguments_and_options_filters(self) -> None:
        specs = derive_parameters(self._definitions())
        assert [spec.name for spec in arguments_of(specs)] == ["identifier"]
        assert [spec.name for spec in options_of(specs)] == ["timeout", "memory"]
