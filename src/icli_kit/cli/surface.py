"""Bind parameter specs to argparse and read raw values back.

Values are stored as raw strings; coercion and validation happen in
:mod:`icli_kit.core.reconciliation` so that a malformed value becomes a
validation message instead of an argparse usage error.

Placeholders follow the usual conventions:

* ``<value>`` — required value, ``[value]`` — optional value.
* ``...`` suffix — variadic.
* An option without placeholder is a boolean switch.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Any

from icli_kit.core.models import ParameterKind, ParameterSpec, RawCliInput
from icli_kit.core.spec_parser import arguments_of, options_of

DEST_PREFIX = "param__"


def _dest(spec: ParameterSpec) -> str:
    # Prefixed so that command parameters never collide with global options.
    return f"{DEST_PREFIX}{spec.name}"


def _metavar(spec: ParameterSpec) -> str:
    token = spec.placeholder or spec.name
    return token.strip("[]<>").rstrip(".") or spec.name


def _add_argument(parser: argparse.ArgumentParser, spec: ParameterSpec) -> None:
    if spec.variadic:
        nargs: str | None = "+" if spec.required else "*"
    else:
        nargs = None if spec.required else "?"
    kwargs: dict[str, Any] = {"metavar": _metavar(spec), "help": spec.description or None}
    if nargs is not None:
        kwargs["nargs"] = nargs
    if nargs in ("?", "*"):
        kwargs["default"] = None
    parser.add_argument(_dest(spec), **kwargs)


def _add_option(parser: argparse.ArgumentParser, spec: ParameterSpec) -> None:
    kwargs: dict[str, Any] = {"dest": _dest(spec), "help": spec.description or None, "default": None}
    if spec.placeholder is None:
        kwargs.update(action="store_const", const=True)
    else:
        kwargs["metavar"] = _metavar(spec)
        if spec.variadic:
            kwargs["nargs"] = "+" if spec.required else "*"
        elif not spec.required:
            kwargs.update(nargs="?", const=True)
    parser.add_argument(*spec.flags, **kwargs)


def bind_parameters(parser: argparse.ArgumentParser, specs: Sequence[ParameterSpec]) -> None:
    """Declare the command-line arguments and options of *specs* on *parser*."""
    for spec in specs:
        if spec.kind is ParameterKind.ARGUMENT:
            _add_argument(parser, spec)
        elif spec.kind is ParameterKind.OPTION:
            _add_option(parser, spec)


def read_cli_input(namespace: argparse.Namespace, specs: Sequence[ParameterSpec]) -> RawCliInput:
    """Extract raw positional and option values for *specs* from *namespace*."""
    arguments = tuple(getattr(namespace, _dest(spec), None) for spec in arguments_of(specs))
    options = {spec.name: getattr(namespace, _dest(spec), None) for spec in options_of(specs)}
    return RawCliInput(arguments=arguments, options=options)
