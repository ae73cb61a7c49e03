from __future__ import annotations

import argparse

import pytest

from seqn_timing.cli import sweep as sweep_command
from seqn_timing.cli import timeline as timeline_command
from seqn_timing.cli.parser import build_parser


@pytest.fixture()
def parser() -> argparse.ArgumentParser:
    return build_parser({})


def _subparser_choices(parser: argparse.ArgumentParser) -> dict[str, argparse.ArgumentParser]:
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):  # pragma: no branch
            return action.choices
    raise AssertionError("Subparser action not found")


def test_build_parser_registers_commands(parser: argparse.ArgumentParser) -> None:
    assert set(_subparser_choices(parser)) == {"timeline", "sweep"}


def test_timeline_defaults(parser: argparse.ArgumentParser) -> None:
    namespace = parser.parse_args(["timeline", "12"])

    assert namespace.handler is timeline_command.handle
    assert namespace.animation == 12
    assert namespace.variant == 0
    assert namespace.budget_a == 0
    assert namespace.budget_b == 0
    assert namespace.unit == "ticks"
    assert namespace.projection is None
    assert namespace.asset is None
    assert namespace.exports is None
    assert namespace.export_default == "text"


def test_numeric_arguments_are_decimal_with_leading_zeros(
    parser: argparse.ArgumentParser,
) -> None:
    namespace = parser.parse_args(["timeline", "010", "007", "0", "00"])

    assert (namespace.animation, namespace.variant) == (10, 7)
    assert (namespace.budget_a, namespace.budget_b) == (0, 0)


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["timeline"],
        ["timeline", "12", "0", "-1"],
        ["timeline", "twelve"],
        ["timeline", "0x10"],
        ["timeline", "12", "--unit", "minutes"],
        ["sweep", "12"],
    ],
)
def test_invalid_arguments_exit_with_usage_status(
    parser: argparse.ArgumentParser, argv: list[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parser.parse_args(argv)

    assert excinfo.value.code == 2


def test_sweep_defaults(parser: argparse.ArgumentParser) -> None:
    namespace = parser.parse_args(["sweep", "12", "--budget-b", "6"])

    assert namespace.handler is sweep_command.handle
    assert namespace.budget_b == 6
    assert namespace.max_budget == sweep_command.DEFAULT_MAX_BUDGET


def test_configuration_supplies_command_defaults() -> None:
    config = {
        "unit": "seconds",
        "export": "markdown",
        "timeline": {"export": "json"},
        "sweep": {"max_budget": 8},
        "logging": {"level": "debug", "format": "text"},
    }
    parser = build_parser(config)

    timeline = parser.parse_args(["timeline", "3"])
    sweep = parser.parse_args(["sweep", "3", "--budget-b", "1"])

    assert timeline.unit == "seconds"
    assert timeline.export_default == "json"
    assert timeline.log_level == "debug"
    assert timeline.log_format == "text"
    assert sweep.export_default == "markdown"
    assert sweep.max_budget == 8


def test_invalid_configuration_values_fall_back() -> None:
    configured = build_parser({"unit": "hours", "export": "pdf", "sweep": {"max_budget": -3}})

    timeline = configured.parse_args(["timeline", "3"])
    sweep = configured.parse_args(["sweep", "3", "--budget-b", "1"])

    assert timeline.unit == "ticks"
    assert timeline.export_default == "text"
    assert sweep.max_budget == sweep_command.DEFAULT_MAX_BUDGET
