"""Command helpers for the ``sweep`` sub-command."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Mapping

from seqn_core.models import InvalidSequenceError
from seqn_core.sweep import sweep_loop_budget
from seqn_timing.ingestion import find_variant

from .common import (
    add_export_argument,
    add_selection_arguments,
    non_negative_int,
    render_payload,
    resolve_asset_path,
    resolve_exports,
    validated_export,
)
from .errors import CliError
from .io import load_sequence_table

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUDGET = 16


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``sweep`` sub-command."""

    sweep_cfg = dict(config.get("sweep", {}))
    try:
        max_budget_default = int(sweep_cfg.get("max_budget", DEFAULT_MAX_BUDGET))
    except (TypeError, ValueError):
        max_budget_default = DEFAULT_MAX_BUDGET
    if max_budget_default < 0:
        max_budget_default = DEFAULT_MAX_BUDGET

    parser = subparsers.add_parser(
        "sweep",
        help="Tabulate loop and execute timings for a range of loop budgets.",
    )
    add_selection_arguments(parser, config=config)
    parser.add_argument(
        "--budget-b",
        dest="budget_b",
        type=non_negative_int,
        required=True,
        help="Loop steps played before leaving the loop, kept fixed across the sweep.",
    )
    parser.add_argument(
        "--max-budget",
        dest="max_budget",
        type=non_negative_int,
        default=max_budget_default,
        help=f"Largest budget A evaluated, starting from 0 (default: {max_budget_default}).",
    )
    add_export_argument(
        parser,
        default=validated_export(sweep_cfg.get("export", config.get("export")), fallback="text"),
        help_text="Exporter used to render the sweep table (default: text).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``sweep`` command returning the rendered payload."""

    asset = resolve_asset_path(namespace, config)
    table = load_sequence_table(asset)
    animation = int(namespace.animation)
    token = int(namespace.variant)
    variant = find_variant(table, animation, token)
    if variant is None:
        logger.warning(
            "Animation variant not found; sweeping an empty timeline.",
            extra={
                "event": "sweep.lookup_miss",
                "animation": animation,
                "variant": token,
                "asset": str(asset),
            },
        )

    try:
        sweep = sweep_loop_budget(
            variant,
            range(int(namespace.max_budget) + 1),
            int(namespace.budget_b),
            unit=namespace.unit,
        )
    except InvalidSequenceError as exc:
        raise CliError(
            f"Animation {animation} variant {token}: {exc}",
            category="invalid_data",
            context={"animation": animation, "variant": token, "asset": asset},
        ) from exc

    payload: Dict[str, Any] = {
        "animation": animation,
        "variant": token,
        "unit": sweep.unit,
        "monotonic": sweep.is_monotonic(),
        "sweep": sweep.rows(),
    }
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle", "DEFAULT_MAX_BUDGET"]
