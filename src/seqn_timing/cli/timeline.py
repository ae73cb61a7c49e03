"""Command helpers for the ``timeline`` sub-command."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Mapping

from seqn_core.evaluation import TICKS, Projection, evaluate_timeline, resolve_time_unit
from seqn_core.models import InvalidSequenceError, LoopBudget
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

PROJECTION_CHOICES = tuple(projection.value for projection in Projection)


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``timeline`` sub-command."""

    timeline_cfg = dict(config.get("timeline", {}))
    parser = subparsers.add_parser(
        "timeline",
        help="Report loop, evade and execute timings of an animation variant.",
    )
    add_selection_arguments(parser, config=config)
    parser.add_argument(
        "budget_a",
        type=non_negative_int,
        nargs="?",
        default=0,
        help="Loop steps contributing to the loop duration (default: 0).",
    )
    parser.add_argument(
        "budget_b",
        type=non_negative_int,
        nargs="?",
        default=0,
        help="Loop steps played before leaving the loop (default: 0).",
    )
    parser.add_argument(
        "--projection",
        choices=PROJECTION_CHOICES,
        default=None,
        help=(
            "Fields to report: 'full' adds the total duration, re-timed triggers and "
            "flags (default: full for ticks, summary for seconds)."
        ),
    )
    add_export_argument(
        parser,
        default=validated_export(
            timeline_cfg.get("export", config.get("export")), fallback="text"
        ),
        help_text="Exporter used to render the timeline (default: text).",
    )
    parser.set_defaults(handler=handle)


def _resolve_projection(namespace: argparse.Namespace, unit_name: str) -> Projection:
    raw = getattr(namespace, "projection", None)
    if raw:
        return Projection(raw)
    return Projection.FULL if unit_name == TICKS.name else Projection.SUMMARY


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``timeline`` command returning the rendered payload."""

    asset = resolve_asset_path(namespace, config)
    table = load_sequence_table(asset)
    animation = int(namespace.animation)
    token = int(namespace.variant)
    budget = LoopBudget(step_budget_a=int(namespace.budget_a), step_budget_b=int(namespace.budget_b))
    unit = resolve_time_unit(namespace.unit)
    projection = _resolve_projection(namespace, unit.name)

    variant = find_variant(table, animation, token)
    if variant is None:
        logger.warning(
            "Animation variant not found; reporting an empty timeline.",
            extra={
                "event": "timeline.lookup_miss",
                "animation": animation,
                "variant": token,
                "asset": str(asset),
            },
        )

    try:
        timeline = evaluate_timeline(variant, budget, unit=unit, projection=projection)
    except InvalidSequenceError as exc:
        raise CliError(
            f"Animation {animation} variant {token}: {exc}",
            category="invalid_data",
            context={"animation": animation, "variant": token, "asset": asset},
        ) from exc

    logger.info(
        "Evaluated animation timeline.",
        extra={
            "event": "timeline.evaluated",
            "animation": animation,
            "variant": token,
            "budget": [budget.step_budget_a, budget.step_budget_b],
            "unit": unit.name,
        },
    )
    payload: Dict[str, Any] = {
        "animation": animation,
        "variant": token,
        "found": variant is not None,
        "budget": [budget.step_budget_a, budget.step_budget_b],
        "timeline": timeline.as_dict(),
    }
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle"]
