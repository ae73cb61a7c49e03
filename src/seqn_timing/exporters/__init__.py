"""Exporter registry for seqn-timing reports."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Mapping, Protocol, Sequence

__all__ = [
    "Exporter",
    "exporters_registry",
    "json_exporter",
    "markdown_exporter",
    "text_exporter",
]

_TIMELINE_FIELDS = (
    "total_duration",
    "pre_loop_duration",
    "loop_duration",
    "post_loop_duration",
    "execute0",
    "execute1",
    "evade_duration",
)

_SWEEP_COLUMNS = (
    "budget_a",
    "budget_b",
    "total_duration",
    "loop_duration",
    "post_loop_duration",
    "execute0",
    "execute1",
)


class Exporter(Protocol):
    """Exporter callable protocol."""

    def __call__(self, results: Dict[str, Any]) -> str:  # pragma: no cover - interface only
        ...


def _normalise(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_normalise(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _normalise(item) for key, item in value.items()}
    return value


def _fmt(value: Any) -> str:
    if value is None:
        return "unset"
    if isinstance(value, float):
        if not math.isfinite(value):
            return "unset"
        # Shortest round-tripping form; whole values drop the trailing ".0".
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def json_exporter(results: Dict[str, Any]) -> str:
    payload = _normalise(results)
    return json.dumps(payload, indent=2, sort_keys=True)


def _timeline_lines(timeline: Mapping[str, Any]) -> List[str]:
    lines = [f"{name}: {_fmt(timeline[name])}" for name in _TIMELINE_FIELDS if name in timeline]
    triggers = timeline.get("triggers")
    if triggers is not None:
        lines.append("triggers:")
        for trigger in triggers:
            lines.append(
                f"\ttype: {trigger['type']} flags: {trigger['flags']} "
                f"time: {_fmt(trigger['time'])}"
            )
    if "flags" in timeline:
        lines.append(f"flags: {timeline['flags']}")
    return lines


def _sweep_rows(rows: Sequence[Mapping[str, Any]]) -> List[List[str]]:
    return [[_fmt(row.get(column)) for column in _SWEEP_COLUMNS] for row in rows]


def text_exporter(results: Dict[str, Any]) -> str:
    """Render the plain ``field: value`` report printed by the CLI."""

    lines: List[str] = []
    if "timeline" in results:
        lines.extend(_timeline_lines(results["timeline"]))
    if "sweep" in results:
        lines.append(" ".join(_SWEEP_COLUMNS))
        lines.extend(" ".join(row) for row in _sweep_rows(results["sweep"]))
    return "\n".join(lines)


def markdown_exporter(results: Dict[str, Any]) -> str:
    lines: List[str] = []
    animation = results.get("animation")
    variant = results.get("variant")
    if animation is not None:
        lines.append(f"## Animation {animation} / variant {variant}")
        lines.append("")

    timeline = results.get("timeline")
    if timeline is not None:
        lines.append("| Field | Value |")
        lines.append("| --- | --- |")
        for name in _TIMELINE_FIELDS:
            if name in timeline:
                lines.append(f"| {name} | {_fmt(timeline[name])} |")
        if "flags" in timeline:
            lines.append(f"| flags | {timeline['flags']} |")
        triggers = timeline.get("triggers")
        if triggers:
            lines.append("")
            lines.append("| Type | Flags | Time |")
            lines.append("| --- | --- | --- |")
            for trigger in triggers:
                lines.append(
                    f"| {trigger['type']} | {trigger['flags']} | {_fmt(trigger['time'])} |"
                )

    sweep = results.get("sweep")
    if sweep is not None:
        lines.append("| " + " | ".join(_SWEEP_COLUMNS) + " |")
        lines.append("| " + " | ".join("---" for _ in _SWEEP_COLUMNS) + " |")
        for row in _sweep_rows(sweep):
            lines.append("| " + " | ".join(row) + " |")

    return "\n".join(lines)


exporters_registry: Dict[str, Exporter] = {
    "text": text_exporter,
    "json": json_exporter,
    "markdown": markdown_exporter,
}
