"""Builders for steps, triggers, variants and sequence table documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from seqn_core.models import (
    ActionStep,
    MoveStep,
    Step,
    StepFlags,
    Trigger,
    TriggerKind,
    Variant,
)


def _combine(flags: Iterable[StepFlags]) -> int:
    value = 0
    for flag in flags:
        value |= int(flag)
    return value


def action(duration: int, *flags: StepFlags) -> ActionStep:
    return ActionStep(duration=duration, flags=_combine(flags))


def move(duration: int, *flags: StepFlags) -> MoveStep:
    return MoveStep(duration=duration, flags=_combine(flags))


def trigger(kind: int, time: int, flags: int = 0) -> Trigger:
    return Trigger(kind=kind, flags=flags, time=time)


def signal(time: int, flags: int = 0) -> Trigger:
    return Trigger(kind=TriggerKind.SIGNAL, flags=flags, time=time)


def build_variant(
    steps: Sequence[Step],
    triggers: Sequence[Trigger] = (),
    *,
    token: int = 0,
    flags: int = 0,
) -> Variant:
    return Variant(token=token, flags=flags, steps=tuple(steps), triggers=tuple(triggers))


def variant_payload(variant: Variant) -> dict[str, Any]:
    return {
        "token": variant.token,
        "flags": variant.flags,
        "steps": [
            {"type": int(step.kind), "duration": step.duration, "flags": int(step.flags)}
            for step in variant.steps
        ],
        "triggers": [
            {"trigger": int(item.kind), "flags": item.flags, "time": item.time}
            for item in variant.triggers
        ],
    }


def sequence_table_payload(sequences: Mapping[int, Sequence[Variant]]) -> dict[str, Any]:
    return {
        "sequences": [
            {
                "sequence": animation_id,
                "animation_data": [variant_payload(variant) for variant in variants],
            }
            for animation_id, variants in sequences.items()
        ]
    }


def write_sequence_table(
    path: Path, sequences: Mapping[int, Sequence[Variant]]
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(sequence_table_payload(sequences)), encoding="utf8")
    return path
