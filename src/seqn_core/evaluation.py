"""Single entry point turning a variant into an :class:`AnimationTimeline`.

The walk always runs on integer ticks.  A :class:`TimeUnit` converts the
reported values and a :class:`Projection` selects which fields of the result
are populated, which covers both the tick based report (every field plus the
re-timed triggers) and the seconds based summary (durations and execute
window only).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from seqn_core.execute import ExecuteWindow, derive_execute_window
from seqn_core.loop import locate_loop, loop_single_duration
from seqn_core.models import LoopBudget, Trigger, Variant
from seqn_core.walker import TimelineTotals, walk_timeline

__all__ = [
    "AnimationTimeline",
    "Projection",
    "SECONDS",
    "TICKS",
    "TIME_UNITS",
    "TimeUnit",
    "evaluate_seconds",
    "evaluate_ticks",
    "evaluate_timeline",
    "resolve_time_unit",
]

Number = Union[int, float]
BudgetLike = Union[LoopBudget, Tuple[int, int]]


@dataclass(frozen=True)
class TimeUnit:
    """Conversion applied to every tick value reported by the evaluator."""

    name: str
    convert: Callable[[int], Number]

    def __call__(self, ticks: Optional[int]) -> Optional[Number]:
        if ticks is None:
            return None
        return self.convert(ticks)


def _ticks_to_seconds(ticks: int) -> float:
    return ticks / 1000.0


TICKS = TimeUnit("ticks", int)
SECONDS = TimeUnit("seconds", _ticks_to_seconds)

TIME_UNITS: Mapping[str, TimeUnit] = {unit.name: unit for unit in (TICKS, SECONDS)}


def resolve_time_unit(name: Union[str, TimeUnit]) -> TimeUnit:
    if isinstance(name, TimeUnit):
        return name
    try:
        return TIME_UNITS[str(name).strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown time unit '{name}'. Expected one of: {', '.join(sorted(TIME_UNITS))}"
        ) from None


class Projection(enum.Enum):
    """Fields populated in the :class:`AnimationTimeline` result."""

    FULL = "full"
    SUMMARY = "summary"


@dataclass(frozen=True)
class AnimationTimeline:
    """Timing summary of a single variant.

    ``total_duration``, ``triggers`` and ``flags`` are ``None`` for the
    summary projection.  ``execute0``/``execute1`` are ``None`` when the
    variant has no signal trigger.
    """

    pre_loop_duration: Number = 0
    loop_duration: Number = 0
    post_loop_duration: Number = 0
    evade_duration: Number = 0
    execute0: Optional[Number] = None
    execute1: Optional[Number] = None
    total_duration: Optional[Number] = None
    triggers: Optional[Tuple[Trigger, ...]] = None
    flags: Optional[int] = None
    unit: str = TICKS.name

    @property
    def has_execute_window(self) -> bool:
        return self.execute0 is not None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.total_duration is not None:
            payload["total_duration"] = self.total_duration
        payload["pre_loop_duration"] = self.pre_loop_duration
        payload["loop_duration"] = self.loop_duration
        payload["post_loop_duration"] = self.post_loop_duration
        payload["execute0"] = self.execute0
        payload["execute1"] = self.execute1
        payload["evade_duration"] = self.evade_duration
        if self.triggers is not None:
            payload["triggers"] = [
                {"type": int(trigger.kind), "flags": trigger.flags, "time": trigger.time}
                for trigger in self.triggers
            ]
        if self.flags is not None:
            payload["flags"] = self.flags
        payload["unit"] = self.unit
        return payload


def _project(
    totals: TimelineTotals,
    window: ExecuteWindow,
    *,
    flags: int,
    unit: TimeUnit,
    projection: Projection,
) -> AnimationTimeline:
    full = projection is Projection.FULL
    return AnimationTimeline(
        pre_loop_duration=unit(totals.pre_loop_duration),
        loop_duration=unit(totals.loop_duration),
        post_loop_duration=unit(totals.post_loop_duration),
        evade_duration=unit(totals.evade_duration),
        execute0=unit(window.execute0),
        execute1=unit(window.execute1),
        total_duration=unit(totals.total_duration) if full else None,
        triggers=(
            tuple(trigger.with_time(unit(trigger.time)) for trigger in totals.triggers)
            if full
            else None
        ),
        flags=flags if full else None,
        unit=unit.name,
    )


def evaluate_timeline(
    variant: Optional[Variant],
    budget: BudgetLike = (0, 0),
    *,
    unit: Union[str, TimeUnit] = TICKS,
    projection: Projection = Projection.FULL,
) -> AnimationTimeline:
    """Evaluate the timeline of ``variant`` for the given loop ``budget``.

    ``variant`` may be ``None`` when the requested animation or variant could
    not be found; a zero valued result is returned in that case.
    """

    resolved_unit = resolve_time_unit(unit)
    loop_budget = LoopBudget.from_pair(budget)
    if variant is None:
        return _project(
            TimelineTotals(),
            ExecuteWindow(),
            flags=0,
            unit=resolved_unit,
            projection=projection,
        )

    loop_range = locate_loop(variant.steps)
    totals = walk_timeline(variant.steps, variant.triggers, loop_budget, loop_range=loop_range)
    window = derive_execute_window(
        variant.triggers,
        totals,
        fixed_loop_duration=loop_single_duration(variant.steps, loop_range),
    )
    return _project(
        totals,
        window,
        flags=variant.flags,
        unit=resolved_unit,
        projection=projection,
    )


def evaluate_ticks(variant: Optional[Variant], budget: BudgetLike = (0, 0)) -> AnimationTimeline:
    return evaluate_timeline(variant, budget, unit=TICKS, projection=Projection.FULL)


def evaluate_seconds(variant: Optional[Variant], budget: BudgetLike = (0, 0)) -> AnimationTimeline:
    return evaluate_timeline(variant, budget, unit=SECONDS, projection=Projection.SUMMARY)
