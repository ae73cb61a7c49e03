"""Timeline walk over a step list with an optional loop region.

The walk visits step indices in playback order: the pre-loop prefix once,
the loop body repeatedly until the caller supplied budget ends the loop, and
finally the post-loop suffix.  Durations are accumulated into per-phase
buckets while a cursor over the time ordered trigger list emits every trigger
whose (possibly loop shifted) time has been reached.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from seqn_core.loop import LoopRange, locate_loop, loop_single_duration
from seqn_core.models import LoopBudget, Step, Trigger, step_duration

__all__ = ["TimelineTotals", "WalkPhase", "walk_timeline"]


class WalkPhase(enum.Enum):
    """Region of the step list the walk is currently visiting."""

    PRE_LOOP = "pre_loop"
    IN_LOOP = "in_loop"
    POST_LOOP = "post_loop"


@dataclass(frozen=True)
class TimelineTotals:
    """Raw walk result expressed in integer ticks."""

    total_duration: int = 0
    pre_loop_duration: int = 0
    loop_duration: int = 0
    post_loop_duration: int = 0
    evade_duration: int = 0
    loop_single_duration: int = 0
    loop_range: LoopRange = field(default_factory=LoopRange)
    iterations: int = 0
    visited_steps: int = 0
    triggers: Tuple[Trigger, ...] = ()


class _TriggerCursor:
    """Monotonic cursor emitting triggers once their time has elapsed."""

    __slots__ = ("_triggers", "index", "loop_start", "emitted")

    def __init__(self, triggers: Sequence[Trigger]) -> None:
        self._triggers = triggers
        self.index = 0
        self.loop_start = 0
        self.emitted: List[Trigger] = []

    def advance(self, elapsed: int, shift: int = 0) -> None:
        while self.index < len(self._triggers):
            trigger = self._triggers[self.index]
            time = trigger.time + shift
            # A negative time lies in loop iterations that were never played.
            if time < 0 or time > elapsed:
                break
            self.emitted.append(trigger.with_time(time))
            self.index += 1

    def mark_loop_start(self) -> None:
        self.loop_start = self.index

    def rewind_to_loop_start(self) -> None:
        self.index = self.loop_start


def _linear_walk(
    steps: Sequence[Step], triggers: Sequence[Trigger], loop_range: LoopRange
) -> TimelineTotals:
    cursor = _TriggerCursor(triggers)
    total = 0
    evade = 0
    for step in steps:
        duration = step_duration(step)
        total += duration
        if step.is_evade:
            evade += duration
        cursor.advance(total)
    return TimelineTotals(
        total_duration=total,
        pre_loop_duration=total,
        evade_duration=evade,
        loop_range=loop_range,
        visited_steps=len(steps),
        triggers=tuple(cursor.emitted),
    )


class _LoopWalk:
    """State machine unrolling the loop body according to a :class:`LoopBudget`.

    ``phase`` only changes on explicit transitions: ``PRE_LOOP`` becomes
    ``IN_LOOP`` when the walk reaches the loop begin index, ``IN_LOOP`` wraps
    onto itself after the last body index (one more completed iteration) and
    becomes ``POST_LOOP`` once budget B has been consumed.  Every body visit
    advances budget B until it is exhausted, which bounds the walk.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        triggers: Sequence[Trigger],
        budget: LoopBudget,
        loop_range: LoopRange,
    ) -> None:
        self._steps = steps
        self._budget = budget
        self._range = loop_range
        self._single = loop_single_duration(steps, loop_range)
        self._cursor = _TriggerCursor(triggers)

        self.index = 0
        self.phase = WalkPhase.IN_LOOP if loop_range.begin == 0 else WalkPhase.PRE_LOOP
        self.iterations = 0
        self.visited = 0
        self.count_a = 0
        self.count_b = 0

        self.total = 0
        self.pre_loop = 0
        self.loop = 0
        self.post_loop = 0
        self.evade = 0

    def run(self) -> TimelineTotals:
        while self.index < len(self._steps):
            self._visit(self._steps[self.index])
            self._advance()
        return TimelineTotals(
            total_duration=self.total,
            pre_loop_duration=self.pre_loop,
            loop_duration=self.loop,
            post_loop_duration=self.post_loop,
            evade_duration=self.evade,
            loop_single_duration=self._single,
            loop_range=self._range,
            iterations=self.iterations,
            visited_steps=self.visited,
            triggers=tuple(self._cursor.emitted),
        )

    def _trigger_shift(self) -> int:
        if self.phase is WalkPhase.POST_LOOP:
            return self.loop - self._single
        if self.phase is WalkPhase.IN_LOOP and self._single > 0:
            return (self.loop // self._single) * self._single
        return 0

    def _visit(self, step: Step) -> None:
        duration = step_duration(step)
        self.visited += 1
        self.total += duration
        if step.is_evade:
            self.evade += duration
        if self.phase is WalkPhase.PRE_LOOP:
            self.pre_loop += duration
        elif self.phase is WalkPhase.POST_LOOP:
            self.post_loop += duration

        self._cursor.advance(self.total, self._trigger_shift())

        if self.phase is WalkPhase.IN_LOOP:
            if self.count_a < self._budget.step_budget_a:
                self.loop += duration
                self.count_a += 1
            if self.count_b < self._budget.step_budget_b:
                self.count_b += 1

    def _advance(self) -> None:
        if self.phase is WalkPhase.IN_LOOP:
            if self.count_b == self._budget.step_budget_b:
                self.index = self._range.end
                self.phase = WalkPhase.POST_LOOP
                return
            if self.index == self._range.end - 1:
                self.index = self._range.begin
                self.iterations += 1
                self._cursor.rewind_to_loop_start()
                return

        self.index += 1
        if self.phase is WalkPhase.PRE_LOOP and self.index == self._range.begin:
            self.phase = WalkPhase.IN_LOOP
            self._cursor.mark_loop_start()


def walk_timeline(
    steps: Sequence[Step],
    triggers: Sequence[Trigger],
    budget: LoopBudget,
    *,
    loop_range: Optional[LoopRange] = None,
) -> TimelineTotals:
    """Walk ``steps`` and return the accumulated :class:`TimelineTotals`.

    ``triggers`` must be ordered by time.  Re-timed triggers are emitted in
    walk order; triggers inside the loop body are emitted again for each
    modelled iteration.  ``loop_range`` defaults to :func:`locate_loop`.
    """

    resolved = loop_range if loop_range is not None else locate_loop(steps)
    if not resolved.has_loop:
        return _linear_walk(steps, triggers, resolved)
    return _LoopWalk(steps, triggers, budget, resolved).run()
