"""Immutable containers describing animation variants.

Steps and triggers are produced once by an ingestion layer and only read by
the timeline evaluation helpers.  Durations and trigger times are integer
ticks (milliseconds in the asset format).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Optional, Tuple, Union

__all__ = [
    "ActionStep",
    "InvalidSequenceError",
    "LoopBudget",
    "MoveStep",
    "Sequence",
    "SequenceTable",
    "Step",
    "StepFlags",
    "StepKind",
    "Trigger",
    "TriggerKind",
    "Variant",
    "make_step",
    "step_duration",
]


class InvalidSequenceError(ValueError):
    """Raised when a step or trigger list violates an input precondition."""


class StepFlags(enum.IntFlag):
    """Behaviour bits attached to a sequence step."""

    NONE = 0
    EVADE_EXTREME = 1 << 0
    EVADE_FLY = 1 << 1
    EVADE_HOP = 1 << 2
    EVADE_SIDESTEP = 1 << 3
    LOOP_BEGIN = 1 << 4
    LOOP_END = 1 << 5

    EVADE_ALL = EVADE_EXTREME | EVADE_FLY | EVADE_HOP | EVADE_SIDESTEP


class StepKind(enum.IntEnum):
    """Tag stored alongside each step in the asset."""

    ACTION = 0
    MOVE = 1


class TriggerKind(enum.IntEnum):
    """Trigger kinds with a meaning for the timeline helpers."""

    SIGNAL = 3


def _check_duration(duration: int) -> None:
    if duration < 0:
        raise ValueError(f"Step duration must be non-negative, got {duration}")


class _StepMixin:
    flags: int

    @property
    def is_evade(self) -> bool:
        return bool(self.flags & StepFlags.EVADE_ALL)

    @property
    def is_loop_begin(self) -> bool:
        return bool(self.flags & StepFlags.LOOP_BEGIN)

    @property
    def is_loop_end(self) -> bool:
        return bool(self.flags & StepFlags.LOOP_END)


@dataclass(frozen=True)
class ActionStep(_StepMixin):
    """Step backed by an action record."""

    duration: int
    flags: int = 0

    def __post_init__(self) -> None:
        _check_duration(self.duration)

    @property
    def kind(self) -> StepKind:
        return StepKind.ACTION


@dataclass(frozen=True)
class MoveStep(_StepMixin):
    """Step backed by a move record."""

    duration: int
    flags: int = 0

    def __post_init__(self) -> None:
        _check_duration(self.duration)

    @property
    def kind(self) -> StepKind:
        return StepKind.MOVE


Step = Union[ActionStep, MoveStep]


def make_step(kind: int, duration: int, flags: int = 0) -> Step:
    """Build the step variant selected by the raw ``kind`` tag."""

    try:
        resolved = StepKind(int(kind))
    except ValueError as exc:
        raise ValueError(f"Unknown step kind: {kind!r}") from exc
    if resolved is StepKind.ACTION:
        return ActionStep(duration=int(duration), flags=int(flags))
    return MoveStep(duration=int(duration), flags=int(flags))


def step_duration(step: Step) -> int:
    return step.duration


@dataclass(frozen=True)
class Trigger:
    """Time-stamped event fired while a variant plays."""

    kind: int
    flags: int
    time: int

    @property
    def is_signal(self) -> bool:
        return self.kind == TriggerKind.SIGNAL

    def with_time(self, time: int) -> "Trigger":
        return replace(self, time=time)


@dataclass(frozen=True)
class LoopBudget:
    """Loop step budgets supplied by the caller.

    ``step_budget_a`` caps how many loop body visits contribute to the loop
    duration; ``step_budget_b`` caps how many loop body visits happen before
    the walk leaves the loop region.
    """

    step_budget_a: int = 0
    step_budget_b: int = 0

    def __post_init__(self) -> None:
        if self.step_budget_a < 0 or self.step_budget_b < 0:
            raise ValueError(
                "Loop budgets must be non-negative, got "
                f"({self.step_budget_a}, {self.step_budget_b})"
            )

    @classmethod
    def from_pair(cls, pair: Union["LoopBudget", Tuple[int, int]]) -> "LoopBudget":
        if isinstance(pair, LoopBudget):
            return pair
        budget_a, budget_b = pair
        return cls(step_budget_a=int(budget_a), step_budget_b=int(budget_b))


@dataclass(frozen=True)
class Variant:
    """Steps and triggers of a single animation variant."""

    token: int = 0
    flags: int = 0
    steps: Tuple[Step, ...] = ()
    triggers: Tuple[Trigger, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "triggers", tuple(self.triggers))
        previous: Optional[int] = None
        for index, trigger in enumerate(self.triggers):
            if previous is not None and trigger.time < previous:
                raise InvalidSequenceError(
                    f"Trigger {index} at time {trigger.time} precedes the previous "
                    f"trigger at time {previous}"
                )
            previous = trigger.time


@dataclass(frozen=True)
class Sequence:
    """Animation entry grouping the variants of one animation id."""

    animation_id: int
    variants: Tuple[Variant, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))

    def find_variant(self, token: int) -> Optional[Variant]:
        for variant in self.variants:
            if variant.token == token:
                return variant
        return None


@dataclass(frozen=True)
class SequenceTable:
    """Collection of animations decoded from an asset."""

    sequences: Tuple[Sequence, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sequences", tuple(self.sequences))

    def __iter__(self) -> Iterator[Sequence]:
        return iter(self.sequences)

    def __len__(self) -> int:
        return len(self.sequences)

    def find_sequence(self, animation_id: int) -> Optional[Sequence]:
        for sequence in self.sequences:
            if sequence.animation_id == animation_id:
                return sequence
        return None

    def find_variant(self, animation_id: int, token: int) -> Optional[Variant]:
        sequence = self.find_sequence(animation_id)
        if sequence is None:
            return None
        return sequence.find_variant(token)

    @classmethod
    def from_sequences(cls, sequences: Iterable[Sequence]) -> "SequenceTable":
        return cls(sequences=tuple(sequences))
