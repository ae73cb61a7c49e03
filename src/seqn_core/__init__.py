"""Core timeline computations for animation sequence variants."""

from __future__ import annotations

from seqn_core.evaluation import (
    SECONDS,
    TICKS,
    TIME_UNITS,
    AnimationTimeline,
    Projection,
    TimeUnit,
    evaluate_seconds,
    evaluate_ticks,
    evaluate_timeline,
    resolve_time_unit,
)
from seqn_core.execute import ExecuteWindow, derive_execute_window, signal_bounds
from seqn_core.loop import LoopRange, locate_loop, loop_single_duration
from seqn_core.models import (
    ActionStep,
    InvalidSequenceError,
    LoopBudget,
    MoveStep,
    Sequence,
    SequenceTable,
    Step,
    StepFlags,
    StepKind,
    Trigger,
    TriggerKind,
    Variant,
    make_step,
    step_duration,
)
from seqn_core.sweep import BudgetSweep, sweep_loop_budget
from seqn_core.walker import TimelineTotals, WalkPhase, walk_timeline

__all__ = [
    "ActionStep",
    "AnimationTimeline",
    "BudgetSweep",
    "ExecuteWindow",
    "InvalidSequenceError",
    "LoopBudget",
    "LoopRange",
    "MoveStep",
    "Projection",
    "SECONDS",
    "Sequence",
    "SequenceTable",
    "Step",
    "StepFlags",
    "StepKind",
    "TICKS",
    "TIME_UNITS",
    "TimeUnit",
    "TimelineTotals",
    "Trigger",
    "TriggerKind",
    "Variant",
    "WalkPhase",
    "derive_execute_window",
    "evaluate_seconds",
    "evaluate_ticks",
    "evaluate_timeline",
    "locate_loop",
    "loop_single_duration",
    "make_step",
    "resolve_time_unit",
    "signal_bounds",
    "step_duration",
    "sweep_loop_budget",
    "walk_timeline",
]
