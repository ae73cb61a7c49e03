from __future__ import annotations

from seqn_core.loop import LoopRange
from seqn_core.models import LoopBudget, StepFlags
from seqn_core.walker import walk_timeline

from tests.helpers import action, move, signal, trigger


def _times(totals) -> list[int]:
    return [item.time for item in totals.triggers]


def test_linear_walk_accumulates_everything_as_pre_loop() -> None:
    steps = [action(100), action(100), action(100)]

    totals = walk_timeline(steps, [], LoopBudget(0, 0))

    assert totals.total_duration == 300
    assert totals.pre_loop_duration == 300
    assert totals.loop_duration == 0
    assert totals.post_loop_duration == 0
    assert totals.evade_duration == 0
    assert totals.visited_steps == 3


def test_linear_walk_counts_evade_steps() -> None:
    steps = [action(80), action(80, StepFlags.EVADE_HOP), move(80)]

    totals = walk_timeline(steps, [], LoopBudget(0, 0))

    assert totals.evade_duration == 80
    assert totals.pre_loop_duration == 240


def test_linear_walk_emits_reached_triggers_unshifted() -> None:
    steps = [action(100), action(100), action(100)]
    triggers = [trigger(1, 50), signal(250), trigger(2, 400)]

    totals = walk_timeline(steps, triggers, LoopBudget(0, 0))

    assert list(totals.triggers) == [trigger(1, 50), signal(250)]


def test_budget_a_caps_loop_duration() -> None:
    steps = [
        action(50, StepFlags.LOOP_BEGIN),
        action(50),
        action(50, StepFlags.LOOP_END),
    ]

    totals = walk_timeline(steps, [], LoopBudget(2, 3))

    assert totals.loop_range == LoopRange(0, 3)
    assert totals.loop_single_duration == 150
    assert totals.loop_duration == 100
    assert totals.total_duration == 150
    assert totals.pre_loop_duration == 0
    assert totals.post_loop_duration == 0
    assert totals.iterations == 0


def test_loop_is_unrolled_until_budget_b(looped_variant) -> None:
    totals = walk_timeline(looped_variant.steps, looped_variant.triggers, LoopBudget(4, 4))

    assert totals.pre_loop_duration == 50
    assert totals.loop_duration == 200
    assert totals.post_loop_duration == 50
    assert totals.total_duration == 300
    assert totals.iterations == 1
    assert _times(totals) == [120, 220]


def test_zero_budget_visits_one_loop_step_then_leaves() -> None:
    steps = [
        action(50),
        action(50, StepFlags.LOOP_BEGIN),
        action(50, StepFlags.LOOP_END),
        action(50),
    ]

    totals = walk_timeline(steps, [], LoopBudget(0, 0))

    assert totals.pre_loop_duration == 50
    assert totals.loop_duration == 0
    assert totals.post_loop_duration == 50
    assert totals.total_duration == 150
    assert totals.visited_steps == 3


def test_single_step_loop_repeats_itself() -> None:
    steps = [action(30), action(20, StepFlags.LOOP_BEGIN | StepFlags.LOOP_END), action(40)]

    totals = walk_timeline(steps, [], LoopBudget(3, 3))

    assert totals.pre_loop_duration == 30
    assert totals.loop_duration == 60
    assert totals.post_loop_duration == 40
    assert totals.total_duration == 130
    assert totals.iterations == 2


def test_evade_duration_counts_every_loop_visit() -> None:
    steps = [
        action(10, StepFlags.LOOP_BEGIN | StepFlags.EVADE_FLY),
        action(10, StepFlags.LOOP_END),
    ]

    totals = walk_timeline(steps, [], LoopBudget(4, 4))

    assert totals.total_duration == 40
    assert totals.loop_duration == 40
    assert totals.evade_duration == 20


def test_loop_triggers_are_reemitted_per_iteration() -> None:
    steps = [action(100, StepFlags.LOOP_BEGIN), action(100, StepFlags.LOOP_END)]

    totals = walk_timeline(steps, [signal(150)], LoopBudget(6, 6))

    assert totals.total_duration == 600
    assert totals.loop_duration == 600
    assert totals.iterations == 2
    assert _times(totals) == [150, 350, 550]


def test_cursor_reset_replays_triggers_from_loop_begin() -> None:
    steps = [
        action(100),
        action(100, StepFlags.LOOP_BEGIN),
        action(100, StepFlags.LOOP_END),
    ]
    triggers = [trigger(1, 50), trigger(2, 150), trigger(3, 250)]

    totals = walk_timeline(steps, triggers, LoopBudget(4, 4))

    # The pre-loop trigger fires once, the loop body triggers once per pass.
    assert [(item.kind, item.time) for item in totals.triggers] == [
        (1, 50),
        (2, 150),
        (3, 250),
        (2, 350),
        (3, 450),
    ]


def test_post_loop_triggers_are_shifted_by_extra_loop_time(looped_variant) -> None:
    steps = looped_variant.steps

    totals = walk_timeline(steps, [signal(170)], LoopBudget(4, 4))

    assert _times(totals) == [270]


def test_post_loop_triggers_move_earlier_when_loop_is_cut_short() -> None:
    steps = [
        action(50, StepFlags.LOOP_BEGIN),
        action(50),
        action(50, StepFlags.LOOP_END),
        action(50),
    ]

    totals = walk_timeline(steps, [trigger(1, 40), trigger(2, 160)], LoopBudget(1, 1))

    assert totals.loop_duration == 50
    assert totals.post_loop_duration == 50
    assert _times(totals) == [40, 60]


def test_triggers_in_skipped_iterations_stay_pending() -> None:
    steps = [
        action(50, StepFlags.LOOP_BEGIN),
        action(50),
        action(50, StepFlags.LOOP_END),
        action(50),
    ]

    totals = walk_timeline(steps, [trigger(1, 60), trigger(1, 170)], LoopBudget(0, 1))

    assert totals.total_duration == 100
    assert totals.post_loop_duration == 50
    assert totals.triggers == ()


def test_zero_length_loop_body_does_not_divide_by_zero() -> None:
    steps = [action(10), action(0, StepFlags.LOOP_BEGIN), action(0, StepFlags.LOOP_END), action(10)]

    totals = walk_timeline(steps, [signal(5), signal(15)], LoopBudget(3, 3))

    assert totals.loop_single_duration == 0
    assert totals.loop_duration == 0
    assert totals.total_duration == 20
    assert _times(totals) == [5, 15]


def test_explicit_loop_range_is_used() -> None:
    steps = [action(10), action(10), action(10)]

    totals = walk_timeline(steps, [], LoopBudget(2, 2), loop_range=LoopRange(1, 2))

    assert totals.pre_loop_duration == 10
    assert totals.loop_duration == 20
    assert totals.post_loop_duration == 10
