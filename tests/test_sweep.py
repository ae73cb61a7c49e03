from __future__ import annotations

import math

import numpy as np
import numpy.testing as npt
import pytest

from seqn_core.models import StepFlags
from seqn_core.sweep import sweep_loop_budget

from tests.helpers import action, build_variant, signal


@pytest.fixture
def three_step_loop():
    return build_variant(
        [
            action(50, StepFlags.LOOP_BEGIN),
            action(50),
            action(50, StepFlags.LOOP_END),
        ]
    )


def test_sweep_samples_each_budget(three_step_loop) -> None:
    sweep = sweep_loop_budget(three_step_loop, range(7), 6)

    assert len(sweep) == 7
    npt.assert_array_equal(sweep.budgets, np.arange(7))
    npt.assert_allclose(sweep.loop_durations, [0, 50, 100, 150, 200, 250, 300])
    npt.assert_allclose(sweep.total_durations, np.full(7, 300.0))
    assert sweep.is_monotonic()
    assert np.isnan(sweep.execute0).all()


def test_sweep_rows_report_missing_execute_as_none(three_step_loop) -> None:
    rows = sweep_loop_budget(three_step_loop, [0, 2], 3).rows()

    assert rows[0] == {
        "budget_a": 0,
        "budget_b": 3,
        "total_duration": 150.0,
        "loop_duration": 0.0,
        "post_loop_duration": 0.0,
        "execute0": None,
        "execute1": None,
    }
    assert rows[1]["loop_duration"] == 100.0


def test_sweep_in_seconds_tracks_execute_window(looped_variant) -> None:
    sweep = sweep_loop_budget(looped_variant, [2, 4], 4, unit="seconds")

    assert sweep.unit == "seconds"
    npt.assert_allclose(sweep.loop_durations, [0.1, 0.2])
    npt.assert_allclose(sweep.execute1, [0.12, 0.22])


def test_sweep_of_missing_variant_is_all_zero() -> None:
    sweep = sweep_loop_budget(None, range(3), 2)

    npt.assert_array_equal(sweep.loop_durations, np.zeros(3))
    assert all(math.isnan(value) for value in sweep.execute1)


def test_sweep_rejects_negative_budgets(three_step_loop) -> None:
    with pytest.raises(ValueError):
        sweep_loop_budget(three_step_loop, [-1, 0], 1)


def test_empty_sweep_is_monotonic() -> None:
    sweep = sweep_loop_budget(build_variant([action(10)], [signal(5)]), [], 0)

    assert len(sweep) == 0
    assert sweep.is_monotonic()


def test_tick_rows_are_exact_integers() -> None:
    rows = sweep_loop_budget(build_variant([action(1234567)]), [0], 0).rows()

    assert rows[0]["total_duration"] == 1234567
    assert isinstance(rows[0]["total_duration"], int)
    assert rows[0]["execute0"] is None


def test_seconds_rows_stay_fractional(looped_variant) -> None:
    rows = sweep_loop_budget(looped_variant, [4], 4, unit="seconds").rows()

    assert rows[0]["execute1"] == pytest.approx(0.22)
    assert isinstance(rows[0]["loop_duration"], float)
