"""Loop budget sweeps over a single variant."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Union

import numpy as np

from seqn_core.evaluation import TICKS, Projection, TimeUnit, evaluate_timeline, resolve_time_unit
from seqn_core.models import LoopBudget, Variant

__all__ = ["BudgetSweep", "sweep_loop_budget"]


@dataclass(frozen=True, eq=False)
class BudgetSweep:
    """Timeline fields sampled for a range of ``step_budget_a`` values.

    Execute values are ``nan`` when the variant has no signal trigger.
    """

    budgets: np.ndarray
    budget_b: int
    total_durations: np.ndarray
    loop_durations: np.ndarray
    post_loop_durations: np.ndarray
    execute0: np.ndarray
    execute1: np.ndarray
    unit: str = TICKS.name

    def __len__(self) -> int:
        return int(self.budgets.size)

    def is_monotonic(self) -> bool:
        """Return ``True`` when the loop duration never shrinks as budget A grows."""

        if self.loop_durations.size < 2:
            return True
        order = np.argsort(self.budgets, kind="stable")
        return bool(np.all(np.diff(self.loop_durations[order]) >= 0))

    def rows(self) -> list[dict[str, object]]:
        """Return one mapping per budget; tick sweeps report exact integers."""

        integral = self.unit == TICKS.name
        table: list[dict[str, object]] = []
        for index in range(len(self)):
            table.append(
                {
                    "budget_a": int(self.budgets[index]),
                    "budget_b": self.budget_b,
                    "total_duration": _scalar(self.total_durations[index], integral=integral),
                    "loop_duration": _scalar(self.loop_durations[index], integral=integral),
                    "post_loop_duration": _scalar(
                        self.post_loop_durations[index], integral=integral
                    ),
                    "execute0": _scalar(self.execute0[index], integral=integral),
                    "execute1": _scalar(self.execute1[index], integral=integral),
                }
            )
        return table


def _scalar(value: np.generic, *, integral: bool) -> Optional[Union[int, float]]:
    numeric = float(value)
    if math.isnan(numeric):
        return None
    return int(numeric) if integral else numeric


def _as_float(value: Optional[Union[int, float]]) -> float:
    return math.nan if value is None else float(value)


def sweep_loop_budget(
    variant: Optional[Variant],
    budgets_a: Iterable[int],
    budget_b: int,
    *,
    unit: Union[str, TimeUnit] = TICKS,
) -> BudgetSweep:
    """Evaluate ``variant`` once per value in ``budgets_a`` with a fixed ``budget_b``."""

    resolved_unit = resolve_time_unit(unit)
    budgets = np.asarray(list(budgets_a), dtype=np.int64)
    if budgets.size and int(budgets.min()) < 0:
        raise ValueError("budgets_a must contain non-negative values")

    totals = np.zeros(budgets.size, dtype=float)
    loops = np.zeros(budgets.size, dtype=float)
    posts = np.zeros(budgets.size, dtype=float)
    first = np.full(budgets.size, math.nan, dtype=float)
    last = np.full(budgets.size, math.nan, dtype=float)

    for index, budget_a in enumerate(budgets.tolist()):
        timeline = evaluate_timeline(
            variant,
            LoopBudget(step_budget_a=budget_a, step_budget_b=budget_b),
            unit=resolved_unit,
            projection=Projection.FULL,
        )
        totals[index] = _as_float(timeline.total_duration)
        loops[index] = float(timeline.loop_duration)
        posts[index] = float(timeline.post_loop_duration)
        first[index] = _as_float(timeline.execute0)
        last[index] = _as_float(timeline.execute1)

    return BudgetSweep(
        budgets=budgets,
        budget_b=int(budget_b),
        total_durations=totals,
        loop_durations=loops,
        post_loop_durations=posts,
        execute0=first,
        execute1=last,
        unit=resolved_unit.name,
    )
