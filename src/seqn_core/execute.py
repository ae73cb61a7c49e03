"""Execute window derived from signal triggers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from seqn_core.models import Trigger, TriggerKind
from seqn_core.walker import TimelineTotals

__all__ = ["ExecuteWindow", "derive_execute_window", "signal_bounds"]


@dataclass(frozen=True)
class ExecuteWindow:
    """First and last signal time once loop repetition is accounted for.

    Both values are ``None`` when the variant carries no signal trigger.
    """

    execute0: Optional[int] = None
    execute1: Optional[int] = None

    @property
    def defined(self) -> bool:
        return self.execute0 is not None


def signal_bounds(
    triggers: Iterable[Trigger], *, signal_kind: int = TriggerKind.SIGNAL
) -> Optional[Tuple[int, int]]:
    """Return the earliest and latest nominal time of the signal triggers."""

    first: Optional[int] = None
    last: Optional[int] = None
    for trigger in triggers:
        if trigger.kind != signal_kind:
            continue
        if first is None or trigger.time < first:
            first = trigger.time
        if last is None or trigger.time > last:
            last = trigger.time
    if first is None or last is None:
        return None
    return first, last


def derive_execute_window(
    triggers: Iterable[Trigger],
    totals: TimelineTotals,
    *,
    fixed_loop_duration: Optional[int] = None,
    signal_kind: int = TriggerKind.SIGNAL,
) -> ExecuteWindow:
    """Compute ``execute0``/``execute1`` from the un-shifted ``triggers``.

    A signal that fires before the end of the first natural loop pass keeps
    its nominal time for ``execute0``; later signals are pushed back by the
    extra time the loop contributed beyond one natural pass.  ``execute1``
    only keeps its nominal time when the last signal fires inside the
    pre-loop prefix.
    """

    bounds = signal_bounds(triggers, signal_kind=signal_kind)
    if bounds is None:
        return ExecuteWindow()

    first, last = bounds
    fixed = totals.loop_single_duration if fixed_loop_duration is None else fixed_loop_duration
    extra = totals.loop_duration - fixed

    if first <= fixed + totals.pre_loop_duration:
        execute0 = first
    else:
        execute0 = extra + first

    if last < totals.pre_loop_duration:
        execute1 = last
    else:
        execute1 = extra + last

    return ExecuteWindow(execute0=execute0, execute1=execute1)
