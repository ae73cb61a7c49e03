"""Loop region detection for sequence step lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from seqn_core.models import InvalidSequenceError, Step, step_duration

__all__ = ["LoopRange", "locate_loop", "loop_single_duration"]


@dataclass(frozen=True)
class LoopRange:
    """Half-open ``[begin, end)`` index range of the loop body."""

    begin: int = 0
    end: int = 0

    @property
    def has_loop(self) -> bool:
        return self.begin != self.end

    @property
    def length(self) -> int:
        return self.end - self.begin

    def contains(self, index: int) -> bool:
        return self.has_loop and self.begin <= index < self.end


def locate_loop(steps: Sequence[Step]) -> LoopRange:
    """Return the loop range delimited by the loop flags of ``steps``.

    The last step flagged as loop begin opens the range and the last step
    flagged as loop end closes it.  A single step may carry both flags, in
    which case it forms a one step loop on its own.  Without any loop flag
    the empty ``LoopRange(0, 0)`` is returned.
    """

    begin = 0
    end = 0
    for index, step in enumerate(steps):
        if step.is_loop_begin:
            begin = index
        if step.is_loop_end:
            end = index + 1

    if end < begin:
        raise InvalidSequenceError(
            f"Loop end index {end} precedes loop begin index {begin}"
        )
    return LoopRange(begin=begin, end=end)


def loop_single_duration(steps: Sequence[Step], loop_range: LoopRange) -> int:
    """Duration of one natural pass over the loop body."""

    if not loop_range.has_loop:
        return 0
    return sum(step_duration(steps[index]) for index in range(loop_range.begin, loop_range.end))
