# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Integer strategies built on a binary-search value tree.

``BinarySearch`` is the canonical low/current/high shrink state machine over
Python integers. It shrinks toward zero, or toward the bound of its range
nearest zero when zero lies outside the range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shrinkwiz._internal.exceptions import ShrinkwizValidationError
from shrinkwiz.strategy.traits import Strategy, ValueTree

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner

__all__ = ["BinarySearch", "IntRange", "integers"]


def _half(interval: int) -> int:
    # Halve rounding toward zero so ``lo + half`` never overshoots ``hi``.
    return interval // 2 if interval >= 0 else -(-interval // 2)


def _magnitude_greater(lhs: int, rhs: int) -> bool:
    if lhs == 0:
        return False
    if lhs < 0:
        return lhs < rhs
    return lhs > rhs


@dataclass(eq=False)
class BinarySearch(ValueTree[int]):
    """Binary search between ``lo`` (simplest) and ``hi`` (last failing value).

    Attributes:
        lo: Simplest value not yet ruled out.
        curr: Value currently exposed.
        hi: Most recent value known to reproduce the failure.
    """

    lo: int
    curr: int
    hi: int

    @classmethod
    def new(cls, start: int) -> BinarySearch:
        """Search the whole span between zero and ``start``."""
        return cls(0, start, start)

    @classmethod
    def new_clamped(cls, lo: int, start: int, hi: int) -> BinarySearch:
        """Search toward zero without leaving the half-open range ``[lo, hi)``."""
        low = min(0, hi - 1) if start < 0 else max(0, lo)
        return cls(low, start, start)

    def _reposition(self) -> bool:
        new_mid = self.lo + _half(self.hi - self.lo)
        if new_mid == self.curr:
            return False
        self.curr = new_mid
        return True

    def current(self) -> int:
        return self.curr

    def simplify(self) -> bool:
        if not _magnitude_greater(self.hi, self.lo):
            return False
        self.hi = self.curr
        return self._reposition()

    def complicate(self) -> bool:
        # Nothing was simplified away from ``hi``; never step past it.
        if self.curr == self.hi or not _magnitude_greater(self.hi, self.lo):
            return False
        self.lo = self.curr + (-1 if self.hi < 0 else 1)
        return self._reposition()


@dataclass(frozen=True, eq=False)
class IntRange(Strategy[int]):
    """Uniform integers from the half-open range ``[start, end)``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            msg = f"empty integer range [{self.start}, {self.end})"
            raise ShrinkwizValidationError(msg)

    def new_value(self, runner: TestRunner) -> BinarySearch:
        drawn = runner.rng.randrange(self.start, self.end)
        return BinarySearch.new_clamped(self.start, drawn, self.end)


def integers(start: int, end: int) -> IntRange:
    """Return a strategy for integers ``start <= n < end``.

    Raises:
        ShrinkwizValidationError: If the range is empty.
    """
    return IntRange(start, end)
