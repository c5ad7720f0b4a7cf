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

"""Permutation-shrinking shuffle combinator."""

from __future__ import annotations

import copy
from collections.abc import MutableSequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from shrinkwiz._internal.exceptions import ShrinkwizTypeError
from shrinkwiz.runner import clone_rng

from .traits import Strategy, ValueTree

if TYPE_CHECKING:
    import random

    from shrinkwiz.num import BinarySearch
    from shrinkwiz.runner import TestRunner

__all__ = ["Shuffle", "ShuffleValueTree", "shuffle_target"]


def shuffle_target(value: object) -> MutableSequence[Any]:
    """Return a shallow copy of ``value`` that may be permuted in place.

    Raises:
        ShrinkwizTypeError: If ``value`` is not a mutable sequence.
    """
    if not isinstance(value, MutableSequence):
        msg = f"shuffle() needs a mutable sequence, got {type(value).__name__}"
        raise ShrinkwizTypeError(msg)
    return copy.copy(value)


def _new_dist(length: int) -> BinarySearch:
    from shrinkwiz.num import BinarySearch

    return BinarySearch.new(length)


@dataclass(eq=False)
class ShuffleValueTree(ValueTree[MutableSequence[Any]]):
    """Tree exposing a permutation of ``inner``'s value.

    Each read replays a Fisher-Yates pass from a copy of ``rng``, skipping
    swaps between positions more than ``max_swap`` apart. ``max_swap``
    starts at the value's length, so the first value is fully shuffled, and
    shrinks toward zero (the original order) before the inner value itself
    is shrunk.

    Attributes:
        inner: Tree of the sequence being shuffled.
        rng: Generator replayed on every read; never advanced.
        dist: Binary search over ``max_swap``, created on first use.
        simplifying_inner: Whether shrinking has moved on to ``inner``.
    """

    inner: ValueTree[MutableSequence[Any]]
    rng: random.Random
    dist: BinarySearch | None = field(default=None, repr=False)
    simplifying_inner: bool = False

    def _max_swap(self, default: int) -> int:
        if self.dist is None:
            self.dist = _new_dist(default)
        return self.dist.current()

    def _force_dist(self) -> BinarySearch:
        if self.dist is None:
            self.dist = _new_dist(len(shuffle_target(self.inner.current())))
        return self.dist

    def current(self) -> MutableSequence[Any]:
        value = shuffle_target(self.inner.current())
        length = len(value)
        # May exceed the length once the inner value shrinks; it only
        # filters swaps.
        max_swap = self._max_swap(length)
        if length == 0 or max_swap == 0:
            return value

        rng = clone_rng(self.rng)
        for start in range(length - 1):
            # Draw before checking the distance so every read consumes the
            # same random sequence.
            end = rng.randrange(start, length)
            if end - start <= max_swap:
                value[start], value[end] = value[end], value[start]
        return value

    def simplify(self) -> bool:
        if self.simplifying_inner:
            return self.inner.simplify()
        if self._force_dist().simplify():
            return True
        self.simplifying_inner = True
        return self.inner.simplify()

    def complicate(self) -> bool:
        if self.simplifying_inner:
            return self.inner.complicate()
        return self._force_dist().complicate()


@dataclass(frozen=True, eq=False)
class Shuffle(Strategy[MutableSequence[Any]]):
    """Strategy returned by ``Strategy.shuffle``."""

    source: Strategy[Any]

    def new_value(self, runner: TestRunner) -> ShuffleValueTree:
        inner = self.source.new_value(runner)
        target = shuffle_target(inner.current())
        return ShuffleValueTree(inner, runner.new_rng(), dist=_new_dist(len(target)))
