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

"""Bounded-depth generation of recursive structures."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Final, TypeVar

from shrinkwiz.probability import U32_MAX

from .traits import BoxedStrategy, Strategy, StrategyLike, ValueTree, as_strategy
from .unions import Union

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner

T = TypeVar("T")

MAX_BRANCH_PROBABILITY: Final[float] = 0.9

__all__ = ["MAX_BRANCH_PROBABILITY", "Recursive", "branch_probabilities"]


def branch_probabilities(depth: int, desired_size: int, expected_branch_size: int) -> list[float]:
    """Return the chance of branching at each level, outermost first.

    With ``K = expected_branch_size`` the expected number of items is
    ``K * sum(p_l * K**l)``. Choosing ``p_l = desired_size / (2K)**(l+1)``
    makes that sum converge on ``desired_size``, counting from ``l = 1``
    because the outermost level branches with certainty in the estimate.
    The values are not clamped here.
    """
    probabilities: list[float] = []
    k2 = expected_branch_size * 2
    for _ in range(depth):
        probabilities.append(desired_size / k2 if k2 else float("inf"))
        k2 *= expected_branch_size * 2
    return probabilities


@dataclass(frozen=True, eq=False)
class Recursive(Strategy[T]):
    """Strategy returned by ``Strategy.recursive``.

    The depth-indexed family of strategies is built once, leaves first, the
    first time a value is requested and then shared by every draw.
    """

    base: BoxedStrategy[T]
    depth: int
    desired_size: int
    expected_branch_size: int
    recurse: Callable[[Strategy[T]], StrategyLike[T]]

    @cached_property
    def expanded(self) -> BoxedStrategy[T]:
        """The outermost strategy of the family, mixing leaves and branches."""
        strategy: BoxedStrategy[T] = self.base
        probabilities = branch_probabilities(self.depth, self.desired_size, self.expected_branch_size)
        while probabilities:
            probability = min(probabilities.pop(), MAX_BRANCH_PROBABILITY)
            recursed = as_strategy(self.recurse(strategy)).boxed()
            strategy = Union.new_weighted(
                [
                    (int(U32_MAX * (1.0 - probability)), self.base),
                    (int(U32_MAX * probability), recursed),
                ],
            ).sboxed()
        return strategy

    def new_value(self, runner: TestRunner) -> ValueTree[T]:
        return self.expanded.new_value(runner)
