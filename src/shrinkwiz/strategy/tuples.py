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

"""Fixed-size tuple composition of strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .traits import Strategy, StrategyLike, ValueTree, as_strategy

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner

__all__ = ["TupleStrategy", "TupleValueTree", "tuples"]


@dataclass(eq=False)
class TupleValueTree(ValueTree[tuple[Any, ...]]):
    """Shrinks its elements left to right.

    Element ``shrinker`` is simplified until it cannot be, then shrinking
    moves on to the next element. ``complicate()`` only touches the element
    simplified last and gives up for good once that element cannot be
    complicated any further.
    """

    trees: list[ValueTree[Any]]
    shrinker: int = 0
    prev_shrinker: int | None = field(default=None, repr=False)

    def current(self) -> tuple[Any, ...]:
        return tuple(tree.current() for tree in self.trees)

    def simplify(self) -> bool:
        while self.shrinker < len(self.trees):
            if self.trees[self.shrinker].simplify():
                self.prev_shrinker = self.shrinker
                return True
            self.shrinker += 1
        return False

    def complicate(self) -> bool:
        if self.prev_shrinker is None:
            return False
        if self.trees[self.prev_shrinker].complicate():
            # The element can still change, so simplify it again next time.
            self.shrinker = self.prev_shrinker
            return True
        self.prev_shrinker = None
        return False


@dataclass(frozen=True, eq=False)
class TupleStrategy(Strategy[tuple[Any, ...]]):
    """Strategy producing one value from each of ``strategies`` as a tuple."""

    strategies: tuple[Strategy[Any], ...]

    def new_value(self, runner: TestRunner) -> TupleValueTree:
        return TupleValueTree([strategy.new_value(runner) for strategy in self.strategies])


def tuples(*strategies: StrategyLike[Any]) -> TupleStrategy:
    """Return a strategy for tuples drawn element-wise from ``strategies``."""
    return TupleStrategy(tuple(as_strategy(strategy) for strategy in strategies))
