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

"""Dependent and independent flat-map combinators.

``Flatten`` keeps the relationship between an input value and the strategy
derived from it while both shrink. ``IndFlatten`` and ``IndFlattenMap`` are
cheaper variants that give up on that relationship.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from shrinkwiz._internal.exceptions import StrategyAbortError

from .fuse import Fuse
from .map import MapValueTree
from .traits import Strategy, StrategyLike, ValueTree, as_strategy
from .tuples import TupleValueTree

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["Flatten", "FlattenValueTree", "IndFlatten", "IndFlattenMap"]


@dataclass(eq=False)
class FlattenValueTree(ValueTree[U]):
    """Value tree produced by ``Strategy.flat_map``.

    Attributes:
        meta: Fused tree whose current value is the derived strategy.
        current_tree: Fused tree drawn from the derived strategy.
        final_complication: Derived tree that was active before ``meta`` last
            simplified; restored when every other complication is exhausted.
        runner: Private runner used to regenerate derived trees. It shares
            the regeneration counter of the runner that created the tree.
        complicate_regen_remaining: Fresh derived values ``complicate()`` may
            still try before complicating the existing trees.
    """

    meta: Fuse[Strategy[U]]
    current_tree: Fuse[U]
    runner: TestRunner
    final_complication: Fuse[U] | None = field(default=None, repr=False)
    complicate_regen_remaining: int = 0

    @classmethod
    def create(cls, runner: TestRunner, meta: ValueTree[Strategy[U]]) -> FlattenValueTree[U]:
        """Draw the first derived tree from ``meta``'s current strategy.

        Raises:
            StrategyAbortError: If the derived strategy cannot produce a value.
        """
        current = meta.current().new_value(runner)
        return cls(meta=Fuse(meta), current_tree=Fuse(current), runner=runner)

    def current(self) -> U:
        return self.current_tree.current()

    def _regenerate(self) -> Fuse[U] | None:
        try:
            return Fuse(self.meta.current().new_value(self.runner))
        except StrategyAbortError:
            return None

    def simplify(self) -> bool:
        self.complicate_regen_remaining = 0
        if self.current_tree.simplify():
            # The derived value is now the most complex state; neither the
            # input nor a parked tree may complicate past it.
            self.meta.disallow_complicate()
            self.final_complication = None
            return True
        # Skip inputs whose derived strategy aborts; an exhausted meta tree
        # latches, so simplify() stays False from then on.
        skipped = False
        while self.meta.simplify():
            regenerated = self._regenerate()
            if regenerated is None:
                skipped = True
                continue
            self.current_tree.disallow_simplify()
            self.final_complication = self.current_tree
            self.current_tree = regenerated
            self.complicate_regen_remaining = self.runner.config.cases
            return True
        if skipped:
            # The derived tree no longer matches the input meta moved to.
            self.meta.disallow_complicate()
        return False

    def complicate(self) -> bool:
        if self.complicate_regen_remaining > 0:
            if self.runner.flat_map_regen():
                self.complicate_regen_remaining -= 1
                regenerated = self._regenerate()
                if regenerated is not None:
                    self.current_tree = regenerated
                    return True
            else:
                self.complicate_regen_remaining = 0

        if self.current_tree.complicate():
            return True
        while self.meta.complicate():
            regenerated = self._regenerate()
            if regenerated is not None:
                self.complicate_regen_remaining = self.runner.config.cases
                self.current_tree = regenerated
                return True

        if self.final_complication is not None:
            self.current_tree = self.final_complication
            self.final_complication = None
            return True
        return False


@dataclass(frozen=True, eq=False)
class Flatten(Strategy[U], Generic[T, U]):
    """Strategy returned by ``Strategy.flat_map``."""

    source: Strategy[T]
    fun: Callable[[T], StrategyLike[U]]

    def derive(self, value: T) -> Strategy[U]:
        """Return the strategy derived from ``value``."""
        return as_strategy(self.fun(value))

    def new_value(self, runner: TestRunner) -> FlattenValueTree[U]:
        meta = MapValueTree(self.source.new_value(runner), self.derive)
        return FlattenValueTree.create(runner.partial_clone(), meta)


@dataclass(frozen=True, eq=False)
class IndFlatten(Strategy[U], Generic[T, U]):
    """Strategy returned by ``Strategy.ind_flat_map``.

    The input is drawn once and frozen; only the derived value shrinks.
    """

    source: Strategy[T]
    fun: Callable[[T], StrategyLike[U]]

    def new_value(self, runner: TestRunner) -> ValueTree[U]:
        source = self.source.new_value(runner)
        derived = as_strategy(self.fun(source.current()))
        return derived.new_value(runner.partial_clone())


@dataclass(frozen=True, eq=False)
class IndFlattenMap(Strategy[tuple[Any, Any]], Generic[T, U]):
    """Strategy returned by ``Strategy.ind_flat_map2``."""

    source: Strategy[T]
    fun: Callable[[T], StrategyLike[U]]

    def new_value(self, runner: TestRunner) -> TupleValueTree:
        left = self.source.new_value(runner)
        derived = as_strategy(self.fun(left.current()))
        right = derived.new_value(runner.partial_clone())
        return TupleValueTree([left, right])
