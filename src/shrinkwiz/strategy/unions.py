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

"""Weighted alternation between strategies."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar, cast

from shrinkwiz._internal.exceptions import ShrinkwizValidationError, StrategyAbortError

from .traits import Strategy, StrategyLike, ValueTree, as_strategy

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner

T = TypeVar("T")

__all__ = ["Union", "UnionValueTree"]


@dataclass(eq=False)
class UnionValueTree(ValueTree[T]):
    """Tree over the option picked at generation time.

    Only the picked option has a tree up front. When it cannot simplify any
    further, shrinking switches to the lowest-indexed option at or above
    ``min_pick`` whose strategy can produce a value; that tree is generated
    on demand from ``runner``.

    Attributes:
        strategies: The union's options, in preference order.
        trees: Generated tree per option, or None where not yet generated.
        runner: Private runner used to generate options lazily.
        pick: Index of the option currently exposed.
        min_pick: Lowest index shrinking may still switch to.
        prev_pick: Option to restore if ``complicate()`` follows a switch.
    """

    strategies: tuple[Strategy[T], ...]
    trees: list[ValueTree[T] | None]
    runner: TestRunner
    pick: int
    min_pick: int = 0
    prev_pick: int | None = None
    _failed: set[int] = field(default_factory=set, repr=False)

    def _active(self) -> ValueTree[T]:
        return cast("ValueTree[T]", self.trees[self.pick])

    def _try_generate(self, index: int) -> bool:
        if self.trees[index] is not None:
            return True
        if index in self._failed:
            return False
        try:
            self.trees[index] = self.strategies[index].new_value(self.runner)
        except StrategyAbortError:
            self._failed.add(index)
            return False
        return True

    def current(self) -> T:
        return self._active().current()

    def simplify(self) -> bool:
        if self._active().simplify():
            self.prev_pick = None
            return True
        # Failing to simplify ends any pending switch, so a later
        # complicate() from a parent tree cannot undo it.
        if self.pick <= self.min_pick:
            self.prev_pick = None
            return False
        for index in range(self.min_pick, self.pick):
            if self._try_generate(index):
                self.prev_pick = self.pick
                self.pick = index
                return True
        self.prev_pick = None
        return False

    def complicate(self) -> bool:
        if self.prev_pick is not None:
            # The switch went too far; pin the previous option for good.
            self.pick = self.prev_pick
            self.min_pick = self.prev_pick
            self.prev_pick = None
            return True
        return self._active().complicate()


class Union(Strategy[T]):
    """Pick one of several strategies, optionally with relative weights.

    Earlier options are preferred while shrinking: once the picked option's
    value is minimal, shrinking moves on to the first option that can
    produce a value.

    Args:
        options: Strategies to choose from, each with weight 1.
        weights: Optional relative weights, one per option. Weights are
            non-negative integers and must not all be zero.

    Raises:
        ShrinkwizValidationError: If there are no options, the weights do not
            match the options, or the weights are invalid.
    """

    def __init__(self, options: Iterable[StrategyLike[T]], *, weights: Iterable[int] | None = None) -> None:
        strategies = tuple(as_strategy(option) for option in options)
        resolved = tuple(weights) if weights is not None else (1,) * len(strategies)
        if not strategies:
            msg = "a union needs at least one option"
            raise ShrinkwizValidationError(msg)
        if len(resolved) != len(strategies):
            msg = f"got {len(resolved)} weights for {len(strategies)} options"
            raise ShrinkwizValidationError(msg)
        for weight in resolved:
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                msg = f"union weights must be non-negative integers (got {weight!r})"
                raise ShrinkwizValidationError(msg)
        if sum(resolved) == 0:
            msg = "union weights must not all be zero"
            raise ShrinkwizValidationError(msg)
        self._strategies = strategies
        self._weights = resolved

    @classmethod
    def new_weighted(cls, options: Iterable[tuple[int, StrategyLike[T]]]) -> Union[T]:
        """Create a union from ``(weight, strategy)`` pairs."""
        pairs = list(options)
        return cls([strategy for _, strategy in pairs], weights=[weight for weight, _ in pairs])

    @property
    def options(self) -> tuple[tuple[int, Strategy[T]], ...]:
        """The ``(weight, strategy)`` pairs of this union, in preference order."""
        return tuple(zip(self._weights, self._strategies, strict=True))

    def or_(self, other: StrategyLike[T]) -> Union[T]:
        """Return a new union with ``other`` appended at weight 1."""
        return Union([*self._strategies, other], weights=[*self._weights, 1])

    def __repr__(self) -> str:
        return f"Union({list(self.options)!r})"

    def new_value(self, runner: TestRunner) -> UnionValueTree[T]:
        point = runner.rng.randrange(sum(self._weights))
        pick = 0
        for index, weight in enumerate(self._weights):
            if point < weight:
                pick = index
                break
            point -= weight
        trees: list[ValueTree[T] | None] = [None] * len(self._strategies)
        trees[pick] = self._strategies[pick].new_value(runner)
        return UnionValueTree(self._strategies, trees, runner.partial_clone(), pick)
