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

"""Strategy and ValueTree: the protocol every generator implements.

A ``Strategy`` describes a value domain and produces ``ValueTree`` objects
from a ``TestRunner``. A ``ValueTree`` holds one generated value together
with its shrink state.

Conceptually a value tree has three positions on a simplification axis:
``low`` (the minimally complex value), ``current`` (the value exposed by
``current()``) and ``high`` (the last value known to still reproduce a
failure). Initially ``current == high`` is the random draw. ``simplify()``
moves ``high`` to ``current`` and ``current`` halfway toward ``low``;
``complicate()`` moves ``low`` one step past ``current`` and ``current``
halfway toward ``high``. Only ``current()`` and the two booleans are
observable.

The contract every tree honours:

- once ``simplify()`` returns False it keeps returning False and leaves
  ``current()`` unchanged;
- after a successful ``simplify()``, calling ``complicate()`` until it
  returns False restores the value seen before that ``simplify()``;
- once ``complicate()`` returns False it keeps returning False and leaves
  ``current()`` unchanged;
- neither method returns True an unbounded number of times in a row.

``check_strategy_sanity`` exercises all of these for any strategy.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from shrinkwiz._internal.exceptions import ShrinkwizTypeError

if TYPE_CHECKING:
    import random

    from shrinkwiz.compat import Self
    from shrinkwiz.runner import TestRunner

    from .filter import Filter
    from .flatten import Flatten, IndFlatten, IndFlattenMap
    from .map import Map, Perturb
    from .recursive import Recursive
    from .shuffle import Shuffle
    from .unions import Union

T = TypeVar("T")
U = TypeVar("U")

__all__ = [
    "BoxedStrategy",
    "Just",
    "NoShrink",
    "NoShrinkValueTree",
    "SBoxedStrategy",
    "Strategy",
    "StrategyLike",
    "ValueTree",
    "as_strategy",
]


class ValueTree(ABC, Generic[T]):
    """A generated value and its shrink state machine."""

    @abstractmethod
    def current(self) -> T:
        """Return the current value."""

    @abstractmethod
    def simplify(self) -> bool:
        """Attempt to simplify the current value one step.

        Returns:
            Whether any internal state changed. This does not imply that
            ``current()`` changed; a transform layered on top may map
            different states to equal outputs. Calling this again after it
            returned False must return False.
        """

    @abstractmethod
    def complicate(self) -> bool:
        """Attempt to partially undo the last simplification.

        Returns:
            Whether any internal state changed. Usually True right after a
            successful ``simplify()``, though rejection-based trees may change
            state on simplify without changing the value and then have
            nothing to complicate. Calling this again after it returned False
            must return False.
        """

    def clone(self) -> Self:
        """Return an independent copy of this tree's shrink state.

        Strategies, closures and the runner's shared regeneration counter
        are shared with the copy rather than duplicated.
        """
        return copy.deepcopy(self)


class Strategy(ABC, Generic[T]):
    """A reusable, immutable description of a value domain.

    Strategies are shared freely; copying one returns the same object, and
    every combinator method returns a new strategy rather than mutating
    ``self``.
    """

    @abstractmethod
    def new_value(self, runner: TestRunner) -> ValueTree[T]:
        """Generate a new value tree from ``runner``.

        Raises:
            StrategyAbortError: If constraints on the domain cannot be met
                within the runner's budgets.
        """

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> Self:
        return self

    def map(self, fun: Callable[[T], U]) -> Map[T, U]:
        """Return a strategy producing ``fun(value)`` for values of this one.

        Shrinking is entirely in terms of the source value; ``fun`` is applied
        on every read of ``current()`` and its result is never stored.
        """
        from .map import Map

        return Map(self, fun)

    def perturb(self, fun: Callable[[T, random.Random], U]) -> Perturb[T, U]:
        """Like ``map`` but ``fun`` also receives a random generator.

        The generator is captured when the tree is created and ``fun`` gets
        an identical copy on every read, so a pure ``fun`` always applies the
        same perturbation while the source shrinks.
        """
        from .map import Perturb

        return Perturb(self, fun)

    def flat_map(self, fun: Callable[[T], StrategyLike[U]]) -> Flatten[T, U]:
        """Derive a strategy from each value and draw from the derived strategy.

        Both the input and the derived value shrink, and the relationship
        ``fun`` encodes is kept: shrinking the input re-derives the strategy
        and searches it (within the run's shared regeneration budget) for a
        value that still reproduces the failure.

        Example, where the second element is always below the first::

            integers(1, 100).flat_map(lambda a: (Just(a), range(0, a)))
        """
        from .flatten import Flatten

        return Flatten(self, fun)

    def ind_flat_map(self, fun: Callable[[T], StrategyLike[U]]) -> IndFlatten[T, U]:
        """Like ``flat_map`` but the input is frozen; only the derived value shrinks."""
        from .flatten import IndFlatten

        return IndFlatten(self, fun)

    def ind_flat_map2(self, fun: Callable[[T], StrategyLike[U]]) -> IndFlattenMap[T, U]:
        """Produce ``(input, derived)`` pairs that shrink independently.

        No dependency between the two is tracked, so a relation ``fun``
        establishes may not survive shrinking.
        """
        from .flatten import IndFlattenMap

        return IndFlattenMap(self, fun)

    def filter(self, predicate: Callable[[T], bool], whence: str) -> Filter[T]:
        """Only produce values accepted by ``predicate``.

        This is plain rejection sampling: every rejected value is charged to
        the runner's local rejection budget and generation aborts, naming
        ``whence``, once it runs out. Shrinking also has to satisfy the
        predicate, which can stall it.
        """
        from .filter import Filter

        return Filter(self, predicate, whence)

    def union(self, other: StrategyLike[T]) -> Union[T]:
        """Pick uniformly from ``self`` and ``other``.

        A value from ``other`` that cannot shrink any further switches to a
        value from ``self``. Chaining ``union`` skews the distribution; use
        ``Union`` directly or ``Union.or_`` for flat alternation.
        """
        from .unions import Union

        return Union([self, other])

    def recursive(
        self,
        depth: int,
        desired_size: int,
        expected_branch_size: int,
        recurse: Callable[[Strategy[T]], StrategyLike[T]],
    ) -> Recursive[T]:
        """Generate recursive structures with values of this strategy as leaves.

        Args:
            depth: Hard ceiling on branch nesting; 0 is a single leaf, 1 a
                leaf or a branch of leaves.
            desired_size: Target total element count. Not a hard limit.
            expected_branch_size: Expected size of any collection holding
                recursive elements; used to derive branch probabilities.
            recurse: Maps a strategy for depth ``n`` structures to one for
                depth ``n + 1``.

        Returns:
            The recursive strategy.
        """
        from .recursive import Recursive

        return Recursive(self.boxed(), depth, desired_size, expected_branch_size, recurse)

    def shuffle(self) -> Shuffle[Any]:
        """Shuffle the mutable sequences this strategy produces.

        Values start fully shuffled. Shrinking first walks the permutation
        back toward the original order, then shrinks the inner value.
        """
        from .shuffle import Shuffle

        return Shuffle(self)

    def no_shrink(self) -> NoShrink[T]:
        """Freeze generated values at their initial draw."""
        return NoShrink(self)

    def boxed(self) -> BoxedStrategy[T]:
        """Wrap this strategy in a uniform handle."""
        return BoxedStrategy(self)

    def sboxed(self) -> SBoxedStrategy[T]:
        """Wrap this strategy in a handle marked safe to share between threads."""
        return SBoxedStrategy(self)


StrategyLike = Strategy[T] | tuple[Any, ...] | range


def as_strategy(value: StrategyLike[T]) -> Strategy[T]:
    """Coerce ``value`` into a strategy.

    Strategies are returned unchanged, tuples become tuple strategies of
    their coerced elements and unit-step ranges become integer ranges.

    Raises:
        ShrinkwizTypeError: If ``value`` cannot be used as a strategy.
    """
    if isinstance(value, Strategy):
        return value
    if isinstance(value, tuple):
        from .tuples import TupleStrategy

        return TupleStrategy(tuple(as_strategy(item) for item in value))  # type: ignore[return-value]
    if isinstance(value, range):
        from shrinkwiz.num import IntRange

        if value.step != 1:
            msg = f"only unit-step ranges can be used as strategies (got {value!r})"
            raise ShrinkwizTypeError(msg)
        return IntRange(value.start, value.stop)  # type: ignore[return-value]
    msg = f"{type(value).__name__} object cannot be used as a strategy"
    raise ShrinkwizTypeError(msg)


@dataclass(frozen=True, eq=False)
class Just(Strategy[T], ValueTree[T]):
    """A strategy that always produces ``value`` and never simplifies.

    It is its own value tree.
    """

    value: T

    def new_value(self, runner: TestRunner) -> Just[T]:
        return self

    def current(self) -> T:
        return self.value

    def simplify(self) -> bool:
        return False

    def complicate(self) -> bool:
        return False


@dataclass(eq=False)
class NoShrinkValueTree(ValueTree[T]):
    """Value tree exposing ``source``'s value with shrinking switched off."""

    source: ValueTree[T]

    def current(self) -> T:
        return self.source.current()

    def simplify(self) -> bool:
        return False

    def complicate(self) -> bool:
        return False


@dataclass(frozen=True, eq=False)
class NoShrink(Strategy[T]):
    """Suppress shrinking of values from ``source``.

    Useful when the size of a failure matters more than its simplicity, for
    example when checking approximations where shrinking would only find
    inputs that barely miss the tolerance.
    """

    source: Strategy[T]

    def new_value(self, runner: TestRunner) -> NoShrinkValueTree[T]:
        return NoShrinkValueTree(self.source.new_value(runner))


@dataclass(frozen=True, eq=False)
class BoxedStrategy(Strategy[T]):
    """Uniform handle around any strategy."""

    thread_safe: ClassVar[bool] = False

    source: Strategy[T]

    def new_value(self, runner: TestRunner) -> ValueTree[T]:
        return self.source.new_value(runner)

    def boxed(self) -> BoxedStrategy[T]:
        return self


@dataclass(frozen=True, eq=False)
class SBoxedStrategy(BoxedStrategy[T]):
    """Boxed strategy declared safe to share across threads.

    The wrapped strategy and every closure it captures must be free of
    mutable state, since parallel test runs call them concurrently.
    """

    thread_safe: ClassVar[bool] = True

    def sboxed(self) -> SBoxedStrategy[T]:
        return self
