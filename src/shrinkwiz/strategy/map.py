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

"""Value-transforming combinators: ``map`` and ``perturb``."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from shrinkwiz.runner import clone_rng

from .traits import Strategy, ValueTree

if TYPE_CHECKING:
    import random

    from shrinkwiz.runner import TestRunner

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["Map", "MapValueTree", "Perturb", "PerturbValueTree"]


@dataclass(eq=False)
class MapValueTree(ValueTree[U], Generic[T, U]):
    """Tree exposing ``fun(source.current())``; shrinking is the source's."""

    source: ValueTree[T]
    fun: Callable[[T], U]

    def current(self) -> U:
        return self.fun(self.source.current())

    def simplify(self) -> bool:
        return self.source.simplify()

    def complicate(self) -> bool:
        return self.source.complicate()


@dataclass(frozen=True, eq=False)
class Map(Strategy[U], Generic[T, U]):
    """Strategy returned by ``Strategy.map``."""

    source: Strategy[T]
    fun: Callable[[T], U]

    def new_value(self, runner: TestRunner) -> MapValueTree[T, U]:
        return MapValueTree(self.source.new_value(runner), self.fun)


@dataclass(eq=False)
class PerturbValueTree(ValueTree[U], Generic[T, U]):
    """Tree exposing ``fun(source.current(), copy_of(rng))``.

    ``rng`` is never advanced; each read hands ``fun`` a fresh copy so the
    same source value always receives the same perturbation.
    """

    source: ValueTree[T]
    fun: Callable[[T, random.Random], U]
    rng: random.Random

    def current(self) -> U:
        return self.fun(self.source.current(), clone_rng(self.rng))

    def simplify(self) -> bool:
        return self.source.simplify()

    def complicate(self) -> bool:
        return self.source.complicate()


@dataclass(frozen=True, eq=False)
class Perturb(Strategy[U], Generic[T, U]):
    """Strategy returned by ``Strategy.perturb``."""

    source: Strategy[T]
    fun: Callable[[T, random.Random], U]

    def new_value(self, runner: TestRunner) -> PerturbValueTree[T, U]:
        source = self.source.new_value(runner)
        return PerturbValueTree(source, self.fun, runner.new_rng())
