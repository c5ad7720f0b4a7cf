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

"""Unit tests for Strategy Flatten."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import pytest

from shrinkwiz._internal.exceptions import StrategyAbortError
from shrinkwiz.config import RunnerConfig
from shrinkwiz.num import integers
from shrinkwiz.runner import TestRunner
from shrinkwiz.strategy import CheckStrategySanityOptions, Just, Strategy, ValueTree, check_strategy_sanity
from tests.fixtures.runners import draw_failing, fully_simplify, minimise

if TYPE_CHECKING:
    from shrinkwiz.strategy import Filter

T = TypeVar("T")

pytestmark = pytest.mark.unit


def _below(a: int) -> tuple[Just[int], range]:
    return Just(a), range(0, a)


def _near(a: int) -> tuple[Just[int], range]:
    return Just(a), range(a - 5, a + 5)


def test_flat_map_keeps_dependency_while_shrinking() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=16), seed=3)
    strategy = integers(1, 100).flat_map(_below)
    for _ in range(1_000):
        runner.reset()
        observed: list[tuple[int, int]] = []
        tree = strategy.new_value(runner)
        _ = minimise(tree, lambda pair: pair[0] - pair[1] > 3, observed=observed)
        assert all(b < a for a, b in observed)


def test_flat_map_fully_simplifies_both_sides() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=16), seed=5)
    tree = integers(1, 100).flat_map(_below).new_value(runner)
    assert fully_simplify(tree) == (1, 0)


@pytest.mark.slow
def test_flat_map_converges_on_smallest_dependent_failure() -> None:
    runner = TestRunner.deterministic(seed=11)
    strategy = integers(0, 65_536).flat_map(_near)

    def fails(pair: tuple[int, int]) -> bool:
        a, b = pair
        return a > 10_000 and b > a

    failures = 0
    for _ in range(200):
        runner.reset()
        tree = strategy.new_value(runner)
        if not fails(tree.current()):
            continue
        failures += 1
        assert minimise(tree, fails) == (10_001, 10_002)
    assert failures > 25


def test_flat_map_regeneration_draws_from_shared_budget() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=8, max_flat_map_regens=5), seed=2)
    tree = draw_failing(integers(10, 1_000).flat_map(Just), runner, lambda value: value > 10)
    original = tree.current()
    assert tree.simplify() is True
    assert tree.current() < original
    while tree.complicate():
        pass
    assert tree.current() == original
    assert runner.flat_map_regens > 5


def test_flat_map_without_regeneration_budget_still_shrinks() -> None:
    runner = TestRunner.deterministic(RunnerConfig(max_flat_map_regens=0), seed=9)
    tree = integers(1, 100).flat_map(_below).new_value(runner)
    assert fully_simplify(tree) == (1, 0)


def test_nested_flat_maps_share_one_counter() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=4, max_flat_map_regens=1_000), seed=4)
    strategy = integers(1, 50).flat_map(lambda a: integers(0, a + 1).flat_map(Just))
    tree = strategy.new_value(runner)
    while not tree.simplify():
        tree = strategy.new_value(runner)
    assert runner.flat_map_regens == 0
    assert tree.complicate() is True
    assert runner.flat_map_regens == 1


def test_ind_flat_map_freezes_input(runner: TestRunner) -> None:
    strategy = integers(50, 100).ind_flat_map(lambda a: integers(a, a + 10))
    tree = strategy.new_value(runner)
    start = tree.current()
    result = fully_simplify(tree)
    assert 50 <= result <= start


def test_ind_flat_map2_pairs_shrink_independently(runner: TestRunner) -> None:
    strategy = integers(10, 100).ind_flat_map2(lambda a: range(a, a + 10))
    tree = strategy.new_value(runner)
    a, b = tree.current()
    assert a <= b < a + 10
    assert fully_simplify(tree) == (10, a)


def test_flat_map_aborts_when_derived_strategy_cannot_produce() -> None:
    strategy = Just(1).flat_map(lambda _: integers(0, 10).filter(lambda _: False, "never"))
    with pytest.raises(StrategyAbortError, match="never"):
        _ = strategy.new_value(TestRunner.deterministic(RunnerConfig(max_local_rejects=10)))


def _odd_inputs_only(a: int) -> Filter[int]:
    return integers(0, 10).filter(lambda _: a % 2 == 1, "odd input")


@dataclass(frozen=True, eq=False)
class _RetryAborts(Strategy[T]):
    """Draw from ``source`` until it produces a value."""

    source: Strategy[T]

    def new_value(self, runner: TestRunner) -> ValueTree[T]:
        while True:
            try:
                return self.source.new_value(runner)
            except StrategyAbortError:
                continue


def test_flat_map_skips_inputs_whose_derived_strategy_aborts() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=8, max_local_rejects=0), seed=5)
    strategy = _RetryAborts(integers(1, 1_000).flat_map(_odd_inputs_only))
    for _ in range(300):
        tree = strategy.new_value(runner)
        final = fully_simplify(tree)
        assert final == 0
        for _ in range(16):
            assert tree.simplify() is False
            assert tree.current() == final


def test_flat_map_with_aborting_derivations_passes_sanity() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=8, max_local_rejects=0), seed=2)
    strategy = _RetryAborts(integers(1, 1_000).flat_map(_odd_inputs_only))
    _ = check_strategy_sanity(strategy, CheckStrategySanityOptions(trials=64), runner=runner)


def test_flat_map_passes_sanity() -> None:
    runner = TestRunner.deterministic(RunnerConfig(cases=8), seed=1)
    options = CheckStrategySanityOptions(trials=16)
    _ = check_strategy_sanity(integers(0, 65_536).flat_map(_near), options, runner=runner)
    _ = check_strategy_sanity(integers(1, 50).flat_map(_below), options, runner=runner)


def test_independent_flat_maps_pass_sanity(fast_sanity: CheckStrategySanityOptions) -> None:
    _ = check_strategy_sanity(integers(0, 100).ind_flat_map(lambda a: range(0, a + 1)), fast_sanity)
    _ = check_strategy_sanity(integers(0, 100).ind_flat_map2(lambda a: range(0, a + 1)), fast_sanity)
