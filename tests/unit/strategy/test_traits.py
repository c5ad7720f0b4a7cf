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

"""Unit tests for Strategy Traits."""

from __future__ import annotations

import copy
import random
from typing import TYPE_CHECKING

import pytest

from shrinkwiz._internal.exceptions import ShrinkwizTypeError
from shrinkwiz.num import IntRange, integers
from shrinkwiz.strategy import (
    BoxedStrategy,
    Just,
    SBoxedStrategy,
    TupleStrategy,
    as_strategy,
    check_strategy_sanity,
)
from tests.fixtures.runners import draw_failing, fully_simplify, minimise

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner
    from shrinkwiz.strategy import CheckStrategySanityOptions

pytestmark = pytest.mark.unit


def test_just_is_its_own_tree_and_never_shrinks(runner: TestRunner) -> None:
    strategy = Just("value")
    tree = strategy.new_value(runner)
    assert tree is strategy
    assert tree.current() == "value"
    assert tree.simplify() is False
    assert tree.complicate() is False


def test_no_shrink_refuses_first_simplify(runner: TestRunner) -> None:
    for _ in range(100):
        tree = integers(0, 1_000).no_shrink().new_value(runner)
        before = tree.current()
        assert tree.simplify() is False
        assert tree.complicate() is False
        assert tree.current() == before


def test_map_applies_function_on_every_read(runner: TestRunner) -> None:
    calls: list[int] = []

    def double(value: int) -> int:
        calls.append(value)
        return value * 2

    tree = integers(10, 100).map(double).new_value(runner)
    first = tree.current()
    second = tree.current()
    assert first == second
    assert first % 2 == 0
    assert len(calls) == 2
    assert fully_simplify(tree) == 20


def test_map_shrinks_through_source(runner: TestRunner) -> None:
    def fails(text: str) -> bool:
        return int(text) >= 123

    tree = draw_failing(integers(0, 1_000).map(str), runner, fails)
    assert minimise(tree, fails) == "123"


def test_perturb_reuses_same_randomness_for_each_read(runner: TestRunner) -> None:
    strategy = integers(0, 100).perturb(lambda value, rng: (value, rng.random()))
    tree = strategy.new_value(runner)
    value, noise = tree.current()
    assert tree.current() == (value, noise)
    observed: list[tuple[int, float]] = []
    fully_simplify(tree, observed=observed)
    assert {noise_value for _, noise_value in observed} == {noise}


def test_perturb_trees_draw_independent_generators(runner: TestRunner) -> None:
    strategy = Just(None).perturb(lambda _, rng: rng.getrandbits(64))
    values = {strategy.new_value(runner).current() for _ in range(20)}
    assert len(values) > 1


def test_boxed_and_sboxed_delegate(runner: TestRunner) -> None:
    boxed = integers(5, 6).boxed()
    assert isinstance(boxed, BoxedStrategy)
    assert boxed.boxed() is boxed
    assert boxed.thread_safe is False
    assert boxed.new_value(runner).current() == 5

    sboxed = integers(5, 6).sboxed()
    assert isinstance(sboxed, SBoxedStrategy)
    assert sboxed.sboxed() is sboxed
    assert sboxed.thread_safe is True
    assert sboxed.new_value(runner).current() == 5


def test_strategies_are_shared_not_copied() -> None:
    strategy = integers(0, 10).map(abs)
    assert copy.copy(strategy) is strategy
    assert copy.deepcopy(strategy) is strategy


def test_clone_snapshots_shrink_state(runner: TestRunner) -> None:
    tree = draw_failing(integers(100, 1_000), runner, lambda value: value > 100)
    original = tree.current()
    snapshot = tree.clone()
    assert fully_simplify(tree) == 100
    assert snapshot.current() == original
    assert fully_simplify(snapshot) == 100


def test_as_strategy_coerces_tuples_and_ranges(runner: TestRunner) -> None:
    strategy = as_strategy((Just(1), range(0, 3)))
    assert isinstance(strategy, TupleStrategy)
    first, second = strategy.new_value(runner).current()
    assert first == 1
    assert 0 <= second < 3

    coerced = as_strategy(range(-4, 4))
    assert isinstance(coerced, IntRange)
    assert (coerced.start, coerced.end) == (-4, 4)


@pytest.mark.parametrize("value", [range(0, 10, 2), [1, 2], "text", 3])
def test_as_strategy_rejects_unknown_values(value: object) -> None:
    with pytest.raises(ShrinkwizTypeError):
        _ = as_strategy(value)  # type: ignore[arg-type]


def test_primitive_combinators_pass_sanity(fast_sanity: CheckStrategySanityOptions) -> None:
    _ = check_strategy_sanity(integers(-500, 500).map(lambda value: value * 3), fast_sanity)
    _ = check_strategy_sanity(integers(0, 500).perturb(lambda value, rng: value + rng.randrange(3)), fast_sanity)
    _ = check_strategy_sanity(integers(0, 500).no_shrink(), fast_sanity)
    _ = check_strategy_sanity(Just(random.Random(0).random()), fast_sanity)
