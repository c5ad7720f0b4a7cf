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

"""Property-based tests for Num."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from shrinkwiz.num import BinarySearch, integers
from shrinkwiz.runner import TestRunner
from tests.fixtures.runners import fully_simplify, minimise
from tests.property_based.strategies import int_bounds, runner_seeds, start_and_threshold

pytestmark = pytest.mark.property


def _simplest_in(start: int, end: int) -> int:
    if start > 0:
        return start
    if end <= 0:
        return end - 1
    return 0


@given(st.integers(min_value=-1_000_000, max_value=1_000_000))
def test_binary_search_never_leaves_the_initial_span(start: int) -> None:
    observed: list[int] = []
    assert fully_simplify(BinarySearch.new(start), observed=observed) == 0
    assert all(abs(value) <= abs(start) for value in observed)
    assert all(value * start >= 0 for value in observed)


@given(start_and_threshold())
def test_binary_search_finds_exact_threshold(case: tuple[int, int]) -> None:
    start, threshold = case
    assert minimise(BinarySearch.new(start), lambda value: value >= threshold) == threshold
    assert minimise(BinarySearch.new(-start), lambda value: value <= -threshold) == -threshold


@settings(max_examples=200)
@given(int_bounds(), runner_seeds())
def test_integer_ranges_stay_within_bounds(bounds: tuple[int, int], seed: int) -> None:
    start, end = bounds
    tree = integers(start, end).new_value(TestRunner.deterministic(seed=seed))
    assert start <= tree.current() < end
    observed: list[int] = []
    assert fully_simplify(tree, observed=observed) == _simplest_in(start, end)
    assert all(start <= value < end for value in observed)


@given(int_bounds(max_magnitude=1_000), runner_seeds(), st.integers(min_value=0, max_value=50))
def test_complicate_restores_any_simplification(bounds: tuple[int, int], seed: int, steps: int) -> None:
    start, end = bounds
    tree = integers(start, end).new_value(TestRunner.deterministic(seed=seed))
    for _ in range(steps):
        before = tree.current()
        if not tree.simplify():
            break
        restored = tree.clone()
        while restored.complicate():
            pass
        assert restored.current() == before
