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

"""Hypothesis strategies feeding the shrinkwiz property tests."""

from __future__ import annotations

from hypothesis import strategies as st

MAX_MAGNITUDE = 1_000_000


def runner_seeds() -> st.SearchStrategy[int]:
    """Return seeds for deterministic runners."""
    return st.integers(min_value=0, max_value=2**32 - 1)


@st.composite
def int_bounds(draw: st.DrawFn, max_magnitude: int = MAX_MAGNITUDE) -> tuple[int, int]:
    """Return a non-empty half-open ``(start, end)`` integer range.

    Ranges may lie entirely below zero, straddle it, or lie entirely above it.
    """
    start = draw(st.integers(min_value=-max_magnitude, max_value=max_magnitude - 1))
    end = draw(st.integers(min_value=start + 1, max_value=max_magnitude))
    return start, end


@st.composite
def start_and_threshold(draw: st.DrawFn, max_magnitude: int = MAX_MAGNITUDE) -> tuple[int, int]:
    """Return ``(start, threshold)`` with ``0 <= threshold <= start``."""
    start = draw(st.integers(min_value=1, max_value=max_magnitude))
    threshold = draw(st.integers(min_value=0, max_value=start))
    return start, threshold


def probabilities() -> st.SearchStrategy[float]:
    """Return probabilities in the closed unit interval."""
    return st.floats(min_value=0.0, max_value=1.0, allow_nan=False)


def union_weights(max_size: int = 6) -> st.SearchStrategy[list[int]]:
    """Return union weight lists with at least one positive weight.

    Args:
        max_size: Maximum number of options.

    Returns:
        Hypothesis strategy producing lists of non-negative weights.
    """
    weights = st.lists(st.integers(min_value=0, max_value=5), min_size=1, max_size=max_size)
    return weights.filter(lambda values: sum(values) > 0)
