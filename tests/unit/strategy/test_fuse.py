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

"""Unit tests for Strategy Fuse."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from shrinkwiz.num import BinarySearch
from shrinkwiz.strategy import Fuse, ValueTree

pytestmark = pytest.mark.unit


@dataclass(eq=False)
class _Scripted(ValueTree[int]):
    """Tree replaying fixed answers for simplify and complicate."""

    simplify_answers: list[bool]
    complicate_answers: list[bool]
    value: int = 0

    def current(self) -> int:
        return self.value

    def simplify(self) -> bool:
        return self.simplify_answers.pop(0) if self.simplify_answers else False

    def complicate(self) -> bool:
        return self.complicate_answers.pop(0) if self.complicate_answers else False


def test_fuse_stops_forwarding_simplify_after_failure() -> None:
    inner = _Scripted(simplify_answers=[False, True], complicate_answers=[])
    fused = Fuse(inner)
    assert fused.simplify() is False
    assert fused.simplify() is False
    assert inner.simplify_answers == [True]


def test_fuse_complicate_reenables_simplify() -> None:
    inner = _Scripted(simplify_answers=[False, True], complicate_answers=[True])
    fused = Fuse(inner)
    assert fused.simplify() is False
    assert fused.complicate() is True
    assert fused.simplify() is True


def test_fuse_simplify_reenables_complicate() -> None:
    inner = _Scripted(simplify_answers=[True], complicate_answers=[False, True])
    fused = Fuse(inner)
    assert fused.complicate() is False
    assert fused.complicate() is False
    assert fused.simplify() is True
    assert fused.complicate() is True


def test_fuse_disallow_pins_axes() -> None:
    fused = Fuse(BinarySearch.new(100))
    fused.disallow_simplify()
    assert fused.simplify() is False
    assert fused.current() == 100

    fused = Fuse(BinarySearch.new(100))
    assert fused.simplify() is True
    fused.disallow_complicate()
    assert fused.complicate() is False
    assert fused.current() == 50
