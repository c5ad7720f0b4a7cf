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

"""Unit tests for Strategy Sanity."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from shrinkwiz._internal.error_codes import error_code_for
from shrinkwiz._internal.exceptions import ContractViolationError
from shrinkwiz.core.model_types import ContractViolationKind
from shrinkwiz.num import integers
from shrinkwiz.runner import TestRunner
from shrinkwiz.strategy import CheckStrategySanityOptions, Strategy, ValueTree, check_strategy_sanity

pytestmark = pytest.mark.unit


@dataclass(eq=False)
class _NoRestoreTree(ValueTree[int]):
    """Simplifies but can never be complicated back."""

    value: int = 10

    def current(self) -> int:
        return self.value

    def simplify(self) -> bool:
        if self.value == 0:
            return False
        self.value -= 1
        return True

    def complicate(self) -> bool:
        return False


@dataclass(eq=False)
class _FlipFlopSimplifyTree(ValueTree[int]):
    """Simplify fails once, then wakes up again."""

    calls: int = 0

    def current(self) -> int:
        return 0

    def simplify(self) -> bool:
        self.calls += 1
        return self.calls == 2

    def complicate(self) -> bool:
        return False


@dataclass(eq=False)
class _DriftingTree(ValueTree[int]):
    """Simplify reports no change but moves the value anyway."""

    value: int = 0

    def current(self) -> int:
        return self.value

    def simplify(self) -> bool:
        self.value += 1
        return False

    def complicate(self) -> bool:
        return False


@dataclass(eq=False)
class _WakingComplicateTree(ValueTree[int]):
    """Complicate returns False once and later returns True again."""

    value: int = 3
    complicate_calls: int = 0

    def current(self) -> int:
        return self.value

    def simplify(self) -> bool:
        if self.value == 0:
            return False
        self.value -= 1
        self.complicate_calls = 0
        return True

    def complicate(self) -> bool:
        self.complicate_calls += 1
        if self.complicate_calls == 1:
            self.value += 1
            return True
        return self.complicate_calls == 3


@dataclass(eq=False)
class _ChangingComplicateTree(ValueTree[int]):
    """Complicate keeps reporting no change but bumps the value on later calls."""

    value: int = 3
    restored: bool = False
    refusals: int = 0

    def current(self) -> int:
        return self.value

    def simplify(self) -> bool:
        if self.value == 0:
            return False
        self.value -= 1
        self.restored = False
        self.refusals = 0
        return True

    def complicate(self) -> bool:
        if not self.restored:
            self.value += 1
            self.restored = True
            return True
        self.refusals += 1
        if self.refusals > 1:
            self.value += 100
        return False


@dataclass(eq=False)
class _EndlessComplicateTree(ValueTree[int]):
    """Complicate never stops returning True."""

    simplified: bool = False

    def current(self) -> int:
        return 0

    def simplify(self) -> bool:
        if self.simplified:
            return False
        self.simplified = True
        return True

    def complicate(self) -> bool:
        return True


@dataclass(eq=False)
class _EndlessSimplifyTree(ValueTree[int]):
    """Simplify never stops returning True; each step can be undone once."""

    pending: bool = False

    def current(self) -> int:
        return 0

    def simplify(self) -> bool:
        self.pending = True
        return True

    def complicate(self) -> bool:
        if self.pending:
            self.pending = False
            return True
        return False


@dataclass(frozen=True, eq=False)
class _Fixed(Strategy[int]):
    """Strategy returning a fresh copy of a prototype tree."""

    prototype: ValueTree[int]

    def new_value(self, runner: TestRunner) -> ValueTree[int]:
        return self.prototype.clone()


def _check(tree: ValueTree[int], *, strict: bool = True) -> ContractViolationError:
    options = CheckStrategySanityOptions(strict_complicate_after_simplify=strict, trials=2)
    with pytest.raises(ContractViolationError) as excinfo:
        _ = check_strategy_sanity(_Fixed(tree), options)
    return excinfo.value


@pytest.mark.parametrize(
    ("tree", "strict", "kind"),
    [
        (_NoRestoreTree(), True, ContractViolationKind.COMPLICATE_AFTER_SIMPLIFY),
        (_NoRestoreTree(), False, ContractViolationKind.COMPLICATE_NOT_RESTORED),
        (_FlipFlopSimplifyTree(), True, ContractViolationKind.SIMPLIFY_NOT_IDEMPOTENT),
        (_DriftingTree(), True, ContractViolationKind.SIMPLIFY_CHANGED_VALUE),
        (_WakingComplicateTree(), True, ContractViolationKind.COMPLICATE_NOT_IDEMPOTENT),
        (_ChangingComplicateTree(), True, ContractViolationKind.COMPLICATE_CHANGED_VALUE),
    ],
)
def test_sanity_detects_broken_trees(tree: ValueTree[int], strict: bool, kind: ContractViolationKind) -> None:
    error = _check(tree, strict=strict)
    assert error.kind is kind
    assert error.trial == 0
    assert isinstance(error, AssertionError)
    assert f"[{kind}]" in str(error)


@pytest.mark.slow
def test_sanity_detects_runaway_complicate() -> None:
    error = _check(_EndlessComplicateTree())
    assert error.kind is ContractViolationKind.RUNAWAY_COMPLICATE
    assert error_code_for(error) == "SW300"


def test_sanity_report_counts_steps(caplog: pytest.LogCaptureFixture) -> None:
    options = CheckStrategySanityOptions(trials=8)
    with caplog.at_level(logging.DEBUG, logger="shrinkwiz.sanity"):
        report = check_strategy_sanity(integers(0, 100), options, runner=TestRunner.deterministic(seed=3))
    assert report.trials == 8
    assert report.complications >= report.simplifications
    records = [record for record in caplog.records if record.name == "shrinkwiz.sanity"]
    assert records
    assert getattr(records[-1], "trials", None) == 8


def test_sanity_default_options() -> None:
    options = CheckStrategySanityOptions()
    assert options.strict_complicate_after_simplify is True
    assert options.trials == 1_024
    assert options.stability_checks == 16


@pytest.mark.slow
def test_sanity_detects_runaway_simplify() -> None:
    options = CheckStrategySanityOptions(trials=1, stability_checks=1)
    with pytest.raises(ContractViolationError) as excinfo:
        _ = check_strategy_sanity(_Fixed(_EndlessSimplifyTree()), options)
    assert excinfo.value.kind is ContractViolationKind.RUNAWAY_SIMPLIFY
    assert excinfo.value.trial == 0
    assert error_code_for(excinfo.value) == "SW300"
