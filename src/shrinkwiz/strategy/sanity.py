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

"""Harness that checks a strategy's value trees honour the shrink contract.

Every strategy implementation, and every new combinator, should pass
``check_strategy_sanity``. The harness simulates a test that keeps failing:
it simplifies a fresh tree until it cannot, and after every successful step
checks on a copy that complicating restores the earlier value and then
stays put.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shrinkwiz._internal.exceptions import ContractViolationError
from shrinkwiz._internal.logging_utils import structured_extra
from shrinkwiz.config.constants import DEFAULT_SANITY_TRIALS, DEFAULT_STABILITY_CHECKS, RUNAWAY_STEP_LIMIT
from shrinkwiz.core.model_types import ContractViolationKind, LogComponent
from shrinkwiz.runner import TestRunner

if TYPE_CHECKING:
    from .traits import Strategy, ValueTree

logger = logging.getLogger("shrinkwiz.sanity")

__all__ = ["CheckStrategySanityOptions", "SanityReport", "check_strategy_sanity"]


@dataclass(slots=True, frozen=True)
class CheckStrategySanityOptions:
    """Options for ``check_strategy_sanity``.

    Attributes:
        strict_complicate_after_simplify: Require ``complicate()`` to return
            True right after every successful ``simplify()``. Disable this for
            strategies such as filters that may change internal state on
            simplify without producing a new value.
        trials: Number of fresh trees to drive through shrinking.
        stability_checks: Extra calls made after a method returned False to
            confirm it keeps returning False.
    """

    strict_complicate_after_simplify: bool = True
    trials: int = DEFAULT_SANITY_TRIALS
    stability_checks: int = DEFAULT_STABILITY_CHECKS


@dataclass(slots=True, frozen=True)
class SanityReport:
    """Totals gathered by a passing sanity check.

    Attributes:
        trials: Trees drawn and fully shrunk.
        simplifications: Successful ``simplify()`` calls across all trials.
        complications: Successful ``complicate()`` calls across all trials.
    """

    trials: int
    simplifications: int
    complications: int


def _violation(
    kind: ContractViolationKind,
    message: str,
    trial: int,
    before: ValueTree[Any],
    after: ValueTree[Any],
) -> ContractViolationError:
    return ContractViolationError(kind, message, trial=trial, before=before, after=after)


def _complicate_to_exhaustion(tree: ValueTree[Any], trial: int) -> int:
    count = 0
    started_from = tree.clone()
    while tree.complicate():
        count += 1
        if count > RUNAWAY_STEP_LIMIT:
            raise _violation(
                ContractViolationKind.RUNAWAY_COMPLICATE,
                f"complicate() returned True over {RUNAWAY_STEP_LIMIT} times",
                trial,
                started_from,
                tree,
            )
    return count


def check_strategy_sanity(
    strategy: Strategy[Any],
    options: CheckStrategySanityOptions | None = None,
    *,
    runner: TestRunner | None = None,
) -> SanityReport:
    """Drive ``strategy`` through shrinking and verify the tree contract.

    Args:
        strategy: Strategy under test.
        options: Harness options; defaults to ``CheckStrategySanityOptions()``.
        runner: Runner to draw values from; defaults to a deterministic one
            seeded with 0.

    Returns:
        SanityReport: Totals for the checked trials.

    Raises:
        ContractViolationError: On the first broken rule, carrying the rule,
            the trial index and the tree state around the offending call.
        StrategyAbortError: If the strategy cannot produce a value at all.
    """
    options = options or CheckStrategySanityOptions()
    runner = runner or TestRunner.deterministic()
    started = time.perf_counter()
    simplifications = 0
    complications = 0

    for trial in range(options.trials):
        state = strategy.new_value(runner)
        num_simplifies = 0
        while True:
            before_simplified = state.clone()
            if not state.simplify():
                break
            simplifications += 1

            complicated = state.clone()
            if options.strict_complicate_after_simplify:
                if not complicated.complicate():
                    raise _violation(
                        ContractViolationKind.COMPLICATE_AFTER_SIMPLIFY,
                        "complicate() returned False immediately after simplify() returned True",
                        trial,
                        state,
                        complicated,
                    )
                complications += 1
            complications += _complicate_to_exhaustion(complicated, trial)

            final_complicated = complicated.clone()
            if before_simplified.current() != complicated.current():
                raise _violation(
                    ContractViolationKind.COMPLICATE_NOT_RESTORED,
                    "calling complicate() on a simplified value did not restore the original value",
                    trial,
                    before_simplified,
                    complicated,
                )
            for _ in range(options.stability_checks):
                if complicated.complicate():
                    raise _violation(
                        ContractViolationKind.COMPLICATE_NOT_IDEMPOTENT,
                        "complicate() returned True after having returned False",
                        trial,
                        final_complicated,
                        complicated,
                    )
                if final_complicated.current() != complicated.current():
                    raise _violation(
                        ContractViolationKind.COMPLICATE_CHANGED_VALUE,
                        "complicate() returned False but changed the output value anyway",
                        trial,
                        final_complicated,
                        complicated,
                    )

            num_simplifies += 1
            if num_simplifies > RUNAWAY_STEP_LIMIT:
                raise _violation(
                    ContractViolationKind.RUNAWAY_SIMPLIFY,
                    f"simplify() returned True over {RUNAWAY_STEP_LIMIT} times in a row",
                    trial,
                    before_simplified,
                    state,
                )

        after_simplified = state.clone()
        for _ in range(options.stability_checks):
            if state.simplify():
                raise _violation(
                    ContractViolationKind.SIMPLIFY_NOT_IDEMPOTENT,
                    "simplify() returned True after having returned False",
                    trial,
                    after_simplified,
                    state,
                )
            if after_simplified.current() != state.current():
                raise _violation(
                    ContractViolationKind.SIMPLIFY_CHANGED_VALUE,
                    "simplify() returned False but changed the output value anyway",
                    trial,
                    after_simplified,
                    state,
                )

    duration_ms = (time.perf_counter() - started) * 1000
    logger.debug(
        "Sanity check passed for %r",
        strategy,
        extra=structured_extra(
            LogComponent.SANITY,
            strategy=strategy,
            trials=options.trials,
            duration_ms=duration_ms,
            details={"simplifications": simplifications, "complications": complications},
        ),
    )
    return SanityReport(trials=options.trials, simplifications=simplifications, complications=complications)
