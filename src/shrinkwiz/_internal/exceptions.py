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

"""Common exception hierarchy for shrinkwiz.

Two failure kinds never mix: ``StrategyAbortError`` means a strategy could
not construct an input at all, while ``ContractViolationError`` means a value
tree implementation broke the simplify/complicate contract.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shrinkwiz.core.model_types import ContractViolationKind

__all__ = [
    "ContractViolationError",
    "ShrinkwizError",
    "ShrinkwizTypeError",
    "ShrinkwizValidationError",
    "StrategyAbortError",
]


class ShrinkwizError(Exception):
    """Base error for all shrinkwiz exceptions."""


class ShrinkwizValidationError(ShrinkwizError, ValueError):
    """Raised when input data fails validation checks."""


class ShrinkwizTypeError(ShrinkwizError, TypeError):
    """Raised when input data has an unexpected type."""


class StrategyAbortError(ShrinkwizError):
    """Raised when a strategy cannot produce a value under its constraints.

    The surrounding harness should treat this as "skip this case", never as
    a failure of the code under test.
    """

    def __init__(self, reason: str) -> None:
        """Initialise the abort with a human-readable reason.

        Args:
            reason: Why no value could be produced (e.g. the filter label
                whose local rejection budget ran out).
        """
        self.reason = reason
        super().__init__(reason)


class ContractViolationError(ShrinkwizError, AssertionError):
    """Raised when a value tree breaks the simplify/complicate contract."""

    def __init__(
        self,
        kind: ContractViolationKind,
        message: str,
        *,
        trial: int | None = None,
        before: object = None,
        after: object = None,
    ) -> None:
        """Initialise the violation with the broken rule and captured state.

        Args:
            kind: Which rule of the contract was broken.
            message: Human-readable description of the failure.
            trial: Index of the sanity-check trial that found it, if any.
            before: Representation of the state before the offending call.
            after: Representation of the state after the offending call.
        """
        self.kind = kind
        self.trial = trial
        self.before = before
        self.after = after
        details = [f"[{kind}] {message}"]
        if trial is not None:
            details.append(f"trial: {trial}")
        if before is not None:
            details.append(f"before:\n{before!r}")
        if after is not None:
            details.append(f"after:\n{after!r}")
        super().__init__("\n".join(details))
