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

"""Enumerations shared across shrinkwiz.

- Log formats and logging components for structured diagnostics
- The catalogue of value tree contract rules checked by the sanity harness
"""

from __future__ import annotations

from shrinkwiz.compat import StrEnum


class LogFormat(StrEnum):
    """Supported log output formats.

    Attributes:
        TEXT: Single-line human readable records.
        JSON: One JSON object per record.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat from a string value.

        Args:
            raw: String representation of the format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Logical source of a log record."""

    RUNNER = "runner"
    STRATEGY = "strategy"
    SANITY = "sanity"
    CONFIG = "config"


class ContractViolationKind(StrEnum):
    """Rules of the value tree contract that the sanity harness enforces.

    Attributes:
        SIMPLIFY_NOT_IDEMPOTENT: ``simplify()`` returned True after having
            returned False.
        SIMPLIFY_CHANGED_VALUE: ``simplify()`` returned False but the current
            value changed.
        COMPLICATE_NOT_RESTORED: complicating to exhaustion did not return to
            the value observed before the last successful simplify.
        COMPLICATE_NOT_IDEMPOTENT: ``complicate()`` returned True after having
            returned False.
        COMPLICATE_CHANGED_VALUE: ``complicate()`` returned False but the
            current value changed.
        COMPLICATE_AFTER_SIMPLIFY: ``complicate()`` returned False right after
            a successful simplify (strict mode only).
        RUNAWAY_SIMPLIFY: ``simplify()`` kept returning True past the loop
            detection limit.
        RUNAWAY_COMPLICATE: ``complicate()`` kept returning True past the loop
            detection limit.
        UNRECOVERABLE_FILTER: a filtered tree could not be complicated back
            into a value accepted by its predicate.
    """

    SIMPLIFY_NOT_IDEMPOTENT = "simplify-not-idempotent"
    SIMPLIFY_CHANGED_VALUE = "simplify-changed-value"
    COMPLICATE_NOT_RESTORED = "complicate-not-restored"
    COMPLICATE_NOT_IDEMPOTENT = "complicate-not-idempotent"
    COMPLICATE_CHANGED_VALUE = "complicate-changed-value"
    COMPLICATE_AFTER_SIMPLIFY = "complicate-after-simplify"
    RUNAWAY_SIMPLIFY = "runaway-simplify"
    RUNAWAY_COMPLICATE = "runaway-complicate"
    UNRECOVERABLE_FILTER = "unrecoverable-filter"


__all__ = ["ContractViolationKind", "LogComponent", "LogFormat"]
