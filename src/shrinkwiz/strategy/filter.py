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

"""Rejection-sampling filter combinator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from shrinkwiz._internal.exceptions import ContractViolationError
from shrinkwiz._internal.logging_utils import structured_extra
from shrinkwiz.core.model_types import ContractViolationKind, LogComponent

from .traits import Strategy, ValueTree

if TYPE_CHECKING:
    from shrinkwiz.runner import TestRunner

T = TypeVar("T")

logger = logging.getLogger("shrinkwiz.strategy")

__all__ = ["Filter", "FilterValueTree"]


@dataclass(eq=False)
class FilterValueTree(ValueTree[T]):
    """Tree whose value always satisfies ``predicate``.

    Every step that lands on a rejected candidate is followed by
    complicating the source until an accepted value is reached again. Each
    rejected candidate is charged to the local rejection budget of
    ``runner``; once that budget runs out the tree stops simplifying.
    """

    source: ValueTree[T]
    predicate: Callable[[T], bool]
    whence: str
    runner: TestRunner
    _exhausted: bool = field(default=False, repr=False)

    def current(self) -> T:
        return self.source.current()

    def _ensure_acceptable(self) -> None:
        while not self.predicate(self.source.current()):
            if not self._exhausted and not self.runner.try_reject_local(self.whence):
                self._exhausted = True
                logger.debug(
                    "Filter %s exhausted its rejection budget while shrinking",
                    self.whence,
                    extra=structured_extra(
                        LogComponent.STRATEGY,
                        whence=self.whence,
                        count=self.runner.local_rejects,
                        limit=self.runner.config.max_local_rejects,
                    ),
                )
            if not self.source.complicate():
                raise ContractViolationError(
                    ContractViolationKind.UNRECOVERABLE_FILTER,
                    f"unable to complicate filtered value back into one accepted by {self.whence}",
                    after=self.source,
                )

    def simplify(self) -> bool:
        if self._exhausted or not self.source.simplify():
            return False
        self._ensure_acceptable()
        return True

    def complicate(self) -> bool:
        if not self.source.complicate():
            return False
        self._ensure_acceptable()
        return True


@dataclass(frozen=True, eq=False)
class Filter(Strategy[T]):
    """Strategy returned by ``Strategy.filter``."""

    source: Strategy[T]
    predicate: Callable[[T], bool]
    whence: str

    def new_value(self, runner: TestRunner) -> FilterValueTree[T]:
        while True:
            tree = self.source.new_value(runner)
            if self.predicate(tree.current()):
                return FilterValueTree(tree, self.predicate, self.whence, runner)
            runner.reject_local(self.whence)
