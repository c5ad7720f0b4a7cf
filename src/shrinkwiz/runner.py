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

"""Run context threaded through every strategy and dependent value tree.

A ``TestRunner`` owns the randomness of one run, the local rejection budget
consumed by filters, and the flat-map regeneration counter. The counter is
the only mutable state shared across combinator boundaries: partial clones
and copies of a runner share it, so nested dependent flat-maps draw from a
single budget while independent runners (parallel workers) never interfere.
"""

from __future__ import annotations

import logging
import random
import threading
from collections import Counter
from typing import TYPE_CHECKING

from shrinkwiz._internal.exceptions import StrategyAbortError
from shrinkwiz._internal.logging_utils import structured_extra
from shrinkwiz.config.models import RunnerConfig
from shrinkwiz.core.model_types import LogComponent

if TYPE_CHECKING:
    from shrinkwiz.compat import Self

logger = logging.getLogger("shrinkwiz.runner")

__all__ = ["TestRunner", "clone_rng"]


def clone_rng(rng: random.Random) -> random.Random:
    """Return an independent generator in the same state as ``rng``."""
    clone = random.Random()
    clone.setstate(rng.getstate())
    return clone


class _RegenCounter:
    """Thread-safe counter shared by a runner and all of its clones."""

    __slots__ = ("_lock", "_value", "exhaustion_logged")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0
        self.exhaustion_logged = False

    def increment(self) -> int:
        """Increment the counter and return the value before the increment."""
        with self._lock:
            previous = self._value
            self._value += 1
            return previous

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> Self:
        return self


class TestRunner:
    """Randomness and budgets for one run of a property.

    Attributes:
        config: Settings for this run.
        rng: Random source every strategy draws from.
        local_rejects: Filter rejections charged so far.
        local_reject_detail: Rejection counts keyed by filter ``whence``.
    """

    # Not a pytest test class despite the name.
    __test__ = False

    def __init__(
        self,
        config: RunnerConfig | None = None,
        *,
        rng: random.Random | None = None,
        _regen_counter: _RegenCounter | None = None,
    ) -> None:
        self.config = config or RunnerConfig()
        if rng is None:
            rng = random.Random(self.config.rng_seed)
        self.rng = rng
        self.local_rejects = 0
        self.local_reject_detail: Counter[str] = Counter()
        self._flat_map_regens = _regen_counter or _RegenCounter()

    @classmethod
    def deterministic(cls, config: RunnerConfig | None = None, *, seed: int = 0) -> TestRunner:
        """Return a runner whose random source is seeded with ``seed``."""
        return cls(config, rng=random.Random(seed))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(config={self.config!r}, local_rejects={self.local_rejects}, "
            f"flat_map_regens={self.flat_map_regens})"
        )

    def new_rng(self) -> random.Random:
        """Draw an independent random generator from this runner's source."""
        return random.Random(self.rng.getrandbits(128))

    def try_reject_local(self, whence: str) -> bool:
        """Charge one local rejection if the budget allows it.

        Args:
            whence: Label of the filter that rejected a value.

        Returns:
            True if the rejection was charged, False if the budget is spent.
        """
        if self.local_rejects >= self.config.max_local_rejects:
            return False
        self.local_rejects += 1
        self.local_reject_detail[whence] += 1
        return True

    def reject_local(self, whence: str) -> None:
        """Charge one local rejection, aborting once the budget is spent.

        Args:
            whence: Label of the filter that rejected a value.

        Raises:
            StrategyAbortError: If ``config.max_local_rejects`` is exhausted.
        """
        if self.try_reject_local(whence):
            return
        logger.debug(
            "Local rejection budget exhausted by %s",
            whence,
            extra=structured_extra(
                LogComponent.RUNNER,
                whence=whence,
                count=self.local_rejects,
                limit=self.config.max_local_rejects,
            ),
        )
        msg = f"Too many local rejects ({self.local_rejects}); last rejected by: {whence}"
        raise StrategyAbortError(msg)

    def flat_map_regen(self) -> bool:
        """Consume one unit of the shared flat-map regeneration budget.

        Returns:
            True if the regeneration may proceed, False once the budget shared
            by every dependent flat-map of this run is exhausted.
        """
        allowed = self._flat_map_regens.increment() < self.config.max_flat_map_regens
        if not allowed and not self._flat_map_regens.exhaustion_logged:
            self._flat_map_regens.exhaustion_logged = True
            logger.info(
                "Flat-map regeneration budget of %d exhausted; shrinking only derived values",
                self.config.max_flat_map_regens,
                extra=structured_extra(LogComponent.RUNNER, limit=self.config.max_flat_map_regens),
            )
        return allowed

    @property
    def flat_map_regens(self) -> int:
        """Regenerations consumed so far by this run's dependent flat-maps."""
        return self._flat_map_regens.value

    def partial_clone(self) -> TestRunner:
        """Return a runner for use inside a value tree.

        The clone shares the configuration and the regeneration counter,
        draws its own random source from this runner, and starts with a fresh
        local rejection count.
        """
        return TestRunner(self.config, rng=self.new_rng(), _regen_counter=self._flat_map_regens)

    def reset(self) -> None:
        """Begin a new run: clear rejections and start a fresh regeneration budget."""
        self.local_rejects = 0
        self.local_reject_detail.clear()
        self._flat_map_regens = _RegenCounter()
