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

"""Probabilities used to weight alternatives."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from shrinkwiz._internal.exceptions import ShrinkwizValidationError

U32_MAX: Final[int] = 2**32 - 1

__all__ = ["Probability", "float_to_weights"]


def float_to_weights(value: float) -> tuple[int, int]:
    """Split ``U32_MAX`` into union weights ``(value share, remainder)``."""
    first = int(value * U32_MAX)
    return first, U32_MAX - first


@dataclass(slots=True, frozen=True)
class Probability:
    """A probability in the closed interval ``[0, 1]``.

    Raises:
        ShrinkwizValidationError: If ``value`` is not a number in ``[0, 1]``.
    """

    value: float = 0.5

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            msg = f"probability must be a number (got {self.value!r})"
            raise ShrinkwizValidationError(msg)
        if math.isnan(self.value) or not 0.0 <= self.value <= 1.0:
            msg = f"probability must be between 0 and 1 (got {self.value!r})"
            raise ShrinkwizValidationError(msg)

    @classmethod
    def coerce(cls, value: Probability | float) -> Probability:
        """Return ``value`` as a ``Probability``."""
        return value if isinstance(value, Probability) else cls(value)

    def __float__(self) -> float:
        return float(self.value)

    def to_weights(self) -> tuple[int, int]:
        """Return complementary union weights ``(p, 1 - p)`` scaled to ``U32_MAX``."""
        return float_to_weights(self.value)
