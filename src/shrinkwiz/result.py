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

"""Strategies for success-or-failure values.

``Ok`` and ``Err`` are small frozen wrappers so a generated outcome can be
pattern-matched by the test. ``maybe_ok`` shrinks toward ``Err`` and
``maybe_err`` toward ``Ok``: the simpler alternative is always listed first
in the underlying union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from shrinkwiz.probability import Probability
from shrinkwiz.strategy.traits import StrategyLike, as_strategy
from shrinkwiz.strategy.unions import Union

T = TypeVar("T")
E = TypeVar("E")

__all__ = ["Err", "Ok", "maybe_err", "maybe_ok"]


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    """Successful outcome holding ``value``."""

    value: T


@dataclass(slots=True, frozen=True)
class Err(Generic[E]):
    """Failed outcome holding ``error``."""

    error: E


def maybe_ok(
    ok: StrategyLike[T],
    err: StrategyLike[E],
    probability: Probability | float = 0.5,
) -> Union[Ok[T] | Err[E]]:
    """Return ``Ok`` values from ``ok`` or ``Err`` values from ``err``.

    Args:
        ok: Strategy for successful values.
        err: Strategy for error values.
        probability: Chance of producing an ``Ok``.

    Returns:
        A union that shrinks toward ``Err``.
    """
    ok_weight, err_weight = Probability.coerce(probability).to_weights()
    return Union.new_weighted(
        [
            (err_weight, as_strategy(err).map(Err)),
            (ok_weight, as_strategy(ok).map(Ok)),
        ],
    )


def maybe_err(
    ok: StrategyLike[T],
    err: StrategyLike[E],
    probability: Probability | float = 0.5,
) -> Union[Ok[T] | Err[E]]:
    """Return ``Ok`` values from ``ok`` or ``Err`` values from ``err``.

    Args:
        ok: Strategy for successful values.
        err: Strategy for error values.
        probability: Chance of producing an ``Err``.

    Returns:
        A union that shrinks toward ``Ok``.
    """
    err_weight, ok_weight = Probability.coerce(probability).to_weights()
    return Union.new_weighted(
        [
            (ok_weight, as_strategy(ok).map(Ok)),
            (err_weight, as_strategy(err).map(Err)),
        ],
    )
