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

"""Fused value trees that stop shrinking along an axis once it is exhausted."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from .traits import ValueTree

T = TypeVar("T")

__all__ = ["Fuse"]


@dataclass(eq=False)
class Fuse(ValueTree[T]):
    """Wrap ``inner`` so a failed ``simplify()`` or ``complicate()`` sticks.

    Some trees return True again after having returned False, for instance
    when simplification alternates between several components. A fused tree
    remembers the failure: once ``simplify()`` returns False it stays False
    until a ``complicate()`` succeeds, and vice versa.

    Attributes:
        inner: The wrapped tree.
        may_simplify: Whether ``simplify()`` is still forwarded.
        may_complicate: Whether ``complicate()`` is still forwarded.
    """

    inner: ValueTree[T]
    may_simplify: bool = True
    may_complicate: bool = True

    def current(self) -> T:
        return self.inner.current()

    def simplify(self) -> bool:
        if self.may_simplify:
            if self.inner.simplify():
                self.may_complicate = True
                return True
            self.may_simplify = False
        return False

    def complicate(self) -> bool:
        if self.may_complicate:
            if self.inner.complicate():
                self.may_simplify = True
                return True
            self.may_complicate = False
        return False

    def disallow_simplify(self) -> None:
        """Stop forwarding ``simplify()`` until the next successful complicate."""
        self.may_simplify = False

    def disallow_complicate(self) -> None:
        """Stop forwarding ``complicate()`` until the next successful simplify."""
        self.may_complicate = False
