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

"""String-valued enum base shared by shrinkwiz enumerations.

``enum.StrEnum`` only exists from Python 3.11; on 3.10 an equivalent
``str``/``Enum`` mixin whose ``str()`` is the member value is used instead.
"""

from __future__ import annotations

import enum as _enum
from typing import TYPE_CHECKING, cast

from shrinkwiz.compat.typing import override


class _StrEnumBase(str, _enum.Enum):
    """Common base of both StrEnum flavours."""


if TYPE_CHECKING:

    class StrEnum(_StrEnumBase):
        """Type-checker view of StrEnum."""

        @override
        def __str__(self) -> str: ...  # pragma: no cover

else:
    _STDLIB_STR_ENUM = getattr(_enum, "StrEnum", None)

    if _STDLIB_STR_ENUM is None:

        class StrEnum(_StrEnumBase):
            """``enum.StrEnum`` stand-in for Python 3.10."""

            @override
            def __str__(self) -> str:
                return str(self.value)

    else:
        StrEnum = cast("type[_StrEnumBase]", _STDLIB_STR_ENUM)

__all__ = ["StrEnum"]
