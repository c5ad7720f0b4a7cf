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

"""Shared configuration defaults for shrinkwiz."""

from __future__ import annotations

from typing import Final

DEFAULT_CASES: Final[int] = 256
DEFAULT_MAX_LOCAL_REJECTS: Final[int] = 65_536
DEFAULT_MAX_FLAT_MAP_REGENS: Final[int] = 1_000_000

# Loop detector for the sanity harness. Well-behaved trees finish far sooner;
# this is a heuristic, not a limit on any value domain.
RUNAWAY_STEP_LIMIT: Final[int] = 65_536
DEFAULT_SANITY_TRIALS: Final[int] = 1024
DEFAULT_STABILITY_CHECKS: Final[int] = 16

CONFIG_FILENAMES: Final[tuple[str, ...]] = ("shrinkwiz.toml", ".shrinkwiz.toml", "pyproject.toml")
ENV_PREFIX: Final[str] = "SHRINKWIZ_"

__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_CASES",
    "DEFAULT_MAX_FLAT_MAP_REGENS",
    "DEFAULT_MAX_LOCAL_REJECTS",
    "DEFAULT_SANITY_TRIALS",
    "DEFAULT_STABILITY_CHECKS",
    "ENV_PREFIX",
    "RUNAWAY_STEP_LIMIT",
]
