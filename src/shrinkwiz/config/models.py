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

"""Configuration models and validation for shrinkwiz.

Runner settings are validated through a Pydantic model when loaded from TOML
or the environment, then converted into a frozen dataclass that the runner
carries around. The dataclass is what every strategy sees; it is never read
from global state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shrinkwiz._internal.exceptions import ShrinkwizValidationError

from .constants import DEFAULT_CASES, DEFAULT_MAX_FLAT_MAP_REGENS, DEFAULT_MAX_LOCAL_REJECTS

if TYPE_CHECKING:
    from pathlib import Path


class ConfigValidationError(ShrinkwizValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialise the exception with file path and underlying error.

        Args:
            path: The configuration file that could not be read.
            error: The underlying exception that caused the read failure.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialise the exception with configuration path and validation error.

        Args:
            path: The configuration file that failed validation.
            error: The underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid shrinkwiz configuration in {path}: {error}")


@dataclass(slots=True, frozen=True)
class RunnerConfig:
    """Settings consumed by a ``TestRunner`` and the strategies it drives.

    Attributes:
        cases: Number of test cases a harness runs; dependent flat-maps also
            regenerate up to this many values when searching a re-derived
            strategy.
        max_local_rejects: Filter rejections allowed across a whole run
            before generation aborts.
        max_flat_map_regens: Regenerated values allowed across all dependent
            flat-maps of a run, shared by every nested combinator.
        rng_seed: Seed for the runner's random source, or None for a fresh
            OS-seeded generator.
    """

    cases: int = DEFAULT_CASES
    max_local_rejects: int = DEFAULT_MAX_LOCAL_REJECTS
    max_flat_map_regens: int = DEFAULT_MAX_FLAT_MAP_REGENS
    rng_seed: int | None = None

    def __post_init__(self) -> None:
        """Reject settings the runner cannot honour."""
        if self.cases < 1:
            msg = f"cases must be at least 1 (got {self.cases})"
            raise ConfigValidationError(msg)
        for name in ("max_local_rejects", "max_flat_map_regens"):
            value = getattr(self, name)
            if value < 0:
                msg = f"{name} must be non-negative (got {value})"
                raise ConfigValidationError(msg)

    def with_overrides(self, **changes: int | None) -> RunnerConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def __copy__(self) -> RunnerConfig:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> RunnerConfig:
        return self


class RunnerConfigModel(BaseModel):
    """Pydantic model for validating runner configuration from TOML or env.

    Attributes:
        cases: See ``RunnerConfig.cases``.
        max_local_rejects: See ``RunnerConfig.max_local_rejects``.
        max_flat_map_regens: See ``RunnerConfig.max_flat_map_regens``.
        rng_seed: See ``RunnerConfig.rng_seed``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    cases: int = Field(default=DEFAULT_CASES, ge=1)
    max_local_rejects: int = Field(default=DEFAULT_MAX_LOCAL_REJECTS, ge=0)
    max_flat_map_regens: int = Field(default=DEFAULT_MAX_FLAT_MAP_REGENS, ge=0)
    rng_seed: int | None = None

    @field_validator("cases", "max_local_rejects", "max_flat_map_regens", mode="before")
    @classmethod
    def _coerce_int(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip().replace("_", "")
            return int(stripped) if stripped.lstrip("-").isdigit() else value
        return value

    @field_validator("rng_seed", mode="before")
    @classmethod
    def _coerce_seed(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return None
            return int(stripped) if stripped.lstrip("-").isdigit() else value
        return value

    def to_config(self) -> RunnerConfig:
        """Convert the validated model into the runtime dataclass."""
        return RunnerConfig(
            cases=self.cases,
            max_local_rejects=self.max_local_rejects,
            max_flat_map_regens=self.max_flat_map_regens,
            rng_seed=self.rng_seed,
        )


__all__ = [
    "ConfigReadError",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "RunnerConfig",
    "RunnerConfigModel",
]
