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

"""Configuration loading for shrinkwiz.

Runner settings may live in a standalone ``shrinkwiz.toml`` /
``.shrinkwiz.toml`` (keys at the top level or under ``[runner]``) or in the
``[tool.shrinkwiz]`` table of ``pyproject.toml``. Environment variables
prefixed with ``SHRINKWIZ_`` override file values through
``config_from_env``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from shrinkwiz._internal.logging_utils import structured_extra
from shrinkwiz.compat import tomllib
from shrinkwiz.core.model_types import LogComponent

from .constants import CONFIG_FILENAMES, ENV_PREFIX
from .models import ConfigReadError, InvalidConfigFileError, RunnerConfig, RunnerConfigModel

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("shrinkwiz.config")

_ENV_FIELDS: tuple[str, ...] = ("cases", "max_local_rejects", "max_flat_map_regens", "rng_seed")


@dataclass(slots=True, frozen=True)
class LoadedConfig:
    """Container for a loaded configuration and its source path.

    Attributes:
        config: Parsed configuration instance.
        path: File the configuration was loaded from, or None when defaults
            are used.
    """

    config: RunnerConfig
    path: Path | None


def load_config(explicit_path: Path | None = None, *, base_dir: Path | None = None) -> RunnerConfig:
    """Load runner configuration from a TOML file or use defaults.

    Args:
        explicit_path: Optional configuration file. When given, only this file
            is consulted and it must contain shrinkwiz settings.
        base_dir: Directory searched when no explicit path is given; defaults
            to the current working directory.

    Returns:
        The validated ``RunnerConfig``.
    """
    return load_config_with_metadata(explicit_path, base_dir=base_dir).config


def load_config_with_metadata(
    explicit_path: Path | None = None,
    *,
    base_dir: Path | None = None,
) -> LoadedConfig:
    """Load runner configuration together with the file it came from.

    The search order is ``shrinkwiz.toml``, ``.shrinkwiz.toml`` and then
    ``pyproject.toml``; the first file holding shrinkwiz settings wins.

    Args:
        explicit_path: Optional configuration file to use instead of searching.
        base_dir: Directory searched when no explicit path is given.

    Returns:
        LoadedConfig: Parsed configuration and the path it originated from.

    Raises:
        ConfigReadError: If a candidate file cannot be read or parsed.
        InvalidConfigFileError: If the settings fail validation, or an
            explicit file holds no shrinkwiz settings.
    """
    if explicit_path is not None:
        candidates = [explicit_path if explicit_path.is_absolute() else Path.cwd() / explicit_path]
    else:
        root = base_dir or Path.cwd()
        candidates = [root / name for name in CONFIG_FILENAMES]

    for candidate in candidates:
        loaded = _load_candidate(candidate, explicit=explicit_path is not None)
        if loaded is not None:
            logger.debug(
                "Loaded runner configuration from %s",
                candidate,
                extra=structured_extra(LogComponent.CONFIG, details={"path": str(candidate)}),
            )
            return loaded
    return LoadedConfig(config=RunnerConfig(), path=None)


def _load_candidate(candidate: Path, *, explicit: bool) -> LoadedConfig | None:
    if not candidate.exists():
        if explicit:
            raise ConfigReadError(candidate, FileNotFoundError(str(candidate)))
        return None
    try:
        raw_map: dict[str, object] = tomllib.loads(candidate.read_text(encoding="utf-8"))
    # ignore JUSTIFIED: filesystem or parse errors depend on host configuration
    except Exception as exc:
        raise ConfigReadError(candidate, exc) from exc

    payload = _extract_payload(candidate, raw_map)
    if payload is None:
        if explicit:
            message = f"{candidate.name} does not define shrinkwiz configuration"
            raise InvalidConfigFileError(candidate, ValueError(message))
        return None
    try:
        model = RunnerConfigModel.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigFileError(candidate, exc) from exc
    return LoadedConfig(config=model.to_config(), path=candidate.resolve())


def _extract_payload(candidate: Path, raw_map: dict[str, object]) -> dict[str, object] | None:
    if candidate.name == "pyproject.toml":
        tool_section = raw_map.get("tool")
        if not isinstance(tool_section, dict):
            return None
        section = cast("dict[str, object]", tool_section).get("shrinkwiz")
        if section is None:
            return None
        if not isinstance(section, dict):
            message = "[tool.shrinkwiz] must be a TOML table"
            raise InvalidConfigFileError(candidate, ValueError(message))
        raw_map = cast("dict[str, object]", section)
    runner_section = raw_map.get("runner")
    if isinstance(runner_section, dict):
        return cast("dict[str, object]", runner_section)
    return raw_map or None


def config_from_env(
    base: RunnerConfig | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> RunnerConfig:
    """Apply ``SHRINKWIZ_*`` environment overrides on top of ``base``.

    Recognised variables are ``SHRINKWIZ_CASES``,
    ``SHRINKWIZ_MAX_LOCAL_REJECTS``, ``SHRINKWIZ_MAX_FLAT_MAP_REGENS`` and
    ``SHRINKWIZ_RNG_SEED``.

    Args:
        base: Configuration to override; defaults to ``RunnerConfig()``.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        The merged configuration.

    Raises:
        InvalidConfigFileError: If an override fails validation.
    """
    base = base or RunnerConfig()
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    for name in _ENV_FIELDS:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = raw
    if not overrides:
        return base
    payload: dict[str, object] = {
        "cases": base.cases,
        "max_local_rejects": base.max_local_rejects,
        "max_flat_map_regens": base.max_flat_map_regens,
        "rng_seed": base.rng_seed,
        **overrides,
    }
    try:
        model = RunnerConfigModel.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigFileError(Path("<environment>"), exc) from exc
    return model.to_config()


__all__ = ["LoadedConfig", "config_from_env", "load_config", "load_config_with_metadata"]
