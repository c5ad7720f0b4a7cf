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

"""Configuration management for shrinkwiz.

This package provides the runner configuration model, its validation, and
loading from TOML files and the environment.
"""

from __future__ import annotations

from .constants import RUNAWAY_STEP_LIMIT
from .loader import LoadedConfig, config_from_env, load_config, load_config_with_metadata
from .models import (
    ConfigReadError,
    ConfigValidationError,
    InvalidConfigFileError,
    RunnerConfig,
    RunnerConfigModel,
)

__all__ = [
    "RUNAWAY_STEP_LIMIT",
    "ConfigReadError",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "LoadedConfig",
    "RunnerConfig",
    "RunnerConfigModel",
    "config_from_env",
    "load_config",
    "load_config_with_metadata",
]
