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

"""shrinkwiz - value generation and shrinking for property-based tests.

A ``Strategy`` describes a domain of values and produces ``ValueTree``
objects from a ``TestRunner``. A failing test drives the tree with
``simplify()`` and ``complicate()`` until it reaches a minimal failing
value. Combinators build new strategies from existing ones, and
``check_strategy_sanity`` verifies that any strategy honours the shrink
contract.
"""

from __future__ import annotations

from ._internal.error_codes import error_code_catalog, error_code_for
from ._internal.exceptions import (
    ContractViolationError,
    ShrinkwizError,
    ShrinkwizTypeError,
    ShrinkwizValidationError,
    StrategyAbortError,
)
from ._internal.logging_utils import configure_logging
from .config import RunnerConfig, config_from_env, load_config
from .num import integers
from .probability import Probability
from .result import Err, Ok, maybe_err, maybe_ok
from .runner import TestRunner
from .strategy import (
    CheckStrategySanityOptions,
    Just,
    Strategy,
    Union,
    ValueTree,
    as_strategy,
    check_strategy_sanity,
    tuples,
)

__all__ = [
    "CheckStrategySanityOptions",
    "ContractViolationError",
    "Err",
    "Just",
    "Ok",
    "Probability",
    "RunnerConfig",
    "ShrinkwizError",
    "ShrinkwizTypeError",
    "ShrinkwizValidationError",
    "Strategy",
    "StrategyAbortError",
    "TestRunner",
    "Union",
    "ValueTree",
    "__version__",
    "as_strategy",
    "check_strategy_sanity",
    "config_from_env",
    "configure_logging",
    "error_code_catalog",
    "error_code_for",
    "integers",
    "load_config",
    "maybe_err",
    "maybe_ok",
    "tuples",
]

__version__ = "0.1.0"
