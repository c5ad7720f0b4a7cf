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

"""Strategies, value trees and the combinators that compose them."""

from __future__ import annotations

from .traits import (
    BoxedStrategy,
    Just,
    NoShrink,
    NoShrinkValueTree,
    SBoxedStrategy,
    Strategy,
    StrategyLike,
    ValueTree,
    as_strategy,
)
from .fuse import Fuse
from .map import Map, MapValueTree, Perturb, PerturbValueTree
from .filter import Filter, FilterValueTree
from .tuples import TupleStrategy, TupleValueTree, tuples
from .flatten import Flatten, FlattenValueTree, IndFlatten, IndFlattenMap
from .unions import Union, UnionValueTree
from .recursive import Recursive
from .shuffle import Shuffle, ShuffleValueTree
from .sanity import CheckStrategySanityOptions, SanityReport, check_strategy_sanity

__all__ = [
    "BoxedStrategy",
    "CheckStrategySanityOptions",
    "Filter",
    "FilterValueTree",
    "Flatten",
    "FlattenValueTree",
    "Fuse",
    "IndFlatten",
    "IndFlattenMap",
    "Just",
    "Map",
    "MapValueTree",
    "NoShrink",
    "NoShrinkValueTree",
    "Perturb",
    "PerturbValueTree",
    "Recursive",
    "SBoxedStrategy",
    "SanityReport",
    "Shuffle",
    "ShuffleValueTree",
    "Strategy",
    "StrategyLike",
    "TupleStrategy",
    "TupleValueTree",
    "Union",
    "UnionValueTree",
    "ValueTree",
    "as_strategy",
    "check_strategy_sanity",
    "tuples",
]
