# Copyright 2018-2023 Descartes Labs.
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

from .builder import BuildFailure, BuildResult, InstanceBuilder
from .descriptors import (
    GenericTypeDescriptor,
    TypeArgumentList,
    TypeDescriptor,
    TypeTraits,
    trait_flags,
)
from .introspector import Introspector
from .typesystem import (
    Constructor,
    PythonTypeSystem,
    ReferenceKind,
    TypeSystem,
    constructor,
)

__all__ = [
    # .builder
    "BuildFailure",
    "BuildResult",
    "InstanceBuilder",
    # .descriptors
    "GenericTypeDescriptor",
    "TypeArgumentList",
    "TypeDescriptor",
    "TypeTraits",
    "trait_flags",
    # .introspector
    "Introspector",
    # .typesystem
    "Constructor",
    "PythonTypeSystem",
    "ReferenceKind",
    "TypeSystem",
    "constructor",
]
