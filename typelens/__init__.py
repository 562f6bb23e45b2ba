"""Runtime generic-type introspection for Python classes

.. code-block:: bash

    pip install typelens

typelens answers the questions ``isinstance`` can't: which parameterized class does
a class extend and with which type arguments, which of its interfaces are generic,
and does a type reference name a given class. It also builds instances through the
constructor whose signature exactly matches a list of argument types.

    * `Introspector` inspects the declared bases of a class
    * `TypeDescriptor` and `GenericTypeDescriptor` describe type references
    * `InstanceBuilder` calls exact-signature constructors and reports why it couldn't
"""

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

from typelens import config
from typelens import exceptions
from typelens.version import __version__

from typelens.core import (
    BuildFailure,
    BuildResult,
    Constructor,
    GenericTypeDescriptor,
    InstanceBuilder,
    Introspector,
    PythonTypeSystem,
    ReferenceKind,
    TypeArgumentList,
    TypeDescriptor,
    TypeSystem,
    TypeTraits,
    constructor,
    trait_flags,
)

select_env = config.select_env
get_settings = config.get_settings

__all__ = [
    "__version__",
    "config",
    "exceptions",
    "get_settings",
    "select_env",
    "BuildFailure",
    "BuildResult",
    "Constructor",
    "GenericTypeDescriptor",
    "InstanceBuilder",
    "Introspector",
    "PythonTypeSystem",
    "ReferenceKind",
    "TypeArgumentList",
    "TypeDescriptor",
    "TypeSystem",
    "TypeTraits",
    "constructor",
    "trait_flags",
]
