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


"""Exceptions raised by typelens."""


class TypelensError(Exception):
    """Base class for all typelens exceptions."""

    pass


class ConfigError(Exception):
    """Configuration error during initial configuration of the library."""

    pass


class UnsupportedTypeReference(TypelensError, TypeError):
    """A type reference that is neither a class nor a parameterized class.

    Type variables, ``Any``, unions, literals and forward references can't be
    classified without a binding context, so they are rejected.

    Attributes
    ==========
    reference : object
        The offending type reference.
    """

    def __init__(self, message, reference=None):
        super(UnsupportedTypeReference, self).__init__(message)

        self.reference = reference


class InvalidDescriptorConstruction(TypelensError, TypeError):
    """A generic descriptor was requested for a reference that isn't parameterized.

    Attributes
    ==========
    reference : object
        The offending type reference.
    """

    def __init__(self, message, reference=None):
        super(InvalidDescriptorConstruction, self).__init__(message)

        self.reference = reference


class InvalidArgumentList(TypelensError, ValueError):
    """A type argument list was constructed from zero arguments."""

    pass


class EmptyListAccess(TypelensError, IndexError):
    """``first()`` or ``last()`` was called on an empty type argument list."""

    pass


class BuildError(TypelensError):
    """An instance could not be built.

    Only raised by :py:meth:`~typelens.core.builder.BuildResult.unwrap`; the
    underlying exception, if any, is chained as ``__cause__``.

    Attributes
    ==========
    failure : BuildFailure
        Why the build failed.
    """

    def __init__(self, message, failure=None):
        super(BuildError, self).__init__(message)

        self.failure = failure
