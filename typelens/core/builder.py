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

import logging

from strenum import StrEnum

from ..config import get_settings
from ..exceptions import BuildError
from .typesystem import PythonTypeSystem

logger = logging.getLogger(__name__)


class BuildFailure(StrEnum):
    """Why `InstanceBuilder.build` could not create an instance.

    Attributes
    ----------
    NO_CONSTRUCTOR : enum
        No constructor has exactly the accumulated parameter types.
    INACCESSIBLE : enum
        A matching constructor exists but can't be called: the class is
        abstract, or the alternate constructor is private.
    INVOCATION_FAILED : enum
        A value wasn't an instance of its declared type, or the constructor
        raised an exception.
    """

    NO_CONSTRUCTOR = "no-constructor"
    INACCESSIBLE = "inaccessible"
    INVOCATION_FAILED = "invocation-failed"


class BuildResult(object):
    """
    The outcome of `InstanceBuilder.build`.

    A successful result is truthy and holds the new `instance`; a failed result
    is falsy and holds the `failure` kind and the underlying `cause`.
    """

    __slots__ = ("instance", "failure", "cause")

    def __init__(self, instance=None, failure=None, cause=None):
        self.instance = instance
        self.failure = failure
        self.cause = cause

    @classmethod
    def success(cls, instance):
        return cls(instance=instance)

    @classmethod
    def failed(cls, failure, cause):
        return cls(failure=failure, cause=cause)

    @property
    def ok(self):
        return self.failure is None

    def __bool__(self):
        return self.ok

    def unwrap(self):
        """
        The built instance.

        Raises
        ------
        BuildError
            If the build failed; the underlying exception is its ``__cause__``.
        """
        if self.ok:
            return self.instance
        raise BuildError(
            "Could not build instance ({}): {}".format(self.failure, self.cause),
            failure=self.failure,
        ) from self.cause

    def __repr__(self):
        if self.ok:
            return "BuildResult(instance={!r})".format(self.instance)
        return "BuildResult(failure={}, cause={!r})".format(self.failure, self.cause)


class InstanceBuilder(object):
    """
    Build an instance of a class by calling the constructor whose signature
    exactly matches the accumulated argument types.

    Types are matched exactly and in order: no coercion, no subclass matching,
    no ``*args`` expansion. Constructors are the class itself and the
    classmethods decorated with `constructor`.

    Example
    -------
    >>> class Pair(object):
    ...     def __init__(self, left: int, right: str):
    ...         self.left, self.right = left, right
    >>> builder = InstanceBuilder(Pair).add_argument(int, 5).add_argument(str, "x")
    >>> builder.build().instance.right
    'x'
    >>> InstanceBuilder(Pair).add_argument(str, "x").build().failure
    <BuildFailure.NO_CONSTRUCTOR: 'no-constructor'>

    A builder is meant for a single caller; it is not thread-safe.
    """

    def __init__(self, cls, type_system=None):
        if type_system is None:
            type_system = PythonTypeSystem.get_default()

        self._target = cls
        self._type_system = type_system
        self._argument_types = []
        self._arguments = []

    @property
    def target(self):
        return self._target

    @property
    def argument_types(self):
        return tuple(self._argument_types)

    @property
    def arguments(self):
        return tuple(self._arguments)

    def add_argument(self, type_, value):
        """
        Append a constructor argument.

        `value` is not checked against `type_` until `build`.

        Returns
        -------
        InstanceBuilder
            This builder, for chaining.
        """
        self._argument_types.append(type_)
        self._arguments.append(value)
        return self

    def build(self):
        """
        Look up the constructor and call it with the accumulated arguments.

        Calling `build` again repeats the lookup with the same arguments.

        Returns
        -------
        BuildResult
            Lookup and invocation failures are reported through the result.

        Raises
        ------
        ConfigError
            If the settings can't be loaded, e.g. ``TYPELENS_ENV`` names an
            environment that doesn't exist.
        """
        result = self._build()

        if not result.ok and get_settings().log_build_failures:
            logger.debug(
                "Could not build %s (%s): %s",
                self._type_system.describe(self._target),
                result.failure,
                result.cause,
                exc_info=result.cause
                if result.failure is BuildFailure.INVOCATION_FAILED
                else None,
            )

        return result

    def _build(self):
        type_system = self._type_system
        argument_types = tuple(self._argument_types)

        matching = [
            constructor
            for constructor in type_system.constructors(self._target)
            if constructor.parameter_types == argument_types
        ]
        if not matching:
            return BuildResult.failed(
                BuildFailure.NO_CONSTRUCTOR,
                LookupError(
                    "{} has no constructor taking ({})".format(
                        type_system.describe(self._target),
                        ", ".join(type_system.describe(t) for t in argument_types),
                    )
                ),
            )

        accessible = [constructor for constructor in matching if constructor.accessible]
        if not accessible:
            return BuildResult.failed(
                BuildFailure.INACCESSIBLE,
                TypeError(
                    "Constructor {} of {} can't be called".format(
                        matching[0].name, type_system.describe(self._target)
                    )
                ),
            )
        constructor = accessible[0]

        if get_settings().check_argument_types:
            for position, (type_, value) in enumerate(
                zip(argument_types, self._arguments)
            ):
                if not self._is_assignable(value, type_):
                    return BuildResult.failed(
                        BuildFailure.INVOCATION_FAILED,
                        TypeError(
                            "Argument {} to {}: expected {}, but got {}: {!r}".format(
                                position,
                                constructor.name,
                                type_system.describe(type_),
                                type(value).__name__,
                                value,
                            )
                        ),
                    )

        try:
            instance = constructor(*self._arguments)
        except Exception as e:
            return BuildResult.failed(BuildFailure.INVOCATION_FAILED, e)

        return BuildResult.success(instance)

    def _is_assignable(self, value, type_):
        type_system = self._type_system

        if type_system.is_parameterized(type_):
            type_ = type_system.origin(type_)
        elif not type_system.is_raw(type_):
            # type variables, unions and the like aren't checked
            return True

        if type_system.is_interface(type_):
            # protocols are structural; only runtime-checkable ones support isinstance
            return True

        return isinstance(value, type_)
