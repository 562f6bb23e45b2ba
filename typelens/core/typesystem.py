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

"""
The host type system consumed by the descriptors, the introspector and the builder.

Everything typelens knows about classes goes through a `TypeSystem`: looking a class up
by its qualified name, classifying a type reference as raw or parameterized, reading the
declared bases of a class, its traits and its constructors. `PythonTypeSystem` answers
those questions with the interpreter's own reflection (``typing``, ``inspect`` and
``importlib``); tests substitute a fake with a hand-rolled registry.
"""

import abc
import importlib
import inspect
import logging
import types
import typing

from strenum import StrEnum

from ..exceptions import UnsupportedTypeReference

logger = logging.getLogger(__name__)

CONSTRUCTOR_MARKER = "__typelens_constructor__"

# Origins of subscripted special forms. ``Generic[T]`` and ``Protocol[T]`` only declare
# type parameters, unions have the ``types.UnionType`` class as origin, and
# ``typing.Annotated`` is a class before Python 3.13.
_SPECIAL_ORIGINS = (
    typing.Generic,
    typing.Protocol,
    typing.Union,
    types.UnionType,
    typing.Annotated,
)

# Bases that only declare type parameters or protocol-ness
_DECLARATION_BASES = (typing.Generic, typing.Protocol)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class ReferenceKind(StrEnum):
    """The kinds of type reference typelens can describe.

    Attributes
    ----------
    RAW : enum
        A plain class, such as ``int`` or ``Container``.
    PARAMETERIZED : enum
        A class subscripted with type arguments, such as ``Container[int]``.
    """

    RAW = "raw"
    PARAMETERIZED = "parameterized"


def constructor(func):
    """
    Decorator declaring a classmethod as an additional constructor of its class.

    Python classes have a single ``__init__``, so classes that want to offer several
    signatures to `InstanceBuilder` declare alternate constructors:

    >>> class Point(object):
    ...     def __init__(self, x: float, y: float):
    ...         self.x, self.y = x, y
    ...     @constructor
    ...     def from_pair(cls, pair: tuple):
    ...         return cls(*pair)

    Alternate constructors are not inherited, and ones whose name starts with an
    underscore are considered inaccessible.
    """
    if not isinstance(func, classmethod):
        func = classmethod(func)
    setattr(func.__func__, CONSTRUCTOR_MARKER, True)
    return func


class Constructor(object):
    """One way of constructing instances of a class, with a fixed ordered signature."""

    __slots__ = ("name", "parameter_types", "accessible", "_factory")

    def __init__(self, name, factory, parameter_types, accessible=True):
        self.name = name
        self.parameter_types = parameter_types
        self.accessible = accessible
        self._factory = factory

    def __call__(self, *args):
        return self._factory(*args)

    def __repr__(self):
        return "<Constructor {}({}){}>".format(
            self.name,
            ", ".join(getattr(t, "__name__", repr(t)) for t in self.parameter_types),
            "" if self.accessible else " inaccessible",
        )


class TypeSystem(abc.ABC):
    """
    The reflective capabilities typelens needs from its host.

    Subclasses implement the primitive queries; `classify` and `raw_component`
    are built on top of them.
    """

    @abc.abstractmethod
    def lookup(self, qualified_name):
        """The class registered under `qualified_name`, or None. Never raises."""

    @abc.abstractmethod
    def qualified_name(self, cls):
        """The globally unique name of `cls`, usable as a `lookup` key."""

    @abc.abstractmethod
    def type_of(self, obj):
        """The runtime class of `obj`."""

    @abc.abstractmethod
    def is_raw(self, ref):
        """Whether `ref` is a plain class."""

    @abc.abstractmethod
    def is_parameterized(self, ref):
        """Whether `ref` is a class subscripted with type arguments."""

    @abc.abstractmethod
    def origin(self, ref):
        """The raw class of a parameterized reference."""

    @abc.abstractmethod
    def arguments(self, ref):
        """The ordered actual type arguments of a parameterized reference."""

    @abc.abstractmethod
    def describe(self, ref):
        """Human-readable, fully qualified rendering of any type reference."""

    @abc.abstractmethod
    def generic_superclass(self, cls):
        """The declared superclass reference of `cls`, or None."""

    @abc.abstractmethod
    def generic_interfaces(self, cls):
        """The declared interface references of `cls`, in declaration order."""

    @abc.abstractmethod
    def type_parameters(self, cls):
        """The type parameters declared by `cls`."""

    @abc.abstractmethod
    def is_interface(self, cls):
        pass

    @abc.abstractmethod
    def is_abstract(self, cls):
        pass

    @abc.abstractmethod
    def constructors(self, cls):
        """The `Constructor` objects `cls` offers."""

    def classify(self, ref):
        """
        The `ReferenceKind` of `ref`.

        Raises
        ------
        UnsupportedTypeReference
            If `ref` is neither raw nor parameterized (type variables, ``Any``,
            unions, literals, forward references, ...).
        """
        if self.is_parameterized(ref):
            return ReferenceKind.PARAMETERIZED
        if self.is_raw(ref):
            return ReferenceKind.RAW
        raise UnsupportedTypeReference(
            "Not a class or a parameterized class: {}. Other type references can't be "
            "classified without knowing what their type variables are bound to".format(
                self.describe(ref)
            ),
            reference=ref,
        )

    def raw_component(self, ref):
        "The class `ref` refers to, ignoring any type arguments"
        return self.origin(ref) if self.is_parameterized(ref) else ref


class PythonTypeSystem(TypeSystem):
    """
    `TypeSystem` backed by the running interpreter.

    * Qualified names are ``"<module>.<qualname>"``; lookups import the longest
      importable module prefix and walk the remaining attributes. Classes defined
      inside functions (``<locals>`` in their qualname) can't be looked up.
    * The superclass of a class is its first declared base that isn't an interface;
      every other declared base counts as an implemented interface.
    * Interfaces are `typing.Protocol` classes.
    """

    _default = None

    @classmethod
    def get_default(cls):
        "The shared `PythonTypeSystem`; it holds no state"
        if cls._default is None:
            cls._default = cls()
        return cls._default

    def lookup(self, qualified_name):
        parts = qualified_name.split(".") if qualified_name else []
        if len(parts) < 2 or not all(parts) or "<locals>" in parts:
            logger.debug("Type %r can't be looked up by name", qualified_name)
            return None

        for i in range(len(parts) - 1, 0, -1):
            try:
                obj = importlib.import_module(".".join(parts[:i]))
            except ImportError:
                continue

            try:
                for attr in parts[i:]:
                    obj = getattr(obj, attr)
            except AttributeError:
                break

            if isinstance(obj, type):
                return obj
            break

        logger.debug("Type %r could not be resolved", qualified_name)
        return None

    def qualified_name(self, cls):
        return "{}.{}".format(cls.__module__, cls.__qualname__)

    def type_of(self, obj):
        return type(obj)

    def is_raw(self, ref):
        # `list[int]` passes `isinstance(..., type)` on Python 3.10
        return (
            isinstance(ref, type)
            and ref is not typing.Any
            and ref is not typing.Annotated
            and not self.is_parameterized(ref)
        )

    def is_parameterized(self, ref):
        origin = typing.get_origin(ref)
        return (
            isinstance(origin, type)
            and origin not in _SPECIAL_ORIGINS
            and ref is not origin
        )

    def origin(self, ref):
        return typing.get_origin(ref)

    def arguments(self, ref):
        return typing.get_args(ref)

    def describe(self, ref):
        if self.is_parameterized(ref):
            args = self.arguments(ref)
            if getattr(ref, "__args__", None) is None:
                # unsubscripted aliases like `typing.List`
                return self.qualified_name(self.origin(ref))
            return "{}[{}]".format(
                self.qualified_name(self.origin(ref)),
                ", ".join(self.describe(arg) for arg in args) if args else "()",
            )
        if self.is_raw(ref):
            return self.qualified_name(ref)
        if isinstance(ref, typing.TypeVar):
            return ref.__name__
        if isinstance(ref, (list, tuple)):
            return "[{}]".format(", ".join(self.describe(arg) for arg in ref))
        if ref is Ellipsis:
            return "..."
        return repr(ref)

    def _declared_bases(self, cls):
        # `__orig_bases__` is inherited; only the one in the class namespace is declared
        declared = cls.__dict__.get("__orig_bases__", cls.__bases__)
        bases = [
            base
            for base in declared
            if (typing.get_origin(base) or base) not in _DECLARATION_BASES
        ]
        if all(self.is_raw(base) or self.is_parameterized(base) for base in bases):
            return bases

        # NamedTuple and TypedDict declare functions as bases
        return [base for base in cls.__bases__ if base not in _DECLARATION_BASES]

    def _split_bases(self, cls):
        if cls is object:
            return None, []

        bases = self._declared_bases(cls)
        if self.is_interface(cls):
            return None, bases

        for i, base in enumerate(bases):
            if not self.is_interface(self.raw_component(base)):
                return base, bases[:i] + bases[i + 1 :]
        return object, bases

    def generic_superclass(self, cls):
        return self._split_bases(cls)[0]

    def generic_interfaces(self, cls):
        return tuple(self._split_bases(cls)[1])

    def type_parameters(self, cls):
        return tuple(getattr(cls, "__parameters__", ()))

    def is_interface(self, cls):
        return bool(getattr(cls, "_is_protocol", False))

    def is_abstract(self, cls):
        return self.is_interface(cls) or inspect.isabstract(cls)

    def constructors(self, cls):
        instantiable = not self.is_abstract(cls)
        constructors = []

        init = cls.__init__
        if getattr(init, "__name__", None) == "_no_init_or_replace_init":
            # placeholder left by typing.Protocol on classes implementing a protocol
            init = object.__init__

        if init is object.__init__ and cls.__new__ is object.__new__:
            parameter_types = ()
        else:
            annotated = init if init is not object.__init__ else cls.__new__
            parameter_types = self._parameter_types(cls, annotated)
        if parameter_types is not None:
            constructors.append(
                Constructor(cls.__name__, cls, parameter_types, instantiable)
            )

        for name, attr in vars(cls).items():
            if not isinstance(attr, classmethod) or not getattr(
                attr.__func__, CONSTRUCTOR_MARKER, False
            ):
                continue
            factory = getattr(cls, name)
            parameter_types = self._parameter_types(factory, attr.__func__)
            if parameter_types is not None:
                constructors.append(
                    Constructor(
                        "{}.{}".format(cls.__name__, name),
                        factory,
                        parameter_types,
                        instantiable and not name.startswith("_"),
                    )
                )

        return constructors

    def _parameter_types(self, func, annotated):
        # None means the signature can't be matched exactly, e.g. it takes *args
        try:
            signature = inspect.signature(func)
            hints = typing.get_type_hints(annotated)
        except (TypeError, ValueError, NameError) as e:
            logger.debug("Skipping constructor %r: %s", func, e)
            return None

        parameter_types = []
        for param in signature.parameters.values():
            if param.kind in _POSITIONAL:
                parameter_types.append(hints.get(param.name, object))
            elif param.kind is inspect.Parameter.VAR_POSITIONAL:
                return None
            elif (
                param.kind is inspect.Parameter.KEYWORD_ONLY
                and param.default is inspect.Parameter.empty
            ):
                return None
        return tuple(parameter_types)
