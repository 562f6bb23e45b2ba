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

import enum
from collections import abc

from ..exceptions import (
    EmptyListAccess,
    InvalidArgumentList,
    InvalidDescriptorConstruction,
)
from .typesystem import PythonTypeSystem, ReferenceKind


def _type_system(type_system):
    return type_system if type_system is not None else PythonTypeSystem.get_default()


class TypeTraits(enum.IntFlag):
    """The declaration traits of a class.

    Attributes
    ----------
    GENERIC : enum
        The class declares at least one type parameter.
    INTERFACE : enum
        The class is an interface (a ``typing.Protocol``).
    ABSTRACT : enum
        The class can't be instantiated: it's an interface or has abstract methods.
    """

    NONE = 0
    GENERIC = 1
    INTERFACE = 2
    ABSTRACT = 4


def trait_flags(cls, type_system=None):
    "The `TypeTraits` of the raw class `cls`"
    type_system = _type_system(type_system)

    flags = TypeTraits.NONE
    if type_system.type_parameters(cls):
        flags |= TypeTraits.GENERIC
    if type_system.is_interface(cls):
        flags |= TypeTraits.INTERFACE
    if type_system.is_abstract(cls):
        flags |= TypeTraits.ABSTRACT
    return flags


def _parameterized_traits(reference, type_system):
    # The raw class is found by name, the same way any other caller would have to;
    # if it can't be found (e.g. it was defined in a function), it has no traits.
    raw = type_system.lookup(type_system.qualified_name(type_system.origin(reference)))
    return trait_flags(raw, type_system) if raw is not None else TypeTraits.NONE


class TypeDescriptor(object):
    """
    Immutable description of a raw or parameterized type reference.

    Use `TypeDescriptor.from_type_reference` to create one. Raw descriptors wrap a
    class (``Container``); parameterized descriptors wrap a subscripted class
    (``Container[int]``). The `traits` are computed once, when the descriptor is
    created.

    Descriptors compare equal when they have the same kind and wrap equal references.
    """

    __slots__ = ("_reference", "_kind", "_traits", "_type_system")

    def __init__(self, reference, kind, traits, type_system):
        self._reference = reference
        self._kind = kind
        self._traits = traits
        self._type_system = type_system

    @staticmethod
    def from_type_reference(reference, type_system=None):
        """
        Classify `reference` and describe it.

        Parameters
        ----------
        reference : type or parameterized type
            A class like ``int``, or a subscripted class like ``Container[int]``.
        type_system : TypeSystem, optional
            Defaults to the `PythonTypeSystem`.

        Returns
        -------
        TypeDescriptor

        Raises
        ------
        UnsupportedTypeReference
            If `reference` is a type variable, ``Any``, a union, a forward
            reference or anything else that is neither a class nor a
            parameterized class.
        """
        type_system = _type_system(type_system)
        kind = type_system.classify(reference)

        if kind is ReferenceKind.RAW:
            traits = trait_flags(reference, type_system)
        else:
            traits = _parameterized_traits(reference, type_system)

        return TypeDescriptor(reference, kind, traits, type_system)

    @property
    def reference(self):
        "The wrapped type reference"
        return self._reference

    @property
    def kind(self):
        "The `ReferenceKind` of the wrapped reference"
        return self._kind

    @property
    def traits(self):
        "The `TypeTraits` of the wrapped reference's raw class"
        return self._traits

    def is_parameterized(self):
        return self._kind is ReferenceKind.PARAMETERIZED

    def is_generic(self):
        return bool(self._traits & TypeTraits.GENERIC)

    def is_interface(self):
        return bool(self._traits & TypeTraits.INTERFACE)

    def is_abstract(self):
        """
        Whether the class is abstract in nature: this is true for
        interfaces as well as for abstract classes.
        """
        return bool(self._traits & TypeTraits.ABSTRACT)

    def is_abstract_class(self):
        "Whether the class is abstract but not an interface"
        return self.is_abstract() and not self.is_interface()

    def matches(self, target):
        """
        Whether this descriptor refers to the class `target`.

        A parameterized descriptor matches by the qualified name of its raw class,
        whatever its type arguments are: ``Container[int]`` and ``Container[str]``
        both match ``Container``.
        """
        if self._kind is ReferenceKind.RAW:
            return self._reference is target

        type_system = self._type_system
        return type_system.qualified_name(
            type_system.origin(self._reference)
        ) == type_system.qualified_name(target)

    def resolve_raw_type(self):
        """
        The raw class of this descriptor.

        For parameterized descriptors the class is looked up by its qualified
        name, so this returns None if it can't be found there.
        """
        if self._kind is ReferenceKind.RAW:
            return self._reference

        type_system = self._type_system
        return type_system.lookup(
            type_system.qualified_name(type_system.origin(self._reference))
        )

    def describe(self):
        "Fully qualified rendering, e.g. ``pkg.mod.Container[builtins.int]``"
        return self._type_system.describe(self._reference)

    def __eq__(self, other):
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self._kind is other._kind and self._reference == other._reference

    def __hash__(self):
        return hash((self._kind, self._reference))

    def __str__(self):
        return self.describe()

    def __repr__(self):
        return "{}({}, {})".format(type(self).__name__, self._kind, self.describe())


class GenericTypeDescriptor(TypeDescriptor):
    """
    Descriptor of a parameterized reference, which also knows its type arguments.

    >>> GenericTypeDescriptor(Dict[str, int]).declared_type_arguments().last()
    TypeDescriptor(raw, builtins.int)
    """

    __slots__ = ()

    def __init__(self, reference, type_system=None):
        type_system = _type_system(type_system)
        if not type_system.is_parameterized(reference) or not type_system.arguments(
            reference
        ):
            raise InvalidDescriptorConstruction(
                "Cannot describe {} as a generic type: it has no type arguments".format(
                    type_system.describe(reference)
                ),
                reference=reference,
            )

        super(GenericTypeDescriptor, self).__init__(
            reference,
            ReferenceKind.PARAMETERIZED,
            _parameterized_traits(reference, type_system),
            type_system,
        )

    def declared_type_arguments(self):
        """
        The actual type arguments of the reference, in declaration order.

        Raises
        ------
        UnsupportedTypeReference
            If any type argument is neither a class nor a parameterized class,
            for example a type variable.
        """
        return TypeArgumentList(
            TypeDescriptor.from_type_reference(argument, self._type_system)
            for argument in self._type_system.arguments(self._reference)
        )


class TypeArgumentList(abc.Sequence):
    "Immutable, non-empty, ordered sequence of `TypeDescriptor`"

    __slots__ = ("_descriptors",)

    def __init__(self, descriptors):
        descriptors = tuple(descriptors)
        if not descriptors:
            raise InvalidArgumentList(
                "A type argument list needs at least one type argument"
            )
        self._descriptors = descriptors

    def __getitem__(self, index):
        return self._descriptors[index]

    def __len__(self):
        return len(self._descriptors)

    def first(self):
        if not self._descriptors:
            raise EmptyListAccess("first() called on an empty type argument list")
        return self._descriptors[0]

    def last(self):
        if not self._descriptors:
            raise EmptyListAccess("last() called on an empty type argument list")
        return self._descriptors[-1]

    def __eq__(self, other):
        if not isinstance(other, TypeArgumentList):
            return NotImplemented
        return self._descriptors == other._descriptors

    def __hash__(self):
        return hash(self._descriptors)

    def __repr__(self):
        return "{}([{}])".format(
            type(self).__name__, ", ".join(d.describe() for d in self._descriptors)
        )
