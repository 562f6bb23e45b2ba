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

from typing import Iterable, List, Optional

from .builder import InstanceBuilder
from .descriptors import GenericTypeDescriptor, TypeDescriptor, trait_flags
from .typesystem import PythonTypeSystem


class Introspector(object):
    """
    Answers questions about the generic bases of a class.

    The declared superclass and interface references of the class are captured
    when the `Introspector` is created.

    Example
    -------
    >>> class Box(Container[int], Comparable[int]):
    ...     pass
    >>> introspector = Introspector(Box)
    >>> introspector.has_generic_superclass()
    True
    >>> introspector.generic_superclass().declared_type_arguments().first().describe()
    'builtins.int'
    >>> [i.describe() for i in introspector.generic_interfaces()]
    ['mymodule.Comparable[builtins.int]']
    """

    def __init__(self, cls, type_system=None):
        """
        Parameters
        ----------
        cls : type
            The class to introspect.
        type_system : TypeSystem, optional
            Defaults to the `PythonTypeSystem`.

        Raises
        ------
        TypeError
            If `cls` is not a class.
        """
        if not isinstance(cls, type):
            raise TypeError(
                "Expected a class to introspect, but got {!r}. "
                "Use Introspector.from_instance for the class of a value.".format(cls)
            )

        if type_system is None:
            type_system = PythonTypeSystem.get_default()

        self._type_system = type_system
        self._target = cls
        self._superclass = type_system.generic_superclass(cls)
        self._interfaces = tuple(type_system.generic_interfaces(cls))

    @classmethod
    def from_instance(cls, obj, type_system=None):
        "Introspect the runtime class of `obj`"
        if type_system is None:
            type_system = PythonTypeSystem.get_default()
        return cls(type_system.type_of(obj), type_system=type_system)

    def _has_type_arguments(self, reference):
        # a parameterized reference without arguments (`typing.List`) is never generic
        return self._type_system.is_parameterized(reference) and bool(
            self._type_system.arguments(reference)
        )

    @property
    def target(self) -> type:
        "The introspected class"
        return self._target

    def has_generic_superclass(self) -> bool:
        """
        Whether the class extends a parameterized superclass.
        False if the class has no superclass at all.
        """
        return self._superclass is not None and self._has_type_arguments(
            self._superclass
        )

    def superclass(self) -> Optional[TypeDescriptor]:
        "The raw superclass, whether or not it's generic; None if there is none"
        if self._superclass is None:
            return None
        return TypeDescriptor.from_type_reference(
            self._type_system.raw_component(self._superclass), self._type_system
        )

    def generic_superclass(self) -> Optional[GenericTypeDescriptor]:
        "The parameterized superclass, or None if the superclass isn't parameterized"
        if not self.has_generic_superclass():
            return None
        return GenericTypeDescriptor(self._superclass, self._type_system)

    def all_interfaces(self) -> List[TypeDescriptor]:
        """
        Every directly implemented interface, as a raw descriptor, in
        declaration order, regardless of whether it's generic.
        """
        return [
            TypeDescriptor.from_type_reference(
                self._type_system.raw_component(interface), self._type_system
            )
            for interface in self._interfaces
        ]

    def has_generic_interfaces(self) -> bool:
        "Whether any directly implemented interface is parameterized"
        return any(self._has_type_arguments(i) for i in self._interfaces)

    def generic_interfaces(self) -> List[GenericTypeDescriptor]:
        """
        The parameterized interfaces the class implements, in declaration order.

        Interfaces implemented without type arguments are left out; use
        `all_interfaces` to get every interface.
        """
        return [
            GenericTypeDescriptor(interface, self._type_system)
            for interface in self._interfaces
            if self._has_type_arguments(interface)
        ]

    @staticmethod
    def find_descriptor(
        descriptors: Iterable[TypeDescriptor], target: type
    ) -> Optional[TypeDescriptor]:
        """
        The first descriptor in `descriptors` that `matches` the class `target`,
        or None if no descriptor does.
        """
        for descriptor in descriptors:
            if descriptor.matches(target):
                return descriptor
        return None

    @staticmethod
    def resolve_raw_type(reference, type_system=None) -> Optional[type]:
        """
        Look up the raw class of `reference` by its qualified name.

        Returns None if the class can't be found, e.g. because it was defined
        inside a function. Never raises.
        """
        if type_system is None:
            type_system = PythonTypeSystem.get_default()

        if type_system.is_parameterized(reference):
            raw = type_system.origin(reference)
        elif type_system.is_raw(reference):
            raw = reference
        else:
            return None
        return type_system.lookup(type_system.qualified_name(raw))

    @staticmethod
    def trait_flags(cls, type_system=None):
        "The `TypeTraits` of the raw class `cls`"
        return trait_flags(cls, type_system)

    @staticmethod
    def instance_builder(cls, type_system=None) -> InstanceBuilder:
        "A new `InstanceBuilder` for `cls`"
        return InstanceBuilder(cls, type_system=type_system)
