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

"""Classes to introspect. They live at module level so they can be looked up by name."""

import abc
from typing import Generic, NamedTuple, Protocol, TypeVar, TypedDict

from ..typesystem import PythonTypeSystem, constructor

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


class Container(Generic[T]):
    def __init__(self, item: T):
        self.item = item


class Comparable(Protocol[T]):
    def compare_to(self, other: T) -> int:
        ...


class Sized(Protocol):
    def size(self) -> int:
        ...


class Box(Container[T], Comparable[T]):
    def compare_to(self, other):
        return 0


class IntBox(Container[int], Comparable[int]):
    def compare_to(self, other):
        return self.item - other


class SizedBox(Container[str], Sized, Comparable[str]):
    def size(self):
        return len(self.item)

    def compare_to(self, other):
        return len(self.item) - len(other)


class OnlyInterfaces(Sized):
    def size(self):
        return 0


class Tagged(Container[int], Generic[T]):
    pass


class Point(NamedTuple):
    x: int
    y: int


class Movie(TypedDict):
    title: str
    year: int


class Outer(object):
    class Inner(object):
        pass


class Base(object):
    pass


class Plain(Base):
    pass


class Mixed(Base, Container[int]):
    pass


class Store(abc.ABC, Generic[K, V]):
    @abc.abstractmethod
    def get(self, key: K) -> V:
        pass


class Shape(abc.ABC):
    def __init__(self, name: str):
        self.name = name

    @abc.abstractmethod
    def area(self) -> float:
        pass


class Pair(object):
    def __init__(self, left: int, right: str):
        self.left = left
        self.right = right

    def __eq__(self, other):
        return (
            isinstance(other, Pair)
            and self.left == other.left
            and self.right == other.right
        )

    def __repr__(self):
        return "Pair({!r}, {!r})".format(self.left, self.right)


class Temperature(object):
    def __init__(self, celsius: float):
        self.celsius = celsius

    @constructor
    def from_text(cls, text: str):
        return cls(float(text.rstrip("C")))

    @constructor
    def _from_kelvin(cls, kelvin: int):
        return cls(kelvin - 273.15)


class Inventory(object):
    def __init__(self, items: list[str]):
        self.items = items


class Loose(object):
    def __init__(self, value):
        self.value = value


class Fragile(object):
    def __init__(self, value: int):
        raise ValueError("fragile: {}".format(value))


class Varargs(object):
    def __init__(self, *values: int):
        self.values = values


class NoArgs(object):
    pass


class FakeTypeSystem(PythonTypeSystem):
    "A `PythonTypeSystem` whose registry only knows the given classes"

    def __init__(self, *known):
        self.registry = {self.qualified_name(cls): cls for cls in known}

    def lookup(self, qualified_name):
        return self.registry.get(qualified_name)
