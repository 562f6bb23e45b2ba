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
from unittest import mock

import pytest

from ...exceptions import BuildError, ConfigError
from ..builder import BuildFailure, BuildResult, InstanceBuilder
from .fixtures import (
    Comparable,
    Fragile,
    Inventory,
    Loose,
    NoArgs,
    OnlyInterfaces,
    Pair,
    Shape,
    Temperature,
    Varargs,
)


@pytest.fixture
def settings():
    settings = mock.Mock(log_build_failures=True, check_argument_types=True)
    with mock.patch("typelens.core.builder.get_settings", return_value=settings):
        yield settings


def test_exact_signature(settings):
    result = InstanceBuilder(Pair).add_argument(int, 5).add_argument(str, "x").build()

    assert result.ok
    assert result
    assert result.failure is None
    assert result.cause is None
    assert result.instance == Pair(5, "x")
    assert result.unwrap() is result.instance


def test_wrong_order(settings):
    result = InstanceBuilder(Pair).add_argument(str, "x").add_argument(int, 5).build()

    assert not result.ok
    assert not result
    assert result.instance is None
    assert result.failure is BuildFailure.NO_CONSTRUCTOR
    assert isinstance(result.cause, LookupError)


@pytest.mark.parametrize(
    "arguments",
    [
        [],
        [(int, 5)],
        [(int, 5), (str, "x"), (str, "y")],
        [(bool, True), (str, "x")],
        [(int, 5), (object, "x")],
        [(float, 5.0), (str, "x")],
    ],
)
def test_no_coercion(settings, arguments):
    builder = InstanceBuilder(Pair)
    for type_, value in arguments:
        builder.add_argument(type_, value)

    assert builder.build().failure is BuildFailure.NO_CONSTRUCTOR


def test_add_argument_chains_and_accumulates(settings):
    builder = InstanceBuilder(Pair)
    assert builder.add_argument(int, 1) is builder
    assert builder.add_argument(str, "a") is builder
    assert builder.argument_types == (int, str)
    assert builder.arguments == (1, "a")


def test_add_argument_does_not_check_values(settings):
    builder = InstanceBuilder(Pair).add_argument(int, "not an int")
    assert builder.arguments == ("not an int",)


def test_value_not_assignable(settings):
    result = (
        InstanceBuilder(Pair).add_argument(int, "5").add_argument(str, "x").build()
    )

    assert result.failure is BuildFailure.INVOCATION_FAILED
    assert isinstance(result.cause, TypeError)
    assert "Argument 0" in str(result.cause)


def test_value_check_can_be_disabled(settings):
    settings.check_argument_types = False

    result = (
        InstanceBuilder(Pair).add_argument(int, "5").add_argument(str, "x").build()
    )

    assert result.ok
    assert result.instance.left == "5"


def test_constructor_raises(settings):
    result = InstanceBuilder(Fragile).add_argument(int, 1).build()

    assert result.failure is BuildFailure.INVOCATION_FAILED
    assert isinstance(result.cause, ValueError)
    assert str(result.cause) == "fragile: 1"


def test_abstract_class_is_inaccessible(settings):
    result = InstanceBuilder(Shape).add_argument(str, "square").build()

    assert result.failure is BuildFailure.INACCESSIBLE
    assert isinstance(result.cause, TypeError)


def test_interface_is_inaccessible(settings):
    result = InstanceBuilder(Comparable).build()
    assert result.failure is BuildFailure.INACCESSIBLE


def test_no_arguments(settings):
    assert isinstance(InstanceBuilder(NoArgs).build().instance, NoArgs)
    assert isinstance(InstanceBuilder(OnlyInterfaces).build().instance, OnlyInterfaces)


def test_varargs_are_not_expanded(settings):
    result = InstanceBuilder(Varargs).add_argument(int, 1).add_argument(int, 2).build()
    assert result.failure is BuildFailure.NO_CONSTRUCTOR


def test_unannotated_parameter_is_object(settings):
    assert InstanceBuilder(Loose).add_argument(object, 3).build().instance.value == 3
    assert not InstanceBuilder(Loose).add_argument(int, 3).build()


class TestAlternateConstructors(object):
    def test_init(self, settings):
        result = InstanceBuilder(Temperature).add_argument(float, 21.5).build()
        assert result.instance.celsius == 21.5

    def test_alternate(self, settings):
        result = InstanceBuilder(Temperature).add_argument(str, "21.5C").build()
        assert result.instance.celsius == 21.5

    def test_private_alternate_is_inaccessible(self, settings):
        result = InstanceBuilder(Temperature).add_argument(int, 300).build()
        assert result.failure is BuildFailure.INACCESSIBLE

    def test_alternate_raises(self, settings):
        result = InstanceBuilder(Temperature).add_argument(str, "warm").build()
        assert result.failure is BuildFailure.INVOCATION_FAILED
        assert isinstance(result.cause, ValueError)


class TestParameterizedTypes(object):
    def test_exact(self, settings):
        result = InstanceBuilder(Inventory).add_argument(list[str], ["a"]).build()
        assert result.instance.items == ["a"]

    def test_raw_type_does_not_match(self, settings):
        result = InstanceBuilder(Inventory).add_argument(list, ["a"]).build()
        assert result.failure is BuildFailure.NO_CONSTRUCTOR

    def test_type_arguments_must_match(self, settings):
        result = InstanceBuilder(Inventory).add_argument(list[int], [1]).build()
        assert result.failure is BuildFailure.NO_CONSTRUCTOR

    def test_value_checked_against_raw_class(self, settings):
        result = InstanceBuilder(Inventory).add_argument(list[str], ("a",)).build()
        assert result.failure is BuildFailure.INVOCATION_FAILED


def test_repeated_build(settings):
    builder = InstanceBuilder(Pair).add_argument(int, 1).add_argument(str, "a")

    first = builder.build()
    second = builder.build()

    assert first.instance == second.instance
    assert first.instance is not second.instance


def test_unwrap_failure(settings):
    result = InstanceBuilder(Fragile).add_argument(int, 1).build()

    with pytest.raises(BuildError) as info:
        result.unwrap()

    assert info.value.failure is BuildFailure.INVOCATION_FAILED
    assert isinstance(info.value.__cause__, ValueError)


def test_result_repr():
    assert repr(BuildResult.success(1)) == "BuildResult(instance=1)"
    assert "no-constructor" in repr(
        BuildResult.failed(BuildFailure.NO_CONSTRUCTOR, LookupError("nope"))
    )


class TestLogging(object):
    def test_failure_is_logged(self, settings, caplog):
        with caplog.at_level(logging.DEBUG, logger="typelens.core.builder"):
            InstanceBuilder(Fragile).add_argument(int, 1).build()

        (record,) = caplog.records
        assert record.levelno == logging.DEBUG
        assert "typelens.core.tests.fixtures.Fragile" in record.getMessage()
        assert "invocation-failed" in record.getMessage()
        assert record.exc_info is not None

    def test_success_is_not_logged(self, settings, caplog):
        with caplog.at_level(logging.DEBUG, logger="typelens.core.builder"):
            InstanceBuilder(NoArgs).build()

        assert caplog.records == []

    def test_logging_can_be_disabled(self, settings, caplog):
        settings.log_build_failures = False

        with caplog.at_level(logging.DEBUG, logger="typelens.core.builder"):
            InstanceBuilder(Fragile).add_argument(int, 1).build()

        assert caplog.records == []


def test_configuration_error_propagates():
    with mock.patch(
        "typelens.core.builder.get_settings",
        side_effect=ConfigError("Configuration 'non-existent' doesn't exist!"),
    ):
        builder = InstanceBuilder(Pair).add_argument(int, 5).add_argument(str, "x")

        with pytest.raises(ConfigError):
            builder.build()
