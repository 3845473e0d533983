"""Unit tests for conformance test generation."""

import asyncio
import logging

import pytest

from doublecheck import contract, provide
from doublecheck.checks import same_error
from doublecheck.conformance import (
    check_provider_methods,
    check_provider_values,
    consume,
    default_test_unit,
    run_body,
)
from doublecheck.errors import ConformanceError


class Recorder:
    """Test unit that records registrations instead of running them."""

    def __init__(self):
        self.cases = []

    def __call__(self, title, body):
        assert isinstance(title, str)
        assert callable(body)
        self.cases.append((title, body))

    @property
    def titles(self):
        return [title for title, _ in self.cases]


class Provider:
    def get_bar(self, foo):
        return "bar"

    def get_baz(self, bar):
        return "baz"


def test_default_test_unit_calls_the_body():
    called = []
    default_test_unit("my test", lambda: called.append(True))
    assert called == [True]


def test_default_test_unit_awaits_async_bodies():
    called = []

    async def body():
        await asyncio.sleep(0)
        called.append(True)

    default_test_unit("async", body)
    assert called == [True]


class TestProviderValues:
    def test_conforming_values(self):
        provider = {"foo": "bar", "bar": 4}
        check_provider_values(default_test_unit, provider, {"foo": "bar", "bar": 4})

    def test_mismatched_value(self):
        provider = {"foo": "bar", "bar": 4}
        with pytest.raises(ConformanceError, match='Provider value "bar" is 4 instead of 3'):
            check_provider_values(default_test_unit, provider, {"foo": "bar", "bar": 3})

    def test_attribute_provider(self):
        class Limits:
            max_foo = 20

        check_provider_values(default_test_unit, Limits(), {"max_foo": 20})

    def test_titles_name_the_key(self):
        recorder = Recorder()
        check_provider_values(recorder, {}, {"max_foo": 20})
        assert recorder.titles == ['Provider value "max_foo" should conform to the contract value']


class TestProviderMethods:
    def test_conforming_provider(self):
        methods = contract({}, {
            "get_bar": [{"args": ["foo"], "returns": "bar"}],
            "get_baz": [{"args": ["bar"], "returns": "baz"}],
        }).methods
        check_provider_methods(default_test_unit, Provider(), methods)

    def test_nonconforming_provider(self):
        methods = contract({}, {
            "get_bar": [{"args": ["foo"], "returns": "bar"}],
            "get_baz": [{"args": ["baz"], "returns": "foo"}],
        }).methods
        with pytest.raises(ConformanceError, match='Usage "get_baz\\[0\\]" returned "baz"'):
            check_provider_methods(default_test_unit, Provider(), methods)

    def test_titles(self):
        methods = contract({}, {
            "get": [
                {"name": "found", "args": [1], "returns": 1},
                {"args": [2], "throws": KeyError(2)},
                {"args": [3], "resolves": 3},
                {"args": [4], "rejects": KeyError(4)},
            ],
        }).methods
        recorder = Recorder()
        check_provider_methods(recorder, Provider(), methods)
        assert recorder.titles == [
            'Contract: usage "get.found" should return the correct result',
            'Contract: usage "get[1]" should throw the correct result',
            'Contract: usage "get[2]" should resolve with the correct result',
            'Contract: usage "get[3]" should reject with the correct result',
        ]

    def test_registration_does_not_call_the_provider(self):
        class Exploding:
            def get(self, key):
                raise AssertionError("called during registration")

        methods = contract({}, {"get": [{"args": [1], "returns": 1}]}).methods
        recorder = Recorder()
        check_provider_methods(recorder, Exploding(), methods)
        assert len(recorder.cases) == 1

    def test_returns_error_propagates(self):
        class Broken:
            def get(self, key):
                raise RuntimeError("boom")

        methods = contract({}, {"get": [{"args": [1], "returns": 1}]}).methods
        with pytest.raises(RuntimeError, match="boom"):
            check_provider_methods(default_test_unit, Broken(), methods)

    def test_missing_method(self):
        methods = contract({}, {"get_qux": [{"args": []}]}).methods
        with pytest.raises(AttributeError):
            check_provider_methods(default_test_unit, Provider(), methods)


class Store:
    def __init__(self):
        self.items = {1: "one"}

    def get(self, key):
        if key not in self.items:
            raise KeyError(key)
        return self.items[key]

    async def fetch(self, key):
        await asyncio.sleep(0)
        return self.get(key)


class TestThrows:
    def test_matching_error(self):
        methods = contract({}, {
            "get": [{"args": [2], "throws": KeyError(2), "check_result": same_error}],
        }).methods
        check_provider_methods(default_test_unit, Store(), methods)

    def test_wrong_error(self):
        methods = contract({}, {
            "get": [{"args": [2], "throws": KeyError(3), "check_result": same_error}],
        }).methods
        with pytest.raises(ConformanceError, match='Usage "get\\[0\\]" threw KeyError\\(2\\)'):
            check_provider_methods(default_test_unit, Store(), methods)

    def test_no_error(self):
        methods = contract({}, {"get": [{"args": [1], "throws": KeyError(1)}]}).methods
        with pytest.raises(
            ConformanceError, match='Usage "get\\[0\\]" returned "one" instead of throwing'
        ):
            check_provider_methods(default_test_unit, Store(), methods)


class TestAsync:
    def test_resolves(self):
        methods = contract({}, {"fetch": [{"args": [1], "resolves": "one"}]}).methods
        check_provider_methods(default_test_unit, Store(), methods)

    def test_resolves_with_wrong_value(self):
        methods = contract({}, {"fetch": [{"args": [1], "resolves": "uno"}]}).methods
        with pytest.raises(ConformanceError, match="resolved with \"one\" instead of \"uno\""):
            check_provider_methods(default_test_unit, Store(), methods)

    def test_resolves_but_rejected(self):
        methods = contract({}, {"fetch": [{"name": "gone", "args": [9], "resolves": "x"}]}).methods
        with pytest.raises(ConformanceError, match='Usage "fetch.gone" rejected'):
            check_provider_methods(default_test_unit, Store(), methods)

    def test_rejects(self):
        methods = contract({}, {
            "fetch": [{"args": [9], "rejects": KeyError(9), "check_result": same_error}],
        }).methods
        check_provider_methods(default_test_unit, Store(), methods)

    def test_rejects_but_resolved(self):
        methods = contract({}, {
            "fetch": [{"args": [1], "rejects": KeyError(1), "check_result": same_error}],
        }).methods
        with pytest.raises(ConformanceError, match="resolved with \"one\" instead of rejecting"):
            check_provider_methods(default_test_unit, Store(), methods)

    def test_synchronous_result_is_a_failure(self):
        methods = contract({}, {"get": [{"args": [1], "resolves": "one"}]}).methods
        with pytest.raises(ConformanceError, match="instead of an awaitable"):
            check_provider_methods(default_test_unit, Store(), methods)

    def test_async_bodies_are_returned_to_the_runner(self):
        methods = contract({}, {"fetch": [{"args": [1], "resolves": "one"}]}).methods
        recorder = Recorder()
        check_provider_methods(recorder, Store(), methods)
        [(_, body)] = recorder.cases
        run_body(body)


class TestReceiverOverride:
    def test_declared_receiver_is_used(self):
        class Greeter:
            def __init__(self, name):
                self.name = name

            def greet(self):
                return f"hi {self.name}"

        other = Greeter("bob")
        methods = contract({}, {"greet": [{"args": [], "self": other, "returns": "hi bob"}]}).methods
        check_provider_methods(default_test_unit, Greeter("ada"), methods)

    def test_unbound_callable_cannot_change_receiver(self):
        methods = contract({}, {"greet": [{"args": [], "self": object(), "returns": 1}]}).methods
        with pytest.raises(ConformanceError, match="cannot be called on another receiver"):
            check_provider_methods(default_test_unit, {"greet": lambda: 1}, methods)


class TestConsume:
    def test_accepts_a_test_unit(self, bar_contract):
        class OnlyX:
            def get_bar(self, value):
                return "bar"

        recorder = Recorder()
        consume(bar_contract, OnlyX(), recorder)
        assert len(recorder.cases) == 2
        (_, good), (_, bad) = recorder.cases
        good()
        with pytest.raises(ConformanceError):
            bad()

    def test_values_come_first(self):
        c = contract({"limit": 3}, {"get": [{"args": []}]})
        recorder = Recorder()
        consume(c, object(), recorder)
        assert recorder.titles[0].startswith('Provider value "limit"')


class TestRoundTrip:
    """A mock always conforms to the contract it was built from."""

    @pytest.mark.parametrize("use", [
        {"args": [1], "returns": "one"},
        {"args": [], "returns": None},
        {"args": ["k"], "throws": KeyError("k")},
        {"args": [1, 2], "resolves": {"sum": 3}},
        {"args": [], "rejects": TimeoutError("slow")},
        {"args": [2, 4], "returns": True, "check_args": lambda a, d: a[0] * 2 == a[1]},
    ])
    def test_mock_conforms(self, use):
        c = contract({"limit": 10}, {"m": [use]})
        consume(c, provide(c))

    def test_receiver_round_trip(self):
        owner = object()
        c = contract({}, {"m": [{"args": [], "self": owner, "returns": "owned"}]})
        consume(c, provide(c))

    def test_none_receiver_round_trip(self):
        c = contract({}, {"m": [{"args": [1], "self": None, "returns": "x"}]})
        mock = provide(c)
        assert type(mock).m(None, 1) == "x"
        consume(c, mock)


def test_logging(caplog):
    c = contract({"limit": 1}, {"get": [{"name": "one", "args": [1], "returns": "one"}]})
    mock = provide(c)
    with caplog.at_level(logging.DEBUG, logger="doublecheck"):
        consume(c, mock)

    messages = [(record.name, record.levelno, record.getMessage()) for record in caplog.records]
    assert (
        "doublecheck.conformance",
        logging.DEBUG,
        'Registering conformance case Contract: usage "get.one" should return the correct result',
    ) in messages
    assert (
        "doublecheck.mock",
        logging.DEBUG,
        "Dispatching get(1,) to use one (returns)",
    ) in messages
    assert (
        "doublecheck.conformance",
        logging.INFO,
        "Registered 2 conformance cases for ContractMock",
    ) in messages
