"""Conformance test generation.

Replays a contract against a real provider.  Every value and every
declared use becomes one test case, handed to a *test unit*: any callable
taking ``(title, body)``.  Bodies either return ``None`` or an awaitable
the test unit must drive to completion; a failing body raises
:class:`~doublecheck.errors.ConformanceError`.

With pytest, see :mod:`doublecheck.pytest`.  Without a runner, the
default test unit runs each body on the spot::

    consume(contract, RealUserStore())   # raises on the first failure
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, NoReturn, Sequence

from doublecheck.checks import strict_equal
from doublecheck.errors import ConformanceError
from doublecheck.formatting import format_value
from doublecheck.matching import get_response, method_label
from doublecheck.model import UNSET, Contract, ResponseKind, Use

logger = logging.getLogger(__name__)

TestBody = Callable[[], "Awaitable[Any] | None"]
TestUnit = Callable[[str, TestBody], Any]

_VERBS = {
    ResponseKind.RETURNS: "return",
    ResponseKind.THROWS: "throw",
    ResponseKind.RESOLVES: "resolve with",
    ResponseKind.REJECTS: "reject with",
}


def run_body(body: TestBody) -> None:
    """Call *body*, driving a returned awaitable on a fresh event loop."""
    result = body()
    if inspect.isawaitable(result):
        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(result)
        finally:
            loop.close()


def default_test_unit(title: str, body: TestBody) -> None:
    """Run *body* immediately; the title is ignored."""
    run_body(body)


def fail(message: str) -> NoReturn:
    raise ConformanceError(message)


def _lookup(provider: Any, key: str) -> Any:
    if isinstance(provider, Mapping):
        return provider[key]
    return getattr(provider, key)


def _bind(provider: Any, key: str, receiver: Any) -> Callable[..., Any]:
    """Return the provider's method for *key*, bound to *receiver*."""
    method = _lookup(provider, key)
    if receiver is UNSET or receiver is provider:
        return method
    func = getattr(method, "__func__", None)
    if func is None:
        fail(f'Method "{key}" is not a bound method and cannot be called on another receiver')
    return functools.partial(func, receiver)


def _exception_types(expected: Any) -> tuple[type[BaseException], ...]:
    # Only widen to BaseException when the contract itself expects one
    # (SystemExit from a CLI entry point, for instance).
    if isinstance(expected, BaseException) and not isinstance(expected, Exception):
        return (BaseException,)
    return (Exception,)


def check_provider_values(test: TestUnit, provider: Any, values: Mapping[str, Any]) -> None:
    """Register one case per contract value."""
    for key, expected in values.items():
        test(
            f'Provider value "{key}" should conform to the contract value',
            _value_body(provider, key, expected),
        )


def _value_body(provider: Any, key: str, expected: Any) -> TestBody:
    def body() -> None:
        actual = _lookup(provider, key)
        if not strict_equal(actual, expected):
            fail(
                f'Provider value "{key}" is {format_value(actual)} '
                f"instead of {format_value(expected)}"
            )

    return body


def check_provider_methods(
    test: TestUnit, provider: Any, methods: Mapping[str, Sequence[Use]]
) -> None:
    """Register one case per declared use of every method."""
    for key, uses in methods.items():
        for index, use in enumerate(uses):
            kind, _ = get_response(use)
            label = method_label(key, index, use.name)
            title = f'Contract: usage "{label}" should {_VERBS[kind]} the correct result'
            logger.debug("Registering conformance case %s", title)
            test(title, _method_body(provider, key, label, use))


def _method_body(provider: Any, key: str, label: str, use: Use) -> TestBody:
    kind, expected = get_response(use)
    args = use.args
    check_result = use.check_result

    def returns() -> None:
        actual = _bind(provider, key, use.receiver)(*args)
        if not check_result(actual, expected):
            fail(
                f'Usage "{label}" returned {format_value(actual)} '
                f"instead of {format_value(expected)}"
            )

    def throws() -> None:
        call = _bind(provider, key, use.receiver)
        try:
            value = call(*args)
        except _exception_types(expected) as error:
            if not check_result(error, expected):
                fail(f'Usage "{label}" threw {error!r} instead of {expected!r}')
        else:
            fail(f'Usage "{label}" returned {format_value(value)} instead of throwing')

    async def settle() -> tuple[bool, Any]:
        result = _bind(provider, key, use.receiver)(*args)
        if not inspect.isawaitable(result):
            fail(f'Usage "{label}" returned {format_value(result)} instead of an awaitable')
        try:
            return True, await result
        except _exception_types(expected) as reason:
            return False, reason

    async def resolves() -> None:
        ok, value = await settle()
        if not ok:
            fail(f'Usage "{label}" rejected with {value!r} instead of resolving')
        if not check_result(value, expected):
            fail(
                f'Usage "{label}" resolved with {format_value(value)} '
                f"instead of {format_value(expected)}"
            )

    async def rejects() -> None:
        ok, reason = await settle()
        if ok:
            fail(f'Usage "{label}" resolved with {format_value(reason)} instead of rejecting')
        if not check_result(reason, expected):
            fail(f'Usage "{label}" rejected with {reason!r} instead of {expected!r}')

    if kind is ResponseKind.THROWS:
        return throws
    if kind is ResponseKind.RESOLVES:
        return resolves
    if kind is ResponseKind.REJECTS:
        return rejects
    return returns


def consume(contract: Contract, provider: Any, test: TestUnit = default_test_unit) -> None:
    """Register conformance cases for every value and use of *contract*."""
    check_provider_values(test, provider, contract.values)
    check_provider_methods(test, provider, contract.methods)
    logger.info(
        "Registered %d conformance cases for %s",
        len(contract.values) + sum(len(uses) for uses in contract.methods.values()),
        type(provider).__name__,
    )
