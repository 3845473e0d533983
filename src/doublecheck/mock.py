"""Mock generation from a contract.

Every method of the contract becomes a dispatcher function on a freshly
created :class:`ContractMock` subclass.  Attribute access binds the mock
as the receiver, exactly like a hand-written class::

    mock = provide(contract)
    mock.get_user(1)                     # receiver is ``mock``
    type(mock).get_user(other_obj, 1)    # receiver is ``other_obj``

Values are attached to the instance as-is (no copies), so a mock shares
its values with the contract it came from.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from doublecheck.errors import ConsumerError, ContractError, UseMatchError
from doublecheck.matching import get_response, select_use, use_label
from doublecheck.model import Contract, ResponseKind, Use

logger = logging.getLogger(__name__)


_RESERVED_PREFIX = "_ContractMock__"


def is_reserved_name(key: str) -> bool:
    """Return True if *key* cannot be a contract value or method on a mock.

    Dunder names would replace the mock's own protocol methods, and the
    ``_ContractMock__`` prefix holds its bookkeeping.
    """
    return (key.startswith("__") and key.endswith("__")) or key.startswith(_RESERVED_PREFIX)


class ContractMock:
    """Base class of generated mocks."""

    __methods: tuple[str, ...] = ()

    def __repr__(self) -> str:
        methods = ", ".join(type(self).__methods)
        return f"<{type(self).__name__} methods=[{methods}]>"


async def _resolve(payload: Any) -> Any:
    return payload


async def _reject(error: BaseException) -> Any:
    raise error


def _dispatcher(method_name: str, uses: Sequence[Use]) -> Callable[..., Any]:
    def dispatch(self, *args):
        try:
            index, use = select_use(method_name, uses, args, self)
        except UseMatchError as exc:
            raise ConsumerError(exc) from exc

        kind, payload = get_response(use)
        logger.debug(
            "Dispatching %s%r to use %s (%s)",
            method_name, args, use_label(use, index), kind.value,
        )
        if kind is ResponseKind.THROWS:
            raise payload
        if kind is ResponseKind.RESOLVES:
            return _resolve(payload)
        if kind is ResponseKind.REJECTS:
            return _reject(payload)
        return payload

    dispatch.__name__ = method_name
    dispatch.__qualname__ = f"ContractMock.{method_name}"
    return dispatch


def mock_class(
    methods: Mapping[str, Sequence[Use]], name: str = "ContractMock"
) -> type[ContractMock]:
    """Create a :class:`ContractMock` subclass with one dispatcher per method."""
    reserved = [key for key in methods if is_reserved_name(key)]
    if reserved:
        raise ContractError(f'Method name "{reserved[0]}" is reserved on mocks')
    namespace: dict[str, Any] = {
        key: _dispatcher(key, tuple(uses)) for key, uses in methods.items()
    }
    namespace[_RESERVED_PREFIX + "methods"] = tuple(methods)
    return type(name, (ContractMock,), namespace)


def provide_methods(
    methods: Mapping[str, Sequence[Use]], name: str = "ContractMock"
) -> ContractMock:
    """Return a mock exposing only the contract's methods."""
    return mock_class(methods, name)()


def provide(contract: Contract, name: str = "ContractMock") -> ContractMock:
    """Return a mock exposing the contract's values and methods."""
    mock = provide_methods(contract.methods, name)
    for key, value in contract.values.items():
        setattr(mock, key, value)
    logger.debug(
        "Built %s with %d values and %d methods",
        name, len(contract.values), len(contract.methods),
    )
    return mock
