"""Contract vocabulary: values, methods, and the uses declared for them.

Instances are built by :mod:`doublecheck.validate` and never mutated
afterwards.  Both the mock generator and the conformance generator read
the same objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from doublecheck.checks import default_check_args, default_check_result


class _Unset:
    """Sentinel type for "no receiver constraint"."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class ResponseKind(str, Enum):
    """How a use delivers its payload."""

    RETURNS = "returns"
    THROWS = "throws"
    RESOLVES = "resolves"
    REJECTS = "rejects"


# Key probing order for plain-data declarations; anything else returns.
RESPONSE_PRIORITY = (ResponseKind.THROWS, ResponseKind.RESOLVES, ResponseKind.REJECTS)


@dataclass(frozen=True)
class Response:
    kind: ResponseKind = ResponseKind.RETURNS
    payload: Any = None


ArgsCheck = Callable[[tuple, tuple], bool]
ResultCheck = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class Use:
    """One declared argument pattern and the response it produces.

    Attributes:
        args: Expected positional arguments.
        response: What the call does; defaults to returning ``None``.
        receiver: Required receiver identity, or ``UNSET`` for any.
        check_args: ``(actual_args, declared_args) -> bool``; defaults to
            positional strict equality over same-length sequences.
        check_result: ``(actual, expected) -> bool`` used when verifying a
            provider; defaults to strict equality.
        name: Label used in diagnostics and test titles.
    """

    args: tuple = ()
    response: Response = field(default_factory=Response)
    receiver: Any = UNSET
    check_args: ArgsCheck = default_check_args
    check_result: ResultCheck = default_check_result
    name: str | None = None

    @classmethod
    def returns(cls, args=(), payload: Any = None, **options: Any) -> "Use":
        return cls(tuple(args), Response(ResponseKind.RETURNS, payload), **options)

    @classmethod
    def throws(cls, args=(), payload: BaseException | None = None, **options: Any) -> "Use":
        return cls(tuple(args), Response(ResponseKind.THROWS, payload), **options)

    @classmethod
    def resolves(cls, args=(), payload: Any = None, **options: Any) -> "Use":
        return cls(tuple(args), Response(ResponseKind.RESOLVES, payload), **options)

    @classmethod
    def rejects(cls, args=(), payload: BaseException | None = None, **options: Any) -> "Use":
        return cls(tuple(args), Response(ResponseKind.REJECTS, payload), **options)


@dataclass(frozen=True)
class Contract:
    """Values a provider exposes and the uses declared for each method."""

    values: Mapping[str, Any]
    methods: Mapping[str, tuple[Use, ...]]

    def keys(self) -> list[str]:
        return [*self.values, *self.methods]
