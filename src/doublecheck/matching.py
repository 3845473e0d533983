"""Resolve a call against the uses declared for a method.

A call matches a use when the receiver constraint holds (if any) and the
use's ``check_args`` accepts the actual arguments.  Exactly one use must
match; zero or several is a defect in either the contract or the caller.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from doublecheck.errors import AmbiguousUse, NoMatchingUse
from doublecheck.formatting import format_value
from doublecheck.model import UNSET, Response, ResponseKind, Use


def get_response(use: Use) -> tuple[ResponseKind, Any]:
    """Return the ``(kind, payload)`` pair a use responds with."""
    response: Response = use.response
    if not isinstance(response.kind, ResponseKind):
        raise TypeError(f"Unknown response kind: {response.kind!r}")
    return response.kind, response.payload


def use_label(use: Use, index: int) -> str:
    """Label of a use inside its method: its name, or its position."""
    return use.name or f"[index {index}]"


def method_label(method_name: str, index: int, name: Optional[str] = None) -> str:
    """Fully qualified label, e.g. ``get_user.missing`` or ``get_user[1]``."""
    return f"{method_name}.{name}" if name else f"{method_name}[{index}]"


def use_accepts(use: Use, args: Sequence[Any], receiver: Any = UNSET) -> bool:
    if use.receiver is not UNSET and use.receiver is not receiver:
        return False
    return bool(use.check_args(tuple(args), use.args))


def match_uses(
    uses: Sequence[Use], args: Sequence[Any], receiver: Any = UNSET
) -> list[tuple[int, Use]]:
    """Return ``(index, use)`` for every use accepting the call, in declared order."""
    return [
        (index, use)
        for index, use in enumerate(uses)
        if use_accepts(use, args, receiver)
    ]


def validate_matches(
    method_name: str, args: Sequence[Any], matches: Sequence[tuple[int, Use]]
) -> None:
    """Raise unless *matches* holds exactly one use."""
    if len(matches) > 1:
        labels = [use_label(use, index) for index, use in matches]
        raise AmbiguousUse(
            f'Method "{method_name}" has multiple uses for {format_value(list(args))}; '
            f"see {', '.join(labels)}",
            method_name,
            args,
            labels,
        )
    if not matches:
        raise NoMatchingUse(
            f'Method "{method_name}" has no matching use for {format_value(list(args))}',
            method_name,
            args,
        )


def select_use(
    method_name: str,
    uses: Sequence[Use],
    args: Sequence[Any],
    receiver: Any = UNSET,
) -> tuple[int, Use]:
    """Return the single ``(index, use)`` accepting the call.

    Raises:
        NoMatchingUse: if no use accepts the call
        AmbiguousUse: if more than one use accepts the call
    """
    matches = match_uses(uses, args, receiver)
    validate_matches(method_name, args, matches)
    return matches[0]
