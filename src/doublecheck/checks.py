"""Comparators used as ``check_args`` and ``check_result`` predicates.

Every comparator takes ``(actual, expected)`` and returns a bool.  The
defaults are strict: a value only matches an expectation of the very same
type, so ``1`` does not match ``True`` and ``1`` does not match ``1.0``.

``compare_structures`` diffs two JSON-like objects, reporting each
difference with a ``$.path[index]`` address::

    >>> compare_structures({"id": 1, "name": "a"}, {"id": 2, "name": "b"},
    ...                    ignore_fields={"id"})
    ["$.name: value differs (actual='a', expected='b')"]
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence


def strict_equal(actual: Any, expected: Any) -> bool:
    """Return True if *actual* is *expected*, or equal and of the exact same type."""
    if actual is expected:
        return True
    return type(actual) is type(expected) and bool(actual == expected)


def default_check_args(actual: Sequence[Any], expected: Sequence[Any]) -> bool:
    """Positional strict equality over argument lists of the same length."""
    if len(actual) != len(expected):
        return False
    return all(strict_equal(a, e) for a, e in zip(actual, expected))


def default_check_result(actual: Any, expected: Any) -> bool:
    """Strict equality between a provider's result and the declared one."""
    return strict_equal(actual, expected)


def loose_equal(actual: Any, expected: Any) -> bool:
    """Plain ``==`` comparison."""
    return bool(actual == expected)


def same_error(actual: Any, expected: Any) -> bool:
    """Match exceptions by exact type and ``args``.

    Providers usually raise a fresh exception on every call, so identity
    never holds against a real implementation.
    """
    if actual is expected:
        return True
    if not isinstance(actual, BaseException) or not isinstance(expected, BaseException):
        return False
    return type(actual) is type(expected) and actual.args == expected.args


def compare_structures(
    actual: Any,
    expected: Any,
    *,
    ignore_fields: Iterable[str] | None = None,
    path: str = "$",
) -> list[str]:
    """Compare two JSON-like objects, returning a list of diff descriptions.

    Dict keys in *ignore_fields* are skipped at every depth.  Returns an
    empty list if the objects match.
    """
    skip = set(ignore_fields or ())
    diffs: list[str] = []
    _compare(actual, expected, skip, path, diffs)
    return diffs


def _compare(
    actual: Any, expected: Any, skip: set[str], path: str, diffs: list[str]
) -> None:
    if isinstance(actual, dict) and isinstance(expected, dict):
        all_keys = set(actual.keys()) | set(expected.keys())
        for key in sorted(all_keys, key=str):
            if key in skip:
                continue
            child_path = f"{path}.{key}"
            if key not in actual:
                diffs.append(f"{child_path}: missing in actual (expected has {type(expected[key]).__name__})")
            elif key not in expected:
                diffs.append(f"{child_path}: unexpected in actual (not in expected)")
            else:
                _compare(actual[key], expected[key], skip, child_path, diffs)
    elif isinstance(actual, (list, tuple)) and isinstance(expected, (list, tuple)):
        if len(actual) != len(expected):
            diffs.append(
                f"{path}: length differs (actual={len(actual)}, expected={len(expected)})"
            )
        for i, (a_item, e_item) in enumerate(zip(actual, expected)):
            _compare(a_item, e_item, skip, f"{path}[{i}]", diffs)
    elif type(actual) is not type(expected):
        diffs.append(
            f"{path}: type differs (actual={type(actual).__name__}, expected={type(expected).__name__})"
        )
    elif actual != expected:
        # Truncate long values
        a_str = str(actual)[:80]
        e_str = str(expected)[:80]
        diffs.append(f"{path}: value differs (actual={a_str!r}, expected={e_str!r})")


def matches_structure(
    ignore_fields: Iterable[str] | None = None,
) -> Callable[[Any, Any], bool]:
    """Build a ``check_result`` that passes when :func:`compare_structures` finds nothing."""
    skip = frozenset(ignore_fields or ())

    def check(actual: Any, expected: Any) -> bool:
        return not compare_structures(actual, expected, ignore_fields=skip)

    check.__name__ = "matches_structure"
    return check
