"""Error types raised by doublecheck.

Three families never overlap:

- **consumer errors**: the mock was called in a way its contract does not
  cover (:class:`NoMatchingUse`, :class:`AmbiguousUse`).  These always reach
  the caller wrapped in :class:`ConsumerError` so they can be told apart from
  the configured ``throws`` / ``rejects`` payloads, which are raised verbatim.
- **conformance failures**: a provider broke its contract
  (:class:`ConformanceError`).
- **contract errors**: the declaration itself is malformed
  (:class:`ContractError`).
"""

from __future__ import annotations

from typing import Any, Sequence


class DoublecheckError(Exception):
    """Base class for every error raised by the library itself."""


class ContractError(DoublecheckError, ValueError):
    """Raised when a contract declaration is structurally invalid."""


class UseMatchError(DoublecheckError):
    """A call could not be resolved to exactly one declared use."""

    def __init__(self, message: str, method_name: str, args: Sequence[Any]) -> None:
        super().__init__(message)
        self.method_name = method_name
        self.args_received = tuple(args)


class NoMatchingUse(UseMatchError):
    """No declared use accepts the call."""


class AmbiguousUse(UseMatchError):
    """More than one declared use accepts the call."""

    def __init__(
        self,
        message: str,
        method_name: str,
        args: Sequence[Any],
        labels: Sequence[str],
    ) -> None:
        super().__init__(message, method_name, args)
        self.labels = tuple(labels)


class ConsumerError(DoublecheckError):
    """Wraps a :class:`UseMatchError` raised while dispatching a mock call."""

    def __init__(self, error: UseMatchError) -> None:
        super().__init__(str(error))
        self.error = error

    def get_error(self) -> UseMatchError:
        return self.error


class ConformanceError(DoublecheckError, AssertionError):
    """A provider did not behave the way its contract declares."""


def reraise(error: BaseException) -> None:
    """Raise the wrapped error if *error* is a :class:`ConsumerError`.

    Any other error is ignored, so a test can call this from a broad
    ``except`` block and only surface misuse of the mock::

        try:
            client.fetch()
        except Exception as exc:
            reraise(exc)
    """
    if isinstance(error, ConsumerError):
        raise error.error from error
