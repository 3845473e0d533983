"""
pytest helpers for conformance suites.

Usage:
    from doublecheck.pytest import conformance_tests

    test_user_store = conformance_tests(users_contract, RealUserStore())

Each declared value and use becomes its own parametrized test, named after
the generated title, so one broken use does not hide the others.
"""

from dataclasses import dataclass
from typing import Any, Callable, List

import pytest

from doublecheck.conformance import TestBody, consume, run_body
from doublecheck.model import Contract


@dataclass
class ConformanceCase:
    """A registered conformance test: its title and body."""

    title: str
    body: TestBody

    def run(self) -> None:
        run_case(self)


def collect_cases(contract: Contract, provider: Any) -> List[ConformanceCase]:
    """Return the conformance cases of *contract* against *provider*, in order."""
    cases: List[ConformanceCase] = []

    def register(title: str, body: TestBody) -> None:
        cases.append(ConformanceCase(title, body))

    consume(contract, provider, register)
    return cases


def run_case(case: ConformanceCase) -> None:
    """Run a case body, awaiting it on a fresh event loop if it is async."""
    run_body(case.body)


def conformance_tests(contract: Contract, provider: Any) -> Callable[[ConformanceCase], None]:
    """
    Build a pytest test function covering every case of *contract*.

    Assign the result to a ``test_*`` name in a test module for pytest to
    collect it.
    """
    cases = collect_cases(contract, provider)

    @pytest.mark.contract
    @pytest.mark.parametrize("case", cases, ids=[case.title for case in cases])
    def test_conformance(case: ConformanceCase) -> None:
        run_case(case)

    return test_conformance


def contract_test(cls: type) -> type:
    """
    Mark a test class as a contract test.

    Usage:
        @contract_test
        class TestUserStore:
            def test_lookup(self):
                consume(users_contract, RealUserStore())
    """
    return pytest.mark.contract(cls)
