"""doublecheck: one contract drives both the mock and the provider's tests.

Usage:
    from doublecheck import contract, provide, consume

    users = contract({}, {"get_user": [{"args": [1], "returns": "ada"}]})

    mock = provide(users)               # stand-in for consumers
    assert mock.get_user(1) == "ada"

    consume(users, RealUserStore())     # same uses, checked on the real thing
"""

from doublecheck.checks import (
    compare_structures,
    default_check_args,
    default_check_result,
    loose_equal,
    matches_structure,
    same_error,
    strict_equal,
)
from doublecheck.config import Settings, configure, get_settings
from doublecheck.conformance import (
    check_provider_methods,
    check_provider_values,
    consume,
    default_test_unit,
)
from doublecheck.declaration import contract
from doublecheck.errors import (
    AmbiguousUse,
    ConformanceError,
    ConsumerError,
    ContractError,
    DoublecheckError,
    NoMatchingUse,
    UseMatchError,
    reraise,
)
from doublecheck.loader import load_contract
from doublecheck.mock import ContractMock, provide, provide_methods
from doublecheck.model import UNSET, Contract, Response, ResponseKind, Use

__all__ = [
    "contract",
    "provide",
    "provide_methods",
    "consume",
    "reraise",
    "load_contract",
    "Contract",
    "Use",
    "Response",
    "ResponseKind",
    "UNSET",
    "ContractMock",
    "check_provider_values",
    "check_provider_methods",
    "default_test_unit",
    "DoublecheckError",
    "ContractError",
    "UseMatchError",
    "NoMatchingUse",
    "AmbiguousUse",
    "ConsumerError",
    "ConformanceError",
    "strict_equal",
    "loose_equal",
    "same_error",
    "default_check_args",
    "default_check_result",
    "compare_structures",
    "matches_structure",
    "Settings",
    "configure",
    "get_settings",
]
__version__ = "0.1.0"
