"""Contract construction entry point."""

from __future__ import annotations

from typing import Any, Mapping

from doublecheck.model import Contract
from doublecheck.validate import validate_contract


def contract(values: Mapping[str, Any], methods: Mapping[str, Any]) -> Contract:
    """
    Declare a contract.

    Usage:
        users = contract(
            {"max_page_size": 100},
            {
                "get_user": [
                    {"name": "found", "args": [1], "returns": {"id": 1}},
                    {"name": "missing", "args": [2], "throws": KeyError(2)},
                ],
            },
        )

    Raises:
        ContractError: if the declaration is structurally invalid
    """
    return validate_contract(values, methods)
