"""Structural validation of contract declarations.

Turns plain data (``dict`` values, ``dict`` methods holding lists of use
dicts) into the immutable :mod:`doublecheck.model` objects, failing with
:class:`~doublecheck.errors.ContractError` on the first defect found.

A use declaration accepts these keys::

    args          list or tuple of positional arguments (required)
    name          label for diagnostics and test titles
    self          receiver the call must be made on (alias: receiver)
    check_args    (actual_args, declared_args) -> bool   (alias: checkArgs)
    check_result  (actual, expected) -> bool             (alias: checkResult)
    returns | throws | resolves | rejects    at most one

``Use`` instances are accepted too and go through the same semantic
checks.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from doublecheck.checks import default_check_args, default_check_result
from doublecheck.errors import ContractError
from doublecheck.matching import method_label
from doublecheck.mock import is_reserved_name
from doublecheck.model import (
    RESPONSE_PRIORITY,
    UNSET,
    Contract,
    Response,
    ResponseKind,
    Use,
)


class UseDeclaration(BaseModel):
    """Shape of a plain-data use declaration."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    args: tuple[Any, ...]
    name: Optional[str] = None
    receiver: Any = Field(default=None, alias="self")
    check_args: Optional[Callable[..., Any]] = Field(default=None, alias="checkArgs")
    check_result: Optional[Callable[..., Any]] = Field(default=None, alias="checkResult")
    returns: Any = None
    throws: Any = None
    resolves: Any = None
    rejects: Any = None

    @field_validator("args", mode="before")
    @classmethod
    def _args_must_be_a_sequence(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            raise ValueError("args must be a list or tuple")
        return tuple(value)

    def response_keys(self) -> list[str]:
        return [kind.value for kind in ResponseKind if kind.value in self.model_fields_set]

    def response(self) -> Response:
        for kind in RESPONSE_PRIORITY:
            if kind.value in self.model_fields_set:
                return Response(kind, getattr(self, kind.value))
        return Response(ResponseKind.RETURNS, self.returns)

    def to_use(self) -> Use:
        return Use(
            args=self.args,
            response=self.response(),
            receiver=self.receiver if "receiver" in self.model_fields_set else UNSET,
            check_args=self.check_args or default_check_args,
            check_result=self.check_result or default_check_result,
            name=self.name,
        )


def validate_contract(values: Any, methods: Any) -> Contract:
    """Validate a declaration and return the immutable :class:`Contract`."""
    validate_args(values, methods)
    validate_keys(values, methods)
    uses = validate_methods(methods)
    return Contract(
        values=MappingProxyType(dict(values)),
        methods=MappingProxyType(uses),
    )


def validate_args(values: Any, methods: Any) -> None:
    if not isinstance(values, Mapping):
        raise ContractError("Contract argument `values` must be a mapping")
    if not isinstance(methods, Mapping):
        raise ContractError("Contract argument `methods` must be a mapping")
    for key in [*values, *methods]:
        if not isinstance(key, str):
            raise ContractError(f"Contract keys must be strings, see {key!r}")
        if is_reserved_name(key):
            raise ContractError(f'Contract key "{key}" is reserved')


def validate_keys(values: Mapping[str, Any], methods: Mapping[str, Any]) -> None:
    shared = [key for key in values if key in methods]
    if shared:
        raise ContractError(
            f'Contracts must have unique keys for both values and methods, see "{shared[0]}"'
        )


def validate_methods(methods: Mapping[str, Any]) -> dict[str, tuple[Use, ...]]:
    validated: dict[str, tuple[Use, ...]] = {}
    for key, uses in methods.items():
        if not isinstance(uses, (list, tuple)) or not uses:
            raise ContractError(f"Method {key} must have a non-empty list of uses")
        validated[key] = tuple(
            validate_usage(key, index, use) for index, use in enumerate(uses)
        )
    return validated


def validate_usage(method_name: str, index: int, use: Any) -> Use:
    """Validate one declaration and return it as a :class:`Use`."""
    if isinstance(use, Use):
        label = method_label(method_name, index, use.name)
        built = use
    elif isinstance(use, Mapping):
        label = method_label(method_name, index, use.get("name"))
        try:
            declaration = UseDeclaration.model_validate(dict(use))
        except ValidationError as exc:
            raise ContractError(f'Usage "{label}" is invalid: {_summarize(exc)}') from exc
        if len(declaration.response_keys()) > 1:
            raise ContractError(f'Usage "{label}" must only return, throw, resolve, or reject')
        built = declaration.to_use()
    else:
        raise ContractError(
            f"Method {method_name} use {index} must be a mapping or Use, "
            f"got {type(use).__name__}"
        )

    _validate_use(label, built)
    return built


def _validate_use(label: str, use: Use) -> None:
    if not isinstance(use.args, tuple):
        raise ContractError(f'Usage "{label}" args must be a tuple')

    kind, payload = use.response.kind, use.response.payload
    if kind in (ResponseKind.THROWS, ResponseKind.REJECTS) and not isinstance(
        payload, BaseException
    ):
        raise ContractError(
            f'Usage "{label}" must {kind.value[:-1]} an exception instance, '
            f"got {type(payload).__name__}"
        )

    if not callable(use.check_args):
        raise ContractError(f'Usage "{label}" check_args must be callable')
    if not use.check_args(use.args, use.args):
        raise ContractError(f'Usage "{label}" must correctly check_args its own args')

    if not callable(use.check_result):
        raise ContractError(f'Usage "{label}" check_result must be callable')
    if not use.check_result(payload, payload):
        raise ContractError(f'Usage "{label}" must correctly check_result its own result')


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "use"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
