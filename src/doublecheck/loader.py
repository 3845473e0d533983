"""Load contracts from YAML files.

A contract file holds the same two mappings as :func:`doublecheck.contract`::

    values:
      max_page_size: 100
    methods:
      get_user:
        - name: found
          args: [1]
          returns: {id: 1, name: Ada}
        - name: missing
          args: [2]
          throws: {type: KeyError, args: [2]}
          check_result: doublecheck.checks.same_error

Exceptions for ``throws`` / ``rejects`` are given as ``type`` (a dotted
import path; bare names are looked up in :mod:`builtins`) plus optional
``args``.  ``check_args`` / ``check_result`` may be dotted import paths.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

import yaml

from doublecheck.errors import ContractError
from doublecheck.model import Contract
from doublecheck.validate import validate_contract

logger = logging.getLogger(__name__)

_EXCEPTION_KEYS = ("throws", "rejects")
_CALLABLE_KEYS = ("check_args", "checkArgs", "check_result", "checkResult")


def load_contract(path: str | Path) -> Contract:
    """Read and validate the contract stored at *path*."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ContractError(f"Contract file {path} is not valid YAML: {exc}") from exc

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ContractError(f"Contract file {path} must contain a mapping")
    unknown = set(document) - {"values", "methods"}
    if unknown:
        raise ContractError(
            f"Contract file {path} has unknown sections: {', '.join(sorted(map(str, unknown)))}"
        )

    values = document.get("values") or {}
    methods = document.get("methods") or {}
    if isinstance(methods, dict):
        methods = {
            key: [_resolve_use(use) for use in uses] if isinstance(uses, list) else uses
            for key, uses in methods.items()
        }

    result = validate_contract(values, methods)
    logger.info(
        "Loaded contract %s: %d values, %d methods",
        path, len(result.values), len(result.methods),
    )
    return result


def _resolve_use(use: Any) -> Any:
    if not isinstance(use, dict):
        return use
    resolved = dict(use)
    for key in _EXCEPTION_KEYS:
        if isinstance(resolved.get(key), dict):
            resolved[key] = _build_exception(resolved[key])
    for key in _CALLABLE_KEYS:
        if isinstance(resolved.get(key), str):
            resolved[key] = import_string(resolved[key])
    return resolved


def _build_exception(spec: dict[str, Any]) -> BaseException:
    if "type" not in spec:
        raise ContractError(f"Exception declaration {spec!r} needs a type")
    exc_type = import_string(spec["type"])
    if not (isinstance(exc_type, type) and issubclass(exc_type, BaseException)):
        raise ContractError(f"{spec['type']} is not an exception type")
    args = spec.get("args") or []
    if not isinstance(args, list):
        args = [args]
    return exc_type(*args)


def import_string(dotted_path: str) -> Any:
    """Import ``package.module.attr``; a bare name is looked up in builtins."""
    module_name, _, attr = dotted_path.rpartition(".")
    try:
        module = importlib.import_module(module_name or "builtins")
        return getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise ContractError(f"Cannot import {dotted_path!r}: {exc}") from exc
