"""
Runtime settings for doublecheck.

Settings only affect diagnostics (how arguments and results are rendered
in error messages); matching and conformance semantics are not
configurable.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

INDENT_ENV_VAR = "DOUBLECHECK_FORMAT_INDENT"
MAX_REPR_ENV_VAR = "DOUBLECHECK_MAX_REPR"


@dataclass(frozen=True)
class Settings:
    """
    Diagnostic rendering settings.

    Attributes:
        indent: JSON indent used when rendering arguments and results
        max_repr: Renderings longer than this are truncated
    """

    indent: int = 2
    max_repr: int = 500

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create Settings from environment variables.

        Set DOUBLECHECK_FORMAT_INDENT and DOUBLECHECK_MAX_REPR to override
        the defaults.
        """
        return cls(
            indent=_int_from_env(INDENT_ENV_VAR, cls.indent),
            max_repr=_int_from_env(MAX_REPR_ENV_VAR, cls.max_repr),
        )


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Optional[Settings] = None, **overrides) -> Settings:
    """
    Replace the process-wide settings.

    Passing no arguments re-reads the environment.
    """
    global _settings
    base = settings or Settings.from_env()
    _settings = replace(base, **overrides) if overrides else base
    return _settings
