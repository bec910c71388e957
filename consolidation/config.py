"""
Consolidator Configuration
==========================

Settings are frozen once a Consolidator is built. Environment overrides
follow the CONSOLIDATION_* prefix.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import os


DEFAULT_MAX_SIZE = 100
DEFAULT_AUDIT_MAX_ENTRIES = 10_000

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class ConsolidatorConfig:
    """
    Immutable consolidator settings.

    max_size: exclusive upper bound on recognizer arity and window length
    register_defaults: register the built-in recognizers (swap) on construction
    audit_enabled: record register/unregister/match/error entries in the audit log
    audit_max_entries: audit entries kept before the oldest are dropped
    """
    max_size: int = DEFAULT_MAX_SIZE
    register_defaults: bool = True
    audit_enabled: bool = True
    audit_max_entries: int = DEFAULT_AUDIT_MAX_ENTRIES

    def __post_init__(self):
        if not isinstance(self.max_size, int) or self.max_size < 2:
            raise ValueError(f"max_size must be an int >= 2, got {self.max_size!r}")
        if not isinstance(self.audit_max_entries, int) or self.audit_max_entries < 1:
            raise ValueError(
                f"audit_max_entries must be an int >= 1, got {self.audit_max_entries!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ConsolidatorConfig':
        """Build a config from CONSOLIDATION_* environment variables."""
        env = os.environ if environ is None else environ

        max_size = DEFAULT_MAX_SIZE
        raw_max = env.get("CONSOLIDATION_MAX_SIZE")
        if raw_max is not None:
            try:
                max_size = int(raw_max)
            except ValueError:
                raise ValueError(f"CONSOLIDATION_MAX_SIZE must be an integer, got {raw_max!r}") from None

        register_defaults = True
        raw_defaults = env.get("CONSOLIDATION_REGISTER_DEFAULTS")
        if raw_defaults is not None:
            register_defaults = _parse_bool("CONSOLIDATION_REGISTER_DEFAULTS", raw_defaults)

        audit_enabled = True
        raw_audit = env.get("CONSOLIDATION_AUDIT")
        if raw_audit is not None:
            audit_enabled = _parse_bool("CONSOLIDATION_AUDIT", raw_audit)

        audit_max_entries = DEFAULT_AUDIT_MAX_ENTRIES
        raw_audit_max = env.get("CONSOLIDATION_AUDIT_MAX_ENTRIES")
        if raw_audit_max is not None:
            try:
                audit_max_entries = int(raw_audit_max)
            except ValueError:
                raise ValueError(
                    f"CONSOLIDATION_AUDIT_MAX_ENTRIES must be an integer, got {raw_audit_max!r}"
                ) from None

        return cls(
            max_size=max_size,
            register_defaults=register_defaults,
            audit_enabled=audit_enabled,
            audit_max_entries=audit_max_entries
        )
