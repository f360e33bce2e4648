"""
keyward_core.config
-------------------
Runtime configuration. Explicit dict entries win over environment
variables, which win over defaults:

    KEYWARD_LOG_LEVEL        logging level name (INFO)
    KEYWARD_STRICT_ASSEMBLY  "1" makes non-primary key failures fatal (0)
    KEYWARD_KEY_TYPES        comma separated built-in managers to register (all)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import os

BUILTIN_KEY_TYPES: Tuple[str, ...] = ("ed25519", "aes-gcm", "aes-ctr-hmac")

_TRUE = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class KeywardConfig:
    log_level: str = "INFO"
    strict_assembly: bool = False
    key_types: Tuple[str, ...] = BUILTIN_KEY_TYPES


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


def _as_names(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return tuple(n.strip().lower() for n in items if n and n.strip())


def load_config(config: Optional[Dict[str, Any]] = None) -> KeywardConfig:
    config = config or {}

    log_level = config.get("log_level") or os.getenv("KEYWARD_LOG_LEVEL", "INFO")

    strict = config.get("strict_assembly")
    if strict is None:
        strict = os.getenv("KEYWARD_STRICT_ASSEMBLY", "0")

    key_types = config.get("key_types") or os.getenv("KEYWARD_KEY_TYPES")
    names = _as_names(key_types) if key_types else BUILTIN_KEY_TYPES

    return KeywardConfig(
        log_level=str(log_level).upper(),
        strict_assembly=_as_bool(strict),
        key_types=names,
    )
