from __future__ import annotations
from typing import Any, Dict, Tuple, Type

from keyward_core.errors import KeyMaterialError, FormatError
from keyward_core.primitives import PrimitiveKind
from keyward_core.records import KeyMaterialClass
from keyward_core.utils import from_json


def _check_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class KeyManager:
    """
    Capability contract for one key type.

    A key manager validates format parameters, generates payloads and turns
    stored payloads into runtime primitives. Format parameters and payloads
    are opaque bytes to everything outside the manager.
    """
    key_type: str = ""
    version: int = 0
    material_class: KeyMaterialClass = KeyMaterialClass.SYMMETRIC

    @property
    def identity(self) -> Tuple[str, str, str]:
        # Two managers are "the same implementation" when they declare the
        # same class and key type, regardless of object identity.
        cls = type(self)
        return (cls.__module__, cls.__qualname__, self.key_type)

    def supported_primitive_kind(self) -> PrimitiveKind:
        raise NotImplementedError

    def validate_format(self, params: bytes) -> None:
        raise NotImplementedError

    def generate(self, params: bytes) -> bytes:
        raise NotImplementedError

    def primitive_from_key(self, payload: bytes, kind: PrimitiveKind) -> Any:
        raise NotImplementedError

    # ---------------------------
    # Helpers for built-in managers
    # ---------------------------
    def _parse_params(self, params: bytes) -> Dict[str, Any]:
        try:
            return from_json(params)
        except (ValueError, UnicodeDecodeError) as e:
            raise FormatError(f"{self.key_type}: malformed format parameters") from e

    def _parse_payload(self, payload: bytes) -> Dict[str, Any]:
        if not payload:
            raise KeyMaterialError(f"{self.key_type}: empty key payload")
        try:
            key = from_json(payload)
        except (ValueError, UnicodeDecodeError) as e:
            raise KeyMaterialError(f"{self.key_type}: malformed key payload") from e
        version = key.get("version")
        if not isinstance(version, int) or not 0 <= version <= self.version:
            raise KeyMaterialError(
                f"{self.key_type}: key version {version!r} not supported (max {self.version})"
            )
        return key

    def _require(self, key: Dict[str, Any], field: str, kind: Type = str) -> Any:
        value = key.get(field)
        if not isinstance(value, kind):
            raise KeyMaterialError(f"{self.key_type}: payload field {field!r} missing or invalid")
        return value


class PrivateKeyManager(KeyManager):
    """Key manager for private keys that have a public counterpart type."""
    material_class = KeyMaterialClass.ASYMMETRIC_PRIVATE
    public_key_type: str = ""

    def public_key_payload(self, payload: bytes) -> bytes:
        raise NotImplementedError
