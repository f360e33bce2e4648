# keyward_core/records.py
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

from .prefix import OutputPrefixKind


class KeyStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    DESTROYED = "destroyed"


class KeyMaterialClass(str, Enum):
    SYMMETRIC = "symmetric"
    ASYMMETRIC_PRIVATE = "asymmetric_private"
    ASYMMETRIC_PUBLIC = "asymmetric_public"


@dataclass(frozen=True)
class KeyMaterialRecord:
    """
    One generation of key material inside a keyset.

    The payload is opaque to everything except the key manager registered
    for ``type_id``. Records are never mutated: a status change yields a
    new record carrying the same ``key_id``.
    """
    type_id: str
    key_id: int
    status: KeyStatus
    prefix_kind: OutputPrefixKind
    payload: bytes
    material_class: KeyMaterialClass = KeyMaterialClass.SYMMETRIC

    @property
    def enabled(self) -> bool:
        return self.status is KeyStatus.ENABLED

    def with_status(self, status: KeyStatus) -> "KeyMaterialRecord":
        status = KeyStatus(status)
        if status is KeyStatus.DESTROYED:
            # tombstone: keep the id, drop the key bytes
            return replace(self, status=status, payload=b"")
        return replace(self, status=status)

    def __repr__(self) -> str:
        # never print key bytes
        return (
            f"KeyMaterialRecord(type_id={self.type_id!r}, key_id={self.key_id}, "
            f"status={self.status.value}, prefix_kind={self.prefix_kind.value}, "
            f"material_class={self.material_class.value})"
        )
