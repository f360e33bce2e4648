"""
keyward_core.keyset
-------------------
In-process keyset owner.

A Keyset is an immutable snapshot: ordered key records plus the primary
key id. KeysetManager owns the current snapshot and serializes every status
transition behind a lock, publishing a new snapshot each time. Records are
never edited in place; destroyed records stay behind as tombstones so their
ids are never handed out again.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple
import threading

from .errors import KeysetError
from .logger import get_logger
from .primitive_set import AssemblyResult, assemble_primitive_set
from .primitives import PrimitiveKind
from .records import KeyMaterialClass, KeyMaterialRecord, KeyStatus
from .templates import KeyTemplate

log = get_logger("Keyward.Keyset")


@dataclass(frozen=True)
class Keyset:
    records: Tuple[KeyMaterialRecord, ...] = ()
    primary_key_id: Optional[int] = None

    def key_ids(self) -> Tuple[int, ...]:
        return tuple(r.key_id for r in self.records)

    def get(self, key_id: int) -> KeyMaterialRecord:
        for rec in self.records:
            if rec.key_id == key_id:
                return rec
        raise KeysetError(f"key {key_id} is not in the keyset")

    def assemble(self, registry: Any, kind: PrimitiveKind, strict: Optional[bool] = None) -> AssemblyResult:
        return assemble_primitive_set(registry, self.records, self.primary_key_id, kind, strict=strict)

    def primitive(self, registry: Any, kind: PrimitiveKind, strict: Optional[bool] = None) -> Any:
        """Assemble a primitive set of ``kind`` and wrap it into one primitive."""
        result = self.assemble(registry, kind, strict=strict)
        return registry.wrap(result.primitive_set)

    def public_keyset(self, registry: Any) -> "Keyset":
        """Derive the verify-side keyset from a keyset of private keys."""
        public = []
        for rec in self.records:
            manager = registry.lookup(rec.type_id)
            public_type = getattr(manager, "public_key_type", "")
            if rec.material_class is not KeyMaterialClass.ASYMMETRIC_PRIVATE or not public_type:
                raise KeysetError(f"key {rec.key_id} ({rec.type_id}) is not a private key")
            payload = b""
            if rec.status is not KeyStatus.DESTROYED:
                payload = manager.public_key_payload(rec.payload)
            public.append(replace(
                rec,
                type_id=public_type,
                payload=payload,
                material_class=KeyMaterialClass.ASYMMETRIC_PUBLIC,
            ))
        return Keyset(records=tuple(public), primary_key_id=self.primary_key_id)


class KeysetManager:
    def __init__(self, registry: Any, keyset: Optional[Keyset] = None) -> None:
        self._registry = registry
        self._lock = threading.Lock()
        self._keyset = keyset or Keyset()

    @classmethod
    def generate_new(cls, registry: Any, template: KeyTemplate) -> "KeysetManager":
        manager = cls(registry)
        manager.add(template, as_primary=True)
        return manager

    @property
    def keyset(self) -> Keyset:
        return self._keyset

    def add(self, template: KeyTemplate, as_primary: bool = False) -> int:
        with self._lock:
            ks = self._keyset
            rec = self._registry.new_key_material(template, exclude_ids=ks.key_ids())
            primary = rec.key_id if as_primary else ks.primary_key_id
            self._keyset = Keyset(records=ks.records + (rec,), primary_key_id=primary)
        log.info(f"[KEYSET] added key_id={rec.key_id} type={rec.type_id} primary={as_primary}")
        return rec.key_id

    def set_primary(self, key_id: int) -> None:
        with self._lock:
            ks = self._keyset
            if ks.get(key_id).status is not KeyStatus.ENABLED:
                raise KeysetError(f"key {key_id} must be enabled to become primary")
            self._keyset = replace(ks, primary_key_id=key_id)
        log.info(f"[KEYSET] primary key_id={key_id}")

    def enable(self, key_id: int) -> None:
        self._transition(key_id, KeyStatus.ENABLED)

    def disable(self, key_id: int) -> None:
        self._transition(key_id, KeyStatus.DISABLED)

    def destroy(self, key_id: int) -> None:
        self._transition(key_id, KeyStatus.DESTROYED)

    def _transition(self, key_id: int, status: KeyStatus) -> None:
        with self._lock:
            ks = self._keyset
            current = ks.get(key_id)
            if current.status is KeyStatus.DESTROYED:
                raise KeysetError(f"key {key_id} is destroyed")
            if key_id == ks.primary_key_id and status is not KeyStatus.ENABLED:
                raise KeysetError(f"primary key {key_id} cannot be {status.value}")
            records = tuple(
                r.with_status(status) if r.key_id == key_id else r for r in ks.records
            )
            self._keyset = replace(ks, records=records)
        log.info(f"[KEYSET] key_id={key_id} {current.status.value} -> {status.value}")
