"""
keyward_core.primitive_set
--------------------------
Rotation-aware bundle of keys-as-primitives.

A PrimitiveSet is assembled once from an ordered list of key records and is
immutable afterwards, so any number of threads may read it without locking.
Each entry carries the output prefix computed from ``(prefix_kind, key_id)``
at assembly time; a prefix index drives key selection on the
verify/decrypt path.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import load_config
from .errors import DuplicatePrefixError, KeywardError, PrimaryKeyUnavailable
from .logger import get_logger
from .prefix import RAW_PREFIX, OutputPrefixKind, output_prefix
from .primitives import PrimitiveKind
from .records import KeyMaterialRecord, KeyStatus

log = get_logger("Keyward.PrimitiveSet")


@dataclass(frozen=True)
class Entry:
    key_id: int
    prefix: bytes
    prefix_kind: OutputPrefixKind
    status: KeyStatus
    type_id: str
    primitive: Any = field(repr=False, compare=False)


@dataclass(frozen=True)
class AssemblyWarning:
    """A non-primary key that could not be turned into a primitive."""
    key_id: int
    type_id: str
    reason: str


class PrimitiveSet:
    def __init__(
        self,
        kind: PrimitiveKind,
        entries: Iterable[Entry],
        primary: Optional[Entry] = None,
        warnings: Iterable[AssemblyWarning] = (),
    ) -> None:
        self._kind = PrimitiveKind(kind)
        self._entries: Tuple[Entry, ...] = tuple(entries)
        if primary is not None and primary not in self._entries:
            raise ValueError("primary entry must belong to the set")
        self._primary = primary
        self._warnings: Tuple[AssemblyWarning, ...] = tuple(warnings)

        index: Dict[bytes, List[Entry]] = {}
        for entry in self._entries:
            index.setdefault(entry.prefix, []).append(entry)
        self._index: Mapping[bytes, Tuple[Entry, ...]] = MappingProxyType(
            {prefix: tuple(group) for prefix, group in index.items()}
        )

    @property
    def kind(self) -> PrimitiveKind:
        return self._kind

    @property
    def primary(self) -> Optional[Entry]:
        return self._primary

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._entries

    @property
    def warnings(self) -> Tuple[AssemblyWarning, ...]:
        return self._warnings

    def entries_for_prefix(self, prefix: bytes) -> Tuple[Entry, ...]:
        return self._index.get(bytes(prefix), ())

    @property
    def raw_entries(self) -> Tuple[Entry, ...]:
        return self._index.get(RAW_PREFIX, ())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        primary = self._primary.key_id if self._primary else None
        return f"PrimitiveSet(kind={self._kind.value}, entries={len(self._entries)}, primary={primary})"


@dataclass(frozen=True)
class AssemblyResult:
    primitive_set: PrimitiveSet
    warnings: Tuple[AssemblyWarning, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.warnings


def _check_prefixes(records: List[KeyMaterialRecord]) -> Dict[int, bytes]:
    prefixes: Dict[int, bytes] = {}
    seen: Dict[bytes, int] = {}
    for rec in records:
        prefix = output_prefix(rec.prefix_kind, rec.key_id)
        if prefix != RAW_PREFIX:
            if prefix in seen:
                raise DuplicatePrefixError(
                    f"keys {seen[prefix]} and {rec.key_id} share output prefix {prefix.hex()}"
                )
            seen[prefix] = rec.key_id
        prefixes[id(rec)] = prefix
    return prefixes


def _primary_record(
    records: List[KeyMaterialRecord], enabled: List[KeyMaterialRecord], primary_key_id: int
) -> KeyMaterialRecord:
    if not any(r.key_id == primary_key_id for r in records):
        raise PrimaryKeyUnavailable(f"primary key {primary_key_id} is not in the keyset")
    matches = [r for r in enabled if r.key_id == primary_key_id]
    if not matches:
        raise PrimaryKeyUnavailable(f"primary key {primary_key_id} is not enabled")
    if len(matches) > 1:
        raise PrimaryKeyUnavailable(f"primary key id {primary_key_id} is ambiguous")
    return matches[0]


def assemble_primitive_set(
    registry: Any,
    records: Iterable[KeyMaterialRecord],
    primary_key_id: Optional[int],
    kind: PrimitiveKind,
    strict: Optional[bool] = None,
) -> AssemblyResult:
    """
    Build a PrimitiveSet of ``kind`` from ``records``.

    Only enabled records are wrapped. The primary must exist, be enabled and
    wrap successfully, otherwise PrimaryKeyUnavailable is raised. Other keys
    that fail to wrap are left out and reported as AssemblyWarning values,
    unless ``strict`` is set (default: ``KEYWARD_STRICT_ASSEMBLY``), in which
    case their error propagates. ``primary_key_id=None`` builds a
    verify/decrypt-only set.
    """
    kind = PrimitiveKind(kind)
    if strict is None:
        strict = load_config().strict_assembly

    records = list(records)
    enabled = [r for r in records if r.status is KeyStatus.ENABLED]
    prefixes = _check_prefixes(enabled)
    primary_rec = None
    if primary_key_id is not None:
        primary_rec = _primary_record(records, enabled, primary_key_id)

    entries: List[Entry] = []
    warnings: List[AssemblyWarning] = []
    primary_entry: Optional[Entry] = None

    for rec in enabled:
        try:
            primitive = registry.primitive_for(rec, kind)
        except KeywardError as e:
            if rec is primary_rec:
                raise PrimaryKeyUnavailable(
                    f"primary key {rec.key_id} cannot be used: {e}"
                ) from e
            if strict:
                raise
            warning = AssemblyWarning(rec.key_id, rec.type_id, f"{type(e).__name__}: {e}")
            log.warning(f"[ASSEMBLY] skipping key_id={rec.key_id} type={rec.type_id}: {warning.reason}")
            warnings.append(warning)
            continue

        entry = Entry(
            key_id=rec.key_id,
            prefix=prefixes[id(rec)],
            prefix_kind=rec.prefix_kind,
            status=rec.status,
            type_id=rec.type_id,
            primitive=primitive,
        )
        entries.append(entry)
        if rec is primary_rec:
            primary_entry = entry

    pset = PrimitiveSet(kind, entries, primary_entry, warnings)
    log.debug(f"[ASSEMBLY] built {pset!r} warnings={len(warnings)}")
    return AssemblyResult(primitive_set=pset, warnings=pset.warnings)
