from __future__ import annotations
from typing import Any, Iterator, Tuple

from keyward_core.errors import PrimaryKeyUnavailable, PrimitiveKindMismatchError
from keyward_core.logger import get_logger
from keyward_core.prefix import PREFIX_SIZE
from keyward_core.primitive_set import Entry, PrimitiveSet
from keyward_core.primitives import PrimitiveKind

log = get_logger("Keyward.Wrapper")


class PrimitiveWrapper:
    """
    Turns a PrimitiveSet into one object implementing the primitive interface.

    Wrapped objects hold nothing but the immutable set, so they are safe to
    share between threads and every call is independent.
    """
    primitive_kind: PrimitiveKind

    def wrap(self, primitive_set: PrimitiveSet) -> Any:
        if primitive_set.kind is not self.primitive_kind:
            raise PrimitiveKindMismatchError(
                f"cannot wrap a {primitive_set.kind.value} set as {self.primitive_kind.value}"
            )
        return self._wrap(primitive_set)

    def _wrap(self, primitive_set: PrimitiveSet) -> Any:
        raise NotImplementedError


# ---------------------------
# Helpers shared by wrapped primitives
# ---------------------------
def primary_entry(primitive_set: PrimitiveSet) -> Entry:
    primary = primitive_set.primary
    if primary is None:
        raise PrimaryKeyUnavailable("primitive set has no primary key")
    return primary


def candidates(primitive_set: PrimitiveSet, data: bytes) -> Iterator[Tuple[Entry, bytes]]:
    """
    Yield ``(entry, input)`` pairs in the order they must be tried: entries
    whose prefix matches the first bytes of ``data`` (with the prefix
    stripped), then every RAW entry on the whole of ``data``.
    """
    if len(data) >= PREFIX_SIZE:
        stripped = data[PREFIX_SIZE:]
        for entry in primitive_set.entries_for_prefix(data[:PREFIX_SIZE]):
            yield entry, stripped
    for entry in primitive_set.raw_entries:
        yield entry, data
