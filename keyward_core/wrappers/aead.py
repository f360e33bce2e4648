from __future__ import annotations
from typing import Optional

from keyward_core.errors import NoMatchingKeyError
from keyward_core.primitive_set import PrimitiveSet
from keyward_core.primitives import PrimitiveKind
from .base import PrimitiveWrapper, candidates, log, primary_entry


class _WrappedAead:
    def __init__(self, primitive_set: PrimitiveSet) -> None:
        self._pset = primitive_set

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        primary = primary_entry(self._pset)
        return primary.prefix + primary.primitive.encrypt(plaintext, associated_data)

    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        tried = 0
        for entry, ct in candidates(self._pset, ciphertext):
            tried += 1
            try:
                return entry.primitive.decrypt(ct, associated_data)
            except Exception:
                continue
        log.debug(f"[DECRYPT] no key accepted the ciphertext candidates={tried}")
        raise NoMatchingKeyError()


class AeadWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.AEAD

    def _wrap(self, primitive_set: PrimitiveSet) -> _WrappedAead:
        return _WrappedAead(primitive_set)
