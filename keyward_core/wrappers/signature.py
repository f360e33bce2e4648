from __future__ import annotations

from keyward_core.errors import NoMatchingKeyError
from keyward_core.primitive_set import PrimitiveSet
from keyward_core.primitives import PrimitiveKind
from .base import PrimitiveWrapper, candidates, log, primary_entry


class _WrappedSigner:
    def __init__(self, primitive_set: PrimitiveSet) -> None:
        self._pset = primitive_set

    def sign(self, data: bytes) -> bytes:
        primary = primary_entry(self._pset)
        return primary.prefix + primary.primitive.sign(data)


class _WrappedVerifier:
    def __init__(self, primitive_set: PrimitiveSet) -> None:
        self._pset = primitive_set

    def verify(self, signature: bytes, data: bytes) -> bool:
        """Return True, or raise NoMatchingKeyError once every candidate key rejected it."""
        tried = 0
        for entry, sig in candidates(self._pset, signature):
            tried += 1
            try:
                entry.primitive.verify(sig, data)
                return True
            except Exception:
                continue
        log.debug(f"[VERIFY] no key accepted the signature candidates={tried}")
        raise NoMatchingKeyError()


class PublicKeySignWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.SIGN

    def _wrap(self, primitive_set: PrimitiveSet) -> _WrappedSigner:
        return _WrappedSigner(primitive_set)


class PublicKeyVerifyWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.VERIFY

    def _wrap(self, primitive_set: PrimitiveSet) -> _WrappedVerifier:
        return _WrappedVerifier(primitive_set)
