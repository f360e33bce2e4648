"""Primitive interfaces returned by key managers and by the wrappers.

Key managers build raw primitives that implement these Protocols; the
wrappers in ``keyward_core.wrappers`` implement the same Protocols on top of
a whole primitive set. Application code only ever sees these interfaces.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Protocol



class PrimitiveKind(str, Enum):
    SIGN = "sign"
    VERIFY = "verify"
    AEAD = "aead"


class PublicKeySign(Protocol):
    def sign(self, data: bytes) -> bytes: ...


class PublicKeyVerify(Protocol):
    """Raises on an invalid signature."""
    def verify(self, signature: bytes, data: bytes) -> None: ...


class Aead(Protocol):
    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes: ...
    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes: ...
