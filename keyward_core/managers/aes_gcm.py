from __future__ import annotations
from typing import Any, Optional
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from keyward_core.errors import FormatError, GenerationError, KeyMaterialError
from keyward_core.primitives import PrimitiveKind
from keyward_core.templates import AES_GCM_KEY_TYPE
from keyward_core.utils import b64e, b64d, canonical_json
from .base import KeyManager, _check_int

NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZES = (16, 32)


class AesGcmAead:
    """AES-GCM with a random 96-bit nonce; output is ``nonce || ciphertext || tag``."""

    def __init__(self, key: bytes) -> None:
        self._aes = AESGCM(key)

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aes.encrypt(nonce, plaintext, associated_data)

    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        if len(ciphertext) < NONCE_SIZE + TAG_SIZE:
            raise InvalidTag()
        nonce, ct = ciphertext[:NONCE_SIZE], ciphertext[NONCE_SIZE:]
        return self._aes.decrypt(nonce, ct, associated_data)


class AesGcmKeyManager(KeyManager):
    key_type = AES_GCM_KEY_TYPE

    def supported_primitive_kind(self) -> PrimitiveKind:
        return PrimitiveKind.AEAD

    def _key_size(self, params: bytes) -> int:
        fmt = self._parse_params(params)
        size = fmt.get("key_size")
        if not _check_int(size) or size not in KEY_SIZES:
            raise FormatError(f"{self.key_type}: unsupported key size {size!r}, expected one of {KEY_SIZES}")
        return size

    def validate_format(self, params: bytes) -> None:
        self._key_size(params)

    def generate(self, params: bytes) -> bytes:
        size = self._key_size(params)
        try:
            key = os.urandom(size)
        except NotImplementedError as e:
            raise GenerationError(f"{self.key_type}: no entropy source available") from e
        return canonical_json({"version": self.version, "key_value": b64e(key)})

    def primitive_from_key(self, payload: bytes, kind: PrimitiveKind) -> Any:
        key = self._parse_payload(payload)
        try:
            value = b64d(self._require(key, "key_value"))
        except ValueError as e:
            raise KeyMaterialError(f"{self.key_type}: key_value is not valid base64") from e
        if len(value) not in KEY_SIZES:
            raise KeyMaterialError(f"{self.key_type}: invalid key length {len(value)}")
        return AesGcmAead(value)
