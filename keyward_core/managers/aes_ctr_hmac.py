"""
keyward_core.managers.aes_ctr_hmac
----------------------------------
Encrypt-then-MAC AEAD: AES-CTR for confidentiality, truncated HMAC over
``associated_data || iv || ciphertext || len(associated_data) in bits`` for
integrity. Output is ``iv || ciphertext || tag``.

Parameter limits:
- AES key: 16 or 32 bytes, IV size 12..16 bytes
- HMAC key: at least 16 bytes
- tag size: at least 10 bytes and no more than the digest size
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import hmac
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from keyward_core.errors import FormatError, GenerationError, KeyMaterialError
from keyward_core.primitives import PrimitiveKind
from keyward_core.templates import AES_CTR_HMAC_AEAD_KEY_TYPE
from keyward_core.utils import b64e, b64d, canonical_json
from .base import KeyManager, _check_int

AES_KEY_SIZES = (16, 32)
MIN_IV_SIZE = 12
MAX_IV_SIZE = 16
MIN_HMAC_KEY_SIZE = 16
MIN_TAG_SIZE = 10

# hash name -> (cryptography hash class, digest size)
HASHES: Dict[str, Any] = {
    "SHA1": (hashes.SHA1, 20),
    "SHA224": (hashes.SHA224, 28),
    "SHA256": (hashes.SHA256, 32),
    "SHA384": (hashes.SHA384, 48),
    "SHA512": (hashes.SHA512, 64),
}


class AesCtrHmacAead:
    def __init__(self, aes_key: bytes, iv_size: int, hmac_key: bytes, hash_name: str, tag_size: int) -> None:
        self._aes_key = aes_key
        self._iv_size = iv_size
        self._hmac_key = hmac_key
        self._hash = HASHES[hash_name][0]
        self._tag_size = tag_size

    def _counter_block(self, iv: bytes) -> bytes:
        # short IVs are zero-padded into the 16-byte initial counter block
        return iv + b"\x00" * (16 - len(iv))

    def _ctr(self, iv: bytes, data: bytes) -> bytes:
        ctx = Cipher(algorithms.AES(self._aes_key), modes.CTR(self._counter_block(iv))).encryptor()
        return ctx.update(data) + ctx.finalize()

    def _tag(self, aad: bytes, iv_and_ct: bytes) -> bytes:
        mac = crypto_hmac.HMAC(self._hmac_key, self._hash())
        mac.update(aad)
        mac.update(iv_and_ct)
        mac.update((len(aad) * 8).to_bytes(8, "big"))
        return mac.finalize()[: self._tag_size]

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        aad = associated_data or b""
        iv = os.urandom(self._iv_size)
        iv_and_ct = iv + self._ctr(iv, plaintext)
        return iv_and_ct + self._tag(aad, iv_and_ct)

    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        aad = associated_data or b""
        if len(ciphertext) < self._iv_size + self._tag_size:
            raise InvalidTag()
        iv_and_ct, tag = ciphertext[: -self._tag_size], ciphertext[-self._tag_size:]
        if not hmac.compare_digest(self._tag(aad, iv_and_ct), tag):
            raise InvalidTag()
        iv = iv_and_ct[: self._iv_size]
        return self._ctr(iv, iv_and_ct[self._iv_size:])


class AesCtrHmacAeadKeyManager(KeyManager):
    key_type = AES_CTR_HMAC_AEAD_KEY_TYPE

    def supported_primitive_kind(self) -> PrimitiveKind:
        return PrimitiveKind.AEAD

    def _check_params(self, p: Dict[str, Any], error=FormatError) -> None:
        fields = ("aes_key_size", "iv_size", "hmac_key_size", "tag_size")
        for f in fields:
            if not _check_int(p.get(f)):
                raise error(f"{self.key_type}: {f} missing or not an integer")
        if p["aes_key_size"] not in AES_KEY_SIZES:
            raise error(f"{self.key_type}: invalid AES key size {p['aes_key_size']}")
        if not MIN_IV_SIZE <= p["iv_size"] <= MAX_IV_SIZE:
            raise error(f"{self.key_type}: invalid AES-CTR IV size {p['iv_size']}")
        if p["hmac_key_size"] < MIN_HMAC_KEY_SIZE:
            raise error(f"{self.key_type}: HMAC key too short")
        if not isinstance(p.get("hash"), str) or p["hash"] not in HASHES:
            raise error(f"{self.key_type}: unknown hash type {p.get('hash')!r}")
        if p["tag_size"] < MIN_TAG_SIZE:
            raise error(f"{self.key_type}: tag size too small")
        if p["tag_size"] > HASHES[p["hash"]][1]:
            raise error(f"{self.key_type}: tag size too big")

    def validate_format(self, params: bytes) -> None:
        self._check_params(self._parse_params(params))

    def generate(self, params: bytes) -> bytes:
        p = self._parse_params(params)
        self._check_params(p)
        try:
            aes_key = os.urandom(p["aes_key_size"])
            hmac_key = os.urandom(p["hmac_key_size"])
        except NotImplementedError as e:
            raise GenerationError(f"{self.key_type}: no entropy source available") from e
        return canonical_json({
            "version": self.version,
            "aes_key": b64e(aes_key),
            "iv_size": p["iv_size"],
            "hmac_key": b64e(hmac_key),
            "hash": p["hash"],
            "tag_size": p["tag_size"],
        })

    def primitive_from_key(self, payload: bytes, kind: PrimitiveKind) -> Any:
        key = self._parse_payload(payload)
        try:
            aes_key = b64d(self._require(key, "aes_key"))
            hmac_key = b64d(self._require(key, "hmac_key"))
        except ValueError as e:
            raise KeyMaterialError(f"{self.key_type}: key bytes are not valid base64") from e
        self._check_params(
            {
                "aes_key_size": len(aes_key),
                "iv_size": key.get("iv_size"),
                "hmac_key_size": len(hmac_key),
                "hash": key.get("hash"),
                "tag_size": key.get("tag_size"),
            },
            error=KeyMaterialError,
        )
        return AesCtrHmacAead(aes_key, key["iv_size"], hmac_key, key["hash"], key["tag_size"])
