from __future__ import annotations
from typing import Any
from cryptography.hazmat.primitives.asymmetric import ed25519

from keyward_core.errors import FormatError, GenerationError, KeyMaterialError
from keyward_core.primitives import PrimitiveKind
from keyward_core.records import KeyMaterialClass
from keyward_core.templates import ED25519_PRIVATE_KEY_TYPE, ED25519_PUBLIC_KEY_TYPE
from keyward_core.utils import b64e, b64d, canonical_json
from .base import KeyManager, PrivateKeyManager

KEY_SIZE = 32


# --------- Ed25519 primitives ----------
class Ed25519Signer:
    def __init__(self, priv_raw: bytes) -> None:
        self._sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)

    def sign(self, data: bytes) -> bytes:
        return self._sk.sign(data)


class Ed25519Verifier:
    def __init__(self, pub_raw: bytes) -> None:
        self._pk = ed25519.Ed25519PublicKey.from_public_bytes(pub_raw)

    def verify(self, signature: bytes, data: bytes) -> None:
        # raises cryptography.exceptions.InvalidSignature
        self._pk.verify(signature, data)


def _raw_key(manager: KeyManager, key: dict, field: str) -> bytes:
    try:
        raw = b64d(manager._require(key, field))
    except ValueError as e:
        raise KeyMaterialError(f"{manager.key_type}: {field} is not valid base64") from e
    if len(raw) != KEY_SIZE:
        raise KeyMaterialError(f"{manager.key_type}: {field} must be {KEY_SIZE} bytes")
    return raw


# --------- Key managers ----------
class Ed25519PrivateKeyManager(PrivateKeyManager):
    key_type = ED25519_PRIVATE_KEY_TYPE
    public_key_type = ED25519_PUBLIC_KEY_TYPE

    def supported_primitive_kind(self) -> PrimitiveKind:
        return PrimitiveKind.SIGN

    def validate_format(self, params: bytes) -> None:
        # Ed25519 has no tunable parameters; anything beyond an empty object is rejected.
        fmt = self._parse_params(params)
        if fmt:
            raise FormatError(f"{self.key_type}: unexpected format parameters {sorted(fmt)}")

    def generate(self, params: bytes) -> bytes:
        self.validate_format(params)
        try:
            sk = ed25519.Ed25519PrivateKey.generate()
        except Exception as e:
            raise GenerationError(f"{self.key_type}: key generation failed") from e
        return canonical_json({
            "version": self.version,
            "private_key": b64e(sk.private_bytes_raw()),
            "public_key": b64e(sk.public_key().public_bytes_raw()),
        })

    def primitive_from_key(self, payload: bytes, kind: PrimitiveKind) -> Any:
        key = self._parse_payload(payload)
        return Ed25519Signer(_raw_key(self, key, "private_key"))

    def public_key_payload(self, payload: bytes) -> bytes:
        key = self._parse_payload(payload)
        return canonical_json({
            "version": self.version,
            "public_key": b64e(_raw_key(self, key, "public_key")),
        })


class Ed25519PublicKeyManager(KeyManager):
    key_type = ED25519_PUBLIC_KEY_TYPE
    material_class = KeyMaterialClass.ASYMMETRIC_PUBLIC

    def supported_primitive_kind(self) -> PrimitiveKind:
        return PrimitiveKind.VERIFY

    def validate_format(self, params: bytes) -> None:
        self._parse_params(params)

    def generate(self, params: bytes) -> bytes:
        raise GenerationError(
            f"{self.key_type}: public keys are derived from a private key, not generated"
        )

    def primitive_from_key(self, payload: bytes, kind: PrimitiveKind) -> Any:
        key = self._parse_payload(payload)
        try:
            return Ed25519Verifier(_raw_key(self, key, "public_key"))
        except ValueError as e:
            raise KeyMaterialError(f"{self.key_type}: invalid public key") from e
