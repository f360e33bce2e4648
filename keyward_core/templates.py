"""
keyward_core.templates
----------------------
Key templates: declarative recipes for generating keys.

The named factories below are cached, so repeated calls hand back the same
stored instance. Callers must still compare templates by value.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache

from .prefix import OutputPrefixKind
from .utils import canonical_json


@dataclass(frozen=True)
class KeyTemplate:
    type_id: str
    format_params: bytes
    prefix_kind: OutputPrefixKind = OutputPrefixKind.TINK


ED25519_PRIVATE_KEY_TYPE = "signature/Ed25519PrivateKey"
ED25519_PUBLIC_KEY_TYPE = "signature/Ed25519PublicKey"
AES_GCM_KEY_TYPE = "aead/AesGcmKey"
AES_CTR_HMAC_AEAD_KEY_TYPE = "aead/AesCtrHmacAeadKey"


def _aes_ctr_hmac(aes_key_size: int, prefix_kind: OutputPrefixKind) -> KeyTemplate:
    params = {
        "aes_key_size": aes_key_size,
        "iv_size": 16,
        "hmac_key_size": 32,
        "hash": "SHA256",
        "tag_size": 32 if aes_key_size == 32 else 16,
    }
    return KeyTemplate(AES_CTR_HMAC_AEAD_KEY_TYPE, canonical_json(params), prefix_kind)


@lru_cache(maxsize=None)
def ed25519() -> KeyTemplate:
    return KeyTemplate(ED25519_PRIVATE_KEY_TYPE, canonical_json({}), OutputPrefixKind.TINK)


@lru_cache(maxsize=None)
def ed25519_raw() -> KeyTemplate:
    return KeyTemplate(ED25519_PRIVATE_KEY_TYPE, canonical_json({}), OutputPrefixKind.RAW)


@lru_cache(maxsize=None)
def aes128_gcm() -> KeyTemplate:
    return KeyTemplate(AES_GCM_KEY_TYPE, canonical_json({"key_size": 16}), OutputPrefixKind.TINK)


@lru_cache(maxsize=None)
def aes256_gcm() -> KeyTemplate:
    return KeyTemplate(AES_GCM_KEY_TYPE, canonical_json({"key_size": 32}), OutputPrefixKind.TINK)


@lru_cache(maxsize=None)
def aes256_gcm_raw() -> KeyTemplate:
    return KeyTemplate(AES_GCM_KEY_TYPE, canonical_json({"key_size": 32}), OutputPrefixKind.RAW)


@lru_cache(maxsize=None)
def aes128_ctr_hmac_sha256() -> KeyTemplate:
    return _aes_ctr_hmac(16, OutputPrefixKind.TINK)


@lru_cache(maxsize=None)
def aes256_ctr_hmac_sha256() -> KeyTemplate:
    return _aes_ctr_hmac(32, OutputPrefixKind.TINK)
