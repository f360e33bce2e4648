import os
import pytest

from keyward_core.errors import FormatError, KeyMaterialError
from keyward_core.managers import default_registry
from keyward_core.managers.base import KeyManager
from keyward_core.prefix import OutputPrefixKind
from keyward_core.primitives import PrimitiveKind
from keyward_core.records import KeyMaterialRecord, KeyStatus
from keyward_core.registry import Registry
from keyward_core.wrappers import register_wrappers

FAKE_SIGN = "test/FakeSignKey"
FAKE_VERIFY = "test/FakeVerifyKey"


class FakeSigner:
    """Signature is just tag || data; good enough to tell keys apart."""
    def __init__(self, tag):
        self.tag = tag

    def sign(self, data):
        return self.tag + data


class FakeVerifier:
    def __init__(self, tag):
        self.tag = tag

    def verify(self, signature, data):
        if signature != self.tag + data:
            raise ValueError("bad signature")


class FakeSignManager(KeyManager):
    key_type = FAKE_SIGN

    def supported_primitive_kind(self):
        return PrimitiveKind.SIGN

    def validate_format(self, params):
        if params == b"bad":
            raise FormatError("bad params")

    def generate(self, params):
        return os.urandom(8)

    def primitive_from_key(self, payload, kind):
        if payload == b"broken":
            raise KeyMaterialError("corrupted key")
        return FakeSigner(payload)


class FakeVerifyManager(FakeSignManager):
    key_type = FAKE_VERIFY

    def supported_primitive_kind(self):
        return PrimitiveKind.VERIFY

    def primitive_from_key(self, payload, kind):
        if payload == b"broken":
            raise KeyMaterialError("corrupted key")
        return FakeVerifier(payload)


def make_record(type_id, key_id, payload, prefix_kind=OutputPrefixKind.TINK, status=KeyStatus.ENABLED):
    return KeyMaterialRecord(
        type_id=type_id,
        key_id=key_id,
        status=status,
        prefix_kind=prefix_kind,
        payload=payload,
    )


@pytest.fixture
def registry():
    return default_registry({"key_types": ["ed25519", "aes-gcm", "aes-ctr-hmac"]})


@pytest.fixture
def fake_registry():
    reg = Registry()
    register_wrappers(reg)
    reg.register_key_manager(FakeSignManager())
    reg.register_key_manager(FakeVerifyManager())
    return reg
