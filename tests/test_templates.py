import pytest

from keyward_core import templates
from keyward_core.errors import FormatError
from keyward_core.managers import AesCtrHmacAeadKeyManager, AesGcmKeyManager, Ed25519PrivateKeyManager
from keyward_core.prefix import OutputPrefixKind
from keyward_core.templates import KeyTemplate
from keyward_core.utils import canonical_json


def test_named_templates_return_same_reference():
    assert templates.ed25519() is templates.ed25519()
    assert templates.aes256_gcm() is templates.aes256_gcm()


def test_templates_compare_by_value():
    t = templates.aes128_gcm()
    copy = KeyTemplate(t.type_id, bytes(t.format_params), OutputPrefixKind.TINK)
    assert copy == t and copy is not t
    assert KeyTemplate(t.type_id, t.format_params, OutputPrefixKind.RAW) != t


def test_ed25519_template_uses_tink_prefix():
    t = templates.ed25519()
    assert t.type_id == "signature/Ed25519PrivateKey"
    assert t.prefix_kind is OutputPrefixKind.TINK
    assert templates.ed25519_raw().prefix_kind is OutputPrefixKind.RAW


@pytest.mark.parametrize("factory, manager", [
    (templates.ed25519, Ed25519PrivateKeyManager),
    (templates.aes128_gcm, AesGcmKeyManager),
    (templates.aes256_gcm, AesGcmKeyManager),
    (templates.aes128_ctr_hmac_sha256, AesCtrHmacAeadKeyManager),
    (templates.aes256_ctr_hmac_sha256, AesCtrHmacAeadKeyManager),
])
def test_builtin_templates_validate(factory, manager):
    manager().validate_format(factory().format_params)


def _ctr_hmac(**overrides):
    params = {"aes_key_size": 16, "iv_size": 16, "hmac_key_size": 32, "hash": "SHA256", "tag_size": 16}
    params.update(overrides)
    return canonical_json(params)


@pytest.mark.parametrize("params", [
    _ctr_hmac(aes_key_size=24),
    _ctr_hmac(iv_size=11),
    _ctr_hmac(iv_size=17),
    _ctr_hmac(hmac_key_size=15),
    _ctr_hmac(tag_size=9),
    _ctr_hmac(hash="SHA1", tag_size=21),
    _ctr_hmac(hash="SHA512", tag_size=65),
    _ctr_hmac(hash="MD5"),
    _ctr_hmac(hash=["SHA256"]),
    _ctr_hmac(hash={"name": "SHA256"}),
    _ctr_hmac(aes_key_size=16.0),
    b"not json",
])
def test_aes_ctr_hmac_rejects_bad_params(params):
    with pytest.raises(FormatError):
        AesCtrHmacAeadKeyManager().validate_format(params)


def test_aes_ctr_hmac_accepts_limits():
    m = AesCtrHmacAeadKeyManager()
    m.validate_format(_ctr_hmac(iv_size=12, tag_size=10))
    m.validate_format(_ctr_hmac(hash="SHA224", tag_size=28))
    m.validate_format(_ctr_hmac(hash="SHA384", tag_size=48))


@pytest.mark.parametrize("params", [
    b'{"key_size":24}', b'{"key_size":true}', b'{"key_size":16.0}', b"{}", b"[16]",
])
def test_aes_gcm_rejects_bad_key_size(params):
    with pytest.raises(FormatError):
        AesGcmKeyManager().validate_format(params)


def test_ed25519_rejects_parameters():
    with pytest.raises(FormatError):
        Ed25519PrivateKeyManager().validate_format(b'{"key_size":32}')
