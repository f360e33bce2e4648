import threading
import pytest

from keyward_core import templates
from keyward_core.errors import NoMatchingKeyError, PrimaryKeyUnavailable, PrimitiveKindMismatchError
from keyward_core.prefix import OutputPrefixKind, parse_prefix
from keyward_core.primitive_set import assemble_primitive_set
from keyward_core.primitives import PrimitiveKind
from keyward_core.registry import Registry
from keyward_core.wrappers import AeadWrapper, PublicKeySignWrapper, PublicKeyVerifyWrapper

from conftest import FAKE_SIGN, FAKE_VERIFY, make_record

RAW = OutputPrefixKind.RAW


def _wrap(registry, records, primary, kind):
    pset = assemble_primitive_set(registry, records, primary, kind).primitive_set
    return registry.wrap(pset)


def test_sign_prepends_primary_prefix(fake_registry):
    signer = _wrap(fake_registry, [make_record(FAKE_SIGN, 0xCAFE, b"k")], 0xCAFE, PrimitiveKind.SIGN)
    out = signer.sign(b"msg")
    assert parse_prefix(out) == (0x01, 0xCAFE)
    assert out[5:] == b"kmsg"


def test_sign_with_raw_primary_adds_nothing(fake_registry):
    signer = _wrap(fake_registry, [make_record(FAKE_SIGN, 3, b"k", RAW)], 3, PrimitiveKind.SIGN)
    assert signer.sign(b"msg") == b"kmsg"


def test_sign_without_primary(fake_registry):
    signer = _wrap(fake_registry, [make_record(FAKE_SIGN, 3, b"k")], None, PrimitiveKind.SIGN)
    with pytest.raises(PrimaryKeyUnavailable):
        signer.sign(b"msg")


def test_verify_by_prefix(fake_registry):
    verifier = _wrap(
        fake_registry,
        [make_record(FAKE_VERIFY, 1, b"a"), make_record(FAKE_VERIFY, 2, b"b")],
        None,
        PrimitiveKind.VERIFY,
    )
    assert verifier.verify(b"\x01\x00\x00\x00\x02" + b"bmsg", b"msg") is True


def test_raw_fallback_tries_every_raw_entry(fake_registry):
    verifier = _wrap(
        fake_registry,
        [make_record(FAKE_VERIFY, 1, b"x", RAW), make_record(FAKE_VERIFY, 2, b"y", RAW)],
        None,
        PrimitiveKind.VERIFY,
    )
    assert verifier.verify(b"ymsg", b"msg") is True


def test_short_input_goes_straight_to_raw_entries(fake_registry):
    verifier = _wrap(
        fake_registry,
        [make_record(FAKE_VERIFY, 1, b"", RAW), make_record(FAKE_VERIFY, 2, b"p")],
        None,
        PrimitiveKind.VERIFY,
    )
    assert verifier.verify(b"ab", b"ab") is True


def test_prefixed_input_falls_back_to_raw(fake_registry):
    # input looks framed for key 2, but key 2 rejects it; the RAW key accepts the whole input
    framed = b"\x01\x00\x00\x00\x02" + b"zzz"
    verifier = _wrap(
        fake_registry,
        [make_record(FAKE_VERIFY, 2, b"b"), make_record(FAKE_VERIFY, 9, framed[:3], RAW)],
        None,
        PrimitiveKind.VERIFY,
    )
    assert verifier.verify(framed, framed[3:]) is True


def test_exhaustion_raises_one_generic_error(fake_registry):
    verifier = _wrap(
        fake_registry,
        [
            make_record(FAKE_VERIFY, 1, b"x", RAW),
            make_record(FAKE_VERIFY, 2, b"y", RAW),
            make_record(FAKE_VERIFY, 3, b"z"),
        ],
        None,
        PrimitiveKind.VERIFY,
    )
    with pytest.raises(NoMatchingKeyError) as exc:
        verifier.verify(b"\x01\x00\x00\x00\x03" + b"qmsg", b"msg")
    assert str(exc.value) == NoMatchingKeyError.MESSAGE
    assert exc.value.__cause__ is None
    assert exc.value.__context__ is None


def test_wrapper_rejects_set_of_other_kind(fake_registry):
    pset = assemble_primitive_set(
        fake_registry, [make_record(FAKE_SIGN, 1, b"k")], 1, PrimitiveKind.SIGN
    ).primitive_set
    with pytest.raises(PrimitiveKindMismatchError):
        PublicKeyVerifyWrapper().wrap(pset)
    assert PublicKeySignWrapper().wrap(pset).sign(b"m")


def test_wrap_without_registered_wrapper_names_the_kind(fake_registry):
    pset = assemble_primitive_set(
        fake_registry, [make_record(FAKE_SIGN, 1, b"k")], 1, PrimitiveKind.SIGN
    ).primitive_set
    bare = Registry()
    with pytest.raises(PrimitiveKindMismatchError, match="no wrapper registered for primitive kind sign"):
        bare.wrap(pset)


def _aead_records(registry, *tmpls):
    return [registry.new_key_material(t, key_id=i + 1) for i, t in enumerate(tmpls)]


def test_aead_roundtrip_with_rotation(registry):
    recs = _aead_records(registry, templates.aes128_gcm(), templates.aes128_ctr_hmac_sha256())
    old = _wrap(registry, recs, 1, PrimitiveKind.AEAD)
    new = _wrap(registry, recs, 2, PrimitiveKind.AEAD)

    ct_old = old.encrypt(b"data", b"ad")
    ct_new = new.encrypt(b"data", b"ad")
    assert parse_prefix(ct_old) == (0x01, 1)
    assert parse_prefix(ct_new) == (0x01, 2)
    assert new.decrypt(ct_old, b"ad") == b"data"
    assert old.decrypt(ct_new, b"ad") == b"data"


def test_aead_raw_key_and_exhaustion(registry):
    recs = [registry.new_key_material(templates.aes256_gcm_raw(), key_id=5)]
    aead = _wrap(registry, recs, 5, PrimitiveKind.AEAD)
    ct = aead.encrypt(b"data")
    assert aead.decrypt(ct) == b"data"
    with pytest.raises(NoMatchingKeyError):
        aead.decrypt(ct, b"wrong ad")
    with pytest.raises(NoMatchingKeyError):
        aead.decrypt(b"")


def test_aead_wrapper_kind():
    assert AeadWrapper.primitive_kind is PrimitiveKind.AEAD


def test_wrapped_primitive_is_shared_between_threads(registry):
    recs = _aead_records(registry, templates.aes256_gcm())
    aead = _wrap(registry, recs, 1, PrimitiveKind.AEAD)
    errors = []

    def worker(n):
        try:
            for i in range(50):
                msg = f"{n}-{i}".encode()
                assert aead.decrypt(aead.encrypt(msg)) == msg
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
