"""
Tests for assessment signing.
"""

import pytest
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ai_compliance.crypto import (
    Ed25519Signer,
    Ed25519Verifier,
    KeyIntegrityError,
    canonical_bytes,
    generate_keypair,
    ensure_signing_key,
    sign_assessment,
    verify_assessment,
)
from ai_compliance.frameworks.schema import NISTAssessment, NISTVerdict
from ai_compliance.frameworks.catalog import CATALOG_VERSION


@pytest.fixture
def keypair(tmp_path):
    private_key, public_key = generate_keypair()
    key_path = tmp_path / "signing.key"
    key_path.write_bytes(private_key)
    return key_path, public_key


@pytest.fixture
def record():
    return NISTAssessment(
        system_id="sys-1",
        assessed_by="jane.doe",
        catalog_version=CATALOG_VERSION,
        verdict=NISTVerdict(overall_score=3.0, maturity_level="DEFINED"),
        answers={"govern": {"q1": 3.0}},
    )


def test_generate_keypair():
    """Test Ed25519 keypair generation."""
    private_key, public_key = generate_keypair()

    assert len(private_key) == 32
    assert len(public_key) == 32
    assert private_key != public_key


def test_sign_and_verify_bytes(keypair):
    key_path, public_key = keypair
    signer = Ed25519Signer(key_path)

    signature = signer.sign(b"Test data for signing")

    assert len(signature) == 64
    verifier = Ed25519Verifier(public_key)
    assert verifier.verify(b"Test data for signing", signature) is True
    assert verifier.verify(b"Wrong data", signature) is False


def test_dict_signature_ignores_key_order(keypair):
    key_path, public_key = keypair
    signer = Ed25519Signer(key_path)

    signature = signer.sign({"b": 2, "a": 1})

    assert Ed25519Verifier(public_key).verify({"a": 1, "b": 2}, signature) is True
    assert canonical_bytes({"b": 2, "a": 1}) == b'{"a":1,"b":2}'


def test_verifier_accepts_hex_and_pem(keypair):
    key_path, public_key = keypair
    signature = Ed25519Signer(key_path).sign("payload")

    assert Ed25519Verifier(public_key.hex()).verify("payload", signature) is True

    pem = Ed25519PrivateKey.from_private_bytes(key_path.read_bytes()).public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    assert Ed25519Verifier(pem).verify("payload", signature) is True


def test_verifier_rejects_bad_key():
    with pytest.raises(ValueError):
        Ed25519Verifier(b"short")


def test_signer_loads_pem_key(tmp_path):
    key = Ed25519PrivateKey.generate()
    key_path = tmp_path / "signing.pem"
    key_path.write_bytes(key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ))

    signer = Ed25519Signer(key_path)

    assert signer.get_public_key_bytes() == key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def test_missing_key_file(tmp_path):
    with pytest.raises(ValueError):
        Ed25519Signer(tmp_path / "absent.key")


def test_key_integrity_pinned(keypair):
    key_path, _ = keypair
    Ed25519Signer(key_path)
    assert key_path.with_suffix(".hash").exists()

    # Swap the key after it was pinned
    new_private, _ = generate_keypair()
    key_path.write_bytes(new_private)

    with pytest.raises(KeyIntegrityError):
        Ed25519Signer(key_path)

    # Integrity check can be skipped explicitly
    Ed25519Signer(key_path, verify_integrity=False)


def test_ensure_signing_key(tmp_path):
    key_path = tmp_path / "keys" / "signing.key"

    generated, public_hex = ensure_signing_key(key_path)
    assert generated is True
    assert key_path.exists()
    assert key_path.with_suffix(".pub").read_bytes().hex() == public_hex

    generated_again, public_hex_again = ensure_signing_key(key_path)
    assert generated_again is False
    assert public_hex_again == public_hex


def test_sign_assessment_roundtrip(keypair, record):
    key_path, public_key = keypair

    signed = sign_assessment(record, Ed25519Signer(key_path))

    assert record.signature is None
    assert len(bytes.fromhex(signed.signature)) == 64
    assert signed.signable_payload() == record.signable_payload()
    assert verify_assessment(signed, Ed25519Verifier(public_key)) is True


def test_verify_assessment_detects_change(keypair, record):
    key_path, public_key = keypair
    signed = sign_assessment(record, Ed25519Signer(key_path))

    tampered = signed.model_copy(update={"notes": "edited later"})

    assert verify_assessment(tampered, Ed25519Verifier(public_key)) is False


def test_unsigned_record_does_not_verify(keypair, record):
    _, public_key = keypair
    assert verify_assessment(record, Ed25519Verifier(public_key)) is False
