"""
Ed25519 signing for assessment records.

Assessments are immutable audit evidence. When signing is enabled, each
record is signed over its canonical JSON payload at creation time so a
later edit of the stored row can be detected.
"""

import json
import hashlib
import logging
from pathlib import Path
from typing import Union, Dict, Any, TypeVar, TYPE_CHECKING

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey
)
from cryptography.hazmat.primitives import serialization
from cryptography.exceptions import InvalidSignature

if TYPE_CHECKING:
    from .frameworks.schema import AssessmentRecord

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound="AssessmentRecord")


class KeyIntegrityError(Exception):
    """Raised when the signing key no longer matches its recorded hash."""
    pass


def canonical_bytes(data: Union[bytes, str, Dict[str, Any]]) -> bytes:
    """Serialize data the same way for signing and verification."""
    if isinstance(data, dict):
        return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


class Ed25519Signer:
    """
    Signs assessment payloads with a local Ed25519 key.

    The key file holds either a PEM private key or the raw 32 key bytes.
    A sibling .hash file pins the key contents on first load.
    """

    def __init__(self, private_key_path: Path, verify_integrity: bool = True):
        """
        Args:
            private_key_path: Path to Ed25519 private key
            verify_integrity: Compare the key against its pinned hash

        Raises:
            ValueError: If the key cannot be loaded
            KeyIntegrityError: If the key changed since it was pinned
        """
        self.private_key_path = Path(private_key_path)
        self._hash_path = self.private_key_path.with_suffix(".hash")
        self._private_key = self._load(verify_integrity)

    def _load(self, verify_integrity: bool) -> Ed25519PrivateKey:
        try:
            key_data = self.private_key_path.read_bytes()
        except OSError as e:
            raise ValueError(f"Failed to read private key {self.private_key_path}: {e}")

        digest = hashlib.sha256(key_data).hexdigest()
        if self._hash_path.exists():
            if verify_integrity and self._hash_path.read_text().strip() != digest:
                raise KeyIntegrityError(
                    f"Signing key {self.private_key_path} does not match its pinned hash. "
                    "Delete the .hash file if the key was rotated on purpose."
                )
        else:
            self._hash_path.write_text(digest)
            self._hash_path.chmod(0o600)

        if len(key_data) == 32:
            return Ed25519PrivateKey.from_private_bytes(key_data)

        try:
            key = serialization.load_pem_private_key(key_data, password=None)
        except ValueError as e:
            raise ValueError(f"Invalid key format in {self.private_key_path}: {e}")
        if not isinstance(key, Ed25519PrivateKey):
            raise ValueError("Not an Ed25519 private key")
        return key

    def sign(self, data: Union[bytes, str, Dict[str, Any]]) -> bytes:
        """Return the 64-byte Ed25519 signature of data."""
        return self._private_key.sign(canonical_bytes(data))

    def get_public_key_bytes(self) -> bytes:
        return self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )


class Ed25519Verifier:
    """Verifies Ed25519 signatures (public key as raw bytes, hex, PEM or key object)."""

    def __init__(self, public_key: Union[bytes, str, Ed25519PublicKey]):
        self._public_key = self._load(public_key)

    def _load(self, public_key: Union[bytes, str, Ed25519PublicKey]) -> Ed25519PublicKey:
        if isinstance(public_key, Ed25519PublicKey):
            return public_key

        if isinstance(public_key, str):
            if "-----BEGIN PUBLIC KEY-----" in public_key:
                key = serialization.load_pem_public_key(public_key.encode("utf-8"))
                if not isinstance(key, Ed25519PublicKey):
                    raise ValueError("Not an Ed25519 public key")
                return key
            public_key = bytes.fromhex(public_key)

        if len(public_key) != 32:
            raise ValueError("Invalid public key format")
        return Ed25519PublicKey.from_public_bytes(public_key)

    def verify(self, data: Union[bytes, str, Dict[str, Any]], signature: bytes) -> bool:
        try:
            self._public_key.verify(signature, canonical_bytes(data))
            return True
        except InvalidSignature:
            return False


def generate_keypair() -> tuple[bytes, bytes]:
    """
    Generate a new Ed25519 keypair.

    Returns:
        Tuple of (private_key_bytes, public_key_bytes), 32 bytes each
    """
    private_key = Ed25519PrivateKey.generate()
    private_bytes = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )
    return private_bytes, public_bytes


def ensure_signing_key(key_path: Path) -> tuple[bool, str]:
    """
    Ensure a signing key exists at key_path, generating one on first use.

    Returns:
        Tuple of (was_generated, public_key_hex)
    """
    key_path = Path(key_path)
    if key_path.exists():
        signer = Ed25519Signer(key_path)
        return False, signer.get_public_key_bytes().hex()

    logger.info(f"Generating new Ed25519 signing key at {key_path}")
    private_bytes, public_bytes = generate_keypair()

    key_path.parent.mkdir(parents=True, exist_ok=True)
    key_path.write_bytes(private_bytes)
    key_path.chmod(0o600)
    key_path.with_suffix(".pub").write_bytes(public_bytes)

    # Pin the freshly written key
    Ed25519Signer(key_path)
    return True, public_bytes.hex()


def sign_assessment(record: RecordT, signer: Ed25519Signer) -> RecordT:
    """Return a copy of the record carrying a hex signature over its payload."""
    signature = signer.sign(record.signable_payload())
    return record.model_copy(update={"signature": signature.hex()})


def verify_assessment(record: "AssessmentRecord", verifier: Ed25519Verifier) -> bool:
    """Check a stored record against its signature; unsigned records fail."""
    if not record.signature:
        return False
    return verifier.verify(record.signable_payload(), bytes.fromhex(record.signature))
