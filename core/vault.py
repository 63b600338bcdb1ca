"""Credential vault: AES-GCM encryption of the stored cloud credentials.

The key is the hex MD5 digest of the passphrase, used as 32 ASCII bytes
(AES-256). The stored blob is base64(nonce || ciphertext || tag).

The unsalted fast digest only protects credentials at rest on the local disk;
it is not resistant to offline guessing. Moving to a salted memory-hard KDF
changes the blob format and would need a migration of existing settings.
"""

import base64
import binascii
import hashlib
import json
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.errors import AuthFailure, DecodeError
from models.types import Credential

NONCE_SIZE = 12


def derive_key(passphrase: str) -> bytes:
    """Derive the 32-byte AES key from a passphrase."""
    return hashlib.md5(passphrase.encode()).hexdigest().encode()


def encrypt(passphrase: str, plaintext: bytes) -> str:
    """Encrypt bytes with a passphrase-derived key.

    Args:
        passphrase: Secret used to derive the key
        plaintext: Data to seal (may be empty)

    Returns:
        Base64 text of nonce || ciphertext
    """
    nonce = os.urandom(NONCE_SIZE)
    sealed = AESGCM(derive_key(passphrase)).encrypt(nonce, plaintext, None)
    return base64.b64encode(nonce + sealed).decode()


def decrypt(passphrase: str, blob: str) -> bytes:
    """Decrypt a blob produced by encrypt().

    Raises:
        AuthFailure: If the blob is malformed, corrupted, or the passphrase is wrong
    """
    if not isinstance(blob, str):
        raise AuthFailure("decryption failed: blob is not a string")

    try:
        data = base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AuthFailure("decryption failed: blob is not valid base64") from e

    # Reject non-canonical encodings so any edit of the stored text is caught
    if base64.b64encode(data).decode() != blob:
        raise AuthFailure("decryption failed: blob is not valid base64")

    if len(data) < NONCE_SIZE:
        raise AuthFailure("decryption failed: ciphertext too short")

    nonce, ciphertext = data[:NONCE_SIZE], data[NONCE_SIZE:]
    try:
        return AESGCM(derive_key(passphrase)).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise AuthFailure("decryption failed: wrong passphrase or corrupted data") from e


def encrypt_credential(passphrase: str, credential: Credential) -> str:
    """Encrypt a credential record for storage in the settings file."""
    payload = json.dumps({'username': credential.username, 'password': credential.password})
    return encrypt(passphrase, payload.encode())


def decrypt_credential(passphrase: str, blob: str) -> Credential:
    """Decrypt a stored credential record.

    Raises:
        AuthFailure: If the blob cannot be opened with this passphrase
        DecodeError: If the decrypted payload is not a credential record
    """
    plaintext = decrypt(passphrase, blob)
    try:
        data = json.loads(plaintext)
    except ValueError as e:
        raise DecodeError(f"Stored credential is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError("Stored credential is not an object")
    return Credential(username=data.get('username', ''), password=data.get('password', ''))
