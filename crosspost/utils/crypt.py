import base64
import binascii
import json
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_BYTES = 12

_passphrase = os.getenv("SECRET_KEY")
if not _passphrase:
    raise ValueError("SECRET_KEY is not set in the environment!")

# AES-256 wants exactly 32 bytes
_KEY = _passphrase.encode()[:32].ljust(32, b"\0")
_cipher = AESGCM(_KEY)


class CredentialDecryptError(ValueError):
    """Stored credential blob is corrupt or was sealed with another key."""


def encrypt_data(data):
    """JSON-serialise `data` and seal it as base64(nonce || ciphertext)."""
    nonce = os.urandom(NONCE_BYTES)
    sealed = _cipher.encrypt(nonce, json.dumps(data).encode(), None)
    return base64.b64encode(nonce + sealed).decode()


def decrypt_data(blob):
    try:
        raw = base64.b64decode(blob)
        plain = _cipher.decrypt(raw[:NONCE_BYTES], raw[NONCE_BYTES:], None)
    except (InvalidTag, binascii.Error, ValueError) as e:
        raise CredentialDecryptError(f"cannot decrypt stored credential: {e.__class__.__name__}") from e
    return json.loads(plain.decode())


def decrypt_optional(blob):
    """None for an empty field; decrypt_data otherwise."""
    return decrypt_data(blob) if blob else None
