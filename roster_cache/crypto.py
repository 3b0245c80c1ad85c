"""
roster_cache.crypto
-------------------
Symmetric encryption for the persisted cache slots:

- HKDF-SHA256: derives a stable 256-bit key from the configured secret
- AES-GCM: authenticated encryption of opaque string payloads
- JSON helpers: encrypt_json(), decrypt_json() for slot plaintext

Ciphertext is a single base64 string: nonce (12 bytes) followed by the
AES-GCM output (ciphertext + 16 byte tag).
"""

from __future__ import annotations
from typing import Optional, Tuple, Any
import json, os
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from .errors import ConfigError, DecryptionError, MalformedPayloadError
from .logger import get_logger
from .utils import b64e, b64d, canonical_json

log = get_logger("roster_cache.Crypto")

NONCE_LEN = 12
TAG_LEN = 16
KEY_INFO = b"roster-cache-v1"


def derive_key(secret: str | bytes, salt: Optional[bytes] = None, info: bytes = KEY_INFO) -> bytes:
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=salt, info=info)
    return hkdf.derive(secret)  # 256-bit AEAD key

def aead_encrypt(key: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    aes = AESGCM(key)
    nonce = os.urandom(NONCE_LEN)
    ct = aes.encrypt(nonce, plaintext, aad)
    return nonce, ct

def aead_decrypt(key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None) -> bytes:
    aes = AESGCM(key)
    return aes.decrypt(nonce, ciphertext, aad)


class CipherService:
    """
    Encrypts and decrypts string payloads with a key derived from a secret.

    The key is derived on first use and never changes afterwards, so one
    instance built at startup serves every cache slot for the process.
    """

    def __init__(self, secret: str | bytes, salt: Optional[bytes] = None):
        if not secret:
            raise ConfigError("cipher secret must not be empty")
        self._secret = secret
        self._salt = salt
        self._key: Optional[bytes] = None

    @property
    def key(self) -> bytes:
        if self._key is None:
            self._key = derive_key(self._secret, self._salt)
            log.debug("[CIPHER] key derived")
        return self._key

    def encrypt(self, plaintext: str) -> str:
        nonce, ct = aead_encrypt(self.key, plaintext.encode("utf-8"))
        return b64e(nonce + ct)

    def decrypt(self, ciphertext: str) -> str:
        try:
            raw = b64d(ciphertext)
        except ValueError as e:
            raise DecryptionError(f"ciphertext is not valid base64: {e}") from e

        if len(raw) < NONCE_LEN + TAG_LEN:
            raise DecryptionError("ciphertext is truncated")

        try:
            pt = aead_decrypt(self.key, raw[:NONCE_LEN], raw[NONCE_LEN:])
        except InvalidTag as e:
            raise DecryptionError("authentication failed (wrong key or corrupted data)") from e

        try:
            return pt.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("plaintext is not valid UTF-8") from e

    def encrypt_json(self, obj: Any) -> str:
        return self.encrypt(canonical_json(obj))

    def decrypt_json(self, ciphertext: str) -> Any:
        text = self.decrypt(ciphertext)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"decrypted payload is not JSON: {e.msg}") from e
