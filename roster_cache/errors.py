# roster_cache/errors.py


class RosterCacheError(Exception):
    pass


class ConfigError(RosterCacheError):
    pass


class DecryptionError(RosterCacheError):
    """Ciphertext could not be opened with the current key (wrong key, tampering, truncation)."""


class MalformedPayloadError(RosterCacheError):
    """Decrypted plaintext is not the JSON shape the cache expects."""
