"""Passworder exceptions.

Every error raised by the package derives from :class:`PassworderError`.
Errors that describe bad caller input also derive from :class:`ValueError`.
"""


class PassworderError(Exception):
    """Base class for all Passworder errors."""


class InvalidInput(PassworderError, ValueError):
    """Empty or malformed password, salt or salt length."""


class IncompatibleKey(InvalidInput):
    """The supplied key is not a 256-bit AES-GCM key."""


class InvalidPayload(PassworderError, ValueError):
    """The payload cannot be serialized to JSON."""


class KeyDerivationFailed(PassworderError):
    """The crypto provider failed while deriving a key."""


class KeyNotExportable(PassworderError):
    """Export was requested for a key derived as non-exportable."""


class MalformedKeyString(PassworderError, ValueError):
    """The key string is not a valid AES-GCM 256 JWK."""


class InvalidVault(PassworderError, ValueError):
    """The vault is not valid JSON or lacks a required field."""


class IncorrectPassword(PassworderError):
    """Authenticated decryption failed.

    Raised for a wrong password, a wrong key and a tampered vault alike;
    the cause is never reported.
    """

    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message)


class CorruptPayload(PassworderError):
    """Decryption succeeded but the plaintext is not UTF-8 JSON."""


class MalformedHex(PassworderError, ValueError):
    """Odd-length or non-hex input to hex deserialization."""
