"""
Vault Codec — Password-based encryption of serializable data into vaults.

A vault is the JSON of an :class:`EncryptionResult`:

    {"data": "<base64 ciphertext+tag>", "iv": "<base64 16-byte IV>", "salt": "<base64>"}

Encryption: payload → compact JSON → UTF-8 → AES-256-GCM(key, fresh IV).
The key is either supplied by the caller or derived from the password and
the salt with PBKDF2-SHA256 (see :mod:`navigator_passworder.keys`).

Security Note:
    Never log plaintext, ciphertext or key material.
    Every authenticated-decryption failure surfaces as IncorrectPassword,
    so a caller cannot tell a wrong password from a tampered vault.
"""
import base64
import logging
import threading
from collections.abc import Mapping
from typing import Any, Optional, Union

import orjson
from pydantic import BaseModel, ValidationError

from .config import PassworderConfig
from .exceptions import (
    CorruptPayload,
    IncorrectPassword,
    InvalidInput,
    InvalidPayload,
    InvalidVault,
)
from .keys import Key, derive_key, ensure_key, export_key
from .provider import CryptoProvider, default_provider

logger = logging.getLogger("navigator.passworder")

IV_LENGTH = 16


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------

class EncryptionResult(BaseModel):
    """Ciphertext and IV of one encryption, plus the salt when password-derived."""

    data: str
    iv: str
    salt: Optional[str] = None

    model_config = {"strict": True}

    def to_json(self) -> str:
        """Serialize to the vault string, omitting an absent salt."""
        return orjson.dumps(self.model_dump(exclude_none=True)).decode("utf-8")


class DetailedEncryptionResult(BaseModel):
    """Vault plus the exported key it was encrypted with."""

    vault: str
    exported_key_string: str


class DetailedDecryptResult(BaseModel):
    """Decrypted payload plus the exported key and the salt of its vault."""

    exported_key_string: str
    vault: Any
    salt: str


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------

def serialize_value(value: Any) -> bytes:
    """Serialize a Python value to compact JSON bytes for encryption.

    Supports: str, int, float, dict, list, bool, None. Raw bytes are not
    JSON and are rejected; encode them (base64, hex) before encrypting.

    Raises:
        InvalidPayload: If the value is not JSON serializable.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidPayload("Payload must be JSON serializable, got raw bytes")
    try:
        return orjson.dumps(value)
    except orjson.JSONEncodeError as err:
        raise InvalidPayload(f"Payload is not JSON serializable: {err}") from err


def deserialize_value(data: bytes) -> Any:
    """Deserialize JSON bytes back to a Python value.

    Raises:
        CorruptPayload: If the bytes are not UTF-8 JSON.
    """
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError as err:
        raise CorruptPayload(f"Decrypted payload is not valid JSON: {err}") from err
    return parsed


def parse_vault(text: Union[str, bytes]) -> EncryptionResult:
    """Parse a vault string into an :class:`EncryptionResult`.

    Raises:
        InvalidVault: If the text is not a JSON object with string
            ``data`` and ``iv`` fields.
    """
    try:
        parsed = orjson.loads(text)
    except (orjson.JSONDecodeError, TypeError) as err:
        raise InvalidVault(f"Vault is not valid JSON: {err}") from err
    return _to_result(parsed)


def _to_result(payload: Union[EncryptionResult, Mapping[str, Any]]) -> EncryptionResult:
    if isinstance(payload, EncryptionResult):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidVault("Vault must be a JSON object")
    try:
        return EncryptionResult.model_validate(dict(payload))
    except ValidationError as err:
        raise InvalidVault(f"Vault is missing required fields: {err}") from err


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class Passworder:
    """Encrypts and decrypts serializable data with passwords or keys.

    Holds only its configuration and crypto provider; every call is
    independent, so one instance can be shared between threads.
    """

    def __init__(
        self,
        config: Optional[PassworderConfig] = None,
        provider: Optional[CryptoProvider] = None,
    ):
        self.config = config or PassworderConfig()
        self.provider = provider or default_provider

    def __repr__(self) -> str:
        return (
            f'<Passworder iterations={self.config.iterations} '
            f'salt_length={self.config.salt_length} '
            f'provider={type(self.provider).__name__}>'
        )

    # ------------------------------------------------------------------
    # Keys and salts
    # ------------------------------------------------------------------

    def generate_salt(self, byte_count: Optional[int] = None) -> str:
        """Return ``byte_count`` CSPRNG bytes as a base64 string.

        Args:
            byte_count: Number of random bytes; defaults to ``config.salt_length``.

        Raises:
            InvalidInput: If ``byte_count`` is less than 1.
        """
        if byte_count is None:
            byte_count = self.config.salt_length
        if isinstance(byte_count, bool) or not isinstance(byte_count, int) or byte_count < 1:
            raise InvalidInput(f"Salt byte count must be a positive integer, got {byte_count!r}")
        return _b64encode(self.provider.random_bytes(byte_count))

    def key_from_password(
        self,
        password: Union[str, bytes],
        salt: Union[str, bytes],
        exportable: bool = False,
    ) -> Key:
        """Derive a key from ``password`` and ``salt`` with this instance's settings."""
        return derive_key(
            password,
            salt,
            exportable,
            iterations=self.config.iterations,
            provider=self.provider,
        )

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    def encrypt_with_key(self, key: Key, payload: Any) -> EncryptionResult:
        """Encrypt ``payload`` with ``key`` under a fresh random IV.

        Args:
            key: AES-GCM key.
            payload: Any JSON-serializable value.

        Returns:
            EncryptionResult with base64 ``data`` and ``iv`` and no salt.

        Raises:
            IncompatibleKey: If ``key`` is not a :class:`Key`.
            InvalidPayload: If ``payload`` is not JSON serializable.
        """
        key = ensure_key(key)
        plaintext = serialize_value(payload)
        iv = self.provider.random_bytes(IV_LENGTH)
        ciphertext = self.provider.aes_gcm_encrypt(key.material, iv, plaintext)
        logger.debug("Encrypted payload (%d bytes)", len(plaintext))
        return EncryptionResult(data=_b64encode(ciphertext), iv=_b64encode(iv))

    def encrypt(
        self,
        password: Union[str, bytes],
        payload: Any,
        key: Optional[Key] = None,
        salt: Optional[Union[str, bytes]] = None,
    ) -> str:
        """Encrypt ``payload`` and return the vault string.

        When ``key`` is given it is used as is and ``password`` is not
        derived; the caller must keep the two consistent. Otherwise a
        non-exportable key is derived from ``password`` and ``salt``.

        Args:
            password: Password to derive the key from.
            payload: Any JSON-serializable value.
            key: Optional pre-derived key.
            salt: Base64 salt or raw salt bytes; a fresh one is generated
                when omitted.

        Returns:
            Vault string carrying ``data``, ``iv`` and ``salt``.
        """
        salt = self._normalize_salt(salt)
        if key is None:
            key = self.key_from_password(password, salt)
        result = self.encrypt_with_key(key, payload)
        result.salt = salt
        return result.to_json()

    def encrypt_with_detail(
        self,
        password: Union[str, bytes],
        payload: Any,
        salt: Optional[Union[str, bytes]] = None,
    ) -> DetailedEncryptionResult:
        """Encrypt ``payload`` and also return the exported key.

        The exported key string can later be imported with
        :func:`~navigator_passworder.keys.import_key` to decrypt the vault
        without running PBKDF2 again.
        """
        salt = self._normalize_salt(salt)
        key = self.key_from_password(password, salt, exportable=True)
        exported_key_string = export_key(key)
        vault = self.encrypt(password, payload, key=key, salt=salt)
        return DetailedEncryptionResult(
            vault=vault,
            exported_key_string=exported_key_string,
        )

    # ------------------------------------------------------------------
    # Decryption
    # ------------------------------------------------------------------

    def decrypt_with_key(
        self,
        key: Key,
        payload: Union[EncryptionResult, Mapping[str, Any]],
    ) -> Any:
        """Decrypt an encryption result with ``key``.

        Args:
            key: AES-GCM key.
            payload: EncryptionResult or mapping with ``data`` and ``iv``.

        Returns:
            The original payload.

        Raises:
            IncompatibleKey: If ``key`` is not a :class:`Key`.
            InvalidVault: If ``payload`` lacks ``data`` or ``iv``.
            IncorrectPassword: If authenticated decryption fails for any reason.
            CorruptPayload: If the plaintext is not UTF-8 JSON.
        """
        key = ensure_key(key)
        result = _to_result(payload)
        try:
            ciphertext = base64.b64decode(result.data, validate=True)
            iv = base64.b64decode(result.iv, validate=True)
            plaintext = self.provider.aes_gcm_decrypt(key.material, iv, ciphertext)
        except Exception:
            logger.debug("Vault decryption failed")
            raise IncorrectPassword() from None
        logger.debug("Decrypted payload (%d bytes)", len(plaintext))
        return deserialize_value(plaintext)

    def decrypt(
        self,
        password: Union[str, bytes],
        text: Union[str, bytes],
        key: Optional[Key] = None,
    ) -> Any:
        """Decrypt a vault string with ``password`` or a pre-derived ``key``.

        Raises:
            InvalidVault: If the vault is malformed, or has no salt and no
                ``key`` was given.
            IncorrectPassword: If the password or key is wrong or the vault
                was tampered with.
        """
        result = parse_vault(text)
        if key is None:
            key = self.key_from_password(password, self._require_salt(result))
        return self.decrypt_with_key(key, result)

    def decrypt_with_detail(
        self,
        password: Union[str, bytes],
        text: Union[str, bytes],
    ) -> DetailedDecryptResult:
        """Decrypt a vault string and also return the exported key and salt."""
        result = parse_vault(text)
        salt = self._require_salt(result)
        key = self.key_from_password(password, salt, exportable=True)
        exported_key_string = export_key(key)
        vault = self.decrypt_with_key(key, result)
        return DetailedDecryptResult(
            exported_key_string=exported_key_string,
            vault=vault,
            salt=salt,
        )

    def _normalize_salt(self, salt: Optional[Union[str, bytes]]) -> str:
        """Return the base64 salt string stored in the vault.

        Raw salt bytes are base64-encoded; a fresh salt is drawn when omitted.
        """
        if salt is None:
            return self.generate_salt()
        if isinstance(salt, (bytes, bytearray)):
            if not salt:
                raise InvalidInput("Salt cannot be empty")
            return _b64encode(bytes(salt))
        if not isinstance(salt, str):
            raise InvalidInput(
                f"Salt must be a base64 string or bytes, got {type(salt).__name__}"
            )
        return salt

    @staticmethod
    def _require_salt(result: EncryptionResult) -> str:
        if not result.salt:
            raise InvalidVault("Vault has no salt; a key is required to decrypt it")
        return result.salt


# ---------------------------------------------------------------------------
# Module-level default instance
# ---------------------------------------------------------------------------

_default_passworder: Optional[Passworder] = None
_default_lock = threading.Lock()


def get_passworder() -> Passworder:
    """Return the default Passworder, configured from the environment."""
    global _default_passworder
    with _default_lock:
        if _default_passworder is None:
            _default_passworder = Passworder(PassworderConfig.from_env())
        return _default_passworder


def set_passworder(passworder: Optional[Passworder]) -> None:
    """Replace the default Passworder; ``None`` re-reads the environment on next use."""
    global _default_passworder
    with _default_lock:
        _default_passworder = passworder


def generate_salt(byte_count: Optional[int] = None) -> str:
    return get_passworder().generate_salt(byte_count)


def key_from_password(
    password: Union[str, bytes], salt: Union[str, bytes], exportable: bool = False,
) -> Key:
    return get_passworder().key_from_password(password, salt, exportable)


def encrypt_with_key(key: Key, payload: Any) -> EncryptionResult:
    return get_passworder().encrypt_with_key(key, payload)


def encrypt(
    password: Union[str, bytes],
    payload: Any,
    key: Optional[Key] = None,
    salt: Optional[Union[str, bytes]] = None,
) -> str:
    return get_passworder().encrypt(password, payload, key=key, salt=salt)


def encrypt_with_detail(
    password: Union[str, bytes], payload: Any, salt: Optional[Union[str, bytes]] = None,
) -> DetailedEncryptionResult:
    return get_passworder().encrypt_with_detail(password, payload, salt=salt)


def decrypt_with_key(
    key: Key, payload: Union[EncryptionResult, Mapping[str, Any]],
) -> Any:
    return get_passworder().decrypt_with_key(key, payload)


def decrypt(
    password: Union[str, bytes], text: Union[str, bytes], key: Optional[Key] = None,
) -> Any:
    return get_passworder().decrypt(password, text, key=key)


def decrypt_with_detail(
    password: Union[str, bytes], text: Union[str, bytes],
) -> DetailedDecryptResult:
    return get_passworder().decrypt_with_detail(password, text)
