"""
Key Derivation — Password-derived AES-GCM keys and their JWK form.

Keys are derived with PBKDF2-HMAC-SHA256 (10,000 iterations, 256-bit
output). Exportable keys serialize to a JSON Web Key string matching the
WebCrypto ``jwk`` export of an extractable AES-GCM key:

    {"alg":"A256GCM","ext":true,"k":"<base64url>","key_ops":["encrypt","decrypt"],"kty":"oct"}

Security Note:
    Never log passwords or key material. Only log flags and parameters.
"""
import hmac
import base64
import binascii
import logging
import re
from typing import Any, Literal, Optional, Union

import orjson
from pydantic import BaseModel, ValidationError

from .config import PBKDF2_ITERATIONS
from .exceptions import (
    IncompatibleKey,
    InvalidInput,
    KeyDerivationFailed,
    KeyNotExportable,
    MalformedKeyString,
)
from .provider import CryptoProvider, default_provider

logger = logging.getLogger("navigator.passworder")

ALGORITHM = "AES-GCM"
KEY_LENGTH = 32  # AES-256
JWK_ALGORITHM = "A256GCM"
KEY_OPS = ("encrypt", "decrypt")

_B64URL_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


class Key:
    """A 256-bit AES-GCM key.

    Holds the raw key bytes, the ``exportable`` flag and the algorithm tag.
    Only exportable keys can be turned into a key string.
    """

    __slots__ = ("_material", "_exportable", "_algorithm")

    def __init__(
        self,
        material: bytes,
        exportable: bool = False,
        algorithm: str = ALGORITHM,
    ):
        if algorithm != ALGORITHM:
            raise IncompatibleKey(f"Unsupported key algorithm: {algorithm}")
        if not isinstance(material, (bytes, bytearray)) or len(material) != KEY_LENGTH:
            raise IncompatibleKey(
                f"{ALGORITHM} key must be exactly {KEY_LENGTH} bytes"
            )
        self._material = bytes(material)
        self._exportable = bool(exportable)
        self._algorithm = algorithm

    @property
    def material(self) -> bytes:
        return self._material

    @property
    def exportable(self) -> bool:
        return self._exportable

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def length(self) -> int:
        """Key length in bits."""
        return len(self._material) * 8

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._algorithm == other._algorithm and hmac.compare_digest(
            self._material, other._material
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f'<Key algorithm={self._algorithm} length={self.length} '
            f'exportable={self._exportable}>'
        )


class JsonWebKey(BaseModel):
    """Symmetric JWK as produced by :func:`export_key`."""

    kty: Literal["oct"]
    k: str
    alg: Optional[str] = None
    ext: Optional[bool] = None
    key_ops: Optional[list[str]] = None


def ensure_key(key: Any) -> Key:
    """Return ``key`` if it is a usable AES-GCM key.

    Raises:
        IncompatibleKey: If ``key`` is not a :class:`Key`.
    """
    if not isinstance(key, Key):
        raise IncompatibleKey(
            f"Expected an {ALGORITHM} Key, got {type(key).__name__}"
        )
    return key


def decode_salt(salt: Union[str, bytes]) -> bytes:
    """Return raw salt bytes from a base64 storage string or raw bytes.

    Raises:
        InvalidInput: If the salt is empty, not base64 or of the wrong type.
    """
    if isinstance(salt, str):
        try:
            raw = base64.b64decode(salt, validate=True)
        except (binascii.Error, ValueError) as err:
            raise InvalidInput("Salt is not valid base64") from err
    elif isinstance(salt, (bytes, bytearray)):
        raw = bytes(salt)
    else:
        raise InvalidInput(
            f"Salt must be a base64 string or bytes, got {type(salt).__name__}"
        )
    if not raw:
        raise InvalidInput("Salt cannot be empty")
    return raw


def derive_key(
    password: Union[str, bytes],
    salt: Union[str, bytes],
    exportable: bool = False,
    *,
    iterations: int = PBKDF2_ITERATIONS,
    provider: Optional[CryptoProvider] = None,
) -> Key:
    """Derive an AES-GCM key from a password and salt with PBKDF2-SHA256.

    Args:
        password: Password text (UTF-8 encoded) or raw bytes.
        salt: Base64 salt string as stored in a vault, or raw bytes.
        exportable: Whether the key may later be exported as a key string.
        iterations: PBKDF2 iteration count.
        provider: Crypto provider; defaults to the ``cryptography`` one.

    Returns:
        Derived 256-bit key.

    Raises:
        InvalidInput: If password or salt is empty or malformed.
        KeyDerivationFailed: If the provider fails.
    """
    if isinstance(password, str):
        password_bytes = password.encode("utf-8")
    elif isinstance(password, (bytes, bytearray)):
        password_bytes = bytes(password)
    else:
        raise InvalidInput(
            f"Password must be str or bytes, got {type(password).__name__}"
        )
    if not password_bytes:
        raise InvalidInput("Password cannot be empty")
    salt_bytes = decode_salt(salt)
    if iterations < 1:
        raise InvalidInput("Iteration count must be at least 1")

    provider = provider or default_provider
    try:
        material = provider.pbkdf2_sha256(
            password_bytes, salt_bytes, iterations, KEY_LENGTH,
        )
    except Exception as err:
        raise KeyDerivationFailed(f"Key derivation failed: {err}") from err

    logger.debug(
        "Derived %s key (exportable=%s, iterations=%d)",
        ALGORITHM, exportable, iterations,
    )
    return Key(material, exportable=exportable)


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    # unpadded base64url alphabet only
    if not _B64URL_PATTERN.fullmatch(data):
        raise ValueError("not unpadded base64url")
    padded = data + "=" * (-len(data) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)


def export_key(key: Key) -> str:
    """Serialize an exportable key to a JWK key string.

    Raises:
        IncompatibleKey: If ``key`` is not a :class:`Key`.
        KeyNotExportable: If the key was derived as non-exportable.
    """
    key = ensure_key(key)
    if not key.exportable:
        raise KeyNotExportable("Key was not derived as exportable")
    jwk = {
        "alg": JWK_ALGORITHM,
        "ext": True,
        "k": _b64url_encode(key.material),
        "key_ops": list(KEY_OPS),
        "kty": "oct",
    }
    logger.debug("Exported %s key", ALGORITHM)
    return orjson.dumps(jwk).decode("utf-8")


def import_key(key_string: Union[str, bytes]) -> Key:
    """Rebuild an encrypt/decrypt key from a key string.

    Args:
        key_string: JWK string produced by :func:`export_key`.

    Returns:
        Exportable key equivalent to the exported one.

    Raises:
        MalformedKeyString: If the string is not a valid AES-GCM 256 JWK.
    """
    try:
        parsed = orjson.loads(key_string)
        jwk = JsonWebKey.model_validate(parsed)
    except (orjson.JSONDecodeError, TypeError, ValidationError) as err:
        raise MalformedKeyString(f"Invalid key string: {err}") from err

    if jwk.alg is not None and jwk.alg != JWK_ALGORITHM:
        raise MalformedKeyString(f"Unsupported key algorithm: {jwk.alg}")
    if jwk.ext is False:
        raise MalformedKeyString("Key string is marked non-extractable")
    if jwk.key_ops is not None and not set(KEY_OPS).issubset(jwk.key_ops):
        raise MalformedKeyString(
            f"Key string must allow {list(KEY_OPS)}, got {jwk.key_ops}"
        )
    try:
        material = _b64url_decode(jwk.k)
    except (binascii.Error, ValueError) as err:
        raise MalformedKeyString("Key material is not valid base64url") from err
    if len(material) != KEY_LENGTH:
        raise MalformedKeyString(
            f"Key material must be {KEY_LENGTH} bytes, got {len(material)}"
        )

    logger.debug("Imported %s key", ALGORITHM)
    return Key(material, exportable=True)
