"""Navigator Passworder — Password-based encryption of serializable data.

Security Note (Threat Model):
    Derived keys and decrypted payloads live in process memory for the
    duration of a call. Exported key strings hold raw key material and must
    be stored as carefully as the password itself.
"""

from .version import __version__
from .aio import AsyncPassworder
from .codec import (
    Passworder,
    EncryptionResult,
    DetailedEncryptionResult,
    DetailedDecryptResult,
    get_passworder,
    set_passworder,
    generate_salt,
    key_from_password,
    encrypt,
    encrypt_with_key,
    encrypt_with_detail,
    decrypt,
    decrypt_with_key,
    decrypt_with_detail,
)
from .config import PassworderConfig
from .exceptions import (
    PassworderError,
    InvalidInput,
    IncompatibleKey,
    InvalidPayload,
    KeyDerivationFailed,
    KeyNotExportable,
    MalformedKeyString,
    InvalidVault,
    IncorrectPassword,
    CorruptPayload,
    MalformedHex,
)
from .keys import Key, derive_key, export_key, import_key
from .provider import CryptoProvider, DefaultCryptoProvider
from .storage import serialize_buffer_for_storage, serialize_buffer_from_storage

__all__ = [
    "__version__",
    "AsyncPassworder",
    "Passworder",
    "PassworderConfig",
    "EncryptionResult",
    "DetailedEncryptionResult",
    "DetailedDecryptResult",
    "CryptoProvider",
    "DefaultCryptoProvider",
    "Key",
    "get_passworder",
    "set_passworder",
    "generate_salt",
    "key_from_password",
    "derive_key",
    "export_key",
    "import_key",
    "encrypt",
    "encrypt_with_key",
    "encrypt_with_detail",
    "decrypt",
    "decrypt_with_key",
    "decrypt_with_detail",
    "serialize_buffer_for_storage",
    "serialize_buffer_from_storage",
    "PassworderError",
    "InvalidInput",
    "IncompatibleKey",
    "InvalidPayload",
    "KeyDerivationFailed",
    "KeyNotExportable",
    "MalformedKeyString",
    "InvalidVault",
    "IncorrectPassword",
    "CorruptPayload",
    "MalformedHex",
]
