"""
Crypto Provider — CSPRNG, PBKDF2 and AES-GCM behind one interface.

Key derivation and the vault codec receive a provider instead of reaching
for process-wide primitives, so tests can swap in a deterministic one.

Security Note:
    Never log key material, passwords, plaintext or ciphertext here.
"""
import secrets
from abc import ABC, abstractmethod

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


class CryptoProvider(ABC):
    """Primitives used by the passworder."""

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        """Return ``length`` cryptographically secure random bytes."""

    @abstractmethod
    def pbkdf2_sha256(
        self, password: bytes, salt: bytes, iterations: int, length: int,
    ) -> bytes:
        """Derive ``length`` bytes with PBKDF2-HMAC-SHA256."""

    @abstractmethod
    def aes_gcm_encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        """Encrypt and return ``ciphertext || tag``."""

    @abstractmethod
    def aes_gcm_decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        """Verify the tag and decrypt ``ciphertext || tag``.

        Raises:
            Exception: Any error on authentication failure.
        """


class DefaultCryptoProvider(CryptoProvider):
    """Provider backed by :mod:`secrets` and ``cryptography``."""

    def random_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)

    def pbkdf2_sha256(
        self, password: bytes, salt: bytes, iterations: int, length: int,
    ) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=length,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password)

    def aes_gcm_encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        return AESGCM(key).encrypt(iv, plaintext, None)

    def aes_gcm_decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        # raises cryptography.exceptions.InvalidTag on tampering or wrong key
        return AESGCM(key).decrypt(iv, ciphertext, None)


default_provider = DefaultCryptoProvider()
