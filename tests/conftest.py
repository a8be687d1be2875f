"""Shared fixtures for the navigator_passworder test suite."""
import pytest

from navigator_passworder import codec
from navigator_passworder.codec import Passworder
from navigator_passworder.provider import DefaultCryptoProvider


class CountingProvider(DefaultCryptoProvider):
    """Provider with predictable "random" bytes for deterministic vaults.

    Each call returns ``length`` bytes counting up from the call number,
    so consecutive calls never repeat.
    """

    def __init__(self):
        self.calls = 0

    def random_bytes(self, length: int) -> bytes:
        start = self.calls
        self.calls += 1
        return bytes((start + i) % 256 for i in range(length))


class FailingKdfProvider(DefaultCryptoProvider):
    """Provider whose PBKDF2 always fails."""

    def pbkdf2_sha256(self, password, salt, iterations, length):
        raise RuntimeError("provider unavailable")


@pytest.fixture(autouse=True)
def _reset_default_passworder(monkeypatch):
    """Give every test a fresh module-level Passworder read from a clean env."""
    monkeypatch.delenv("PASSWORDER_KDF_ITERATIONS", raising=False)
    monkeypatch.delenv("PASSWORDER_SALT_LENGTH", raising=False)
    codec.set_passworder(None)
    yield
    codec.set_passworder(None)


@pytest.fixture
def passworder():
    """Passworder with default settings and provider."""
    return Passworder()


@pytest.fixture
def counting_provider():
    return CountingProvider()


@pytest.fixture
def deterministic_passworder(counting_provider):
    """Passworder whose salts and IVs are predictable."""
    return Passworder(provider=counting_provider)


@pytest.fixture
def failing_provider():
    return FailingKdfProvider()
