"""
Passworder Configuration — Validated key-derivation settings.

Reads optional overrides from environment variables:
    PASSWORDER_KDF_ITERATIONS = <integer, default 10000>
    PASSWORDER_SALT_LENGTH = <integer bytes, default 32>

Security Note:
    The PBKDF2 iteration count is part of the vault format. Vaults written
    with one count can only be opened with the same count.
"""
import os
import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("navigator.passworder")

PBKDF2_ITERATIONS = 10_000
SALT_LENGTH = 32

_ITERATIONS_ENV = "PASSWORDER_KDF_ITERATIONS"
_SALT_LENGTH_ENV = "PASSWORDER_SALT_LENGTH"


class PassworderConfig(BaseModel):
    """Validated passworder configuration."""

    iterations: int = Field(default=PBKDF2_ITERATIONS, ge=1)
    salt_length: int = Field(default=SALT_LENGTH, ge=1, le=1024)

    model_config = {"frozen": True}

    @field_validator("iterations")
    @classmethod
    def warn_nonstandard_iterations(cls, v: int) -> int:
        """Warn when the iteration count differs from the vault default."""
        if v != PBKDF2_ITERATIONS:
            logger.warning(
                "PBKDF2 iteration count set to %d (default %d); vaults are "
                "not interchangeable across iteration counts",
                v, PBKDF2_ITERATIONS,
            )
        return v

    @classmethod
    def from_env(cls) -> "PassworderConfig":
        """Create PassworderConfig by loading values from environment.

        Unset variables fall back to the defaults.

        Returns:
            Populated PassworderConfig instance.

        Raises:
            pydantic.ValidationError: If a variable is not a valid integer
                or is out of range.
        """
        values: dict[str, str] = {}
        iterations = os.environ.get(_ITERATIONS_ENV)
        if iterations is not None:
            values["iterations"] = iterations
        salt_length = os.environ.get(_SALT_LENGTH_ENV)
        if salt_length is not None:
            values["salt_length"] = salt_length
        logger.debug("Loaded passworder config overrides: %s", sorted(values))
        return cls(**values)
