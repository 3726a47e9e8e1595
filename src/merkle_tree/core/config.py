"""
Merkle Tree - Configuration
"""

import hashlib
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from merkle_tree.core.exceptions import UnsupportedAlgorithmError

# Algorithms with a caller-chosen output length have no fixed digest size.
VARIABLE_LENGTH_ALGORITHMS = frozenset({"shake_128", "shake_256"})


def normalize_algorithm(value: object) -> str:
    """
    Lower-case a hashlib algorithm name and check it is usable.

    Raises:
        UnsupportedAlgorithmError: If the name is unknown, not a string,
            or names a variable-length algorithm
    """
    if not isinstance(value, str):
        raise UnsupportedAlgorithmError(f"Hash algorithm must be a name, got {value!r}")

    algorithm = value.lower()
    if algorithm in VARIABLE_LENGTH_ALGORITHMS:
        raise UnsupportedAlgorithmError(f"{value} has no fixed digest size")
    if algorithm not in hashlib.algorithms_available:
        raise UnsupportedAlgorithmError(f"Unsupported hash algorithm: {value}")
    return algorithm


class Settings(BaseSettings):
    """Library settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    # Application
    APP_NAME: str = "Merkle Tree"
    VERSION: str = "1.0.0"
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Hashing
    HASH_ALGORITHM: str = "sha256"

    # Metrics
    METRICS_ENABLED: bool = True

    @field_validator("HASH_ALGORITHM")
    @classmethod
    def validate_hash_algorithm(cls, value: str) -> str:
        return normalize_algorithm(value)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
