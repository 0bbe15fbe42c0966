"""API key generation and normalization."""
import secrets
import string

from token_quota.common.config import settings


KEY_PREFIX = "sk-"  # Conventional display prefix, never stored
KEY_CHARSET = string.ascii_letters + string.digits  # a-zA-Z0-9


class KeyGenerationError(Exception):
    """Raised when a secret key cannot be generated."""


def generate_key(length: int | None = None) -> str:
    """Generate a new secret key.

    Format: <48 random chars from a-zA-Z0-9>
    Example: 7x9K2mN4pQ8vR1wS3jL6hB5cF0dG9zA1x9K2mN4pQ8vR1wS3

    Raises:
        KeyGenerationError: If the system random source is unavailable
    """
    if length is None:
        length = settings.token_key_length
    try:
        return "".join(secrets.choice(KEY_CHARSET) for _ in range(length))
    except (OSError, NotImplementedError) as e:
        raise KeyGenerationError(str(e)) from e


def normalize_key(key: str) -> str:
    """Strip surrounding whitespace and the optional ``sk-`` prefix."""
    key = key.strip()
    if key.startswith(KEY_PREFIX):
        key = key[len(KEY_PREFIX):]
    return key
