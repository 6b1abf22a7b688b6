"""Common utilities for mailkeys."""

from mailkeys.common.errors import (
    Advisory,
    ArtifactExistsError,
    KeyGenerationError,
    MailkeysError,
    ValidationError,
)
from mailkeys.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "Advisory",
    "MailkeysError",
    "ValidationError",
    "ArtifactExistsError",
    "KeyGenerationError",
]
