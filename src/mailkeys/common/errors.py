"""Shared error types and codes."""

from __future__ import annotations

from dataclasses import dataclass


class ErrorCode:
    INVALID_ARGUMENT = "invalid_argument"
    ARTIFACT_EXISTS = "artifact_exists"
    KEYGEN_FAILED = "keygen_failed"
    PERMISSION_AUDIT = "permission_audit"
    RELOAD_FAILED = "reload_failed"
    NOT_MOUNTED = "not_mounted"
    NOT_FOUND = "not_found"


class MailkeysError(Exception):
    """Fatal error that aborts a provisioning run."""

    code = "error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ValidationError(MailkeysError):
    """Invalid input; raised before anything on disk is touched."""

    code = ErrorCode.INVALID_ARGUMENT


class ArtifactExistsError(MailkeysError):
    """Key files already exist and overwriting was not requested."""

    code = ErrorCode.ARTIFACT_EXISTS

    def __init__(self, message: str, existing: list[str] | None = None):
        super().__init__(message)
        self.existing = existing or []


class KeyGenerationError(MailkeysError):
    """The external key generator failed; ``log`` holds its diagnostic output."""

    code = ErrorCode.KEYGEN_FAILED

    def __init__(self, message: str, log: str = ""):
        super().__init__(message)
        self.log = log


@dataclass(frozen=True)
class Advisory:
    """Non-fatal problem reported to the operator."""

    code: str
    message: str
