"""Exception hierarchy for rfml-sync.

Every error that should stop a run derives from SyncError, which carries
the process exit code the CLI returns for it.
"""

from __future__ import annotations

from typing import Dict, Optional

__all__ = [
    "SyncError",
    "SpecFolderMissingError",
    "ConfigError",
    "ValidationFailedError",
    "UnsupportedElementError",
    "MalformedStepError",
    "RemoteError",
    "UploadError",
]


class SyncError(Exception):
    """Base class for fatal synchronization errors."""

    exit_code = 2


class SpecFolderMissingError(SyncError):
    """The spec-file root directory does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Rainforest folder not found ({path})")


class ConfigError(SyncError):
    """Configuration error with key and message attributes."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")

    def __str__(self) -> str:
        return f"{self.key}: {self.message}"


class ValidationFailedError(SyncError):
    """One or more spec files failed to parse.

    Attributes:
        errors: Mapping of file path to {line number: message}
    """

    def __init__(self, errors: Dict[str, Dict[int, str]]) -> None:
        self.errors = errors
        super().__init__(f"{len(errors)} spec file(s) failed validation")


class UnsupportedElementError(SyncError):
    """A remote test contains an element type this tool cannot render."""

    def __init__(self, element_type: Optional[str]) -> None:
        self.element_type = element_type
        super().__init__(f"Unknown element type: {element_type}")


class MalformedStepError(SyncError):
    """A remote step cannot be written as one action line and one response line.

    Empty, multi-line or comment-like text would shift the line pairing of
    the exported file.
    """

    def __init__(self, action: str, response: str) -> None:
        self.action = action
        self.response = response
        super().__init__(f"Step cannot be exported as two lines: {action!r} / {response!r}")


class RemoteError(SyncError):
    """An HTTP or transport failure on a strict remote call."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.url = url
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"RemoteError(message='{self.message}', "
            f"status_code={self.status_code}, url='{self.url}')"
        )


class UploadError(SyncError):
    """A remote failure while creating or updating one local test."""

    def __init__(self, local_id: Optional[str], cause: Exception) -> None:
        self.local_id = local_id
        self.cause = cause
        super().__init__(f"Error: {local_id}: {cause}")
