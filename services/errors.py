"""Exception types raised by the transcription and content pipeline.

Routers translate these into HTTP responses; services never swallow them.
"""
from typing import Optional


class MumbleTasksError(Exception):
    """
    Base class for pipeline failures.

    Attributes:
        message: Human-readable error description
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputError(MumbleTasksError):
    """Raised before any collaborator is called when the input is unusable."""


class ProviderError(MumbleTasksError):
    """
    Raised when an external provider reports a failure.

    Attributes:
        message: Provider message when available, else a generic fallback
        provider: Provider name (e.g. 'openai')
        status_code: HTTP status reported by the provider, if any
    """
    def __init__(
        self,
        message: str,
        provider: str = "openai",
        status_code: Optional[int] = None
    ):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class TranscriptionError(ProviderError):
    """Raised when the speech-to-text provider fails."""


class EmptyResultError(MumbleTasksError):
    """Raised when a provider call succeeds but returns no usable text."""
