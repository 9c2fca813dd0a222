"""Domain exceptions for packaging, configuration and delivery failures."""

from typing import Optional


class LogshipError(RuntimeError):
    """Base class for every error raised by logship."""

    def __init__(self, detail: str, hint: Optional[str] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.hint = hint


class PackagingError(LogshipError):
    """Raised when a batch of records cannot be turned into a payload."""


class EncodingError(PackagingError):
    """A record holds a value that cannot be serialized to JSON."""


class CompressionError(PackagingError):
    """The gzip stream could not be written, flushed or closed."""


class ConfigError(LogshipError):
    """Raised for invalid configuration values."""


class DeliveryError(LogshipError):
    """Raised when the ingestion endpoint rejects or never receives a payload."""

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(detail, hint=hint)
        self.status_code = status_code
