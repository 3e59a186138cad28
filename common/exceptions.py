"""Custom exception classes for the uploader."""


class UploaderException(Exception):
    """
    Base exception class for all uploader errors.
    """
    pass


class ConfigurationError(UploaderException):
    """
    Raised when a required setting is missing or has an invalid value.
    """
    pass


class ChunkUploadError(UploaderException):
    """
    Raised when a single chunk cannot be delivered.

    The driver catches this at the chunk boundary and moves on.
    """

    def __init__(self, message: str, chunk_index: int):
        super().__init__(message)
        self.chunk_index = chunk_index


class TransportError(ChunkUploadError):
    """
    Raised on connection, DNS, TLS or timeout failures while sending a chunk.
    """
    pass


class ResponseDecodeError(ChunkUploadError):
    """
    Raised when a response body cannot be decoded (e.g. corrupt gzip encoding).
    """
    pass


class MalformedRateLimitBodyError(ChunkUploadError):
    """
    Raised when a 429 response body cannot be decoded as a rate-limit signal.
    """
    pass


class RateLimitExceededError(ChunkUploadError):
    """
    Raised when a configured retry count or wait ceiling is exceeded.
    """
    pass


class ShortReadError(OSError):
    """
    Raised when the source file yields fewer bytes than its size promised.
    """
    pass
