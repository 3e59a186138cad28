"""Project-wide constants (buffer size, multipart field names, timeouts)."""

BUFFER_SIZE_BYTES: int = 24 * 1024 * 1024  # 24 MiB default chunk size

FILE_FIELD_NAME: str = "files[]"
FILE_PART_NAME: str = "buffer.txt"
FILE_CONTENT_TYPE: str = "application/octet-stream"
CONTENT_FIELD_NAME: str = "content"
BATCH_LABEL_PREFIX: str = "ID: "

RATE_LIMIT_STATUS: int = 429

BASE_UPLOAD_TIMEOUT_SECONDS: float = 30.0
UPLOAD_TIMEOUT_PER_MIB_SECONDS: float = 0.1

LOG_COMPONENTS: tuple = ("cli", "chunker")  # top-level loggers configured by setup_logging
