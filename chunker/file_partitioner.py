"""Splits a source file into an ordered list of fixed-size chunks."""

import os
from pathlib import Path
from typing import BinaryIO, Union

from common.exceptions import ShortReadError
from common.logging_config import get_logger
from common.types import Chunk

logger = get_logger(__name__)


def chunk_count(total_size: int, buffer_size: int) -> int:
    """
    Number of chunks needed to cover a file.

    Args:
        total_size: File size in bytes
        buffer_size: Chunk size in bytes (must be positive)

    Returns:
        ceil(total_size / buffer_size), or 0 for an empty file
    """
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")
    if total_size <= 0:
        return 0
    return (total_size + buffer_size - 1) // buffer_size


def _read_exact(f: BinaryIO, size: int, index: int) -> bytes:
    """
    Read exactly size bytes or fail.

    Args:
        f: Open binary file positioned at the chunk start
        size: Number of bytes the chunk must hold
        index: Chunk index (for the error message)

    Returns:
        Chunk bytes

    Raises:
        ShortReadError: If fewer than size bytes are available
    """
    data = f.read(size)
    if len(data) != size:
        raise ShortReadError(
            f"Short read on chunk {index}: expected {size} bytes, got {len(data)}"
        )
    return data


def partition(path: Union[str, Path], buffer_size: int) -> list[Chunk]:
    """
    Read a file sequentially and divide it into chunks.

    Every chunk but the last holds exactly buffer_size bytes; the last holds
    the remainder. An empty file yields an empty list.

    Args:
        path: Path to the source file
        buffer_size: Chunk size in bytes

    Returns:
        Chunks in ascending index order

    Raises:
        ValueError: If buffer_size is not positive
        OSError: If the file cannot be opened or stat'ed (FileNotFoundError,
            PermissionError, IsADirectoryError, ...)
        ShortReadError: If the file yields fewer bytes than its size
    """
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")

    with open(path, 'rb') as f:
        total_size = os.fstat(f.fileno()).st_size
        count = chunk_count(total_size, buffer_size)
        logger.debug(f"Partitioning {path}: size={total_size} buffer_size={buffer_size} chunks={count}")

        if count == 0:
            logger.info(f"File is empty, no chunks produced: {path}")
            return []

        chunks = []
        for index in range(count - 1):
            chunks.append(Chunk(index=index, total=count, data=_read_exact(f, buffer_size, index)))

        remaining = total_size - (count - 1) * buffer_size
        chunks.append(Chunk(index=count - 1, total=count, data=_read_exact(f, remaining, count - 1)))

    logger.info(f"Partitioned {path} into {count} chunk(s)")
    return chunks
