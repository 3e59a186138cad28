"""Upload driver: partition a file and send its chunks one at a time."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from nanoid import generate

from chunker.file_partitioner import partition
from common.constants import LOG_COMPONENTS
from common.exceptions import ChunkUploadError
from common.logging_config import get_logger, set_correlation_id
from common.types import UploadSummary
from cli.config import Config
from cli.webhook_client import WebhookClient

logger = get_logger(__name__)


def generate_batch_id() -> str:
    """
    Generate the identifier shared by every chunk of one upload.

    Returns:
        21-character URL-safe random string
    """
    return generate()


def _tag_logs(batch_id: str) -> None:
    for component in LOG_COMPONENTS:
        set_correlation_id(logging.getLogger(component), batch_id)


async def upload_file(
    path: Union[str, Path],
    config: Config,
    client: Optional[WebhookClient] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    batch_id: Optional[str] = None
) -> UploadSummary:
    """
    Partition a file and upload every chunk in order.

    A chunk that fails (network error, malformed rate-limit body, retry
    ceiling, unexpected status) is reported and skipped; later chunks are
    still sent. Failed chunks are not retried.

    Args:
        path: File to upload
        config: Configuration instance
        client: Optional WebhookClient for dependency injection (testing)
        out: Stream for progress lines (defaults to the current sys.stdout)
        err: Stream for per-chunk failure lines (defaults to the current sys.stderr)
        batch_id: Optional fixed batch id (generated when omitted)

    Returns:
        UploadSummary for the run

    Raises:
        OSError: If the file cannot be read; nothing is uploaded in that case
    """
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    chunks = partition(path, config.get_buffer_size())

    if batch_id is None:
        batch_id = generate_batch_id()
    _tag_logs(batch_id)
    summary = UploadSummary(batch_id=batch_id, total_chunks=len(chunks))

    if not chunks:
        out.write(f"Nothing to upload: {path} is empty\n")
        out.flush()
        return summary

    logger.info(f"Uploading {path} as {len(chunks)} chunk(s) [batch_id={batch_id}]")

    owns_client = client is None
    if owns_client:
        client = WebhookClient(config, out=out)

    try:
        for chunk in chunks:
            progress = f"{chunk.position}/{chunk.total}"
            try:
                result = await client.upload_chunk(chunk, batch_id)
            except ChunkUploadError as e:
                logger.error(f"Chunk {progress} failed: {e}")
                err.write(f"Failed buffer: {progress}: {e}\n")
                err.flush()
                summary.failed.append(chunk.index)
                continue

            if result.accepted:
                summary.uploaded.append(chunk.index)
                out.write(f"Uploaded buffer: {progress}\n")
                out.flush()
            else:
                summary.failed.append(chunk.index)
                err.write(f"Rejected buffer: {progress} (HTTP {result.status_code})\n")
                err.flush()
    finally:
        if owns_client:
            await client.close()

    if summary.failed:
        logger.warning(f"{summary.failed_count} of {summary.total_chunks} chunks failed: {summary.failed}")
    else:
        logger.info(f"All {summary.total_chunks} chunks uploaded")

    return summary
