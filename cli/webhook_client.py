"""Async HTTP client that delivers chunks to the webhook endpoint."""

import asyncio
import sys
from typing import Awaitable, Callable, Optional, TextIO

import httpx
from pydantic import ValidationError

from common.constants import (
    BASE_UPLOAD_TIMEOUT_SECONDS,
    BATCH_LABEL_PREFIX,
    CONTENT_FIELD_NAME,
    FILE_CONTENT_TYPE,
    FILE_FIELD_NAME,
    FILE_PART_NAME,
    RATE_LIMIT_STATUS,
    UPLOAD_TIMEOUT_PER_MIB_SECONDS,
)
from common.exceptions import (
    MalformedRateLimitBodyError,
    RateLimitExceededError,
    ResponseDecodeError,
    TransportError,
)
from common.logging_config import get_logger, mask_sensitive
from common.schemas import RateLimitSignal
from common.types import Chunk, UploadResult
from cli.config import Config

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class WebhookClient:
    """
    Uploads chunks as multipart form posts and honors 429 backoff.

    A rate-limited chunk is resent after exactly the server's retry_after
    delay, as many times as the server asks. With no max_retries or max_wait
    configured, a server that keeps answering 429 stalls the chunk forever.
    """

    def __init__(
        self,
        config: Config,
        session: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
        out: Optional[TextIO] = None
    ):
        """
        Initialize webhook client.

        Args:
            config: Configuration instance (endpoint and retry ceilings)
            session: Optional pre-built AsyncClient (tests pass a MockTransport)
            sleep: Coroutine used for rate-limit waits
            out: Stream for the human-readable rate-limit notice
        """
        self.config = config
        self.webhook_url = config.get_webhook_url()
        self.session = session if session is not None else httpx.AsyncClient()
        self.sleep = sleep
        self.out = out
        logger.info(f"Initialized WebhookClient [url={mask_sensitive(self.webhook_url)}]")

    async def __aenter__(self) -> "WebhookClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()

    def _calculate_upload_timeout(self, chunk_size: int) -> float:
        """
        Calculate timeout for one chunk upload.

        Args:
            chunk_size: Chunk size in bytes

        Returns:
            Configured timeout, or 30s base + 0.1s per MiB
        """
        configured = self.config.get_timeout()
        if configured is not None:
            return configured
        size_mb = chunk_size / (1024 * 1024)
        return BASE_UPLOAD_TIMEOUT_SECONDS + size_mb * UPLOAD_TIMEOUT_PER_MIB_SECONDS

    def _build_form(self, chunk: Chunk, batch_id: str) -> tuple[dict, dict]:
        """
        Build the multipart fields for one chunk.

        Args:
            chunk: Chunk whose bytes become the file part
            batch_id: Identifier placed in the content field

        Returns:
            Tuple of (files, data) for httpx
        """
        files = {FILE_FIELD_NAME: (FILE_PART_NAME, chunk.data, FILE_CONTENT_TYPE)}
        data = {CONTENT_FIELD_NAME: f"{BATCH_LABEL_PREFIX}{batch_id}"}
        return files, data

    async def _send(self, chunk: Chunk, batch_id: str) -> httpx.Response:
        """
        POST one chunk to the webhook.

        Args:
            chunk: Chunk to send
            batch_id: Identifier shared by every chunk of the file

        Returns:
            HTTP response object

        Raises:
            TransportError: On connection, DNS, TLS, timeout or other request failures
            ResponseDecodeError: If the response body cannot be decoded
        """
        files, data = self._build_form(chunk, batch_id)
        try:
            return await self.session.post(
                self.webhook_url,
                files=files,
                data=data,
                timeout=self._calculate_upload_timeout(chunk.size),
            )
        except httpx.DecodingError as e:
            logger.error(f"Undecodable response on chunk {chunk.index}: {e}")
            raise ResponseDecodeError(
                f"Cannot decode webhook response: {e}", chunk.index
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Network error on chunk {chunk.index}: {type(e).__name__}: {e}")
            raise TransportError(
                f"Cannot reach webhook: {type(e).__name__}: {e}", chunk.index
            ) from e

    def _parse_rate_limit(self, response: httpx.Response, chunk: Chunk) -> RateLimitSignal:
        """
        Decode a 429 body.

        Args:
            response: HTTP 429 response
            chunk: Chunk being uploaded (for error context)

        Returns:
            RateLimitSignal

        Raises:
            MalformedRateLimitBodyError: If the body is not a valid signal
        """
        try:
            return RateLimitSignal.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed rate-limit body on chunk {chunk.index}: {response.text[:200]!r}")
            raise MalformedRateLimitBodyError(
                f"Failed to parse rate-limit response: {e.error_count()} error(s)", chunk.index
            ) from e

    def _notify_wait(self, retry_after: int) -> None:
        """Print the rate-limit wait notice to the configured or current stdout."""
        out = self.out if self.out is not None else sys.stdout
        out.write(f"Ratelimited! Retrying in: {retry_after} seconds\n")
        out.flush()

    async def upload_chunk(self, chunk: Chunk, batch_id: str) -> UploadResult:
        """
        Upload one chunk, waiting out any rate limits.

        Args:
            chunk: Chunk to send
            batch_id: Identifier shared by every chunk of the file

        Returns:
            UploadResult; accepted is False for any non-2xx final status

        Raises:
            TransportError: On network failure (not retried)
            MalformedRateLimitBodyError: If a 429 body cannot be decoded
            RateLimitExceededError: If a configured retry ceiling is hit
        """
        retry_config = self.config.get_retry_config()
        max_retries = retry_config["max_retries"]
        max_wait = retry_config["max_wait"]

        attempts = 0
        while True:
            attempts += 1
            logger.debug(f"Sending chunk {chunk.index} ({chunk.size} bytes), attempt {attempts}")
            response = await self._send(chunk, batch_id)

            if response.status_code != RATE_LIMIT_STATUS:
                break

            signal = self._parse_rate_limit(response, chunk)
            if max_retries is not None and attempts > max_retries:
                raise RateLimitExceededError(
                    f"Still rate limited after {max_retries} retries", chunk.index
                )
            if max_wait is not None and signal.retry_after > max_wait:
                raise RateLimitExceededError(
                    f"Server asked to wait {signal.retry_after}s, above the {max_wait}s ceiling",
                    chunk.index,
                )

            logger.warning(
                f"Rate limited on chunk {chunk.index} (code={signal.code}, global={signal.is_global}): "
                f"{signal.message}; retrying in {signal.retry_after}s"
            )
            self._notify_wait(signal.retry_after)
            await self.sleep(signal.retry_after)

        accepted = response.is_success
        if accepted:
            logger.debug(f"Chunk {chunk.index} accepted: status={response.status_code} attempts={attempts}")
        else:
            logger.warning(
                f"Chunk {chunk.index} got unexpected status {response.status_code}: {response.text[:200]!r}"
            )

        return UploadResult(
            chunk_index=chunk.index,
            status_code=response.status_code,
            attempts=attempts,
            accepted=accepted,
        )
