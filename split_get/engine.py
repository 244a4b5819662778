# split_get/engine.py
"""
Core download engine: size discovery, chunk planning, bounded fan-out,
and in-order reassembly.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional

from split_get.client import HttpClient, split_url
from split_get.config import DownloadConfig
from split_get.errors import (ChunkFailure, DiscoveryError, HttpStatusError,
                              IncompleteDownloadError, InvalidPlanError,
                              RangeIgnoredError, SplitGetError, TransferError)
from split_get.models import ChunkInfo, DownloadResult, ServerCapabilities
from split_get.planner import default_chunk_size, plan
from split_get.request import HttpMethod

logger = logging.getLogger(__name__)

# Statuses meaning the server does not implement HEAD
HEAD_UNSUPPORTED = (405, 501)


def assemble(bodies: Dict[int, bytes], chunks: List[ChunkInfo], total_size: int) -> bytes:
    """Concatenate chunk bodies by chunk index, whatever order they arrived in."""
    payload = b"".join(bodies[chunk.index] for chunk in sorted(chunks, key=lambda c: c.index))
    if len(payload) != total_size:
        raise IncompleteDownloadError(total_size, len(payload))
    return payload


class DownloadEngine:
    """Manages the entire download process for a single resource."""

    def __init__(self, url: str, num_workers: Optional[int] = None,
                 max_chunk_size: Optional[int] = None,
                 config: Optional[DownloadConfig] = None,
                 client: Optional[HttpClient] = None):
        self.config = config or DownloadConfig()
        self.url = url
        self.host, self.path = split_url(url)
        self.num_workers = num_workers if num_workers is not None else self.config.num_workers
        if self.num_workers <= 0:
            raise InvalidPlanError(f"worker_count must be positive, got {self.num_workers}")
        self.max_chunk_size = max_chunk_size if max_chunk_size is not None else self.config.max_chunk_size
        self.client = client or HttpClient(self.config)

        self.total_size: Optional[int] = None
        self.downloaded_size = 0
        self.chunks: List[ChunkInfo] = []
        self.capabilities: Optional[ServerCapabilities] = None

        # Callbacks for progress reporting; they never affect control flow
        self.progress_callback: Optional[Callable[[int, Optional[int]], None]] = None
        self.status_callback: Optional[Callable[[str], None]] = None
        self.chunk_callback: Optional[Callable[[str, ChunkInfo], None]] = None

    async def detect_capabilities(self) -> ServerCapabilities:
        """Send a HEAD query to learn the resource size."""
        self._update_status(f"Discovering size of {self.url}...")
        try:
            response = await self.client.query(self.host, self.path, port=self.config.port,
                                               method=HttpMethod.HEAD)
        except SplitGetError as e:
            raise DiscoveryError(f"Size discovery for {self.url} failed: {e}") from e

        status = response.status
        if status in HEAD_UNSUPPORTED:
            self._update_status(f"Server rejected HEAD with status {status}. Using single request.")
            self.capabilities = ServerCapabilities(status=status, supports_range=False)
            return self.capabilities
        if status is not None and not 200 <= status < 300:
            raise DiscoveryError(f"Size discovery for {self.url} returned HTTP status {status}")

        accept_ranges = response.headers.get("accept-ranges")
        self.capabilities = ServerCapabilities(
            status=status,
            content_length=response.content_length,
            supports_range=accept_ranges is None or accept_ranges.lower() != "none",
            accept_ranges=accept_ranges,
        )
        self.total_size = self.capabilities.content_length
        if self.total_size is None:
            self._update_status("No Content-Length in discovery response. Using single request.")
        else:
            self._update_status(f"Server supports range: {self.capabilities.supports_range}. "
                                f"Total size: {self.total_size} bytes")
        return self.capabilities

    def prepare_chunks(self) -> List[ChunkInfo]:
        """Plan byte ranges for the discovered size."""
        chunk_size = self.max_chunk_size
        if chunk_size is None:
            chunk_size = default_chunk_size(self.total_size, self.num_workers)
        self.chunks = plan(self.total_size, chunk_size, self.num_workers)
        logger.debug("Planned %d chunk(s) of up to %d bytes for %d worker(s)",
                     len(self.chunks), chunk_size, self.num_workers)
        return self.chunks

    async def download(self) -> bytes:
        """Download the resource and return the complete payload."""
        result = await self.run()
        return result.payload

    async def run(self) -> DownloadResult:
        """Main download orchestration method."""
        begin = time.monotonic()
        capabilities = await self.detect_capabilities()

        if capabilities.content_length is None or not capabilities.supports_range:
            payload = await self.fetch_single()
            ranged = False
        elif capabilities.content_length == 0:
            payload = b""
            ranged = False
        else:
            self.prepare_chunks()
            payload = await self.fetch_chunks()
            ranged = bool(self.chunks)

        elapsed = time.monotonic() - begin
        self._update_status(f"Download completed: {len(payload)} bytes in {elapsed:.2f}s")
        return DownloadResult(payload=payload, total_size=self.total_size,
                              chunks=self.chunks, ranged=ranged, elapsed=elapsed)

    async def fetch_single(self) -> bytes:
        """Fetch the whole resource with one unranged GET."""
        response = await self.client.query_url(self.url, port=self.config.port)
        status = response.status
        if status is not None and not 200 <= status < 300:
            raise HttpStatusError(status, f"GET {self.url}")

        body = response.body
        expected = response.content_length if response.content_length is not None else self.total_size
        if expected is not None and len(body) != expected:
            raise IncompleteDownloadError(expected, len(body))
        self.downloaded_size = len(body)
        self._report_progress()
        return body

    async def fetch_chunks(self) -> bytes:
        """Run the worker pool over the planned chunks and reassemble them."""
        work: asyncio.Queue = asyncio.Queue()
        for chunk in self.chunks:
            work.put_nowait(chunk)
        results: asyncio.Queue = asyncio.Queue()

        worker_count = min(self.num_workers, len(self.chunks))
        workers = [asyncio.create_task(self.download_worker(i, work, results))
                   for i in range(worker_count)]

        bodies: Dict[int, bytes] = {}
        try:
            while len(bodies) < len(self.chunks):
                index, body, error = await results.get()
                if error is not None:
                    raise error
                bodies[index] = body
        except RangeIgnoredError as e:
            self._update_status("Server ignored Range header; using its full response.")
            self.chunks = []
            self.downloaded_size = len(e.body)
            self._report_progress()
            return e.body
        finally:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        return assemble(bodies, self.chunks, self.total_size)

    async def download_worker(self, worker_id: int, work: asyncio.Queue, results: asyncio.Queue):
        """A worker that downloads chunks until the work queue is empty."""
        while True:
            try:
                chunk = work.get_nowait()
            except asyncio.QueueEmpty:
                return

            chunk.worker_id = worker_id
            try:
                body = await self.download_chunk_with_retry(chunk, worker_id)
            except Exception as e:
                await results.put((chunk.index, None, e))
                return
            await results.put((chunk.index, body, None))

    async def download_chunk_with_retry(self, chunk: ChunkInfo, worker_id: int) -> bytes:
        """Download a single chunk with exponential backoff retry."""
        max_retries = self.config.max_retries
        last_error: Optional[SplitGetError] = None
        self._notify_chunk("started", chunk)

        for attempt in range(max_retries):
            try:
                body = await self.fetch_chunk(chunk)
            except RangeIgnoredError as e:
                if len(e.body) == self.total_size:
                    raise
                self._notify_chunk("failed", chunk)
                raise ChunkFailure(chunk.index, chunk.start, chunk.end, attempt + 1,
                                   f"server ignored Range and sent {len(e.body)} bytes") from e
            except SplitGetError as e:
                chunk.retries += 1
                last_error = e
                if attempt + 1 < max_retries:
                    wait_time = min(self.config.retry_backoff * 2 ** attempt, self.config.max_backoff)
                    self._update_status(f"Worker {worker_id}: chunk {chunk.index} "
                                        f"(Retry {attempt + 1}/{max_retries}): {type(e).__name__}. "
                                        f"Retrying in {wait_time:.1f}s.")
                    self._notify_chunk("retry", chunk)
                    await asyncio.sleep(wait_time)
                continue

            chunk.completed = True
            self.downloaded_size += len(body)
            self._report_progress()
            self._notify_chunk("completed", chunk)
            return body

        self._notify_chunk("failed", chunk)
        raise ChunkFailure(chunk.index, chunk.start, chunk.end, max_retries, str(last_error)) from last_error

    async def fetch_chunk(self, chunk: ChunkInfo) -> bytes:
        """One ranged GET for chunk, validated against the requested range."""
        response = await self.client.query(self.host, self.path, chunk.range, port=self.config.port)
        status = response.status
        body = response.body

        if status == 200:
            raise RangeIgnoredError(body)
        if status is not None and status != 206:
            raise HttpStatusError(status, f"chunk {chunk.index} (bytes {chunk.range})")

        content_range = response.content_range
        if content_range is not None and content_range[:2] != (chunk.start, chunk.end):
            raise TransferError(f"Chunk {chunk.index}: asked for bytes {chunk.range}, "
                                f"got {content_range[0]}-{content_range[1]}")
        if len(body) != chunk.length:
            raise TransferError(f"Chunk {chunk.index}: expected {chunk.length} bytes, got {len(body)}")
        return body

    def _report_progress(self):
        if self.progress_callback:
            self.progress_callback(self.downloaded_size, self.total_size)

    def _notify_chunk(self, event: str, chunk: ChunkInfo):
        logger.debug("Chunk %d (bytes %s) %s", chunk.index, chunk.range, event)
        if self.chunk_callback:
            self.chunk_callback(event, chunk)

    def _update_status(self, message: str):
        """Log a status line and pass it on to the status callback."""
        logger.info(message)
        if self.status_callback:
            self.status_callback(message)


async def download(url: str, worker_count: Optional[int] = None, max_chunk_size: Optional[int] = None,
                   config: Optional[DownloadConfig] = None) -> bytes:
    """Download url (``host/path``) and return the reassembled payload."""
    engine = DownloadEngine(url, num_workers=worker_count, max_chunk_size=max_chunk_size, config=config)
    return await engine.download()
