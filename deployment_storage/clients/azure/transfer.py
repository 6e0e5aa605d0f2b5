"""
Bounded-parallel chunked blob download.

A blob is split into fixed-size ranges which a pool of workers fetches
concurrently into one pre-sized buffer. Each range maps to a disjoint slice of
the buffer, so workers never share bytes. The whole transfer runs under a
deadline; when it expires every outstanding worker is cancelled and
:class:`DownloadTimeoutError` is raised.
"""

import asyncio
from datetime import timedelta
from typing import Iterator, List, Optional, Tuple

from azure.core.exceptions import IncompleteReadError
from azure.storage.blob.aio import BlobClient
from pydantic import BaseModel, Field

from deployment_storage.common.error_codes import DownloadTimeoutError
from deployment_storage.constants import (
    DOWNLOAD_BLOCK_SIZE,
    DOWNLOAD_PARALLELISM,
    DOWNLOAD_TIMEOUT,
)
from deployment_storage.observability.logger_adaptor import get_logger

logger = get_logger(__name__)


class TransferSettings(BaseModel):
    """Tuning for chunked downloads.

    Attributes:
        block_size: Bytes requested per range.
        parallelism: Maximum number of ranges in flight.
        timeout: Deadline for the whole transfer.
    """

    block_size: int = Field(default=DOWNLOAD_BLOCK_SIZE, gt=0)
    parallelism: int = Field(default=DOWNLOAD_PARALLELISM, gt=0)
    timeout: timedelta = DOWNLOAD_TIMEOUT


def iter_ranges(offset: int, count: int, block_size: int) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, length)`` pairs covering ``count`` bytes from ``offset``."""
    end = offset + count
    for start in range(offset, end, block_size):
        yield start, min(block_size, end - start)


async def download_blob_to_buffer(
    blob: BlobClient,
    buffer: bytearray,
    offset: int = 0,
    count: Optional[int] = None,
    block_size: int = DOWNLOAD_BLOCK_SIZE,
    parallelism: int = DOWNLOAD_PARALLELISM,
) -> bytearray:
    """
    Download ``count`` bytes of ``blob`` starting at ``offset`` into ``buffer``.

    Args:
        blob: Handle of the blob to read.
        buffer: Destination; byte ``i`` of the range lands at ``buffer[i]``.
        offset: First byte of the blob to read.
        count: Number of bytes to read. Defaults to ``len(buffer)``.
        block_size: Bytes per range request.
        parallelism: Number of concurrent range requests.

    Returns:
        bytearray: ``buffer``, filled.

    Raises:
        ValueError: If ``count`` does not fit in ``buffer``.
        IncompleteReadError: If the store returns fewer bytes than requested.
    """
    if count is None:
        count = len(buffer)
    if count > len(buffer):
        raise ValueError(
            f"Buffer of {len(buffer)} bytes cannot hold {count} bytes of blob data"
        )
    if count == 0:
        return buffer

    ranges = iter_ranges(offset, count, block_size)
    workers: List[asyncio.Task] = []

    with memoryview(buffer) as view:

        async def _worker() -> None:
            # All workers drain one shared iterator; next() never suspends.
            for start, length in ranges:
                downloader = await blob.download_blob(offset=start, length=length)
                data = await downloader.readall()
                if len(data) != length:
                    raise IncompleteReadError(
                        message=f"Expected {length} bytes at offset {start}, "
                        f"received {len(data)}"
                    )
                position = start - offset
                view[position : position + length] = data
                logger.debug(f"Fetched bytes {start}-{start + length - 1}")

        block_count = -(-count // block_size)
        for _ in range(min(parallelism, block_count)):
            workers.append(asyncio.ensure_future(_worker()))

        try:
            await asyncio.gather(*workers)
        except BaseException:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

    return buffer


async def download_with_timeout(
    blob: BlobClient,
    buffer: bytearray,
    settings: TransferSettings,
) -> bytearray:
    """Run :func:`download_blob_to_buffer` under ``settings.timeout``.

    Raises:
        DownloadTimeoutError: If the deadline passes before every range arrives.
    """
    task = asyncio.ensure_future(
        download_blob_to_buffer(
            blob,
            buffer,
            block_size=settings.block_size,
            parallelism=settings.parallelism,
        )
    )
    try:
        done, _ = await asyncio.wait(
            {task}, timeout=settings.timeout.total_seconds()
        )
    except BaseException:
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise

    if task not in done:
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        logger.error(f"Download of {blob.blob_name} exceeded {settings.timeout}")
        raise DownloadTimeoutError(
            f"Download of '{blob.blob_name}' did not finish within {settings.timeout}"
        )

    return task.result()
