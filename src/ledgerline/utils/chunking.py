"""Chunked processing helpers.

The backing store caps how many items a single read or write may touch.
``BATCH_SIZE`` is the one place that cap is encoded; everything that fetches
or updates rows in bulk goes through the helpers below.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

BATCH_SIZE = 250


@dataclass(frozen=True)
class ChunkError:
    """Failure of one chunk during an isolated update."""

    chunk_index: int
    chunk_size: int
    error: str


@dataclass(frozen=True)
class ChunkUpdateResult:
    """Per-item tally of a chunked update."""

    success: int = 0
    failed: int = 0
    errors: list[ChunkError] = field(default_factory=list)


def chunk(items: Sequence[T], size: Any = BATCH_SIZE) -> list[list[T]]:
    """Split items into consecutive groups of at most ``size`` elements.

    Args:
        items: Ordered items to split
        size: Maximum group size. A non-positive or non-integer size is a
            caller error: it is logged and all items come back as one group.

    Returns:
        List of groups in original order; empty for empty input
    """
    items = list(items)
    if not items:
        return []

    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        logger.error("Invalid chunk size %r, processing %d items as one chunk", size, len(items))
        return [items]

    return [items[i : i + size] for i in range(0, len(items), size)]


async def map_chunked(
    items: Sequence[T],
    size: Any,
    op: Callable[[list[T]], Awaitable[Any]],
) -> list[Any]:
    """Apply ``op`` to each chunk sequentially and collect the results.

    List results are concatenated in order; any other non-None result is
    appended as a single element. The first failing chunk aborts the whole
    call and its exception propagates.
    """
    results: list[Any] = []
    for index, group in enumerate(chunk(items, size)):
        try:
            value = await op(group)
        except Exception:
            logger.error("Chunk %d (%d items) failed, aborting", index, len(group))
            raise
        if isinstance(value, list):
            results.extend(value)
        elif value is not None:
            results.append(value)
    return results


async def update_chunked(
    items: Sequence[T],
    size: Any,
    op: Callable[[list[T]], Awaitable[Any]],
) -> ChunkUpdateResult:
    """Apply ``op`` to each chunk sequentially, isolating failures per chunk.

    Never raises for a failing chunk: its item count is added to ``failed``
    and the failure is recorded with the chunk's index.
    """
    success = 0
    failed = 0
    errors: list[ChunkError] = []

    for index, group in enumerate(chunk(items, size)):
        try:
            await op(group)
        except Exception as e:
            logger.warning("Chunk %d (%d items) failed: %s", index, len(group), e)
            failed += len(group)
            errors.append(ChunkError(chunk_index=index, chunk_size=len(group), error=str(e)))
            continue
        success += len(group)

    return ChunkUpdateResult(success=success, failed=failed, errors=errors)
