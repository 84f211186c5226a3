"""Tests for chunked processing helpers."""

import asyncio

import pytest

from ledgerline.utils.chunking import BATCH_SIZE, chunk, map_chunked, update_chunked


@pytest.mark.parametrize("size", [1, 3, 4, 7, 10, 11])
def test_chunk_concatenation_reproduces_input(size):
    items = list(range(10))
    groups = chunk(items, size)

    assert [item for group in groups for item in group] == items
    assert all(len(group) == size for group in groups[:-1])
    assert 0 < len(groups[-1]) <= size


def test_chunk_empty_input():
    assert chunk([], 5) == []


@pytest.mark.parametrize("size", [0, -3, 2.5, "10", None, True])
def test_chunk_invalid_size_returns_single_group(size, caplog):
    items = ["a", "b", "c"]

    assert chunk(items, size) == [items]
    assert "Invalid chunk size" in caplog.text


def test_thousand_ids_split_into_four_batches():
    ids = [f"tx-{i}" for i in range(1000)]
    seen = []

    async def op(group):
        seen.append(group)
        return group

    result = asyncio.run(map_chunked(ids, BATCH_SIZE, op))

    assert len(seen) == 4
    assert seen[0][0] == "tx-0"
    assert seen[3][-1] == "tx-999"
    assert result == ids
    flattened = [i for group in seen for i in group]
    assert sorted(flattened) == sorted(ids)
    assert len(set(flattened)) == 1000


def test_map_chunked_runs_chunks_in_order():
    events = []

    async def op(group):
        events.append(("start", group[0]))
        await asyncio.sleep(0)
        events.append(("end", group[0]))
        return None

    asyncio.run(map_chunked(list(range(6)), 2, op))

    assert events == [
        ("start", 0),
        ("end", 0),
        ("start", 2),
        ("end", 2),
        ("start", 4),
        ("end", 4),
    ]


def test_map_chunked_appends_scalar_results():
    async def op(group):
        return sum(group)

    assert asyncio.run(map_chunked([1, 2, 3, 4, 5], 2, op)) == [3, 7, 5]


def test_map_chunked_failure_aborts():
    started = []

    async def op(group):
        started.append(group[0])
        if group[0] == 2:
            raise RuntimeError("store down")
        return group

    with pytest.raises(RuntimeError, match="store down"):
        asyncio.run(map_chunked(list(range(6)), 2, op))

    assert started == [0, 2]


def test_update_chunked_isolates_failures():
    size = 4
    items = list(range(5 * size))

    async def op(group):
        if group[0] // size in {1, 3}:
            raise RuntimeError(f"chunk starting {group[0]} failed")

    result = asyncio.run(update_chunked(items, size, op))

    assert result.failed == 2 * size
    assert result.success == 3 * size
    assert [e.chunk_index for e in result.errors] == [1, 3]
    assert all(e.chunk_size == size for e in result.errors)
    assert "chunk starting 4 failed" in result.errors[0].error


def test_update_chunked_short_last_chunk_failure():
    async def op(group):
        if len(group) < 4:
            raise RuntimeError("boom")

    result = asyncio.run(update_chunked(list(range(10)), 4, op))

    assert result.success == 8
    assert result.failed == 2
    assert result.errors[0].chunk_index == 2
    assert result.errors[0].chunk_size == 2


def test_update_chunked_empty_input():
    async def op(group):
        raise AssertionError("not called")

    result = asyncio.run(update_chunked([], 10, op))

    assert result.success == 0
    assert result.failed == 0
    assert result.errors == []
