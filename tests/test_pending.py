"""Tests for the pending import registry."""

import asyncio
from datetime import timedelta

from ledgerline.domain.entities import ParseResult, PendingImport, TransactionSource
from ledgerline.domain.pending import PENDING_TTL, PendingImportRegistry


def make_entry(registry, upload_id="up-1"):
    now = registry.now()
    return PendingImport(
        upload_id=upload_id,
        user_id="u1",
        file_name="bank.csv",
        source=TransactionSource.CSV_IMPORT,
        raw_text="",
        parse_result=ParseResult(success=True),
        created_at=now,
        expires_at=registry.next_expiry(),
    )


def test_entry_expires_after_ttl(registry, clock):
    """Test that an entry is gone once its expiry passes."""
    registry.add(make_entry(registry))

    clock.advance(minutes=29, seconds=59)
    assert registry.get("up-1") is not None
    assert "up-1" in registry

    clock.advance(seconds=1)
    assert registry.get("up-1") is None
    assert "up-1" not in registry
    # Still stored until the sweep runs
    assert len(registry) == 1


def test_touch_extends_expiry(registry, clock):
    entry = make_entry(registry)
    registry.add(entry)

    clock.advance(minutes=20)
    registry.touch(entry)
    clock.advance(minutes=20)

    assert registry.get("up-1") is entry
    assert entry.expires_at == clock() + PENDING_TTL - timedelta(minutes=20)


def test_remove(registry):
    registry.add(make_entry(registry))

    assert registry.remove("up-1") is True
    assert registry.remove("up-1") is False
    assert len(registry) == 0


def test_sweep_removes_only_expired(registry, clock):
    registry.add(make_entry(registry, "old"))
    clock.advance(minutes=15)
    registry.add(make_entry(registry, "new"))
    clock.advance(minutes=20)

    assert registry.sweep_expired() == ["old"]
    assert list(registry.entries) == ["new"]


def test_sweep_skips_locked_entries(registry, clock):
    """An entry being worked on survives the sweep."""
    registry.add(make_entry(registry, "busy"))
    registry.add(make_entry(registry, "idle"))
    clock.advance(hours=1)

    async def sweep_while_locked():
        async with registry.lock("busy"):
            return registry.sweep_expired()

    assert asyncio.run(sweep_while_locked()) == ["idle"]
    assert "busy" in registry.entries
    assert registry.sweep_expired() == ["busy"]


def test_lock_is_per_upload(registry):
    assert registry.lock("a") is registry.lock("a")
    assert registry.lock("a") is not registry.lock("b")


def test_run_sweeper_stops_on_event(clock):
    registry = PendingImportRegistry(clock=clock, sweep_interval=timedelta(seconds=0.01))
    registry.add(make_entry(registry))
    clock.advance(hours=1)

    async def run():
        stop = asyncio.Event()
        task = asyncio.create_task(registry.run_sweeper(stop))
        await asyncio.sleep(0.05)
        stop.set()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(run())
    assert len(registry) == 0
