"""Registry of uploads waiting to be confirmed or cancelled."""

import asyncio
import logging
from datetime import datetime, timedelta, UTC
from typing import Callable, Optional

from ledgerline.domain.entities import PendingImport

logger = logging.getLogger(__name__)

PENDING_TTL = timedelta(minutes=30)
SWEEP_INTERVAL = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(UTC)


class PendingImportRegistry:
    """Keyed collection of pending imports with expiry.

    Entries and the clock are injected so tests can control both. Every
    mutation of one upload should happen while holding ``lock(upload_id)``;
    the sweep leaves locked entries alone.
    """

    def __init__(
        self,
        entries: Optional[dict[str, PendingImport]] = None,
        clock: Callable[[], datetime] = utc_now,
        ttl: timedelta = PENDING_TTL,
        sweep_interval: timedelta = SWEEP_INTERVAL,
    ):
        self.entries = {} if entries is None else entries
        self.clock = clock
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, upload_id: str) -> bool:
        return self.get(upload_id) is not None

    def now(self) -> datetime:
        return self.clock()

    def next_expiry(self) -> datetime:
        """Expiry time for an entry created or touched now."""
        return self.now() + self.ttl

    def lock(self, upload_id: str) -> asyncio.Lock:
        """Return the lock guarding one upload id."""
        lock = self._locks.get(upload_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[upload_id] = lock
        return lock

    def add(self, entry: PendingImport) -> None:
        self.entries[entry.upload_id] = entry
        logger.info(
            "Pending import %s added for user %s (%s)", entry.upload_id, entry.user_id, entry.file_name
        )

    def get(self, upload_id: str) -> Optional[PendingImport]:
        """Return a live entry, or None when absent or past its expiry."""
        entry = self.entries.get(upload_id)
        if entry is None:
            return None
        if entry.expires_at <= self.now():
            return None
        return entry

    def touch(self, entry: PendingImport) -> None:
        """Push an entry's expiry out by one TTL."""
        entry.expires_at = self.next_expiry()

    def remove(self, upload_id: str) -> bool:
        """Drop an entry. Returns False if it was not there."""
        self._locks.pop(upload_id, None)
        return self.entries.pop(upload_id, None) is not None

    def sweep_expired(self) -> list[str]:
        """Remove expired entries that nobody is working on.

        Returns:
            Upload ids that were removed
        """
        now = self.now()
        removed = []
        for upload_id, entry in list(self.entries.items()):
            if entry.expires_at > now:
                continue
            lock = self._locks.get(upload_id)
            if lock is not None and lock.locked():
                continue
            self.remove(upload_id)
            removed.append(upload_id)
        if removed:
            logger.info("Expired %d pending import(s)", len(removed))
        return removed

    async def run_sweeper(self, stop: Optional[asyncio.Event] = None) -> None:
        """Sweep every ``sweep_interval`` until ``stop`` is set or the task is cancelled."""
        interval = self.sweep_interval.total_seconds()
        while stop is None or not stop.is_set():
            self.sweep_expired()
            if stop is None:
                await asyncio.sleep(interval)
                continue
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except TimeoutError:
                pass
