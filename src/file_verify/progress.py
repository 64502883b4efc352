# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/progress.py

"""Byte-based progress bar for verification runs."""

import threading
import time

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from .stats import StatsSnapshot, VerificationStats


def describe(snap: StatsSnapshot, mb_per_sec: float) -> str:
    """One-line counter summary shown next to the bar."""
    return (
        f"hashing {snap.processed}/{snap.total} files | ok={snap.ok} "
        f"hash_mismatches={snap.hash_mismatches} err={snap.errors} "
        f"skip={snap.skipped} | {mb_per_sec:.1f} MB/s"
    )


class HashingProgress:
    """Progress sink for IndexVerifier; pass ``advance`` as on_progress.

    ``advance`` is called from worker threads. The description is rebuilt
    at most once per ``refresh_interval`` and never waits on another thread
    doing the same.
    """

    def __init__(self, stats: VerificationStats, total_bytes: int,
                 console: Console | None = None, refresh_interval: float = 1.0):
        self.stats = stats
        self.total_bytes = total_bytes
        self.refresh_interval = refresh_interval
        self.progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        self.task_id = None
        self._describe_lock = threading.Lock()
        self._last_at = time.monotonic()
        self._last_bytes = 0

    def __enter__(self) -> 'HashingProgress':
        self.progress.start()
        self.task_id = self.progress.add_task("hashing", total=self.total_bytes)
        return self

    def __exit__(self, *exc_info) -> None:
        self.refresh_description(force=True)
        self.progress.stop()

    def advance(self, n: int) -> None:
        if n <= 0 or self.task_id is None:
            return
        self.progress.advance(self.task_id, n)
        if time.monotonic() - self._last_at >= self.refresh_interval:
            self.refresh_description()

    def refresh_description(self, force: bool = False) -> None:
        if self.task_id is None:
            return
        if not self._describe_lock.acquire(blocking=force):
            return
        try:
            snap = self.stats.snapshot()
            now = time.monotonic()
            dt = now - self._last_at
            mbps = 0.0
            if dt > 0:
                mbps = (snap.bytes_hashed - self._last_bytes) / 1_000_000.0 / dt
            self._last_at = now
            self._last_bytes = snap.bytes_hashed
            self.progress.update(self.task_id, description=describe(snap, mbps))
        finally:
            self._describe_lock.release()
