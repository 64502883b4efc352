# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/stats.py

"""Thread-safe counters for a verification run."""

import threading
import time
from dataclasses import dataclass

from .types import Outcome


# Outcome -> counter attribute
TERMINAL_COUNTERS = {
    "ok": "ok",
    "skipped": "skipped",
    "stat_error": "stat_errors",
    "size_mismatch": "size_mismatches",
    "hash_error": "hash_errors",
    "hash_mismatch": "hash_mismatches",
}


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of VerificationStats."""
    duration_ms: int
    total: int
    total_bytes: int
    processed: int
    ok: int
    skipped: int
    stat_errors: int
    size_mismatches: int
    hash_errors: int
    hash_mismatches: int
    bytes_hashed: int
    bytes_stat_ok: int

    @property
    def errors(self) -> int:
        return self.stat_errors + self.hash_errors

    @property
    def throughput_bytes_per_sec(self) -> float | None:
        if self.duration_ms <= 0:
            return None
        return self.bytes_hashed / (self.duration_ms / 1000.0)


class VerificationStats:
    """Counters shared by every verification worker.

    A terminal counter and ``processed`` are always bumped under the same
    lock, so any snapshot satisfies processed == sum(terminal counters).
    """

    def __init__(self, total: int = 0, total_bytes: int = 0):
        self._lock = threading.Lock()
        self.total = total
        self.total_bytes = total_bytes
        self.processed = 0
        self.ok = 0
        self.skipped = 0
        self.stat_errors = 0
        self.size_mismatches = 0
        self.hash_errors = 0
        self.hash_mismatches = 0
        self.bytes_hashed = 0
        self.bytes_stat_ok = 0
        self.started_at: float | None = None
        self.stopped_at: float | None = None

    def start(self) -> None:
        self.started_at = time.monotonic()
        self.stopped_at = None

    def stop(self) -> None:
        self.stopped_at = time.monotonic()

    @property
    def duration(self) -> float:
        """Seconds since start(), frozen once stop() is called."""
        if self.started_at is None:
            return 0.0
        end = self.stopped_at if self.stopped_at is not None else time.monotonic()
        return end - self.started_at

    def record(self, outcome: Outcome) -> None:
        """Count one finished item under its terminal outcome."""
        attr = TERMINAL_COUNTERS[outcome]
        with self._lock:
            setattr(self, attr, getattr(self, attr) + 1)
            self.processed += 1

    def add_bytes_hashed(self, n: int) -> None:
        with self._lock:
            self.bytes_hashed += n

    def add_bytes_stat_ok(self, n: int) -> None:
        with self._lock:
            self.bytes_stat_ok += n

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                duration_ms=int(self.duration * 1000),
                total=self.total,
                total_bytes=self.total_bytes,
                processed=self.processed,
                ok=self.ok,
                skipped=self.skipped,
                stat_errors=self.stat_errors,
                size_mismatches=self.size_mismatches,
                hash_errors=self.hash_errors,
                hash_mismatches=self.hash_mismatches,
                bytes_hashed=self.bytes_hashed,
                bytes_stat_ok=self.bytes_stat_ok,
            )
