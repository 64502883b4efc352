# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/validator.py

"""Re-validate indexed files against the live filesystem."""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Final, Iterable

from .hasher import ProgressFn, hash_file, normalize_algorithm
from .stats import VerificationStats
from .types import IndexedFileItem, Mismatch, Outcome, VerifyResult


logger = logging.getLogger(__name__)

DEFAULT_WORKERS: Final = 2

ResultFn = Callable[[IndexedFileItem, Outcome], None]


class IndexVerifier:
    """Check every indexed file for existence, size and digest.

    Items are pulled from a shared queue by a fixed pool of worker threads.
    Per-file failures are counted in the stats object, never raised.
    """

    def __init__(self, algorithm: str, workers: int = DEFAULT_WORKERS,
                 on_progress: ProgressFn | None = None,
                 on_result: ResultFn | None = None):
        # Unsupported algorithm is a configuration error, not a per-item one
        self.algorithm = normalize_algorithm(algorithm)
        self.workers = max(1, workers)
        self.on_progress = on_progress
        self.on_result = on_result
        self._mismatch_lock = threading.Lock()

    def _advance(self, n: int) -> None:
        if n > 0 and self.on_progress is not None:
            self.on_progress(n)

    def check_item(self, item: IndexedFileItem, stats: VerificationStats,
                   result: VerifyResult) -> Outcome:
        """Classify one item; first matching rule wins."""
        if item.error is not None:
            self._advance(item.length)
            return "skipped"

        try:
            size = os.stat(item.path).st_size
        except (OSError, ValueError) as e:
            # ValueError: NUL bytes or unencodable surrogates in the path
            logger.debug("stat failed for %s: %s", item.path, e)
            self._advance(item.length)
            return "stat_error"

        if size != item.length:
            logger.debug("size mismatch for %s: recorded %d, found %d",
                         item.path, item.length, size)
            self._advance(item.length)
            return "size_mismatch"

        stats.add_bytes_stat_ok(size)

        sent = 0

        def on_hashed(n: int) -> None:
            nonlocal sent
            stats.add_bytes_hashed(n)
            sent += n
            self._advance(n)

        try:
            computed = hash_file(item.path, self.algorithm, on_progress=on_hashed)
        except (OSError, ValueError) as e:
            logger.debug("hashing failed for %s after %d bytes: %s",
                         item.path, sent, e)
            self._advance(item.length - sent)
            return "hash_error"

        self._advance(item.length - sent)

        if computed.casefold() != item.hash.strip().casefold():
            with self._mismatch_lock:
                result.mismatches.append(Mismatch(
                    path=item.path, expected=item.hash, computed=computed))
            return "hash_mismatch"

        return "ok"

    def _work(self, item: IndexedFileItem, stats: VerificationStats,
              result: VerifyResult) -> None:
        outcome = self.check_item(item, stats, result)
        stats.record(outcome)
        if self.on_result is not None:
            self.on_result(item, outcome)

    def run(self, items: Iterable[IndexedFileItem],
            stats: VerificationStats) -> VerifyResult:
        """Verify all items, blocking until every one has been processed."""
        result = VerifyResult()
        with ThreadPoolExecutor(max_workers=self.workers,
                                thread_name_prefix="verify") as executor:
            futures = [executor.submit(self._work, item, stats, result)
                       for item in items]
            for future in futures:
                # Re-raise anything a callback threw
                future.result()
        return result


def verify_items(algorithm: str, items: Iterable[IndexedFileItem],
                 stats: VerificationStats, workers: int = DEFAULT_WORKERS,
                 on_progress: ProgressFn | None = None,
                 on_result: ResultFn | None = None) -> VerifyResult:
    """Verify ``items`` with ``algorithm``, updating ``stats`` in place."""
    verifier = IndexVerifier(algorithm, workers, on_progress, on_result)
    return verifier.run(items, stats)


def write_mismatch_report(report_path: Path | str,
                          mismatches: Iterable[Mismatch]) -> int:
    """Write one mismatched path per line; return how many were written."""
    count = 0
    with open(report_path, 'w', encoding='utf-8') as f:
        for m in mismatches:
            f.write(f"{m.path}\n")
            count += 1
    return count
