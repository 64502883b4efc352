# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/splits.py

"""Locate differing byte ranges across copies of the same file."""

import logging
import os
from pathlib import Path
from typing import Final, Sequence

from .errors import ConfigError
from .hasher import hash_file, normalize_algorithm
from .types import ByteWindow, SplitComparisonResult


logger = logging.getLogger(__name__)

DEFAULT_SPLITS: Final = 8


def partition_windows(size: int, split_count: int) -> tuple[ByteWindow, ...]:
    """Tile [0, size) with exactly ``split_count`` contiguous windows.

    The first ``size % split_count`` windows are one byte longer than the
    rest, so the windows cover the range exactly for any divisibility.
    """
    if split_count <= 0:
        raise ConfigError("splits must be > 0")
    base, extra = divmod(size, split_count)

    windows = []
    offset = 0
    for index in range(split_count):
        length = base + 1 if index < extra else base
        windows.append(ByteWindow(index=index, start=offset, length=length))
        offset += length
    return tuple(windows)


def window_for_offset(windows: Sequence[ByteWindow], offset: int) -> int | None:
    """Index of the window containing byte ``offset``, if any."""
    for w in windows:
        if w.start <= offset < w.end:
            return w.index
    return None


def compare_splits(paths: Sequence[Path | str], split_count: int = DEFAULT_SPLITS,
                   algorithm: str = "SHA256") -> SplitComparisonResult:
    """Digest each window of the common prefix of ``paths`` and diff them.

    The first file is the reference: a window differs when any other file's
    digest for it differs from the first file's. Trailing bytes beyond the
    shortest file are reported in ``tail_bytes`` and never mark a window.

    Raises:
        ConfigError: Fewer than two paths, non-positive split count or
            blank/unsupported algorithm
        OSError: Any stat or read failure; no partial result is returned
    """
    if len(paths) < 2:
        raise ConfigError("need at least 2 files")
    if split_count <= 0:
        raise ConfigError("splits must be > 0")
    if not algorithm or not algorithm.strip():
        raise ConfigError("algorithm must be specified")
    normalize_algorithm(algorithm)

    names = tuple(str(p) for p in paths)
    sizes = tuple(os.stat(p).st_size for p in names)
    min_size = min(sizes)
    max_size = max(sizes)

    windows = partition_windows(min_size, split_count)
    logger.debug("comparing %d files over %d bytes in %d windows",
                 len(names), min_size, split_count)

    split_hashes = tuple(
        tuple(hash_file(p, algorithm, w.start, w.length) for p in names)
        for w in windows
    )

    differing = tuple(
        w.index for w in windows
        if any(h != split_hashes[w.index][0] for h in split_hashes[w.index][1:])
    )

    tail_bytes = tuple(size - min_size for size in sizes)

    return SplitComparisonResult(
        algorithm=algorithm,
        split_count=split_count,
        paths=names,
        sizes=sizes,
        min_size=min_size,
        max_size=max_size,
        windows=windows,
        split_hashes=split_hashes,
        differing_splits=differing,
        tail_bytes=tail_bytes,
    )
