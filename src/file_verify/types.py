# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# file-verify/src/file_verify/types.py

"""Type definitions for index verification and split comparison."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal


Scalar = str | bool | int | None

Outcome = Literal[
    "ok", "skipped", "stat_error", "size_mismatch", "hash_error", "hash_mismatch"
]


@dataclass(frozen=True)
class RunInfo:
    """One completed indexing pass, as recorded in the index header."""
    algorithm: str
    meta: Mapping[str, Scalar] = field(default_factory=dict)
    total_bytes: int = 0

    def __post_init__(self):
        # Snapshot the header so later edits to the source dict do not leak in
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    @property
    def root(self) -> str | None:
        return self._meta_str("root")

    @property
    def created_utc(self) -> str | None:
        return self._meta_str("createdUtc")

    @property
    def started_utc(self) -> str | None:
        return self._meta_str("startedUtc")

    @property
    def total(self) -> int | None:
        return self._meta_int("total")

    @property
    def ok_count(self) -> int | None:
        return self._meta_int("okCount")

    @property
    def error_count(self) -> int | None:
        return self._meta_int("errorCount")

    def _meta_str(self, key: str) -> str | None:
        value = self.meta.get(key)
        return None if value is None else str(value)

    def _meta_int(self, key: str) -> int | None:
        value = self.meta.get(key)
        if isinstance(value, bool) or value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class IndexedFileItem:
    """A single file as the indexer saw it."""
    ok: bool
    path: str
    length: int
    hash: str
    error: str | None = None


@dataclass(frozen=True)
class Mismatch:
    """A file whose digest no longer matches the recorded one."""
    path: str
    expected: str
    computed: str


@dataclass
class VerifyResult:
    """Mismatches collected by one verification pass."""
    mismatches: list[Mismatch] = field(default_factory=list)


@dataclass(frozen=True)
class ByteWindow:
    """Half-open byte range [start, start + length) of one split."""
    index: int
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class SplitComparisonResult:
    """Per-window digests of two or more files over their common prefix."""
    algorithm: str
    split_count: int
    paths: tuple[str, ...]
    sizes: tuple[int, ...]
    min_size: int
    max_size: int
    windows: tuple[ByteWindow, ...]
    split_hashes: tuple[tuple[str, ...], ...]
    differing_splits: tuple[int, ...]
    tail_bytes: tuple[int, ...]

    @property
    def identical(self) -> bool:
        return not self.differing_splits and self.min_size == self.max_size

    def as_dict(self) -> dict:
        """JSON-serializable form of the comparison."""
        return {
            'algorithm': self.algorithm,
            'split_count': self.split_count,
            'files': [
                {'path': p, 'size': s, 'tail_bytes': t}
                for p, s, t in zip(self.paths, self.sizes, self.tail_bytes)
            ],
            'min_size': self.min_size,
            'max_size': self.max_size,
            'identical': self.identical,
            'differing_splits': list(self.differing_splits),
            'splits': [
                {
                    'index': w.index,
                    'start': w.start,
                    'end': w.end,
                    'hashes': list(self.split_hashes[w.index]),
                }
                for w in self.windows
            ],
        }
