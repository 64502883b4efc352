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
# file-verify/src/file_verify/__init__.py

"""Hash index verification and split-based file comparison."""

from .errors import (
    ConfigError,
    FileVerifyError,
    IndexParseError,
    UnexpectedEOFError,
    UnsupportedAlgorithmError,
)
from .hasher import hash_file
from .parser import IndexParser, load_index, parse_index
from .splits import compare_splits, partition_windows
from .stats import StatsSnapshot, VerificationStats
from .types import (
    ByteWindow,
    IndexedFileItem,
    Mismatch,
    RunInfo,
    SplitComparisonResult,
    VerifyResult,
)
from .validator import IndexVerifier, verify_items, write_mismatch_report

__version__ = "0.1.0"

__all__ = [
    "hash_file",
    "IndexParser",
    "load_index",
    "parse_index",
    "IndexVerifier",
    "verify_items",
    "write_mismatch_report",
    "compare_splits",
    "partition_windows",
    "VerificationStats",
    "StatsSnapshot",
    "RunInfo",
    "IndexedFileItem",
    "Mismatch",
    "VerifyResult",
    "ByteWindow",
    "SplitComparisonResult",
    "FileVerifyError",
    "ConfigError",
    "UnsupportedAlgorithmError",
    "IndexParseError",
    "UnexpectedEOFError",
]
