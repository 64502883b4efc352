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
# file-verify/src/file_verify/parser.py

"""Hash index parser."""

import logging
from pathlib import Path

from .clixml import INTEGER, CliObject, CliXmlDocument
from .errors import IndexParseError
from .types import IndexedFileItem, RunInfo, Scalar


logger = logging.getLogger(__name__)

ITEMS_MEMBER = "items"

_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})


def _to_bool(key: str, value: Scalar) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
    elif isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
    raise IndexParseError(f"{key!r}: expected a boolean, got {value!r}")


def _to_int(key: str, value: Scalar) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and INTEGER.fullmatch(value.strip()):
        return int(value.strip())
    raise IndexParseError(f"{key!r}: expected an integer, got {value!r}")


def _to_str(key: str, value: Scalar) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise IndexParseError(f"{key!r}: expected a string, got {value!r}")


def _to_optional_str(key: str, value: Scalar) -> str | None:
    if value is None:
        return None
    return _to_str(key, value)


def decode_item(record: CliObject, position: int) -> IndexedFileItem:
    """Build an IndexedFileItem from one dictionary record of ``items``."""
    fields = {"ok": False, "path": "", "length": 0, "hash": "", "error": None}

    for key_value, value_value in record.entries or []:
        key = key_value.value
        value = value_value.value
        try:
            if key == "ok":
                fields["ok"] = _to_bool(key, value)
            elif key == "path":
                fields["path"] = _to_str(key, value)
            elif key == "length":
                fields["length"] = _to_int(key, value)
            elif key == "hash":
                fields["hash"] = _to_str(key, value)
            elif key == "error":
                fields["error"] = _to_optional_str(key, value)
            # Anything else was added by a newer indexer; ignore it
        except IndexParseError as e:
            raise IndexParseError(f"items[{position}]: {e}") from e

    return IndexedFileItem(**fields)


def parse_index(data: bytes) -> tuple[RunInfo, list[IndexedFileItem]]:
    """Parse a CLIXML hash index into its run summary and file records.

    Raises:
        IndexParseError: If the document is malformed, has no top-level
            object, or any record holds a value of the wrong type
    """
    root = CliXmlDocument(data).first()

    meta: dict[str, Scalar] = {
        name: typed.value for name, typed in root.properties.items()
    }
    algorithm = _to_str("algorithm", meta.get("algorithm"))

    items_obj = root.members.get(ITEMS_MEMBER)
    if items_obj is None or items_obj.items is None:
        logger.debug("index has no %r list; treating as empty", ITEMS_MEMBER)
        return RunInfo(algorithm=algorithm, meta=meta, total_bytes=0), []

    items = []
    for position, record in enumerate(items_obj.items):
        if record.entries is None:
            # Not a dictionary record
            continue
        items.append(decode_item(record, position))

    total_bytes = sum(fi.length for fi in items if fi.error is None)
    logger.debug("parsed %d items (%d bytes to hash), algorithm=%s",
                 len(items), total_bytes, algorithm)

    return RunInfo(algorithm=algorithm, meta=meta, total_bytes=total_bytes), items


class IndexParser:
    """Load a hash index written by the indexing script."""

    def __init__(self, index_path: Path | str):
        self.index_path = Path(index_path)

        if not self.index_path.exists():
            raise ValueError(f"Index does not exist: {index_path}")

    def parse(self) -> tuple[RunInfo, list[IndexedFileItem]]:
        return parse_index(self.index_path.read_bytes())


def load_index(index_path: Path | str) -> tuple[RunInfo, list[IndexedFileItem]]:
    """Read and parse the index at ``index_path``."""
    return IndexParser(index_path).parse()
