# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/fixtures/index_fixture.py
"""Helpers for writing CLIXML hash indexes and data files in tests.

The documents mirror what Export-Clixml produces for the indexing script:
a PSCustomObject whose ``items`` member is an array of OrderedDictionary
records.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path
from xml.sax.saxutils import escape

NAMESPACE = "http://schemas.microsoft.com/powershell/2004/04"


@dataclass
class IndexEntry:
    """One record to put under ``items``."""

    ok: bool
    path: str
    length: int
    hash: str
    error: str | None = None


def hex_digest(algorithm: str, data: bytes) -> str:
    """Uppercase reference digest computed with hashlib directly."""
    name = algorithm.replace("-", "").lower()
    return hashlib.new(name, data).hexdigest().upper()


def _value(value) -> str:
    if value is None:
        return '<Nil N="Value" />'
    if isinstance(value, bool):
        return f'<B N="Value">{"true" if value else "false"}</B>'
    if isinstance(value, int):
        return f'<I64 N="Value">{value}</I64>'
    return f'<S N="Value">{escape(value)}</S>'


def entry_xml(key: str, value) -> str:
    """A single <En> key/value element."""
    return f'<En><S N="Key">{escape(key)}</S>{_value(value)}</En>'


def record_xml(entry: IndexEntry, ref_id: int) -> str:
    """An OrderedDictionary <Obj> for one indexed file."""
    entries = "".join([
        entry_xml("ok", entry.ok),
        entry_xml("path", entry.path),
        entry_xml("length", entry.length),
        entry_xml("hash", entry.hash),
        entry_xml("error", entry.error),
    ])
    return (
        f'<Obj RefId="{ref_id}"><TN RefId="2">'
        '<T>System.Collections.Specialized.OrderedDictionary</T>'
        '<T>System.Object</T></TN>'
        f'<DCT>{entries}</DCT></Obj>'
    )


def build_index_xml(
    algorithm: str = "SHA256",
    entries: list[IndexEntry] | None = None,
    root: str = r"\\server\share",
    extra_members: str = "",
    raw_records: list[str] | None = None,
) -> str:
    """
    Build a CLIXML index document.

    Args:
        algorithm: Value of the ``algorithm`` member
        entries: Records for ``items``; None omits the ``items`` member
        root: Value of the ``root`` member
        extra_members: Raw XML appended inside <MS>
        raw_records: Raw <Obj> records appended after ``entries``

    Returns:
        The document as text
    """
    items = ""
    if entries is not None or raw_records is not None:
        records = [record_xml(e, 10 + i) for i, e in enumerate(entries or [])]
        records.extend(raw_records or [])
        items = (
            '<Obj N="items" RefId="1"><TN RefId="1">'
            '<T>System.Object[]</T><T>System.Array</T><T>System.Object</T></TN>'
            f'<LST>{"".join(records)}</LST></Obj>'
        )

    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<Objs Version="1.1.0.1" xmlns="{NAMESPACE}">'
        '<Obj RefId="0"><TN RefId="0">'
        '<T>System.Management.Automation.PSCustomObject</T>'
        '<T>System.Object</T></TN>'
        '<MS>'
        '<S N="createdUtc">2026-02-16T23:09:08.4209857Z</S>'
        '<S N="startedUtc">2026-02-16T23:08:14.6110939Z</S>'
        f'<S N="algorithm">{escape(algorithm)}</S>'
        f'<S N="root">{escape(root)}</S>'
        f'<I32 N="total">{len(entries or [])}</I32>'
        f'{extra_members}{items}'
        '</MS></Obj></Objs>'
    )


def write_index(directory: Path, xml: str, name: str = "index.clixml") -> Path:
    """Write an index document and return its path."""
    path = directory / name
    path.write_text(xml, encoding="utf-8")
    return path


def write_data_file(directory: Path, name: str, data: bytes) -> Path:
    """Write a data file and return its path."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def indexed(path: Path, data: bytes, algorithm: str = "SHA256",
            error: str | None = None) -> IndexEntry:
    """An IndexEntry that correctly describes ``data`` at ``path``."""
    return IndexEntry(
        ok=error is None,
        path=str(path),
        length=len(data),
        hash=hex_digest(algorithm, data),
        error=error,
    )
