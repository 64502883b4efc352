# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/hasher.py

"""Streaming file digests over whole files or byte windows."""

import hashlib
from pathlib import Path
from typing import Callable, Final

from .errors import ConfigError, UnexpectedEOFError, UnsupportedAlgorithmError


BUFFER_SIZE: Final = 1 << 20  # 1 MiB

# Canonical name -> hashlib constructor name
ALGORITHMS: Final = {
    'SHA256': 'sha256',
    'SHA1': 'sha1',
    'SHA512': 'sha512',
    'SHA384': 'sha384',
    'MD5': 'md5',
}

ProgressFn = Callable[[int], None]


def normalize_algorithm(algorithm: str) -> str:
    """Return the canonical spelling (e.g. 'sha-256 ' -> 'SHA256')."""
    key = algorithm.strip().upper().replace('-', '').replace('_', '')
    if key not in ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm)
    return key


def new_hasher(algorithm: str):
    """Fresh hashlib object for a supported algorithm name."""
    name = ALGORITHMS[normalize_algorithm(algorithm)]
    # md5/sha1 are used for integrity checks only
    return hashlib.new(name, usedforsecurity=False)


class _Pending:
    """Batches progress so the callback fires once per buffer, not per read."""

    def __init__(self, on_progress: ProgressFn | None):
        self.on_progress = on_progress
        self.count = 0

    def add(self, n: int) -> None:
        self.count += n
        if self.count >= BUFFER_SIZE:
            self.flush()

    def flush(self) -> None:
        if self.count > 0 and self.on_progress is not None:
            self.on_progress(self.count)
        self.count = 0


def hash_file(path: Path | str, algorithm: str,
              start: int | None = None, length: int | None = None,
              on_progress: ProgressFn | None = None) -> str:
    """Uppercase hex digest of a file, or of [start, start + length) in it.

    Args:
        path: File to read
        algorithm: SHA256, SHA1, SHA512, SHA384 or MD5 (any case, dashes ok)
        start: Window offset; give together with ``length`` or not at all
        length: Window size in bytes
        on_progress: Called with the number of newly hashed bytes

    Raises:
        UnsupportedAlgorithmError: Before the file is opened
        ConfigError: If the window is negative or half-specified
        UnexpectedEOFError: If the file ends inside the window
        OSError: On any other read failure
    """
    hasher = new_hasher(algorithm)
    if (start is None) != (length is None):
        raise ConfigError("start and length must be given together")
    if start is not None and (start < 0 or length < 0):
        raise ConfigError(f"invalid range: start={start} length={length}")

    pending = _Pending(on_progress)
    with open(path, 'rb') as f:
        if start is None:
            while chunk := f.read(BUFFER_SIZE):
                hasher.update(chunk)
                pending.add(len(chunk))
        else:
            f.seek(start)
            read = 0
            while read < length:
                chunk = f.read(min(BUFFER_SIZE, length - read))
                if not chunk:
                    raise UnexpectedEOFError(start + read, length)
                hasher.update(chunk)
                pending.add(len(chunk))
                read += len(chunk)
    pending.flush()

    return hasher.hexdigest().upper()
