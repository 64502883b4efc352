# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/errors.py

"""Exception hierarchy for index loading, hashing and comparison."""


class FileVerifyError(Exception):
    """Base class for all file-verify failures."""


class ConfigError(FileVerifyError, ValueError):
    """Bad arguments, surfaced before any work begins."""


class UnsupportedAlgorithmError(ConfigError):
    """Requested digest algorithm is not one we can compute."""

    def __init__(self, algorithm: str):
        super().__init__(f"unsupported algorithm: {algorithm!r}")
        self.algorithm = algorithm


class IndexParseError(FileVerifyError, ValueError):
    """The index document is malformed or has no root object."""


class UnexpectedEOFError(FileVerifyError, OSError):
    """A ranged read ran out of file before the window was consumed."""

    def __init__(self, offset: int, length: int):
        super().__init__(
            f"unexpected EOF at offset {offset} (wanted {length} bytes total)"
        )
        self.offset = offset
        self.length = length
