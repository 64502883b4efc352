# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_hasher.py

"""Unit tests for whole-file and ranged digests."""

import pytest

from file_verify.errors import (
    ConfigError,
    UnexpectedEOFError,
    UnsupportedAlgorithmError,
)
from file_verify.hasher import BUFFER_SIZE, hash_file, normalize_algorithm
from tests.fixtures.index_fixture import hex_digest, write_data_file


CONTENT_SMALL = b"hello world"


class TestWholeFile:
    """Digest of an entire file."""

    @pytest.mark.parametrize("algorithm", ["SHA256", "SHA1", "SHA512", "SHA384", "MD5"])
    def test_matches_hashlib(self, tmp_path, algorithm):
        path = write_data_file(tmp_path, "small.bin", CONTENT_SMALL)

        progressed = []
        digest = hash_file(path, algorithm, on_progress=progressed.append)

        assert digest == hex_digest(algorithm, CONTENT_SMALL)
        assert digest == digest.upper()
        assert sum(progressed) == len(CONTENT_SMALL)

    def test_progress_is_batched_per_buffer(self, tmp_path):
        data = b"A" * (2 * BUFFER_SIZE + 1)
        path = write_data_file(tmp_path, "large.bin", data)

        progressed = []
        digest = hash_file(path, "SHA256", on_progress=progressed.append)

        assert digest == hex_digest("SHA256", data)
        assert progressed == [BUFFER_SIZE, BUFFER_SIZE, 1]

    def test_empty_file(self, tmp_path):
        path = write_data_file(tmp_path, "empty.bin", b"")

        progressed = []
        assert hash_file(path, "MD5", on_progress=progressed.append) == hex_digest("MD5", b"")
        assert progressed == []

    def test_algorithm_name_is_forgiving(self, tmp_path):
        path = write_data_file(tmp_path, "small.bin", CONTENT_SMALL)
        assert hash_file(path, "  sha-256 ") == hex_digest("SHA256", CONTENT_SMALL)

    def test_unsupported_algorithm_fails_before_io(self, tmp_path):
        with pytest.raises(UnsupportedAlgorithmError) as excinfo:
            hash_file(tmp_path / "does-not-exist.bin", "BLAKE3")
        assert excinfo.value.algorithm == "BLAKE3"
        assert isinstance(excinfo.value, ConfigError)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            hash_file(tmp_path / "does-not-exist.bin", "SHA256")


class TestRanged:
    """Digest of a [start, start + length) window."""

    DATA = bytes(range(10))

    def test_window_digest(self, tmp_path):
        path = write_data_file(tmp_path, "ten.bin", self.DATA)
        assert hash_file(path, "SHA256", 3, 5) == hex_digest("SHA256", self.DATA[3:8])

    def test_window_reaching_exact_end(self, tmp_path):
        path = write_data_file(tmp_path, "ten.bin", self.DATA)
        assert hash_file(path, "SHA1", 5, 5) == hex_digest("SHA1", self.DATA[5:])

    def test_zero_length_window(self, tmp_path):
        path = write_data_file(tmp_path, "ten.bin", self.DATA)
        assert hash_file(path, "SHA256", 10, 0) == hex_digest("SHA256", b"")

    def test_window_past_eof(self, tmp_path):
        path = write_data_file(tmp_path, "ten.bin", self.DATA)

        with pytest.raises(UnexpectedEOFError) as excinfo:
            hash_file(path, "SHA256", 4, 10)

        assert excinfo.value.offset == 10
        assert excinfo.value.length == 10
        assert isinstance(excinfo.value, OSError)
        assert "offset 10" in str(excinfo.value)

    def test_window_progress(self, tmp_path):
        data = b"B" * (BUFFER_SIZE + 100)
        path = write_data_file(tmp_path, "big.bin", data)

        progressed = []
        hash_file(path, "MD5", 50, BUFFER_SIZE + 10, on_progress=progressed.append)

        assert progressed == [BUFFER_SIZE, 10]

    @pytest.mark.parametrize("start,length", [(-1, 5), (0, -1), (0, None), (None, 4)])
    def test_invalid_window(self, tmp_path, start, length):
        path = write_data_file(tmp_path, "ten.bin", self.DATA)
        with pytest.raises(ConfigError):
            hash_file(path, "SHA256", start, length)


@pytest.mark.parametrize("name,expected", [
    ("SHA256", "SHA256"),
    ("sha-512", "SHA512"),
    (" Sha1\n", "SHA1"),
    ("sha_384", "SHA384"),
    ("md5", "MD5"),
])
def test_normalize_algorithm(name, expected):
    assert normalize_algorithm(name) == expected


@pytest.mark.parametrize("name", ["", "   ", "CRC32", "SHA3-256"])
def test_normalize_rejects_unknown(name):
    with pytest.raises(UnsupportedAlgorithmError):
        normalize_algorithm(name)
