# tests/test_loader.py
import os
import sys
import pytest
from pathlib import Path

from combinator.core.loader import FileLoader, looks_binary
from combinator.models import FileStatus, ResolvedFile


def pending(path: Path) -> ResolvedFile:
    return ResolvedFile(absolute_path=path, relative_path=path.name, status=FileStatus.PENDING)


# --- looks_binary: pure checks over literal samples ---

@pytest.mark.parametrize(
    "sample",
    [
        b"",
        b"plain ascii text\n",
        "café ✓ 日本".encode("utf-8"),
        b"tabs\tand\r\nline endings\x0c",
        # multi-byte character cut at the end of the sample
        "日".encode("utf-8")[:2],
        b"\x1b[31mred\x1b[0m" + b"x" * 200,
    ],
)
def test_text_samples(sample):
    assert looks_binary(sample) is False


@pytest.mark.parametrize(
    "sample",
    [
        b"text with a \x00 in it",
        b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
        b"\xff\xfe\xfa invalid utf-8",
        b"\x01\x02\x03" + b"a" * 50,
    ],
)
def test_binary_samples(sample):
    assert looks_binary(sample) is True


# --- FileLoader ---

def test_exact_ceiling_is_included(tmp_path):
    f = tmp_path / "exact.txt"
    f.write_bytes(b"x" * 1024)
    rf = FileLoader(max_size_bytes=1024).load(pending(f))
    assert rf.status is FileStatus.INCLUDED
    assert rf.size_bytes == 1024
    assert rf.content == "x" * 1024


def test_one_byte_over_is_too_large(tmp_path):
    f = tmp_path / "over.txt"
    f.write_bytes(b"x" * 1025)
    rf = FileLoader(max_size_bytes=1024).load(pending(f))
    assert rf.status is FileStatus.SKIPPED_TOO_LARGE
    assert rf.content is None


def test_ceiling_counts_bytes_not_characters(tmp_path):
    f = tmp_path / "wide.txt"
    f.write_text("é" * 600, encoding="utf-8")  # 600 chars, 1200 bytes
    rf = FileLoader(max_size_bytes=1024).load(pending(f))
    assert rf.status is FileStatus.SKIPPED_TOO_LARGE


def test_zero_ceiling_allows_only_empty_files(tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_bytes(b"")
    one = tmp_path / "one.txt"
    one.write_bytes(b"1")
    loader = FileLoader(max_size_bytes=0)
    assert loader.load(pending(empty)).status is FileStatus.INCLUDED
    assert loader.load(pending(one)).status is FileStatus.SKIPPED_TOO_LARGE


def test_nul_byte_skipped_when_policy_enabled(tmp_path):
    f = tmp_path / "blob.bin"
    f.write_bytes(bytes([0, 1, 2, 0, 255]))
    rf = FileLoader(max_size_bytes=1024, skip_binary=True).load(pending(f))
    assert rf.status is FileStatus.SKIPPED_BINARY


def test_binary_included_best_effort_when_policy_disabled(tmp_path):
    f = tmp_path / "blob.bin"
    f.write_bytes(b"ab\x00\xffcd")
    rf = FileLoader(max_size_bytes=1024, skip_binary=False).load(pending(f))
    assert rf.status is FileStatus.INCLUDED
    assert rf.content == "ab\x00\ufffdcd"


def test_vanished_file_is_unreadable(tmp_path):
    rf = FileLoader(max_size_bytes=1024).load(pending(tmp_path / "gone.txt"))
    assert rf.status is FileStatus.SKIPPED_UNREADABLE
    assert "read error" in rf.reason


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="permission bits are not enforced",
)
def test_permission_denied_is_unreadable(tmp_path):
    f = tmp_path / "secret.txt"
    f.write_text("secret")
    f.chmod(0)
    try:
        rf = FileLoader(max_size_bytes=1024).load(pending(f))
    finally:
        f.chmod(0o644)
    assert rf.status is FileStatus.SKIPPED_UNREADABLE


def test_files_are_classified_independently(tmp_path):
    big = tmp_path / "big.txt"
    big.write_bytes(b"x" * 20)
    binary = tmp_path / "bin.dat"
    binary.write_bytes(b"\x00\x00")
    text = tmp_path / "ok.txt"
    text.write_text("ok")
    missing = ResolvedFile(tmp_path / "nope", "nope", FileStatus.SKIPPED_UNREADABLE, reason="cannot access")

    loaded = list(FileLoader(max_size_bytes=10).load_all(
        [pending(big), pending(binary), missing, pending(text)]
    ))
    assert [rf.status for rf in loaded] == [
        FileStatus.SKIPPED_TOO_LARGE,
        FileStatus.SKIPPED_BINARY,
        FileStatus.SKIPPED_UNREADABLE,
        FileStatus.INCLUDED,
    ]
    assert loaded[2] is missing
