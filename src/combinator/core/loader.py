# src/combinator/core/loader.py
import codecs
import dataclasses
import logging
from typing import Iterable, Iterator

from combinator.config import BINARY_SAMPLE_SIZE, CONTROL_BYTE_RATIO
from combinator.models import FileStatus, ResolvedFile

log = logging.getLogger("combinator.loader")

_CONTROL_BYTES = frozenset(range(1, 9)) | frozenset(range(14, 32))


def looks_binary(sample: bytes) -> bool:
    """
    Guesses whether a leading byte sample belongs to a binary file.

    A sample is binary if it contains a NUL byte, is not valid UTF-8, or has
    more than 2% control bytes. A multi-byte character cut off at the end of
    the sample does not count as invalid.
    """
    if not sample:
        return False
    if b"\0" in sample:
        return True

    try:
        codecs.getincrementaldecoder("utf-8")().decode(sample, final=False)
    except UnicodeDecodeError:
        return True

    controls = sum(1 for b in sample if b in _CONTROL_BYTES)
    return controls > CONTROL_BYTE_RATIO * len(sample)


class FileLoader:
    """Reads resolved files and classifies each one independently."""

    def __init__(self, max_size_bytes: int, skip_binary: bool = True):
        self.max_size_bytes = max_size_bytes
        self.skip_binary = skip_binary

    def load_all(self, files: Iterable[ResolvedFile]) -> Iterator[ResolvedFile]:
        for rf in files:
            yield self.load(rf)

    def load(self, rf: ResolvedFile) -> ResolvedFile:
        if rf.status is not FileStatus.PENDING:
            return rf

        try:
            # One probe byte past the ceiling tells "exactly at limit" from "over".
            with rf.absolute_path.open("rb") as f:
                data = f.read(self.max_size_bytes + 1)
        except OSError as e:
            log.debug("  -> Skipped %s: unreadable (%s)", rf.relative_path, e.strerror or e)
            return dataclasses.replace(
                rf, status=FileStatus.SKIPPED_UNREADABLE, reason=f"read error ({e.strerror or e})"
            )

        if len(data) > self.max_size_bytes:
            log.debug(
                "  -> Skipped %s: too large (> %d bytes)", rf.relative_path, self.max_size_bytes
            )
            return dataclasses.replace(
                rf,
                status=FileStatus.SKIPPED_TOO_LARGE,
                size_bytes=len(data),
                reason=f"larger than {self.max_size_bytes} bytes",
            )

        if self.skip_binary and looks_binary(data[:BINARY_SAMPLE_SIZE]):
            log.debug("  -> Skipped %s: binary file detected", rf.relative_path)
            return dataclasses.replace(
                rf, status=FileStatus.SKIPPED_BINARY, size_bytes=len(data), reason="binary content"
            )

        log.debug("  -> Added %s: %d bytes", rf.relative_path, len(data))
        return dataclasses.replace(
            rf,
            status=FileStatus.INCLUDED,
            size_bytes=len(data),
            content=data.decode("utf-8", errors="replace"),
        )
