# src/combinator/core/output.py
import os
import sys
import logging
import tempfile
from pathlib import Path
from typing import Optional, TextIO

from combinator.config import LINUX_RAM_DIRS, TEMP_PREFIX, TEMP_SUFFIX
from combinator.errors import OutputError
from combinator.models import CombinedOutput

log = logging.getLogger("combinator.output")


def pick_temp_dir(ram_dir: Optional[Path] = None) -> Path:
    """
    Chooses where temp mode puts its file:
    1. an explicit --ram-dir,
    2. on Linux, $XDG_RUNTIME_DIR or /dev/shm when they exist,
    3. the platform temp directory.
    """
    if ram_dir is not None:
        return ram_dir

    if sys.platform.startswith("linux"):
        xdg = os.environ.get("XDG_RUNTIME_DIR")
        if xdg and Path(xdg).is_dir():
            return Path(xdg)
        for candidate in LINUX_RAM_DIRS:
            if Path(candidate).is_dir():
                return Path(candidate)

    return Path(tempfile.gettempdir())


def write_utf8(stream: TextIO, text: str) -> None:
    """Writes UTF-8 bytes to the stream's binary layer, bypassing the locale encoding."""
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(text)
        stream.flush()
        return
    stream.flush()
    buffer.write(text.encode("utf-8", errors="replace"))
    buffer.flush()


def write_clipboard(text: str, stream: Optional[TextIO] = None) -> CombinedOutput:
    """Writes the combined text as-is; placing it on a clipboard is the caller's job."""
    stream = stream if stream is not None else sys.stdout
    log.debug("Output mode: clipboard, %d chars", len(text))
    try:
        write_utf8(stream, text)
    except OSError as e:
        raise OutputError(f"Failed to write to stdout: {e}") from e
    return CombinedOutput(mode="clipboard", text=text)


def write_temp(
    text: str, ram_dir: Optional[Path] = None, stream: Optional[TextIO] = None
) -> CombinedOutput:
    """
    Stores the combined text in a new uniquely named file and prints its path.
    The file is left in place for the caller.
    """
    stream = stream if stream is not None else sys.stdout
    directory = pick_temp_dir(ram_dir)
    log.debug("Output mode: temp file in %s", directory)

    try:
        fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=directory)
    except OSError as e:
        raise OutputError(f"Failed to create temp file in {directory}: {e}") from e

    path = Path(name).resolve()
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="replace", newline="") as f:
            f.write(text)
    except OSError as e:
        raise OutputError(f"Failed to write content to {path}: {e}") from e

    log.debug("Wrote %d chars to %s", len(text), path)

    try:
        write_utf8(stream, f"{path}\n")
    except OSError as e:
        raise OutputError(f"Failed to write to stdout: {e}") from e
    return CombinedOutput(mode="temp", temp_file_path=path)


def emit(mode: str, text: str, ram_dir: Optional[Path] = None) -> CombinedOutput:
    if mode == "clipboard":
        return write_clipboard(text)
    if mode == "temp":
        return write_temp(text, ram_dir=ram_dir)
    raise OutputError(f"Unknown mode '{mode}'. Use 'clipboard' or 'temp'")
