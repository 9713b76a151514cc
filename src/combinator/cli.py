# src/combinator/cli.py
import sys
import argparse
import logging
import traceback
from pathlib import Path
from typing import List, Optional, TextIO

from combinator.config import (
    DEFAULT_HEADER_FORMAT,
    DEFAULT_MAX_KB,
    DEFAULT_MODE,
    DEFAULT_SEPARATOR,
    MODES,
    VERSION,
)
from combinator.core.formatter import Formatter
from combinator.core.loader import FileLoader
from combinator.core.output import emit
from combinator.core.request import decode_request, read_request_blob
from combinator.core.resolver import PathResolver
from combinator.errors import CombinatorError
from combinator.models import CombinedOutput, FileStatus, ResolvedFile
from combinator.utils.log import setup_logging

PROG = "the-great-combinator"

log = logging.getLogger("combinator.cli")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Combine many files and folders into one text, for pasting into a chat tool. "
        "Reads a JSON request from stdin.",
        epilog="""example: echo '{"paths":["./src","README.md"],"workspace_root":"."}' | """
        f"{PROG} --mode clipboard",
    )
    parser.add_argument("--mode", choices=MODES, default=DEFAULT_MODE, help="clipboard | temp (default: %(default)s)")
    parser.add_argument(
        "--header-format",
        default=DEFAULT_HEADER_FORMAT,
        help="Header template, supports ${index}, ${basename}, ${relpath} (default: %(default)s)",
    )
    parser.add_argument(
        "--separator",
        default=DEFAULT_SEPARATOR,
        help="Separator between files, supports \\n, \\t, \\r (default: %(default)s)",
    )
    parser.add_argument(
        "--max-kb", type=non_negative_int, default=DEFAULT_MAX_KB, help="Max size per file in KB (default: %(default)s)"
    )

    # Accepts both `--skip-binary` and `--skip-binary true|false`.
    parser.add_argument(
        "--skip-binary",
        type=parse_bool,
        nargs="?",
        const=True,
        default=True,
        metavar="BOOL",
        help="Skip binary-like files (default: true)",
    )
    parser.add_argument("--no-skip-binary", dest="skip_binary", action="store_false", help="Include binary-like files")

    parser.add_argument("--ram-dir", type=Path, default=None, help="Directory for temp mode output (e.g. /dev/shm)")
    parser.add_argument("-v", "--verbose", "--debug", dest="debug", action="store_true", help="Verbose diagnostics on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def stdin_is_interactive(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def summarize(files: List[ResolvedFile], text: str) -> None:
    counts = {status: 0 for status in FileStatus}
    for rf in files:
        counts[rf.status] += 1
        if not rf.included:
            log.debug("Skipped %s (%s): %s", rf.relative_path, rf.status.value, rf.reason)
    log.debug(
        "File processing complete: %d included, %d binary, %d too large, %d unreadable, %d chars",
        counts[FileStatus.INCLUDED],
        counts[FileStatus.SKIPPED_BINARY],
        counts[FileStatus.SKIPPED_TOO_LARGE],
        counts[FileStatus.SKIPPED_UNREADABLE],
        len(text),
    )


def run(args: argparse.Namespace, stdin: TextIO) -> CombinedOutput:
    """One request, start to finish: decode, resolve, load, format, emit."""
    request = decode_request(read_request_blob(stdin))

    resolver = PathResolver(request.workspace_root)
    resolved = resolver.resolve(request.paths)
    log.debug("Expanded %d paths to %d entries", len(request.paths), len(resolved))

    loader = FileLoader(max_size_bytes=args.max_kb * 1024, skip_binary=args.skip_binary)
    files = list(loader.load_all(resolved))

    if not any(rf.included for rf in files):
        log.debug("All %d resolved files were skipped; emitting empty text", len(files))

    text = Formatter(args.header_format, args.separator).combine(files)
    summarize(files, text)

    return emit(args.mode, text, ram_dir=args.ram_dir)


def main(argv: Optional[List[str]] = None):
    parser = create_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    try:
        if stdin_is_interactive(sys.stdin):
            print("This command expects JSON on stdin (pipe).\n\nExample:", file=sys.stderr)
            print(f"""  echo '{{"paths":["."]}}' | {PROG} --mode temp""", file=sys.stderr)
            print("Use --help for details.", file=sys.stderr)
            sys.exit(2)

        log.debug("Args: %s", vars(args))
        run(args, sys.stdin)

    except CombinatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        if args.debug:
            traceback.print_exc()
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
