# src/combinator/core/resolver.py
import os
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from combinator.errors import ValidationError
from combinator.models import FileStatus, ResolvedFile

log = logging.getLogger("combinator.resolver")


def display_path(path: Path, base: Optional[Path]) -> str:
    """Forward-slash path of `path` relative to `base`, or absolute when outside it."""
    if base is not None:
        try:
            rel = path.relative_to(base)
            if rel.parts:
                return rel.as_posix()
        except ValueError:
            pass
    return path.as_posix()


def common_ancestor(paths: Iterable[Path]) -> Optional[Path]:
    """Deepest directory containing every path, or None (e.g. different drives)."""
    parents = [str(p.parent) for p in paths]
    if not parents:
        return None
    try:
        return Path(os.path.commonpath(parents))
    except ValueError:
        return None


class PathResolver:
    """
    Expands the requested entries into an ordered, de-duplicated list of files.

    Directories are walked depth-first with an explicit work-list; entries of
    each directory are visited in lexical order of their names, so identical
    input state always yields the same sequence.
    """

    def __init__(self, workspace_root: Optional[str] = None):
        self.workspace_root = Path(os.path.abspath(workspace_root)) if workspace_root else None
        self._seen: Set[str] = set()

    def resolve(self, entries: List[str]) -> List[ResolvedFile]:
        found: List[Tuple[Path, FileStatus, str]] = []
        self._seen = set()

        for entry in entries:
            found.extend(self._expand_entry(entry))

        if not found:
            raise ValidationError("No files found from provided paths: " + ", ".join(entries))
        if not any(status is FileStatus.PENDING for _, status, _ in found):
            problems = "\n".join(f"{path}: {reason}" for path, _, reason in found)
            raise ValidationError(f"No accessible files found. Errors:\n{problems}")

        base = self.workspace_root
        if base is None:
            base = common_ancestor(path for path, status, _ in found if status is FileStatus.PENDING)
        log.debug("Display paths relative to: %s", base if base is not None else "<absolute>")

        return [
            ResolvedFile(
                absolute_path=path,
                relative_path=display_path(path, base),
                status=status,
                reason=reason,
            )
            for path, status, reason in found
        ]

    def _expand_entry(self, entry: str) -> Iterator[Tuple[Path, FileStatus, str]]:
        if not entry:
            # abspath("") would silently mean the working directory.
            log.debug("  -> Ignoring empty path entry")
            yield Path(entry), FileStatus.SKIPPED_UNREADABLE, "empty path"
            return

        path = Path(os.path.abspath(entry))
        log.debug("Processing path: %s", path)

        try:
            st = path.stat()
        except ValueError as e:
            # Embedded NULs and names the filesystem encoding cannot represent.
            log.debug("  -> Invalid path %r: %s", entry, e)
            yield path, FileStatus.SKIPPED_UNREADABLE, f"invalid path ({e})"
            return
        except OSError as e:
            log.debug("  -> Cannot access %s: %s", path, e.strerror or e)
            yield path, FileStatus.SKIPPED_UNREADABLE, f"cannot access ({e.strerror or e})"
            return

        if path.is_file():
            if self._claim(path):
                log.debug("  -> Found file: %s", path)
                yield path, FileStatus.PENDING, ""
        elif path.is_dir():
            log.debug("  -> Expanding directory: %s", path)
            count = 0
            for item in self._walk(path):
                if item[1] is FileStatus.PENDING:
                    count += 1
                yield item
            log.debug("  -> Found %d files in directory", count)
        else:
            log.debug("  -> %s is neither file nor directory (mode %o)", path, st.st_mode)
            yield path, FileStatus.SKIPPED_UNREADABLE, "neither file nor directory"

    def _walk(self, root: Path) -> Iterator[Tuple[Path, FileStatus, str]]:
        # Pre-order walk; children are pushed in reverse so the smallest name pops first.
        stack: List[Tuple[Path, bool]] = [(root, True)]

        while stack:
            current, is_dir = stack.pop()

            if not is_dir:
                if self._claim(current):
                    log.debug("    -> Found file in dir: %s", current)
                    yield current, FileStatus.PENDING, ""
                continue

            try:
                with os.scandir(current) as it:
                    children = sorted(it, key=lambda e: e.name)
                pending = []
                for child in children:
                    if child.is_dir(follow_symlinks=False):
                        pending.append((Path(child.path), True))
                    elif child.is_file():
                        pending.append((Path(child.path), False))
                    else:
                        log.debug("    -> Ignoring special or dangling entry: %s", child.path)
            except OSError as e:
                log.debug("  -> Failed to access %s: %s", current, e.strerror or e)
                yield current, FileStatus.SKIPPED_UNREADABLE, f"cannot list directory ({e.strerror or e})"
                continue

            stack.extend(reversed(pending))

    def _claim(self, path: Path) -> bool:
        """True the first time a file is reached; later routes to it are dropped."""
        key = os.path.normcase(os.path.realpath(path))
        if key in self._seen:
            log.debug("    -> Duplicate, already listed: %s", path)
            return False
        self._seen.add(key)
        return True
