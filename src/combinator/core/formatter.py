# src/combinator/core/formatter.py
import re
import logging
from pathlib import PurePosixPath
from typing import Callable, Dict, Iterable, List

from combinator.models import CombinedBlock, ResolvedFile

log = logging.getLogger("combinator.formatter")

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\([nrt\\])")
_PLACEHOLDER_RE = re.compile(r"\$\{(\w+)\}")

# Recognized header placeholders. Anything else is left verbatim.
PLACEHOLDERS: Dict[str, Callable[[int, ResolvedFile], str]] = {
    "index": lambda index, rf: str(index),
    "relpath": lambda index, rf: rf.relative_path,
    "basename": lambda index, rf: PurePosixPath(rf.relative_path).name or rf.absolute_path.name,
}


def unescape(raw: str) -> str:
    """Decodes \\n, \\r, \\t and \\\\ in a single pass; other backslashes stay."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], raw)


def render_header(template: str, index: int, rf: ResolvedFile) -> str:
    def substitute(match: "re.Match[str]") -> str:
        render = PLACEHOLDERS.get(match.group(1))
        return render(index, rf) if render else match.group(0)

    return _PLACEHOLDER_RE.sub(substitute, template)


class Formatter:
    """Turns included files into numbered blocks and joins them into one text."""

    def __init__(self, header_format: str, separator: str):
        # Both arrive as raw configuration strings.
        self.header_format = unescape(header_format)
        self.separator = unescape(separator)

    def blocks(self, files: Iterable[ResolvedFile]) -> List[CombinedBlock]:
        included = [rf for rf in files if rf.included]
        return [
            CombinedBlock(
                index=i,
                header_text=render_header(self.header_format, i, rf),
                body_text=(rf.content or "").rstrip(),
            )
            for i, rf in enumerate(included, start=1)
        ]

    def combine(self, files: Iterable[ResolvedFile]) -> str:
        blocks = self.blocks(files)
        log.debug("Rendering %d blocks", len(blocks))
        return self.separator.join(b.render() for b in blocks).rstrip()
