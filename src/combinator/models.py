# src/combinator/models.py
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Request(BaseModel):
    """One invocation's selection: what to combine and where paths are shown from."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    paths: List[str] = Field(min_length=1)
    workspace_root: Optional[str] = Field(default=None, alias="workspaceRoot")


class FileStatus(str, Enum):
    # Resolved but not yet read.
    PENDING = "pending"
    INCLUDED = "included"
    SKIPPED_BINARY = "skipped-binary"
    SKIPPED_TOO_LARGE = "skipped-too-large"
    SKIPPED_UNREADABLE = "skipped-unreadable"


@dataclass(frozen=True)
class ResolvedFile:
    """Immutable record of one file after resolution and, later, loading."""
    absolute_path: Path
    relative_path: str
    status: FileStatus
    size_bytes: int = 0
    content: Optional[str] = None
    reason: str = ""

    @property
    def included(self) -> bool:
        return self.status is FileStatus.INCLUDED


@dataclass(frozen=True)
class CombinedBlock:
    index: int
    header_text: str
    body_text: str

    def render(self) -> str:
        return f"{self.header_text}\n{self.body_text}"


@dataclass(frozen=True)
class CombinedOutput:
    """Terminal artifact: the text itself, or the path of the file holding it."""
    mode: str
    text: Optional[str] = None
    temp_file_path: Optional[Path] = None
