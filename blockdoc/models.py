"""Core data models shared across blockdoc components."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple

BLOCK_KINDS: Tuple[str, ...] = (
    "function",
    "class",
    "component",
    "config",
    "script",
    "style",
)


@dataclass(frozen=True)
class SourceFile:
    """A decoded text file supplied by intake."""

    name: str
    path: str
    content: str
    size: int
    extension: str


@dataclass(frozen=True)
class RawBlock:
    """Candidate block emitted by the segmenter (0-based, inclusive lines)."""

    start_line: int
    end_line: int
    text: str
    is_config: bool = False


@dataclass(frozen=True)
class Block:
    """Classified, titled and described code region."""

    id: str
    title: str
    description: str
    code: str
    language: str
    file_path: str
    kind: str


@dataclass(frozen=True)
class Section:
    """Documentation unit aggregating the blocks of one directory."""

    id: str
    title: str
    description: str
    narrative: str
    blocks: Tuple[Block, ...]


@dataclass
class Project:
    """Root aggregate whose files feed the pipeline."""

    name: str
    files: List[SourceFile] = field(default_factory=list)
    total_size: int = 0
    file_count: int = 0
    uploaded_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_files(cls, name: str, files: List[SourceFile]) -> "Project":
        return cls(
            name=name,
            files=list(files),
            total_size=sum(file.size for file in files),
            file_count=len(files),
        )


@dataclass(frozen=True)
class ExportArtifact:
    """Rendered output for a single export format."""

    format_id: str
    content: str
    suggested_filename: str
