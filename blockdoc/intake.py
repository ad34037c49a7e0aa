"""File intake: turn a directory tree into a Project of decoded text files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import DEFAULT_MAX_FILE_SIZE
from .logging import get_logger
from .models import Project, SourceFile

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".blockdoc",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

SUPPORTED_EXTENSIONS: tuple[str, ...] = (
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".cpp", ".c", ".cs", ".php",
    ".rb", ".go", ".rs", ".swift", ".kt", ".scala", ".r", ".m", ".h",
    ".html", ".css", ".scss", ".sass", ".less", ".vue", ".svelte",
    ".json", ".xml", ".yaml", ".yml", ".toml", ".ini", ".conf",
    ".md", ".txt", ".rst", ".adoc", ".tex",
    ".sql", ".sh", ".bash", ".zsh", ".ps1", ".bat",
    ".dockerfile", ".gitignore", ".env", ".lock",
)

_ALWAYS_INCLUDED_MARKERS = ("README", "LICENSE")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .blockdoc.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False
        if self.anchored or self.has_slash:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


@dataclass
class IntakeStats:
    """Counts reported after a directory has been loaded."""

    total: int = 0
    supported: int = 0
    unsupported: int = 0
    skipped: List[str] = field(default_factory=list)


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None
    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]
    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]
    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []
    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        rule = build_ignore_rule(line[1:] if negate else line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def is_supported(name: str) -> bool:
    lowered = name.lower()
    if any(lowered.endswith(ext) for ext in SUPPORTED_EXTENSIONS):
        return True
    return any(marker in name for marker in _ALWAYS_INCLUDED_MARKERS)


def file_extension(name: str) -> str:
    """Return the text after the last dot of ``name`` or ``unknown``."""
    if "." not in name:
        return "unknown"
    return name.rsplit(".", 1)[1] or "unknown"


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


class ProjectLoader:
    """Walks a directory and loads supported text files into a Project."""

    def __init__(
        self,
        *,
        exclude_paths: Sequence[str] = (),
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        self.exclude_paths = list(exclude_paths)
        self.max_file_size = max_file_size
        self.logger = get_logger("intake")
        self.last_stats = IntakeStats()

    def load(self, root: str | Path, *, name: str | None = None) -> Project:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        rules = parse_gitignore(root_path / ".gitignore")
        rules.extend(
            rule for rule in map(build_ignore_rule, self.exclude_paths) if rule is not None
        )

        stats = IntakeStats()
        files: List[SourceFile] = []
        for path in self._iter_files(root_path, rules):
            stats.total += 1
            rel_path = path.relative_to(root_path).as_posix()
            source = self._read(path, rel_path)
            if source is None:
                stats.unsupported += 1
                stats.skipped.append(rel_path)
                continue
            files.append(source)
            stats.supported += 1

        self.last_stats = stats
        self.logger.info(
            "Loaded %d of %d files from %s (%d skipped)",
            stats.supported,
            stats.total,
            root_path,
            stats.unsupported,
        )
        project = Project.from_files(name or root_path.name or "Uploaded Project", files)
        project.uploaded_at = datetime.now()
        return project

    def _read(self, path: Path, rel_path: str) -> SourceFile | None:
        if not is_supported(path.name):
            self.logger.debug("Skipping unsupported file %s", rel_path)
            return None
        size = path.stat().st_size
        if size >= self.max_file_size:
            self.logger.debug("Skipping %s (%d bytes exceeds limit)", rel_path, size)
            return None
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Failed to read %s: %s", rel_path, exc)
            return None
        return SourceFile(
            name=path.name,
            path=rel_path,
            content=content,
            size=size,
            extension=file_extension(path.name),
        )

    @staticmethod
    def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for dirname in sorted(dirnames):
                if dirname in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{dirname}" if rel_dir else dirname
                if _should_ignore(rel_path, True, rules):
                    continue
                kept_dirs.append(dirname)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if filename in _EXCLUDED_FILES:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename


__all__ = [
    "IgnoreRule",
    "IntakeStats",
    "ProjectLoader",
    "SUPPORTED_EXTENSIONS",
    "build_ignore_rule",
    "file_extension",
    "is_supported",
    "parse_gitignore",
]
