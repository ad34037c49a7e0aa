"""Project-level statistics and summary analysis."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from .models import Block, Project, SourceFile

_ANALYSIS_CODE_EXTENSIONS = frozenset({"js", "jsx", "ts", "tsx", "py", "java", "cpp", "c", "cs"})

# First matching manifest wins.
_ARCHITECTURE_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("package.json", "Node.js/JavaScript"),
    ("requirements.txt", "Python"),
    ("pom.xml", "Java/Maven"),
)

_DEPENDENCY_MANIFESTS = ("package.json", "requirements.txt", "pom.xml", "Gemfile")

_RECOMMENDATIONS = (
    "Add comprehensive README documentation",
    "Implement automated testing",
    "Set up continuous integration",
    "Add code quality tools",
)

HIGH_COMPLEXITY_LINES = 10_000
MEDIUM_COMPLEXITY_LINES = 3_000


@dataclass
class ProjectAnalysis:
    """Summary of a project's size, shape and likely stack."""

    summary: str
    architecture: str
    dependencies: List[str]
    recommendations: List[str]
    complexity: str
    token_usage: int
    estimated_processing_time: int
    file_types: List[Tuple[str, int]] = field(default_factory=list)
    file_tree: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "architecture": self.architecture,
            "dependencies": list(self.dependencies),
            "recommendations": list(self.recommendations),
            "complexity": self.complexity,
            "token_usage": self.token_usage,
            "estimated_processing_time": self.estimated_processing_time,
            "file_types": [[ext, count] for ext, count in self.file_types],
            "file_tree": self.file_tree,
        }


def analyze_project(project: Project) -> ProjectAnalysis:
    files = project.files
    code_files = [file for file in files if file.extension.lower() in _ANALYSIS_CODE_EXTENSIONS]
    total_lines = sum(len(file.content.split("\n")) for file in files)
    directories = count_directories(files)

    summary = (
        f"This project contains {project.file_count} files across {directories} directories. "
        f"The codebase includes {len(code_files)} source code files with approximately "
        f"{total_lines:,} lines of code."
    )
    return ProjectAnalysis(
        summary=summary,
        architecture=_detect_architecture(files),
        dependencies=[
            file.name
            for file in files
            if any(manifest in file.name for manifest in _DEPENDENCY_MANIFESTS)
        ],
        recommendations=list(_RECOMMENDATIONS),
        complexity=_complexity(total_lines),
        token_usage=project.total_size // 4,
        estimated_processing_time=project.file_count // 10 + 2,
        file_types=file_type_stats(files),
        file_tree=build_file_tree(files),
    )


def file_type_stats(files: Sequence[SourceFile]) -> List[Tuple[str, int]]:
    """Return ``(extension, count)`` pairs, most common first."""
    counts = Counter(file.extension or "unknown" for file in files)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def block_kind_counts(blocks: Sequence[Block]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for block in blocks:
        counts[block.kind] = counts.get(block.kind, 0) + 1
    return counts


def count_directories(files: Sequence[SourceFile]) -> int:
    directories = set()
    for file in files:
        parts = file.path.split("/")[:-1]
        for depth in range(1, len(parts) + 1):
            directories.add("/".join(parts[:depth]))
    return len(directories)


def build_file_tree(files: Sequence[SourceFile]) -> Dict[str, Any]:
    """Nest files by path segment; leaves map a file name to its path."""
    tree: Dict[str, Any] = {}
    for file in files:
        parts = file.path.split("/")
        current = tree
        for part in parts[:-1]:
            node = current.setdefault(part, {})
            if not isinstance(node, dict):
                break
            current = node
        else:
            current[parts[-1]] = file.path
    return tree


def _detect_architecture(files: Sequence[SourceFile]) -> str:
    for marker, label in _ARCHITECTURE_MARKERS:
        if any(marker in file.name for file in files):
            return label
    return "Unknown"


def _complexity(total_lines: int) -> str:
    if total_lines > HIGH_COMPLEXITY_LINES:
        return "high"
    if total_lines > MEDIUM_COMPLEXITY_LINES:
        return "medium"
    return "low"


__all__ = [
    "ProjectAnalysis",
    "analyze_project",
    "block_kind_counts",
    "build_file_tree",
    "count_directories",
    "file_type_stats",
]
