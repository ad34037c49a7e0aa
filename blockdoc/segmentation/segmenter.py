"""Brace-balance line scanner that carves files into candidate blocks."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..models import RawBlock, SourceFile

OPENING_TOKENS: tuple[str, ...] = ("function ", "const ", "let ", "class ", "export ")
MIN_BLOCK_CHARS = 50

DEFAULT_CODE_EXTENSIONS: frozenset[str] = frozenset(
    {
        "js",
        "jsx",
        "ts",
        "tsx",
        "py",
        "java",
        "cpp",
        "c",
        "cs",
        "php",
        "rb",
        "go",
        "rs",
        "swift",
    }
)

DEFAULT_CONFIG_FILES: tuple[str, ...] = (
    "package.json",
    "tsconfig.json",
    "webpack.config.js",
    "vite.config.ts",
    ".env",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "pyproject.toml",
    "requirements.txt",
    "setup.cfg",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "composer.json",
    "Gemfile",
    "docker-compose.yml",
)


def brace_delta(line: str) -> int:
    """Return opening minus closing braces on a line, ignoring lexical context."""
    return line.count("{") - line.count("}")


class Segmenter:
    """Emits raw blocks for code files and whole-file blocks for config files.

    The scan is a heuristic state machine rather than a parser: braces inside
    strings or comments are counted like any other, so boundaries can drift
    on unusual input. That behaviour is relied upon for reproducible output.
    """

    def __init__(
        self,
        *,
        code_extensions: Iterable[str] | None = None,
        config_files: Sequence[str] | None = None,
        min_block_chars: int = MIN_BLOCK_CHARS,
    ) -> None:
        if code_extensions is None:
            self.code_extensions = DEFAULT_CODE_EXTENSIONS
        else:
            self.code_extensions = frozenset(ext.lstrip(".").lower() for ext in code_extensions)
        self.config_files = tuple(config_files) if config_files else DEFAULT_CONFIG_FILES
        self.min_block_chars = min_block_chars

    def segment(self, file: SourceFile) -> List[RawBlock]:
        blocks: List[RawBlock] = []
        if self.is_code_file(file):
            blocks.extend(self.scan(file.content))
        if self.is_config_file(file):
            line_count = len(file.content.split("\n"))
            blocks.append(
                RawBlock(
                    start_line=0,
                    end_line=line_count - 1,
                    text=file.content,
                    is_config=True,
                )
            )
        return blocks

    def scan(self, content: str) -> List[RawBlock]:
        """Run the brace-balance state machine over ``content``."""
        blocks: List[RawBlock] = []
        in_block = False
        balance = 0
        start_line = 0
        buffer: List[str] = []

        for index, line in enumerate(content.split("\n")):
            trimmed = line.strip()
            if not in_block:
                if not any(token in trimmed for token in OPENING_TOKENS):
                    continue
                in_block = True
                start_line = index
                buffer = [line]
                balance = brace_delta(line)
            else:
                buffer.append(line)
                balance += brace_delta(line)

            if balance <= 0 and "}" in trimmed:
                text = "\n".join(buffer)
                if len(text.strip()) > self.min_block_chars:
                    blocks.append(RawBlock(start_line=start_line, end_line=index, text=text))
                in_block = False
                balance = 0
                buffer = []

        # Anything still open here is unterminated and intentionally dropped.
        return blocks

    def is_code_file(self, file: SourceFile) -> bool:
        return file.extension.lower() in self.code_extensions

    def is_config_file(self, file: SourceFile) -> bool:
        return any(config in file.name for config in self.config_files)


__all__ = [
    "DEFAULT_CODE_EXTENSIONS",
    "DEFAULT_CONFIG_FILES",
    "MIN_BLOCK_CHARS",
    "OPENING_TOKENS",
    "Segmenter",
    "brace_delta",
]
