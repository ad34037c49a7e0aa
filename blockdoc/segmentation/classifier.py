"""Kind classification and title extraction for raw blocks."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from ..models import RawBlock, SourceFile

_IDENTIFIER = r"[A-Za-z_$][\w$]*"
_RESERVED = (
    r"(?:export|default|async|function|class|const|let|var"
    r"|if|else|for|while|do|switch|return|new|await|import)\b"
)

_TITLE_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(
        rf"^(?:export\s+)?(?:default\s+)?(?:async\s+)?(?:function\*?\s+)?(?!{_RESERVED})({_IDENTIFIER})"
    ),
    re.compile(rf"^(?:export\s+)?(?:const|let|var)\s+({_IDENTIFIER})"),
    re.compile(rf"\bclass\s+({_IDENTIFIER})"),
)

# Exported functions named like components (PascalCase) are components.
_EXPORTED_COMPONENT = re.compile(r"\bexport\s+(?:async\s+)?function\*?\s+[A-Z]")


def classify(first_line: str) -> str:
    """Return the block kind for a trimmed opening line."""
    if "class " in first_line:
        return "class"
    if "export default" in first_line or _EXPORTED_COMPONENT.search(first_line):
        return "component"
    if "function" in first_line:
        return "function"
    return "script"


def extract_title(first_line: str) -> Optional[str]:
    """Return the first identifier captured by the title patterns, if any."""
    for pattern in _TITLE_PATTERNS:
        match = pattern.search(first_line)
        if match and match.group(1):
            return match.group(1)
    return None


def fallback_title(kind: str, raw: RawBlock) -> str:
    return f"{kind} ({_line_range(raw)})"


def classify_block(raw: RawBlock, file: SourceFile) -> Tuple[str, str]:
    """Return ``(kind, title)`` for a raw block found in ``file``."""
    if raw.is_config:
        return "config", f"{file.name} Configuration"
    first_line = raw.text.split("\n", 1)[0].strip()
    kind = classify(first_line)
    title = extract_title(first_line) or fallback_title(kind, raw)
    return kind, title


def _line_range(raw: RawBlock) -> str:
    return f"lines {raw.start_line + 1}-{raw.end_line + 1}"


__all__ = ["classify", "classify_block", "extract_title", "fallback_title"]
