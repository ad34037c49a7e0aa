"""Deterministic fallback copy for when text generation is unavailable."""

from __future__ import annotations


def block_description_stub(code: str, kind: str, file_name: str) -> str:
    """Return the templated description used when a block cannot be described."""
    line_count = len(code.split("\n"))
    return (
        f"This {kind} in {file_name} handles core functionality. It contains {line_count} lines "
        f"of {kind} code that performs specific operations within the application architecture."
    )


def config_description_stub(file_name: str) -> str:
    return (
        f"Configuration file {file_name} containing project settings and dependencies that "
        "control application behavior and build processes."
    )


def section_narrative_stub(group_key: str, block_count: int) -> str:
    return (
        f"This section contains {block_count} code components that implement core functionality "
        f"for {group_key}. Each component has been analyzed and documented to provide "
        "comprehensive understanding of the implementation."
    )


def format_reason(reason: str | None) -> str | None:
    """Collapse whitespace in an error message and cap it for log output."""
    if not reason:
        return None
    cleaned = " ".join(reason.strip().split())
    if not cleaned:
        return None
    return cleaned[:200] + ("…" if len(cleaned) > 200 else "")


__all__ = [
    "block_description_stub",
    "config_description_stub",
    "format_reason",
    "section_narrative_stub",
]
