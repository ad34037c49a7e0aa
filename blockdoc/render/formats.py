"""Deterministic export formats built purely from project, blocks and sections."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ..models import BLOCK_KINDS, Block, Project, Section
from ..prompting.constants import CONSOLIDATED_BLOCK_LIMIT, CONSOLIDATED_SECTION_LIMIT


def format_megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:.2f}"


def render_detailed_markdown(
    project: Project, blocks: Sequence[Block], sections: Sequence[Section]
) -> str:
    lines: List[str] = [
        f"# {project.name} - Complete Documentation",
        "",
        "## Project Overview",
        f"- **Files**: {project.file_count}",
        f"- **Size**: {format_megabytes(project.total_size)} MB",
        f"- **Extracted Components**: {len(blocks)}",
        "",
    ]
    for section in sections:
        lines.extend([f"## {section.title}", "", section.narrative, ""])
        for block in section.blocks:
            lines.extend(
                [
                    f"### {block.title}",
                    "",
                    f"**File**: `{block.file_path}`",
                    "",
                    block.description,
                    "",
                    f"```{block.language}",
                    block.code,
                    "```",
                    "",
                ]
            )
    return "\n".join(lines) + "\n"


def render_consolidated_text(
    project: Project, blocks: Sequence[Block], sections: Sequence[Section]
) -> str:
    """Compact text export capped to fit AI platform token limits."""
    parts: List[str] = [
        f"PROJECT: {project.name}\n",
        (
            f"FILES: {project.file_count} | SIZE: {format_megabytes(project.total_size)}MB"
            f" | COMPONENTS: {len(blocks)}\n\n"
        ),
    ]
    for section in sections[:CONSOLIDATED_SECTION_LIMIT]:
        parts.append(f"SECTION: {section.title}\n")
        parts.append(f"{section.narrative}\n\n")
        for block in section.blocks[:CONSOLIDATED_BLOCK_LIMIT]:
            parts.append(f"CODE: {block.title} ({block.file_path})\n")
            parts.append(f"DESC: {block.description}\n")
            parts.append(f"{block.code}\n\n---\n\n")
    return "".join(parts)


def render_code_extraction(project: Project, blocks: Sequence[Block]) -> str:
    parts: List[str] = [f"# Code Extraction for {project.name}\n\n"]
    for index, block in enumerate(blocks, start=1):
        parts.append(f"## Component {index}: {block.title}\n\n")
        parts.append(f"**File**: {block.file_path}\n")
        parts.append(f"**Type**: {block.kind}\n\n")
        parts.append(f"### Description\n{block.description}\n\n")
        parts.append(f"### Implementation\n```{block.language}\n{block.code}\n```\n\n")
        parts.append("---\n\n")
    return "".join(parts)


def build_json_schema(project: Project) -> Dict[str, Any]:
    """Return the communication schema skeleton; it describes shape, not data."""
    string_array = {"type": "array", "items": {"type": "string"}}
    component = {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
            "type": {"type": "string", "enum": list(BLOCK_KINDS)},
            "filePath": {"type": "string"},
            "dependencies": string_array,
            "exports": string_array,
            "communications": {
                "type": "object",
                "properties": {
                    "input": {"type": "object"},
                    "output": {"type": "object"},
                    "events": string_array,
                },
            },
        },
    }
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": f"{project.name} Communication Schema",
        "description": "Complete schema defining all component communications and data flows",
        "type": "object",
        "properties": {
            "project": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "const": project.name},
                    "components": {"type": "array", "items": component},
                },
            }
        },
    }


def render_json_schema(project: Project) -> str:
    return json.dumps(build_json_schema(project), indent=2, ensure_ascii=False)


__all__ = [
    "build_json_schema",
    "format_megabytes",
    "render_code_extraction",
    "render_consolidated_text",
    "render_detailed_markdown",
    "render_json_schema",
]
