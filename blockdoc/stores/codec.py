"""Translate blockdoc models to JSON-compatible payloads and back."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..models import Block, Project, Section, SourceFile

_BLOCK_FIELDS = ("id", "title", "description", "code", "language", "file_path", "kind")
_FILE_FIELDS = ("name", "path", "content", "extension")


def encode_block(block: Block) -> Dict[str, Any]:
    return asdict(block)


def decode_block(payload: object) -> Optional[Block]:
    if not isinstance(payload, dict):
        return None
    values = {name: payload.get(name) for name in _BLOCK_FIELDS}
    if not all(isinstance(value, str) for value in values.values()):
        return None
    return Block(**values)  # type: ignore[arg-type]


def encode_blocks(blocks: Iterable[Block]) -> List[Dict[str, Any]]:
    return [encode_block(block) for block in blocks]


def decode_blocks(payload: object) -> List[Block]:
    if not isinstance(payload, list):
        return []
    blocks = (decode_block(item) for item in payload)
    return [block for block in blocks if block is not None]


def encode_section(section: Section) -> Dict[str, Any]:
    return {
        "id": section.id,
        "title": section.title,
        "description": section.description,
        "narrative": section.narrative,
        "blocks": encode_blocks(section.blocks),
    }


def decode_section(payload: object) -> Optional[Section]:
    if not isinstance(payload, dict):
        return None
    section_id = payload.get("id")
    title = payload.get("title")
    description = payload.get("description")
    narrative = payload.get("narrative")
    if not all(isinstance(value, str) for value in (section_id, title, description, narrative)):
        return None
    blocks = decode_blocks(payload.get("blocks"))
    if not blocks:
        return None
    return Section(
        id=section_id,  # type: ignore[arg-type]
        title=title,  # type: ignore[arg-type]
        description=description,  # type: ignore[arg-type]
        narrative=narrative,  # type: ignore[arg-type]
        blocks=tuple(blocks),
    )


def encode_sections(sections: Iterable[Section]) -> List[Dict[str, Any]]:
    return [encode_section(section) for section in sections]


def decode_sections(payload: object) -> List[Section]:
    if not isinstance(payload, list):
        return []
    sections = (decode_section(item) for item in payload)
    return [section for section in sections if section is not None]


def encode_project(project: Project) -> Dict[str, Any]:
    return {
        "name": project.name,
        "files": [asdict(file) for file in project.files],
        "total_size": project.total_size,
        "file_count": project.file_count,
        "uploaded_at": project.uploaded_at.isoformat(),
    }


def decode_project(payload: object) -> Optional[Project]:
    if not isinstance(payload, dict):
        return None
    name = payload.get("name")
    if not isinstance(name, str):
        return None
    files = [file for file in map(_decode_file, payload.get("files") or []) if file is not None]
    total_size = payload.get("total_size")
    file_count = payload.get("file_count")
    uploaded_at = _parse_datetime(payload.get("uploaded_at"))
    return Project(
        name=name,
        files=files,
        total_size=total_size if isinstance(total_size, int) else sum(f.size for f in files),
        file_count=file_count if isinstance(file_count, int) else len(files),
        uploaded_at=uploaded_at or datetime.now(),
    )


def _decode_file(payload: object) -> Optional[SourceFile]:
    if not isinstance(payload, dict):
        return None
    values = {name: payload.get(name) for name in _FILE_FIELDS}
    size = payload.get("size")
    if not all(isinstance(value, str) for value in values.values()) or not isinstance(size, int):
        return None
    return SourceFile(size=size, **values)  # type: ignore[arg-type]


def _parse_datetime(value: object) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


__all__ = [
    "decode_block",
    "decode_blocks",
    "decode_project",
    "decode_section",
    "decode_sections",
    "encode_block",
    "encode_blocks",
    "encode_project",
    "encode_section",
    "encode_sections",
]
