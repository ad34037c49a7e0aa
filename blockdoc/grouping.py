"""Directory grouping of blocks and section synthesis."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from .describer import Describer
from .logging import get_logger
from .models import Block, Section

ROOT_GROUP = "Root"


def group_key(file_path: str) -> str:
    """Return the containing directory of ``file_path`` or ``Root``."""
    return "/".join(file_path.split("/")[:-1]) or ROOT_GROUP


def group_blocks(blocks: Sequence[Block]) -> Dict[str, List[Block]]:
    """Partition blocks by directory, keeping first-seen key order and block order."""
    groups: Dict[str, List[Block]] = {}
    for block in blocks:
        groups.setdefault(group_key(block.file_path), []).append(block)
    return groups


class SectionSynthesizer:
    """Turns a group of blocks into a documentation section."""

    def __init__(self, describer: Describer) -> None:
        self.describer = describer
        self.logger = get_logger("grouping")

    def synthesize(
        self,
        key: str,
        blocks: Sequence[Block],
        *,
        project_name: str,
        section_id: str,
    ) -> Section:
        if not blocks:
            raise ValueError(f"Cannot build a section for empty group '{key}'")
        narrative = self.describer.narrate(key, project_name, len(blocks))
        return Section(
            id=section_id,
            title=key,
            description=f"Documentation for {key}",
            narrative=narrative,
            blocks=tuple(blocks),
        )

    def synthesize_all(
        self, groups: Mapping[str, Sequence[Block]], *, project_name: str
    ) -> List[Section]:
        sections: List[Section] = []
        for key, blocks in groups.items():
            if not blocks:
                continue
            sections.append(
                self.synthesize(
                    key,
                    blocks,
                    project_name=project_name,
                    section_id=f"section-{len(sections) + 1}",
                )
            )
            self.logger.debug("Section %s: %d blocks", key, len(blocks))
        return sections


__all__ = ["ROOT_GROUP", "SectionSynthesizer", "group_blocks", "group_key"]
