"""Builds text-generation prompts from Jinja templates."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from ..models import Block, Project, Section
from .constants import DIAGRAM_TITLES, NARRATIVE_FORMATS

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")
_MAX_COMPONENT_NAMES = 40


class PromptBuilder:
    """Assembles prompt sections for blocks, sections and narrative exports.

    Every ``*_prompt`` method returns a list of prompt sections; the first
    entry is the rendered instruction template, later entries carry the raw
    material (code, configuration content) the instructions refer to.
    Templates are looked up in ``templates_dir`` first, then in the bundled
    defaults, so projects can override any single template.
    """

    SYSTEM_PROMPT = (
        "You are a senior developer documentation writer. Stay grounded in the code you are shown, "
        "keep explanations precise, and never invent APIs, files or commands."
    )

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def block_prompt(self, code: str, kind: str, file_name: str) -> List[str]:
        instructions = self._render("block.j2", kind=kind, file_name=file_name)
        return [instructions, code]

    def config_prompt(self, content: str, file_name: str) -> List[str]:
        instructions = self._render("config.j2", file_name=file_name)
        return [instructions, content]

    def section_prompt(self, group_name: str, project_name: str, block_count: int) -> List[str]:
        return [
            self._render(
                "section.j2",
                group_name=group_name,
                project_name=project_name,
                block_count=block_count,
            )
        ]

    def format_prompt(
        self,
        format_id: str,
        project: Project,
        blocks: Sequence[Block],
        sections: Sequence[Section] = (),
    ) -> List[str]:
        if format_id not in NARRATIVE_FORMATS:
            raise ValueError(f"No prompt template for format '{format_id}'")
        return [
            self._render(
                f"formats/{format_id}.j2",
                project_name=project.name,
                file_count=project.file_count,
                size_mb=f"{project.total_size / 1024 / 1024:.2f}",
                block_count=len(blocks),
                section_titles=[section.title for section in sections],
            )
        ]

    def diagram_prompt(
        self, diagram_id: str, project: Project, blocks: Sequence[Block]
    ) -> List[str]:
        names = [block.title for block in blocks[:_MAX_COMPONENT_NAMES]]
        return [
            self._render(
                "diagram.j2",
                diagram_id=diagram_id,
                diagram_title=DIAGRAM_TITLES.get(diagram_id, diagram_id.replace("-", " ").title()),
                project_name=project.name,
                block_count=len(blocks),
                component_names=names,
            )
        ]

    def _render(self, template_name: str, **context: object) -> str:
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as exc:
            raise ValueError(f"Prompt template '{template_name}' not found") from exc
        except TemplateError as exc:
            raise ValueError(f"Prompt template '{template_name}' is invalid: {exc}") from exc
        try:
            return template.render(**context).strip()
        except TemplateError as exc:
            raise ValueError(f"Prompt template '{template_name}' failed to render: {exc}") from exc

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir and templates_dir != _DEFAULT_TEMPLATES_DIR:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES_DIR))
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["PromptBuilder"]
