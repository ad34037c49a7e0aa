"""Format dispatch for documentation exports."""

from __future__ import annotations

from typing import Sequence

from ..llm.base import TextGenerator
from ..logging import get_logger
from ..models import Block, ExportArtifact, Project, Section
from ..prompting.builder import PromptBuilder
from ..prompting.constants import (
    DIAGRAM_TYPES,
    EXPORT_FORMATS,
    FORMAT_EXTENSIONS,
    NARRATIVE_FORMATS,
)
from .formats import (
    render_code_extraction,
    render_consolidated_text,
    render_detailed_markdown,
    render_json_schema,
)


class ExportError(RuntimeError):
    """Raised when a single export format cannot be produced."""

    def __init__(self, format_id: str, message: str) -> None:
        super().__init__(f"{format_id}: {message}")
        self.format_id = format_id
        self.message = message


class UnknownFormatError(ValueError):
    """Raised for format or diagram identifiers the renderer does not know."""


def suggested_filename(project_name: str, format_id: str) -> str:
    extension = FORMAT_EXTENSIONS.get(format_id, "txt")
    return f"{project_name}-{format_id}.{extension}"


class FormatRenderer:
    """Renders project documentation into the supported export formats.

    Deterministic formats never touch the generator and never mutate their
    inputs. Narrative formats and diagram descriptions are produced by the
    generator alone and raise :class:`ExportError` when it is missing or fails.
    """

    def __init__(
        self,
        generator: TextGenerator | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.generator = generator
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("render")

    def render(
        self,
        format_id: str,
        project: Project,
        blocks: Sequence[Block],
        sections: Sequence[Section],
    ) -> ExportArtifact:
        if format_id not in EXPORT_FORMATS:
            raise UnknownFormatError(f"Unknown export format '{format_id}'")

        if format_id == "detailed-markdown":
            content = render_detailed_markdown(project, blocks, sections)
        elif format_id == "consolidated-txt":
            content = render_consolidated_text(project, blocks, sections)
        elif format_id == "code-extraction":
            content = render_code_extraction(project, blocks)
        elif format_id == "json-schema":
            content = render_json_schema(project)
        elif format_id in NARRATIVE_FORMATS:
            prompt = self.prompt_builder.format_prompt(format_id, project, blocks, sections)
            content = self._generate(format_id, prompt)
        else:  # pragma: no cover - EXPORT_FORMATS and the branches above agree
            raise UnknownFormatError(f"Unknown export format '{format_id}'")

        return ExportArtifact(
            format_id=format_id,
            content=content,
            suggested_filename=suggested_filename(project.name, format_id),
        )

    def render_diagram(
        self, diagram_id: str, project: Project, blocks: Sequence[Block]
    ) -> ExportArtifact:
        if diagram_id not in DIAGRAM_TYPES:
            raise UnknownFormatError(f"Unknown diagram type '{diagram_id}'")
        artifact_id = f"diagram-{diagram_id}"
        prompt = self.prompt_builder.diagram_prompt(diagram_id, project, blocks)
        content = self._generate(artifact_id, prompt)
        return ExportArtifact(
            format_id=artifact_id,
            content=content,
            suggested_filename=suggested_filename(project.name, artifact_id),
        )

    def _generate(self, format_id: str, prompt: Sequence[str]) -> str:
        if self.generator is None:
            raise ExportError(format_id, "text generation is not configured")
        try:
            text = self.generator.generate(prompt)
        except Exception as exc:
            raise ExportError(format_id, str(exc) or exc.__class__.__name__) from exc
        if not isinstance(text, str) or not text.strip():
            raise ExportError(format_id, "text generation returned no content")
        return text


__all__ = ["ExportError", "FormatRenderer", "UnknownFormatError", "suggested_filename"]
