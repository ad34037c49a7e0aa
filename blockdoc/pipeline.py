"""Generation and export phases of the documentation pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .analysis import ProjectAnalysis, analyze_project
from .describer import Describer
from .grouping import SectionSynthesizer, group_blocks
from .logging import get_logger
from .models import Block, ExportArtifact, Project, RawBlock, Section, SourceFile
from .render.renderer import ExportError, FormatRenderer
from .segmentation.classifier import classify_block
from .segmentation.segmenter import Segmenter
from .stores import KeyValueStore, Store
from .stores.codec import (
    decode_blocks,
    decode_project,
    decode_sections,
    encode_blocks,
    encode_project,
    encode_sections,
)

PROJECT_KEY = "current-project"
BLOCKS_KEY = "extracted-blocks"
SECTIONS_KEY = "generated-sections"
ANALYSIS_KEY = "analysis-result"


class EmptyInputError(RuntimeError):
    """Raised when exporting before any blocks have been generated."""


@dataclass
class GenerationResult:
    """Blocks and sections produced for one project run."""

    blocks: List[Block]
    sections: List[Section]
    file_errors: Dict[str, str] = field(default_factory=dict)


@dataclass
class ExportResult:
    """Outcome of rendering a single format or diagram."""

    format_id: str
    artifact: Optional[ExportArtifact] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.artifact is not None


@dataclass
class ExportReport:
    """Per-format outcomes of an export batch."""

    results: List[ExportResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[ExportResult]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> List[ExportResult]:
        return [result for result in self.results if not result.ok]


ProgressCallback = Callable[[ExportResult, int, int], None]


class DocumentationPipeline:
    """Runs segmentation, description, grouping and rendering for a project.

    The store is the only shared state: generation writes the project,
    blocks and sections to it and export reads them back, so the two phases
    can run in separate processes.
    """

    def __init__(
        self,
        *,
        store: Store | None = None,
        segmenter: Segmenter | None = None,
        describer: Describer | None = None,
        synthesizer: SectionSynthesizer | None = None,
        renderer: FormatRenderer | None = None,
    ) -> None:
        self.store = store if store is not None else KeyValueStore()
        self.segmenter = segmenter or Segmenter()
        self.describer = describer or Describer()
        self.synthesizer = synthesizer or SectionSynthesizer(self.describer)
        self.renderer = renderer or FormatRenderer()
        self.logger = get_logger("pipeline")

    # ------------------------------------------------------------------
    # Generation phase

    def generate(self, project: Project) -> GenerationResult:
        self.logger.info("Generating documentation for %s (%d files)", project.name, project.file_count)
        self.store.set(PROJECT_KEY, encode_project(project))

        blocks: List[Block] = []
        file_errors: Dict[str, str] = {}
        for file in project.files:
            try:
                file_blocks = self.extract_blocks(file, start_index=len(blocks) + 1)
            except Exception as exc:
                self._log_exception(f"Block extraction failed for {file.path}", exc)
                file_errors[file.path] = str(exc) or exc.__class__.__name__
                continue
            self.logger.debug("%s: %d blocks", file.path, len(file_blocks))
            blocks.extend(file_blocks)
        self.logger.info("Extracted %d blocks", len(blocks))
        self.store.set(BLOCKS_KEY, encode_blocks(blocks))

        sections = self.synthesizer.synthesize_all(group_blocks(blocks), project_name=project.name)
        self.logger.info("Synthesized %d sections", len(sections))
        self.store.set(SECTIONS_KEY, encode_sections(sections))

        return GenerationResult(blocks=blocks, sections=sections, file_errors=file_errors)

    def extract_blocks(self, file: SourceFile, *, start_index: int = 1) -> List[Block]:
        """Segment, classify and describe one file; ids count up from ``start_index``."""
        blocks: List[Block] = []
        for raw in self.segmenter.segment(file):
            blocks.append(self._build_block(raw, file, start_index + len(blocks)))
        return blocks

    def _build_block(self, raw: RawBlock, file: SourceFile, index: int) -> Block:
        kind, title = classify_block(raw, file)
        if raw.is_config:
            return Block(
                id=f"config-{index}",
                title=title,
                description=self.describer.describe_config(raw.text, file.name),
                code=raw.text,
                language=file.extension,
                file_path=file.path,
                kind=kind,
            )
        return Block(
            id=f"code-{index}",
            title=title,
            description=self.describer.describe(raw.text, kind, file.name),
            code=raw.text.strip(),
            language=file.extension,
            file_path=file.path,
            kind=kind,
        )

    # ------------------------------------------------------------------
    # Export phase

    def load_blocks(self) -> List[Block]:
        return decode_blocks(self.store.get(BLOCKS_KEY, []))

    def load_sections(self) -> List[Section]:
        return decode_sections(self.store.get(SECTIONS_KEY, []))

    def load_project(self) -> Optional[Project]:
        return decode_project(self.store.get(PROJECT_KEY))

    def export(
        self,
        formats: Sequence[str],
        diagrams: Sequence[str] = (),
        *,
        project: Project | None = None,
        progress: ProgressCallback | None = None,
    ) -> ExportReport:
        if not formats:
            raise ValueError("Please select at least one export format")

        blocks = self.load_blocks()
        if not blocks:
            raise EmptyInputError("Please generate documentation first")
        sections = self.load_sections()
        if project is None:
            project = self.load_project()
        if project is None:
            raise EmptyInputError("Please generate documentation first")

        total = len(formats) + len(diagrams)
        report = ExportReport()

        def _record(result: ExportResult) -> None:
            report.results.append(result)
            if progress is not None:
                progress(result, len(report.results), total)

        for format_id in formats:
            _record(
                self._attempt(
                    format_id,
                    lambda f=format_id: self.renderer.render(f, project, blocks, sections),
                )
            )
        for diagram_id in diagrams:
            _record(
                self._attempt(
                    f"diagram-{diagram_id}",
                    lambda d=diagram_id: self.renderer.render_diagram(d, project, blocks),
                )
            )

        self.logger.info(
            "Export finished: %d succeeded, %d failed",
            len(report.succeeded),
            len(report.failed),
        )
        return report

    def _attempt(self, format_id: str, render: Callable[[], ExportArtifact]) -> ExportResult:
        try:
            artifact = render()
        except (ExportError, ValueError) as exc:
            self.logger.error("Export of %s failed: %s", format_id, exc)
            message = exc.message if isinstance(exc, ExportError) else str(exc)
            return ExportResult(format_id=format_id, error=message)
        self.logger.debug("Rendered %s (%d chars)", format_id, len(artifact.content))
        return ExportResult(format_id=format_id, artifact=artifact)

    # ------------------------------------------------------------------
    # Analysis

    def analyze(self, project: Project) -> ProjectAnalysis:
        analysis = analyze_project(project)
        self.store.set(ANALYSIS_KEY, analysis.to_dict())
        return analysis

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = [
    "ANALYSIS_KEY",
    "BLOCKS_KEY",
    "DocumentationPipeline",
    "EmptyInputError",
    "ExportReport",
    "ExportResult",
    "GenerationResult",
    "PROJECT_KEY",
    "SECTIONS_KEY",
]
