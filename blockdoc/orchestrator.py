"""Wires configuration, intake, persistence and the pipeline for a project path."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .analysis import ProjectAnalysis
from .config import BlockDocConfig, load_config
from .describer import Describer
from .grouping import SectionSynthesizer
from .intake import ProjectLoader
from .llm.base import TextGenerator
from .llm.runner import LLMRunner
from .logging import get_logger
from .pipeline import DocumentationPipeline, ExportReport, GenerationResult, ProgressCallback
from .prompting.builder import PromptBuilder
from .render.renderer import FormatRenderer
from .segmentation.segmenter import Segmenter
from .stores import KeyValueStore

DEFAULT_OUTPUT_DIR = Path(".blockdoc") / "exports"


@dataclass
class ExportOutcome:
    """Export report plus the files written for successful artifacts."""

    report: ExportReport
    written: List[Path] = field(default_factory=list)


class Orchestrator:
    """Coordinates generate/export/analyze runs rooted at a project directory."""

    def __init__(
        self,
        generator: TextGenerator | None = None,
        *,
        use_llm: bool = True,
    ) -> None:
        self._generator = generator
        self._generator_is_external = generator is not None
        self._use_llm = use_llm
        self._generator_signature: Optional[Tuple[object, ...]] = None
        self.logger = get_logger("orchestrator")

    def run_generate(self, path: str) -> GenerationResult:
        root, config = self._load(path)
        self.logger.info("Starting generate run for %s", root)
        project = self._loader(config).load(root, name=config.project_name)
        pipeline = self.build_pipeline(config)
        result = pipeline.generate(project)
        if result.file_errors:
            self.logger.warning("%d files could not be processed", len(result.file_errors))
        return result

    def run_export(
        self,
        path: str,
        formats: Sequence[str] | None = None,
        diagrams: Sequence[str] | None = None,
        *,
        output_dir: Path | None = None,
        write: bool = True,
        progress: ProgressCallback | None = None,
    ) -> ExportOutcome:
        root, config = self._load(path)
        selected_formats = list(formats) if formats else list(config.export.formats)
        selected_diagrams = list(diagrams) if diagrams else list(config.export.diagrams)
        self.logger.info(
            "Starting export run for %s (%d formats, %d diagrams)",
            root,
            len(selected_formats),
            len(selected_diagrams),
        )
        pipeline = self.build_pipeline(config)
        report = pipeline.export(selected_formats, selected_diagrams, progress=progress)

        outcome = ExportOutcome(report=report)
        if not write:
            return outcome

        target_dir = output_dir or config.export.output_dir or (root / DEFAULT_OUTPUT_DIR)
        target_dir.mkdir(parents=True, exist_ok=True)
        for result in report.succeeded:
            artifact = result.artifact
            if artifact is None:
                continue
            destination = target_dir / artifact.suggested_filename
            destination.write_text(artifact.content, encoding="utf-8")
            outcome.written.append(destination)
            self.logger.info("Wrote %s", destination)
        return outcome

    def run_analyze(self, path: str) -> ProjectAnalysis:
        root, config = self._load(path)
        project = self._loader(config).load(root, name=config.project_name)
        return self.build_pipeline(config).analyze(project)

    def build_pipeline(self, config: BlockDocConfig) -> DocumentationPipeline:
        prompt_builder = PromptBuilder(config.templates_dir)
        generator = self._resolve_generator(config, prompt_builder)
        describer = Describer(generator, prompt_builder)
        segmenter = Segmenter(
            code_extensions=config.segmenter.code_extensions or None,
            config_files=config.segmenter.config_files or None,
        )
        return DocumentationPipeline(
            store=KeyValueStore(config.resolved_store_path),
            segmenter=segmenter,
            describer=describer,
            synthesizer=SectionSynthesizer(describer),
            renderer=FormatRenderer(generator, prompt_builder),
        )

    @staticmethod
    def _load(path: str) -> Tuple[Path, BlockDocConfig]:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Project path not found: {path}")
        return root, load_config(root)

    @staticmethod
    def _loader(config: BlockDocConfig) -> ProjectLoader:
        return ProjectLoader(
            exclude_paths=config.intake.exclude_paths,
            max_file_size=config.intake.max_file_size,
        )

    def _resolve_generator(
        self, config: BlockDocConfig, prompt_builder: PromptBuilder
    ) -> TextGenerator | None:
        if self._generator_is_external:
            return self._generator
        if not self._use_llm:
            return None

        llm_cfg = config.llm
        if llm_cfg is None and not LLMRunner.environment_configured():
            self.logger.debug("No LLM configuration detected; using deterministic fallback text.")
            return None

        kwargs: Dict[str, object] = {"system_prompt": prompt_builder.SYSTEM_PROMPT}
        if llm_cfg is not None:
            if llm_cfg.runner:
                kwargs["executable"] = llm_cfg.runner
            if llm_cfg.model:
                kwargs["model"] = llm_cfg.model
            if llm_cfg.base_url is not None:
                kwargs["base_url"] = llm_cfg.base_url
            if llm_cfg.temperature is not None:
                kwargs["temperature"] = llm_cfg.temperature
            if llm_cfg.max_tokens is not None:
                kwargs["max_tokens"] = llm_cfg.max_tokens
            if llm_cfg.api_key is not None:
                kwargs["api_key"] = llm_cfg.api_key
            if llm_cfg.request_timeout is not None:
                kwargs["request_timeout"] = llm_cfg.request_timeout

        signature = tuple(sorted((key, repr(value)) for key, value in kwargs.items()))
        if self._generator is not None and self._generator_signature == signature:
            return self._generator
        try:
            runner = LLMRunner(**kwargs)  # type: ignore[arg-type]
        except RuntimeError as exc:
            self.logger.warning("LLM runner unavailable (%s); using deterministic fallback text.", exc)
            return None
        self._generator = runner
        self._generator_signature = signature
        return runner


__all__ = ["DEFAULT_OUTPUT_DIR", "ExportOutcome", "Orchestrator"]
