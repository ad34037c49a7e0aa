"""Tests for the generate/export pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest

from blockdoc.describer import Describer
from blockdoc.models import SourceFile
from blockdoc.pipeline import (
    ANALYSIS_KEY,
    BLOCKS_KEY,
    PROJECT_KEY,
    SECTIONS_KEY,
    DocumentationPipeline,
    EmptyInputError,
    ExportResult,
)
from blockdoc.prompting import PromptBuilder
from blockdoc.render import FormatRenderer
from blockdoc.segmentation import Segmenter
from blockdoc.stores import KeyValueStore
from tests._fixtures.generators import RecordingGenerator, SelectiveGenerator
from tests._fixtures.project_builder import make_project

MATH = "export function add(a,b) { return a + b + a + b + a + b; }"
PACKAGE = '{\n  "name": "demo",\n  "scripts": {\n    "build": "vite build"\n'


def test_math_file_yields_single_function_block_grouped_by_directory() -> None:
    pipeline = DocumentationPipeline()
    result = pipeline.generate(make_project({"src/utils/math.js": MATH}))

    assert len(result.blocks) == 1
    block = result.blocks[0]
    assert block.id == "code-1"
    assert block.kind == "function"
    assert block.title == "add"
    assert block.code == MATH
    assert block.language == "js"
    assert [section.title for section in result.sections] == ["src/utils"]
    assert result.sections[0].blocks == (block,)


def test_package_json_always_yields_config_block_with_full_content() -> None:
    pipeline = DocumentationPipeline()
    result = pipeline.generate(
        make_project({"src/utils/math.js": MATH, "package.json": PACKAGE})
    )

    config_blocks = [block for block in result.blocks if block.kind == "config"]
    assert len(config_blocks) == 1
    config = config_blocks[0]
    assert config.id == "config-2"
    assert config.title == "package.json Configuration"
    assert config.code == PACKAGE
    assert [section.title for section in result.sections] == ["src/utils", "Root"]


def test_generate_persists_project_blocks_and_sections() -> None:
    store = KeyValueStore()
    pipeline = DocumentationPipeline(store=store)
    result = pipeline.generate(make_project({"src/utils/math.js": MATH}, name="calc"))

    assert store.get(PROJECT_KEY)["name"] == "calc"
    assert pipeline.load_blocks() == result.blocks
    assert pipeline.load_sections() == result.sections
    assert len(store.get(BLOCKS_KEY)) == 1
    assert len(store.get(SECTIONS_KEY)) == 1


def test_generate_continues_after_file_failure() -> None:
    class FlakySegmenter(Segmenter):
        def segment(self, file: SourceFile):
            if file.name == "broken.js":
                raise RuntimeError("cannot scan")
            return super().segment(file)

    pipeline = DocumentationPipeline(segmenter=FlakySegmenter())
    result = pipeline.generate(
        make_project({"lib/broken.js": MATH, "src/utils/math.js": MATH})
    )

    assert result.file_errors == {"lib/broken.js": "cannot scan"}
    assert [block.file_path for block in result.blocks] == ["src/utils/math.js"]


def test_descriptions_use_generator_when_available() -> None:
    generator = RecordingGenerator("Adds numbers repeatedly.")
    describer = Describer(generator)
    pipeline = DocumentationPipeline(describer=describer)

    result = pipeline.generate(make_project({"src/utils/math.js": MATH}))

    assert result.blocks[0].description == "Adds numbers repeatedly."
    assert result.sections[0].narrative == "Adds numbers repeatedly."
    assert len(generator.prompts) == 2


def test_export_requires_generated_blocks() -> None:
    pipeline = DocumentationPipeline()

    with pytest.raises(EmptyInputError, match="Please generate documentation first"):
        pipeline.export(["detailed-markdown"])


def test_export_requires_a_format() -> None:
    pipeline = DocumentationPipeline()
    pipeline.generate(make_project({"src/utils/math.js": MATH}))

    with pytest.raises(ValueError):
        pipeline.export([])


def test_export_continues_after_narrative_failure() -> None:
    pipeline = DocumentationPipeline()
    pipeline.generate(make_project({"src/utils/math.js": MATH}, name="calc"))
    seen: List[Tuple[str, int, int]] = []

    def progress(result: ExportResult, completed: int, total: int) -> None:
        seen.append((result.format_id, completed, total))

    report = pipeline.export(
        ["technical-qa", "detailed-markdown", "bogus", "json-schema"], progress=progress
    )

    assert [result.format_id for result in report.results] == [
        "technical-qa",
        "detailed-markdown",
        "bogus",
        "json-schema",
    ]
    assert [result.format_id for result in report.failed] == ["technical-qa", "bogus"]
    assert report.failed[0].error == "text generation is not configured"
    assert [result.artifact.suggested_filename for result in report.succeeded] == [
        "calc-detailed-markdown.md",
        "calc-json-schema.json",
    ]
    assert seen == [
        ("technical-qa", 1, 4),
        ("detailed-markdown", 2, 4),
        ("bogus", 3, 4),
        ("json-schema", 4, 4),
    ]


def test_export_renders_diagrams_after_formats() -> None:
    generator = SelectiveGenerator(marker="dependency graph", text="Narrative output.")
    pipeline = DocumentationPipeline(renderer=FormatRenderer(generator))
    pipeline.generate(make_project({"src/utils/math.js": MATH}, name="calc"))

    report = pipeline.export(["enhanced-readme"], ["architecture", "dependency"])

    assert [result.format_id for result in report.results] == [
        "enhanced-readme",
        "diagram-architecture",
        "diagram-dependency",
    ]
    assert [result.format_id for result in report.failed] == ["diagram-dependency"]
    assert report.succeeded[0].artifact.content == "Narrative output."


def test_export_reads_previous_generation_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    DocumentationPipeline(store=KeyValueStore(path)).generate(
        make_project({"src/utils/math.js": MATH}, name="calc")
    )

    report = DocumentationPipeline(store=KeyValueStore(path)).export(["code-extraction"])

    (result,) = report.succeeded
    assert "## Component 1: add" in result.artifact.content
    assert result.artifact.content.startswith("# Code Extraction for calc")


def test_analyze_persists_result() -> None:
    store = KeyValueStore()
    analysis = DocumentationPipeline(store=store).analyze(
        make_project({"src/utils/math.js": MATH, "package.json": PACKAGE})
    )

    assert analysis.architecture == "Node.js/JavaScript"
    assert store.get(ANALYSIS_KEY)["complexity"] == "low"


def test_broken_template_override_fails_only_its_format(tmp_path: Path) -> None:
    templates = tmp_path / "prompts"
    (templates / "formats").mkdir(parents=True)
    (templates / "formats" / "technical-qa.j2").write_text(
        "{{ project_name | nosuchfilter }}", encoding="utf-8"
    )
    (templates / "diagram.j2").write_text("{% if %}", encoding="utf-8")
    builder = PromptBuilder(templates)
    pipeline = DocumentationPipeline(
        renderer=FormatRenderer(RecordingGenerator("Narrative output."), builder)
    )
    pipeline.generate(make_project({"src/utils/math.js": MATH}, name="calc"))

    report = pipeline.export(
        ["technical-qa", "detailed-markdown", "enhanced-readme"], ["architecture"]
    )

    assert [result.format_id for result in report.results] == [
        "technical-qa",
        "detailed-markdown",
        "enhanced-readme",
        "diagram-architecture",
    ]
    assert [result.format_id for result in report.failed] == [
        "technical-qa",
        "diagram-architecture",
    ]
    assert "formats/technical-qa.j2" in report.failed[0].error
    assert report.succeeded[1].artifact.content == "Narrative output."
