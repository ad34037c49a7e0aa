"""Tests for export format rendering."""

from __future__ import annotations

import json
from typing import List

import pytest

from blockdoc.models import BLOCK_KINDS, Block, Project, Section
from blockdoc.render import ExportError, FormatRenderer, UnknownFormatError, suggested_filename
from blockdoc.render.formats import render_consolidated_text, render_detailed_markdown
from tests._fixtures.generators import FailingGenerator, RecordingGenerator
from tests._fixtures.project_builder import make_project


def _block(index: int, directory: str) -> Block:
    return Block(
        id=f"code-{index}",
        title=f"helper{index}",
        description=f"Helper number {index}.",
        code=f"function helper{index}() {{\n  return {index};\n}}",
        language="js",
        file_path=f"{directory}/helpers.js",
        kind="function",
    )


def _sections(count: int, blocks_per_section: int) -> List[Section]:
    sections = []
    index = 1
    for number in range(1, count + 1):
        directory = f"pkg/area-{number:02d}"
        blocks = []
        for _ in range(blocks_per_section):
            blocks.append(_block(index, directory))
            index += 1
        sections.append(
            Section(
                id=f"section-{number}",
                title=directory,
                description=f"Documentation for {directory}",
                narrative=f"Narrative for {directory}.",
                blocks=tuple(blocks),
            )
        )
    return sections


@pytest.fixture
def project() -> Project:
    return make_project({"pkg/area-01/helpers.js": "function helper1() {}"}, name="demo")


def test_json_schema_has_fixed_shape_with_no_blocks(project: Project) -> None:
    artifact = FormatRenderer().render("json-schema", project, [], [])
    schema = json.loads(artifact.content)

    assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
    assert schema["title"] == "demo Communication Schema"
    project_schema = schema["properties"]["project"]["properties"]
    assert project_schema["name"]["const"] == "demo"
    component = project_schema["components"]["items"]["properties"]
    assert set(component) == {
        "id",
        "name",
        "type",
        "filePath",
        "dependencies",
        "exports",
        "communications",
    }
    assert component["type"]["enum"] == list(BLOCK_KINDS)
    assert artifact.suggested_filename == "demo-json-schema.json"


def test_json_schema_does_not_enumerate_blocks(project: Project) -> None:
    sections = _sections(2, 3)
    blocks = [block for section in sections for block in section.blocks]
    renderer = FormatRenderer()

    with_blocks = renderer.render("json-schema", project, blocks, sections).content
    without_blocks = renderer.render("json-schema", project, [], []).content

    assert with_blocks == without_blocks


def test_detailed_markdown_is_idempotent(project: Project) -> None:
    sections = _sections(2, 2)
    blocks = [block for section in sections for block in section.blocks]

    first = render_detailed_markdown(project, blocks, sections)
    second = render_detailed_markdown(project, blocks, sections)

    assert first == second
    assert first.startswith("# demo - Complete Documentation\n")
    assert "- **Extracted Components**: 4" in first
    assert "## pkg/area-01\n\nNarrative for pkg/area-01." in first
    assert "### helper3\n\n**File**: `pkg/area-02/helpers.js`" in first
    assert "```js\nfunction helper1() {\n  return 1;\n}\n```" in first


def test_consolidated_text_caps_sections_and_blocks(project: Project) -> None:
    sections = _sections(12, 7)
    blocks = [block for section in sections for block in section.blocks]

    content = render_consolidated_text(project, blocks, sections)

    assert content.startswith("PROJECT: demo\n")
    assert f"COMPONENTS: {len(blocks)}" in content
    assert content.count("SECTION: ") == 10
    assert "SECTION: pkg/area-10" in content
    assert "pkg/area-11" not in content
    assert "pkg/area-12" not in content
    assert content.count("CODE: ") == 50
    first_section = content.split("SECTION: ")[1]
    assert "CODE: helper5 " in first_section
    assert "CODE: helper6 " not in first_section


def test_code_extraction_numbers_blocks_in_discovery_order(project: Project) -> None:
    sections = _sections(2, 2)
    blocks = [block for section in sections for block in section.blocks]

    artifact = FormatRenderer().render("code-extraction", project, blocks, sections)

    assert artifact.content.startswith("# Code Extraction for demo\n")
    assert "## Component 1: helper1" in artifact.content
    assert "## Component 4: helper4" in artifact.content
    assert artifact.content.index("helper2") < artifact.content.index("helper3")
    assert "**Type**: function" in artifact.content


def test_narrative_format_uses_generator(project: Project) -> None:
    generator = RecordingGenerator("# Q&A\n\nQ: What?\nA: This.")
    sections = _sections(1, 1)
    artifact = FormatRenderer(generator).render(
        "technical-qa", project, list(sections[0].blocks), sections
    )

    assert artifact.content == "# Q&A\n\nQ: What?\nA: This."
    assert artifact.suggested_filename == "demo-technical-qa.md"
    (prompt,) = generator.prompts[0]
    assert "demo" in prompt
    assert "1 components" in prompt


def test_narrative_format_without_generator_fails(project: Project) -> None:
    with pytest.raises(ExportError) as excinfo:
        FormatRenderer().render("enhanced-readme", project, [], [])

    assert excinfo.value.format_id == "enhanced-readme"


def test_narrative_format_propagates_generator_failure(project: Project) -> None:
    renderer = FormatRenderer(FailingGenerator("quota exhausted"))

    with pytest.raises(ExportError) as excinfo:
        renderer.render("implementation-guide", project, [], [])

    assert excinfo.value.message == "quota exhausted"


def test_unknown_format_is_rejected(project: Project) -> None:
    with pytest.raises(UnknownFormatError):
        FormatRenderer().render("docx", project, [], [])


def test_diagram_rendering(project: Project) -> None:
    generator = RecordingGenerator("Boxes and arrows.")
    artifact = FormatRenderer(generator).render_diagram("architecture", project, [])

    assert artifact.format_id == "diagram-architecture"
    assert artifact.suggested_filename == "demo-diagram-architecture.txt"
    assert "architecture diagram" in generator.prompts[0][0]

    with pytest.raises(UnknownFormatError):
        FormatRenderer(generator).render_diagram("gantt", project, [])


@pytest.mark.parametrize(
    ("format_id", "filename"),
    [
        ("detailed-markdown", "demo-detailed-markdown.md"),
        ("consolidated-txt", "demo-consolidated-txt.txt"),
        ("json-schema", "demo-json-schema.json"),
        ("comprehensive-pdf", "demo-comprehensive-pdf.md"),
    ],
)
def test_suggested_filename_extensions(format_id: str, filename: str) -> None:
    assert suggested_filename("demo", format_id) == filename
