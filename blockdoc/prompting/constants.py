"""Shared constants for export formats, diagrams and prompting."""

from __future__ import annotations

EXPORT_FORMATS: tuple[str, ...] = (
    "comprehensive-pdf",
    "detailed-markdown",
    "consolidated-txt",
    "code-extraction",
    "technical-qa",
    "implementation-guide",
    "json-schema",
    "enhanced-readme",
)

FORMAT_TITLES: dict[str, str] = {
    "comprehensive-pdf": "Comprehensive PDF",
    "detailed-markdown": "Detailed Markdown",
    "consolidated-txt": "Consolidated Text",
    "code-extraction": "Code Extraction",
    "technical-qa": "Technical Q&A",
    "implementation-guide": "Implementation Guide",
    "json-schema": "Communication Schema",
    "enhanced-readme": "Enhanced README.md",
}

# Formats whose content comes entirely from the text generator.
NARRATIVE_FORMATS: frozenset[str] = frozenset(
    {"technical-qa", "implementation-guide", "enhanced-readme", "comprehensive-pdf"}
)

FORMAT_EXTENSIONS: dict[str, str] = {
    "comprehensive-pdf": "md",
    "detailed-markdown": "md",
    "consolidated-txt": "txt",
    "code-extraction": "md",
    "technical-qa": "md",
    "implementation-guide": "md",
    "json-schema": "json",
    "enhanced-readme": "md",
}

DIAGRAM_TYPES: tuple[str, ...] = (
    "architecture",
    "flowchart",
    "dependency",
    "data-flow",
    "component",
    "timeline",
)

DIAGRAM_TITLES: dict[str, str] = {
    "architecture": "Architecture Diagram",
    "flowchart": "Process Flowchart",
    "dependency": "Dependency Graph",
    "data-flow": "Data Flow Diagram",
    "component": "Component Diagram",
    "timeline": "Implementation Timeline",
}

CONSOLIDATED_SECTION_LIMIT = 10
CONSOLIDATED_BLOCK_LIMIT = 5


__all__ = [
    "CONSOLIDATED_BLOCK_LIMIT",
    "CONSOLIDATED_SECTION_LIMIT",
    "DIAGRAM_TITLES",
    "DIAGRAM_TYPES",
    "EXPORT_FORMATS",
    "FORMAT_EXTENSIONS",
    "FORMAT_TITLES",
    "NARRATIVE_FORMATS",
]
