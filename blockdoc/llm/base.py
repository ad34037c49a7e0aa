"""Narrow text-generation boundary used by the describer and renderers."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


class GenerationError(RuntimeError):
    """Raised when a text-generation backend cannot produce output."""


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns prompt sections into natural-language text."""

    def generate(self, prompt_sections: Sequence[str]) -> str:
        """Return generated text for the prompt or raise on failure."""


def join_prompt_sections(prompt_sections: Sequence[str]) -> str:
    return "\n\n".join(section.strip() for section in prompt_sections if section.strip())


__all__ = ["GenerationError", "TextGenerator", "join_prompt_sections"]
