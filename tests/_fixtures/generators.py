"""Deterministic text generators standing in for a model runtime."""

from __future__ import annotations

from typing import List, Sequence

from blockdoc.llm.base import GenerationError


class RecordingGenerator:
    """Returns canned text and records every prompt it receives."""

    def __init__(self, text: str = "Generated text.") -> None:
        self.text = text
        self.prompts: List[List[str]] = []

    def generate(self, prompt_sections: Sequence[str]) -> str:
        self.prompts.append(list(prompt_sections))
        return self.text


class FailingGenerator:
    """Raises on every call."""

    def __init__(self, message: str = "model runtime offline") -> None:
        self.message = message
        self.calls = 0

    def generate(self, prompt_sections: Sequence[str]) -> str:
        self.calls += 1
        raise GenerationError(self.message)


class SelectiveGenerator:
    """Fails for prompts containing ``marker`` and answers everything else."""

    def __init__(self, marker: str, text: str = "Generated text.") -> None:
        self.marker = marker
        self.text = text

    def generate(self, prompt_sections: Sequence[str]) -> str:
        if any(self.marker in section for section in prompt_sections):
            raise GenerationError(f"refused prompt mentioning {self.marker}")
        return self.text


__all__ = ["FailingGenerator", "RecordingGenerator", "SelectiveGenerator"]
