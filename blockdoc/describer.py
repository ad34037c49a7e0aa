"""Natural-language descriptions for blocks and sections with deterministic fallback."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .failsafe import (
    block_description_stub,
    config_description_stub,
    format_reason,
    section_narrative_stub,
)
from .llm.base import TextGenerator
from .logging import get_logger
from .prompting.builder import PromptBuilder


class Describer:
    """Wraps a text generator so that every request yields usable text.

    Generator failures, blank responses and a missing generator all resolve
    to the templated copy in :mod:`blockdoc.failsafe`; nothing raised by the
    generator reaches the caller.
    """

    def __init__(
        self,
        generator: TextGenerator | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.generator = generator
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("describer")

    def describe(self, code: str, kind: str, file_name: str) -> str:
        return self._generate(
            lambda: self.prompt_builder.block_prompt(code, kind, file_name),
            lambda: block_description_stub(code, kind, file_name),
            label=f"{kind} in {file_name}",
        )

    def describe_config(self, content: str, file_name: str) -> str:
        return self._generate(
            lambda: self.prompt_builder.config_prompt(content, file_name),
            lambda: config_description_stub(file_name),
            label=f"configuration {file_name}",
        )

    def narrate(self, group_key: str, project_name: str, block_count: int) -> str:
        return self._generate(
            lambda: self.prompt_builder.section_prompt(group_key, project_name, block_count),
            lambda: section_narrative_stub(group_key, block_count),
            label=f"section {group_key}",
        )

    def _generate(
        self,
        build_prompt: Callable[[], Sequence[str]],
        fallback: Callable[[], str],
        *,
        label: str,
    ) -> str:
        if self.generator is None:
            return fallback()
        try:
            text = self.generator.generate(build_prompt())
        except Exception as exc:
            self._log_fallback(label, exc)
            return fallback()
        if not isinstance(text, str) or not text.strip():
            self.logger.warning("Empty description for %s; using fallback text", label)
            return fallback()
        return text.strip()

    def _log_fallback(self, label: str, exc: Exception) -> None:
        reason = format_reason(str(exc)) or exc.__class__.__name__
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Description failed for %s", label, exc_info=exc)
        self.logger.warning("Description failed for %s (%s); using fallback text", label, reason)


__all__ = ["Describer"]
