"""Text-generation adapters."""

from .base import GenerationError, TextGenerator
from .runner import LLMRunner

__all__ = ["GenerationError", "LLMRunner", "TextGenerator"]
