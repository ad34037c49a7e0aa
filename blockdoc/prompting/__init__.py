"""Prompt construction and export format constants."""

from .builder import PromptBuilder

__all__ = ["PromptBuilder"]
