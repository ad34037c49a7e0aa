"""Block segmentation and classification."""

from .classifier import classify, classify_block, extract_title, fallback_title
from .segmenter import Segmenter, brace_delta

__all__ = [
    "Segmenter",
    "brace_delta",
    "classify",
    "classify_block",
    "extract_title",
    "fallback_title",
]
