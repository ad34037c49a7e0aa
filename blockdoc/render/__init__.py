"""Export rendering."""

from .renderer import ExportError, FormatRenderer, UnknownFormatError, suggested_filename

__all__ = ["ExportError", "FormatRenderer", "UnknownFormatError", "suggested_filename"]
