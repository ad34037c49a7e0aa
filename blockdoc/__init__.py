"""Block-level documentation generator for uploaded source trees."""

__version__ = "0.1.0"
