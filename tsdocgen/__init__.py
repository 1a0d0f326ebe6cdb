"""Markdown API documentation generator for TypeScript projects."""

__version__ = "0.1.0"
