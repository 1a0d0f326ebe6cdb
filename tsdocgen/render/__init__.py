"""Rendering engine: modules to markdown documents."""

from .format import MarkdownFormatter
from .markdown import (
    DEFAULT_CATEGORY,
    MarkdownRenderer,
    create_environment,
    print_module,
    print_printable,
)
from .site import SiteRenderer, homepage_navigation_header
from .toc import TableOfContentsBuilder

__all__ = [
    "DEFAULT_CATEGORY",
    "MarkdownFormatter",
    "MarkdownRenderer",
    "SiteRenderer",
    "TableOfContentsBuilder",
    "create_environment",
    "homepage_navigation_header",
    "print_module",
    "print_printable",
]
