"""Automatic table-of-contents generation."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_INLINE_MARKUP = re.compile(r"(~~|\*\*|__|`)")


class TableOfContentsBuilder:
    """Builds a nested bullet list from the headings of a markdown document."""

    def __init__(self, min_level: int = 1, max_level: int = 4) -> None:
        self.min_level = min_level
        self.max_level = max_level

    def build(self, markdown: str) -> str:
        """Return the table of contents for *markdown*, or ``""`` without headings."""
        headings = self._collect_headings(markdown)
        if not headings:
            return ""

        top = min(level for level, _, _ in headings)
        output: List[str] = []
        for level, title, anchor in headings:
            indent = "  " * (level - top)
            output.append(f"{indent}- [{title}](#{anchor})")
        return "\n".join(output)

    def _collect_headings(self, markdown: str) -> List[Tuple[int, str, str]]:
        headings: List[Tuple[int, str, str]] = []
        seen: Dict[str, int] = {}
        in_code = False
        for line in markdown.splitlines():
            stripped = line.strip()
            if stripped.startswith("```"):
                in_code = not in_code
                continue
            if in_code:
                continue
            match = _HEADING.match(stripped)
            if not match:
                continue
            level = len(match.group(1))
            if level < self.min_level or level > self.max_level:
                continue
            title = _INLINE_MARKUP.sub("", match.group(2)).strip()
            anchor = self._unique(self._slugify(title), seen)
            headings.append((level, title, anchor))
        return headings

    @staticmethod
    def _unique(slug: str, seen: Dict[str, int]) -> str:
        count = seen.get(slug, 0)
        seen[slug] = count + 1
        return slug if count == 0 else f"{slug}-{count}"

    @staticmethod
    def _slugify(title: str) -> str:
        slug = title.lower()
        slug = re.sub(r"[^\w\- ]", "", slug)
        return slug.replace(" ", "-")


__all__ = ["TableOfContentsBuilder"]
