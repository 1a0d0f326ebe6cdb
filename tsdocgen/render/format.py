"""Whitespace normalisation for generated markdown."""

from __future__ import annotations

from typing import List


class MarkdownFormatter:
    """Pretty-prints markdown so output does not depend on how it was concatenated.

    Rules applied outside fenced code blocks: line endings become ``\\n``,
    trailing whitespace is dropped, runs of blank lines collapse to one, and
    headings and fences are surrounded by a blank line. Code inside fences keeps
    its lines verbatim apart from trailing whitespace. Leading blank lines are
    removed so YAML front matter stays on the first line.
    """

    def format(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = []
        in_code = False
        pending_blank = False

        for line in normalized.split("\n"):
            stripped = line.rstrip()
            is_fence = stripped.lstrip().startswith("```")

            if in_code:
                cleaned.append(stripped)
                if is_fence:
                    in_code = False
                    pending_blank = True
                continue

            if not stripped:
                if cleaned:
                    pending_blank = True
                continue

            is_heading = stripped.startswith("#")
            if cleaned and (pending_blank or is_heading or is_fence):
                cleaned.append("")
            pending_blank = is_heading
            cleaned.append(stripped)
            if is_fence:
                in_code = True
                pending_blank = False

        while cleaned and cleaned[-1] == "":
            cleaned.pop()

        return "\n".join(cleaned) + "\n"


__all__ = ["MarkdownFormatter"]
