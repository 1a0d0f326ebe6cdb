"""Markdown printers for documented modules."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, assert_never

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..errors import RenderError
from ..models import (
    Class,
    Constant,
    Documentable,
    Export,
    Function,
    Interface,
    Method,
    Module,
    Namespace,
    Printable,
    Property,
    TypeAlias,
)
from .format import MarkdownFormatter
from .toc import TableOfContentsBuilder

DEFAULT_CATEGORY = "utils"

# Names the Jekyll site templates treat specially.
RESERVED_NAMES = frozenset({"hasOwnProperty"})
RESERVED_SUFFIX = "(function)"

BASE_HEADING_LEVEL = 2
MEMBER_HEADING_LEVEL = 3
MAX_NAMESPACE_DEPTH = 2

TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return the Jinja environment used for every rendered document."""
    return Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def get_title(name: str, deprecated: bool, suffix: Optional[str] = None) -> str:
    if name.strip() in RESERVED_NAMES:
        name = f"{name} {RESERVED_SUFFIX}"
    title = f"~~{name}~~" if deprecated else name
    return f"{title} {suffix}" if suffix else title


def heading_level(depth: int) -> int:
    """Heading level for a namespace member rendered *depth* levels deep."""
    if depth < 0 or depth > MAX_NAMESPACE_DEPTH:
        raise RenderError(f"Unsupported namespace nesting: {depth + 1}")
    return BASE_HEADING_LEVEL + depth


def get_printables(module: Module) -> List[Printable]:
    printables: List[Printable] = []
    printables.extend(module.classes)
    printables.extend(module.constants)
    printables.extend(module.exports)
    printables.extend(module.functions)
    printables.extend(module.interfaces)
    printables.extend(module.type_aliases)
    printables.extend(module.namespaces)
    return printables


def group_printables(printables: Sequence[Printable]) -> List[tuple[str, List[Printable]]]:
    """Group by category (``utils`` when absent), categories and names sorted."""
    groups: Dict[str, List[Printable]] = {}
    for printable in printables:
        groups.setdefault(printable.category or DEFAULT_CATEGORY, []).append(printable)
    return [
        (category, sorted(members, key=lambda printable: printable.name))
        for category, members in sorted(groups.items(), key=lambda item: item[0])
    ]


class MarkdownRenderer:
    """Serialises modules to markdown; holds no state between calls."""

    def __init__(
        self,
        *,
        environment: Environment | None = None,
        formatter: MarkdownFormatter | None = None,
        toc_builder: TableOfContentsBuilder | None = None,
    ) -> None:
        self._env = environment or create_environment()
        self.formatter = formatter or MarkdownFormatter()
        self.toc_builder = toc_builder or TableOfContentsBuilder()

    def print_module(self, module: Module, order: int) -> str:
        """Render the full document for *module* at 1-based navigation *order*."""
        groups = [
            {
                "category": category,
                "entries": [self.print_printable(printable) for printable in printables],
            }
            for category, printables in group_printables(get_printables(module))
        ]
        body = self._env.get_template("categories.md.j2").render(groups=groups)
        rendered = self._env.get_template("module.md.j2").render(
            title="/".join(module.path[1:]),
            order=order,
            overview=self._print_overview(module),
            toc=self.toc_builder.build(body),
            body=body,
        )
        return self.formatter.format(rendered)

    def print_printable(self, printable: Printable, depth: int = 0) -> str:
        if isinstance(printable, Class):
            return self._print_class(printable)
        if isinstance(printable, Constant):
            return self._print_entry(printable, BASE_HEADING_LEVEL, signature=printable.signature)
        if isinstance(printable, Export):
            return self._print_entry(printable, BASE_HEADING_LEVEL, signature=printable.signature)
        if isinstance(printable, Function):
            return self._print_entry(
                printable, BASE_HEADING_LEVEL, signature="\n".join(printable.signatures)
            )
        if isinstance(printable, Interface):
            return self._print_entry(
                printable, heading_level(depth), "(interface)", signature=printable.signature
            )
        if isinstance(printable, TypeAlias):
            return self._print_entry(
                printable, heading_level(depth), "(type alias)", signature=printable.signature
            )
        if isinstance(printable, Namespace):
            return self._print_namespace(printable, depth)
        assert_never(printable)

    def _print_overview(self, module: Module) -> str:
        return self._print_entry(module, BASE_HEADING_LEVEL, "overview")

    def _print_class(self, cls: Class) -> str:
        parts = [self._print_entry(cls, BASE_HEADING_LEVEL, "(class)", signature=cls.signature)]
        parts.extend(self._print_method(method, "(static method)") for method in cls.static_methods)
        parts.extend(self._print_method(method, "(method)") for method in cls.methods)
        parts.extend(self._print_property(prop) for prop in cls.properties)
        return "\n".join(parts)

    def _print_method(self, method: Method, suffix: str) -> str:
        return self._print_entry(
            method, MEMBER_HEADING_LEVEL, suffix, signature="\n".join(method.signatures)
        )

    def _print_property(self, prop: Property) -> str:
        return self._print_entry(prop, MEMBER_HEADING_LEVEL, "(property)", signature=prop.signature)

    def _print_namespace(self, namespace: Namespace, depth: int) -> str:
        parts = [self._print_entry(namespace, heading_level(depth), "(namespace)")]
        parts.extend(self.print_printable(item, depth + 1) for item in namespace.interfaces)
        parts.extend(self.print_printable(item, depth + 1) for item in namespace.type_aliases)
        parts.extend(self.print_printable(item, depth + 1) for item in namespace.namespaces)
        return "\n".join(parts)

    def _print_entry(
        self,
        doc: Documentable,
        level: int,
        suffix: Optional[str] = None,
        *,
        signature: Optional[str] = None,
    ) -> str:
        return self._env.get_template("entry.md.j2").render(
            level=level,
            title=get_title(doc.name, doc.deprecated, suffix),
            description=doc.description or "",
            signature=signature,
            examples=list(doc.examples),
            since=doc.since,
        )


def print_module(module: Module, order: int) -> str:
    """Render *module* with a freshly built renderer."""
    return MarkdownRenderer().print_module(module, order)


def print_printable(printable: Printable) -> str:
    """Render a single top-level printable with a freshly built renderer."""
    return MarkdownRenderer().print_printable(printable)


__all__ = [
    "BASE_HEADING_LEVEL",
    "DEFAULT_CATEGORY",
    "MAX_NAMESPACE_DEPTH",
    "MarkdownRenderer",
    "RESERVED_NAMES",
    "create_environment",
    "get_printables",
    "get_title",
    "group_printables",
    "heading_level",
    "print_module",
    "print_printable",
]
