"""Documentation data model shared across tsdocgen components.

Every documented unit is an immutable value. The external parser builds the
module tree once; rendering and example verification only read it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True, kw_only=True)
class Documentable:
    """Attributes carried by every documented unit."""

    name: str
    description: Optional[str] = None
    since: Optional[str] = None
    deprecated: bool = False
    examples: Tuple[str, ...] = ()
    category: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class Method(Documentable):
    signatures: Tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class Property(Documentable):
    signature: str


@dataclass(frozen=True, kw_only=True)
class Class(Documentable):
    kind: ClassVar[str] = "class"

    signature: str
    methods: Tuple[Method, ...] = ()
    static_methods: Tuple[Method, ...] = ()
    properties: Tuple[Property, ...] = ()


@dataclass(frozen=True, kw_only=True)
class Constant(Documentable):
    kind: ClassVar[str] = "constant"

    signature: str


@dataclass(frozen=True, kw_only=True)
class Export(Documentable):
    kind: ClassVar[str] = "export"

    signature: str


@dataclass(frozen=True, kw_only=True)
class Function(Documentable):
    kind: ClassVar[str] = "function"

    signatures: Tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class Interface(Documentable):
    kind: ClassVar[str] = "interface"

    signature: str


@dataclass(frozen=True, kw_only=True)
class TypeAlias(Documentable):
    kind: ClassVar[str] = "type_alias"

    signature: str


@dataclass(frozen=True, kw_only=True)
class Namespace(Documentable):
    """A namespace; nested namespaces form a tree, never a cycle."""

    kind: ClassVar[str] = "namespace"

    interfaces: Tuple[Interface, ...] = ()
    type_aliases: Tuple[TypeAlias, ...] = ()
    namespaces: Tuple["Namespace", ...] = ()


@dataclass(frozen=True, kw_only=True)
class Module(Documentable):
    """Root container for everything documented in one source file."""

    path: Tuple[str, ...]
    classes: Tuple[Class, ...] = ()
    interfaces: Tuple[Interface, ...] = ()
    functions: Tuple[Function, ...] = ()
    type_aliases: Tuple[TypeAlias, ...] = ()
    constants: Tuple[Constant, ...] = ()
    exports: Tuple[Export, ...] = ()
    namespaces: Tuple[Namespace, ...] = ()


Printable = Union[Class, Constant, Export, Function, Interface, TypeAlias, Namespace]


# ----------------------------------------------------------------------
# Constructors


def make_documentable(
    name: str,
    description: Optional[str] = None,
    since: Optional[str] = None,
    deprecated: bool = False,
    examples: Iterable[str] = (),
    category: Optional[str] = None,
) -> Documentable:
    return Documentable(
        name=name,
        description=description,
        since=since,
        deprecated=deprecated,
        examples=tuple(examples),
        category=category,
    )


def _fields(doc: Documentable) -> dict:
    return {
        "name": doc.name,
        "description": doc.description,
        "since": doc.since,
        "deprecated": doc.deprecated,
        "examples": tuple(doc.examples),
        "category": doc.category,
    }


def make_method(doc: Documentable, signatures: Sequence[str]) -> Method:
    return Method(**_fields(doc), signatures=tuple(signatures))


def make_property(doc: Documentable, signature: str) -> Property:
    return Property(**_fields(doc), signature=signature)


def make_class(
    doc: Documentable,
    signature: str,
    methods: Sequence[Method] = (),
    static_methods: Sequence[Method] = (),
    properties: Sequence[Property] = (),
) -> Class:
    return Class(
        **_fields(doc),
        signature=signature,
        methods=tuple(methods),
        static_methods=tuple(static_methods),
        properties=tuple(properties),
    )


def make_constant(doc: Documentable, signature: str) -> Constant:
    return Constant(**_fields(doc), signature=signature)


def make_export(doc: Documentable, signature: str) -> Export:
    return Export(**_fields(doc), signature=signature)


def make_function(doc: Documentable, signatures: Sequence[str]) -> Function:
    return Function(**_fields(doc), signatures=tuple(signatures))


def make_interface(doc: Documentable, signature: str) -> Interface:
    return Interface(**_fields(doc), signature=signature)


def make_type_alias(doc: Documentable, signature: str) -> TypeAlias:
    return TypeAlias(**_fields(doc), signature=signature)


def make_namespace(
    doc: Documentable,
    interfaces: Sequence[Interface] = (),
    type_aliases: Sequence[TypeAlias] = (),
    namespaces: Sequence[Namespace] = (),
) -> Namespace:
    return Namespace(
        **_fields(doc),
        interfaces=tuple(interfaces),
        type_aliases=tuple(type_aliases),
        namespaces=tuple(namespaces),
    )


def make_module(
    doc: Documentable,
    path: Sequence[str],
    classes: Sequence[Class] = (),
    interfaces: Sequence[Interface] = (),
    functions: Sequence[Function] = (),
    type_aliases: Sequence[TypeAlias] = (),
    constants: Sequence[Constant] = (),
    exports: Sequence[Export] = (),
    namespaces: Sequence[Namespace] = (),
) -> Module:
    return Module(
        **_fields(doc),
        path=tuple(path),
        classes=tuple(classes),
        interfaces=tuple(interfaces),
        functions=tuple(functions),
        type_aliases=tuple(type_aliases),
        constants=tuple(constants),
        exports=tuple(exports),
        namespaces=tuple(namespaces),
    )


# ----------------------------------------------------------------------
# Canonical module ordering


def module_sort_key(module: Module) -> Tuple[str, ...]:
    """Segment-wise key; tuples compare lexicographically element by element."""
    return tuple(module.path)


def compare_modules(left: Module, right: Module) -> int:
    """Return -1, 0 or 1 comparing modules by their path segments."""
    left_key = module_sort_key(left)
    right_key = module_sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def sort_modules(modules: Iterable[Module]) -> List[Module]:
    """Return modules in canonical (navigation) order; equal paths keep input order."""
    return sorted(modules, key=module_sort_key)


__all__ = [
    "Class",
    "Constant",
    "Documentable",
    "Export",
    "Function",
    "Interface",
    "Method",
    "Module",
    "Namespace",
    "Printable",
    "Property",
    "TypeAlias",
    "compare_modules",
    "make_class",
    "make_constant",
    "make_documentable",
    "make_export",
    "make_function",
    "make_interface",
    "make_method",
    "make_module",
    "make_namespace",
    "make_property",
    "make_type_alias",
    "module_sort_key",
    "sort_modules",
]
