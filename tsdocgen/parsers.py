"""Parser collaborator protocol and entry-point discovery.

tsdocgen does not read TypeScript itself. A parser plugin registers under the
``tsdocgen.parsers`` entry-point group and turns source files into modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import metadata
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from .errors import ConfigError
from .fs import File
from .models import Module

_ENTRY_POINT_GROUP = "tsdocgen.parsers"


@dataclass
class ParseResult:
    """Modules parsed from the sources, or the per-file error messages."""

    modules: List[Module] = field(default_factory=list)
    errors: List[List[str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@runtime_checkable
class ModuleParser(Protocol):
    def parse_files(self, files: Sequence[File]) -> ParseResult:
        ...


def discover_parser(name: Optional[str] = None) -> ModuleParser:
    """Load the parser registered as *name*, or the first one available."""
    entries = sorted(_iter_entry_points(), key=lambda entry: entry.name)
    if name is not None:
        entries = [entry for entry in entries if entry.name == name]
        if not entries:
            raise ConfigError(f"Unknown parser requested: '{name}'")
    if not entries:
        raise ConfigError(
            f"No module parser registered under the '{_ENTRY_POINT_GROUP}' entry-point group"
        )
    entry = entries[0]
    try:
        loaded = entry.load()
    except Exception as exc:
        raise ConfigError(f"Failed to load parser entry point '{entry.name}': {exc}") from exc
    return _coerce_parser(entry.name, loaded)


def _coerce_parser(name: str, obj: object) -> ModuleParser:
    if isinstance(obj, ModuleParser) and not isinstance(obj, type):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, ModuleParser):
            return instance
    raise ConfigError(f"Parser entry point '{name}' must provide a parse_files() method")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = ["ModuleParser", "ParseResult", "discover_parser"]
