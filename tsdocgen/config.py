"""Configuration loading for tsdocgen (.tsdocgen.yml + package.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".tsdocgen.yml"

INHERIT = "inherit"
UNBOUNDED = "unbounded"

Concurrency = Union[int, str]

DEFAULT_THEME = "pmarsceill/just-the-docs"

DEFAULT_COMPILER_OPTIONS: Dict[str, Any] = {
    "noEmit": True,
    "strict": True,
    "skipLibCheck": True,
    "esModuleInterop": True,
    "moduleResolution": "node",
    "module": "CommonJS",
    "target": "ES2021",
    "lib": ["ES2021"],
}

_KNOWN_KEYS = {
    "project_name",
    "project_homepage",
    "src_dir",
    "out_dir",
    "theme",
    "enable_search",
    "check_examples",
    "exclude",
    "parser",
    "concurrency",
    "examples_compiler_options",
}


@dataclass
class DocgenConfig:
    """Effective settings for one documentation run.

    Attributes:
        root: Project root; relative ``src_dir``/``out_dir`` resolve against it.
        project_name: Package name examples import from, e.g. ``my-lib``.
        project_homepage: Link rendered in the site's auxiliary navigation.
        src_dir: Directory scanned for ``*.ts`` sources.
        out_dir: Directory receiving the generated documents.
        theme: ``remote_theme`` written to ``_config.yml``.
        enable_search: ``search_enabled`` written to ``_config.yml``.
        check_examples: Whether examples are type-checked before rendering.
        exclude: Glob patterns removed from the source scan.
        parser: Entry-point name of the module parser; ``None`` picks the first.
        concurrency: Bound on simultaneous file operations, a positive int,
            ``"inherit"`` or ``"unbounded"``.
        examples_compiler_options: ``compilerOptions`` of the examples tsconfig.
    """

    root: Path
    project_name: str
    project_homepage: str = ""
    src_dir: str = "src"
    out_dir: str = "docs"
    theme: str = DEFAULT_THEME
    enable_search: bool = True
    check_examples: bool = True
    exclude: List[str] = field(default_factory=list)
    parser: Optional[str] = None
    concurrency: Concurrency = INHERIT
    examples_compiler_options: Dict[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_COMPILER_OPTIONS)
    )

    def __post_init__(self) -> None:
        self.concurrency = parse_concurrency(self.concurrency)


def load_config(config_path: Path) -> DocgenConfig:
    """Load configuration for the project at *config_path* (file or directory)."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    package = _read_package_json(root / "package.json")

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown {CONFIG_FILENAME} key(s): {', '.join(unknown)}")

    project_name = _as_str(data.get("project_name")) or _as_str(package.get("name"))
    if not project_name:
        project_name = root.name
    homepage = _as_str(data.get("project_homepage")) or _as_str(package.get("homepage")) or ""

    compiler_options = data.get("examples_compiler_options")
    if compiler_options is None:
        compiler_options = dict(DEFAULT_COMPILER_OPTIONS)
    elif not isinstance(compiler_options, dict):
        raise ConfigError("'examples_compiler_options' must be a mapping")

    enable_search = _as_bool(data.get("enable_search"))
    check_examples = _as_bool(data.get("check_examples"))

    return DocgenConfig(
        root=root,
        project_name=project_name,
        project_homepage=homepage,
        src_dir=_as_str(data.get("src_dir")) or "src",
        out_dir=_as_str(data.get("out_dir")) or "docs",
        theme=_as_str(data.get("theme")) or DEFAULT_THEME,
        enable_search=True if enable_search is None else enable_search,
        check_examples=True if check_examples is None else check_examples,
        exclude=_as_str_list(data.get("exclude")),
        parser=_as_str(data.get("parser")),
        concurrency=data.get("concurrency", INHERIT),
        examples_compiler_options=compiler_options,
    )


def parse_concurrency(value: Any) -> Concurrency:
    """Validate a concurrency setting."""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid concurrency setting: {value!r}")
    if isinstance(value, int):
        if value < 1:
            raise ConfigError(f"Concurrency must be at least 1, got {value}")
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {INHERIT, UNBOUNDED}:
            return lowered
        if lowered.isdigit():
            return parse_concurrency(int(lowered))
    raise ConfigError(
        f"Invalid concurrency setting: {value!r} "
        f"(expected a positive integer, '{INHERIT}' or '{UNBOUNDED}')"
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _read_package_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Unable to parse JSON: {path}: {exc}") from exc
    return loaded if isinstance(loaded, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_COMPILER_OPTIONS",
    "DocgenConfig",
    "INHERIT",
    "UNBOUNDED",
    "load_config",
    "parse_concurrency",
]
