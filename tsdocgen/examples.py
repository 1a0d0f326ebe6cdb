"""Type-checking of the code examples embedded in documentation."""

from __future__ import annotations

import hashlib
import json
import os
import posixpath
import re
from typing import Iterable, List, Sequence, Set

from .concurrency import run_concurrently
from .config import DocgenConfig
from .errors import ExampleNameCollisionError, RemoveFileError, format_error
from .fs import File, FileSystem
from .logging import get_logger
from .models import Documentable, Module, Namespace
from .process import ChildProcess, Process

DEFAULT_SRC_IMPORT = "../../src"

_ASSERT_REFERENCE = re.compile(r"\bassert\.")
_ASSERT_IMPORT = re.compile(
    r"^\s*import\s+(?:\*\s+as\s+)?assert\b|\brequire\(\s*['\"]assert['\"]\s*\)",
    re.MULTILINE,
)
_ASSERT_SHIM = "import * as assert from 'assert'"


def rewrite_imports(source: str, project_name: str, src_import: str = DEFAULT_SRC_IMPORT) -> str:
    """Point ``from '<project>[/lib][/<sub>]'`` imports at the local sources."""
    pattern = re.compile(
        r"from (?P<quote>['\"])"
        + re.escape(project_name)
        + r"(?:/lib)?(?:/(?P<path>[^'\"\n]*))?(?P=quote)"
    )

    def _replace(match: re.Match[str]) -> str:
        subpath = match.group("path")
        target = f"{src_import}/{subpath}" if subpath else src_import
        return f"from '{target}'"

    return pattern.sub(_replace, source)


def add_assert_import(source: str) -> str:
    """Prepend an ``assert`` import when the example uses it without importing it."""
    if _ASSERT_REFERENCE.search(source) and not _ASSERT_IMPORT.search(source):
        return f"{_ASSERT_SHIM}\n{source}"
    return source


def module_prefix(path: Sequence[str]) -> str:
    """File-name prefix for the examples of the module at *path*.

    Joined segments alone are ambiguous (``src/a/b.ts`` and ``src/a-b.ts``), so
    a digest of the segment tuple follows them.
    """
    digest = hashlib.sha1("\0".join(path).encode("utf-8")).hexdigest()[:8]
    return f"{'-'.join(path)}-{digest}"


def collect_examples(modules: Iterable[Module], examples_dir: str) -> List[File]:
    """Return one candidate file per example, named injectively.

    File names follow ``<module prefix>-<role>-<name>-<index>.ts`` where the
    role identifies the kind of unit and, for members, its owner.
    """
    files: List[File] = []
    seen: Set[str] = set()

    def add(prefix: str, role: str, doc: Documentable) -> None:
        for index, content in enumerate(doc.examples):
            path = os.path.join(examples_dir, f"{prefix}-{role}-{doc.name}-{index}.ts")
            if path in seen:
                raise ExampleNameCollisionError(path)
            seen.add(path)
            files.append(File(path=path, content=f"{content}\n", overwrite=True))

    def add_namespace(prefix: str, parents: Sequence[str], namespace: Namespace) -> None:
        add(prefix, f"{'-'.join(parents)}-ns-namespace" if parents else "namespace", namespace)
        scope = [*parents, namespace.name]
        owner = "-".join(scope)
        for interface in namespace.interfaces:
            add(prefix, f"{owner}-ns-interface", interface)
        for alias in namespace.type_aliases:
            add(prefix, f"{owner}-ns-typealias", alias)
        for nested in namespace.namespaces:
            add_namespace(prefix, scope, nested)

    for module in modules:
        prefix = module_prefix(module.path)
        add(prefix, "module", module)
        for cls in module.classes:
            add(prefix, "class", cls)
            for method in cls.static_methods:
                add(prefix, f"{cls.name}-staticmethod", method)
            for method in cls.methods:
                add(prefix, f"{cls.name}-method", method)
            for prop in cls.properties:
                add(prefix, f"{cls.name}-property", prop)
        for interface in module.interfaces:
            add(prefix, "interface", interface)
        for alias in module.type_aliases:
            add(prefix, "typealias", alias)
        for constant in module.constants:
            add(prefix, "constant", constant)
        for export in module.exports:
            add(prefix, "export", export)
        for function in module.functions:
            add(prefix, "function", function)
        for namespace in module.namespaces:
            add_namespace(prefix, [], namespace)
    return files


def build_index(examples: Sequence[File], examples_dir: str) -> File:
    lines = [
        f"import './{os.path.splitext(os.path.basename(example.path))[0]}'"
        for example in examples
    ]
    content = "\n".join(lines) + "\n"
    return File(path=os.path.join(examples_dir, "index.ts"), content=content, overwrite=True)


class ExampleChecker:
    """Extracts, materialises and type-checks examples, then always cleans up."""

    def __init__(
        self,
        config: DocgenConfig,
        *,
        file_system: FileSystem | None = None,
        process: Process | None = None,
        child_process: ChildProcess | None = None,
    ) -> None:
        self.config = config
        self.file_system = file_system or FileSystem()
        self.process = process or Process()
        self.child_process = child_process or ChildProcess()
        self.logger = get_logger("examples")

    @property
    def examples_dir(self) -> str:
        return self.process.resolve(self.config.root, self.config.out_dir, "examples")

    @property
    def src_import(self) -> str:
        src_dir = self.process.resolve(self.config.root, self.config.src_dir)
        relative = os.path.relpath(src_dir, self.examples_dir)
        return posixpath.join(*relative.split(os.sep))

    def prepare(self, modules: Sequence[Module]) -> List[File]:
        """Return the candidate files with imports rewritten and shims added."""
        candidates = collect_examples(modules, self.examples_dir)
        return [
            File(
                path=candidate.path,
                content=add_assert_import(
                    rewrite_imports(candidate.content, self.config.project_name, self.src_import)
                ),
                overwrite=candidate.overwrite,
            )
            for candidate in candidates
        ]

    def check(self, modules: Sequence[Module]) -> None:
        """Type-check every example; raises on the first failing stage."""
        try:
            self._run(modules)
        except BaseException:
            # Keep the original error; a cleanup failure is only logged.
            try:
                self.file_system.remove_file(self.examples_dir)
            except RemoveFileError as cleanup_error:
                self.logger.warning("%s", format_error(cleanup_error))
            raise
        self.file_system.remove_file(self.examples_dir)

    def _run(self, modules: Sequence[Module]) -> None:
        examples = self.prepare(modules)
        if not examples:
            self.logger.debug("No examples found, skipping type check")
            return
        self.logger.debug("Writing %d example(s)...", len(examples))
        self._write(examples)
        self.logger.debug("Writing examples tsconfig...")
        self._write_tsconfig()
        self.logger.debug("Type checking examples...")
        self._spawn_type_checker()

    def type_checker_command(self) -> str:
        return "ts-node.cmd" if self.process.platform() == "win32" else "ts-node"

    def _write(self, examples: List[File]) -> None:
        files = [build_index(examples, self.examples_dir), *examples]
        run_concurrently(
            lambda file: self.file_system.write_file(file.path, file.content),
            files,
            self.config.concurrency,
        )

    def _write_tsconfig(self) -> None:
        content = json.dumps(
            {"compilerOptions": self.config.examples_compiler_options}, indent=2
        )
        self.file_system.write_file(os.path.join(self.examples_dir, "tsconfig.json"), content)

    def _spawn_type_checker(self) -> None:
        index = os.path.join(self.examples_dir, "index.ts")
        self.child_process.spawn(self.type_checker_command(), index)


__all__ = [
    "ExampleChecker",
    "add_assert_import",
    "build_index",
    "collect_examples",
    "module_prefix",
    "rewrite_imports",
]
