"""Pipeline orchestration: read, parse, check examples, render, write."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .concurrency import run_concurrently
from .config import DocgenConfig
from .errors import ParseError, RenderError
from .examples import ExampleChecker
from .fs import File, FileSystem
from .logging import get_logger
from .models import Module, sort_modules
from .parsers import ModuleParser
from .process import ChildProcess, Process
from .render import MarkdownRenderer, SiteRenderer, create_environment

GENERATED_SUFFIX = ".ts.md"


@dataclass
class RunResult:
    """Outcome of a successful documentation run."""

    modules: List[Module]
    documents: List[File] = field(default_factory=list)


class Orchestrator:
    """Runs the documentation pipeline with injected collaborators."""

    def __init__(
        self,
        config: DocgenConfig,
        parser: ModuleParser,
        *,
        file_system: FileSystem | None = None,
        process: Process | None = None,
        child_process: ChildProcess | None = None,
        renderer: MarkdownRenderer | None = None,
        site_renderer: SiteRenderer | None = None,
        example_checker: ExampleChecker | None = None,
    ) -> None:
        self.config = config
        self.parser = parser
        self.file_system = file_system or FileSystem()
        self.process = process or Process()
        environment = create_environment()
        self.renderer = renderer or MarkdownRenderer(environment=environment)
        self.site_renderer = site_renderer or SiteRenderer(environment)
        self.example_checker = example_checker or ExampleChecker(
            config,
            file_system=self.file_system,
            process=self.process,
            child_process=child_process or ChildProcess(),
        )
        self.logger = get_logger("orchestrator")

    @property
    def out_dir(self) -> str:
        return self.process.resolve(self.config.root, self.config.out_dir)

    def run(self, *, check_examples: Optional[bool] = None) -> RunResult:
        """Generate the documentation site; any stage failure aborts the run."""
        modules = self._read_and_parse()
        if self.config.check_examples if check_examples is None else check_examples:
            self.logger.info("typechecking examples...")
            self.verify_examples(modules)
        else:
            self.logger.info("skipping example type check")
        self.logger.info("creating markdown files...")
        documents = self.build_documents(modules)
        self.logger.info("writing markdown files...")
        self.write_documents(documents)
        self.logger.info("Docs generation succeeded!")
        return RunResult(modules=modules, documents=documents)

    def check_examples(self) -> RunResult:
        """Only read, parse and type-check examples; nothing is written."""
        modules = self._read_and_parse()
        self.logger.info("typechecking examples...")
        self.verify_examples(modules)
        self.logger.info("Examples type-checked successfully")
        return RunResult(modules=modules)

    # ------------------------------------------------------------------
    # Stages

    def read_sources(self) -> List[File]:
        pattern = os.path.join(self.process.resolve(self.config.root, self.config.src_dir), "**", "*.ts")
        exclude = [self.process.resolve(self.config.root, item) for item in self.config.exclude]
        paths = self.file_system.glob(pattern, exclude)
        self.logger.info("%d module(s) found", len(paths))
        return run_concurrently(
            lambda path: File(path=path, content=self.file_system.read_file(path)),
            paths,
            self.config.concurrency,
        )

    def parse(self, files: Sequence[File]) -> List[Module]:
        result = self.parser.parse_files(files)
        if result.errors:
            raise ParseError(result.errors)
        return sort_modules(result.modules)

    def verify_examples(self, modules: Sequence[Module]) -> None:
        self.example_checker.check(modules)

    def build_documents(self, modules: Sequence[Module]) -> List[File]:
        """Render every module plus the site's home, index and configuration."""
        documents = [
            File(os.path.join(self.out_dir, "index.md"), self.site_renderer.home_page()),
            File(
                os.path.join(self.out_dir, "modules", "index.md"),
                self.site_renderer.modules_index(),
            ),
            self._config_yml(),
        ]
        for order, module in enumerate(modules, start=1):
            documents.append(
                File(
                    path=self.module_output_path(module),
                    content=self.renderer.print_module(module, order),
                    overwrite=True,
                )
            )
        return documents

    def write_documents(self, files: Sequence[File]) -> None:
        """Delete previously generated module documents, then persist *files*."""
        pattern = os.path.join(self.out_dir, "**", f"*{GENERATED_SUFFIX}")
        self.logger.debug("deleting %s", pattern)
        stale = self.file_system.glob(pattern)
        run_concurrently(self.file_system.remove_file, stale, self.config.concurrency)
        run_concurrently(self._write_file, files, self.config.concurrency)

    # ------------------------------------------------------------------
    # Helpers

    def module_output_path(self, module: Module) -> str:
        """``<out>/modules/<path without its first segment>.md``.

        Only ``.ts`` modules below the source directory are accepted, so every
        module document ends in ``.ts.md`` and never replaces a site page.
        """
        segments = module.path[1:]
        if not segments or not segments[-1].endswith(".ts"):
            raise RenderError(
                f"Module path must name a .ts file below the source directory: "
                f"'{'/'.join(module.path)}'"
            )
        return os.path.join(self.out_dir, "modules", *segments[:-1], f"{segments[-1]}.md")

    def _read_and_parse(self) -> List[Module]:
        self.logger.info("reading modules...")
        files = self.read_sources()
        self.logger.info("parsing modules...")
        return self.parse(files)

    def _config_yml(self) -> File:
        path = os.path.join(self.out_dir, "_config.yml")
        if self.file_system.path_exists(path):
            previous = self.file_system.read_file(path)
            return File(path, self.site_renderer.patch_config_yml(previous, self.config), overwrite=True)
        return File(path, self.site_renderer.config_yml(self.config))

    def _write_file(self, file: File) -> None:
        name = os.path.relpath(file.path, self.out_dir)
        if self.file_system.path_exists(file.path):
            if not file.overwrite:
                self.logger.debug("file %s already exists, skipping creation", name)
                return
            self.logger.debug("overwriting file %s", name)
        self.file_system.write_file(file.path, file.content)


__all__ = ["GENERATED_SUFFIX", "Orchestrator", "RunResult"]
