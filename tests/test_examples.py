"""Tests for example extraction and type-checking."""

from __future__ import annotations

import dataclasses
import json
import os

import pytest

from tests._fixtures.fakes import RecordingRunner
from tests._fixtures.modules import (
    constant,
    function,
    interface,
    klass,
    method,
    module,
    namespace,
    prop,
    type_alias,
)
from tsdocgen.config import DEFAULT_COMPILER_OPTIONS, DocgenConfig
from tsdocgen.errors import (
    ExampleNameCollisionError,
    ExecutionError,
    RemoveFileError,
    SpawnError,
)
from tsdocgen.examples import (
    ExampleChecker,
    add_assert_import,
    build_index,
    collect_examples,
    module_prefix,
    rewrite_imports,
)
from tsdocgen.fs import FileSystem
from tsdocgen.process import ChildProcess, Process

INDEX = module_prefix(("src", "index.ts"))


def _checker(config: DocgenConfig, process: Process, runner: RecordingRunner) -> ExampleChecker:
    return ExampleChecker(
        config,
        file_system=FileSystem(),
        process=process,
        child_process=ChildProcess(runner=runner),
    )


def _names(files) -> list[str]:
    return [os.path.basename(file.path) for file in files]


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ('import { a } from "my-lib"', "import { a } from '../../src'"),
        ("import { a } from 'my-lib/lib/Option'", "import { a } from '../../src/Option'"),
        ("import { a } from 'my-lib/Either'", "import { a } from '../../src/Either'"),
        ("import * as O from 'my-lib/data/Option'", "import * as O from '../../src/data/Option'"),
    ],
)
def test_rewrite_imports_targets_local_sources(source: str, expected: str) -> None:
    assert rewrite_imports(source, "my-lib") == expected


def test_rewrite_imports_leaves_other_packages_alone() -> None:
    source = "import { a } from 'my-lib-extra'\nimport { b } from 'other'\n"
    assert rewrite_imports(source, "my-lib") == source


def test_rewrite_imports_escapes_scoped_names() -> None:
    source = "import { pipe } from '@acme/core.utils/Function'"
    result = rewrite_imports(source, "@acme/core.utils", "../../lib")
    assert result == "import { pipe } from '../../lib/Function'"


def test_add_assert_import_only_when_needed() -> None:
    uses_assert = "assert.deepStrictEqual(1, 1)"
    assert add_assert_import(uses_assert) == (
        "import * as assert from 'assert'\nassert.deepStrictEqual(1, 1)"
    )
    already = "import * as assert from 'assert'\nassert.ok(true)"
    assert add_assert_import(already) == already
    assert add_assert_import("console.log(1)") == "console.log(1)"


def test_collect_examples_covers_every_documentable() -> None:
    mod = module(
        examples=["module example"],
        classes=[
            klass(
                "Queue",
                examples=["class example"],
                static_methods=[method("of", examples=["static"])],
                methods=[method("push", examples=["method"])],
                properties=[prop("size", examples=["property"])],
            )
        ],
        interfaces=[interface("Shape", examples=["interface"])],
        type_aliases=[type_alias("Alias", examples=["alias"])],
        constants=[constant("zero", examples=["constant"])],
        functions=[function("make", examples=["first", "second"])],
        namespaces=[
            namespace(
                "Outer",
                examples=["ns"],
                interfaces=[interface("Inner", examples=["ns interface"])],
                namespaces=[namespace("Nested", type_aliases=[type_alias("T", examples=["nested"])])],
            )
        ],
    )

    files = collect_examples([mod], "/tmp/examples")

    assert _names(files) == [
        f"{INDEX}-module-index.ts-0.ts",
        f"{INDEX}-class-Queue-0.ts",
        f"{INDEX}-Queue-staticmethod-of-0.ts",
        f"{INDEX}-Queue-method-push-0.ts",
        f"{INDEX}-Queue-property-size-0.ts",
        f"{INDEX}-interface-Shape-0.ts",
        f"{INDEX}-typealias-Alias-0.ts",
        f"{INDEX}-constant-zero-0.ts",
        f"{INDEX}-function-make-0.ts",
        f"{INDEX}-function-make-1.ts",
        f"{INDEX}-namespace-Outer-0.ts",
        f"{INDEX}-Outer-ns-interface-Inner-0.ts",
        f"{INDEX}-Outer-Nested-ns-typealias-T-0.ts",
    ]
    assert all(file.content.endswith("\n") and file.overwrite for file in files)


def test_collect_examples_distinguishes_kind_and_owner() -> None:
    mod = module(
        classes=[
            klass("A", methods=[method("run", examples=["a"])]),
            klass("B", methods=[method("run", examples=["b"])]),
        ],
        functions=[function("run", examples=["f"])],
        constants=[constant("run", examples=["c"])],
    )

    names = _names(collect_examples([mod], "/tmp/examples"))

    assert len(names) == len(set(names)) == 4


def test_collect_examples_distinguishes_ambiguous_module_paths() -> None:
    nested = module("b.ts", ("src", "a", "b.ts"), functions=[function("f", examples=["f()"])])
    dashed = module("a-b.ts", ("src", "a-b.ts"), functions=[function("f", examples=["f()"])])

    files = collect_examples([nested, dashed], "/tmp/examples")

    assert len({file.path for file in files}) == 2
    assert module_prefix(("src", "a", "b.ts")) != module_prefix(("src", "a-b.ts"))
    assert module_prefix(("src", "a", "b.ts")).startswith("src-a-b.ts-")


def test_collect_examples_rejects_collisions() -> None:
    duplicated = module(functions=[function("f", examples=["one"]), function("f", examples=["two"])])

    with pytest.raises(ExampleNameCollisionError):
        collect_examples([duplicated], "/tmp/examples")


def test_build_index_imports_each_example() -> None:
    mod = module(functions=[function("a", examples=["1"]), function("b", examples=["2"])])
    examples = collect_examples([mod], "/tmp/examples")

    index = build_index(examples, "/tmp/examples")

    assert index.path == os.path.join("/tmp/examples", "index.ts")
    assert index.content == (
        f"import './{INDEX}-function-a-0'\n"
        f"import './{INDEX}-function-b-0'\n"
    )


def test_prepare_rewrites_imports_and_adds_assert(config: DocgenConfig, process: Process) -> None:
    mod = module(
        functions=[
            function(
                "double",
                examples=["import { double } from 'my-lib/Math'\nassert.strictEqual(double(2), 4)"],
            )
        ]
    )

    (prepared,) = _checker(config, process, RecordingRunner()).prepare([mod])

    assert prepared.content == (
        "import * as assert from 'assert'\n"
        "import { double } from '../../src/Math'\n"
        "assert.strictEqual(double(2), 4)\n"
    )


def test_check_without_examples_skips_type_checker(config: DocgenConfig, process: Process) -> None:
    runner = RecordingRunner()
    checker = _checker(config, process, runner)

    checker.check([module()])

    assert runner.calls == []
    assert not os.path.exists(checker.examples_dir)


def test_check_writes_examples_and_cleans_up(config: DocgenConfig, process: Process) -> None:
    runner = RecordingRunner()
    checker = _checker(config, process, runner)
    mod = module(functions=[function("f", examples=["import { f } from 'my-lib'\nf()"])])

    checker.check([mod])

    index = os.path.join(str(config.root), "docs", "examples", "index.ts")
    assert runner.calls == [["ts-node", index]]
    (snapshot,) = runner.snapshots
    assert sorted(snapshot) == ["index.ts", f"{INDEX}-function-f-0.ts", "tsconfig.json"]
    assert snapshot["index.ts"] == f"import './{INDEX}-function-f-0'\n"
    assert snapshot[f"{INDEX}-function-f-0.ts"] == "import { f } from '../../src'\nf()\n"
    assert json.loads(snapshot["tsconfig.json"]) == {"compilerOptions": DEFAULT_COMPILER_OPTIONS}
    assert not os.path.exists(checker.examples_dir)


def test_check_reports_type_errors_and_cleans_up(config: DocgenConfig, process: Process) -> None:
    runner = RecordingRunner(returncode=1, stderr="TS2322: Type 'string' is not assignable")
    checker = _checker(config, process, runner)
    mod = module(functions=[function("f", examples=["const n: number = 'x'"])])

    with pytest.raises(ExecutionError) as excinfo:
        checker.check([mod])

    assert "TS2322" in excinfo.value.stderr
    assert not os.path.exists(checker.examples_dir)


def test_check_reports_spawn_failure_and_cleans_up(config: DocgenConfig, process: Process) -> None:
    runner = RecordingRunner(error=FileNotFoundError("ts-node"))
    checker = _checker(config, process, runner)
    mod = module(functions=[function("f", examples=["f()"])])

    with pytest.raises(SpawnError) as excinfo:
        checker.check([mod])

    assert excinfo.value.command == "ts-node"
    assert not os.path.exists(checker.examples_dir)


class UndeletableFileSystem(FileSystem):
    def remove_file(self, path: str) -> None:
        raise RemoveFileError(path, PermissionError("denied"))


def test_cleanup_failure_does_not_mask_type_errors(
    config: DocgenConfig, process: Process, caplog
) -> None:
    runner = RecordingRunner(returncode=1, stderr="TS2322: Type 'string' is not assignable")
    checker = ExampleChecker(
        config,
        file_system=UndeletableFileSystem(),
        process=process,
        child_process=ChildProcess(runner=runner),
    )
    mod = module(functions=[function("f", examples=["const n: number = 'x'"])])

    with pytest.raises(ExecutionError):
        checker.check([mod])

    assert any("Unable to remove file from" in record.getMessage() for record in caplog.records)


def test_cleanup_failure_is_reported_after_success(config: DocgenConfig, process: Process) -> None:
    checker = ExampleChecker(
        config,
        file_system=UndeletableFileSystem(),
        process=process,
        child_process=ChildProcess(runner=RecordingRunner()),
    )

    with pytest.raises(RemoveFileError):
        checker.check([module(functions=[function("f", examples=["f()"])])])


def test_type_checker_command_on_windows(config: DocgenConfig, tmp_path) -> None:
    windows = Process(cwd=tmp_path, platform="win32")
    checker = ExampleChecker(config, process=windows)

    assert checker.type_checker_command() == "ts-node.cmd"


def test_custom_compiler_options_are_written(config: DocgenConfig, process: Process) -> None:
    options = {"noEmit": True, "strict": False}
    runner = RecordingRunner()
    checker = _checker(dataclasses.replace(config, examples_compiler_options=options), process, runner)

    checker.check([module(functions=[function("f", examples=["f()"])])])

    assert json.loads(runner.snapshots[0]["tsconfig.json"]) == {"compilerOptions": options}
