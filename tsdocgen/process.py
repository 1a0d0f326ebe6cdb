"""Process and child-process collaborators."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .errors import ExecutionError, SpawnError
from .logging import get_logger


class Process:
    """Exposes the current working directory and host platform."""

    def __init__(self, cwd: str | Path | None = None, platform: str | None = None) -> None:
        self._cwd = str(cwd) if cwd is not None else None
        self._platform = platform

    def cwd(self) -> str:
        return self._cwd if self._cwd is not None else os.getcwd()

    def platform(self) -> str:
        return self._platform if self._platform is not None else sys.platform

    def resolve(self, *parts: str | Path) -> str:
        """Join *parts* onto the working directory; absolute parts win."""
        return os.path.normpath(os.path.join(self.cwd(), *[str(part) for part in parts]))


@dataclass(frozen=True)
class CompletedCommand:
    """Exit status and captured diagnostics of a finished child process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


Runner = Callable[[Sequence[str]], CompletedCommand]


class ChildProcess:
    """Spawns external tools, separating start-up failures from non-zero exits."""

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("process")

    def spawn(self, command: str, *args: str) -> CompletedCommand:
        argv = [command, *args]
        self.logger.debug("Running %s", " ".join(argv))
        try:
            completed = self._runner(argv)
        except OSError as exc:
            raise SpawnError(command, args, exc) from exc
        if completed.returncode != 0:
            raise ExecutionError(command, completed.stderr, completed.returncode)
        return completed

    @staticmethod
    def _default_runner(argv: Sequence[str]) -> CompletedCommand:
        completed = subprocess.run(
            list(argv),
            check=False,
            text=True,
            capture_output=True,
        )
        return CompletedCommand(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["ChildProcess", "CompletedCommand", "Process", "Runner"]
