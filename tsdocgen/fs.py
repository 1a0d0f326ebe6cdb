"""File-system collaborator with path-qualified errors."""

from __future__ import annotations

import glob as _glob
import os
import shutil
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Sequence

from .errors import GlobError, ReadFileError, RemoveFileError, WriteFileError


@dataclass(frozen=True)
class File:
    """A file to be persisted.

    ``overwrite`` marks regenerable output; when it is ``False`` an existing
    file at ``path`` is left untouched.
    """

    path: str
    content: str
    overwrite: bool = False


class FileSystem:
    """Thin wrapper over the local disk used by every pipeline stage."""

    def glob(self, pattern: str, exclude: Sequence[str] = ()) -> List[str]:
        """Return files matching *pattern* minus *exclude*, sorted for stable output."""
        try:
            matches = _glob.glob(pattern, recursive=True)
        except (OSError, ValueError) as exc:
            raise GlobError(pattern, exclude, exc) from exc
        paths = [path for path in matches if os.path.isfile(path)]
        if exclude:
            paths = [path for path in paths if not _is_excluded(path, exclude)]
        return sorted(paths)

    def read_file(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadFileError(path, exc) from exc

    def write_file(self, path: str, content: str) -> None:
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise WriteFileError(path, exc) from exc

    def remove_file(self, path: str) -> None:
        """Remove a file or a whole directory tree; a missing path is a no-op."""
        target = Path(path)
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            elif target.exists() or target.is_symlink():
                target.unlink()
        except OSError as exc:
            raise RemoveFileError(path, exc) from exc

    def path_exists(self, path: str) -> bool:
        return Path(path).exists()


def _is_excluded(path: str, exclude: Sequence[str]) -> bool:
    normalised = Path(path).as_posix()
    for pattern in exclude:
        cleaned = Path(pattern).as_posix()
        if fnmatchcase(normalised, cleaned):
            return True
        # Patterns like "src/internal/**" also cover the directory's files.
        if cleaned.endswith("/**") and normalised.startswith(cleaned[:-2]):
            return True
    return False


__all__ = ["File", "FileSystem"]
