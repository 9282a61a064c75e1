"""Filesystem access to the vault's to-do files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from daily_update.config import DEFAULT_FILE_PREFIX

MARKDOWN_SUFFIX = ".md"


def _atomic_write(target_path: Path, content: str) -> None:
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", newline="", dir=target_path.parent, delete=False
        ) as temp_file:
            temp_path = Path(temp_file.name)
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_path, target_path)
    finally:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass


class FileVault:
    """Markdown files under ``root`` whose name starts with ``prefix``.

    Reads and writes keep line endings untouched. I/O errors propagate.
    """

    def __init__(self, root: Path, prefix: str = DEFAULT_FILE_PREFIX) -> None:
        self.root = Path(root)
        self.prefix = prefix

    def list_candidate_files(self) -> list[Path]:
        candidates: list[Path] = []
        for path in self.root.rglob(f"*{MARKDOWN_SUFFIX}"):
            relative = path.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts[:-1]):
                continue
            if not path.is_file() or not path.stem.startswith(self.prefix):
                continue
            candidates.append(path)
        return sorted(candidates, key=lambda path: self.relative(path))

    def relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def read(self, path: Path) -> str:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()

    def write(self, path: Path, content: str) -> None:
        _atomic_write(path, content)
