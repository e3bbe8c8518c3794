"""Compressors used to back up the whole store directory."""

from __future__ import annotations

import shutil
import subprocess
import tarfile
from pathlib import Path
from typing import Protocol

from loguru import logger


class Compressor(Protocol):
    """Writes a compressed archive of a directory and returns its size in bytes."""

    def compress(self, source_dir: Path, dest_path: Path) -> int: ...


class TarCommandCompressor:
    """
    Runs the system ``tar`` binary to produce a ``.tar.gz`` archive.

    The archive contains the store directory itself, so extracting it
    recreates ``<name>/<date>.md``.
    """

    def __init__(self, executable: str = "tar") -> None:
        self.executable = executable

    def compress(self, source_dir: Path, dest_path: Path) -> int:
        binary = shutil.which(self.executable)
        if binary is None:
            raise FileNotFoundError(f"'{self.executable}' not found on PATH")

        cmd = [binary, "-czf", str(dest_path), "-C", str(source_dir.parent), source_dir.name]
        logger.debug(f"TarCommandCompressor: {' '.join(cmd)}")
        proc = subprocess.run(cmd, capture_output=True, text=True)
        if proc.returncode != 0:
            stderr = proc.stderr.strip() or f"exit code {proc.returncode}"
            raise RuntimeError(f"tar failed: {stderr}")
        return dest_path.stat().st_size


class TarfileCompressor:
    """Builds the same ``.tar.gz`` layout in-process with :mod:`tarfile`."""

    def compress(self, source_dir: Path, dest_path: Path) -> int:
        with tarfile.open(dest_path, "w:gz") as tar:
            tar.add(source_dir, arcname=source_dir.name)
        return dest_path.stat().st_size


def get_compressor(name: str) -> Compressor:
    """Resolve a compressor by its configuration name: 'tar' or 'tarfile'."""
    if name == "tarfile":
        return TarfileCompressor()
    if name == "tar":
        return TarCommandCompressor()
    raise ValueError(f"Unknown compressor: {name}")
