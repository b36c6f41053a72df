# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
File System and Archive Capabilities

Async wrappers around the blocking pathlib/shutil calls the installer
needs. Blocking work runs in a worker thread so the event loop stays free.
"""

import asyncio
import logging
import shutil
import tarfile
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import List

from .errors import ArchiveError

logger = logging.getLogger(__name__)


# =============================================================================
# FILE SYSTEM
# =============================================================================

class FileSystem(ABC):
    """Interface for the file operations used by the installer."""

    @abstractmethod
    async def exists(self, path: Path) -> bool:
        """Check whether a file or directory exists."""

    @abstractmethod
    async def make_dirs(self, path: Path) -> None:
        """Create a directory and any missing parents."""

    @abstractmethod
    async def list_tree(self, path: Path) -> List[Path]:
        """List every file and directory below path, recursively."""

    @abstractmethod
    async def write_bytes(self, path: Path, data: bytes) -> None:
        """Write binary data, replacing any existing file."""

    @abstractmethod
    async def rename(self, source: Path, destination: Path) -> None:
        """Move source to destination."""

    @abstractmethod
    async def remove(self, path: Path) -> None:
        """Remove a file or a directory tree."""


class LocalFileSystem(FileSystem):
    """FileSystem operating on the local disk."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).exists)

    async def make_dirs(self, path: Path) -> None:
        await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)

    async def list_tree(self, path: Path) -> List[Path]:
        def _walk() -> List[Path]:
            return sorted(Path(path).rglob("*"))

        return await asyncio.to_thread(_walk)

    async def write_bytes(self, path: Path, data: bytes) -> None:
        def _write() -> None:
            target = Path(path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        await asyncio.to_thread(_write)

    async def rename(self, source: Path, destination: Path) -> None:
        def _move() -> None:
            # shutil.move would nest source inside an existing directory
            if Path(destination).exists():
                raise FileExistsError(f"Destination already exists: {destination}")
            # falls back to copy+delete across file systems
            shutil.move(str(source), str(destination))

        await asyncio.to_thread(_move)

    async def remove(self, path: Path) -> None:
        def _remove() -> None:
            target = Path(path)
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()

        await asyncio.to_thread(_remove)


# =============================================================================
# ARCHIVES
# =============================================================================

class ArchiveExtractor(ABC):
    """Interface for unpacking an update archive into a directory."""

    @abstractmethod
    async def extract(self, archive_path: Path, dest_dir: Path) -> None:
        """Extract every member of the archive into dest_dir."""


# Extraction filters exist from Python 3.9.17 / 3.10.12 / 3.11.4 on
TAR_EXTRACT_OPTIONS = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}


def _check_member(name: str) -> None:
    """Reject absolute member paths and ones escaping the destination."""
    member_path = PurePosixPath(name.replace("\\", "/"))
    if member_path.is_absolute() or ".." in member_path.parts:
        raise ArchiveError(f"Unsafe path in archive: {name}")


class SafeArchiveExtractor(ArchiveExtractor):
    """Extracts zip and tar (optionally compressed) archives.

    Members with absolute paths or parent references are refused before
    anything is written.
    """

    async def extract(self, archive_path: Path, dest_dir: Path) -> None:
        await asyncio.to_thread(self._extract, Path(archive_path), Path(dest_dir))

    def _extract(self, archive_path: Path, dest_dir: Path) -> None:
        try:
            if zipfile.is_zipfile(archive_path):
                with zipfile.ZipFile(archive_path) as archive:
                    for name in archive.namelist():
                        _check_member(name)
                    archive.extractall(dest_dir)
            elif tarfile.is_tarfile(archive_path):
                with tarfile.open(archive_path, "r:*") as archive:
                    for member in archive.getmembers():
                        _check_member(member.name)
                        if member.issym() or member.islnk():
                            raise ArchiveError(f"Links are not allowed in archive: {member.name}")
                    archive.extractall(dest_dir, **TAR_EXTRACT_OPTIONS)
            else:
                raise ArchiveError(f"Unsupported archive format: {archive_path}")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, tarfile.TarError, EOFError) as e:
            logger.error("Failed to extract %s: %s", archive_path, e)
            raise ArchiveError(f"Corrupt archive: {archive_path}", details=str(e)) from e
        logger.debug("Extracted %s into %s", archive_path, dest_dir)
