# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Update Installer

Downloads an update archive, unpacks it into a staging directory and swaps
it with the live script directory, keeping the previous files as a backup.

Install flow:
  1. download(url): archive -> temp file -> staging directory
  2. install(): live -> backup, then staging -> live
  3. cleanup(): remove backup and staging once the new version works

install() is two separate renames, not a transaction. If the process
dies between them, the live path is missing while the backup and staging
directories are intact; restore() or a manual rename of backup_dir
recovers the previous version.
"""

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

import aiohttp

from .errors import ConversionError, DownloadError, UpdaterError
from .filesystem import ArchiveExtractor, FileSystem, LocalFileSystem, SafeArchiveExtractor
from .http import HttpClient

logger = logging.getLogger(__name__)

STAGING_DIR_NAME = "scriptUpdate"
ARCHIVE_NAME = "scriptUpdate.zip"
BACKUP_SUFFIX = "_updateBackup"


class UpdateInstaller:
    """Moves a downloaded release into the script directory."""

    def __init__(
        self,
        script_dir: Path,
        http: HttpClient,
        fs: Optional[FileSystem] = None,
        extractor: Optional[ArchiveExtractor] = None,
        temp_dir: Optional[Path] = None,
    ):
        """
        Args:
            script_dir: Live directory of the running script.
            http: Client used to download archives.
            fs: File system capability. Defaults to the local disk.
            extractor: Archive capability. Defaults to zip/tar extraction.
            temp_dir: Where the archive and staging directory are kept.
                      Defaults to the system temporary directory.
        """
        self.script_dir = Path(script_dir)
        self.http = http
        self.fs = fs or LocalFileSystem()
        self.extractor = extractor or SafeArchiveExtractor()
        temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
        self.staging_dir = temp_dir / STAGING_DIR_NAME
        self.archive_path = temp_dir / ARCHIVE_NAME

    @property
    def backup_dir(self) -> Path:
        """Location of the previous version after install()."""
        return self.script_dir.with_name(self.script_dir.name + BACKUP_SUFFIX)

    async def download(self, url: str) -> List[Path]:
        """Download and unpack an update into the staging directory.

        Returns:
            Every path below the staging directory.

        Raises:
            DownloadError: If the server does not answer with a success
                status. Nothing is written to disk in that case.
            ConversionError: If the body cannot be read as bytes.
        """
        logger.info("Downloading update from %s", url)
        try:
            response = await self.http.get(url)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise DownloadError(url, None, str(e) or type(e).__name__) from e

        if not response.ok:
            raise DownloadError(url, response.status, response.reason)

        try:
            data = await response.read()
        except Exception as e:
            raise ConversionError("Could not convert the response body to binary data", details=str(e)) from e
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ConversionError(
                "Could not convert the response body to binary data",
                details=f"got {type(data).__name__}",
            )

        await self.fs.write_bytes(self.archive_path, bytes(data))
        if not await self.fs.exists(self.staging_dir):
            await self.fs.make_dirs(self.staging_dir)
        await self.extractor.extract(self.archive_path, self.staging_dir)

        files = await self.fs.list_tree(self.staging_dir)
        logger.info("Update unpacked into %s (%d entries)", self.staging_dir, len(files))
        return files

    async def install(self) -> None:
        """Replace the live script directory with the staged update.

        The live directory is moved to backup_dir first and only then is the
        staging directory moved into place. The two steps are not atomic.

        Raises:
            UpdaterError: If nothing has been downloaded. The live directory
                is left untouched in that case.
        """
        if not await self.fs.exists(self.staging_dir):
            raise UpdaterError(f"No downloaded update at {self.staging_dir}")
        await self.fs.rename(self.script_dir, self.backup_dir)
        logger.info("Backed up %s to %s", self.script_dir, self.backup_dir)
        await self.fs.rename(self.staging_dir, self.script_dir)
        logger.info("Installed update into %s", self.script_dir)

    async def cleanup(self) -> None:
        """Remove the backup, staging directory and downloaded archive if present."""
        for path in (self.backup_dir, self.staging_dir, self.archive_path):
            if await self.fs.exists(path):
                await self.fs.remove(path)
                logger.info("Removed %s", path)

    async def restore(self) -> None:
        """Move the backup back into the live location.

        Whatever currently occupies the live path (a complete or partial new
        version) is removed first.

        Raises:
            UpdaterError: If there is no backup to restore.
        """
        if not await self.fs.exists(self.backup_dir):
            raise UpdaterError(f"No backup found at {self.backup_dir}")
        if await self.fs.exists(self.script_dir):
            await self.fs.remove(self.script_dir)
        await self.fs.rename(self.backup_dir, self.script_dir)
        logger.info("Restored %s from %s", self.script_dir, self.backup_dir)
