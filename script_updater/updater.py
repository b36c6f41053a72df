# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2026 Andrew Wyatt (Fewtarius)

"""
Script Update Manager

Ties the update cache, checker and installer together for one script.

Update flow:
  1. Check the manifest (cached according to the configured interval)
  2. Pick a newer release
  3. Download and unpack it into the staging directory
  4. Install: live directory -> backup, staging -> live directory
  5. Clean up the backup once the new version is confirmed working
     (or restore it if it is not)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .checker import UpdateChecker
from .config import Config
from .errors import UpdaterError
from .filesystem import ArchiveExtractor, FileSystem
from .http import AiohttpClient, HttpClient
from .installer import UpdateInstaller
from .schemas import StorageData, UpdateCheckInterval, VersionData
from .storage import JsonFileStore, KeyValueStore, UpdateCache
from .version import sort_versions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptIdentity:
    """Name (cache namespace) and live directory of a script."""
    name: str
    directory: Path


class ScriptUpdater:
    """Manages checking for and installing updates of one script.

    Usage:
        updater = ScriptUpdater.from_config(load_config())
        newer = await updater.check_for_update()
        if newer:
            await updater.download_latest(newer)
            await updater.install()
    """

    def __init__(
        self,
        identity: ScriptIdentity,
        config: Optional[Config] = None,
        store: Optional[KeyValueStore] = None,
        http: Optional[HttpClient] = None,
        fs: Optional[FileSystem] = None,
        extractor: Optional[ArchiveExtractor] = None,
    ):
        """Initialize the updater.

        Args:
            identity: Script whose files and cache are managed.
            config: Settings. Defaults to Config().
            store: Key-value store for the cache. Defaults to a JSON file
                   at config.storage.cache_file.
            http: HTTP client. Defaults to aiohttp with the configured timeout.
            fs: File system capability.
            extractor: Archive capability.
        """
        self.identity = identity
        self.config = config or Config()
        settings = self.config.updater

        self.store = store or JsonFileStore(self.config.storage.cache_file)
        self.http = http or AiohttpClient(timeout=settings.request_timeout)
        self.cache = UpdateCache(self.store, identity.name)
        self.checker = UpdateChecker(self.cache, self.http)
        self.installer = UpdateInstaller(
            identity.directory,
            self.http,
            fs=fs,
            extractor=extractor,
            temp_dir=settings.temp_directory,
        )

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "ScriptUpdater":
        """Build an updater for the script described in config.script."""
        identity = ScriptIdentity(config.script.name, config.script.directory)
        return cls(identity, config, **kwargs)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @property
    def backup_dir(self) -> Path:
        return self.installer.backup_dir

    @property
    def staging_dir(self) -> Path:
        return self.installer.staging_dir

    def get_cache(self) -> Optional[StorageData]:
        """Return the cached manifest and when it was fetched, if any."""
        return self.cache.get()

    async def check_for_update(
        self,
        current_version: Optional[str] = None,
        interval: Optional[Union[UpdateCheckInterval, str]] = None,
        manifest_url: Optional[str] = None,
    ) -> List[VersionData]:
        """Return releases newer than the running version.

        Arguments left as None fall back to the configured values.
        """
        settings = self.config.updater
        url = manifest_url if manifest_url is not None else settings.manifest_url
        if not url:
            raise UpdaterError("No manifest URL configured")
        return await self.checker.check_for_update(
            url,
            interval if interval is not None else settings.interval,
            current_version if current_version is not None else settings.current_version,
        )

    async def download(self, url: str) -> List[Path]:
        return await self.installer.download(url)

    async def download_latest(self, versions: List[VersionData]) -> VersionData:
        """Download the highest release in versions and return it."""
        if not versions:
            raise UpdaterError("No versions to download")
        latest = sort_versions(versions)[-1]
        logger.info("Selected version %s for download", latest.version)
        await self.installer.download(latest.url)
        return latest

    async def install(self) -> None:
        await self.installer.install()

    async def cleanup(self) -> None:
        await self.installer.cleanup()

    async def restore(self) -> None:
        await self.installer.restore()


# =============================================================================
# MODULE-LEVEL INSTANCE
# =============================================================================

_script_updater: Optional[ScriptUpdater] = None


def get_script_updater() -> Optional[ScriptUpdater]:
    """Get the global ScriptUpdater instance."""
    return _script_updater


def init_script_updater(config: Config, **kwargs) -> ScriptUpdater:
    """Initialize the global ScriptUpdater from configuration.

    Args:
        config: Loaded configuration.
        **kwargs: Capability overrides passed to ScriptUpdater.

    Returns:
        The initialized ScriptUpdater instance.
    """
    global _script_updater
    _script_updater = ScriptUpdater.from_config(config, **kwargs)
    logger.info(
        "Script updater initialized for %s (%s)",
        config.script.name,
        config.script.directory,
    )
    return _script_updater
