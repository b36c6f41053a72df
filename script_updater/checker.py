# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Update Checker

Decides whether the cached manifest is fresh enough for the configured
interval, refreshes it when it is not, and returns the releases newer than
the running version.

Check flow:
  1. Load the cached manifest
  2. Compute the cutoff for the interval
  3. Fetch and persist the manifest if the cache is older than the cutoff
  4. Filter the cached releases against the current version
"""

import asyncio
import calendar
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

import aiohttp
import pydantic

from .errors import FetchError
from .http import HttpClient
from .schemas import StorageData, UpdateCheckInterval, VersionData, parse_manifest
from .storage import UpdateCache
from .version import compare_version

logger = logging.getLogger(__name__)


# =============================================================================
# INTERVAL CUTOFF
# =============================================================================

def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _subtract_month(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def to_millis(moment: datetime) -> int:
    """Convert a datetime (naive values are local time) to epoch milliseconds."""
    return int(moment.timestamp() * 1000)


def cutoff(interval: Union[UpdateCheckInterval, str], now: datetime) -> int:
    """Return the epoch-millis threshold at or before which the cache is stale.

    "every time" yields now itself. The other intervals step back from now
    (0 days, 7 days or one calendar month) and truncate to local midnight.
    """
    interval = UpdateCheckInterval(interval)
    if interval is UpdateCheckInterval.EVERY_TIME:
        return to_millis(now)
    if interval is UpdateCheckInterval.DAILY:
        return to_millis(_start_of_day(now))
    if interval is UpdateCheckInterval.WEEKLY:
        return to_millis(_start_of_day(now - timedelta(days=7)))
    return to_millis(_start_of_day(_subtract_month(now)))


# =============================================================================
# UPDATE CHECKER
# =============================================================================

class UpdateChecker:
    """Interval-gated manifest fetching and version filtering.

    Usage:
        checker = UpdateChecker(UpdateCache(store, "my-script"), AiohttpClient())
        newer = await checker.check_for_update(url, "daily", "1.2.0")
    """

    def __init__(
        self,
        cache: UpdateCache,
        http: HttpClient,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            cache: Cache of the last fetched manifest.
            http: Client used to request the manifest.
            clock: Returns the current local time. Defaults to datetime.now.
        """
        self.cache = cache
        self.http = http
        self.clock = clock or datetime.now

    async def check_for_update(
        self,
        manifest_url: str,
        interval: Union[UpdateCheckInterval, str],
        current_version: str,
    ) -> List[VersionData]:
        """Return all releases newer than current_version, in manifest order.

        The manifest is only requested when the cache was last refreshed at
        or before the interval's cutoff. Otherwise the cache is used as is.

        Raises:
            ValidationError: If current_version is not a dotted-numeric version.
            FetchError: If the manifest request or its parsing fails. The
                stored cache is left untouched in that case.
        """
        # Fail before any I/O on a malformed current version
        compare_version(current_version, current_version)

        cached = self.cache.load()
        now = self.clock()
        limit = cutoff(interval, now)

        if cached.last_checked <= limit:
            logger.info("Update cache is stale (interval=%s), fetching %s", UpdateCheckInterval(interval).value, manifest_url)
            versions = await self._fetch_manifest(manifest_url)
            cached = StorageData(
                last_checked=max(to_millis(now), cached.last_checked),
                versions=versions,
            )
            if not self.cache.save(cached):
                logger.warning("Could not write update data to storage")
        else:
            logger.debug("Using cached manifest (%d versions)", len(cached.versions))

        newer = [v for v in cached.versions if compare_version(v.version, current_version) > 0]
        if newer:
            logger.info("%d newer version(s) than %s available", len(newer), current_version)
        return newer

    async def _fetch_manifest(self, url: str) -> List[VersionData]:
        try:
            response = await self.http.get(url)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.error("Manifest request failed: %s", e)
            raise FetchError(url, reason=str(e) or type(e).__name__) from e

        if not response.ok:
            raise FetchError(url, response.status, response.reason)

        try:
            return parse_manifest(await response.json())
        except (ValueError, pydantic.ValidationError) as e:
            logger.error("Manifest from %s is invalid: %s", url, e)
            raise FetchError(url, response.status, "invalid manifest") from e
