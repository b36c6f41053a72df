# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Script Updater Errors

Every failure the updater surfaces derives from UpdaterError so that
callers can branch on the kind of failure instead of matching messages.
"""

from typing import Any, Optional


class UpdaterError(Exception):
    """Base class for all script updater failures."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ValidationError(UpdaterError, ValueError):
    """A version string does not match the dotted-numeric grammar."""

    def __init__(self, parameter: str, value: Any):
        self.parameter = parameter
        self.value = value
        super().__init__(f'Parameter "{parameter}" is not a version: "{value}"')


class FetchError(UpdaterError):
    """The version manifest could not be fetched or parsed."""

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"Failed to fetch the version manifest from {url}: {status} {reason or ''}".rstrip()
        else:
            message = f"Failed to fetch the version manifest from {url}: {reason or 'unknown error'}"
        super().__init__(message)


class DownloadError(UpdaterError):
    """The update archive download returned a non-success response."""

    def __init__(self, url: str, status: Optional[int], reason: Optional[str]):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"Failed to download the update from {url}: {status} {reason or ''}".rstrip()
        else:
            message = f"Failed to download the update from {url}: {reason or 'unknown error'}"
        super().__init__(message)


class ConversionError(UpdaterError):
    """A response body could not be converted to binary data."""


class ArchiveError(UpdaterError):
    """The downloaded archive is unsupported or unsafe to extract."""
