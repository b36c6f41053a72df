# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Script Updater Pydantic Schemas

Release descriptors as published in the version manifest, and the cache
record persisted between checks. Field aliases match the JSON wire format.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .version import is_valid_version


class UpdateCheckInterval(str, Enum):
    """How often the version manifest is requested."""
    EVERY_TIME = "every time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# =============================================================================
# MANIFEST MODELS
# =============================================================================

class VersionData(BaseModel):
    """One published release."""
    version: str = Field(..., description="Dotted-numeric version (a, a.b, a.b.c or a.b.c.d)")
    date: str = Field(default="", description="Release date as published")
    notes: str = Field(default="", description="Release notes")
    url: str = Field(..., description="Download URL of the update archive")

    model_config = ConfigDict(frozen=True)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not is_valid_version(value):
            raise ValueError(f"not a version: {value!r}")
        return value


ManifestAdapter = TypeAdapter(List[VersionData])


def parse_manifest(data: Any) -> List[VersionData]:
    """Validate a decoded manifest body into release descriptors.

    Raises:
        pydantic.ValidationError: If the body is not a list of releases.
    """
    return ManifestAdapter.validate_python(data)


# =============================================================================
# CACHE MODELS
# =============================================================================

class StorageData(BaseModel):
    """Cached manifest and the time it was last fetched."""
    last_checked: int = Field(default=0, ge=0, alias="lastChecked", description="Epoch milliseconds of the last fetch")
    versions: List[VersionData] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_record(self) -> Dict[str, Any]:
        """Serialize into the JSON-compatible form kept in the key-value store."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StorageData":
        return cls.model_validate(record)
