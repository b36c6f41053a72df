# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Version Comparison

Only dotted-numeric versions with one to four components are supported
(a, a.b, a.b.c, a.b.c.d). Pre-release suffixes such as -beta are rejected.
"""

import re
from functools import cmp_to_key
from typing import Any, Iterable, List, TYPE_CHECKING

from .errors import ValidationError

if TYPE_CHECKING:
    from .schemas import VersionData

VERSION_PATTERN = re.compile(r"^\d+(?:\.\d+){0,3}$", re.ASCII)


def is_valid_version(value: Any) -> bool:
    """Check whether value matches the dotted-numeric version grammar."""
    return isinstance(value, str) and VERSION_PATTERN.fullmatch(value) is not None


def _parse(parameter: str, value: Any) -> List[int]:
    if not is_valid_version(value):
        raise ValidationError(parameter, value)
    return [int(part) for part in value.split(".")]


def compare_version(a: str, b: str) -> int:
    """Compare two versions.

    Returns 0 if they are equal, less than 0 if a is lower than b and
    greater than 0 if a is higher than b. Usable as a sort comparator
    through functools.cmp_to_key.

    Raises:
        ValidationError: If either argument is not a dotted-numeric version.
    """
    a_parts = _parse("a", a)
    b_parts = _parse("b", b)

    # Pad the shorter version so "1.2" == "1.2.0.0"
    length = max(len(a_parts), len(b_parts))
    a_parts += [0] * (length - len(a_parts))
    b_parts += [0] * (length - len(b_parts))

    for left, right in zip(a_parts, b_parts):
        diff = left - right
        if diff != 0:
            return diff
    return 0


def sort_versions(
    versions: Iterable["VersionData"],
    reverse: bool = False,
) -> List["VersionData"]:
    """Return release descriptors ordered by version, lowest first."""
    return sorted(
        versions,
        key=cmp_to_key(lambda x, y: compare_version(x.version, y.version)),
        reverse=reverse,
    )
