# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025 The Script Updater Authors

"""
Version Comparison Tests

Run with: pytest tests/test_version.py -v
"""

from functools import cmp_to_key

import pytest

from script_updater.errors import ValidationError
from script_updater.schemas import VersionData
from script_updater.version import compare_version, is_valid_version, sort_versions


SAMPLE_VERSIONS = ["0", "1", "1.0", "1.2", "1.2.0.0", "1.9", "1.10", "2.0.1", "10.0.0.1", "3.4.5.6"]


def test_equal_versions_compare_zero():
    """Test a version compares equal to itself."""
    for v in SAMPLE_VERSIONS:
        assert compare_version(v, v) == 0


def test_comparison_is_antisymmetric():
    """Test compare(a, b) == -compare(b, a) for all sample pairs."""
    for a in SAMPLE_VERSIONS:
        for b in SAMPLE_VERSIONS:
            assert compare_version(a, b) == -compare_version(b, a)


def test_padding_equivalence():
    """Test missing trailing components count as zero."""
    assert compare_version("1.2", "1.2.0.0") == 0
    assert compare_version("1.2", "1.2.0") == 0
    assert compare_version("1", "1.0.0.0") == 0


def test_numeric_not_lexicographic():
    """Test components compare as numbers."""
    assert compare_version("1.9", "1.10") < 0
    assert compare_version("10", "9") > 0


def test_returns_signed_difference():
    """Test the first differing component decides the result."""
    assert compare_version("1.5", "1.2") == 3
    assert compare_version("1.2.3", "1.2.7") == -4
    assert compare_version("2", "1.99.99") > 0


def test_usable_as_sort_comparator():
    """Test compare_version works with cmp_to_key."""
    ordered = sorted(["1.10", "1.2", "0.9", "1.9.1"], key=cmp_to_key(compare_version))
    assert ordered == ["0.9", "1.2", "1.9.1", "1.10"]


@pytest.mark.parametrize("value", ["1.2-beta", "v1.0", "1.2.3.4.5", "", "1.", ".1", "1..2", "a.b", " 1.0", "1.0\n", "١.٢", "１.０"])
def test_invalid_a_raises_validation_error(value):
    """Test invalid first argument names parameter a."""
    with pytest.raises(ValidationError) as exc_info:
        compare_version(value, "1.0")
    assert exc_info.value.parameter == "a"
    assert exc_info.value.value == value
    assert '"a"' in str(exc_info.value)


def test_invalid_b_raises_validation_error():
    """Test invalid second argument names parameter b."""
    with pytest.raises(ValidationError) as exc_info:
        compare_version("1.0", "2.0-rc1")
    assert exc_info.value.parameter == "b"


def test_non_string_rejected():
    """Test non-string values fail validation instead of comparing."""
    with pytest.raises(ValidationError):
        compare_version(1, "1.0")


def test_non_ascii_digits_rejected():
    """Test only ASCII digits count as version components."""
    assert not is_valid_version("١.٢")
    assert not is_valid_version("１.０")
    with pytest.raises(ValidationError) as exc_info:
        compare_version("1.0", "٢")
    assert exc_info.value.parameter == "b"


def test_validation_error_is_value_error():
    """Test callers catching ValueError also see version errors."""
    with pytest.raises(ValueError):
        compare_version("1.2-beta", "1.0")


def test_is_valid_version():
    assert is_valid_version("1.2.3.4")
    assert not is_valid_version("1.2.3.4.5")
    assert not is_valid_version(None)


def test_sort_versions():
    """Test release descriptors sort by version."""
    releases = [
        VersionData(version=v, url=f"https://example.com/{v}.zip")
        for v in ["2.0", "1.10", "1.9"]
    ]
    assert [r.version for r in sort_versions(releases)] == ["1.9", "1.10", "2.0"]
    assert [r.version for r in sort_versions(releases, reverse=True)] == ["2.0", "1.10", "1.9"]
