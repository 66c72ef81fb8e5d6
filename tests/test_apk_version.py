"""Tests for apk version ordering."""

import pytest

from versioning.apk_version import compare_versions, is_valid, version_key


@pytest.mark.parametrize(
    "lower, higher",
    [
        ("3.13.0-r0", "3.13.0-r1"),
        ("3.12.9-r5", "3.13.0-r0"),
        ("1.2", "1.2.1"),
        ("1.9", "1.10"),
        ("1.0_rc1", "1.0"),
        ("1.0_alpha1", "1.0_beta1"),
        ("1.0_beta2", "1.0_rc1"),
        ("1.0", "1.0_p1"),
        ("1.0_p1", "1.0_p2"),
        ("1.0a", "1.0b"),
        ("2024.01.05_git20240105-r3", "2024.01.05_git20240106-r0"),
        ("not a version", "0.0.1"),
        ("1.010", "1.09"),
        ("1.01", "1.1"),
        ("1.0", "1.1"),
        ("1.09", "1.10"),
        ("1", "1.0"),
    ],
)
def test_ordering(lower, higher):
    assert compare_versions(lower, higher) == -1
    assert compare_versions(higher, lower) == 1


def test_equal_versions():
    assert compare_versions("1.2.3-r0", "1.2.3-r0") == 0
    assert compare_versions("1.2.3", "1.2.3-r0") == 0


def test_validity():
    assert is_valid("3.13.0-r1")
    assert is_valid("1.2.3a_rc2_p1~0123abc-r10")
    assert not is_valid("")
    assert not is_valid("latest")
    assert not is_valid("1.2.3-rc1")


def test_invalid_versions_compare_equal_and_lowest():
    assert compare_versions("garbage", "also-garbage") == 0
    assert version_key("garbage") < version_key("0")


def test_sorting_is_stable_for_invalid_versions():
    versions = ["bad-b", "2.0-r0", "bad-a", "1.0-r0"]
    assert sorted(versions, key=version_key) == ["bad-b", "bad-a", "1.0-r0", "2.0-r0"]


def test_first_component_is_always_numeric():
    assert compare_versions("010.0", "9.0") == 1
    assert compare_versions("01.5", "1.5") == 0


def test_leading_zero_components_compare_as_strings():
    assert compare_versions("2024.01.05-r0", "2024.1.5-r0") == -1
    assert compare_versions("1.001", "1.01") == -1
    assert compare_versions("1.010", "1.010") == 0
