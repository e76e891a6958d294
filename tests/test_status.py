import logging

import pytest

from buildwatch.core.builds import BuildStatusEnum, VendorBuildStatus
from buildwatch.core.status import (
    derive_status,
    quality_gate_failed,
    status_from_quality,
    status_from_vendor,
)


@pytest.mark.parametrize(
    ("vendor", "expected"),
    [
        (VendorBuildStatus.FAILED, BuildStatusEnum.BROKEN),
        (VendorBuildStatus.SUCCEEDED, BuildStatusEnum.WORKING),
        (VendorBuildStatus.PARTIALLY_SUCCEEDED, BuildStatusEnum.BROKEN),
        (VendorBuildStatus.IN_PROGRESS, BuildStatusEnum.IN_PROGRESS),
        (VendorBuildStatus.NOT_STARTED, BuildStatusEnum.IN_PROGRESS),
        (VendorBuildStatus.STOPPED, BuildStatusEnum.UNKNOWN),
        (VendorBuildStatus.NONE, BuildStatusEnum.UNKNOWN),
    ],
)
def test_derive_status_without_quality(vendor, expected):
    assert derive_status(vendor, "Rejected", apply_quality=False) == expected


def test_status_from_vendor_accepts_raw_strings():
    assert status_from_vendor("Succeeded") == BuildStatusEnum.WORKING
    assert status_from_vendor("SomethingNew") == BuildStatusEnum.UNKNOWN


def test_unknown_vendor_status_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="buildwatch.core.status"):
        status_from_vendor("Exploded")

    assert "Exploded" in caplog.text


@pytest.mark.parametrize(
    ("quality", "expected"),
    [
        ("Initial Test Passed", BuildStatusEnum.WORKING),
        ("Lab Test Passed", BuildStatusEnum.WORKING),
        ("Ready for Deployment", BuildStatusEnum.WORKING),
        ("Released", BuildStatusEnum.WORKING),
        ("UAT Passed", BuildStatusEnum.WORKING),
        ("Under Investigation", BuildStatusEnum.IN_PROGRESS),
        ("Rejected", BuildStatusEnum.BROKEN),
        ("Something else", BuildStatusEnum.UNKNOWN),
        (None, BuildStatusEnum.UNKNOWN),
    ],
)
def test_quality_overrides_working_base(quality, expected):
    assert derive_status(VendorBuildStatus.SUCCEEDED, quality, apply_quality=True) == expected


@pytest.mark.parametrize(
    ("vendor", "expected"),
    [
        (VendorBuildStatus.FAILED, BuildStatusEnum.BROKEN),
        (VendorBuildStatus.IN_PROGRESS, BuildStatusEnum.IN_PROGRESS),
    ],
)
def test_quality_never_upgrades_broken_or_in_progress(vendor, expected):
    assert derive_status(vendor, "Released", apply_quality=True) == expected


def test_quality_lookup_is_exact():
    assert status_from_quality("released") == BuildStatusEnum.UNKNOWN


def test_quality_gate_failed_only_when_enabled():
    assert quality_gate_failed("Rejected", apply_quality=True) is True
    assert quality_gate_failed("Rejected", apply_quality=False) is False
    assert quality_gate_failed("Released", apply_quality=True) is False
    assert quality_gate_failed(None, apply_quality=True) is False
