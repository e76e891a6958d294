"""Status derivation tables.

Vendor status codes and build quality labels are translated to a
BuildStatusEnum through two explicit lookup tables. Anything that is not in
a table resolves to UNKNOWN and is logged; it is never raised.
"""

from __future__ import annotations

import logging
from typing import Mapping

from buildwatch.core.builds import BuildStatusEnum, VendorBuildStatus

logger = logging.getLogger(__name__)

QUALITY_FAILURE_PREFIX = (
    "Build deployment or test failure. "
    "Please see test server or test results for details.\n"
)

VENDOR_STATUS_TABLE: Mapping[VendorBuildStatus, BuildStatusEnum] = {
    VendorBuildStatus.FAILED: BuildStatusEnum.BROKEN,
    VendorBuildStatus.SUCCEEDED: BuildStatusEnum.WORKING,
    VendorBuildStatus.PARTIALLY_SUCCEEDED: BuildStatusEnum.BROKEN,
    VendorBuildStatus.IN_PROGRESS: BuildStatusEnum.IN_PROGRESS,
    # the server reports NotStarted briefly right after a build finishes
    VendorBuildStatus.NOT_STARTED: BuildStatusEnum.IN_PROGRESS,
}

QUALITY_TABLE: Mapping[str, BuildStatusEnum] = {
    "Initial Test Passed": BuildStatusEnum.WORKING,
    "Lab Test Passed": BuildStatusEnum.WORKING,
    "Ready for Deployment": BuildStatusEnum.WORKING,
    "Released": BuildStatusEnum.WORKING,
    "UAT Passed": BuildStatusEnum.WORKING,
    "Under Investigation": BuildStatusEnum.IN_PROGRESS,
    "Rejected": BuildStatusEnum.BROKEN,
}


def status_from_vendor(status: VendorBuildStatus | str) -> BuildStatusEnum:
    """Map a vendor status code to a BuildStatusEnum (UNKNOWN if unmapped)."""
    try:
        return VENDOR_STATUS_TABLE[VendorBuildStatus(status)]
    except (KeyError, ValueError):
        logger.debug("Unhandled build status returned from server: %s", status)
        return BuildStatusEnum.UNKNOWN


def status_from_quality(quality: str | None) -> BuildStatusEnum:
    """Map a build quality label to a BuildStatusEnum (UNKNOWN if unmapped)."""
    if quality is None:
        return BuildStatusEnum.UNKNOWN
    result = QUALITY_TABLE.get(quality)
    if result is None:
        logger.debug("Unhandled build quality returned from server: %s", quality)
        return BuildStatusEnum.UNKNOWN
    return result


def derive_status(
    status: VendorBuildStatus | str,
    quality: str | None,
    apply_quality: bool,
) -> BuildStatusEnum:
    """
    Derive the normalized status of a build.

    The vendor status code gives the base status. When quality evaluation is
    enabled and the base status is WORKING, the quality label decides instead;
    a BROKEN or IN_PROGRESS base is never changed by quality.

    Args:
        status: Vendor status code reported for the build.
        quality: Optional quality label of the build.
        apply_quality: Whether the quality label may override a WORKING base.

    Returns:
        The derived BuildStatusEnum.
    """
    base = status_from_vendor(status)
    if apply_quality and base == BuildStatusEnum.WORKING:
        return status_from_quality(quality)
    return base


def quality_gate_failed(quality: str | None, apply_quality: bool) -> bool:
    """Return True when quality evaluation is on and the quality is a rejection."""
    return apply_quality and status_from_quality(quality) == BuildStatusEnum.BROKEN
