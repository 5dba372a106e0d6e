import re
from typing import Optional

from release_stats.stats.models import (
    DATE_BASED,
    MAJOR,
    MINOR,
    OTHER,
    PATCH,
    SCOPED_PACKAGE,
    VersionInfo,
)

# @scope/name@1.2.3
SCOPED_PACKAGE_PATTERN = re.compile(r"^@[^/@\s]+/[^@\s]+@(\d+)\.(\d+)\.(\d+)$")
# v1.2.3 or 1.2.3
SEMVER_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")
# 20240501.1
DATE_BASED_PATTERN = re.compile(r"^\d{8}\.\d+$")

UNKNOWN_VERSION = VersionInfo(None, None, None, OTHER)


def classify_version(tag_name: Optional[str]) -> VersionInfo:
    """
    Classify a release tag into a version triple and a release type.

    Patterns are tried in order: scoped package, plain semver, date based.
    For plain semver tags the type is chosen by the most significant non-zero
    component, so "1.2.3" is Major and "0.0.0" is Other. Anything that does
    not match yields Other with no version fields.
    """
    if not tag_name or not isinstance(tag_name, str):
        return UNKNOWN_VERSION

    tag = tag_name.strip()

    match = SCOPED_PACKAGE_PATTERN.match(tag)
    if match:
        major, minor, patch = (int(g) for g in match.groups())
        return VersionInfo(major, minor, patch, SCOPED_PACKAGE)

    match = SEMVER_PATTERN.match(tag)
    if match:
        major, minor, patch = (int(g) for g in match.groups())
        if major > 0:
            release_type = MAJOR
        elif minor > 0:
            release_type = MINOR
        elif patch > 0:
            release_type = PATCH
        else:
            release_type = OTHER
        return VersionInfo(major, minor, patch, release_type)

    if DATE_BASED_PATTERN.match(tag):
        return VersionInfo(None, None, None, DATE_BASED)

    return UNKNOWN_VERSION
