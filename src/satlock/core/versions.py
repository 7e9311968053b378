"""Version parsing and ordering.

Versions are one to three dot-separated numeric components with an
optional SemVer pre-release and build suffix (``1``, ``1.2``, ``1.2.3``,
``2.0.0-rc.1+build.5``). Missing components count as zero, so ``1.0`` and
``1.0.0`` are the same release. Build metadata never affects precedence,
and a pre-release sorts below its release (SemVer 2.0.0, section 11).

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import re

VERSION_PATTERN = (
    r"v?(?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*)){0,2}"
    r"(?:-[0-9A-Za-z\-.]+)?(?:\+[0-9A-Za-z\-.]+)?"
)

_VERSION_RE = re.compile(
    r"^v?(?P<release>(?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*)){0,2})"
    r"(?:-(?P<pre>[0-9A-Za-z\-.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-.]+))?$"
)


def parse_version(version: str) -> tuple[int, int, int]:
    """Parse a version string into a (major, minor, patch) tuple.

    Args:
        version: Version string (e.g., "1.2.3", "2.0", "0.1.0-alpha").

    Returns:
        A (major, minor, patch) integer tuple; missing parts are zero.

    Raises:
        ValueError: If the string is not a valid version.
    """
    m = _VERSION_RE.match(version.strip())
    if not m:
        raise ValueError(f"Invalid version: {version!r}")
    parts = [int(p) for p in m.group("release").split(".")]
    parts.extend([0] * (3 - len(parts)))
    return parts[0], parts[1], parts[2]


def is_valid_version(version: str) -> bool:
    return bool(_VERSION_RE.match(version.strip()))


def _prerelease_key(pre: str) -> tuple[tuple[int, int | str], ...]:
    # numeric identifiers sort below alphanumeric ones
    return tuple(
        (0, int(ident)) if ident.isdigit() else (1, ident)
        for ident in pre.split(".")
    )


def version_key(version: str) -> tuple:
    """Sort key ordering versions by precedence (ascending).

    Unparseable strings never raise: they sort below every valid version,
    among themselves by plain string order.
    """
    m = _VERSION_RE.match(version.strip())
    if not m:
        return (-1, -1, -1, 0, ((1, version),))
    release = parse_version(version)
    pre = m.group("pre")
    if pre is None:
        return (*release, 1, ())
    return (*release, 0, _prerelease_key(pre))
