"""Version string normalization."""

import re

from ..errors import InvalidVersionError

# Numeric components are bounded so int() never hits the digit limit.
_VERSION_RE = re.compile(
    r"^[vV]?"
    r"(?P<major>\d{1,16})"
    r"(?:\.(?P<minor>\d{1,16}))?"
    r"(?:\.(?P<patch>\d{1,16}))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


def normalize_version(raw: str) -> str:
    """Map a version-like string to its canonical identifier.

    ``"v2.0"``, ``" 2.0.0 "`` and ``"2.00.0"`` all become ``"2.0.0"``.
    Prerelease and build suffixes are kept verbatim. Anything that does not
    look like a version raises :class:`InvalidVersionError`.
    """
    if not isinstance(raw, str):
        raise InvalidVersionError(raw)

    match = _VERSION_RE.match(raw.strip())
    if not match:
        raise InvalidVersionError(raw)

    parts = [int(match.group(name) or 0) for name in ("major", "minor", "patch")]
    version = ".".join(str(part) for part in parts)

    if match.group("prerelease"):
        version += f"-{match.group('prerelease')}"
    if match.group("build"):
        version += f"+{match.group('build')}"
    return version


def is_valid_version(raw: str) -> bool:
    """Check whether ``raw`` normalizes."""
    try:
        normalize_version(raw)
    except InvalidVersionError:
        return False
    return True
