"""Version Enforcement — pure checks for optimistic concurrency tokens.

Invariants:
    - A token is exactly a double-quoted run of decimal digits ("0", "17")
    - Negative, empty, unquoted or padded tokens are invalid
    - A supplied version is outdated only when strictly LESS than the stored one

Design Decisions:
    - Strict less-than kept: a version ahead of the stored one is accepted
      (ADR: preserved behavior; the stored version still decides the new one)
"""

import re

from car_registry.core.errors import VersionInvalidError, VersionOutdatedError

VERSION_TOKEN_PATTERN = re.compile(r'"([0-9]+)"')


def parse_version_token(token: str | None) -> int:
    """Return the integer inside a quoted version token or raise VersionInvalidError."""
    if token is None:
        raise VersionInvalidError(token)
    match = VERSION_TOKEN_PATTERN.fullmatch(token)
    if not match:
        raise VersionInvalidError(token)
    return int(match.group(1))


def check_version_current(supplied: int, stored: int) -> None:
    """Raise VersionOutdatedError when the supplied version lags behind."""
    if supplied < stored:
        raise VersionOutdatedError(supplied)


def format_version_token(version: int) -> str:
    """Inverse of parse_version_token — used for ETag headers."""
    return f'"{version}"'
