"""
Dotted version string comparison.
"""
import re

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def _split(version: str) -> list:
    # "3.7." has the same components as "3.7"
    parts = version.split(".")
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def is_outdated(current: str, latest: str) -> bool:
    """
    Check whether a detected version is older than the latest known one.

    Components are compared left to right up to the shorter length, after
    stripping non-digits ("1.11.1-rc" -> 1, 11, 1). When every compared
    component is equal, the version with fewer components is the older one.

    Args:
        current (str): Detected version, e.g. "1.11.1"
        latest (str): Latest known version, e.g. "3.7.1"

    Returns:
        bool: True if current < latest. Unparseable input (a compared
        component with no digits at all) is never outdated.

    Example:
        is_outdated("1.9", "1.9.1") -> True
        is_outdated("1.9.", "1.9.1") -> True
        is_outdated("2.0", "1.9") -> False
        is_outdated("abc", "1.0") -> False
    """
    try:
        current_parts = _split(current)
        latest_parts = _split(latest)

        for cur, lat in zip(current_parts, latest_parts):
            cur_num = int(_NON_DIGIT_RE.sub("", cur))
            lat_num = int(_NON_DIGIT_RE.sub("", lat))
            if cur_num < lat_num:
                return True
            if cur_num > lat_num:
                return False

        return len(current_parts) < len(latest_parts)
    except (AttributeError, TypeError, ValueError):
        return False
