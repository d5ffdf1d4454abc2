"""Accept rules for HTTP response status codes.

A rule is either an integer literal such as ``"204"`` or a half-open range
such as ``"200-300"`` (start inclusive, end exclusive).
"""

import re
from collections.abc import Sequence

from http_utils.constants import STATUS_RULE_SENTINEL
from http_utils.errors import InvalidStatusCodeRangeError


_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_bound(value: str, rule: str) -> int:
    # ASCII digits only, no underscores.
    bound = value.strip()
    if not _INTEGER.fullmatch(bound):
        raise InvalidStatusCodeRangeError(rule)
    return int(bound)


def _rule_matches(status_code: int, rule: str) -> bool:
    if "-" in rule:
        start, end = rule.split("-", 1)
        return _parse_bound(start, rule) <= status_code < _parse_bound(end, rule)
    return status_code == _parse_bound(rule, rule)


def status_code_accepted(status_code: int, accept_status_codes: Sequence[str]) -> bool:
    """Check whether a status code is accepted by any of the given rules.

    Every rule is parsed, even after one has already matched, so a malformed
    rule is reported no matter where it sits in the list.

    Args:
        status_code: The code to check.
        accept_status_codes: Literal or range rules.

    Returns:
        True if at least one rule matches.

    Raises:
        InvalidStatusCodeRangeError: If any rule fails to parse.
    """
    matches = [_rule_matches(status_code, rule) for rule in accept_status_codes]
    return any(matches)


def validate_status_rules(accept_status_codes: Sequence[str]) -> None:
    """Validate accept rules up front by checking them against a sentinel.

    Raises:
        InvalidStatusCodeRangeError: If any rule fails to parse.
    """
    status_code_accepted(STATUS_RULE_SENTINEL, accept_status_codes)
