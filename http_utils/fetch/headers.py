"""Parsing of ``"key: value"`` header lines."""

from collections.abc import Sequence

import httpx

from http_utils.errors import InvalidHeadersError


def parse_headers(lines: Sequence[str]) -> httpx.Headers:
    """Parse header lines into a case-insensitive header collection.

    Each line is split on its first colon, so values such as URLs keep
    their own colons. Repeated keys are appended rather than overwritten.

    Args:
        lines: Header lines in ``key: value`` format.

    Returns:
        Parsed headers.

    Raises:
        InvalidHeadersError: If a line is missing its key or its value.
    """
    pairs: list[tuple[str, str]] = []
    for line in lines:
        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip()
        if not key or not value:
            raise InvalidHeadersError(line)
        pairs.append((key, value))
    return httpx.Headers(pairs)
