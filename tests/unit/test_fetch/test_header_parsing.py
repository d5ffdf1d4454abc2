"""Unit tests for header line parsing."""

import pytest

from http_utils.errors import InvalidHeadersError
from http_utils.fetch.headers import parse_headers


class TestParseHeaders:
    """Tests for parse_headers."""

    @pytest.mark.unit
    def test_parses_key_value_lines(self) -> None:
        """Test that each line becomes one header."""
        headers = parse_headers(["Accept: application/json", "X-Trace:abc"])

        assert headers["Accept"] == "application/json"
        assert headers["X-Trace"] == "abc"
        assert len(headers) == 2

    @pytest.mark.unit
    def test_keys_are_case_insensitive(self) -> None:
        """Test that lookups ignore case."""
        headers = parse_headers(["Content-Type: text/plain"])

        assert headers["content-type"] == "text/plain"

    @pytest.mark.unit
    def test_splits_on_first_colon_only(self) -> None:
        """Test that values keep their own colons."""
        headers = parse_headers(["Referer: https://example.com:8443/path"])

        assert headers["Referer"] == "https://example.com:8443/path"

    @pytest.mark.unit
    def test_repeated_keys_are_kept(self) -> None:
        """Test that a repeated key keeps every value."""
        headers = parse_headers(["X-Tag: a", "X-Tag: b"])

        assert headers.get_list("X-Tag") == ["a", "b"]

    @pytest.mark.unit
    def test_empty_input_gives_empty_headers(self) -> None:
        """Test that no lines give no headers."""
        assert len(parse_headers([])) == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("line", ["no-colon", ": value", "Key:", "Key:   ", "   "])
    def test_malformed_line_raises(self, line: str) -> None:
        """Test that a line without key or value is rejected."""
        with pytest.raises(InvalidHeadersError) as exc_info:
            parse_headers(["Accept: */*", line])

        assert str(exc_info.value) == "Invalid headers"
        assert exc_info.value.line == line
