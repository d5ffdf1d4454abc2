"""Unit tests for status code accept rules."""

import pytest

from http_utils.errors import HttpUtilsErrorType, InvalidStatusCodeRangeError
from http_utils.fetch.status import status_code_accepted, validate_status_rules


class TestStatusCodeAccepted:
    """Tests for status_code_accepted."""

    @pytest.mark.unit
    def test_literal_rule_matches_exact_code(self) -> None:
        """Test that a literal rule matches only its own code."""
        assert status_code_accepted(204, ["204"])
        assert not status_code_accepted(200, ["204"])

    @pytest.mark.unit
    def test_range_start_is_inclusive(self) -> None:
        """Test that the range start is accepted."""
        assert status_code_accepted(200, ["200-300"])

    @pytest.mark.unit
    def test_range_end_is_exclusive(self) -> None:
        """Test that the range end is rejected."""
        assert status_code_accepted(299, ["200-300"])
        assert not status_code_accepted(300, ["200-300"])

    @pytest.mark.unit
    def test_any_rule_may_match(self) -> None:
        """Test that one matching rule among several is enough."""
        assert status_code_accepted(501, ["200-300", "500-502"])
        assert not status_code_accepted(502, ["200-300", "500-502"])

    @pytest.mark.unit
    def test_whitespace_around_bounds_is_ignored(self) -> None:
        """Test that bounds are trimmed before parsing."""
        assert status_code_accepted(404, [" 400 - 500 "])

    @pytest.mark.unit
    def test_empty_rules_accept_nothing(self) -> None:
        """Test that an empty rule list matches no code."""
        assert not status_code_accepted(200, [])

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "rule",
        ["abc", "200-", "-300", "2xx", "200-3x0", "", "2_00", "1_000", "２００", "200-3_00"],
    )
    def test_malformed_rule_raises(self, rule: str) -> None:
        """Test that malformed rules raise InvalidStatusCodeRangeError."""
        with pytest.raises(InvalidStatusCodeRangeError) as exc_info:
            status_code_accepted(200, [rule])

        assert exc_info.value.error_type == HttpUtilsErrorType.INVALID_STATUS_CODE_RANGE
        assert str(exc_info.value) == "Invalid status code range"

    @pytest.mark.unit
    def test_malformed_rule_after_match_still_raises(self) -> None:
        """Test that every rule is parsed even after an earlier match."""
        with pytest.raises(InvalidStatusCodeRangeError):
            status_code_accepted(200, ["200-300", "oops"])


class TestValidateStatusRules:
    """Tests for up-front rule validation."""

    @pytest.mark.unit
    def test_valid_rules_pass(self) -> None:
        """Test that well-formed rules validate."""
        validate_status_rules(["200-300", "404"])

    @pytest.mark.unit
    def test_invalid_rule_is_reported(self) -> None:
        """Test that a malformed rule is reported with its text."""
        with pytest.raises(InvalidStatusCodeRangeError) as exc_info:
            validate_status_rules(["200-300", "five hundred"])

        assert exc_info.value.rule == "five hundred"
