"""Unit tests for loading execution options from YAML."""

from pathlib import Path

import pytest

from http_utils.errors import IllegalParametersError
from http_utils.fetch.loader import ConfigLoadError, load_execution_config, load_options


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "options.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadOptions:
    """Tests for load_options."""

    @pytest.mark.unit
    def test_reads_mapping(self, tmp_path: Path) -> None:
        """Test that a YAML mapping is returned as a dict."""
        path = _write(tmp_path, "method: POST\nheaders:\n  - 'Accept: */*'\n")

        assert load_options(path) == {"method": "POST", "headers": ["Accept: */*"]}

    @pytest.mark.unit
    def test_empty_file_gives_empty_mapping(self, tmp_path: Path) -> None:
        """Test that an empty file means no options."""
        assert load_options(_write(tmp_path, "")) == {}

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises ConfigLoadError."""
        with pytest.raises(ConfigLoadError) as exc_info:
            load_options(tmp_path / "absent.yaml")

        assert exc_info.value.file_path == tmp_path / "absent.yaml"

    @pytest.mark.unit
    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that unparsable YAML raises ConfigLoadError."""
        with pytest.raises(ConfigLoadError):
            load_options(_write(tmp_path, "method: [unclosed\n"))

    @pytest.mark.unit
    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        """Test that a top-level list is rejected."""
        with pytest.raises(ConfigLoadError) as exc_info:
            load_options(_write(tmp_path, "- a\n- b\n"))

        assert "mapping" in exc_info.value.reason


class TestLoadExecutionConfig:
    """Tests for load_execution_config."""

    @pytest.mark.unit
    def test_camel_case_file(self, tmp_path: Path) -> None:
        """Test a pipeline-style options file."""
        path = _write(
            tmp_path,
            "method: get\n"
            "acceptStatusCodes: ['200-300', '404']\n"
            "timeOutMilliseconds: 500\n"
            "auth:\n"
            "  type: basic\n"
            "  username: alice\n"
            "  password: s3cret\n",
        )

        config = load_execution_config(path)

        assert config.method == "GET"
        assert config.accept_status_codes == ("200-300", "404")
        assert config.timeout_milliseconds == 500
        assert config.auth is not None
        assert config.auth.username == "alice"

    @pytest.mark.unit
    def test_overrides_replace_file_values(self, tmp_path: Path) -> None:
        """Test that overrides win over both key spellings in the file."""
        path = _write(tmp_path, "errorsAreFatal: true\nmethod: GET\n")

        config = load_execution_config(path, {"errors_are_fatal": False, "method": "POST"})

        assert config.errors_are_fatal is False
        assert config.method == "POST"

    @pytest.mark.unit
    def test_schema_error_is_wrapped(self, tmp_path: Path) -> None:
        """Test that schema errors name the offending field."""
        path = _write(tmp_path, "timeoutMilliseconds: -5\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_execution_config(path)

        assert "timeout" in exc_info.value.reason

    @pytest.mark.unit
    def test_conflicts_surface_unwrapped(self, tmp_path: Path) -> None:
        """Test that contradictory options raise IllegalParametersError."""
        path = _write(tmp_path, "method: HEAD\n")

        with pytest.raises(IllegalParametersError):
            load_execution_config(path)
