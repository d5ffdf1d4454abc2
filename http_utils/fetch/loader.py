"""Loading execution options from a YAML file."""

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from http_utils.fetch.config import ExecutionConfig


logger = structlog.get_logger()


class ConfigLoadError(Exception):
    """Raised when an options file cannot be read or validated."""

    def __init__(self, file_path: Path, reason: str) -> None:
        """Initialize the error.

        Args:
            file_path: Path to the file that failed.
            reason: Human-readable reason.
        """
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Cannot load options from {file_path}: {reason}")


def load_options(file_path: Path) -> dict[str, object]:
    """Read a YAML options mapping.

    Args:
        file_path: Path to the YAML file.

    Returns:
        Parsed options; an empty file yields an empty mapping.

    Raises:
        ConfigLoadError: If the file is unreadable or not a mapping.
    """
    try:
        parsed = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(file_path, str(e)) from e

    if not isinstance(parsed, dict):
        raise ConfigLoadError(file_path, "top-level value must be a mapping")
    return parsed


def load_execution_config(
    file_path: Path,
    overrides: dict[str, object] | None = None,
) -> ExecutionConfig:
    """Load and validate execution options from a YAML file.

    Args:
        file_path: Path to the YAML file.
        overrides: Values that replace the file's entries, keyed by field name.

    Returns:
        Validated execution options.

    Raises:
        ConfigLoadError: If the file is unreadable or fails schema validation.
        IllegalParametersError: If the options contradict each other.
        InvalidStatusCodeRangeError: If an accept rule is malformed.
    """
    options = load_options(file_path)
    for key, value in (overrides or {}).items():
        options.pop(to_camel(key), None)
        options[key] = value

    try:
        config = ExecutionConfig.model_validate(options)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigLoadError(file_path, details) from e

    logger.debug("options_loaded", component="config", path=str(file_path))
    return config
