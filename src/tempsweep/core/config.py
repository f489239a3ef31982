"""Configuration system for tempsweep.

This module implements the configuration schema using Pydantic for
validation, loaded from an optional YAML file with support for environment
variable resolution and fail-fast validation with actionable error messages.

The disposability rules themselves are fixed; configuration only covers
logging, which categories to scan, and additional roots.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tempsweep.core.classifier import DEFAULT_DOWNLOAD_CATEGORIES
from tempsweep.types.models import CandidateRoot

# Matches ${VARIABLE_NAME} syntax where VARIABLE_NAME can contain letters, digits, and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z0-9_]+)\}")


class ApplicationConfig(BaseModel):
    """Configuration for application-level settings."""

    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"
    syslog_enabled: Annotated[
        bool,
        Field(
            description="Send log records to the local syslog socket",
        ),
    ] = False


class RootConfig(BaseModel):
    """An additional directory to scan, with its category label."""

    path: Annotated[Path, Field(description="Directory to scan")]
    category: Annotated[
        str,
        Field(
            min_length=1,
            description="Category label used to group results",
        ),
    ]

    @field_validator("path", mode="after")
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        """Expand a leading ``~`` in the configured path.

        Args:
            v: Configured path

        Returns:
            Path with the home directory expanded
        """
        return v.expanduser()

    @field_validator("category", mode="after")
    @classmethod
    def validate_category_not_blank(cls, v: str) -> str:
        """Reject categories made only of whitespace.

        Raises:
            ValueError: If the category is blank
        """
        if not v.strip():
            msg = "Category must not be blank"
            raise ValueError(msg)
        return v.strip()


class ScanConfig(BaseModel):
    """Configuration for which roots are scanned."""

    extra_roots: Annotated[
        list[RootConfig],
        Field(
            description="Directories scanned in addition to the built-in locations",
        ),
    ] = []
    categories: Annotated[
        list[str],
        Field(
            description="Only scan roots with these categories (empty means all)",
        ),
    ] = []
    download_categories: Annotated[
        list[str],
        Field(
            description="Root categories subject to the stale-download rule",
        ),
    ] = list(DEFAULT_DOWNLOAD_CATEGORIES)

    def candidate_roots(self) -> list[CandidateRoot]:
        """Convert configured extra roots to candidate roots."""
        return [CandidateRoot(path=str(r.path), category=r.category) for r in self.extra_roots]

    def select(self, candidates: list[CandidateRoot]) -> list[CandidateRoot]:
        """Filter candidates down to the configured categories.

        Args:
            candidates: Resolved candidate roots

        Returns:
            Candidates whose category is enabled (all when no filter is set)
        """
        if not self.categories:
            return candidates
        enabled = {c.casefold() for c in self.categories}
        return [c for c in candidates if c.category.casefold() in enabled]


class MainConfig(BaseModel):
    """Main application configuration schema.

    Top-level configuration container aggregating:
    - application: Logging settings
    - scan: Root selection

    Both sections have defaults, so an empty configuration file is valid.
    """

    application: Annotated[
        ApplicationConfig,
        Field(
            default_factory=ApplicationConfig,
            description="Application-level configuration",
        ),
    ]
    scan: Annotated[
        ScanConfig,
        Field(
            default_factory=ScanConfig,
            description="Scan root configuration",
        ),
    ]


class EnvironmentVariableError(Exception):
    """Exception raised when environment variable resolution fails."""


class ConfigurationError(Exception):
    """Exception raised when configuration loading or validation fails.

    Carries detailed, actionable error messages for missing files, YAML
    parsing errors and validation failures.
    """


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Args:
        value: String potentially containing ${VARIABLE_NAME} references

    Returns:
        String with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing

    Examples:
        >>> os.environ["SCRATCH"] = "/data/scratch"
        >>> resolve_env_var("${SCRATCH}/tmp")
        '/data/scratch/tmp'
        >>> resolve_env_var("no variables here")
        'no variables here'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = (
                f"Required environment variable '{var_name}' is not set. "
                f"Please set this variable before starting the application."
            )
            raise EnvironmentVariableError(msg)

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in a dictionary.

    Traverses nested dictionaries and lists, resolving references in string
    values. Non-string values are preserved as-is.

    Args:
        data: Dictionary potentially containing environment variable references

    Returns:
        New dictionary with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing
    """
    return {key: _resolve_value(value) for key, value in data.items()}


def _resolve_value(value: object) -> object:
    if isinstance(value, str):
        return resolve_env_var(value)
    if isinstance(value, dict):
        # YAML data is untyped at load time; validated by Pydantic after resolution
        return resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]  # YAML list items
    return value


def load_main_config(config_path: Path) -> MainConfig:
    """Load and validate application configuration from a YAML file.

    Args:
        config_path: Path to configuration YAML file

    Returns:
        Validated MainConfig instance

    Raises:
        ConfigurationError: If the file cannot be loaded, references an unset
            environment variable, or fails validation
    """
    if not config_path.exists():
        msg = (
            f"Configuration file not found: {config_path}\n"
            f"Please create a configuration file at this location or omit --config."
        )
        raise ConfigurationError(msg)

    try:
        with config_path.open("r") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg) from e

    # An empty file loads as None and means "all defaults"
    if raw_data is None:
        raw_data = {}

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}\n"
            f"Configuration file must contain key-value pairs."
        )
        raise ConfigurationError(msg)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    except EnvironmentVariableError as e:
        msg = (
            f"Environment variable resolution failed in: {config_path}\n"
            f"{e}\n"
            f"Set the required environment variable before starting the application."
        )
        raise ConfigurationError(msg) from e

    try:
        config = MainConfig.model_validate(resolved_data)
    except ValidationError as e:
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"])
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append(f"  Type: {error['type']}")
            error_lines.append("")

        error_lines.append(f"Configuration file: {config_path}")
        error_lines.append("Please fix the above errors and try again.")

        msg = "\n".join(error_lines)
        raise ConfigurationError(msg) from e

    return config
