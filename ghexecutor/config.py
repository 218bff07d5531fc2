"""
Configuration management for gh-executor.

Implements multi-level configuration loading with precedence:
1. Configuration passed in by the host bot for the current command (highest priority)
2. Environment variables (GH_EXECUTOR_*)
3. Project config (./.gh-executor/config.yaml)
4. User config (~/.gh-executor/config.yaml)
5. System config (/etc/gh-executor/config.yaml)
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource, PydanticBaseSettingsSource

from ghexecutor.errors import ConfigError


class GitHubConfig(BaseModel):
    """GitHub access and issue settings."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: str = Field(default="", description="Token passed to gh as GH_TOKEN")
    repository: str = Field(default="", description="Target repository in owner/name form")
    issue_template: str = Field(
        default="",
        validation_alias=AliasChoices("issue_template", "issueTemplate", "issuetemplate"),
        description="Jinja2 template for the issue body (empty for the built-in one)",
    )


class Config(BaseSettings):
    """Complete configuration schema for gh-executor."""

    model_config = SettingsConfigDict(
        # Load from YAML files in order of precedence (lowest to highest)
        yaml_file=[
            "/etc/gh-executor/config.yaml",  # System-wide
            str(Path.home() / ".gh-executor" / "config.yaml"),  # User-specific
            str(Path.cwd() / ".gh-executor" / "config.yaml"),  # Project-specific
        ],
        env_prefix="GH_EXECUTOR_",
        # Nested environment variables use double underscore
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    github: GitHubConfig = Field(default_factory=GitHubConfig, description="GitHub settings")

    # =================================================================
    # Diagnostics
    # =================================================================
    default_namespace: str = Field(default="default", description="Namespace used when none is given")
    logs_tail_lines: int = Field(default=150, ge=1, description="Number of log lines attached to the issue")

    # =================================================================
    # External commands
    # =================================================================
    command_timeout_seconds: float = Field(
        default=60.0, gt=0, description="Timeout for each kubectl/gh invocation in seconds"
    )
    bin_dir: str = Field(
        default=str(Path.home() / ".gh-executor" / "bin"),
        description="Directory holding the downloaded kubectl and gh binaries",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML support."""
        yaml_settings = YamlConfigSettingsSource(settings_cls)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_configs(configs: Iterable[Dict[str, Any]]) -> Config:
    """Merge the host-supplied configurations into a single Config.

    Later dictionaries override earlier ones; nested sections are merged
    key by key. The result is layered on top of the environment and YAML
    sources.

    Args:
        configs: Raw configuration dictionaries, lowest priority first

    Returns:
        Config: The merged and validated configuration

    Raises:
        ConfigError: If the merged values do not validate
    """
    merged: Dict[str, Any] = {}
    for raw in configs:
        if not raw:
            continue
        if not isinstance(raw, dict):
            raise ConfigError(f"Plugin configuration must be a mapping, got {type(raw).__name__}")
        merged = _deep_merge(merged, raw)

    try:
        return Config(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid plugin configuration: {e}") from e


def load_config() -> Config:
    """
    Load configuration from environment and YAML files only.

    Examples:
        >>> config = load_config()
        >>> print(config.default_namespace)
        'default'

        Environment variable override:
        # export GH_EXECUTOR_GITHUB__REPOSITORY=acme/widgets
        >>> config = load_config()
        >>> print(config.github.repository)
        'acme/widgets'
    """
    return merge_configs([])
