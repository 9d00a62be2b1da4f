"""Configuration management for cli-web-search.

This module provides configuration models and loading functionality using Pydantic
for validation and type safety. Settings are read from a YAML file in the user's
config directory and can be overridden with ``CLI_WEB_SEARCH_*`` environment
variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import SearchConfigError

APP_NAME = "cli-web-search"
ENV_PREFIX = "CLI_WEB_SEARCH_"

# Registration order used when building the provider registry.
PROVIDER_NAMES: tuple[str, ...] = (
    "brave",
    "google",
    "duckduckgo",
    "tavily",
    "serper",
    "firecrawl",
    "serpapi",
    "bing",
)

_DOTENV_LOADED = False


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


def _check_provider_name(value: str) -> str:
    name = value.strip().lower()
    if name not in PROVIDER_NAMES:
        raise ValueError(
            f"Unknown provider: {value}. Available providers: {', '.join(PROVIDER_NAMES)}"
        )
    return name


def mask_api_key(key: str) -> str:
    """Mask an API key for display, keeping the first and last four characters.

    Keys of eight characters or fewer are replaced entirely by ``*``.
    """
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}...{key[-4:]}"


class _ConfigModel(BaseModel):
    """Config section that validates values assigned after construction."""

    model_config = ConfigDict(validate_assignment=True)


class RetryPolicyConfig(_ConfigModel):
    """Configuration for provider retry behaviour."""

    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Maximum number of attempts per provider (including the first request)",
    )
    backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Initial delay in seconds before retrying",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        description="Multiplier applied to the backoff delay after each failure",
    )
    max_backoff_seconds: float = Field(
        default=30.0,
        ge=0.0,
        description="Maximum delay cap between retries",
    )


class LoggingConfig(_ConfigModel):
    """Configuration for logging."""

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level


class ApiKeyProviderConfig(_ConfigModel):
    """Configuration shared by providers that authenticate with an API key."""

    api_key: str = Field(default="", description="API key for the provider")
    enabled: bool = Field(default=True, description="Whether this provider is enabled")


class BraveConfig(ApiKeyProviderConfig):
    """Brave Search provider configuration."""


class GoogleConfig(ApiKeyProviderConfig):
    """Google Custom Search Engine configuration."""

    cx: str = Field(default="", description="Custom Search Engine ID")


class DuckDuckGoConfig(_ConfigModel):
    """DuckDuckGo configuration (no API key needed)."""

    enabled: bool = Field(default=True, description="Whether this provider is enabled")


class TavilyConfig(ApiKeyProviderConfig):
    """Tavily configuration."""


class SerperConfig(ApiKeyProviderConfig):
    """Serper configuration."""


class FirecrawlConfig(ApiKeyProviderConfig):
    """Firecrawl configuration."""


class SerpApiConfig(ApiKeyProviderConfig):
    """SerpAPI configuration."""


class BingConfig(ApiKeyProviderConfig):
    """Bing Web Search configuration."""


PROVIDER_SECTIONS: dict[str, type[_ConfigModel]] = {
    "brave": BraveConfig,
    "google": GoogleConfig,
    "duckduckgo": DuckDuckGoConfig,
    "tavily": TavilyConfig,
    "serper": SerperConfig,
    "firecrawl": FirecrawlConfig,
    "serpapi": SerpApiConfig,
    "bing": BingConfig,
}


class ProvidersConfig(_ConfigModel):
    """Provider-specific configurations. A missing section means not set up."""

    brave: BraveConfig | None = Field(default=None, description="Brave Search")
    google: GoogleConfig | None = Field(default=None, description="Google CSE")
    duckduckgo: DuckDuckGoConfig | None = Field(default=None, description="DuckDuckGo")
    tavily: TavilyConfig | None = Field(default=None, description="Tavily")
    serper: SerperConfig | None = Field(default=None, description="Serper")
    firecrawl: FirecrawlConfig | None = Field(default=None, description="Firecrawl")
    serpapi: SerpApiConfig | None = Field(default=None, description="SerpAPI")
    bing: BingConfig | None = Field(default=None, description="Bing Web Search")

    def get_section(self, name: str) -> _ConfigModel | None:
        """Return the configuration section for a provider, if present."""
        return getattr(self, name, None)


class DefaultsConfig(_ConfigModel):
    """Default search options."""

    num_results: int = Field(default=10, ge=1, description="Default number of results")
    safe_search: Literal["off", "moderate", "strict"] = Field(
        default="moderate", description="Default safe search level"
    )
    timeout: int = Field(default=30, ge=1, description="Default timeout in seconds")
    format: Literal["json", "markdown", "text"] = Field(
        default="text", description="Default output format"
    )


class CacheConfig(_ConfigModel):
    """Result cache configuration."""

    enabled: bool = Field(default=True, description="Whether caching is enabled")
    ttl_seconds: int = Field(default=3600, ge=0, description="Time-to-live in seconds")
    max_entries: int = Field(default=1000, ge=1, description="Maximum number of cached entries")


class EnvOverrides(BaseSettings):
    """Environment variables that override values from the config file."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    brave_api_key: str | None = None
    google_api_key: str | None = None
    google_cx: str | None = None
    tavily_api_key: str | None = None
    duckduckgo_enabled: bool | None = None
    serper_api_key: str | None = None
    firecrawl_api_key: str | None = None
    serpapi_api_key: str | None = None
    bing_api_key: str | None = None
    default_provider: str | None = None


class SearchConfig(_ConfigModel):
    """Top-level configuration for cli-web-search."""

    default_provider: str | None = Field(default=None, description="Default provider to use")
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    fallback_order: list[str] = Field(
        default_factory=list, description="Fallback order when the primary provider fails"
    )
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryPolicyConfig = Field(default_factory=RetryPolicyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("default_provider")
    @classmethod
    def validate_default_provider(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return _check_provider_name(value)

    @field_validator("fallback_order")
    @classmethod
    def validate_fallback_order(cls, value: list[str]) -> list[str]:
        return [_check_provider_name(name) for name in value if name.strip()]

    @classmethod
    def from_yaml(cls, path: str | Path) -> SearchConfig:
        """Load configuration from a YAML file."""

        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as handle:
            try:
                config_data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file: {exc}") from exc

        if not config_data:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Config file must contain a mapping at the top level")

        config_data = _expand_env_vars(config_data)
        return cls(**config_data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a YAML-friendly dictionary."""

        return self.model_dump(mode="json", exclude_none=True)

    def enabled_providers(self) -> list[str]:
        """Names of providers whose section exists and is enabled."""
        enabled = []
        for name in PROVIDER_NAMES:
            section = self.providers.get_section(name)
            if section is not None and section.enabled:
                enabled.append(name)
        return enabled

    def effective_default_provider(self) -> str | None:
        """Resolve the provider a search without ``--provider`` starts with."""
        enabled = self.enabled_providers()
        if self.default_provider in enabled:
            return self.default_provider
        for name in self.fallback_order:
            if name in enabled:
                return name
        return enabled[0] if enabled else None

    def to_flat_map(self) -> dict[str, str]:
        """Flatten the configuration into dotted keys for display.

        API keys are masked with :func:`mask_api_key`.
        """
        flat: dict[str, str] = {}

        if self.default_provider:
            flat["default_provider"] = self.default_provider
        if self.fallback_order:
            flat["fallback_order"] = ",".join(self.fallback_order)

        for name in PROVIDER_NAMES:
            section = self.providers.get_section(name)
            if section is None:
                continue
            for field_name, value in section.model_dump().items():
                if field_name == "api_key":
                    value = mask_api_key(value)
                flat[f"providers.{name}.{field_name}"] = _format_value(value)

        for section_name in ("defaults", "cache", "retry", "logging"):
            section = getattr(self, section_name)
            for field_name, value in section.model_dump().items():
                if value is None:
                    continue
                flat[f"{section_name}.{field_name}"] = _format_value(value)

        return flat


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


# =============================================================================
# File locations
# =============================================================================


def config_dir() -> Path:
    """Directory holding ``config.yaml``.

    ``CLI_WEB_SEARCH_CONFIG_DIR`` takes precedence, then ``XDG_CONFIG_HOME``.
    """
    override = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


def config_path() -> Path:
    """Path of the configuration file."""
    return config_dir() / "config.yaml"


def cache_dir() -> Path:
    """Directory for fetched pages and other generated files."""
    base = os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache"
    return Path(base) / APP_NAME


# =============================================================================
# Loading and saving
# =============================================================================


def _load_file_config(path: str | Path | None = None) -> SearchConfig:
    """Load the config file only, without environment overrides."""

    target = Path(path) if path else config_path()
    if not target.exists():
        return SearchConfig()
    try:
        return SearchConfig.from_yaml(target)
    except ValidationError as exc:
        raise SearchConfigError(f"Invalid configuration in {target}: {exc}") from exc
    except ValueError as exc:
        raise SearchConfigError(str(exc)) from exc


def load_config(path: str | Path | None = None) -> SearchConfig:
    """Load configuration from file and environment variables.

    A missing config file yields the defaults.

    Args:
        path: Config file to read instead of :func:`config_path`

    Returns:
        Loaded configuration with environment overrides applied

    Raises:
        SearchConfigError: If the file or an environment override is invalid
    """
    _load_env_once()
    config = _load_file_config(path)
    return apply_env_overrides(config)


def apply_env_overrides(
    config: SearchConfig,
    environ: Mapping[str, str] | None = None,
) -> SearchConfig:
    """Apply ``CLI_WEB_SEARCH_*`` environment variables to ``config`` in place.

    Setting an API key variable creates the provider section when the file
    does not have one. Google needs both the key and the CX to create its
    section, but either updates an existing one.

    Args:
        config: Configuration to update
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        The same configuration object
    """
    try:
        if environ is None:
            overrides = EnvOverrides()
        else:
            overrides = EnvOverrides.model_validate(
                {
                    key[len(ENV_PREFIX):].lower(): value
                    for key, value in environ.items()
                    if key.startswith(ENV_PREFIX)
                }
            )
    except ValidationError as exc:
        raise SearchConfigError(f"Invalid environment override: {exc}") from exc

    providers = config.providers
    for name, section_cls in (
        ("brave", BraveConfig),
        ("tavily", TavilyConfig),
        ("serper", SerperConfig),
        ("firecrawl", FirecrawlConfig),
        ("serpapi", SerpApiConfig),
        ("bing", BingConfig),
    ):
        api_key = getattr(overrides, f"{name}_api_key")
        if api_key is None:
            continue
        section = providers.get_section(name)
        if section is None:
            setattr(providers, name, section_cls(api_key=api_key))
        else:
            section.api_key = api_key

    if providers.google is None:
        if overrides.google_api_key is not None and overrides.google_cx is not None:
            providers.google = GoogleConfig(
                api_key=overrides.google_api_key, cx=overrides.google_cx
            )
    else:
        if overrides.google_api_key is not None:
            providers.google.api_key = overrides.google_api_key
        if overrides.google_cx is not None:
            providers.google.cx = overrides.google_cx

    if overrides.duckduckgo_enabled is not None:
        if providers.duckduckgo is None:
            providers.duckduckgo = DuckDuckGoConfig(enabled=overrides.duckduckgo_enabled)
        else:
            providers.duckduckgo.enabled = overrides.duckduckgo_enabled

    if overrides.default_provider:
        try:
            config.default_provider = overrides.default_provider
        except ValidationError as exc:
            raise SearchConfigError(
                f"Invalid {ENV_PREFIX}DEFAULT_PROVIDER: {overrides.default_provider}",
                config_key="default_provider",
            ) from exc

    return config


def save_config(config: SearchConfig, path: str | Path | None = None) -> Path:
    """Write configuration to disk with owner-only permissions.

    Returns:
        The path written
    """
    target = Path(path) if path else config_path()
    target.parent.mkdir(parents=True, exist_ok=True)

    with open(target, "w", encoding="utf-8") as handle:
        yaml.safe_dump(config.to_dict(), handle, sort_keys=False, allow_unicode=True)

    if os.name == "posix":
        os.chmod(target, 0o600)

    return target


def init_config(path: str | Path | None = None, force: bool = False) -> SearchConfig:
    """Create a starter config file with the keyless DuckDuckGo provider enabled.

    Raises:
        SearchConfigError: If the file already exists and ``force`` is not set
    """
    target = Path(path) if path else config_path()
    if target.exists() and not force:
        raise SearchConfigError(f"Config file already exists: {target} (use --force to overwrite)")

    config = SearchConfig(providers=ProvidersConfig(duckduckgo=DuckDuckGoConfig()))
    save_config(config, target)
    return config


def set_config_value(key: str, value: str, path: str | Path | None = None) -> SearchConfig:
    """Set a configuration value by dotted key and save the file.

    Environment overrides are not applied, so secrets from the environment
    never end up in the file.

    Args:
        key: Dotted key such as ``providers.brave.api_key`` or ``cache.ttl_seconds``
        value: Raw string value; coerced to the field's type
        path: Config file to update instead of :func:`config_path`

    Returns:
        The updated configuration

    Raises:
        SearchConfigError: For unknown keys or values of the wrong type
    """
    config = _load_file_config(path)
    parts = key.split(".")

    try:
        if parts == ["default_provider"]:
            config.default_provider = value
        elif parts == ["fallback_order"]:
            config.fallback_order = [name.strip() for name in value.split(",")]
        elif len(parts) == 3 and parts[0] == "providers" and parts[1] in PROVIDER_SECTIONS:
            name, field_name = parts[1], parts[2]
            section_cls = PROVIDER_SECTIONS[name]
            if field_name not in section_cls.model_fields:
                raise SearchConfigError(f"Unknown configuration key: {key}", config_key=key)
            section = config.providers.get_section(name) or section_cls()
            setattr(section, field_name, value)
            setattr(config.providers, name, section)
        elif len(parts) == 2 and parts[0] in ("defaults", "cache", "retry", "logging"):
            section = getattr(config, parts[0])
            if parts[1] not in type(section).model_fields:
                raise SearchConfigError(f"Unknown configuration key: {key}", config_key=key)
            setattr(section, parts[1], value)
        else:
            raise SearchConfigError(f"Unknown configuration key: {key}", config_key=key)
    except ValidationError as exc:
        message = exc.errors()[0].get("msg", str(exc))
        raise SearchConfigError(f"Invalid value for {key}: {message}", config_key=key) from exc

    save_config(config, path)
    return config


def get_config_value(key: str, path: str | Path | None = None) -> str | None:
    """Get a configuration value by dotted key (API keys are masked)."""
    return load_config(path).to_flat_map().get(key)
