"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority, from command-line options)
2. Environment variables (EVTRACE__SECTION__KEY)
3. YAML file (explicit --config path, else the global config if present)
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from evtrace.config.models import (
    DebugConfig,
    EvtraceConfig,
    FilterConfig,
    LoggingConfig,
    OutputConfig,
)
from evtrace.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/evtrace/config.yaml").expanduser()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class EvtraceSettings(BaseSettings):
        """Root config. Env vars: EVTRACE__LOGGING__LEVEL, EVTRACE__FILTERS__IDENTITY, etc."""

        model_config = SettingsConfigDict(
            env_prefix="EVTRACE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        filters: FilterConfig = FilterConfig()
        output: OutputConfig = OutputConfig()
        debug: DebugConfig = DebugConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return EvtraceSettings


def validate_output_modes(output: OutputConfig) -> None:
    """Timeline output cannot be combined with stream or report output.

    Raises:
        ConfigError: With code CONFIG_CONFLICTING_MODES.
    """
    if not output.timeline:
        return
    conflicting = [name for name in ("stream", "report") if getattr(output, name)]
    if conflicting:
        raise ConfigError.conflicting_modes("timeline", *conflicting)


def load_config(config_path: Path | None = None, **kwargs: Any) -> EvtraceConfig:
    """Load config: defaults < yaml < env vars < kwargs.

    Args:
        config_path: Explicit YAML config file. Must exist when given.
                     Defaults to the global config, which may be absent.
        **kwargs: Override sections (highest precedence), e.g.
                  ``filters={"min_duration_ms": 100}``.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On missing/invalid YAML, validation errors or
                     conflicting output modes.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError.file_not_found(str(config_path))
        yaml_config = _load_yaml(config_path)
    else:
        yaml_config = _load_yaml(GLOBAL_CONFIG_PATH)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    config = EvtraceConfig.model_validate(settings.model_dump())
    validate_output_modes(config.output)
    return config
