"""Root settings model for Parley configuration.

TOML layers live in a ``config/`` directory: ``default.toml`` first, then
``{PARLEY_ENV}.toml`` overlaid on it. ``PARLEY_*`` environment variables and
constructor arguments win over both.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from parley.config.models.observability import ObservabilityConfig
from parley.config.models.pipeline import PipelineConfig, ThreadConfig
from parley.config.models.providers import ProvidersConfig
from parley.config.models.session import SessionConfig

CONFIG_DIR_ENV = "PARLEY_CONFIG_DIR"
ENVIRONMENT_ENV = "PARLEY_ENV"
DEFAULT_ENVIRONMENT = "development"

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def resolve_config_dir() -> Path:
    """Locate the directory holding the TOML layers.

    ``PARLEY_CONFIG_DIR`` wins and must exist. Otherwise ``config/`` in the
    working directory is used, then the one beside the package.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    local = Path.cwd() / "config"
    if local.is_dir():
        return local
    return _PROJECT_ROOT / "config"


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """Existing TOML files in the order they are overlaid."""
    names = dict.fromkeys(["default.toml", f"{environment}.toml"])
    return [config_dir / name for name in names if (config_dir / name).is_file()]


def overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``layer`` on ``base``.

    Tables merge key by key; scalars and arrays from ``layer`` replace.
    Neither input is modified.
    """
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = overlay(current, value)
        else:
            merged[key] = value
    return merged


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads the layered TOML files.

    Every top-level key must name a Settings field, so a misspelt section
    such as ``[sesion]`` fails at startup instead of silently leaving the
    code defaults in place.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        config_dir: Path | None = None,
        environment: str | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self.config_dir = config_dir or resolve_config_dir()
        self.environment = environment or os.environ.get(
            ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT
        )
        self.files = config_layers(self.config_dir, self.environment)
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        known = set(self.settings_cls.model_fields)
        data: dict[str, Any] = {}
        for path in self.files:
            with path.open("rb") as f:
                layer = tomllib.load(f)
            unknown = sorted(set(layer) - known)
            if unknown:
                raise ValueError(
                    f"Unknown configuration section(s) {', '.join(unknown)} in {path}"
                )
            data = overlay(data, layer)
        return data

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from the merged TOML layers."""
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the merged TOML values."""
        return dict(self._data)


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{PARLEY_ENV}.toml (environment overrides)
    4. PARLEY_* environment variables (runtime overrides)
    """

    model_config = SettingsConfigDict(
        env_prefix="PARLEY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="parley", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")

    threads: ThreadConfig = Field(
        default_factory=ThreadConfig,
        description="Conversation thread bounds",
    )
    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig,
        description="Message pipeline configuration",
    )
    providers: ProvidersConfig = Field(
        default_factory=ProvidersConfig,
        description="AI provider configuration",
    )
    session: SessionConfig = Field(
        default_factory=SessionConfig,
        description="Transport session configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (PARLEY_* environment variables)
        3. toml_settings (config/*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
