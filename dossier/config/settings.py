"""Root settings model for Dossier configuration."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from dossier.config.models import (
    AttachmentsConfig,
    HistoryConfig,
    ObservabilityConfig,
    StorageConfig,
)

# Merged TOML layers, installed by get_settings() before Settings() is built
_toml_layers: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Install the merged TOML layers read by the next Settings()."""
    global _toml_layers
    _toml_layers = dict(config)


class LayeredTomlSource(PydanticBaseSettingsSource):
    """Settings source over the merged default/environment TOML files.

    Only top-level tables that name a settings field are passed on.
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        if field_name not in _toml_layers:
            return None, field_name, False
        return _toml_layers[field_name], field_name, True

    def __call__(self) -> dict[str, Any]:
        known = self.settings_cls.model_fields
        return {key: value for key, value in _toml_layers.items() if key in known}


class Settings(BaseSettings):
    """Root configuration object.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml
    3. config/{DOSSIER_ENV}.toml
    4. DOSSIER_* environment variables
    """

    model_config = SettingsConfigDict(
        env_prefix="DOSSIER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="dossier", description="Application name for logging")
    attachments: AttachmentsConfig = Field(
        default_factory=AttachmentsConfig,
        description="Attachment limits and formats",
    )
    history: HistoryConfig = Field(
        default_factory=HistoryConfig,
        description="Change history settings",
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Document store configuration",
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
        """Constructor args, then DOSSIER_* env vars, then TOML files."""
        return (
            init_settings,
            env_settings,
            LayeredTomlSource(settings_cls),
        )
