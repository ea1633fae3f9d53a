import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BUILTIN_CATALOG = Path(__file__).resolve().parent.parent / "data" / "fluxon-functions.json"

_TRACE_LEVELS = {
    "off": logging.WARNING,
    "basic": logging.INFO,
    "verbose": logging.DEBUG,
}


class Settings(BaseSettings):
    """Completion settings loaded from FLUXON_* environment variables."""

    # Catalog
    catalog_path: str = ""
    fallback_catalog_path: str = ""
    workspace_folder: str = ""

    # Completion behaviour
    show_namespaces: bool = True
    enable_extensions: bool = True
    include_user_functions: bool = True
    debounce_ms: int = Field(default=500, ge=0)

    # Logging
    trace: Literal["off", "basic", "verbose"] = "off"

    # Server
    host: str = "127.0.0.1"
    port: int = 8484

    model_config = SettingsConfigDict(
        env_prefix="FLUXON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def resolve_path(self, template: str) -> str:
        """Expand ${workspaceFolder} in a configured path."""
        if not template:
            return ""
        return template.replace("${workspaceFolder}", self.workspace_folder)

    def resolved_catalog_path(self) -> str:
        return self.resolve_path(self.catalog_path)

    @property
    def builtin_catalog_path(self) -> Path:
        """Fallback catalog; the packaged one unless overridden."""
        return Path(self.fallback_catalog_path) if self.fallback_catalog_path else BUILTIN_CATALOG

    @property
    def log_level(self) -> int:
        return _TRACE_LEVELS[self.trace]

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


def configure_logging(cfg: Settings) -> None:
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global settings instance
settings = Settings()
