"""Configuration Management."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="MOCKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Storage
    storage_dir: Path = Field(default=Path("projects"), description="Project store directory")
    store_cache_size: int = Field(default=32, gt=0, description="Loaded project cache size")

    # New project defaults
    default_viewport_width: int = Field(default=375, gt=0, description="Viewport width (px)")
    default_viewport_height: int = Field(default=812, gt=0, description="Viewport height (px)")
    default_background_color: str = Field(default="#ffffff", description="Screen background")
    grid_visible: bool = Field(default=True, description="Show grid on new projects")
    grid_size: int = Field(default=20, gt=0, description="Grid cell size (px)")
    grid_color: str = Field(default="#cbd5e1", description="Grid line color")
    snap_to_grid: bool = Field(default=True, description="Snap to grid on new projects")

    # Import validation
    max_import_size: int = Field(
        default=16 * 1024 * 1024, gt=0, description="Max import payload (bytes)"
    )
    max_json_depth: int = Field(default=64, gt=0, description="Max document nesting depth")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
