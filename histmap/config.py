"""Configuration management for the historical map."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .models.map_settings import MapSettings
from .services.timeline_service import DEFAULT_DATA_FILE


class AppConfig(BaseModel):
    """Application-level configuration."""

    # Inputs
    tile_dir: Path = Field(
        default=Path.home() / ".cache" / "histmap" / "tiles",
        description="Directory holding map_{zoom}_{col}_{row} tile images",
    )
    data_file: Path = Field(
        default=DEFAULT_DATA_FILE,
        description="YAML snapshot feed",
    )
    settings_file: Optional[Path] = Field(
        default=None,
        description="YAML MapSettings override; built-in defaults when unset",
    )

    # Outputs
    output_dir: Path = Field(
        default=Path.cwd() / "output",
        description="Default output directory for rendered frames",
    )

    # Display
    density: Optional[float] = Field(
        default=None,
        gt=0,
        le=8.0,
        description="Device pixels per dp; overrides the settings file",
    )

    @classmethod
    def load(cls) -> "AppConfig":
        """Load configuration from environment and defaults."""
        settings_file = os.environ.get("HISTMAP_SETTINGS_FILE")
        density = os.environ.get("HISTMAP_DENSITY")
        return cls(
            tile_dir=Path(os.environ.get("HISTMAP_TILE_DIR", str(cls.model_fields["tile_dir"].default))),
            data_file=Path(os.environ.get("HISTMAP_DATA_FILE", str(cls.model_fields["data_file"].default))),
            settings_file=Path(settings_file) if settings_file else None,
            output_dir=Path(os.environ.get("HISTMAP_OUTPUT_DIR", str(cls.model_fields["output_dir"].default))),
            density=float(density) if density else None,
        )

    def load_map_settings(self) -> MapSettings:
        """Map settings from the settings file (or defaults), with overrides applied."""
        settings = MapSettings.from_yaml(self.settings_file) if self.settings_file else MapSettings()
        if self.density is not None:
            settings = settings.model_copy(update={"density": self.density})
        return settings

    def ensure_directories(self) -> None:
        """Create necessary directories."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config
