"""ldquery configuration settings using Pydantic.

Loads settings from:
1. A YAML file (optional, see ``load_settings``)
2. Environment variables prefixed with ``LDQUERY_`` (and ``.env``)
3. Default values
"""

from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env for both settings and callers
load_dotenv()


SortRule = Literal["value-asc", "value-desc", "label-asc", "label-desc", "chrono-asc", "chrono-desc"]


class LDQuerySettings(BaseSettings):
    """Central configuration for the normalizer, discovery and query engine."""

    model_config = SettingsConfigDict(
        env_prefix="LDQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # --- Sentinel Groups ---
    unknown_label: str = "Unknown"
    no_relation_template: str = "No {relation}"

    # --- Discovery ---
    common_field_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    sample_limit: int = Field(default=5, ge=1)
    display_field_min_frequency: float = Field(default=0.3, ge=0.0, le=1.0)
    path_viability_threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    max_path_depth: int = Field(default=2, ge=1)
    preferred_display_fields: list[str] = Field(
        default_factory=lambda: ["name", "title", "label", "description"]
    )

    # Base IRI -> prefix, consulted before the path-based fallback
    namespace_prefixes: dict[str, str] = Field(default_factory=dict)

    # --- Query Defaults ---
    default_sort: SortRule = "value-desc"

    # --- Logging ---
    log_level: str = "INFO"
    log_file: Path | None = None

    def no_relation_label(self, relation: str) -> str:
        return self.no_relation_template.format(relation=relation)


def load_settings(yaml_path: str | Path | None = None) -> LDQuerySettings:
    """Build settings from a YAML file, falling back to env/defaults."""
    if yaml_path is None:
        return LDQuerySettings()

    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        return LDQuerySettings()

    with open(yaml_path, encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    return LDQuerySettings(**config_data)


_settings: LDQuerySettings | None = None


def get_settings() -> LDQuerySettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = LDQuerySettings()
    return _settings


def reload_settings(yaml_path: str | Path | None = None) -> LDQuerySettings:
    """Replace the global settings instance."""
    global _settings
    _settings = load_settings(yaml_path)
    return _settings
