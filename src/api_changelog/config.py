"""Configuration for changelog generation."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from api_changelog.errors import ConfigError

logger = logging.getLogger(__name__)


class ChangelogConfig(BaseModel):
    """Rendering options for a changelog run."""

    title: str = "API Changelog"
    date_format: str = "%Y-%m-%d"
    components_label: str = "Components"
    show_endpoint_counts: bool = True

    model_config = {"extra": "forbid"}

    def today(self, now: Optional[datetime] = None) -> str:
        """Render the changelog date using ``date_format``."""
        return (now or datetime.now()).strftime(self.date_format)


def load_config(config_path: Optional[Path] = None) -> ChangelogConfig:
    """Load configuration from a JSON file, or return the defaults.

    Args:
        config_path: Path to a JSON object with ``ChangelogConfig`` fields

    Returns:
        The validated configuration
    """
    if config_path is None:
        return ChangelogConfig()

    config_path = Path(config_path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"failed to read config {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} must contain a JSON object")

    try:
        config = ChangelogConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config {config_path}: {e}") from e

    logger.debug("Loaded config from %s", config_path)
    return config
