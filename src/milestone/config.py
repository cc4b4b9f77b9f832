"""
Configuration management for milestone.

Handles:
- Tracker settings (step range, step basis, maximum) as a pydantic model
- Config file loading from YAML
- MILESTONE_CONFIG environment variable as the default file location
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from milestone.errors import InvalidArgumentError
from milestone.progress.tracker import (
    DEFAULT_MAX_STEP_SIZE,
    DEFAULT_MIN_STEP_SIZE,
    ProgressTracker,
    StepBasis,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MILESTONE_CONFIG"


class TrackerConfig(BaseModel):
    """Settings used to build a ProgressTracker."""
    min_step_size: int = Field(default=DEFAULT_MIN_STEP_SIZE, gt=0)
    max_step_size: int = Field(default=DEFAULT_MAX_STEP_SIZE, gt=0)
    step_basis: StepBasis = Field(
        default=StepBasis.COUNT,
        description="Value the step size is recomputed from after each publish: "
                    "the published count, or the maximum when one is set."
    )
    maximum: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_step_range(self) -> "TrackerConfig":
        if self.max_step_size < self.min_step_size:
            raise ValueError("max_step_size < min_step_size")
        return self


class ConfigManager:
    """Manages configuration loading and access."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config: Optional[TrackerConfig] = None
        self._config_path = Path(config_path) if config_path is not None else None

    @property
    def config_path(self) -> Optional[Path]:
        """Get the config file path, falling back to MILESTONE_CONFIG."""
        if self._config_path is not None:
            return self._config_path
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)
        return None

    def load(self) -> TrackerConfig:
        """Load configuration from file, or return defaults."""
        if self._config is not None:
            return self._config

        path = self.config_path
        if path and path.exists():
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise InvalidArgumentError(f"Config file {path} must contain a mapping")
            self._config = TrackerConfig(**data)
            logger.info(f"Loaded tracker config from {path}")
        else:
            self._config = TrackerConfig()

        return self._config

    def save(self, config: TrackerConfig) -> None:
        """Save configuration to file."""
        path = self.config_path
        if path is None:
            raise InvalidArgumentError(
                f"Cannot save config: no path given and {CONFIG_ENV_VAR} is not set"
            )

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

        self._config = config
        logger.info(f"Saved tracker config to {path}")

    @property
    def config(self) -> TrackerConfig:
        """Get the current configuration (loads if needed)."""
        return self.load()

    def create_tracker(self) -> ProgressTracker:
        """Build a tracker from the current configuration."""
        return ProgressTracker.from_config(self.load())


# Global config manager instance
config_manager = ConfigManager()
