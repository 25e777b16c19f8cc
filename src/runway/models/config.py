"""Configuration model for runway."""

import json
import logging
from dataclasses import dataclass, fields, asdict, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunwayConfig:
    """Process-wide settings for event dispatch."""
    trace_events: bool = False  # log every trigger at DEBUG
    max_dispatch_depth: Optional[int] = None  # None leaves cyclic graphs unguarded

    def __post_init__(self):
        if not isinstance(self.trace_events, bool):
            raise ConfigurationError(
                f"trace_events must be a bool, got {self.trace_events!r}"
            )
        depth = self.max_dispatch_depth
        if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth < 1):
            raise ConfigurationError(
                f"max_dispatch_depth must be a positive int or None, got {depth!r}"
            )

    @classmethod
    def default(cls) -> "RunwayConfig":
        """Create the default configuration."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunwayConfig":
        """Build a config from a dict, rejecting unknown keys."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be an object, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(**data)


_active_config = RunwayConfig.default()


def get_config() -> RunwayConfig:
    """Return the active configuration."""
    return _active_config


def set_config(config: RunwayConfig) -> RunwayConfig:
    """Replace the active configuration and return the previous one."""
    global _active_config
    if not isinstance(config, RunwayConfig):
        raise ConfigurationError(f"Expected RunwayConfig, got {type(config).__name__}")
    previous = _active_config
    _active_config = config
    return previous


def configure(**changes: Any) -> RunwayConfig:
    """Update individual settings on the active configuration."""
    known = {f.name for f in fields(RunwayConfig)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    config = replace(get_config(), **changes)
    set_config(config)
    logger.debug(f"Configuration updated: {changes}")
    return config


def reset_config() -> RunwayConfig:
    """Restore the default configuration."""
    config = RunwayConfig.default()
    set_config(config)
    return config


def load_config(config_path: Path) -> RunwayConfig:
    """Load configuration from JSON file."""
    try:
        with open(config_path, 'r') as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file {config_path}: {e}") from e

    config = RunwayConfig.from_dict(config_data)
    logger.debug(f"Loaded configuration from {config_path}")
    return config


def save_config(config: RunwayConfig, config_path: Path) -> None:
    """Save configuration to JSON file."""
    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug(f"Saved configuration to {config_path}")
