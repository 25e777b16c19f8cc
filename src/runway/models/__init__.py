"""Configuration models for runway."""

from .config import (
    RunwayConfig,
    configure,
    get_config,
    load_config,
    reset_config,
    save_config,
    set_config,
)

__all__ = [
    "RunwayConfig",
    "configure",
    "get_config",
    "load_config",
    "reset_config",
    "save_config",
    "set_config",
]
