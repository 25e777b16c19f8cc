"""Runway

Observable entities and collections whose changes bubble up through the
object graph.
"""

__version__ = "0.1.0"

from .events import (
    EventBus,
    Emitter,
    Observable,
    ObservableKind,
    current_emitter,
    eventify,
    is_reactive,
)

from .domain import (
    Entity,
    Collection,
    ReactiveProperty,
    define_model,
    define_collection,
)

from .exceptions import (
    RunwayError,
    ObservableError,
    DefinitionError,
    FieldNameError,
    DispatchDepthError,
    ConfigurationError,
    CyclicGraphError,
)

from .models.config import RunwayConfig, configure, get_config, reset_config
from .utils.snapshot import to_plain
from .rich_tree_renderer import RichTreeRenderer

# Short aliases for the factories
model = define_model
collection = define_collection

__all__ = [
    # Core components
    "Entity",
    "Collection",
    "ReactiveProperty",
    "EventBus",
    "Emitter",
    "Observable",
    "ObservableKind",

    # Factories
    "define_model",
    "define_collection",
    "model",
    "collection",
    "eventify",

    # Utilities
    "current_emitter",
    "is_reactive",
    "to_plain",
    "RichTreeRenderer",

    # Configuration
    "RunwayConfig",
    "configure",
    "get_config",
    "reset_config",

    # Errors
    "RunwayError",
    "ObservableError",
    "DefinitionError",
    "FieldNameError",
    "DispatchDepthError",
    "ConfigurationError",
    "CyclicGraphError",
]
