"""
Event System - Namespaced publish/subscribe

This package implements the event bus every entity and collection owns,
plus the capability markers used to tell observables apart.
"""

from .event_bus import (
    EventBus,
    Emitter,
    Observable,
    current_emitter,
    eventify,
    WILDCARD,
)
from .kinds import (
    ObservableKind,
    observable_kind,
    is_reactive,
)

__all__ = [
    # Core event system
    "EventBus",
    "Emitter",
    "Observable",
    "current_emitter",
    "eventify",
    "WILDCARD",
    # Capability markers
    "ObservableKind",
    "observable_kind",
    "is_reactive",
]
