"""
Observable capability markers.

Every observable class carries an ``__observable_kind__`` tag so bridging and
coercion can tell entities, collections and eventified objects apart without
inspecting arbitrary types.
"""

from enum import Enum
from typing import Any, Optional


class ObservableKind(Enum):
    """What kind of observable a value is."""
    ENTITY = "entity"
    COLLECTION = "collection"
    EMITTER = "emitter"


def observable_kind(value: Any) -> Optional[ObservableKind]:
    """Return the capability tag of ``value``, or None for plain values."""
    if isinstance(value, type):
        return None
    kind = getattr(value, "__observable_kind__", None)
    return kind if isinstance(kind, ObservableKind) else None


def is_reactive(value: Any) -> bool:
    """Whether a value is an Entity or a Collection."""
    return observable_kind(value) in (ObservableKind.ENTITY, ObservableKind.COLLECTION)
