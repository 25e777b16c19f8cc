"""Convert an object graph into plain Python data."""

from typing import Any, Optional, Set

from ..events.kinds import ObservableKind, is_reactive, observable_kind
from ..exceptions import CyclicGraphError


def to_plain(value: Any, _path: Optional[Set[int]] = None) -> Any:
    """
    Recursively turn Entities into dicts and Collections into lists.

    Plain lists, tuples and dicts are walked too so nested observables
    inside them are converted. Other values are returned unchanged.

    Raises:
        CyclicGraphError: If a container is reached again through itself.
    """
    if not is_reactive(value):
        if isinstance(value, dict):
            return {key: to_plain(item, _path) for key, item in value.items()}
        if isinstance(value, list):
            return [to_plain(item, _path) for item in value]
        if isinstance(value, tuple):
            return tuple(to_plain(item, _path) for item in value)
        return value

    path = _path if _path is not None else set()
    if id(value) in path:
        raise CyclicGraphError(f"{type(value).__name__} contains itself")

    path.add(id(value))
    try:
        if observable_kind(value) is ObservableKind.ENTITY:
            return {key: to_plain(item, path) for key, item in value.to_dict().items()}
        return [to_plain(item, path) for item in value]
    finally:
        path.discard(id(value))
