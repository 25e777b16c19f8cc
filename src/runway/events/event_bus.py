"""
Event Bus - Namespaced publish/subscribe for observable objects.

Every observable owns a private EventBus. Event names are space-separated
lists of colon-segmented names: triggering ``change:id`` also reaches the
handlers registered for ``change``, and handlers registered for ``*`` run
last for every triggered name.

Dispatch is synchronous. Handlers run in registration order and exceptions
they raise propagate to the caller of ``trigger``.
"""

import logging
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from ..exceptions import DispatchDepthError, ObservableError
from ..models.config import get_config
from .kinds import ObservableKind, observable_kind

logger = logging.getLogger(__name__)

WILDCARD = "*"
SEPARATOR = ":"

Handler = Callable[..., Any]


class _DispatchState:
    """Nesting depth and emitter stack shared by all buses."""
    __slots__ = ("depth", "emitters")

    def __init__(self):
        self.depth = 0
        self.emitters: List[Any] = []


_state = _DispatchState()


def current_emitter() -> Any:
    """Return the object whose event is being dispatched, or None outside dispatch."""
    return _state.emitters[-1] if _state.emitters else None


def _split_names(names: str) -> List[str]:
    if not isinstance(names, str):
        raise ObservableError(f"Event names must be a string, got {type(names).__name__}")
    return names.split()


@lru_cache(maxsize=1024)
def _levels(name: str) -> Tuple[str, ...]:
    """``a:b:c`` -> ``("a:b:c", "a:b", "a")``."""
    parts = name.split(SEPARATOR)
    return tuple(SEPARATOR.join(parts[:end]) for end in range(len(parts), 0, -1))


def _dispatch(handlers: List[Optional[Handler]], count: int, args: Tuple[Any, ...]) -> None:
    """Call the first ``count`` handlers, skipping removed ones."""
    # Handlers appended during the pass are past ``count``; removed ones are None.
    arity = len(args)
    if arity == 0:
        for i in range(count):
            handler = handlers[i]
            if handler is not None:
                handler()
    elif arity == 1:
        a1 = args[0]
        for i in range(count):
            handler = handlers[i]
            if handler is not None:
                handler(a1)
    elif arity == 2:
        a1, a2 = args
        for i in range(count):
            handler = handlers[i]
            if handler is not None:
                handler(a1, a2)
    elif arity == 3:
        a1, a2, a3 = args
        for i in range(count):
            handler = handlers[i]
            if handler is not None:
                handler(a1, a2, a3)
    else:
        for i in range(count):
            handler = handlers[i]
            if handler is not None:
                handler(*args)


class EventBus:
    """
    Listener table and dispatcher for a single observable.

    The bus reports its ``owner`` as the current emitter while handlers run.
    """

    __slots__ = ("_owner", "_listeners", "_dispatching", "_dirty")

    def __init__(self, owner: Any = None):
        self._owner = self if owner is None else owner
        self._listeners: Dict[str, List[Optional[Handler]]] = {}
        self._dispatching = 0
        self._dirty: Set[str] = set()

    @property
    def owner(self) -> Any:
        return self._owner

    def on(self, names: str, handler: Handler) -> None:
        """
        Register ``handler`` under every name in ``names``.

        Registering the same handler twice yields two invocations per trigger.
        """
        if not callable(handler):
            raise ObservableError(f"Handler must be callable, got {type(handler).__name__}")

        for name in _split_names(names):
            handlers = self._listeners.get(name)
            if handlers is None:
                self._listeners[name] = [handler]
            else:
                handlers.append(handler)

    def off(self, names: str, handler: Handler) -> None:
        """Remove every registration of ``handler`` under the listed names."""
        for name in _split_names(names):
            handlers = self._listeners.get(name)
            if not handlers:
                continue

            if self._dispatching:
                # Leave holes so in-flight passes keep their indexes.
                for i, registered in enumerate(handlers):
                    if registered is not None and (registered is handler or registered == handler):
                        handlers[i] = None
                        self._dirty.add(name)
            else:
                handlers[:] = [h for h in handlers if not (h is handler or h == handler)]
                if not handlers:
                    del self._listeners[name]

    def trigger(self, names: str, *args: Any) -> None:
        """Dispatch each name in ``names`` with ``args``."""
        config = get_config()
        for name in _split_names(names):
            self._emit(name, args, config)

    def _emit(self, name: str, args: Tuple[Any, ...], config) -> None:
        if config.trace_events:
            logger.debug(
                f"trigger {name!r} on {type(self._owner).__name__} "
                f"({self._count_reachable(name)} listeners, depth {_state.depth})"
            )

        if not self._listeners:
            return

        limit = config.max_dispatch_depth
        if limit is not None and _state.depth >= limit:
            raise DispatchDepthError(_state.depth + 1, limit, name)

        # Bounds for every list are fixed before any handler runs.
        passes = []
        for level in _levels(name):
            handlers = self._listeners.get(level)
            if handlers:
                passes.append((handlers, len(handlers), args))
        if name != WILDCARD:
            handlers = self._listeners.get(WILDCARD)
            if handlers:
                passes.append((handlers, len(handlers), (name,) + args))

        _state.depth += 1
        _state.emitters.append(self._owner)
        self._dispatching += 1
        try:
            for handlers, count, pass_args in passes:
                _dispatch(handlers, count, pass_args)
        finally:
            self._dispatching -= 1
            _state.emitters.pop()
            _state.depth -= 1
            if not self._dispatching and self._dirty:
                self._compact()

    def _compact(self) -> None:
        """Drop the holes left by removals made during dispatch."""
        for name in self._dirty:
            handlers = self._listeners.get(name)
            if handlers is None:
                continue
            handlers[:] = [h for h in handlers if h is not None]
            if not handlers:
                del self._listeners[name]
        self._dirty.clear()

    def _count_reachable(self, name: str) -> int:
        names = _levels(name) + ((WILDCARD,) if name != WILDCARD else ())
        return sum(len(self.listeners(level)) for level in names)

    def listeners(self, name: str) -> Tuple[Handler, ...]:
        """Return the handlers registered under the literal ``name``."""
        return tuple(h for h in self._listeners.get(name, ()) if h is not None)

    def has_listeners(self, name: Optional[str] = None) -> bool:
        """Whether any handler is registered, optionally under ``name``."""
        if name is None:
            return any(self.listeners(n) for n in self._listeners)
        return bool(self.listeners(name))

    def clear(self) -> None:
        """Remove all handlers."""
        if self._dispatching:
            for name, handlers in self._listeners.items():
                handlers[:] = [None] * len(handlers)
                self._dirty.add(name)
        else:
            self._listeners.clear()

    def __repr__(self) -> str:
        names = sorted(n for n in self._listeners if self.listeners(n))
        return f"EventBus(owner={type(self._owner).__name__}, events={names})"


class Observable:
    """
    Mixin giving each instance its own EventBus.

    Subclasses tag themselves with ``__observable_kind__``.
    """

    __observable_kind__: Optional[ObservableKind] = None

    @property
    def _events(self) -> EventBus:
        try:
            return self.__dict__["_bus"]
        except KeyError:
            bus = EventBus(self)
            object.__setattr__(self, "_bus", bus)
            return bus

    def on(self, names: str, handler: Handler) -> None:
        """Subscribe ``handler`` to each event in ``names``."""
        self._events.on(names, handler)

    def off(self, names: str, handler: Handler) -> None:
        """Unsubscribe ``handler`` from each event in ``names``."""
        self._events.off(names, handler)

    def trigger(self, names: str, *args: Any) -> None:
        """Trigger each event in ``names``."""
        self._events.trigger(names, *args)


class Emitter(Observable):
    """A bare observable object."""

    __observable_kind__ = ObservableKind.EMITTER

    def __repr__(self) -> str:
        return f"Emitter({self._events!r})"


def eventify(target: Any = None) -> Any:
    """
    Give an arbitrary object ``on``/``off``/``trigger``.

    Without a target a new ``Emitter`` is returned. Objects that are already
    observable are returned unchanged.

    Raises:
        ObservableError: If ``target`` is a class or cannot hold attributes.
    """
    if target is None:
        return Emitter()

    if isinstance(target, type):
        raise ObservableError(
            f"Cannot eventify class {target.__name__}; inherit from Observable instead"
        )

    if observable_kind(target) is not None:
        return target

    if not hasattr(target, "__dict__"):
        raise ObservableError(f"Cannot eventify {type(target).__name__} objects")

    bus = EventBus(target)
    try:
        target.on = bus.on
        target.off = bus.off
        target.trigger = bus.trigger
        target.__observable_kind__ = ObservableKind.EMITTER
    except AttributeError as e:
        raise ObservableError(f"Cannot eventify {type(target).__name__} objects: {e}") from e
    return target
