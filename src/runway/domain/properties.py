"""Reactive fields and the subscription bridging between containers and children.

Bridging follows two disciplines:

- A Collection held by an entity field relays its ``change`` as
  ``change:<field>`` on the owner, as if the field itself had changed, and
  its ``sub:change`` as ``sub:change``.
- Anything else observable (an Entity, an eventified object, or any child
  of a collection) relays ``change`` and ``sub:change`` as ``sub:change``.
"""

from typing import Any, Callable, Optional

from ..events.kinds import ObservableKind, observable_kind

Unsubscribe = Callable[[], None]

CHANGE = "change"
SUB_CHANGE = "sub:change"
NESTED = "change sub:change"


def bridge(owner: Any, value: Any, key: Optional[str] = None) -> Optional[Unsubscribe]:
    """
    Relay change events from ``value`` onto ``owner``.

    Args:
        owner: The container that re-triggers the events.
        value: The child; plain values are not wired.
        key: The field name when ``value`` sits in an entity field, None for
            collection members.

    Returns:
        A callback detaching exactly the handlers installed here, or None if
        nothing was wired.
    """
    kind = observable_kind(value)
    if kind is None:
        return None

    if key is not None and kind is ObservableKind.COLLECTION:
        field_event = f"change:{key}"

        def relay_change(*args):
            owner.trigger(field_event, *args)

        def relay_sub_change(*args):
            owner.trigger(SUB_CHANGE, *args)

        value.on(CHANGE, relay_change)
        value.on(SUB_CHANGE, relay_sub_change)

        def unsubscribe():
            value.off(CHANGE, relay_change)
            value.off(SUB_CHANGE, relay_sub_change)

        return unsubscribe

    def relay(*args):
        owner.trigger(SUB_CHANGE, *args)

    value.on(NESTED, relay)

    def unsubscribe():
        value.off(NESTED, relay)

    return unsubscribe


class ReactiveProperty:
    """
    A single observable field of an entity.

    Holds the current value and the unsubscribe callback for whatever was
    wired when that value was installed.
    """

    __slots__ = ("owner", "key", "_value", "_unsubscribe")

    def __init__(self, owner: Any, key: str, value: Any = None):
        self.owner = owner
        self.key = key
        self._value = value
        self._unsubscribe = bridge(owner, value, key)

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_wired(self) -> bool:
        return self._unsubscribe is not None

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> bool:
        """
        Replace the value and trigger ``change:<key>``.

        Returns False without triggering anything when ``value`` is the
        current value.
        """
        old = self._value
        if value is old:
            return False

        self.detach()
        self._value = value
        try:
            self.owner.trigger(f"change:{self.key}", value, {"old": old, "key": self.key})
        finally:
            # A nested set from a handler has already wired whatever is current.
            if self._value is value and self._unsubscribe is None:
                self._unsubscribe = bridge(self.owner, value, self.key)
        return True

    def detach(self) -> None:
        """Remove the wiring for the current value, keeping the value."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def __repr__(self) -> str:
        return f"ReactiveProperty({self.key!r}, {self._value!r})"
