"""Collection - an ordered, observable sequence.

Every membership change triggers ``add`` or ``remove`` followed by
``change``; ``sort`` and ``reverse`` trigger ``sort`` and ``change``.
Observable members are wired so their changes re-trigger ``sub:change`` on
the collection.
"""

import functools
import logging
from reprlib import recursive_repr
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, List, Optional

from ..events.event_bus import Observable
from ..events.kinds import ObservableKind, observable_kind
from .properties import Unsubscribe, bridge

logger = logging.getLogger(__name__)

_MISSING = object()


class _Membership:
    """Wiring for one observable member, shared by all of its occurrences."""
    __slots__ = ("element", "count", "unsubscribe")

    def __init__(self, element: Any, unsubscribe: Unsubscribe):
        self.element = element
        self.count = 1
        self.unsubscribe = unsubscribe


def _same(item: Any, value: Any) -> bool:
    """Observables match by identity, plain values by equality."""
    if item is value:
        return True
    if observable_kind(item) is not None or observable_kind(value) is not None:
        return False
    return item == value


class Collection(Observable):
    """
    Base class for observable sequences.

    Subclasses may set ``model`` (raw values added are coerced by calling
    it, so an Entity model takes mappings) and override ``preprocess`` (maps constructor arguments to the
    initial values) and ``initialize`` (runs once before the initial values
    are added, so its listeners see them).
    """

    __observable_kind__ = ObservableKind.COLLECTION

    model: ClassVar[Optional[type]] = None

    def __init__(self, *args: Any, **kwargs: Any):
        self._items: List[Any] = []
        self._members: Dict[int, _Membership] = {}

        values = self.preprocess(*args, **kwargs)
        self.initialize()
        if values is not None:
            self.extend(values)

    def preprocess(self, values: Optional[Iterable[Any]] = None) -> Optional[Iterable[Any]]:
        """Map constructor arguments to the initial values."""
        return values

    def initialize(self) -> None:
        """Hook run once before the initial values are added."""

    # Wiring

    def _coerce(self, value: Any) -> Any:
        model = self.model
        if value is _MISSING:
            return model() if model is not None else None
        if model is not None and not isinstance(value, model):
            return model(value)
        return value

    def _attach(self, element: Any) -> None:
        if observable_kind(element) is None:
            return
        member = self._members.get(id(element))
        if member is None:
            self._members[id(element)] = _Membership(element, bridge(self, element))
        else:
            member.count += 1

    def _detach(self, element: Any) -> None:
        member = self._members.get(id(element))
        if member is None:
            return
        member.count -= 1
        if member.count == 0:
            del self._members[id(element)]
            member.unsubscribe()

    def _announce_removed(self, element: Any) -> None:
        if observable_kind(element) is not None:
            element.trigger("removed", self)

    def _insert(self, index: int, value: Any) -> Any:
        element = self._coerce(value)
        self._items.insert(index, element)
        self._attach(element)
        self.trigger("add change", element)
        return element

    def _take(self, index: int) -> Any:
        if not self._items:
            return None
        element = self._items.pop(index)
        self._detach(element)
        self.trigger("remove change", element)
        self._announce_removed(element)
        return element

    # Mutators

    def add(self, value: Any = _MISSING) -> Any:
        """Append ``value`` (a default element when omitted) and return the stored element."""
        return self._insert(len(self._items), value)

    def push(self, value: Any = _MISSING) -> Any:
        return self._insert(len(self._items), value)

    def unshift(self, value: Any = _MISSING) -> Any:
        return self._insert(0, value)

    def extend(self, values: Iterable[Any]) -> None:
        for value in values:
            self.push(value)

    def pop(self) -> Any:
        """Remove and return the last element, or None when empty."""
        return self._take(-1)

    def shift(self) -> Any:
        """Remove and return the first element, or None when empty."""
        return self._take(0)

    def remove(self, value: Any) -> int:
        """Remove every occurrence of ``value``; returns how many were removed."""
        removed = 0
        while True:
            index = self._find(value)
            if index < 0:
                break
            element = self._items.pop(index)
            self._detach(element)
            removed += 1
            self.trigger("remove change", element)

        if removed:
            self._announce_removed(value)
        return removed

    def sort(
        self,
        compare: Optional[Callable[[Any, Any], int]] = None,
        *,
        key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ) -> None:
        """Sort in place by ``key`` or a two-argument ``compare`` function."""
        if compare is not None:
            if key is not None:
                raise TypeError("sort() takes either compare or key, not both")
            key = functools.cmp_to_key(compare)
        self._items.sort(key=key, reverse=reverse)
        self.trigger("sort change")

    def reverse(self) -> None:
        self._items.reverse()
        self.trigger("sort change")

    def splice(self, start: int, count: Optional[int] = None, *items: Any) -> List[Any]:
        """
        Remove ``count`` elements at ``start`` and insert ``items`` there.

        A negative ``start`` counts from the end; ``count`` defaults to the
        rest of the sequence. Removals are reported before insertions.

        Returns:
            The removed elements.
        """
        length = len(self._items)
        if start < 0:
            start = max(length + start, 0)
        else:
            start = min(start, length)
        if count is None:
            count = length - start
        else:
            count = max(0, min(count, length - start))

        inserted = [self._coerce(item) for item in items]
        removed = self._items[start:start + count]
        self._items[start:start + count] = inserted

        for element in inserted:
            self._attach(element)
        for element in removed:
            self._detach(element)

        for element in removed:
            self.trigger("remove change", element)
        for element in inserted:
            self.trigger("add change", element)
        for element in removed:
            self._announce_removed(element)
        return removed

    def each_and_added(self, callback: Callable[[Any], Any]) -> None:
        """Call ``callback`` for every current element and every future addition."""
        for element in list(self._items):
            callback(element)
        self.on("add", callback)

    def dispose(self) -> None:
        """Stop relaying changes from every member."""
        members = list(self._members.values())
        self._members.clear()
        for member in members:
            member.unsubscribe()
        logger.debug(f"Disposed {type(self).__name__} with {len(self._items)} elements")

    # Read-only sequence protocol

    def to_array(self) -> List[Any]:
        """Return the elements as a plain list."""
        return list(self._items)

    def _find(self, value: Any) -> int:
        for index, item in enumerate(self._items):
            if _same(item, value):
                return index
        return -1

    def index(self, value: Any) -> int:
        index = self._find(value)
        if index < 0:
            raise ValueError(f"{value!r} is not in {type(self).__name__}")
        return index

    def count(self, value: Any) -> int:
        return sum(1 for item in self._items if _same(item, value))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __contains__(self, value: object) -> bool:
        return self._find(value) >= 0

    def __getitem__(self, index):
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self._items == other._items

    __hash__ = None

    @recursive_repr()
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"
