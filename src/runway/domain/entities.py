"""Entity - a record of reactive fields.

Each field is a ReactiveProperty, installed once and reachable as a plain
attribute::

    class Item(Entity):
        defaults = {"id": None}

    item = Item(id=1)
    item.on("change:id", lambda value, info: print(value, info["old"]))
    item.id = 2
"""

import logging
from collections.abc import Mapping
from reprlib import recursive_repr
from typing import Any, ClassVar, Dict, Iterator, Tuple

from ..events.event_bus import Observable
from ..events.kinds import ObservableKind
from ..exceptions import DefinitionError, FieldNameError
from .properties import ReactiveProperty

logger = logging.getLogger(__name__)


def check_field_name(key: Any) -> None:
    """Raise FieldNameError unless ``key`` can name a field."""
    if not isinstance(key, str):
        raise FieldNameError(f"Field names must be strings, got {key!r}")
    if not key or key.startswith("_"):
        raise FieldNameError(f"Invalid field name {key!r}: names starting with '_' are reserved")


class Entity(Observable):
    """
    Base class for reactive records.

    Subclasses may set ``defaults`` and override ``preprocess`` (maps the
    constructor arguments to a field record) and ``initialize`` (runs once
    after every field is installed).
    """

    __observable_kind__ = ObservableKind.ENTITY

    defaults: ClassVar[Mapping] = {}

    def __init__(self, *args: Any, **kwargs: Any):
        object.__setattr__(self, "_fields", {})

        record = self.preprocess(*args, **kwargs)
        if record is None:
            record = {}
        if not isinstance(record, Mapping):
            raise DefinitionError(
                f"{type(self).__name__}.preprocess must return a mapping, "
                f"got {type(record).__name__}"
            )

        for key, value in record.items():
            self.define(key, value)
        for key, value in self.defaults.items():
            self.define(key, value)

        self.initialize()

    def preprocess(self, values: Any = None, **fields: Any) -> Mapping:
        """Build the field record from constructor arguments."""
        if values is not None and not isinstance(values, Mapping):
            raise DefinitionError(
                f"{type(self).__name__} expects a mapping of field values, "
                f"got {type(values).__name__}"
            )
        record = dict(values) if values is not None else {}
        record.update(fields)
        return record

    def initialize(self) -> None:
        """Hook run once after construction."""

    # Field access

    def define(self, key: str, value: Any = None) -> bool:
        """Install a field; returns False if ``key`` is already a field."""
        fields: Dict[str, ReactiveProperty] = self._fields
        if key in fields:
            return False
        check_field_name(key)
        fields[key] = ReactiveProperty(self, key, value)
        return True

    def get(self, key: str, default: Any = None) -> Any:
        prop = self._fields.get(key)
        return default if prop is None else prop.get()

    def set(self, key: str, value: Any) -> None:
        """Assign a field, installing it silently if it does not exist yet."""
        prop = self._fields.get(key)
        if prop is None:
            self.define(key, value)
        else:
            prop.set(value)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._fields)

    def to_dict(self) -> Dict[str, Any]:
        """Shallow copy of the field values."""
        return {key: prop.get() for key, prop in self._fields.items()}

    def dispose(self) -> None:
        """Stop relaying changes from every nested observable."""
        for prop in self._fields.values():
            prop.detach()
        logger.debug(f"Disposed {type(self).__name__} with fields {list(self._fields)}")

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __getitem__(self, key: str) -> Any:
        return self._fields[key].get()

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            prop = self.__dict__["_fields"][name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no field {name!r}"
            ) from None
        return prop.get()

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def __delattr__(self, name: str) -> None:
        if name in self.__dict__.get("_fields", ()):
            raise AttributeError(f"Field {name!r} cannot be removed from {type(self).__name__}")
        object.__delattr__(self, name)

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    @recursive_repr()
    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self.to_dict().items())
        return f"{type(self).__name__}({fields})"
