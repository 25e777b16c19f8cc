"""Factories that turn an option bag into an Entity or Collection class.

    Item = define_model(defaults={"id": None})
    Items = define_collection(model=Item)

Functions passed as options become methods, so they receive the instance
as their first argument.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Type

from ..exceptions import DefinitionError
from .collections import Collection
from .entities import Entity, check_field_name

logger = logging.getLogger(__name__)


def _build_namespace(
    preprocess: Optional[Callable],
    initialize: Optional[Callable],
    methods: Dict[str, Any],
) -> Dict[str, Any]:
    namespace: Dict[str, Any] = {}
    for option, func in (("preprocess", preprocess), ("initialize", initialize)):
        if func is None:
            continue
        if not callable(func):
            raise DefinitionError(f"Option '{option}' must be callable, got {type(func).__name__}")
        namespace[option] = func

    for name, func in methods.items():
        if not callable(func):
            raise DefinitionError(
                f"Unknown option '{name}': extra options must be functions, "
                f"got {type(func).__name__}"
            )
        namespace[name] = func
    return namespace


def define_model(
    defaults: Optional[Mapping] = None,
    preprocess: Optional[Callable] = None,
    initialize: Optional[Callable] = None,
    name: Optional[str] = None,
    **methods: Callable,
) -> Type[Entity]:
    """
    Create an Entity subclass.

    Args:
        defaults: Fields installed on every instance that the constructor
            record does not provide.
        preprocess: ``preprocess(self, *args, **kwargs)`` returning the field record.
        initialize: ``initialize(self)`` run after the fields are installed.
        name: Class name, ``"Model"`` when omitted.
        **methods: Extra methods for the class.

    Raises:
        DefinitionError: If an option has the wrong type.
    """
    if defaults is None:
        defaults = {}
    if not isinstance(defaults, Mapping):
        raise DefinitionError(f"defaults must be a mapping, got {type(defaults).__name__}")
    for key in defaults:
        check_field_name(key)

    namespace = _build_namespace(preprocess, initialize, methods)
    namespace["defaults"] = dict(defaults)

    cls = type(name or "Model", (Entity,), namespace)
    logger.debug(f"Defined model {cls.__name__} with defaults {list(defaults)}")
    return cls


def define_collection(
    model: Optional[type] = None,
    preprocess: Optional[Callable] = None,
    initialize: Optional[Callable] = None,
    name: Optional[str] = None,
    **methods: Callable,
) -> Type[Collection]:
    """
    Create a Collection subclass.

    Args:
        model: Element type raw values are coerced into.
        preprocess: ``preprocess(self, *args, **kwargs)`` returning the initial values.
        initialize: ``initialize(self)`` run before the initial values are added.
        name: Class name, ``"Collection"`` when omitted.
        **methods: Extra methods for the class.

    Raises:
        DefinitionError: If an option has the wrong type.
    """
    if model is not None and not isinstance(model, type):
        raise DefinitionError(f"model must be a class, got {type(model).__name__}")

    namespace = _build_namespace(preprocess, initialize, methods)
    namespace["model"] = model

    cls = type(name or "Collection", (Collection,), namespace)
    model_name = model.__name__ if model is not None else None
    logger.debug(f"Defined collection {cls.__name__} of {model_name}")
    return cls
