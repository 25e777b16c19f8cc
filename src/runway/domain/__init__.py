"""
Domain Layer - Runway

Reactive fields, entities, collections, and the factories that define them.
"""

from .properties import ReactiveProperty, bridge
from .entities import Entity
from .collections import Collection
from .builders import define_model, define_collection

__all__ = [
    "ReactiveProperty",
    "bridge",
    "Entity",
    "Collection",
    "define_model",
    "define_collection",
]
