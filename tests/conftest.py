"""Shared test fixtures for runway."""

import pytest

from runway import define_collection, define_model
from runway.models.config import reset_config


@pytest.fixture(autouse=True)
def default_config():
    """Run every test against the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def Item():
    """A model with a single defaulted ``id`` field."""
    return define_model(defaults={"id": None}, name="Item")


@pytest.fixture
def Items(Item):
    """A collection of ``Item`` elements."""
    return define_collection(model=Item, name="Items")
