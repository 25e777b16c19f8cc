"""Tests for entities."""

import pytest
from unittest.mock import Mock

from runway import Entity, define_model, current_emitter
from runway.events.kinds import ObservableKind, is_reactive, observable_kind
from runway.exceptions import DefinitionError, FieldNameError


class Point(Entity):
    """Entity subclass used across tests."""
    defaults = {"x": 0, "y": 0}

    def norm(self):
        return abs(self.x) + abs(self.y)


class TestEntityConstruction:
    """Test building entities."""

    def test_works_like_an_object(self):
        """Test fields are readable as attributes."""
        Item = define_model()
        elem = Item({"id": 1, "key": "blah"})

        assert elem.id == 1
        assert elem.key == "blah"

    def test_keyword_fields(self):
        """Test fields given as keyword arguments."""
        elem = Entity({"id": 1}, key="blah")
        assert elem.to_dict() == {"id": 1, "key": "blah"}

    def test_defaults(self):
        """Test declared defaults fill missing fields."""
        point = Point()
        assert point.x == 0
        assert point.y == 0

    def test_record_wins_over_defaults(self):
        """Test a provided value is not replaced by the default."""
        point = Point(x=3)
        assert point.x == 3
        assert point.y == 0
        assert point.keys() == ("x", "y")

    def test_record_order_then_defaults(self):
        """Test record fields come first, then defaults."""
        point = Point(z=1)
        assert point.keys() == ("z", "x", "y")

    def test_initialize_runs_after_fields(self):
        """Test initialize sees every field."""
        seen = {}

        class Tracked(Entity):
            defaults = {"b": 2}

            def initialize(self):
                seen.update(self.to_dict())

        Tracked(a=1)
        assert seen == {"a": 1, "b": 2}

    def test_construction_triggers_nothing(self):
        """Test installing fields emits no events."""
        handler = Mock()

        class Watched(Entity):
            def preprocess(self, *args, **kwargs):
                self.on("*", handler)
                return {"a": 1}

        Watched()
        handler.assert_not_called()

    def test_preprocess(self):
        """Test constructor args can be preprocessed."""
        class Triple(Entity):
            def preprocess(self, one, two, three):
                return {"one": one, "two": two, "three": three}

        item = Triple(1, 2, 3)
        assert (item.one, item.two, item.three) == (1, 2, 3)

    def test_preprocess_must_return_mapping(self):
        """Test a non-mapping record is rejected."""
        class Broken(Entity):
            def preprocess(self):
                return [1, 2]

        with pytest.raises(DefinitionError):
            Broken()

    def test_non_mapping_values_rejected(self):
        """Test positional values must be a mapping of fields."""
        with pytest.raises(DefinitionError, match="expects a mapping"):
            Point(5)

    def test_reserved_field_name(self):
        """Test names starting with underscore are rejected."""
        with pytest.raises(FieldNameError):
            Entity({"_secret": 1})

    def test_non_string_field_name(self):
        """Test field names must be strings."""
        with pytest.raises(FieldNameError):
            Entity({1: "one"})

    def test_is_reactive(self):
        """Test entities are tagged as entities."""
        point = Point()
        assert is_reactive(point)
        assert observable_kind(point) is ObservableKind.ENTITY
        assert not is_reactive(Point)


class TestEntityChanges:
    """Test change events on fields."""

    def test_named_change_event(self):
        """Test a named event fires when a value changes."""
        elem = Entity(id=1, key="blah")
        handler = Mock()
        elem.on("change:id", handler)

        elem.id = 3.14
        handler.assert_called_once_with(3.14, {"old": 1, "key": "id"})

    def test_general_change_event(self):
        """Test the general change event fires when a value changes."""
        elem = Entity(id=1, key="blah")
        handler = Mock()
        elem.on("change", handler)

        elem.id = 3.14
        handler.assert_called_once_with(3.14, {"old": 1, "key": "id"})

    def test_same_value_triggers_nothing(self):
        """Test no events when the set value is the same."""
        value = 3.1415
        elem = Entity(id=value)
        handler = Mock()
        elem.on("change change:id", handler)

        elem.id = value
        elem.set("id", value)
        handler.assert_not_called()

    def test_set_method(self):
        """Test set() goes through the reactive field."""
        elem = Entity(id=1)
        handler = Mock()
        elem.on("change:id", handler)

        elem.set("id", 2)
        assert elem.get("id") == 2
        handler.assert_called_once_with(2, {"old": 1, "key": "id"})

    def test_get_default(self):
        """Test get() falls back for unknown fields."""
        elem = Entity()
        assert elem.get("missing") is None
        assert elem.get("missing", 5) == 5

    def test_new_attribute_installs_field_silently(self):
        """Test assigning an unknown attribute installs a field without events."""
        elem = Entity()
        handler = Mock()
        elem.on("*", handler)

        elem.extra = 1
        assert "extra" in elem
        assert elem.extra == 1
        handler.assert_not_called()

        elem.extra = 2
        handler.assert_any_call("change:extra", 2, {"old": 1, "key": "extra"})

    def test_define_is_install_once(self):
        """Test re-installing an existing field is ignored."""
        elem = Entity(id=1)
        handler = Mock()
        elem.on("change", handler)

        assert elem.define("id", 99) is False
        assert elem.id == 1
        handler.assert_not_called()
        assert elem.define("other", 2) is True

    def test_handler_sees_emitting_entity(self):
        """Test handlers can reach the entity through current_emitter."""
        elem = Entity(id=1)
        seen = []
        elem.on("change:id", lambda value, info: seen.append(current_emitter()))

        elem.id = 2
        assert seen[0] is elem

    def test_fields_cannot_be_deleted(self):
        """Test fields have a fixed identity."""
        elem = Entity(id=1)
        with pytest.raises(AttributeError):
            del elem.id
        assert elem.id == 1

    def test_unknown_attribute(self):
        """Test reading an unknown attribute raises AttributeError."""
        with pytest.raises(AttributeError):
            Entity().missing


class TestEntityMethods:
    """Test the rest of the entity surface."""

    def test_class_methods_win_over_fields(self):
        """Test a field named like a method is reachable through get()."""
        elem = Entity({"get": "value"})
        assert callable(elem.get)
        assert elem.get("get") == "value"

    def test_subclass_methods(self):
        """Test methods declared on a subclass use the fields."""
        point = Point(x=-2, y=3)
        assert point.norm() == 5

    def test_to_dict_and_mapping_access(self):
        """Test shallow conversion and item access."""
        point = Point(x=1)
        assert point.to_dict() == {"x": 1, "y": 0}
        assert point["x"] == 1
        assert list(point) == ["x", "y"]
        assert dict(point) == {"x": 1, "y": 0}
        with pytest.raises(KeyError):
            point["z"]

    def test_equality(self):
        """Test entities compare by class and field values."""
        assert Point(x=1) == Point(x=1)
        assert Point(x=1) != Point(x=2)
        assert Entity(x=1, y=0) != Point(x=1)

    def test_entities_are_unhashable(self):
        """Test entities with value equality are not hashable."""
        with pytest.raises(TypeError):
            hash(Point())

    def test_repr(self):
        """Test the representation lists the fields."""
        assert repr(Point(x=1)) == "Point(x=1, y=0)"

    def test_repr_of_cycle(self):
        """Test a self-containing entity still has a repr."""
        elem = Entity()
        elem.me = elem
        assert "..." in repr(elem)

    def test_dispose_stops_bubbling(self):
        """Test dispose detaches every nested observable."""
        inner = Entity(id=1)
        outer = Entity(inside=inner)
        handler = Mock()
        outer.on("sub:change", handler)

        outer.dispose()
        inner.id = 2
        handler.assert_not_called()
        assert outer.inside is inner
