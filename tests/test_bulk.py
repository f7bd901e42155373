import unittest

import pytest

from depocket import AlreadyDefinedError, InvalidNameError, NotFoundError, Pocket, TypeMismatchError


class TestBulkDefinition(unittest.TestCase):
    pocket: Pocket

    def setUp(self):
        self.pocket = Pocket()

    def test_define_mapping(self):
        result = self.pocket.define(
            {
                "dep1": "",
                "dep2": None,
                "dep3": "integer",
                "dep4": "array",
                "dep5": "object",
                "dep6": "app.models.Model",
            }
        )

        assert result is self.pocket
        for name in ("dep1", "dep2", "dep3", "dep4", "dep5", "dep6"):
            assert self.pocket.has(name), name

    def test_define_iterable_of_bare_names_and_pairs(self):
        self.pocket.define(["dep1", ("dep2", "integer"), "dep3"])

        assert self.pocket.get_type("dep1") == ""
        assert self.pocket.get_type("dep2") == "integer"
        assert self.pocket.get_type("dep3") == ""

    def test_define_bulk_with_declared_type_raises(self):
        with pytest.raises(TypeError):
            self.pocket.define(["dep"], "integer")

    def test_define_bulk_stops_at_first_error_without_rollback(self):
        self.pocket.define("dep2")

        with pytest.raises(AlreadyDefinedError):
            self.pocket.define(["dep1", "dep2", "dep3"])

        assert self.pocket.has("dep1")
        assert not self.pocket.has("dep3")

    def test_define_bulk_blank_name_raises(self):
        with pytest.raises(InvalidNameError):
            self.pocket.define({"ok": None, " ": "integer"})
        assert self.pocket.has("ok")


class TestBulkAssignment(unittest.TestCase):
    pocket: Pocket

    def setUp(self):
        self.pocket = Pocket()

    def test_define_set_get_as_mappings(self):
        types = {"dep1": "integer", "dep2": "string", "dep3": "array", "dep4": "object"}
        values = {"dep1": 12, "dep2": "some string", "dep3": [12, "sss"], "dep4": object()}

        self.pocket.define(types).set(values)

        assert self.pocket.get() == values

        del values["dep3"]
        assert self.pocket.get(list(values)) == values

    def test_scenario_integer_and_any(self):
        self.pocket.define({"a": "integer", "b": ""})
        self.pocket.set({"a": 1, "b": "x"})

        assert self.pocket.get() == {"a": 1, "b": "x"}
        assert self.pocket.get_type("a") == "integer"
        assert self.pocket.get_type("b") == ""

    def test_set_bulk_stops_at_first_error_without_rollback(self):
        self.pocket.define({"a": "integer", "b": "integer", "c": "integer"})

        with pytest.raises(TypeMismatchError):
            self.pocket.set({"a": 1, "b": "two", "c": 3})

        assert self.pocket.get() == {"a": 1, "b": None, "c": None}

    def test_set_bulk_unknown_name_raises(self):
        self.pocket.define("a")

        with pytest.raises(NotFoundError):
            self.pocket.set({"a": 1, "missing": 2})
        assert self.pocket.get("a") == 1

    def test_set_bulk_with_value_raises(self):
        self.pocket.define("a")
        with pytest.raises(TypeError):
            self.pocket.set({"a": 1}, 2)
