"""Tests for dependency ordering of structs."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from json2cpp.dependency_resolver import sort_structs_by_dependencies
from json2cpp.schema_inference import infer_schema
from json2cpp.schema_merge import fold_schemas
from json2cpp.schema_types import Field, Schema, Struct, ValueKind


def assert_dependencies_first(test, schema):
    """Asserts that every referenced struct precedes its referrer."""
    position = {s.name: i for i, s in enumerate(schema.structs)}
    for struct in schema:
        for dependency in struct.dependencies():
            test.assertLess(position[dependency], position[struct.name],
                            f"{dependency} must precede {struct.name}")


class TestDependencyResolver(unittest.TestCase):
    """Test cases for sort_structs_by_dependencies()."""

    def test_reorders_parent_after_children(self):
        """Test a schema listed parent first."""
        schema = Schema([
            Struct("Root", [Field("a", "a", ValueKind.OBJECT, nested_type="A"),
                            Field("b", "b", ValueKind.OBJECT, nested_type="B")]),
            Struct("A", [Field("c", "c", ValueKind.OBJECT, nested_type="C")]),
            Struct("B"),
            Struct("C"),
        ])
        ordered = sort_structs_by_dependencies(schema)
        self.assertEqual(ordered.names(), ["C", "A", "B", "Root"])
        self.assertEqual(schema.names(), ["Root", "A", "B", "C"])

    def test_each_struct_once(self):
        """Test that shared dependencies are emitted exactly once."""
        schema = Schema([
            Struct("X", [Field("s", "s", ValueKind.OBJECT, nested_type="Shared")]),
            Struct("Y", [Field("s", "s", ValueKind.OBJECT, nested_type="Shared")]),
            Struct("Shared"),
        ])
        ordered = sort_structs_by_dependencies(schema)
        self.assertEqual(ordered.names(), ["Shared", "X", "Y"])

    def test_inferred_order_is_kept(self):
        """Test that an already ordered schema is unchanged."""
        schema = infer_schema({"a": {"b": {"c": 1}}, "d": [{"e": 1}]})
        ordered = sort_structs_by_dependencies(schema)
        self.assertEqual(ordered.names(), schema.names())
        assert_dependencies_first(self, ordered)

    def test_merged_schema(self):
        """Test ordering after a merge appended a dependency late."""
        merged = fold_schemas([infer_schema({"a": 1}), infer_schema({"a": {"x": 1}})])
        self.assertEqual(merged.names(), ["Root", "A"])
        ordered = sort_structs_by_dependencies(merged)
        self.assertEqual(ordered.names(), ["A", "Root"])
        assert_dependencies_first(self, ordered)

    def test_unknown_reference_is_ignored(self):
        """Test that references to unknown structs do not fail."""
        schema = Schema([Struct("Root", [Field("a", "a", ValueKind.OBJECT, nested_type="Missing")])])
        self.assertEqual(sort_structs_by_dependencies(schema).names(), ["Root"])

    def test_self_reference_is_logged(self):
        """Test a struct that folding made hold itself by value."""
        folded = fold_schemas([infer_schema({"a": {"a": {"x": 1}}})])
        self.assertEqual(folded.names(), ["A", "Root"])
        with self.assertLogs('json2cpp.dependency_resolver', level='WARNING') as logs:
            ordered = sort_structs_by_dependencies(folded)
        self.assertEqual(ordered.names(), ["A", "Root"])
        self.assertIn("Struct A references A", logs.output[0])

    def test_cycle_is_logged(self):
        """Test two structs that reference each other."""
        schema = Schema([
            Struct("A", [Field("b", "b", ValueKind.OBJECT, nested_type="B")]),
            Struct("B", [Field("a", "a", ValueKind.OBJECT, nested_type="A")]),
        ])
        with self.assertLogs('json2cpp.dependency_resolver', level='WARNING') as logs:
            ordered = sort_structs_by_dependencies(schema)
        self.assertEqual(ordered.names(), ["B", "A"])
        self.assertEqual(len(logs.output), 1)
        self.assertIn("Struct B references A", logs.output[0])

    def test_empty(self):
        """Test the empty schema."""
        self.assertEqual(len(sort_structs_by_dependencies(Schema())), 0)


if __name__ == '__main__':
    unittest.main()
