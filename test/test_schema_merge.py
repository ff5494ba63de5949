"""Tests for folding schemas from several documents."""

import copy
import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from json2cpp.schema_inference import infer_schema
from json2cpp.schema_merge import fold_schemas, merge_schemas
from json2cpp.schema_types import Schema, ValueKind


class TestSchemaMerge(unittest.TestCase):
    """Test cases for merge_schemas() and fold_schemas()."""

    def test_promotion_and_optional_new_field(self):
        """Test that a shared field is promoted and a new field becomes optional."""
        merged = fold_schemas([infer_schema({"a": 1}), infer_schema({"a": 1.5, "b": "x"})])
        root = merged.get("Root")
        self.assertEqual([f.source_key for f in root.fields], ["a", "b"])
        self.assertEqual(root.get_field("a").kind, ValueKind.FLOAT)
        self.assertFalse(root.get_field("a").optional)
        self.assertEqual(root.get_field("b").kind, ValueKind.STRING)
        self.assertTrue(root.get_field("b").optional)

    def test_missing_field_becomes_optional(self):
        """Test that a field absent from a later document becomes optional."""
        merged = fold_schemas([infer_schema({"a": 1, "b": 2}), infer_schema({"a": 3})])
        self.assertTrue(merged.get("Root").get_field("b").optional)
        self.assertFalse(merged.get("Root").get_field("a").optional)

    def test_idempotent(self):
        """Test that merging a schema with a copy of itself changes nothing."""
        document = {"id": 1, "name": "x", "nick": None, "tags": ["a"],
                    "address": {"zip": "1"}, "lines": [{"sku": "a"}]}
        original = infer_schema(document)
        merged = fold_schemas([infer_schema(document), copy.deepcopy(original)])
        self.assertEqual(merged, original)

    def test_fields_never_disappear(self):
        """Test that every observed key survives the fold."""
        merged = fold_schemas([infer_schema({"a": 1}), infer_schema({"b": 1}), infer_schema({"c": 1})])
        self.assertEqual([f.source_key for f in merged.get("Root").fields], ["a", "b", "c"])

    def test_null_then_value(self):
        """Test that a value observed after null keeps the field optional."""
        merged = fold_schemas([infer_schema({"a": None}), infer_schema({"a": "x"})])
        field = merged.get("Root").get_field("a")
        self.assertEqual(field.kind, ValueKind.STRING)
        self.assertTrue(field.optional)

    def test_object_wins_over_scalar(self):
        """Test blind promotion of a scalar against an object."""
        with self.assertLogs('json2cpp.schema_merge', level='WARNING'):
            merged = fold_schemas([infer_schema({"a": True}), infer_schema({"a": {"x": 1}})])
        field = merged.get("Root").get_field("a")
        self.assertEqual(field.kind, ValueKind.OBJECT)
        self.assertEqual(field.nested_type, "A")
        self.assertEqual(merged.names(), ["Root", "A"])

    def test_array_element_kinds_are_promoted(self):
        """Test that element kinds of array fields are promoted."""
        merged = fold_schemas([infer_schema({"v": [1]}), infer_schema({"v": [2.5]})])
        field = merged.get("Root").get_field("v")
        self.assertEqual(field.kind, ValueKind.ARRAY)
        self.assertEqual(field.element_kind, ValueKind.FLOAT)

    def test_empty_array_takes_later_shape(self):
        """Test that an empty array adopts the shape seen in a later document."""
        merged = fold_schemas([infer_schema({"v": []}), infer_schema({"v": [["a"]]})])
        field = merged.get("Root").get_field("v")
        self.assertEqual(field.element_kind, ValueKind.STRING)
        self.assertEqual(field.array_depth, 2)

    def test_nested_structs_are_folded_by_name(self):
        """Test that nested structs of the same name are folded."""
        merged = fold_schemas([
            infer_schema({"customer": {"name": "a"}}),
            infer_schema({"customer": {"name": "b", "vip": True}}),
        ])
        customer = merged.get("Customer")
        self.assertEqual([f.source_key for f in customer.fields], ["name", "vip"])
        self.assertTrue(customer.get_field("vip").optional)

    def test_incoming_is_not_aliased(self):
        """Test that the merged schema does not share structs with the incoming one."""
        incoming = infer_schema({"a": 1})
        merged = merge_schemas(Schema(), incoming)
        merged.get("Root").fields[0].optional = True
        self.assertFalse(incoming.get("Root").fields[0].optional)

    def test_merge_returns_accumulated(self):
        """Test that merge_schemas folds in place."""
        accumulated = infer_schema({"a": 1})
        result = merge_schemas(accumulated, infer_schema({"b": 1}))
        self.assertIs(result, accumulated)


if __name__ == '__main__':
    unittest.main()
