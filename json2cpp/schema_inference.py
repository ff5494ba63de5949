"""Infers a struct schema from a parsed JSON document.

Known limitation: the element type of an array is taken from its first
element only. Later elements are never merged into it, so a key that only
appears in the second object of an array is absent from the schema.
"""

import logging
from typing import Any, Dict, List, Tuple

from json2cpp.nameutil import Casing, sanitize, type_name
from json2cpp.schema_types import Field, Schema, Struct, ValueKind, classify_value

logger = logging.getLogger(__name__)

JsonNode = Dict[str, 'JsonNode'] | List['JsonNode'] | str | bool | int | float | None

ITEM_SUFFIX = 'Item'


class SchemaInferrer:
    """Builds a Schema from one JSON value."""

    def __init__(self, field_casing: Casing = Casing.SNAKE):
        """Initialize the schema inferrer.

        Args:
            field_casing: Casing applied to field names at inference time
        """
        self.field_casing = field_casing

    def infer(self, value: JsonNode, suggested_name: str = 'Root') -> Schema:
        """Infers the structs describing a JSON value.

        Objects produce one struct named after suggested_name, preceded by the
        structs of their nested objects. An array is described by its first
        element under suggested_name + "Item". Scalars and empty arrays
        produce an empty schema.

        Args:
            value: Parsed JSON value
            suggested_name: Base name for the struct produced for value

        Returns:
            The inferred schema
        """
        if isinstance(value, dict):
            return self._infer_object(value, suggested_name)
        if isinstance(value, list) and value:
            return self.infer(value[0], suggested_name + ITEM_SUFFIX)
        return Schema()

    def _infer_object(self, obj: dict, suggested_name: str) -> Schema:
        schema = Schema()
        current = Struct(name=type_name(suggested_name))

        # dict iteration follows the document's key order
        for key, value in obj.items():
            kind = classify_value(value)
            field = Field(name=sanitize(key, self.field_casing), source_key=key, kind=kind)

            if kind == ValueKind.NULL:
                field.optional = True
            elif kind == ValueKind.OBJECT:
                nested = self._infer_object(value, key)
                schema.extend(nested)
                field.nested_type = nested.structs[-1].name
            elif kind == ValueKind.ARRAY:
                element, depth = self._first_element(value)
                field.array_depth = depth
                field.element_kind = classify_value(element)
                if isinstance(element, dict):
                    nested = self._infer_object(element, key + ITEM_SUFFIX)
                    schema.extend(nested)
                    field.nested_type = nested.structs[-1].name

            current.fields.append(field)

        schema.append(current)
        logger.debug("Inferred struct %s with %d fields", current.name, len(current.fields))
        return schema

    @staticmethod
    def _first_element(array: List[Any]) -> Tuple[Any, int]:
        """Descends through nested arrays along their first elements.

        Returns:
            The innermost first element (None for an empty array) and the
            number of array levels crossed
        """
        depth = 1
        element = array[0] if array else None
        while isinstance(element, list):
            depth += 1
            element = element[0] if element else None
        return element, depth


def infer_schema(value: JsonNode, suggested_name: str = 'Root', field_casing: Casing = Casing.SNAKE) -> Schema:
    """Infers a schema from a parsed JSON value.

    Args:
        value: Parsed JSON value
        suggested_name: Name for the root struct
        field_casing: Casing for field names

    Returns:
        The inferred schema
    """
    return SchemaInferrer(field_casing).infer(value, suggested_name)
