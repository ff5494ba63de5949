"""Folds schemas inferred from separate documents into one unified schema."""

import copy
import logging
from typing import Iterable

from json2cpp.schema_types import Field, Schema, Struct, ValueKind, is_incompatible_promotion, promote

logger = logging.getLogger(__name__)


def merge_fields(struct_name: str, base_field: Field, new_field: Field) -> None:
    """
    Merges the type of new_field into base_field in place.

    The kind is promoted without any shape validation. When the incoming kind
    wins, its array and nested-type description comes along with it.

    Args:
        struct_name (str): Name of the owning struct, for diagnostics.
        base_field (Field): The accumulated field, modified in place.
        new_field (Field): The field observed in the incoming document.
    """
    merged_kind = promote(base_field.kind, new_field.kind)
    if is_incompatible_promotion(base_field.kind, new_field.kind):
        logger.warning("Field '%s' of struct %s promoted from %s to %s without shape validation",
                       base_field.source_key, struct_name, base_field.kind.value, new_field.kind.value)

    if merged_kind != base_field.kind:
        base_field.element_kind = new_field.element_kind
        base_field.array_depth = new_field.array_depth
        base_field.nested_type = new_field.nested_type
    elif merged_kind == ValueKind.ARRAY and new_field.kind == ValueKind.ARRAY:
        if base_field.element_kind is None or base_field.element_kind == ValueKind.NULL:
            base_field.array_depth = new_field.array_depth
        if base_field.element_kind is not None and new_field.element_kind is not None:
            base_field.element_kind = promote(base_field.element_kind, new_field.element_kind)
        elif new_field.element_kind is not None:
            base_field.element_kind = new_field.element_kind
    if base_field.nested_type is None and merged_kind == new_field.kind:
        base_field.nested_type = new_field.nested_type

    base_field.kind = merged_kind
    base_field.optional = base_field.optional or new_field.optional


def fold_struct(base_struct: Struct, new_struct: Struct) -> None:
    """
    Folds new_struct into base_struct in place.

    Fields are matched by their JSON key. A field seen only in the incoming
    struct is appended as optional; a field missing from the incoming struct
    becomes optional as well. Fields are never removed.

    Args:
        base_struct (Struct): The accumulated struct.
        new_struct (Struct): The struct with the same name from another document.
    """
    incoming_keys = {f.source_key for f in new_struct.fields}
    for base_field in base_struct.fields:
        if base_field.source_key not in incoming_keys:
            base_field.optional = True

    for new_field in new_struct.fields:
        base_field = base_struct.get_field(new_field.source_key)
        if base_field is None:
            added = copy.deepcopy(new_field)
            added.optional = True
            base_struct.fields.append(added)
        else:
            merge_fields(base_struct.name, base_field, new_field)


def merge_schemas(accumulated: Schema, incoming: Schema) -> Schema:
    """
    Merges incoming into accumulated and returns accumulated.

    Structs are matched by name only. Two unrelated shapes that happen to share
    a generated name are folded together; nothing guards against that.

    Args:
        accumulated (Schema): The schema folded so far, modified in place.
        incoming (Schema): The schema of the next document.

    Returns:
        Schema: accumulated.
    """
    for new_struct in incoming:
        base_struct = accumulated.get(new_struct.name)
        if base_struct is None:
            accumulated.append(copy.deepcopy(new_struct))
        else:
            fold_struct(base_struct, new_struct)
    return accumulated


def fold_schemas(schemas: Iterable[Schema]) -> Schema:
    """Folds schemas in iteration order, starting from an empty schema."""
    result = Schema()
    for schema in schemas:
        merge_schemas(result, schema)
    return result
