"""
Schema data model shared by inference, merge, ordering and code generation.

A Schema owns an ordered list of Structs; a Field refers to another Struct by
name, never by object reference, so the Schema stays the single owner of
every Struct.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class ValueKind(Enum):
    """Discriminant of a JSON value's shape."""
    NULL = 'null'
    BOOL = 'bool'
    INTEGER = 'integer'
    FLOAT = 'float'
    STRING = 'string'
    ARRAY = 'array'
    OBJECT = 'object'


# Highest precedence first.
PROMOTION_ORDER = [
    ValueKind.OBJECT,
    ValueKind.ARRAY,
    ValueKind.STRING,
    ValueKind.FLOAT,
    ValueKind.INTEGER,
    ValueKind.BOOL,
    ValueKind.NULL,
]

_RANK = {kind: len(PROMOTION_ORDER) - i for i, kind in enumerate(PROMOTION_ORDER)}

_SCALAR_KINDS = frozenset([ValueKind.BOOL, ValueKind.INTEGER, ValueKind.FLOAT, ValueKind.STRING])


def _fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def classify_value(value: Any) -> ValueKind:
    """
    Classify a parsed JSON value.

    A number is INTEGER iff it has no fractional part and survives a
    round trip through a signed 64-bit integer; every other number is FLOAT.

    Args:
        value (Any): A value as produced by the json module.

    Returns:
        ValueKind: The kind of the value.
    """
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INTEGER if _fits_int64(value) else ValueKind.FLOAT
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and _fits_int64(int(value)):
            return ValueKind.INTEGER
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"Unsupported JSON value type: {type(value).__name__}")


def promote(a: ValueKind, b: ValueKind) -> ValueKind:
    """Return whichever kind ranks higher in PROMOTION_ORDER."""
    return a if _RANK[a] >= _RANK[b] else b


def is_incompatible_promotion(a: ValueKind, b: ValueKind) -> bool:
    """
    Check whether promoting a against b crosses a shape boundary.

    NULL is compatible with everything and scalars are compatible with each
    other; a scalar against a container, or an array against an object, is not.
    """
    if a == b or ValueKind.NULL in (a, b):
        return False
    if a in _SCALAR_KINDS and b in _SCALAR_KINDS:
        return False
    return True


@dataclass
class Field:
    """One typed member of a Struct, traceable to one JSON key."""
    name: str
    source_key: str
    kind: ValueKind
    element_kind: Optional[ValueKind] = None
    array_depth: int = 0
    nested_type: Optional[str] = None
    optional: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'name': self.name,
            'sourceKey': self.source_key,
            'kind': self.kind.value,
        }
        if self.kind == ValueKind.ARRAY:
            result['elementKind'] = self.element_kind.value if self.element_kind else None
            result['arrayDepth'] = self.array_depth
        if self.nested_type:
            result['nestedType'] = self.nested_type
        result['optional'] = self.optional
        return result


@dataclass
class Struct:
    """A named aggregate with an ordered list of fields."""
    name: str
    fields: List[Field] = field(default_factory=list)

    def get_field(self, source_key: str) -> Optional[Field]:
        return next((f for f in self.fields if f.source_key == source_key), None)

    def dependencies(self) -> List[str]:
        """Distinct names of the structs referenced by this struct's fields, in field order."""
        deps: List[str] = []
        for f in self.fields:
            if f.nested_type and f.nested_type not in deps:
                deps.append(f.nested_type)
        return deps

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'fields': [f.to_dict() for f in self.fields]}


@dataclass
class Schema:
    """The ordered collection of Structs inferred from one or more documents."""
    structs: List[Struct] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.structs)

    def __iter__(self) -> Iterator[Struct]:
        return iter(self.structs)

    def get(self, name: str) -> Optional[Struct]:
        return next((s for s in self.structs if s.name == name), None)

    def names(self) -> List[str]:
        return [s.name for s in self.structs]

    def append(self, struct: Struct) -> None:
        self.structs.append(struct)

    def extend(self, structs: 'Schema') -> None:
        self.structs.extend(structs.structs)

    def to_dict(self) -> Dict[str, Any]:
        return {'structs': [s.to_dict() for s in self.structs]}
