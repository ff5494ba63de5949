# sort the dependencies

import logging
from typing import Dict, List, Set

from json2cpp.schema_types import Schema

logger = logging.getLogger(__name__)


def sort_structs_by_dependencies(schema: Schema) -> Schema:
    """
        Sort the structs in schema by their dependencies. C++ requires a struct
        held by value to be complete before it is used as a member, so every
        struct referenced through a field's nested type is placed before the
        struct that references it.

        The walk is a depth-first post-order over the nested-type references,
        started from each struct in discovery order. A struct is emitted only
        after everything it references, and exactly once.

        Folding merges structs by name, so nested objects that share a key can
        fold into a struct that holds itself by value, e.g. {"a": {"a": {}}}.
        Such references cannot be ordered. They are logged as a WARNING and
        skipped; the struct is still emitted.

        Args:
            schema: The schema to order. It is not modified.

        Returns:
            A new Schema holding the same Struct objects in dependency order.
    """
    index_by_name: Dict[str, int] = {}
    for i, struct in enumerate(schema.structs):
        index_by_name.setdefault(struct.name, i)

    visited: Set[int] = set()
    in_progress: Set[int] = set()
    ordered: List[int] = []

    def visit(index: int) -> None:
        if index in visited:
            return
        visited.add(index)
        in_progress.add(index)
        for dependency in schema.structs[index].dependencies():
            dependency_index = index_by_name.get(dependency)
            if dependency_index is None:
                logger.debug("Struct %s references unknown type %s", schema.structs[index].name, dependency)
                continue
            if dependency_index in in_progress:
                # only happens when folding merged two unrelated structs of the same name
                logger.warning("Struct %s references %s, which contains it; the generated code will not compile",
                               schema.structs[index].name, dependency)
                continue
            visit(dependency_index)
        in_progress.discard(index)
        ordered.append(index)

    for i in range(len(schema.structs)):
        visit(i)

    return Schema([schema.structs[i] for i in ordered])
