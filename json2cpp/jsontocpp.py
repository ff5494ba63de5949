"""Infers structs from JSON files and generates C++ headers for them.

This module provides:
- j2cpp: Infer a schema from one or more JSON files and render C++ code
- j2schema: Infer the same schema and write it out as JSON for inspection
"""

import glob
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

from json2cpp.dependency_resolver import sort_structs_by_dependencies
from json2cpp.errors import (DirectoryCreateError, EmptySchemaError, FileWriteError, GlobError,
                             InputNotFoundError, MalformedJsonError, NoFilesMatchedError)
from json2cpp.nameutil import Casing
from json2cpp.schema_inference import SchemaInferrer
from json2cpp.schema_merge import merge_schemas
from json2cpp.schema_types import Schema
from json2cpp.schematocpp import (DEFAULT_PARSER, CppConfig, Dialect, NullableRepresentation,
                                  StringPassing, get_generator)

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of a successful conversion."""
    files: List[str] = field(default_factory=list)
    struct_count: int = 0


def _check_pattern(pattern: str) -> None:
    """Rejects character classes that are opened but never closed."""
    i = 0
    while i < len(pattern):
        if pattern[i] == '[':
            j = i + 1
            if pattern[j:j + 1] == '!':
                j += 1
            if pattern[j:j + 1] == ']':
                j += 1
            end = pattern.find(']', j)
            if end < 0:
                raise GlobError(f"Malformed glob pattern '{pattern}'", context="unterminated character class")
            i = end
        i += 1


def resolve_input_files(input_path: str, merge: bool = False) -> List[str]:
    """Determines the files to process.

    Without merge the input must name an existing file. With merge it is a
    glob pattern; matches are returned in sorted order so that folding is
    reproducible across platforms.

    Args:
        input_path: A file path, or a glob pattern in merge mode
        merge: Whether to expand input_path as a glob

    Returns:
        The list of files, never empty
    """
    if not merge:
        if not os.path.exists(input_path):
            raise InputNotFoundError(f"Input file '{input_path}' does not exist")
        return [input_path]

    _check_pattern(input_path)
    try:
        matches = sorted(glob.glob(input_path))
    except (OSError, ValueError) as e:
        raise GlobError(f"Malformed glob pattern '{input_path}'", cause=e) from e
    files = [m for m in matches if os.path.isfile(m)]
    if not files:
        raise NoFilesMatchedError(f"No files match '{input_path}'")
    logger.debug("Pattern %s matched %d file(s)", input_path, len(files))
    return files


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def load_json_document(path: str) -> Any:
    """Reads and parses one JSON document.

    Args:
        path: The file to read

    Returns:
        The parsed JSON value
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f, parse_constant=_reject_constant)
    except OSError as e:
        raise InputNotFoundError(f"Cannot read '{path}': {e.strerror or e}", context=path, cause=e) from e
    except ValueError as e:
        raise MalformedJsonError(f"Failed to parse JSON: {e}", context=path, cause=e) from e


def infer_schema_from_files(files: List[str], root_name: str = 'Root',
                            field_casing: Casing = Casing.SNAKE) -> Schema:
    """Infers each file and folds the results, in order, into one schema.

    Args:
        files: The JSON files to analyze
        root_name: Name of the struct for each document's top-level object
        field_casing: Casing applied to field names

    Returns:
        The unified schema, in discovery order
    """
    inferrer = SchemaInferrer(field_casing=field_casing)
    unified = Schema()
    for path in files:
        document = load_json_document(path)
        schema = inferrer.infer(document, root_name)
        logger.debug("Inferred %d struct(s) from %s", len(schema), path)
        merge_schemas(unified, schema)
    if len(unified) == 0:
        raise EmptySchemaError("No structs could be inferred from the input",
                               context=', '.join(files))
    return unified


def write_generated_files(rendered: Dict[str, str], output_dir: str) -> List[str]:
    """Writes rendered files into output_dir, overwriting existing files.

    Writing is not transactional: a failure part-way leaves the files
    written before it in place.

    Args:
        rendered: File name to content
        output_dir: Target directory, created if missing

    Returns:
        The paths written, in the order of rendered
    """
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(f"Cannot create output directory '{output_dir}'", context=output_dir, cause=e) from e

    written = []
    for file_name, content in rendered.items():
        path = os.path.join(output_dir, file_name)
        try:
            with open(path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(content)
        except OSError as e:
            raise FileWriteError(f"Cannot write '{path}'", context=path, cause=e) from e
        logger.debug("Wrote %s", path)
        written.append(path)
    return written


def convert_json_to_cpp(
    input_path: str,
    output_dir: str = './out',
    merge: bool = False,
    legacy_cpp: bool = False,
    namespace: str = '',
    camelcase: bool = False,
    optional_null: bool = False,
    string_ref: bool = False,
    parser: str = DEFAULT_PARSER,
    root_name: str = 'Root'
) -> ConversionResult:
    """Generates C++ structs and serialization code from JSON files.

    Args:
        input_path: A JSON file, or a glob pattern when merge is set
        output_dir: Directory receiving types.h and the serializer header
        merge: Fold every file matching the pattern into one schema
        legacy_cpp: Target pre-C++17 compilers
        namespace: C++ namespace for the generated code, '::' or '.' separated
        camelcase: Use lowerCamelCase field names instead of snake_case
        optional_null: Wrap optional fields in an optional type
        string_ref: Take string setter arguments by const reference
        parser: JSON library the serializer targets
        root_name: Name of the top-level struct

    Returns:
        The files written and the number of structs generated
    """
    casing = Casing.LOWER_CAMEL if camelcase else Casing.SNAKE
    config = CppConfig(
        target_dialect=Dialect.LEGACY if legacy_cpp else Dialect.MODERN,
        namespace=namespace,
        field_casing=casing,
        nullable_representation=NullableRepresentation.OPTIONAL if optional_null else NullableRepresentation.SENTINEL,
        string_passing=StringPassing.REFERENCE if string_ref else StringPassing.VALUE,
    )
    generator = get_generator(parser)

    files = resolve_input_files(input_path, merge)
    schema = sort_structs_by_dependencies(infer_schema_from_files(files, root_name, casing))
    rendered = generator.generate(schema, config)
    written = write_generated_files(rendered, output_dir)
    return ConversionResult(files=written, struct_count=len(schema))


def convert_json_to_schema(
    input_path: str,
    schema_file: str,
    merge: bool = False,
    camelcase: bool = False,
    root_name: str = 'Root'
) -> ConversionResult:
    """Writes the unified, dependency-ordered schema inferred from JSON files.

    Args:
        input_path: A JSON file, or a glob pattern when merge is set
        schema_file: Output path for the schema
        merge: Fold every file matching the pattern into one schema
        camelcase: Use lowerCamelCase field names instead of snake_case
        root_name: Name of the top-level struct

    Returns:
        The schema file written and the number of structs it holds
    """
    casing = Casing.LOWER_CAMEL if camelcase else Casing.SNAKE
    files = resolve_input_files(input_path, merge)
    schema = sort_structs_by_dependencies(infer_schema_from_files(files, root_name, casing))

    output_dir = os.path.dirname(schema_file)
    if output_dir:
        try:
            os.makedirs(output_dir, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(f"Cannot create output directory '{output_dir}'", context=output_dir, cause=e) from e
    try:
        with open(schema_file, 'w', encoding='utf-8') as f:
            json.dump(schema.to_dict(), f, indent=2)
    except OSError as e:
        raise FileWriteError(f"Cannot write '{schema_file}'", context=schema_file, cause=e) from e
    return ConversionResult(files=[schema_file], struct_count=len(schema))
