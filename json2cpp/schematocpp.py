# pylint: disable=too-many-arguments, too-many-locals, too-many-branches, line-too-long

"""Generates C++ structs and serialization code from an inferred schema.

Every backend shares the struct layer (types.h) and differs only in the
serialization header that bridges those structs to one JSON library.
"""

import importlib
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from json2cpp.common import header_guard, process_template
from json2cpp.errors import EmptySchemaError, GenerationError
from json2cpp.nameutil import Casing, sanitize
from json2cpp.schema_types import Field, Schema, Struct, ValueKind

logger = logging.getLogger(__name__)

INDENT = '    '

TYPES_HEADER = 'types.h'

# Names the generated headers define next to the structs. types.h is shared by
# every backend, so a struct is renamed if any backend would clash with it.
RESERVED_TYPE_NAMES = frozenset([
    # types.h and every serializer
    'Optional', 'null_t', 'ToJsonString', 'FromJsonString',
    # rapidjson
    'JsonAllocator', 'WriteValue', 'ReadValue', 'WriteMember', 'FindMember',
    # jsoncpp
    'Json', 'ToJson', 'FromJson',
])


class Dialect(Enum):
    """Target C++ dialect."""
    MODERN = 'modern'
    LEGACY = 'legacy'


class NullableRepresentation(Enum):
    """How an optional field is declared."""
    OPTIONAL = 'optional'
    SENTINEL = 'sentinel'


class StringPassing(Enum):
    """How string setters take their argument."""
    VALUE = 'value'
    REFERENCE = 'reference'


@dataclass
class CppConfig:
    """Options for C++ generation. Every option has a safe default."""
    target_dialect: Union[Dialect, str, None] = Dialect.MODERN
    namespace: str = ''
    field_casing: Casing = Casing.SNAKE
    nullable_representation: NullableRepresentation = NullableRepresentation.SENTINEL
    string_passing: StringPassing = StringPassing.VALUE


@dataclass
class CppField:
    """A field as it is emitted in C++."""
    identifier: str
    setter: str
    json_key: str
    kind: ValueKind
    value_type: str
    declared_type: str
    optional: bool
    wrapped: bool
    initializer: Optional[str]
    setter_parameter: str
    setter_body: str


@dataclass
class CppStruct:
    """A struct as it is emitted in C++."""
    name: str
    fields: List[CppField] = field(default_factory=list)


@dataclass
class CppContext:
    """Everything the struct and serializer renderers need."""
    structs: List[CppStruct]
    dialect: Dialect
    namespace_parts: List[str]
    types_header: str
    uses_null: bool
    uses_wrapper: bool
    uses_vector: bool

    @property
    def legacy(self) -> bool:
        return self.dialect == Dialect.LEGACY

    @property
    def modern(self) -> bool:
        return self.dialect == Dialect.MODERN

    def guard(self, file_name: str) -> str:
        return header_guard(*self.namespace_parts, file_name)

    def namespace_open(self) -> str:
        if not self.namespace_parts:
            return ''
        if self.modern:
            return f"namespace {'::'.join(self.namespace_parts)} {{\n"
        return ''.join(f"namespace {p} {{\n" for p in self.namespace_parts)

    def namespace_close(self) -> str:
        if not self.namespace_parts:
            return ''
        if self.modern:
            return f"}} // namespace {'::'.join(self.namespace_parts)}\n"
        return ''.join(f"}} // namespace {p}\n" for p in reversed(self.namespace_parts))


def resolve_dialect(value: Union[Dialect, str, None]) -> Dialect:
    """Determine the target dialect from a config value."""
    if isinstance(value, Dialect):
        return value
    if isinstance(value, str):
        for dialect in Dialect:
            if value.strip().lower() == dialect.value:
                return dialect
    raise GenerationError(f"Cannot determine the target C++ dialect from {value!r}",
                          context="expected one of: " + ', '.join(d.value for d in Dialect))


def split_namespace(namespace: str) -> List[str]:
    """Split a namespace given with '::' or '.' separators into its parts."""
    return [part for part in re.split(r'::|\.', namespace or '') if part]


class CppGenerator:
    """Converts a schema to C++ headers for one JSON library"""

    backend_name = ''

    def serializer_header(self) -> str:
        """Name of the backend-specific serialization header"""
        return f"{self.backend_name}_serializer.h"

    def template_type(self, template: str, argument: str, dialect: Dialect) -> str:
        """Instantiates a class template, keeping '> >' apart for pre-C++11 compilers"""
        if dialect == Dialect.LEGACY and argument.endswith('>'):
            return f"{template}<{argument} >"
        return f"{template}<{argument}>"

    def map_kind_to_cpp(self, kind: Optional[ValueKind], nested_type: Optional[str]) -> str:
        """Maps a non-array kind to a C++ type"""
        mapping = {
            ValueKind.NULL: 'null_t',
            ValueKind.BOOL: 'bool',
            ValueKind.INTEGER: 'int64_t',
            ValueKind.FLOAT: 'double',
            ValueKind.STRING: 'std::string',
        }
        if kind == ValueKind.OBJECT:
            if nested_type:
                return nested_type
            logger.warning("Object field without a nested struct; emitting null_t")
            return 'null_t'
        return mapping.get(kind, 'null_t') if kind is not None else 'null_t'

    def convert_field_type(self, schema_field: Field, dialect: Dialect,
                           type_names: Optional[Dict[str, str]] = None) -> str:
        """Converts a field to its C++ value type, without any optional wrapper"""
        nested_type = schema_field.nested_type
        if type_names and nested_type in type_names:
            nested_type = type_names[nested_type]
        if schema_field.kind != ValueKind.ARRAY:
            return self.map_kind_to_cpp(schema_field.kind, nested_type)
        cpp_type = self.map_kind_to_cpp(schema_field.element_kind, nested_type)
        for _ in range(max(schema_field.array_depth, 1)):
            cpp_type = self.template_type('std::vector', cpp_type, dialect)
        return cpp_type

    def get_initializer(self, schema_field: Field, wrapped: bool) -> Optional[str]:
        """Returns the zero value for scalar fields held by value"""
        if wrapped:
            return None
        return {
            ValueKind.BOOL: 'false',
            ValueKind.INTEGER: '0',
            ValueKind.FLOAT: '0.0',
        }.get(schema_field.kind)

    def get_setter_signature(self, identifier: str, schema_field: Field, value_type: str,
                             config: CppConfig, dialect: Dialect) -> tuple:
        """Returns the setter parameter and body for a field"""
        if schema_field.kind == ValueKind.STRING:
            if config.string_passing == StringPassing.REFERENCE:
                return f"const {value_type}& value", f"this->{identifier} = value;"
            if dialect == Dialect.MODERN:
                return f"{value_type} value", f"this->{identifier} = std::move(value);"
            return f"{value_type} value", f"this->{identifier} = value;"
        if schema_field.kind in (ValueKind.BOOL, ValueKind.INTEGER, ValueKind.FLOAT):
            return f"{value_type} value", f"this->{identifier} = value;"
        return f"const {value_type}& value", f"this->{identifier} = value;"

    def convert_field(self, schema_field: Field, config: CppConfig, dialect: Dialect,
                      identifier: Optional[str] = None, setter: Optional[str] = None,
                      type_names: Optional[Dict[str, str]] = None) -> CppField:
        """Builds the C++ view of one field"""
        identifier = identifier or sanitize(schema_field.source_key, config.field_casing)
        setter = setter or sanitize('set_' + schema_field.source_key, config.field_casing)
        value_type = self.convert_field_type(schema_field, dialect, type_names)
        wrapped = schema_field.optional and config.nullable_representation == NullableRepresentation.OPTIONAL
        declared_type = value_type
        if wrapped:
            wrapper = 'std::optional' if dialect == Dialect.MODERN else 'Optional'
            declared_type = self.template_type(wrapper, value_type, dialect)
        setter_parameter, setter_body = self.get_setter_signature(identifier, schema_field, value_type, config, dialect)
        return CppField(
            identifier=identifier,
            setter=setter,
            json_key=schema_field.source_key,
            kind=schema_field.kind,
            value_type=value_type,
            declared_type=declared_type,
            optional=schema_field.optional,
            wrapped=wrapped,
            initializer=self.get_initializer(schema_field, wrapped),
            setter_parameter=setter_parameter,
            setter_body=setter_body,
        )

    @staticmethod
    def claim_identifier(name: str, source_key: str, struct_name: str, taken: Dict[str, str]) -> str:
        """Returns name, or name with trailing underscores if it is already used in the struct"""
        unique = name
        while unique in taken:
            unique += '_'
        if unique != name:
            logger.warning("Identifier %s in struct %s is generated for both '%s' and '%s'; using %s for '%s'",
                           name, struct_name, taken[name], source_key, unique, source_key)
        taken[unique] = source_key
        return unique

    def convert_struct(self, struct: Struct, config: CppConfig, dialect: Dialect,
                       type_names: Optional[Dict[str, str]] = None) -> CppStruct:
        """Builds the C++ view of one struct"""
        name = type_names.get(struct.name, struct.name) if type_names else struct.name
        cpp_struct = CppStruct(name=name)
        taken: Dict[str, str] = {}
        # members claim their names before any setter
        identifiers = [self.claim_identifier(sanitize(f.source_key, config.field_casing), f.source_key, name, taken)
                       for f in struct.fields]
        setters = [self.claim_identifier(sanitize('set_' + f.source_key, config.field_casing), f.source_key, name, taken)
                   for f in struct.fields]
        for schema_field, identifier, setter in zip(struct.fields, identifiers, setters):
            cpp_struct.fields.append(self.convert_field(schema_field, config, dialect, identifier, setter, type_names))
        return cpp_struct

    def resolve_type_names(self, schema: Schema) -> Dict[str, str]:
        """Maps struct names that clash with names of the generated headers to free ones"""
        taken = set(schema.names()) | RESERVED_TYPE_NAMES
        type_names: Dict[str, str] = {}
        for struct in schema:
            if struct.name not in RESERVED_TYPE_NAMES or struct.name in type_names:
                continue
            renamed = struct.name + '_'
            while renamed in taken:
                renamed += '_'
            logger.warning("Struct name %s is used by the generated code; using %s", struct.name, renamed)
            taken.add(renamed)
            type_names[struct.name] = renamed
        return type_names

    def build_context(self, schema: Schema, config: CppConfig, dialect: Dialect) -> CppContext:
        """Prepares the view model shared by the struct and serializer renderers"""
        type_names = self.resolve_type_names(schema)
        structs = [self.convert_struct(s, config, dialect, type_names) for s in schema]
        all_fields = [f for s in structs for f in s.fields]
        return CppContext(
            structs=structs,
            dialect=dialect,
            namespace_parts=split_namespace(config.namespace),
            types_header=TYPES_HEADER,
            uses_null=any('null_t' in f.value_type for f in all_fields),
            uses_wrapper=any(f.wrapped for f in all_fields),
            uses_vector=any('std::vector' in f.value_type for f in all_fields),
        )

    def generate_struct(self, struct: CppStruct, context: CppContext) -> str:
        """Generates one struct declaration"""
        definition = f"struct {struct.name} {{\n"
        for f in struct.fields:
            if f.initializer and context.modern:
                definition += f"{INDENT}{f.declared_type} {f.identifier} = {f.initializer};\n"
            else:
                definition += f"{INDENT}{f.declared_type} {f.identifier};\n"
        initialized = [f for f in struct.fields if f.initializer]
        if initialized and context.legacy:
            initializers = ', '.join(f"{f.identifier}({f.initializer})" for f in initialized)
            definition += f"\n{INDENT}{struct.name}() : {initializers} {{}}\n"
        if struct.fields:
            definition += "\n"
        for f in struct.fields:
            definition += f"{INDENT}void {f.setter}({f.setter_parameter}) {{ {f.setter_body} }}\n"
        definition += "};\n"
        return definition

    def generate_types_header(self, context: CppContext) -> str:
        """Generates the struct declarations shared by every backend"""
        declarations = [self.generate_struct(s, context) for s in context.structs]
        return process_template("schematocpp/types.h.jinja", ctx=context, declarations=declarations)

    def generate_serializer(self, context: CppContext) -> str:
        """Generates the backend-specific serialization header"""
        raise NotImplementedError

    def generate(self, schema: Schema, config: Optional[CppConfig] = None) -> Dict[str, str]:
        """
        Renders the schema into C++ source files.

        Args:
            schema: The schema, already in dependency order.
            config: Generation options.

        Returns:
            A mapping of file name to file content.
        """
        config = config or CppConfig()
        if len(schema) == 0:
            raise EmptySchemaError("No structs to generate", context=f"{self.backend_name} generator")
        dialect = resolve_dialect(config.target_dialect)
        context = self.build_context(schema, config, dialect)
        return {
            TYPES_HEADER: self.generate_types_header(context),
            self.serializer_header(): self.generate_serializer(context),
        }


GENERATORS = {
    'rapidjson': ('json2cpp.cpprapidjson', 'RapidJsonGenerator'),
    'nlohmann': ('json2cpp.cppnlohmann', 'NlohmannGenerator'),
    'jsoncpp': ('json2cpp.cppjsoncpp', 'JsonCppGenerator'),
}

DEFAULT_PARSER = 'rapidjson'


def get_generator(parser: str = DEFAULT_PARSER) -> CppGenerator:
    """Creates the generator for a JSON library"""
    if not parser:
        parser = DEFAULT_PARSER
    if parser not in GENERATORS:
        raise GenerationError(f"Unknown JSON library '{parser}'", context="expected one of: " + ', '.join(GENERATORS))
    module_name, class_name = GENERATORS[parser]
    module = importlib.import_module(module_name)
    return getattr(module, class_name)()
