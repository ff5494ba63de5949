"""C++ code generation for the RapidJSON library."""

from json2cpp.common import process_template
from json2cpp.schematocpp import CppContext, CppGenerator


class RapidJsonGenerator(CppGenerator):
    """Emits WriteValue/ReadValue overloads over rapidjson::Value"""

    backend_name = 'rapidjson'

    def generate_serializer(self, context: CppContext) -> str:
        return process_template("schematocpp/rapidjson_serializer.h.jinja", ctx=context)
