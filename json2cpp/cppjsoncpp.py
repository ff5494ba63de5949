"""C++ code generation for the JsonCpp library."""

from json2cpp.common import process_template
from json2cpp.schematocpp import CppContext, CppGenerator


class JsonCppGenerator(CppGenerator):
    """Emits ToJson/FromJson overloads over Json::Value"""

    backend_name = 'jsoncpp'

    def generate_serializer(self, context: CppContext) -> str:
        return process_template("schematocpp/jsoncpp_serializer.h.jinja", ctx=context)
