"""C++ code generation for the nlohmann/json library."""

import logging

from json2cpp.common import process_template
from json2cpp.schematocpp import CppContext, CppGenerator

logger = logging.getLogger(__name__)


class NlohmannGenerator(CppGenerator):
    """Emits to_json/from_json hooks found by nlohmann::json through argument-dependent lookup"""

    backend_name = 'nlohmann'

    def generate_serializer(self, context: CppContext) -> str:
        if context.legacy:
            # nlohmann/json itself needs a C++11 compiler
            logger.warning("nlohmann/json requires C++11; the legacy dialect only affects the generated structs")
        return process_template("schematocpp/nlohmann_serializer.h.jinja", ctx=context)
