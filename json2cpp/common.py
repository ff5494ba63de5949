"""
Common utility functions for json2cpp.
"""

# pylint: disable=line-too-long

import os

import jinja2


def cpp_string_literal(text: str) -> str:
    """
    Render a string as a double-quoted C++ string literal.

    Quotes, backslashes and control characters are escaped; control characters
    use three-digit octal escapes so that a following character can never be
    absorbed into the escape. Non-ASCII characters are kept as UTF-8.

    Args:
        text (str): The raw text.

    Returns:
        str: The literal, including the surrounding quotes.
    """
    escapes = {'"': '\\"', '\\': '\\\\', '\n': '\\n', '\r': '\\r', '\t': '\\t'}
    out = []
    for ch in text:
        if ch in escapes:
            out.append(escapes[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7f:
            out.append(f'\\{ord(ch):03o}')
        else:
            out.append(ch)
    return '"' + ''.join(out) + '"'


def cpp_key_expression(key: str) -> str:
    """
    Render a JSON key as a C++ expression accepted by string-keyed lookups.

    Keys containing NUL become a std::string built with an explicit byte
    length, since a plain literal would be cut short at the NUL.

    Args:
        key (str): The raw JSON key.

    Returns:
        str: A string literal, or a std::string construction.
    """
    literal = cpp_string_literal(key)
    if '\0' not in key:
        return literal
    return f"std::string({literal}, {len(key.encode('utf-8'))})"


def header_guard(*parts: str) -> str:
    """Build an include guard macro name from namespace and file name parts."""
    joined = '_'.join(p for p in parts if p)
    return ''.join(c if c.isalnum() else '_' for c in joined).upper()


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package directory.
        **kvargs: The keyword arguments to pass to the template.

    Returns:
        str: The processed template as a string.
    """
    # Load the template environment
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True,
                                      trim_blocks=True, lstrip_blocks=True)
    template_env.filters['cpp_string'] = cpp_string_literal
    template_env.filters['cpp_key'] = cpp_key_expression

    # Load the template from the file
    template = template_env.get_template(file_path)

    # Render the template with the object as input
    output = template.render(**kvargs)

    return output
