"""
Identifier sanitization.

Maps arbitrary JSON keys to valid C++ identifiers in one of three casings.
"""

from enum import Enum
from typing import List


class Casing(Enum):
    """Identifier casing modes."""
    SNAKE = 'snake'
    LOWER_CAMEL = 'lower_camel'
    UPPER_CAMEL = 'upper_camel'


FALLBACK_IDENTIFIER = '_'

CPP_KEYWORDS = frozenset([
    'alignas', 'alignof', 'and', 'and_eq', 'asm', 'atomic_cancel', 'atomic_commit', 'atomic_noexcept', 'auto',
    'bitand', 'bitor', 'bool', 'break', 'case', 'catch', 'char', 'char8_t', 'char16_t', 'char32_t', 'class',
    'compl', 'concept', 'const', 'consteval', 'constexpr', 'constinit', 'const_cast', 'continue', 'co_await',
    'co_return', 'co_yield', 'decltype', 'default', 'delete', 'do', 'double', 'dynamic_cast', 'else', 'enum',
    'explicit', 'export', 'extern', 'false', 'float', 'for', 'friend', 'goto', 'if', 'inline', 'int', 'long',
    'mutable', 'namespace', 'new', 'noexcept', 'not', 'not_eq', 'nullptr', 'operator', 'or', 'or_eq', 'private',
    'protected', 'public', 'reflexpr', 'register', 'reinterpret_cast', 'requires', 'return', 'short', 'signed',
    'sizeof', 'static', 'static_assert', 'static_cast', 'struct', 'switch', 'synchronized', 'template', 'this',
    'thread_local', 'throw', 'true', 'try', 'typedef', 'typeid', 'typename', 'union', 'unsigned', 'using',
    'virtual', 'void', 'volatile', 'wchar_t', 'while', 'xor', 'xor_eq'
])

def _is_word_boundary(run: str, i: int) -> bool:
    """Check whether a new word starts at position i of an alphanumeric run."""
    prev, cur = run[i - 1], run[i]
    if prev.isdigit() != cur.isdigit():
        return True
    if cur.isupper() and prev.islower():
        return True
    # end of an acronym: "HTTPStatus" breaks before the 'S'
    if cur.isupper() and prev.isupper() and i + 1 < len(run) and run[i + 1].islower():
        return True
    return False


def _split_run(run: str) -> List[str]:
    words: List[str] = []
    start = 0
    for i in range(1, len(run)):
        if _is_word_boundary(run, i):
            words.append(run[start:i])
            start = i
    words.append(run[start:])
    return words


def split_words(key: str) -> List[str]:
    """
    Split a key into words.

    Every character that is not a letter or digit (including '_') separates
    runs; inside a run, words break at lower/upper transitions, at the end of
    an acronym and between letters and digits.

    Args:
        key (str): The raw JSON key.

    Returns:
        List[str]: The words in their original casing.
    """
    words: List[str] = []
    run: List[str] = []
    for ch in key:
        if ch.isalnum():
            run.append(ch)
        elif run:
            words.extend(_split_run(''.join(run)))
            run = []
    if run:
        words.extend(_split_run(''.join(run)))
    return words


def is_cpp_keyword(name: str) -> bool:
    """Check whether a name (case-insensitively) is a C++ reserved word."""
    return name.lower() in CPP_KEYWORDS


def _title(word: str) -> str:
    lower = word.lower()
    return lower[:1].upper() + lower[1:]


def sanitize(key: str, casing: Casing = Casing.SNAKE) -> str:
    """
    Convert an arbitrary JSON key into a safe C++ identifier.

    The function is pure and total: keys without any letter or digit map to
    the fallback identifier '_', identifiers starting with a digit get a
    leading underscore, and reserved words get a trailing underscore.

    Args:
        key (str): The raw JSON key.
        casing (Casing): The target casing.

    Returns:
        str: The identifier.
    """
    words = split_words(key)
    if not words:
        return FALLBACK_IDENTIFIER

    if casing == Casing.UPPER_CAMEL:
        result = ''.join(_title(w) for w in words)
    elif casing == Casing.LOWER_CAMEL:
        result = words[0].lower() + ''.join(_title(w) for w in words[1:])
    else:
        result = '_'.join(w.lower() for w in words)

    if result[0].isdigit():
        result = '_' + result
    if is_cpp_keyword(result):
        result = result + '_'
    return result


def type_name(key: str) -> str:
    """Convert a key into a struct name."""
    return sanitize(key, Casing.UPPER_CAMEL)
