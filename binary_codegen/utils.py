"""
Utility functions for the converter generator.
"""

import re

from .descriptors import TypeRef

# Characters that cannot appear in a Python identifier
_INVALID_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z_]+")


def safe_identifier(text: str) -> str:
    """Replace every run of non-identifier characters with a single underscore.

    Examples:
        "myapp.models.Person" -> "myapp_models_Person"
        "builtins.list[builtins.int]" -> "builtins_list_builtins_int_"

    Args:
        text: Any text, typically a dotted type name

    Returns:
        A string usable as a Python identifier
    """
    result = _INVALID_IDENTIFIER_CHARS.sub("_", text)
    if result and result[0].isdigit():
        result = f"_{result}"
    return result


def safe_target_name(type_ref: TypeRef) -> str:
    """Identifier derived from a type's full name, used to name its converter."""
    return safe_identifier(type_ref.full_name).strip("_")
