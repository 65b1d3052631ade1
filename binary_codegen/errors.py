"""
Exceptions raised while generating converters.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for errors raised by the generation engine."""

    pass


class ConfigurationError(GenerationError):
    """Raised when a type description cannot be turned into a converter.

    This can happen when:
    - Two members of the same type claim the same slot index
    - A host adapter is handed something that is not a describable type
    """

    pass


class DuplicateSlotError(ConfigurationError):
    """Raised when two members of one type resolve to the same slot index."""

    def __init__(self, type_name: str, slot_index: int, names: list[str]):
        self.type_name = type_name
        self.slot_index = slot_index
        self.names = names
        super().__init__(f"Slot index {slot_index} is used by more than one member of '{type_name}': {', '.join(names)}")


class GenerationCancelled(GenerationError):
    """Raised when a generation pass was cancelled while a type was in progress."""

    pass


class CodeWriteError(Exception):
    """Raised when a generated unit cannot be written.

    This can happen when:
    - The generated text is not valid Python
    - The output file already exists and overwriting was not requested
    """

    pass
