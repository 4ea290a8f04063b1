"""Утилиты для генератора"""

from .naming import (
    ARGUMENT_RESERVED_WORDS,
    RESERVED_WORDS,
    IdentifierNamer,
)

__all__ = [
    "ARGUMENT_RESERVED_WORDS",
    "RESERVED_WORDS",
    "IdentifierNamer",
]
