"""Runtime values.

The language is dynamically typed. A runtime value is one of six kinds,
represented with plain Python objects except for chars, which need their own
type so that ``'a'`` and ``"a"`` stay distinct:

    ===========  ======================
    Kind         Python representation
    ===========  ======================
    NUMBER       float
    STRING       str
    CHAR         :class:`Char`
    BOOL         bool
    NULL         None
    ARRAY        list (mutable, shared by reference)
    ===========  ======================

:func:`kind_of` recovers the tag; every operator in the VM dispatches on it.


File: values.py
Version: 1.0.0
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """
    Tag of a runtime value.
    """
    NUMBER = "number"
    STRING = "string"
    CHAR = "char"
    BOOL = "bool"
    NULL = "null"
    ARRAY = "array"


@dataclass(frozen=True)
class Char:
    """A single code point."""
    value: str

    def __post_init__(self) -> None:
        if len(self.value) != 1:
            raise ValueError(f"Char holds exactly one character, got {self.value!r}")

    def __str__(self) -> str:
        return self.value


def kind_of(value: Any) -> ValueKind:
    """
    Return the tag of a runtime value.

    Raises:
        TypeError: If the object is not a runtime value.
    """
    # bool before float: bool is never a number here
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, float):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Char):
        return ValueKind.CHAR
    if isinstance(value, list):
        return ValueKind.ARRAY
    raise TypeError(f"Not a runtime value: {value!r}")


def is_truthy(value: Any) -> bool:
    """
    Convert a value to a boolean for conditional contexts.

    null is false, a bool is itself, a number is false only when zero,
    everything else is true.
    """
    match kind_of(value):
        case ValueKind.NULL:
            return False
        case ValueKind.BOOL:
            return value
        case ValueKind.NUMBER:
            return value != 0
        case _:
            return True


def values_equal(a: Any, b: Any) -> bool:
    """
    Compare two values by kind and content.

    Values of different kinds are never equal; numbers use exact float
    equality and arrays compare element by element.
    """
    kind = kind_of(a)
    if kind != kind_of(b):
        return False
    if kind == ValueKind.ARRAY:
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    return a == b


def format_number(value: float) -> str:
    """
    Render a number, dropping the ``.0`` of integral values.
    """
    text = repr(value)
    if text.endswith('.0'):
        text = text[:-2]
    return text


def stringify(value: Any) -> str:
    """
    Render a value the way ``print`` shows it.
    """
    match kind_of(value):
        case ValueKind.NULL:
            return "null"
        case ValueKind.BOOL:
            return "true" if value else "false"
        case ValueKind.NUMBER:
            return format_number(value)
        case ValueKind.ARRAY:
            return "[" + ", ".join(stringify(elem) for elem in value) + "]"
        case _:
            return str(value)
