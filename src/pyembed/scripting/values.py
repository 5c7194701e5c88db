"""
Runtime value wrappers handed to the scripting evaluator.

Values pair a Python object with its scripting type so the evaluator can
type check attribute results and print them.
"""

from dataclasses import dataclass
from typing import Any

from .types import Type, ResourceType, INT, BOOL, STRING


@dataclass(frozen=True)
class Value:
    """
    A runtime value with scripting type information.

    The `data` field holds the actual Python object.
    The `type` field holds the scripting type for runtime validation.
    """
    data: Any
    type: Type

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.type})"

    def is_truthy(self) -> bool:
        """Check if this value is truthy in boolean context."""
        if self.type == BOOL:
            return bool(self.data)
        # Wrapped resources decide for themselves
        if isinstance(self.type, ResourceType):
            return self.data.to_bool()
        return True


def int_val(n: int) -> Value:
    """Create an integer value."""
    return Value(int(n), INT)


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(bool(b), BOOL)


def string_val(s: str) -> Value:
    """Create a string value."""
    return Value(str(s), STRING)


def resource_val(wrapped: Any) -> Value:
    """Bind a wrapped resource value into an evaluator Value."""
    return Value(wrapped, wrapped.VALUE_TYPE)


def unwrap_value(v: Value) -> Any:
    """Extract the raw Python data from a Value."""
    return v.data


def check_type(value: Value, expected: Type) -> bool:
    """Check if a value's type is assignable to expected type."""
    return expected.is_assignable_from(value.type)
