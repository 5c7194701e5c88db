"""
Type definitions for values handed to the packaging scripting evaluator.

Types are organized into two tiers:
    Tier 1: Primitives (int, bool, string)
    Tier 2: Resources (PythonSourceModule, PythonBytecodeModule, ...)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from abc import ABC, abstractmethod


class TypeTier(Enum):
    """Tier classification for types in the hierarchy."""
    PRIMITIVE = 1      # int, bool, string
    RESOURCE = 2       # wrapped packaging resources


# =============================================================================
# Type Classes
# =============================================================================

@dataclass(frozen=True)
class Type(ABC):
    """Base class for all scripting types."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The type name for display/errors."""
        pass

    @property
    @abstractmethod
    def tier(self) -> TypeTier:
        """The tier this type belongs to."""
        pass

    def is_assignable_from(self, other: "Type") -> bool:
        """Check if this type can accept a value of the other type."""
        return self == other

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PrimitiveType(Type):
    """A primitive type (int, bool, string)."""
    _name: str

    @property
    def name(self) -> str:
        return self._name

    @property
    def tier(self) -> TypeTier:
        return TypeTier.PRIMITIVE


@dataclass(frozen=True)
class ResourceType(Type):
    """
    The type of a wrapped packaging resource.

    The name matches the kind name reported by the wrapped value itself,
    so error messages and type checks agree.
    """
    _name: str

    @property
    def name(self) -> str:
        return self._name

    @property
    def tier(self) -> TypeTier:
        return TypeTier.RESOURCE


# =============================================================================
# Type constants
# =============================================================================

INT = PrimitiveType("int")
BOOL = PrimitiveType("bool")
STRING = PrimitiveType("string")

SOURCE_MODULE = ResourceType("PythonSourceModule")
BYTECODE_MODULE = ResourceType("PythonBytecodeModule")
RESOURCE_DATA = ResourceType("PythonResourceData")
EXTENSION_MODULE = ResourceType("PythonExtensionModule")


# =============================================================================
# Type Registry
# =============================================================================

_TYPE_REGISTRY: Dict[str, Type] = {
    "int": INT,
    "bool": BOOL,
    "string": STRING,
    "PythonSourceModule": SOURCE_MODULE,
    "PythonBytecodeModule": BYTECODE_MODULE,
    "PythonResourceData": RESOURCE_DATA,
    "PythonExtensionModule": EXTENSION_MODULE,
}


def lookup_type(name: str) -> Optional[Type]:
    """Look up a type by name, or None if unknown."""
    return _TYPE_REGISTRY.get(name)
