"""
Scripting values wrapping packaging resources.

Each wrapped value owns a private deep copy of the domain record it was
built from and is read-only for its whole lifetime. The evaluator talks to
these values only through the TypedValue capabilities: kind name, display
and repr strings, truthiness, structural comparison and attribute lookup.
Everything else (indexing, iteration, hashing, calling, assignment,
numeric coercion, binary operators) raises UnsupportedOperation.

Attributes are declared in a per-class ATTRIBUTES table mapping the
attribute name to its scripting type and a getter over the wrapped record.
Raw source and data bytes are intentionally absent from these tables.
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, Union

from ..resource import (
    BytecodeModule,
    BytecodeOptimizationLevel,
    ExtensionModule,
    ExtensionModuleData,
    ExtensionModuleDynamicLibrary,
    ExtensionModuleStaticallyLinked,
    ModuleBytecode,
    ModuleBytecodeRequest,
    ModuleSource,
    PythonResource,
    Resource,
    ResourceData,
    SourceModule,
)
from .errors import UnsupportedConversion, UnsupportedOperation
from .types import (
    Type, ResourceType, INT, BOOL, STRING,
    SOURCE_MODULE, BYTECODE_MODULE, RESOURCE_DATA, EXTENSION_MODULE,
)
from .values import Value


Getter = Callable[[Any], Any]


# =============================================================================
# Structural comparison
# =============================================================================

def _structural_key(obj: Any) -> Tuple:
    """
    Build a totally ordered key for a record and everything it contains.

    Each key starts with a small tag so values of unrelated Python types
    never get compared with each other directly.
    """
    if obj is None:
        return (0,)
    # bool, int and IntEnum members that compare equal share one key
    if isinstance(obj, int):
        return (3, int(obj))
    if isinstance(obj, float):
        return (3, obj)
    if isinstance(obj, Enum):
        return (1, type(obj).__name__, obj.value)
    if isinstance(obj, str):
        return (4, obj)
    if isinstance(obj, (bytes, bytearray)):
        return (5, bytes(obj))
    if is_dataclass(obj):
        return (6, type(obj).__name__,
                tuple(_structural_key(getattr(obj, f.name)) for f in fields(obj)))
    if isinstance(obj, (list, tuple)):
        return (7, tuple(_structural_key(item) for item in obj))
    if isinstance(obj, dict):
        items = sorted((_structural_key(k), _structural_key(v)) for k, v in obj.items())
        return (8, tuple(items))
    raise TypeError(f"cannot build a comparison key for {type(obj).__name__}")


def default_compare(left: "TypedValue", right: "TypedValue") -> int:
    """
    Compare two wrapped values field by field.

    Values of different kinds order by kind name. Returns -1, 0 or 1.
    """
    a = (left.get_type(), _structural_key(left._record))
    b = (right.get_type(), _structural_key(right._record))
    if a == b:
        return 0
    return -1 if a < b else 1


# =============================================================================
# Capability interface
# =============================================================================

class TypedValue(ABC):
    """
    Base class for immutable values exposed to the scripting evaluator.

    Subclasses set TYPE, VALUE_TYPE, ATTRIBUTES and implement to_str().
    """

    TYPE: str = ""
    VALUE_TYPE: ResourceType = None
    ATTRIBUTES: Dict[str, Tuple[Type, Getter]] = {}

    __slots__ = ("_record",)

    def __init__(self, record: Any):
        object.__setattr__(self, "_record", copy.deepcopy(record))

    # --- supported capabilities ---

    def get_type(self) -> str:
        return self.TYPE

    @abstractmethod
    def to_str(self) -> str:
        """Human-readable rendering of the value."""
        pass

    def to_repr(self) -> str:
        return self.to_str()

    def to_bool(self) -> bool:
        return True

    def compare(self, other: "TypedValue") -> int:
        if not isinstance(other, TypedValue):
            raise UnsupportedOperation("compare", self.TYPE, type(other).__name__)
        return default_compare(self, other)

    def has_attr(self, attribute: str) -> bool:
        return attribute in self.ATTRIBUTES

    def get_attr(self, attribute: str) -> Value:
        try:
            attr_type, getter = self.ATTRIBUTES[attribute]
        except KeyError:
            raise UnsupportedOperation(f".{attribute}", self.TYPE) from None
        return Value(getter(self._record), attr_type)

    def dir_attr(self) -> List[str]:
        """Names of all attributes this value exposes."""
        return list(self.ATTRIBUTES)

    # --- unsupported capabilities ---

    def at(self, index: Any):
        raise UnsupportedOperation("[]", self.TYPE)

    def iterate(self):
        raise UnsupportedOperation("for in", self.TYPE)

    def get_hash(self) -> int:
        raise UnsupportedOperation("hash", self.TYPE)

    def call(self, *args, **kwargs):
        raise UnsupportedOperation("call()", self.TYPE)

    def set_attr(self, attribute: str, new_value: Any):
        raise UnsupportedOperation(f".{attribute} =", self.TYPE)

    def to_int(self) -> int:
        raise UnsupportedOperation("int()", self.TYPE)

    def binop(self, op: str, other: Any):
        right = other.get_type() if isinstance(other, TypedValue) else type(other).__name__
        raise UnsupportedOperation(op, self.TYPE, right)

    # --- Python protocol ---

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        return self.to_repr()

    def __bool__(self) -> bool:
        return self.to_bool()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.compare(other) == 0

    def __ne__(self, other: Any) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.compare(other) != 0

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.compare(other) >= 0

    def __hash__(self) -> int:
        return self.get_hash()

    def __getitem__(self, index: Any):
        return self.at(index)

    def __iter__(self):
        return self.iterate()

    def __call__(self, *args, **kwargs):
        return self.call(*args, **kwargs)

    def __setattr__(self, attribute: str, new_value: Any):
        self.set_attr(attribute, new_value)

    def __delattr__(self, attribute: str):
        self.set_attr(attribute, None)

    def __int__(self) -> int:
        return self.to_int()

    def __float__(self) -> float:
        return self.to_int()

    def __index__(self) -> int:
        return self.to_int()

    def __add__(self, other: Any):
        return self.binop("+", other)

    def __sub__(self, other: Any):
        return self.binop("-", other)

    def __mul__(self, other: Any):
        return self.binop("*", other)

    def __truediv__(self, other: Any):
        return self.binop("/", other)

    def __floordiv__(self, other: Any):
        return self.binop("//", other)

    def __mod__(self, other: Any):
        return self.binop("%", other)

    # Immutable, so copies are the value itself.
    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


# =============================================================================
# Wrapped resource kinds
# =============================================================================

class PythonSourceModule(TypedValue):
    """Python module source code."""

    TYPE = SOURCE_MODULE.name
    VALUE_TYPE = SOURCE_MODULE
    ATTRIBUTES = {
        "name": (STRING, lambda m: m.name),
        "is_package": (BOOL, lambda m: bool(m.is_package)),
    }

    __slots__ = ()

    def __init__(self, module: SourceModule):
        super().__init__(module)

    @property
    def module(self) -> SourceModule:
        return self._record

    def to_str(self) -> str:
        return f"PythonSourceModule<name={self._record.name}>"


class PythonBytecodeModule(TypedValue):
    """Python module source to be compiled to bytecode."""

    TYPE = BYTECODE_MODULE.name
    VALUE_TYPE = BYTECODE_MODULE
    ATTRIBUTES = {
        "name": (STRING, lambda m: m.name),
        "optimize_level": (INT, lambda m: int(m.optimize_level)),
        "is_package": (BOOL, lambda m: bool(m.is_package)),
    }

    __slots__ = ()

    def __init__(self, module: BytecodeModule):
        super().__init__(module)

    @property
    def module(self) -> BytecodeModule:
        return self._record

    def to_str(self) -> str:
        return (f"PythonBytecodeModule<name={self._record.name}; "
                f"level={self._record.optimize_level.name.capitalize()}>")


class PythonResourceData(TypedValue):
    """A data file belonging to a Python package."""

    TYPE = RESOURCE_DATA.name
    VALUE_TYPE = RESOURCE_DATA
    ATTRIBUTES = {
        "package": (STRING, lambda d: d.package),
        "name": (STRING, lambda d: d.name),
    }

    __slots__ = ()

    def __init__(self, data: ResourceData):
        super().__init__(data)

    @property
    def data(self) -> ResourceData:
        return self._record

    def to_str(self) -> str:
        return f"PythonResourceData<package={self._record.package}, name={self._record.name}>"


class ExtensionModuleKind(Enum):
    """Where an extension module comes from."""
    DISTRIBUTION = "distribution"
    STATICALLY_LINKED = "statically_linked"
    DYNAMIC_LIBRARY = "dynamic_library"


@dataclass(frozen=True)
class PythonExtensionModuleFlavor:
    """An extension module together with its origin."""
    kind: ExtensionModuleKind
    module: Union[ExtensionModule, ExtensionModuleData]

    @classmethod
    def distribution(cls, module: ExtensionModule) -> "PythonExtensionModuleFlavor":
        return cls(ExtensionModuleKind.DISTRIBUTION, module)

    @classmethod
    def statically_linked(cls, module: ExtensionModuleData) -> "PythonExtensionModuleFlavor":
        return cls(ExtensionModuleKind.STATICALLY_LINKED, module)

    @classmethod
    def dynamic_library(cls, module: ExtensionModuleData) -> "PythonExtensionModuleFlavor":
        return cls(ExtensionModuleKind.DYNAMIC_LIBRARY, module)

    @property
    def name(self) -> str:
        if self.kind == ExtensionModuleKind.DISTRIBUTION:
            return self.module.module
        return self.module.name


class PythonExtensionModule(TypedValue):
    """A compiled extension module."""

    TYPE = EXTENSION_MODULE.name
    VALUE_TYPE = EXTENSION_MODULE
    ATTRIBUTES = {
        "name": (STRING, lambda em: em.name),
    }

    __slots__ = ()

    def __init__(self, em: PythonExtensionModuleFlavor):
        super().__init__(em)

    @property
    def em(self) -> PythonExtensionModuleFlavor:
        return self._record

    def to_str(self) -> str:
        return f"PythonExtensionModule<name={self._record.name}>"


VALUE_CLASSES = (
    PythonSourceModule,
    PythonBytecodeModule,
    PythonResourceData,
    PythonExtensionModule,
)


# =============================================================================
# Conversion
# =============================================================================

def to_scripting_value(resource: PythonResource) -> TypedValue:
    """
    Convert a discovered resource into its scripting value.

    Raises UnsupportedConversion for already-compiled bytecode, which has no
    scripting representation yet, and for anything that is not a resource.
    Raises ValueError if a bytecode request carries an unknown
    optimization level.
    """
    if isinstance(resource, ModuleSource):
        return PythonSourceModule(SourceModule(
            name=resource.name,
            source=resource.source,
            is_package=resource.is_package,
        ))

    if isinstance(resource, ModuleBytecodeRequest):
        return PythonBytecodeModule(BytecodeModule(
            name=resource.name,
            source=resource.source,
            optimize_level=BytecodeOptimizationLevel.from_int(resource.optimize_level),
            is_package=resource.is_package,
        ))

    if isinstance(resource, ModuleBytecode):
        raise UnsupportedConversion("ModuleBytecode", resource.name)

    if isinstance(resource, Resource):
        return PythonResourceData(ResourceData(
            package=resource.package,
            name=resource.name,
            data=resource.data,
        ))

    if isinstance(resource, ExtensionModuleDynamicLibrary):
        return PythonExtensionModule(PythonExtensionModuleFlavor.dynamic_library(resource.module))

    if isinstance(resource, ExtensionModuleStaticallyLinked):
        return PythonExtensionModule(PythonExtensionModuleFlavor.statically_linked(resource.module))

    raise UnsupportedConversion(type(resource).__name__)
