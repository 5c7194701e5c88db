"""
Domain records describing packageable Python resources.

These are the descriptors produced by resource discovery: module source,
bytecode requests, data files and extension modules. They are plain frozen
dataclasses; the scripting layer wraps copies of them for the evaluator.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Union


class BytecodeOptimizationLevel(IntEnum):
    """Optimization level used when compiling bytecode (python -O flags)."""
    ZERO = 0
    ONE = 1
    TWO = 2

    @classmethod
    def from_int(cls, level: int) -> "BytecodeOptimizationLevel":
        """Translate an integer level into the enumeration.

        Only 0, 1 and 2 are meaningful; anything else raises ValueError.
        """
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(f"optimization level must be an integer, got {level!r}")
        try:
            return cls(level)
        except ValueError:
            raise ValueError(
                f"unsupported bytecode optimization level {level} (expected 0, 1 or 2)"
            ) from None


def _freeze_sequences(record, names) -> None:
    """Store list-valued fields of a frozen record as tuples."""
    for name in names:
        value = getattr(record, name)
        if value is not None:
            object.__setattr__(record, name, tuple(value))


# =============================================================================
# Module and data records
# =============================================================================

@dataclass(frozen=True)
class SourceModule:
    """Python module source code."""
    name: str
    source: bytes
    is_package: bool = False

    @property
    def full_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class BytecodeModule:
    """A request to compile module source to bytecode at a given level."""
    name: str
    source: bytes
    optimize_level: BytecodeOptimizationLevel = BytecodeOptimizationLevel.ZERO
    is_package: bool = False

    def __post_init__(self):
        object.__setattr__(self, "optimize_level",
                           BytecodeOptimizationLevel.from_int(self.optimize_level))

    @property
    def full_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResourceData:
    """A non-module file belonging to a package."""
    package: str
    name: str
    data: bytes

    @property
    def full_name(self) -> str:
        return f"{self.package}/{self.name}"


# =============================================================================
# Extension modules
# =============================================================================

@dataclass(frozen=True)
class LibraryDepends:
    """A library an extension module links against."""
    name: str
    static_path: Optional[str] = None
    dynamic_path: Optional[str] = None
    framework: bool = False
    system: bool = False


@dataclass(frozen=True)
class ExtensionModule:
    """
    An extension module shipped with a Python distribution.

    `module` is the importable module name. Object files and link
    dependencies describe how to build it into a custom interpreter.
    """
    module: str
    init_fn: Optional[str] = None
    builtin_default: bool = False
    disableable: bool = True
    object_paths: Tuple[str, ...] = ()
    static_library: Optional[str] = None
    links: Tuple[LibraryDepends, ...] = ()
    required: bool = False
    variant: str = "default"
    licenses: Optional[Tuple[str, ...]] = None
    license_public_domain: Optional[bool] = None

    def __post_init__(self):
        _freeze_sequences(self, ("object_paths", "links", "licenses"))

    @property
    def full_name(self) -> str:
        return self.module


@dataclass(frozen=True)
class ExtensionModuleData:
    """An extension module built outside of the distribution (e.g. from a wheel)."""
    name: str
    init_fn: Optional[str] = None
    extension_file_suffix: str = ""
    extension_data: Optional[bytes] = None
    object_file_data: Tuple[bytes, ...] = ()
    is_package: bool = False
    libraries: Tuple[str, ...] = ()
    library_dirs: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze_sequences(self, ("object_file_data", "libraries", "library_dirs"))

    @property
    def full_name(self) -> str:
        return self.name


# =============================================================================
# PythonResource variants
# =============================================================================

@dataclass(frozen=True)
class ModuleSource:
    """Module source discovered on disk."""
    name: str
    source: bytes
    is_package: bool = False

    @property
    def full_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class ModuleBytecodeRequest:
    """Module source that should be compiled to bytecode."""
    name: str
    source: bytes
    optimize_level: int = 0
    is_package: bool = False

    @property
    def full_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class ModuleBytecode:
    """Already-compiled module bytecode."""
    name: str
    bytecode: bytes
    optimize_level: int = 0
    is_package: bool = False

    @property
    def full_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class Resource:
    """A data resource inside a package."""
    package: str
    name: str
    data: bytes

    @property
    def full_name(self) -> str:
        return f"{self.package}/{self.name}"


@dataclass(frozen=True)
class ExtensionModuleDynamicLibrary:
    """An extension module available as a shared library."""
    module: ExtensionModuleData

    @property
    def full_name(self) -> str:
        return self.module.name


@dataclass(frozen=True)
class ExtensionModuleStaticallyLinked:
    """An extension module that can be statically linked into the binary."""
    module: ExtensionModuleData

    @property
    def full_name(self) -> str:
        return self.module.name


PythonResource = Union[
    ModuleSource,
    ModuleBytecodeRequest,
    ModuleBytecode,
    Resource,
    ExtensionModuleDynamicLibrary,
    ExtensionModuleStaticallyLinked,
]

RESOURCE_VARIANTS = (
    ModuleSource,
    ModuleBytecodeRequest,
    ModuleBytecode,
    Resource,
    ExtensionModuleDynamicLibrary,
    ExtensionModuleStaticallyLinked,
)


def is_python_resource(obj) -> bool:
    """Check whether obj is one of the PythonResource variants."""
    return isinstance(obj, RESOURCE_VARIANTS)
