"""
Scripting-layer exceptions and diagnostics.

Error code ranges:
- E4xx: Value binding errors (unsupported operations, conversions)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E401, E402, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        parts = [f"{self.severity.value}[{self.code}]: {self.message}"]
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }


class ScriptingError(Exception):
    """Base exception for errors surfaced to the scripting evaluator."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class UnsupportedOperation(ScriptingError):
    """
    An operation a value does not support (E401).

    `op` is the attempted operator, e.g. ".source" for attribute access or
    "[]" for indexing. `left` is the kind name of the value the operation
    was applied to; `right` is the kind name of a second operand, if any.
    """

    def __init__(self, op: str, left: str, right: Optional[str] = None):
        self.op = op
        self.left = left
        self.right = right
        if right is None:
            message = f"operation {op} not supported on type {left}"
        else:
            message = f"operation {op} not supported for types {left} and {right}"
        super().__init__(Diagnostic(
            code="E401",
            message=message,
            severity=ErrorSeverity.ERROR,
        ))


class UnsupportedConversion(ScriptingError):
    """A resource that has no scripting value representation (E402)."""

    def __init__(self, resource_type: str, name: Optional[str] = None):
        self.resource_type = resource_type
        self.name = name
        subject = resource_type if name is None else f"{resource_type} '{name}'"
        super().__init__(Diagnostic(
            code="E402",
            message=f"cannot convert {subject} to a scripting value",
            severity=ErrorSeverity.ERROR,
            hints=["only module source, bytecode requests, resource data and "
                   "extension modules can be exposed to scripts"],
        ))
