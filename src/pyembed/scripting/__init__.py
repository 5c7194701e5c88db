"""
Scripting bindings for packaging resources.

This module provides:
- TypedValue: the capability interface shared by all wrapped values
- PythonSourceModule, PythonBytecodeModule, PythonResourceData,
  PythonExtensionModule: wrapped resource kinds
- to_scripting_value: conversion from discovered resources
- Value: typed attribute results handed back to the evaluator
- UnsupportedOperation, UnsupportedConversion: errors raised to scripts
"""

from .errors import (
    Diagnostic,
    ErrorSeverity,
    ScriptingError,
    UnsupportedConversion,
    UnsupportedOperation,
)

from .types import (
    Type,
    TypeTier,
    PrimitiveType,
    ResourceType,
    INT,
    BOOL,
    STRING,
    SOURCE_MODULE,
    BYTECODE_MODULE,
    RESOURCE_DATA,
    EXTENSION_MODULE,
    lookup_type,
)

from .values import (
    Value,
    int_val,
    bool_val,
    string_val,
    resource_val,
    unwrap_value,
    check_type,
)

from .python_resource import (
    TypedValue,
    PythonSourceModule,
    PythonBytecodeModule,
    PythonResourceData,
    PythonExtensionModule,
    PythonExtensionModuleFlavor,
    ExtensionModuleKind,
    VALUE_CLASSES,
    default_compare,
    to_scripting_value,
)

from .introspection import (
    list_types,
    get_type_info,
    get_api_reference,
    describe_value,
)

__all__ = [
    # Errors
    'Diagnostic',
    'ErrorSeverity',
    'ScriptingError',
    'UnsupportedConversion',
    'UnsupportedOperation',

    # Types
    'Type',
    'TypeTier',
    'PrimitiveType',
    'ResourceType',
    'INT',
    'BOOL',
    'STRING',
    'SOURCE_MODULE',
    'BYTECODE_MODULE',
    'RESOURCE_DATA',
    'EXTENSION_MODULE',
    'lookup_type',

    # Values
    'Value',
    'int_val',
    'bool_val',
    'string_val',
    'resource_val',
    'unwrap_value',
    'check_type',

    # Wrapped resources
    'TypedValue',
    'PythonSourceModule',
    'PythonBytecodeModule',
    'PythonResourceData',
    'PythonExtensionModule',
    'PythonExtensionModuleFlavor',
    'ExtensionModuleKind',
    'VALUE_CLASSES',
    'default_compare',
    'to_scripting_value',

    # Introspection
    'list_types',
    'get_type_info',
    'get_api_reference',
    'describe_value',
]
