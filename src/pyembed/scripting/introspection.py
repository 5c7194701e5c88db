"""
Introspection API for wrapped resource values.

Lets tools (and the CLI) ask which resource kinds exist, which attributes
each kind exposes, and what a particular wrapped value looks like, without
reaching into the underlying domain records.

Usage:
    from pyembed.scripting.introspection import list_types, get_type_info, describe_value

    for kind in list_types():
        print(kind, get_type_info(kind)["attributes"])

    print(describe_value(to_scripting_value(resource)))
"""

from typing import Any, Dict, List, Optional

from .python_resource import TypedValue, VALUE_CLASSES


_KINDS: Dict[str, type] = {cls.TYPE: cls for cls in VALUE_CLASSES}


def list_types() -> List[str]:
    """Return the kind names of all wrapped resource values."""
    return list(_KINDS)


def get_type_info(kind: str) -> Optional[Dict[str, Any]]:
    """
    Describe a wrapped value kind.

    Returns None for unknown kinds. Attribute types are the scripting type
    names ("string", "int", "bool").
    """
    cls = _KINDS.get(kind)
    if cls is None:
        return None
    return {
        "name": cls.TYPE,
        "description": (cls.__doc__ or "").strip(),
        "attributes": {name: str(attr_type) for name, (attr_type, _) in cls.ATTRIBUTES.items()},
    }


def get_api_reference() -> Dict[str, Any]:
    """Return info for every kind, keyed by kind name."""
    return {kind: get_type_info(kind) for kind in _KINDS}


def describe_value(value: TypedValue) -> Dict[str, Any]:
    """Return a JSON-serializable summary of a wrapped value."""
    return {
        "type": value.get_type(),
        "display": value.to_str(),
        "attributes": {name: value.get_attr(name).data for name in value.dir_attr()},
    }
