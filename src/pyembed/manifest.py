"""Resource manifests: describe packaging resources in YAML or JSON.

A manifest lists resources the way discovery would report them, so they
can be converted and inspected without running a full discovery pass::

    resources:
      - type: source_module
        name: foo.bar
        source_file: foo/bar.py
      - type: bytecode_request
        name: foo.bar
        optimize_level: 2
      - type: resource
        package: foo
        name: data.txt
        data: "inline text"
      - type: extension_dynamic
        name: _foo
        init_fn: PyInit__foo

File references resolve relative to the manifest's directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import yaml

from .logging_config import get_logger
from .resource import (
    ExtensionModuleData,
    ExtensionModuleDynamicLibrary,
    ExtensionModuleStaticallyLinked,
    ModuleBytecode,
    ModuleBytecodeRequest,
    ModuleSource,
    PythonResource,
    Resource,
)
from .scripting import TypedValue, to_scripting_value

log = get_logger(__name__)


class ManifestError(ValueError):
    """Raised when a manifest document is malformed."""


def _require(entry: Dict[str, Any], key: str, index: int) -> Any:
    if key not in entry:
        raise ManifestError(f"resource #{index}: missing required field '{key}'")
    return entry[key]


def _as_str(value: Any, key: str, index: int) -> str:
    if not isinstance(value, str):
        raise ManifestError(f"resource #{index}: field '{key}' must be a string")
    return value


def _as_bool(entry: Dict[str, Any], key: str, index: int) -> bool:
    value = entry.get(key, False)
    if not isinstance(value, bool):
        raise ManifestError(f"resource #{index}: field '{key}' must be true or false")
    return value


def _as_level(entry: Dict[str, Any], index: int) -> int:
    value = entry.get("optimize_level", 0)
    if isinstance(value, bool) or not isinstance(value, int) or value not in (0, 1, 2):
        raise ManifestError(f"resource #{index}: optimize_level must be 0, 1 or 2")
    return value


def _as_str_tuple(entry: Dict[str, Any], key: str, index: int) -> tuple:
    value = entry.get(key, []) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"resource #{index}: field '{key}' must be a list of strings")
    return tuple(value)


@dataclass
class ResourceManifest:
    """Wrapper around a loaded manifest document."""

    root: Path
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, manifest_path: Path | str) -> "ResourceManifest":
        path = Path(manifest_path)
        if not path.exists():
            raise FileNotFoundError(f"manifest not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as fp:
                if path.suffix == ".json":
                    data = json.load(fp)
                else:
                    data = yaml.safe_load(fp) or {}
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestError(f"{path}: cannot parse manifest: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"{path}: manifest must be a mapping")
        log.debug("loaded manifest %s", path)
        return cls(root=path.parent, data=data)

    @classmethod
    def from_string(cls, text: str, root: Path | str = ".") -> "ResourceManifest":
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ManifestError(f"cannot parse manifest: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError("manifest must be a mapping")
        return cls(root=Path(root), data=data)

    def entries(self) -> List[Dict[str, Any]]:
        entries = self.data.get("resources", []) or []
        if not isinstance(entries, list):
            raise ManifestError("'resources' must be a list")
        return entries

    def resources(self) -> Iterator[PythonResource]:
        """Yield a domain record for each manifest entry."""
        for index, entry in enumerate(self.entries()):
            if not isinstance(entry, dict):
                raise ManifestError(f"resource #{index}: entry must be a mapping")
            kind = _require(entry, "type", index)
            builder = _BUILDERS.get(kind)
            if builder is None:
                raise ManifestError(
                    f"resource #{index}: unknown resource type '{kind}' "
                    f"(expected one of: {', '.join(sorted(_BUILDERS))})"
                )
            resource = builder(self, entry, index)
            log.debug("manifest resource #%d: %s %s", index, kind, resource.full_name)
            yield resource

    def values(self) -> List[TypedValue]:
        """Convert every resource to its scripting value.

        UnsupportedConversion propagates for resources with no value form.
        """
        values = []
        for resource in self.resources():
            value = to_scripting_value(resource)
            log.debug("converted %s to %s", resource.full_name, value.get_type())
            values.append(value)
        return values

    # --- payload helpers ---

    def _read_bytes(self, entry: Dict[str, Any], inline_key: str, file_key: str,
                    index: int, required: bool = True) -> Optional[bytes]:
        if inline_key in entry:
            inline = _as_str(entry[inline_key], inline_key, index)
            return inline.encode("utf-8")
        if file_key in entry:
            path = self.root / _as_str(entry[file_key], file_key, index)
            if not path.exists():
                raise ManifestError(f"resource #{index}: file not found: {path}")
            return path.read_bytes()
        if required:
            return b""
        return None


def _build_source(manifest: ResourceManifest, entry: Dict[str, Any], index: int) -> ModuleSource:
    return ModuleSource(
        name=_as_str(_require(entry, "name", index), "name", index),
        source=manifest._read_bytes(entry, "source", "source_file", index),
        is_package=_as_bool(entry, "is_package", index),
    )


def _build_bytecode_request(manifest: ResourceManifest, entry: Dict[str, Any],
                            index: int) -> ModuleBytecodeRequest:
    return ModuleBytecodeRequest(
        name=_as_str(_require(entry, "name", index), "name", index),
        source=manifest._read_bytes(entry, "source", "source_file", index),
        optimize_level=_as_level(entry, index),
        is_package=_as_bool(entry, "is_package", index),
    )


def _build_bytecode(manifest: ResourceManifest, entry: Dict[str, Any], index: int) -> ModuleBytecode:
    return ModuleBytecode(
        name=_as_str(_require(entry, "name", index), "name", index),
        bytecode=manifest._read_bytes(entry, "bytecode", "bytecode_file", index),
        optimize_level=_as_level(entry, index),
        is_package=_as_bool(entry, "is_package", index),
    )


def _build_resource(manifest: ResourceManifest, entry: Dict[str, Any], index: int) -> Resource:
    return Resource(
        package=_as_str(_require(entry, "package", index), "package", index),
        name=_as_str(_require(entry, "name", index), "name", index),
        data=manifest._read_bytes(entry, "data", "data_file", index),
    )


def _extension_data(manifest: ResourceManifest, entry: Dict[str, Any], index: int) -> ExtensionModuleData:
    init_fn = entry.get("init_fn")
    if init_fn is not None:
        init_fn = _as_str(init_fn, "init_fn", index)
    return ExtensionModuleData(
        name=_as_str(_require(entry, "name", index), "name", index),
        init_fn=init_fn,
        extension_file_suffix=_as_str(entry.get("extension_file_suffix", ""),
                                      "extension_file_suffix", index),
        extension_data=manifest._read_bytes(entry, "extension_data", "extension_file",
                                            index, required=False),
        is_package=_as_bool(entry, "is_package", index),
        libraries=_as_str_tuple(entry, "libraries", index),
        library_dirs=_as_str_tuple(entry, "library_dirs", index),
    )


def _build_extension_dynamic(manifest: ResourceManifest, entry: Dict[str, Any],
                             index: int) -> ExtensionModuleDynamicLibrary:
    return ExtensionModuleDynamicLibrary(_extension_data(manifest, entry, index))


def _build_extension_static(manifest: ResourceManifest, entry: Dict[str, Any],
                            index: int) -> ExtensionModuleStaticallyLinked:
    return ExtensionModuleStaticallyLinked(_extension_data(manifest, entry, index))


_BUILDERS: Dict[str, Callable[[ResourceManifest, Dict[str, Any], int], PythonResource]] = {
    "source_module": _build_source,
    "bytecode_request": _build_bytecode_request,
    "bytecode": _build_bytecode,
    "resource": _build_resource,
    "extension_dynamic": _build_extension_dynamic,
    "extension_static": _build_extension_static,
}


def load_resources(manifest_path: Path | str) -> List[PythonResource]:
    """Load a manifest and return its domain records."""
    return list(ResourceManifest.load(manifest_path).resources())
