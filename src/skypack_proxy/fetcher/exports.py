"""Conditional export-map resolution for multi-entry skeletons.

A package ``exports`` field is walked recursively:

* a string is a leaf target;
* an object whose keys all start with ``.`` is a path map, recursed per key;
* any other object is a condition map, resolved by the first present
  condition in ``CONDITION_PRECEDENCE``.

Wildcard keys (containing ``*``), folder keys (ending in ``/``) and ``null``
targets are skipped. A subpath that is absolute, contains a backslash, or has
an empty, ``.`` or ``..`` segment raises ``RegistryDataInvalid``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from ..errors import NoMatchingCondition, RegistryDataInvalid

CONDITION_PRECEDENCE = ("browser", "import", "node", "default")


@dataclass(frozen=True)
class ExportEntry:
    """One resolved export: the public subpath and the file it maps to."""

    subpath: str
    target: str


def _join(parent: str, key: str) -> str:
    if parent == ".":
        return key
    return parent + key[1:]


def _is_path_map(value: dict) -> bool:
    return bool(value) and all(str(k).startswith(".") for k in value)


def _check_subpath(path: str) -> str:
    if path == ".":
        return path
    if not path.startswith("./") or "\\" in path:
        raise RegistryDataInvalid(f"Skypack API returned invalid data: unsafe export subpath {path!r}")
    if any(segment in ("", ".", "..") for segment in path[2:].split("/")):
        raise RegistryDataInvalid(f"Skypack API returned invalid data: unsafe export subpath {path!r}")
    return path


def _resolve(value: Any, path: str, out: List[ExportEntry]) -> None:
    if value is None:
        return
    if isinstance(value, str):
        out.append(ExportEntry(path, value))
        return
    if isinstance(value, list):
        if value:
            _resolve(value[0], path, out)
        return
    if not isinstance(value, dict):
        raise NoMatchingCondition(path, [])

    if _is_path_map(value):
        for key, sub in value.items():
            if "*" in key or key.endswith("/"):
                continue
            _resolve(sub, _check_subpath(_join(path, key)), out)
        return

    for condition in CONDITION_PRECEDENCE:
        if condition in value:
            _resolve(value[condition], path, out)
            return
    raise NoMatchingCondition(path, list(value.keys()))


def resolve_export_map(exports: Any) -> List[ExportEntry]:
    """Flatten an ``exports`` field into concrete entries, in declaration order.

    Raises:
        NoMatchingCondition: A condition map offers none of the supported
            conditions.
        RegistryDataInvalid: A subpath would escape the package directory.
    """
    out: List[ExportEntry] = []
    _resolve(exports, ".", out)
    return out


def module_file_for(subpath: str, main_file: str) -> str:
    """Map an export subpath to the skeleton file that re-exports it.

    ``"."`` maps to main_file; ``"./jsx-runtime"`` maps to ``jsx-runtime.mjs``.
    """
    if subpath == ".":
        return main_file
    name = subpath[2:] if subpath.startswith("./") else subpath.lstrip("./")
    for ext in (".mjs", ".cjs", ".js"):
        if name.endswith(ext):
            name = name[: -len(ext)]
            break
    return f"{name}.mjs"
