from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from .data_model import ReactiveStore

ROOT_PATH = "/"


def resolve_path(path: str, base_path: Optional[str]) -> str:
    """
    Scope ``path`` to ``base_path`` (the data path of the enclosing template item).

    Inside a template a leading ``/`` still means "this item", so only paths
    already under ``base_path`` are left untouched.
    """
    if not base_path or base_path == ROOT_PATH:
        return path
    if path.startswith("/"):
        if path.startswith(base_path):
            return path
        return f"{base_path}{path}"
    return f"{base_path}/{path}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _bound_path(cell: Any) -> Optional[str]:
    if isinstance(cell, Mapping):
        path = cell.get("path")
        if isinstance(path, str):
            return path
    return None


def _lookup(cell: Mapping[str, Any], store: ReactiveStore, base_path: Optional[str]) -> Any:
    return store.get(resolve_path(cell["path"], base_path))


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def resolve_string(cell: Any, store: ReactiveStore, base_path: Optional[str] = ROOT_PATH) -> str:
    if cell is None:
        return ""
    if isinstance(cell, str):
        return cell
    if not isinstance(cell, Mapping):
        return ""
    literal = cell.get("literalString")
    if literal is not None:
        return _stringify(literal)
    if _bound_path(cell) is not None:
        return _stringify(_lookup(cell, store, base_path))
    return ""


def resolve_boolean(cell: Any, store: ReactiveStore, base_path: Optional[str] = ROOT_PATH) -> bool:
    if cell is None:
        return False
    if isinstance(cell, bool):
        return cell
    if not isinstance(cell, Mapping):
        return False
    literal = cell.get("literalBoolean")
    if literal is not None:
        return bool(literal)
    if _bound_path(cell) is not None:
        return bool(_lookup(cell, store, base_path))
    return False


def resolve_number(cell: Any, store: ReactiveStore, base_path: Optional[str] = ROOT_PATH) -> float:
    if cell is None:
        return 0
    if _is_number(cell):
        return cell
    if not isinstance(cell, Mapping):
        return 0
    literal = cell.get("literalNumber")
    if _is_number(literal):
        return literal
    if _bound_path(cell) is not None:
        resolved = _lookup(cell, store, base_path)
        return resolved if _is_number(resolved) else 0
    return 0


def resolve_value(cell: Any, store: ReactiveStore, base_path: Optional[str] = ROOT_PATH) -> Any:
    """Resolve a cell without a target kind; ``None`` when nothing resolves."""
    if isinstance(cell, Mapping):
        for key in ("literalString", "literalBoolean", "literalNumber"):
            if cell.get(key) is not None:
                return cell[key]
        if _bound_path(cell) is not None:
            return _lookup(cell, store, base_path)
        return None
    return cell


def write_binding(cell: Any, store: ReactiveStore, base_path: Optional[str], value: Any) -> bool:
    """Write ``value`` back to the store when ``cell`` is a bound reference."""
    path = _bound_path(cell)
    if path is None:
        return False
    store.set(resolve_path(path, base_path), value)
    return True
