from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .bindings import ROOT_PATH, resolve_path
from .data_model import ReactiveStore


@dataclass(frozen=True)
class ChildRef:
    id: str
    base_path: str


def _id_list(values: Any) -> List[str]:
    return [item for item in values if isinstance(item, str) and item]


def _template(children: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(children, Mapping):
        return None
    template = children.get("template")
    if not isinstance(template, Mapping):
        return None
    binding = template.get("dataBinding")
    component_id = template.get("componentId")
    if not isinstance(binding, str) or not isinstance(component_id, str) or not component_id:
        return None
    return template


def _plural_children(properties: Mapping[str, Any]) -> Any:
    """Return the plural ``children`` encoding when one is present, else ``None``."""
    children = properties.get("children")
    if isinstance(children, list):
        return children
    if isinstance(children, Mapping):
        if isinstance(children.get("explicitList"), list):
            return children
        if _template(children) is not None:
            return children
    return None


def _singular_child(properties: Mapping[str, Any]) -> Optional[str]:
    child = properties.get("child")
    if isinstance(child, str) and child:
        return child
    return None


def resolve_children(
    properties: Mapping[str, Any],
    store: ReactiveStore,
    base_path: str = ROOT_PATH,
) -> List[ChildRef]:
    """
    Ordered child ids to render for a component, with each child's data scope.

    Supports a flat id list, ``{"explicitList": [...]}``, a ``{"template": ...}``
    repeat over a bound array, and a singular ``child`` id. The plural forms
    win; ``child`` is used only when none of them is present.
    """
    children = _plural_children(properties)
    if children is None:
        child = _singular_child(properties)
        return [ChildRef(child, base_path)] if child else []

    if isinstance(children, list):
        return [ChildRef(child_id, base_path) for child_id in _id_list(children)]

    explicit = children.get("explicitList")
    if isinstance(explicit, list):
        return [ChildRef(child_id, base_path) for child_id in _id_list(explicit)]

    template = _template(children)
    binding = resolve_path(template["dataBinding"], base_path).rstrip("/")
    items = store.get(binding)
    if not isinstance(items, list):
        return []
    component_id = template["componentId"]
    return [ChildRef(component_id, f"{binding}/{index}") for index in range(len(items))]


def referenced_child_ids(properties: Mapping[str, Any]) -> List[str]:
    """Every id a component names as a child, across all encodings."""
    refs: List[str] = []
    children = properties.get("children")
    if isinstance(children, list):
        refs.extend(_id_list(children))
    elif isinstance(children, Mapping):
        explicit = children.get("explicitList")
        if isinstance(explicit, list):
            refs.extend(_id_list(explicit))
        template = _template(children)
        if template is not None:
            refs.append(template["componentId"])
    child = _singular_child(properties)
    if child:
        refs.append(child)
    return refs
