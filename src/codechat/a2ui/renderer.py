from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .action_bridge import ActionBridge, resolve_action
from .bindings import (
    ROOT_PATH,
    resolve_boolean,
    resolve_number,
    resolve_path,
    resolve_string,
    write_binding,
)
from .catalog import INTERACTIVE_COMPONENT_TYPES, ComponentType
from .children import resolve_children
from .surface_model import ComponentDefinition
from .surface_registry import Surface

logger = logging.getLogger(__name__)

DEFAULT_ICON = "●"
DEFAULT_DATETIME_INPUT_TYPE = "datetime-local"
SLIDER_DEFAULTS = {"min": 0, "max": 100, "step": 1}

_TAB_LABEL_KEYS = ("label", "title", "name")
_TAB_CONTENT_KEYS = ("contentId", "content", "child", "panelId", "componentId")


@dataclass
class RenderNode:
    id: str
    component: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["RenderNode"] = field(default_factory=list)
    handlers: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    base_path: str = ROOT_PATH

    def walk(self) -> Iterator["RenderNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, component_id: str) -> Optional["RenderNode"]:
        for node in self.walk():
            if node.id == component_id:
                return node
        return None

    def find_all(self, component_id: str) -> List["RenderNode"]:
        return [node for node in self.walk() if node.id == component_id]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "component": self.component,
            "props": dict(self.props),
            "children": [child.to_dict() for child in self.children],
        }
        if self.handlers:
            payload["handlers"] = sorted(self.handlers)
        if self.base_path != ROOT_PATH:
            payload["basePath"] = self.base_path
        return payload


def _first_str(raw: Mapping[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value if isinstance(value, str) else None
    return None


def normalize_tabs(properties: Mapping[str, Any]) -> List[Dict[str, str]]:
    """
    Read tab definitions from ``tabs``/``items``, or parallel ``labels`` + ``children``.

    Models name these fields inconsistently, so several aliases are accepted
    for both the label and the content component id.
    """
    raw_tabs = properties.get("tabs")
    if raw_tabs is None:
        raw_tabs = properties.get("items")
    if isinstance(raw_tabs, list) and raw_tabs:
        tabs: List[Dict[str, str]] = []
        for raw in raw_tabs:
            if not isinstance(raw, Mapping):
                continue
            label = _first_str(raw, _TAB_LABEL_KEYS)
            content_id = _first_str(raw, _TAB_CONTENT_KEYS)
            if label and content_id:
                tabs.append({"label": label, "contentId": content_id})
        if tabs:
            return tabs

    labels = properties.get("labels")
    children = properties.get("children")
    if isinstance(labels, list) and isinstance(children, list):
        return [
            {"label": str(label), "contentId": child}
            for label, child in zip(labels, children)
            if isinstance(child, str) and child
        ]
    return []


def _slider_number(value: Any) -> Any:
    number = float(value)
    return int(number) if number.is_integer() else number


def _normalize_options(raw_options: Any) -> List[Dict[str, str]]:
    if not isinstance(raw_options, list):
        return []
    options: List[Dict[str, str]] = []
    for raw in raw_options:
        if not isinstance(raw, Mapping) or raw.get("value") is None:
            continue
        value = str(raw["value"])
        label = raw.get("label")
        options.append({"value": value, "label": str(label) if label is not None else value})
    return options


class SurfaceRenderer:
    """
    Turn a Surface into a tree of RenderNodes, starting from its root component.

    Input components get handlers only while the surface is interactive: a
    ``click`` on Button, ``change`` on TextField/CheckBox/Slider/DateTimeInput
    and ``toggle`` on MultipleChoice. Frozen surfaces render every node with
    no handlers, and their input components carry ``disabled: True``.
    """

    def __init__(self, surface: Surface, bridge: Optional[ActionBridge] = None) -> None:
        self.surface = surface
        self.bridge = bridge
        self.store = surface.data_model

    def render(self) -> Optional[RenderNode]:
        if not self.surface.root_id:
            return None
        return self.render_component(self.surface.root_id, ROOT_PATH)

    def render_component(
        self,
        component_id: str,
        base_path: str = ROOT_PATH,
        ancestors: Tuple[str, ...] = (),
    ) -> Optional[RenderNode]:
        if component_id in ancestors:
            logger.debug("Component '%s' is its own ancestor; not rendering it again.", component_id)
            return None
        definition = self.surface.components.get(component_id)
        if definition is None:
            return None
        component_type = definition.type
        if component_type is None:
            logger.debug("Unknown component type '%s' for '%s'.", definition.component, component_id)
            return None

        node = RenderNode(id=component_id, component=component_type.value, base_path=base_path)
        path = ancestors + (component_id,)

        if component_type is ComponentType.TEXT:
            self._text(node, definition)
        elif component_type is ComponentType.BUTTON:
            self._button(node, definition, path)
        elif component_type in (
            ComponentType.CARD,
            ComponentType.ROW,
            ComponentType.COLUMN,
            ComponentType.LIST,
            ComponentType.MODAL,
        ):
            node.children = self._render_children(definition, base_path, path)
        elif component_type is ComponentType.TEXT_FIELD:
            self._text_field(node, definition)
        elif component_type is ComponentType.CHECK_BOX:
            self._check_box(node, definition)
        elif component_type is ComponentType.IMAGE:
            if not self._image(node, definition):
                return None
        elif component_type is ComponentType.TABS:
            if not self._tabs(node, definition, path):
                return None
        elif component_type is ComponentType.SLIDER:
            self._slider(node, definition)
        elif component_type is ComponentType.ICON:
            node.props["name"] = self._string(definition, "name", base_path) or DEFAULT_ICON
        elif component_type is ComponentType.DIVIDER:
            pass
        elif component_type is ComponentType.DATE_TIME_INPUT:
            self._date_time_input(node, definition)
        elif component_type is ComponentType.MULTIPLE_CHOICE:
            self._multiple_choice(node, definition)

        if not self.surface.interactive:
            node.handlers.clear()
            if component_type in INTERACTIVE_COMPONENT_TYPES:
                node.props["disabled"] = True
        return node

    def _render_children(
        self,
        definition: ComponentDefinition,
        base_path: str,
        path: Tuple[str, ...],
    ) -> List[RenderNode]:
        rendered: List[RenderNode] = []
        for ref in resolve_children(definition.properties, self.store, base_path):
            child = self.render_component(ref.id, ref.base_path, path)
            if child is not None:
                rendered.append(child)
        return rendered

    def _string(self, definition: ComponentDefinition, key: str, base_path: str) -> str:
        return resolve_string(definition.get(key), self.store, base_path)

    def _text(self, node: RenderNode, definition: ComponentDefinition) -> None:
        node.props["text"] = self._string(definition, "text", node.base_path)
        node.props["usageHint"] = definition.get("usageHint") or "body"

    def _button(self, node: RenderNode, definition: ComponentDefinition, path: Tuple[str, ...]) -> None:
        node.children = self._render_children(definition, node.base_path, path)
        if not node.children:
            label = self._string(definition, "label", node.base_path)
            if label:
                node.props["label"] = label
        action = definition.get("action")
        if self.surface.interactive and self.bridge is not None and action is not None:
            base_path = node.base_path
            surface_id = self.surface.surface_id

            def click() -> bool:
                if not self.surface.interactive:
                    return False
                return self.bridge.dispatch(surface_id, resolve_action(action, self.store, base_path))

            node.handlers["click"] = click

    def _bind_change(self, node: RenderNode, cell: Any, convert: Callable[[Any], Any]) -> None:
        if not self.surface.interactive or not isinstance(cell, Mapping) or not isinstance(cell.get("path"), str):
            return
        base_path = node.base_path

        def change(value: Any) -> bool:
            if not self.surface.interactive:
                return False
            try:
                converted = convert(value)
            except (TypeError, ValueError):
                logger.debug("Ignoring unconvertible input %r for '%s'.", value, node.id)
                return False
            return write_binding(cell, self.store, base_path, converted)

        node.handlers["change"] = change

    def _text_field(self, node: RenderNode, definition: ComponentDefinition) -> None:
        node.props["label"] = self._string(definition, "label", node.base_path)
        node.props["text"] = self._string(definition, "text", node.base_path)
        node.props["placeholder"] = self._string(definition, "placeholder", node.base_path)
        self._bind_change(node, definition.get("text"), str)

    def _check_box(self, node: RenderNode, definition: ComponentDefinition) -> None:
        node.props["label"] = self._string(definition, "label", node.base_path)
        node.props["checked"] = resolve_boolean(definition.get("value"), self.store, node.base_path)
        self._bind_change(node, definition.get("value"), bool)

    def _image(self, node: RenderNode, definition: ComponentDefinition) -> bool:
        src = self._string(definition, "src", node.base_path)
        if not src:
            return False
        node.props["src"] = src
        node.props["alt"] = self._string(definition, "alt", node.base_path)
        return True

    def _tabs(self, node: RenderNode, definition: ComponentDefinition, path: Tuple[str, ...]) -> bool:
        tabs = normalize_tabs(definition.properties)
        if not tabs:
            return False
        node.props["tabs"] = tabs
        node.props["activeIndex"] = 0
        for tab in tabs:
            panel = self.render_component(tab["contentId"], node.base_path, path)
            if panel is not None:
                node.children.append(panel)
        return True

    def _slider(self, node: RenderNode, definition: ComponentDefinition) -> None:
        node.props["label"] = self._string(definition, "label", node.base_path)
        node.props["value"] = resolve_number(definition.get("value"), self.store, node.base_path)
        for key, default in SLIDER_DEFAULTS.items():
            value = definition.get(key)
            node.props[key] = value if isinstance(value, (int, float)) and not isinstance(value, bool) else default
        self._bind_change(node, definition.get("value"), _slider_number)

    def _date_time_input(self, node: RenderNode, definition: ComponentDefinition) -> None:
        node.props["label"] = self._string(definition, "label", node.base_path)
        node.props["value"] = self._string(definition, "value", node.base_path)
        input_type = definition.get("inputType")
        node.props["inputType"] = input_type if isinstance(input_type, str) and input_type else DEFAULT_DATETIME_INPUT_TYPE
        self._bind_change(node, definition.get("value"), str)

    def _multiple_choice(self, node: RenderNode, definition: ComponentDefinition) -> None:
        node.props["label"] = self._string(definition, "label", node.base_path)
        binding = definition.get("selections")
        selections_path: Optional[str] = None
        if isinstance(binding, Mapping) and isinstance(binding.get("path"), str):
            selections_path = resolve_path(binding["path"], node.base_path)

        selections = self._selections(selections_path)
        node.props["selections"] = selections
        node.props["options"] = [
            {**option, "selected": option["value"] in selections}
            for option in _normalize_options(definition.get("options"))
        ]
        if not self.surface.interactive or selections_path is None:
            return

        def toggle(option_value: Any, checked: bool) -> bool:
            if not self.surface.interactive:
                return False
            value = str(option_value)
            current = self._selections(selections_path)
            if checked:
                updated = current + [value]
            else:
                updated = [item for item in current if item != value]
            self.store.set(selections_path, updated)
            return True

        node.handlers["toggle"] = toggle

    def _selections(self, path: Optional[str]) -> List[str]:
        if path is None:
            return []
        raw = self.store.get(path)
        if not isinstance(raw, list):
            return []
        return [str(item) for item in raw]


def render_surface(surface: Surface, bridge: Optional[ActionBridge] = None) -> Optional[RenderNode]:
    return SurfaceRenderer(surface, bridge).render()
