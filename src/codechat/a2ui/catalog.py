from __future__ import annotations

from copy import deepcopy
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

COMPONENT_CATALOG_VERSION = "0.9"
STANDARD_CATALOG_ID = "standard"


class ComponentType(str, Enum):
    TEXT = "Text"
    BUTTON = "Button"
    CARD = "Card"
    ROW = "Row"
    COLUMN = "Column"
    LIST = "List"
    TEXT_FIELD = "TextField"
    CHECK_BOX = "CheckBox"
    IMAGE = "Image"
    TABS = "Tabs"
    MODAL = "Modal"
    SLIDER = "Slider"
    ICON = "Icon"
    DIVIDER = "Divider"
    DATE_TIME_INPUT = "DateTimeInput"
    MULTIPLE_CHOICE = "MultipleChoice"


_TYPES_BY_TAG: Dict[str, ComponentType] = {member.value: member for member in ComponentType}

INTERACTIVE_COMPONENT_TYPES: FrozenSet[ComponentType] = frozenset(
    {
        ComponentType.BUTTON,
        ComponentType.TEXT_FIELD,
        ComponentType.CHECK_BOX,
        ComponentType.SLIDER,
        ComponentType.DATE_TIME_INPUT,
        ComponentType.MULTIPLE_CHOICE,
    }
)


def component_type_of(tag: Any) -> Optional[ComponentType]:
    """Map a raw ``component`` tag to the closed catalog, ``None`` when unknown."""
    if not isinstance(tag, str):
        return None
    return _TYPES_BY_TAG.get(tag)


# Standard catalog; its tags are listed to the agent in the render_ui tool description.
STANDARD_COMPONENT_CATALOG: Dict[str, Dict[str, Any]] = {
    "Text": {
        "category": "display",
        "description": "Text label or paragraph.",
        "props": {"text": "DynamicString", "usageHint": "h1|h2|h3|caption|body"},
    },
    "Image": {
        "category": "display",
        "description": "Image content.",
        "props": {"src": "DynamicString", "alt": "DynamicString"},
    },
    "Icon": {
        "category": "display",
        "description": "Icon glyph rendered as text.",
        "props": {"name": "DynamicString"},
    },
    "Divider": {
        "category": "layout",
        "description": "Section divider line.",
        "props": {},
    },
    "Row": {
        "category": "layout",
        "description": "Horizontal layout container.",
        "props": {"children": "ChildList"},
    },
    "Column": {
        "category": "layout",
        "description": "Vertical layout container.",
        "props": {"children": "ChildList"},
    },
    "List": {
        "category": "layout",
        "description": "List layout with static children or template binding.",
        "props": {"children": "ChildList"},
    },
    "Card": {
        "category": "layout",
        "description": "Card shell with one child or a child list.",
        "props": {"child": "ComponentId", "children": "ChildList"},
    },
    "Tabs": {
        "category": "layout",
        "description": "Tabs container.",
        "props": {"tabs": "Array<{label,contentId}>", "labels": "string[]", "children": "string[]"},
    },
    "Modal": {
        "category": "layout",
        "description": "Modal overlay around its children.",
        "props": {"child": "ComponentId", "children": "ChildList"},
    },
    "Button": {
        "category": "input",
        "description": "Action button.",
        "props": {"child": "ComponentId", "label": "DynamicString", "action": "Action"},
    },
    "TextField": {
        "category": "input",
        "description": "Editable text field.",
        "props": {"label": "DynamicString", "text": "DynamicString", "placeholder": "DynamicString"},
    },
    "CheckBox": {
        "category": "input",
        "description": "Boolean checkbox.",
        "props": {"label": "DynamicString", "value": "DynamicBoolean"},
    },
    "Slider": {
        "category": "input",
        "description": "Numeric slider.",
        "props": {
            "label": "DynamicString",
            "value": "DynamicNumber",
            "min": "number",
            "max": "number",
            "step": "number",
        },
    },
    "DateTimeInput": {
        "category": "input",
        "description": "Date/time selector.",
        "props": {"label": "DynamicString", "value": "DynamicString", "inputType": "date|time|datetime-local"},
    },
    "MultipleChoice": {
        "category": "input",
        "description": "Multi select checklist.",
        "props": {
            "label": "DynamicString",
            "options": "Array<{label,value}>",
            "selections": "DataBinding<string[]>",
        },
    },
}

if set(STANDARD_COMPONENT_CATALOG.keys()) != set(_TYPES_BY_TAG.keys()):
    raise RuntimeError("A2UI component catalog drift detected.")


def supported_component_types() -> set[str]:
    return set(STANDARD_COMPONENT_CATALOG.keys())


def get_component_catalog() -> Dict[str, Any]:
    return {
        "catalogId": STANDARD_CATALOG_ID,
        "version": COMPONENT_CATALOG_VERSION,
        "components": deepcopy(STANDARD_COMPONENT_CATALOG),
    }
