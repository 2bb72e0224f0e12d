"""
A2UI: render agent-authored declarative UI surfaces inside the chat transcript.
"""

from .catalog import ComponentType, component_type_of, get_component_catalog, supported_component_types
from .protocol import A2UIAction, OutboundAction, message_kind
from .data_model import ReactiveStore
from .bindings import resolve_boolean, resolve_number, resolve_path, resolve_string, resolve_value, write_binding
from .children import ChildRef, resolve_children
from .surface_model import ComponentDefinition, SurfaceState, build_surface_state
from .surface_registry import Surface, SurfaceOccurrence, SurfaceRegistry
from .action_bridge import ActionBridge, resolve_action
from .renderer import RenderNode, SurfaceRenderer, render_surface

__all__ = [
    "A2UIAction",
    "ActionBridge",
    "ChildRef",
    "ComponentDefinition",
    "ComponentType",
    "OutboundAction",
    "ReactiveStore",
    "RenderNode",
    "Surface",
    "SurfaceOccurrence",
    "SurfaceRegistry",
    "SurfaceRenderer",
    "SurfaceState",
    "build_surface_state",
    "component_type_of",
    "get_component_catalog",
    "message_kind",
    "render_surface",
    "resolve_action",
    "resolve_boolean",
    "resolve_children",
    "resolve_number",
    "resolve_path",
    "resolve_string",
    "resolve_value",
    "supported_component_types",
    "write_binding",
]
