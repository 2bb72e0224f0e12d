"""
render_ui: the agent-side tool that pushes A2UI surfaces to connected chat clients.

The tool never renders anything itself. It records the surface id for the
current turn and broadcasts the raw message list; clients build and render
the surface. When the turn ends, ``TurnState.complete`` tells clients that
every surface touched during the turn is now read-only.
"""

from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codechat.a2ui.catalog import supported_component_types
from codechat.a2ui.surface_registry import RENDER_UI_TOOL_NAME
from codechat.event.event_names import EventNames

logger = logging.getLogger(__name__)

TOOL_NAME = RENDER_UI_TOOL_NAME

BroadcastFn = Callable[[Dict[str, Any]], Any]

_USAGE = """Render an interactive UI surface in the user's browser using A2UI v0.9 format. Use it for structured data displays, forms, selection UIs, dashboards and approval workflows, whenever a visual layout communicates better than plain text.

The surface appears inline in the chat. Users can interact with buttons and forms; their actions arrive as follow-up messages.

A2UI v0.9 message types:
- createSurface: { surfaceId, catalogId: "standard" }
- updateComponents: { surfaceId, components: [{ id, component, ...properties }] }
  Components reference children by ID (flat adjacency list, not nested).
- updateDataModel: { surfaceId, path?, value }
  Components bind to data via JSON Pointer paths (e.g. "/items/0/name").
- deleteSurface: { surfaceId }
"""

_EXAMPLES = """Component example (a card with title and action button):
messages: [
  { "createSurface": { "surfaceId": "demo", "catalogId": "standard" } },
  { "updateComponents": { "surfaceId": "demo", "components": [
    { "id": "root", "component": "Column", "children": ["title", "actions"] },
    { "id": "title", "component": "Text", "text": { "literalString": "Review Changes" }, "usageHint": "h2" },
    { "id": "actions", "component": "Row", "children": ["approve-btn", "reject-btn"] },
    { "id": "approve-btn", "component": "Button", "child": "approve-text", "action": { "event": { "name": "approve", "context": {} } } },
    { "id": "approve-text", "component": "Text", "text": { "literalString": "Approve" } },
    { "id": "reject-btn", "component": "Button", "child": "reject-text", "action": { "event": { "name": "reject", "context": {} } } },
    { "id": "reject-text", "component": "Text", "text": { "literalString": "Reject" } }
  ] } },
  { "updateDataModel": { "surfaceId": "demo", "value": {} } }
]

Data binding example:
{ "id": "name-text", "component": "Text", "text": { "path": "/name" } }
With updateDataModel: { "surfaceId": "s", "path": "/name", "value": "Alice" }

Keep using plain text/markdown for explanations. Use render_ui when visual structure adds value."""

TOOL_DESCRIPTION = "\n".join(
    [
        _USAGE,
        "Standard catalog components: " + ", ".join(sorted(supported_component_types())) + ".",
        "",
        _EXAMPLES,
    ]
)

PARAMETERS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "surface_id": {
            "type": "string",
            "description": "Unique identifier for this UI surface (e.g. 'test-results', 'file-picker')",
        },
        "messages": {
            "type": "array",
            "items": {"type": "object"},
            "description": (
                "Array of A2UI v0.9 messages. Each message is an object with exactly one key: "
                "createSurface, updateComponents, updateDataModel, or deleteSurface."
            ),
        },
    },
    "required": ["surface_id", "messages"],
}


class RenderUIParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    surface_id: str = Field(min_length=1)
    messages: List[Dict[str, Any]]


@dataclass
class TurnState:
    """Surface ids rendered during the current agent turn."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    active_surface_ids: Set[str] = field(default_factory=set)

    def add(self, surface_id: str) -> None:
        with self.lock:
            self.active_surface_ids.add(surface_id)

    def drain(self) -> List[str]:
        with self.lock:
            surface_ids = sorted(self.active_surface_ids)
            self.active_surface_ids.clear()
        return surface_ids

    async def complete(self, broadcast: BroadcastFn) -> List[str]:
        """Broadcast one completion event per active surface, then reset the turn."""
        surface_ids = self.drain()
        for surface_id in surface_ids:
            await _emit(
                broadcast,
                {"type": EventNames.A2UI_SURFACE_COMPLETE, "surfaceId": surface_id},
            )
        if surface_ids:
            logger.debug("Completed %d surface(s) for the turn.", len(surface_ids))
        return surface_ids


async def _emit(broadcast: BroadcastFn, event: Dict[str, Any]) -> None:
    result = broadcast(event)
    if inspect.isawaitable(result):
        await result


def _text_result(text: str, *, is_error: bool = False) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


class RenderUITool:
    name = TOOL_NAME
    description = TOOL_DESCRIPTION
    parameters = PARAMETERS_SCHEMA

    def __init__(self, broadcast: BroadcastFn, turn_state: TurnState) -> None:
        self.broadcast = broadcast
        self.turn_state = turn_state

    def to_openai_schema(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    async def execute(self, tool_call_id: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            parsed = RenderUIParams.model_validate(params)
        except ValidationError as exc:
            logger.warning("render_ui call %s rejected: %s", tool_call_id, exc)
            return _text_result(f"Invalid render_ui arguments: {exc}", is_error=True)

        self.turn_state.add(parsed.surface_id)
        await _emit(
            self.broadcast,
            {
                "type": EventNames.A2UI_SURFACE_UPDATE,
                "surfaceId": parsed.surface_id,
                "messages": parsed.messages,
            },
        )
        logger.info("render_ui call %s broadcast surface '%s'.", tool_call_id, parsed.surface_id)
        return _text_result(f"UI surface '{parsed.surface_id}' rendered successfully.")
