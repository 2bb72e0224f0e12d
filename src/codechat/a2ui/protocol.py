from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

A2UI_PROTOCOL_VERSION = "v0.9"

MESSAGE_KINDS = (
    "createSurface",
    "updateComponents",
    "updateDataModel",
    "deleteSurface",
)


class SurfaceComponent(BaseModel):
    """
    One ``updateComponents`` entry.

    Shape:
    {
      "id": "...",
      "component": "Button",
      ...component props...
    }
    """

    # Component props (text, children, action, ...) sit next to id/component.
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    # Non-string tags (e.g. {"Card": {...}}) are kept; they render as nothing.
    component: Any = ""

    def properties(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class CreateSurfaceMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    surfaceId: Optional[str] = None
    catalogId: Optional[str] = None
    theme: Optional[Any] = None


class UpdateComponentsMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    surfaceId: Optional[str] = None
    # Entries are validated one by one so a bad entry does not drop its siblings.
    components: List[Any] = Field(default_factory=list)


class UpdateDataModelMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    surfaceId: Optional[str] = None
    path: Optional[str] = None
    value: Any = None

    @property
    def has_value(self) -> bool:
        return "value" in self.model_fields_set


class DeleteSurfaceMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    surfaceId: Optional[str] = None


class EventAction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    context: Dict[str, Any] = Field(default_factory=dict)


class FunctionCallAction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    call: str = Field(min_length=1)
    args: Dict[str, Any] = Field(default_factory=dict)


class A2UIAction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event: Optional[EventAction] = None
    functionCall: Optional[FunctionCallAction] = None

    @model_validator(mode="after")
    def _validate_exactly_one_variant(self) -> "A2UIAction":
        active = [self.event is not None, self.functionCall is not None]
        if sum(1 for item in active if item) != 1:
            raise ValueError("A2UI action requires exactly one of 'event' or 'functionCall'")
        return self

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class OutboundAction(BaseModel):
    model_config = ConfigDict(extra="forbid")

    surfaceId: str = Field(min_length=1)
    action: A2UIAction

    def to_wire(self) -> Dict[str, Any]:
        return {"surfaceId": self.surfaceId, "action": self.action.to_wire()}


def message_kind(raw: Any) -> Optional[str]:
    """Return the first populated message key of a raw protocol message."""
    if not isinstance(raw, Mapping):
        return None
    for kind in MESSAGE_KINDS:
        if raw.get(kind) is not None:
            return kind
    return None

