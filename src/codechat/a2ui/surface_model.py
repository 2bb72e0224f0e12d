from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Set

from pydantic import ValidationError

from .catalog import ComponentType, component_type_of
from .children import referenced_child_ids
from .data_model import ReactiveStore
from .protocol import SurfaceComponent, UpdateComponentsMessage, UpdateDataModelMessage

logger = logging.getLogger(__name__)

EXPLICIT_ROOT_ID = "root"


@dataclass(frozen=True)
class ComponentDefinition:
    id: str
    component: Any
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> Optional[ComponentType]:
        return component_type_of(self.component)

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)


@dataclass
class SurfaceState:
    components: Dict[str, ComponentDefinition]
    root_id: Optional[str]
    data_model: ReactiveStore


def _parse_component(raw: Any, *, index: int) -> Optional[ComponentDefinition]:
    try:
        parsed = SurfaceComponent.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Skipping malformed component at position %d: %s", index, exc)
        return None
    return ComponentDefinition(
        id=parsed.id,
        component=parsed.component,
        properties=deepcopy(parsed.properties()),
    )


def _apply_update_components(
    payload: Any,
    *,
    index: int,
    components: Dict[str, ComponentDefinition],
) -> Optional[str]:
    try:
        message = UpdateComponentsMessage.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Skipping malformed updateComponents at message[%d]: %s", index, exc)
        return None
    first_id: Optional[str] = None
    for position, raw in enumerate(message.components):
        definition = _parse_component(raw, index=position)
        if definition is None:
            continue
        components[definition.id] = definition
        if first_id is None:
            first_id = definition.id
    return first_id


def _apply_update_data_model(payload: Any, *, index: int, data_model: ReactiveStore) -> None:
    try:
        message = UpdateDataModelMessage.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Skipping malformed updateDataModel at message[%d]: %s", index, exc)
        return
    if not message.has_value:
        logger.debug("Skipping updateDataModel without value at message[%d].", index)
        return
    data_model.set(message.path, deepcopy(message.value))


def infer_root_id(
    components: Mapping[str, ComponentDefinition],
    fallback: Optional[str] = None,
) -> Optional[str]:
    """
    Pick the component to render first.

    An id of exactly ``"root"`` always wins. Otherwise the first component,
    in insertion order, that no other component names as a child. When every
    component is somebody's child, ``fallback`` (the first id seen) is used.
    """
    if EXPLICIT_ROOT_ID in components:
        return EXPLICIT_ROOT_ID
    child_ids: Set[str] = set()
    for definition in components.values():
        child_ids.update(referenced_child_ids(definition.properties))
    for component_id in components:
        if component_id not in child_ids:
            return component_id
    return fallback


def build_surface_state(messages: Iterable[Any]) -> SurfaceState:
    """Fold an ordered list of protocol messages into a fresh surface state."""
    components: Dict[str, ComponentDefinition] = {}
    data_model = ReactiveStore()
    first_seen: Optional[str] = None

    for index, raw in enumerate(messages or []):
        if not isinstance(raw, Mapping):
            logger.debug("Skipping non-object message[%d].", index)
            continue
        handled = False
        if raw.get("updateComponents") is not None:
            handled = True
            first_id = _apply_update_components(raw["updateComponents"], index=index, components=components)
            if first_seen is None:
                first_seen = first_id
        if raw.get("updateDataModel") is not None:
            handled = True
            _apply_update_data_model(raw["updateDataModel"], index=index, data_model=data_model)
        # createSurface/deleteSurface are surface lifecycle, owned by the registry.
        if not handled and raw.get("createSurface") is None and raw.get("deleteSurface") is None:
            logger.debug("Skipping message[%d] with no known message key.", index)

    return SurfaceState(
        components=components,
        root_id=infer_root_id(components, first_seen),
        data_model=data_model,
    )
