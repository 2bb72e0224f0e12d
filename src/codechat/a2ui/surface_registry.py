from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from .catalog import STANDARD_CATALOG_ID
from .data_model import ReactiveStore
from .protocol import CreateSurfaceMessage, DeleteSurfaceMessage, message_kind
from .surface_model import ComponentDefinition, build_surface_state

logger = logging.getLogger(__name__)

RENDER_UI_TOOL_NAME = "render_ui"


@dataclass
class Surface:
    surface_id: str
    components: Dict[str, ComponentDefinition]
    root_id: Optional[str]
    data_model: ReactiveStore
    interactive: bool
    revision: int
    messages: Sequence[Any]
    revision_token: Any = None
    catalog_id: str = STANDARD_CATALOG_ID
    updated_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "surface_id": self.surface_id,
            "root_id": self.root_id,
            "interactive": self.interactive,
            "revision": self.revision,
            "catalog_id": self.catalog_id,
            "component_count": len(self.components),
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class SurfaceOccurrence:
    tool_call_id: Optional[str]
    surface_id: str
    messages: Sequence[Any]
    superseded: bool = False


def _deleted_from(surface_id: str, messages: Sequence[Any]) -> Optional[int]:
    """Index of the last deleteSurface aimed at ``surface_id``, if any."""
    last: Optional[int] = None
    for index, raw in enumerate(messages):
        if message_kind(raw) != "deleteSurface":
            continue
        try:
            message = DeleteSurfaceMessage.model_validate(raw["deleteSurface"])
        except ValidationError as exc:
            logger.debug("Skipping malformed deleteSurface at message[%d]: %s", index, exc)
            continue
        target = (message.surfaceId or "").strip()
        if not target or target == surface_id:
            last = index
    return last


def _catalog_id(messages: Sequence[Any], default: str) -> str:
    """catalogId of the last valid createSurface, else ``default``."""
    catalog_id = default
    for raw in messages:
        if message_kind(raw) != "createSurface":
            continue
        try:
            message = CreateSurfaceMessage.model_validate(raw["createSurface"])
        except ValidationError:
            continue
        if message.catalogId and message.catalogId.strip():
            catalog_id = message.catalogId.strip()
    return catalog_id


def _parse_arguments(arguments: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(arguments, Mapping):
        return arguments
    if isinstance(arguments, str) and arguments.strip():
        try:
            decoded = json.loads(arguments)
        except ValueError:
            return None
        if isinstance(decoded, Mapping):
            return decoded
    return None


def extract_render_ui_call(
    part: Any,
    *,
    tool_name: str = RENDER_UI_TOOL_NAME,
) -> Optional[SurfaceOccurrence]:
    """Read a ``render_ui`` tool call content part into an occurrence."""
    if not isinstance(part, Mapping) or part.get("type") != "toolCall":
        return None
    if part.get("name") != tool_name:
        return None
    arguments = _parse_arguments(part.get("arguments"))
    if arguments is None:
        return None
    surface_id = str(arguments.get("surface_id") or "").strip()
    messages = arguments.get("messages")
    if not surface_id or not isinstance(messages, list):
        return None
    tool_call_id = part.get("id")
    return SurfaceOccurrence(
        tool_call_id=str(tool_call_id) if tool_call_id is not None else None,
        surface_id=surface_id,
        messages=messages,
    )


def iter_render_ui_calls(
    history: Iterable[Any],
    *,
    tool_name: str = RENDER_UI_TOOL_NAME,
) -> Iterator[SurfaceOccurrence]:
    for message in history or []:
        if not isinstance(message, Mapping) or message.get("role") != "assistant":
            continue
        content = message.get("content")
        if not isinstance(content, list):
            continue
        for part in content:
            occurrence = extract_render_ui_call(part, tool_name=tool_name)
            if occurrence is not None:
                yield occurrence


class SurfaceRegistry:
    """
    Owns one Surface per surface id for the lifetime of a conversation.

    A surface is rebuilt from scratch whenever its message list changes
    (identity, or the explicit revision token when one is given).
    """

    def __init__(self, default_catalog_id: str = STANDARD_CATALOG_ID) -> None:
        self.default_catalog_id = default_catalog_id
        self._surfaces: Dict[str, Surface] = {}

    def __contains__(self, surface_id: object) -> bool:
        return surface_id in self._surfaces

    def __len__(self) -> int:
        return len(self._surfaces)

    def get(self, surface_id: str) -> Optional[Surface]:
        return self._surfaces.get(surface_id)

    def surface_ids(self) -> List[str]:
        return list(self._surfaces)

    def upsert(
        self,
        surface_id: str,
        messages: Sequence[Any],
        interactive: bool = True,
        *,
        revision: Any = None,
    ) -> Optional[Surface]:
        cached = self._surfaces.get(surface_id)
        if cached is not None and self._is_current(cached, messages, revision):
            if cached.interactive != interactive:
                cached.interactive = interactive
                cached.updated_at = time.time()
            return cached

        messages = list(messages or []) if not isinstance(messages, Sequence) else messages
        deleted_at = _deleted_from(surface_id, messages)
        effective = messages
        if deleted_at is not None:
            effective = messages[deleted_at + 1:]
            if not any(message_kind(raw) is not None for raw in effective):
                logger.debug("Surface '%s' deleted by its own message list.", surface_id)
                self.remove(surface_id)
                return None

        state = build_surface_state(effective)
        surface = Surface(
            surface_id=surface_id,
            components=state.components,
            root_id=state.root_id,
            data_model=state.data_model,
            interactive=bool(interactive),
            revision=(cached.revision + 1) if cached is not None else 1,
            messages=messages,
            revision_token=revision,
            catalog_id=_catalog_id(effective, self.default_catalog_id),
        )
        self._surfaces[surface_id] = surface
        logger.debug(
            "Built surface '%s' revision %d (%d components, root=%s).",
            surface_id,
            surface.revision,
            len(surface.components),
            surface.root_id,
        )
        return surface

    def freeze(self, surface_id: str) -> bool:
        surface = self._surfaces.get(surface_id)
        if surface is None:
            return False
        surface.interactive = False
        surface.updated_at = time.time()
        return True

    def freeze_all(self) -> None:
        for surface_id in list(self._surfaces):
            self.freeze(surface_id)

    def remove(self, surface_id: str) -> bool:
        return self._surfaces.pop(surface_id, None) is not None

    def clear(self) -> None:
        self._surfaces.clear()

    def reconstruct_from_history(
        self,
        history: Iterable[Any],
        *,
        tool_name: str = RENDER_UI_TOOL_NAME,
    ) -> List[SurfaceOccurrence]:
        """
        Replay persisted ``render_ui`` calls, oldest first, as frozen surfaces.

        Later calls for the same surface id replace earlier ones; the returned
        occurrences mark the replaced ones as superseded.
        """
        occurrences = list(iter_render_ui_calls(history, tool_name=tool_name))
        for occurrence in occurrences:
            self.upsert(occurrence.surface_id, occurrence.messages, interactive=False)
        latest: Dict[str, int] = {}
        for index, occurrence in enumerate(occurrences):
            latest[occurrence.surface_id] = index
        return [
            SurfaceOccurrence(
                tool_call_id=occurrence.tool_call_id,
                surface_id=occurrence.surface_id,
                messages=occurrence.messages,
                superseded=latest[occurrence.surface_id] != index,
            )
            for index, occurrence in enumerate(occurrences)
        ]

    @staticmethod
    def _is_current(cached: Surface, messages: Sequence[Any], revision: Any) -> bool:
        if revision is not None:
            return revision == cached.revision_token
        return cached.messages is messages
