"""
Chat transcript: the ordered list of bubbles shown in the chat view.

A transcript is rebuilt from persisted session history and then kept up to
date by live server events. Every ``render_ui`` tool call becomes an ``a2ui``
entry hosting a surface from the shared ``SurfaceRegistry``; when several
entries name the same surface id, only the latest one is visible.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from codechat.a2ui.surface_registry import (
    RENDER_UI_TOOL_NAME,
    Surface,
    SurfaceRegistry,
    extract_render_ui_call,
)
from codechat.event.event_names import EventNames

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    THINKING = "thinking"
    TOOL = "tool"
    A2UI = "a2ui"
    ERROR = "error"


@dataclass
class TranscriptEntry:
    id: str
    kind: EntryKind
    text: str = ""
    tool_call_id: Optional[str] = None
    tool_name: Optional[str] = None
    arguments: Any = None
    status: str = "done"
    is_error: bool = False
    surface_id: Optional[str] = None
    visible: bool = True
    live: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "kind": self.kind.value}
        if self.text:
            payload["text"] = self.text
        if self.kind is EntryKind.TOOL:
            payload.update(
                {
                    "toolCallId": self.tool_call_id,
                    "toolName": self.tool_name,
                    "status": self.status,
                    "isError": self.is_error,
                }
            )
        if self.kind is EntryKind.A2UI:
            payload["surfaceId"] = self.surface_id
            payload["visible"] = self.visible
        return payload


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    chunks = []
    for part in content:
        if isinstance(part, Mapping) and part.get("type") == "text" and isinstance(part.get("text"), str):
            chunks.append(part["text"])
    return "\n".join(chunks)


class ChatTranscript:
    def __init__(self, registry: Optional[SurfaceRegistry] = None, *, tool_name: str = RENDER_UI_TOOL_NAME) -> None:
        self.registry = registry if registry is not None else SurfaceRegistry()
        self.tool_name = tool_name
        self.entries: List[TranscriptEntry] = []
        self._hosts: Dict[str, str] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, entry_id: str) -> Optional[TranscriptEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def host_of(self, surface_id: str) -> Optional[TranscriptEntry]:
        entry_id = self._hosts.get(surface_id)
        return self.get(entry_id) if entry_id is not None else None

    # ── history ──────────────────────────────────────────────────────

    def load_history(self, history: Iterable[Any]) -> List[TranscriptEntry]:
        """Replace the transcript with entries rebuilt from persisted messages."""
        self.entries = []
        self._hosts.clear()
        self.registry.clear()

        for index, message in enumerate(history or []):
            if not isinstance(message, Mapping):
                logger.debug("Skipping non-object history message[%d].", index)
                continue
            role = message.get("role")
            if role == "user":
                self._append(EntryKind.USER, text=_content_text(message.get("content")))
            elif role == "assistant":
                self._load_assistant(message)
            elif role == "toolResult":
                self._load_tool_result(message)
            else:
                logger.debug("Skipping history message[%d] with role %r.", index, role)
        return list(self.entries)

    def _load_assistant(self, message: Mapping[str, Any]) -> None:
        content = message.get("content")
        if isinstance(content, str):
            self._append(EntryKind.ASSISTANT, text=content)
            return
        for part in content if isinstance(content, list) else []:
            if not isinstance(part, Mapping):
                continue
            part_type = part.get("type")
            if part_type == "text":
                self._append(EntryKind.ASSISTANT, text=str(part.get("text") or ""))
            elif part_type == "thinking":
                self._append(EntryKind.THINKING, text=str(part.get("thinking") or ""))
            elif part_type == "toolCall":
                self._load_tool_call(part)
        error_message = message.get("errorMessage")
        if message.get("stopReason") == "error" and error_message:
            self._append(EntryKind.ERROR, text=str(error_message))

    def _load_tool_call(self, part: Mapping[str, Any]) -> None:
        tool_call_id = part.get("id")
        self._append(
            EntryKind.TOOL,
            tool_call_id=str(tool_call_id) if tool_call_id is not None else None,
            tool_name=str(part.get("name") or ""),
            arguments=part.get("arguments"),
            status="running",
        )
        occurrence = extract_render_ui_call(part, tool_name=self.tool_name)
        if occurrence is None:
            return
        self._host_surface(occurrence.surface_id, tool_call_id=occurrence.tool_call_id)
        self.registry.upsert(occurrence.surface_id, occurrence.messages, interactive=False)

    def _load_tool_result(self, message: Mapping[str, Any]) -> None:
        tool_call_id = message.get("toolCallId")
        for entry in reversed(self.entries):
            if entry.kind is EntryKind.TOOL and entry.tool_call_id == tool_call_id:
                entry.is_error = bool(message.get("isError"))
                entry.status = "error" if entry.is_error else "done"
                entry.text = _content_text(message.get("content"))
                return
        logger.debug("Tool result for unknown call %r.", tool_call_id)

    # ── live events ──────────────────────────────────────────────────

    def handle_server_event(self, event: Any) -> bool:
        """Apply one server event; returns False when the event is not ours or malformed."""
        if not isinstance(event, Mapping):
            return False
        event_type = event.get("type")

        if event_type == EventNames.A2UI_SURFACE_UPDATE:
            surface_id = event.get("surfaceId")
            messages = event.get("messages")
            if not isinstance(surface_id, str) or not surface_id or not isinstance(messages, list):
                logger.debug("Ignoring malformed %s event.", event_type)
                return False
            host = self.host_of(surface_id)
            if host is None or not host.live:
                host = self._host_surface(surface_id)
                host.live = True
            self.registry.upsert(surface_id, messages, interactive=True)
            return True

        if event_type == EventNames.A2UI_SURFACE_COMPLETE:
            surface_id = event.get("surfaceId")
            if not isinstance(surface_id, str):
                return False
            self.registry.freeze(surface_id)
            self._end_live(surface_id)
            return True

        if event_type == EventNames.AGENT_END:
            self.registry.freeze_all()
            for surface_id in list(self._hosts):
                self._end_live(surface_id)
            return True

        return False

    # ── eviction / queries ───────────────────────────────────────────

    def evict(self, entry_id: str) -> bool:
        entry = self.get(entry_id)
        if entry is None:
            return False
        self.entries.remove(entry)
        if entry.kind is EntryKind.A2UI and entry.surface_id is not None:
            if self._hosts.get(entry.surface_id) == entry.id:
                del self._hosts[entry.surface_id]
                self.registry.remove(entry.surface_id)
                logger.debug("Evicted surface '%s' with entry %s.", entry.surface_id, entry.id)
        return True

    def visible_surfaces(self) -> List[Surface]:
        surfaces: List[Surface] = []
        for entry in self.entries:
            if entry.kind is not EntryKind.A2UI or not entry.visible or entry.surface_id is None:
                continue
            surface = self.registry.get(entry.surface_id)
            if surface is not None:
                surfaces.append(surface)
        return surfaces

    def _append(self, kind: EntryKind, **fields: Any) -> TranscriptEntry:
        entry = TranscriptEntry(id=f"{kind.value}-{next(self._ids)}", kind=kind, **fields)
        self.entries.append(entry)
        return entry

    def _host_surface(self, surface_id: str, *, tool_call_id: Optional[str] = None) -> TranscriptEntry:
        previous = self.host_of(surface_id)
        if previous is not None:
            previous.visible = False
            previous.live = False
        entry = self._append(EntryKind.A2UI, surface_id=surface_id, tool_call_id=tool_call_id)
        self._hosts[surface_id] = entry.id
        return entry

    def _end_live(self, surface_id: str) -> None:
        host = self.host_of(surface_id)
        if host is not None:
            host.live = False
