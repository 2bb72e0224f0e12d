from codechat.a2ui.surface_registry import SurfaceRegistry
from codechat.chat.transcript import ChatTranscript, EntryKind


def _messages(surface_id, text):
    return [
        {"createSurface": {"surfaceId": surface_id, "catalogId": "standard"}},
        {
            "updateComponents": {
                "surfaceId": surface_id,
                "components": [
                    {"id": "root", "component": "Column", "children": ["status"]},
                    {"id": "status", "component": "Text", "text": {"literalString": text}},
                ],
            }
        },
        {"updateDataModel": {"surfaceId": surface_id, "value": {}}},
    ]


def _render_call(call_id, surface_id, messages):
    return {
        "role": "assistant",
        "content": [
            {
                "type": "toolCall",
                "id": call_id,
                "name": "render_ui",
                "arguments": {"surface_id": surface_id, "messages": messages},
            }
        ],
    }


def _tool_result(call_id, text, is_error=False):
    return {
        "role": "toolResult",
        "toolCallId": call_id,
        "toolName": "render_ui",
        "content": [{"type": "text", "text": text}],
        "isError": is_error,
    }


def _status_text(surface):
    return surface.components["status"].get("text")["literalString"]


def test_load_history_builds_entries_in_order():
    transcript = ChatTranscript(SurfaceRegistry())
    transcript.load_history(
        [
            {"role": "user", "content": "Read the file"},
            {
                "role": "assistant",
                "content": [
                    {"type": "thinking", "thinking": "Let me look."},
                    {"type": "text", "text": "Reading it now."},
                    {"type": "toolCall", "id": "tc1", "name": "read", "arguments": {"path": "README.md"}},
                ],
            },
            _tool_result("tc1", "ENOENT", is_error=True),
            {"role": "system", "content": "ignored"},
        ]
    )

    kinds = [entry.kind for entry in transcript.entries]
    assert kinds == [EntryKind.USER, EntryKind.THINKING, EntryKind.ASSISTANT, EntryKind.TOOL]
    tool = transcript.entries[-1]
    assert tool.tool_name == "read"
    assert tool.status == "error"
    assert tool.text == "ENOENT"


def test_history_shows_only_latest_surface_per_id():
    registry = SurfaceRegistry()
    transcript = ChatTranscript(registry)
    transcript.load_history(
        [
            {"role": "user", "content": "Show status"},
            _render_call("tc1", "status", _messages("status", "Version 1")),
            _tool_result("tc1", "UI surface 'status' rendered successfully."),
            {"role": "user", "content": "Again"},
            _render_call("tc2", "status", _messages("status", "Version 2")),
            _tool_result("tc2", "UI surface 'status' rendered successfully."),
        ]
    )

    a2ui_entries = [entry for entry in transcript.entries if entry.kind is EntryKind.A2UI]
    assert [(entry.tool_call_id, entry.visible) for entry in a2ui_entries] == [("tc1", False), ("tc2", True)]

    surfaces = transcript.visible_surfaces()
    assert len(surfaces) == 1
    assert _status_text(surfaces[0]) == "Version 2"
    assert surfaces[0].interactive is False


def test_reloading_history_replaces_previous_state():
    transcript = ChatTranscript()
    transcript.load_history([_render_call("tc1", "a", _messages("a", "A"))])
    transcript.load_history([{"role": "user", "content": "fresh"}])

    assert len(transcript) == 1
    assert transcript.visible_surfaces() == []
    assert "a" not in transcript.registry


def test_live_update_is_interactive_until_completed():
    transcript = ChatTranscript()
    messages = _messages("demo", "Do Thing")

    assert transcript.handle_server_event({"type": "agent_start"}) is False
    assert transcript.handle_server_event(
        {"type": "a2ui_surface_update", "surfaceId": "demo", "messages": messages}
    ) is True

    surface = transcript.registry.get("demo")
    assert surface.interactive is True

    assert transcript.handle_server_event({"type": "a2ui_surface_complete", "surfaceId": "demo"}) is True
    assert transcript.registry.get("demo").interactive is False


def test_repeated_live_updates_share_one_entry():
    transcript = ChatTranscript()
    transcript.handle_server_event({"type": "a2ui_surface_update", "surfaceId": "demo", "messages": _messages("demo", "1")})
    transcript.handle_server_event({"type": "a2ui_surface_update", "surfaceId": "demo", "messages": _messages("demo", "2")})

    a2ui_entries = [entry for entry in transcript.entries if entry.kind is EntryKind.A2UI]
    assert len(a2ui_entries) == 1
    assert _status_text(transcript.visible_surfaces()[0]) == "2"
    assert transcript.registry.get("demo").revision == 2


def test_live_update_after_history_supersedes_old_entry():
    transcript = ChatTranscript()
    transcript.load_history([_render_call("tc1", "status", _messages("status", "old"))])

    transcript.handle_server_event(
        {"type": "a2ui_surface_update", "surfaceId": "status", "messages": _messages("status", "new")}
    )

    a2ui_entries = [entry for entry in transcript.entries if entry.kind is EntryKind.A2UI]
    assert [entry.visible for entry in a2ui_entries] == [False, True]
    surface = transcript.visible_surfaces()[0]
    assert _status_text(surface) == "new"
    assert surface.interactive is True


def test_agent_end_freezes_every_surface():
    transcript = ChatTranscript()
    for surface_id in ("a", "b"):
        transcript.handle_server_event(
            {"type": "a2ui_surface_update", "surfaceId": surface_id, "messages": _messages(surface_id, surface_id)}
        )

    assert transcript.handle_server_event({"type": "agent_end"}) is True
    assert [surface.interactive for surface in transcript.visible_surfaces()] == [False, False]


def test_malformed_events_are_ignored():
    transcript = ChatTranscript()
    assert transcript.handle_server_event("nope") is False
    assert transcript.handle_server_event({"type": "a2ui_surface_update", "surfaceId": "x"}) is False
    assert transcript.handle_server_event({"type": "a2ui_surface_update", "messages": []}) is False
    assert transcript.handle_server_event({"type": "a2ui_surface_complete"}) is False
    assert len(transcript) == 0


def test_evicting_visible_host_removes_surface():
    transcript = ChatTranscript()
    transcript.load_history(
        [
            _render_call("tc1", "status", _messages("status", "v1")),
            _render_call("tc2", "status", _messages("status", "v2")),
        ]
    )
    old, new = [entry for entry in transcript.entries if entry.kind is EntryKind.A2UI]

    assert transcript.evict(old.id) is True
    assert "status" in transcript.registry

    assert transcript.evict(new.id) is True
    assert "status" not in transcript.registry
    assert transcript.visible_surfaces() == []
    assert transcript.evict(new.id) is False
