"""
EventNames: wire event types exchanged between the agent server and the chat client.

Usage:
    from codechat.event.event_names import EventNames

    broadcast({"type": EventNames.A2UI_SURFACE_UPDATE, "surfaceId": sid, "messages": messages})
"""


class EventNames:
    """Central registry of server-to-client event types."""

    # ═══════════════════════════════════════════════════════════════════
    # AGENT LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════
    AGENT_END = "agent_end"

    # ═══════════════════════════════════════════════════════════════════
    # A2UI SURFACES
    # ═══════════════════════════════════════════════════════════════════
    A2UI_SURFACE_UPDATE = "a2ui_surface_update"
    A2UI_SURFACE_COMPLETE = "a2ui_surface_complete"
