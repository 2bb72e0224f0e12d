from .render_ui import TOOL_NAME, RenderUIParams, RenderUITool, TurnState

__all__ = ["TOOL_NAME", "RenderUIParams", "RenderUITool", "TurnState"]
