from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Set, Union

from pydantic import ValidationError

from .bindings import ROOT_PATH, resolve_value
from .data_model import ReactiveStore
from .protocol import A2UIAction, OutboundAction

logger = logging.getLogger(__name__)

Transport = Callable[[Dict[str, Any]], Any]


def resolve_action(
    action: Any,
    store: ReactiveStore,
    base_path: Optional[str] = ROOT_PATH,
) -> Any:
    """
    Resolve bound values in an action's event context to plain scalars.

    ``functionCall`` actions and malformed shapes pass through untouched;
    validation happens in ``ActionBridge.dispatch``.
    """
    if not isinstance(action, Mapping):
        return action
    event = action.get("event")
    if not isinstance(event, Mapping):
        return dict(action)
    context = event.get("context")
    resolved_context: Dict[str, Any] = {}
    if isinstance(context, Mapping):
        for key, cell in context.items():
            resolved_context[str(key)] = resolve_value(cell, store, base_path)
    resolved = dict(action)
    resolved["event"] = {**event, "context": resolved_context}
    return resolved


class ActionBridge:
    """
    Forward component actions to the transport, tagged with their surface id.

    Dispatch is fire-and-forget: the transport result is never awaited here.
    A coroutine returned by an async transport is scheduled on the running loop.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._pending: Set["asyncio.Future[Any]"] = set()

    def dispatch(self, surface_id: str, action: Union[A2UIAction, Mapping[str, Any]]) -> bool:
        try:
            parsed = action if isinstance(action, A2UIAction) else A2UIAction.model_validate(action)
            outbound = OutboundAction(surfaceId=surface_id, action=parsed)
        except ValidationError as exc:
            logger.warning("Dropping malformed action for surface '%s': %s", surface_id, exc)
            return False

        payload = outbound.to_wire()
        try:
            result = self._transport(payload)
        except Exception as exc:
            logger.warning("Action transport failed for surface '%s': %s", surface_id, exc)
            return False
        if inspect.isawaitable(result):
            self._schedule(result, surface_id=surface_id)
        logger.debug("Dispatched action for surface '%s'.", surface_id)
        return True

    def bind(self, surface_id: str) -> Callable[[Any], bool]:
        def _dispatch(action: Any) -> bool:
            return self.dispatch(surface_id, action)

        return _dispatch

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _schedule(self, awaitable: Any, *, surface_id: str) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Action for surface '%s' dropped: no running event loop.", surface_id)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        future = asyncio.ensure_future(awaitable)
        self._pending.add(future)
        future.add_done_callback(self._on_done)

    def _on_done(self, future: "asyncio.Future[Any]") -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("Action transport failed: %s", exc)
