"""Messaging between the pipeline and the panel that renders context nuggets."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Union

from .models import ContextMap, LinkNavigated, MetricLogged

logger = logging.getLogger(__name__)

DisplayChannel = Callable[[Dict[str, Any]], None]
InboundEvent = Union[LinkNavigated, MetricLogged]

LOADING = "loading"
UPDATE_CONTEXT = "update-context"
CLEAR = "clear"
NAVIGATE_LINK = "navigate-link"
LOG_METRIC = "log-metric"


class DisplayBridge:
    """Posts one-way messages to the display surface.

    The channel is fire-and-forget; a failing channel is logged and the message
    dropped so the pipeline is never interrupted by the panel.
    """

    def __init__(self, channel: DisplayChannel | None = None) -> None:
        self.channel = channel

    def show_loading(self) -> None:
        self._post({"type": LOADING})

    def show_context(self, context_map: ContextMap) -> None:
        self._post({"type": UPDATE_CONTEXT, "payload": context_map.to_payload()})

    def clear(self) -> None:
        self._post({"type": CLEAR})

    def _post(self, message: Dict[str, Any]) -> None:
        if self.channel is None:
            logger.debug("No display channel attached; dropping %s message", message["type"])
            return
        try:
            self.channel(message)
        except Exception as exc:  # runtime safeguard
            logger.warning("Display channel rejected %s message: %s", message["type"], exc)


def parse_inbound(message: Mapping[str, Any]) -> InboundEvent | None:
    """Turn a message sent back by the panel into an event.

    Unknown message types and malformed payloads yield ``None``.
    """

    message_type = message.get("type") if isinstance(message, Mapping) else None
    payload = message.get("payload") if isinstance(message, Mapping) else None
    if not isinstance(payload, Mapping):
        payload = {}
    try:
        if message_type == NAVIGATE_LINK:
            return LinkNavigated(
                nugget_id=str(payload["nuggetId"]),
                source=str(payload.get("source", "")),
                url=str(payload["url"]),
                timestamp=int(payload.get("timestamp", 0)),
            )
        if message_type == LOG_METRIC:
            return MetricLogged(label=str(payload["label"]), value=float(payload["value"]))
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed %s message: %s", message_type, exc)
        return None
    logger.debug("Ignoring unknown display message type %r", message_type)
    return None


def render_text(context_map: ContextMap) -> str:
    """Plain-text rendering of a context map for terminals and logs."""

    metadata = context_map.metadata
    lines: List[str] = [
        f"[{context_map.session_id}] {metadata.file_name}:{metadata.line_number} ({metadata.file_language})",
    ]
    if not context_map.nuggets:
        lines.append("  nuggets: (none)")
        return "\n".join(lines)
    for position, nugget in enumerate(context_map.nuggets, start=1):
        lines.append(f"  {position}. {nugget.source.value} - {nugget.title or 'Context'}")
        if nugget.content:
            lines.append(f"     {nugget.content}")
        if nugget.keywords:
            lines.append("     " + " ".join(f"#{keyword}" for keyword in nugget.keywords[:3]))
        if nugget.url:
            lines.append(f"     {nugget.url}")
    return "\n".join(lines)
