"""End-to-end orchestration between the host editor, the pipeline and the panel."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping

from .config import PipelineConfig
from .display import DisplayBridge, parse_inbound
from .models import ContextMap, LinkNavigated, MetricLogged, SelectionEvent
from .reporting import MTTC_LABEL, activity_report
from .state_machine import ContextBridgeStateMachine
from .triggers import DEFAULT_RULES, TriggerEngine
from .utils import timestamp_ms

logger = logging.getLogger(__name__)


class ContextBridge:
    """Coordinates the modules required to surface context for a selection."""

    def __init__(
        self,
        *,
        state_machine: ContextBridgeStateMachine | None = None,
        trigger_engine: TriggerEngine | None = None,
        display: DisplayBridge | None = None,
        config: PipelineConfig | None = None,
        clock: Callable[[], int] = timestamp_ms,
    ) -> None:
        self.config = config or PipelineConfig()
        self.state_machine = state_machine or ContextBridgeStateMachine(config=self.config, clock=clock)
        self.trigger_engine = trigger_engine or TriggerEngine(DEFAULT_RULES)
        self.display = display or DisplayBridge()
        self._clock = clock
        self.context_maps: List[ContextMap] = []
        self.metrics: List[MetricLogged] = []
        self.navigations: List[LinkNavigated] = []

    def on_selection(self, event: SelectionEvent) -> ContextMap | None:
        """Process a qualifying selection and push the result to the panel."""

        if not self.trigger_engine.qualifies(event):
            return None
        started_at = self._clock()
        self.display.show_loading()
        context_map = self.state_machine.process_selection(
            event.selected_text,
            event.file_name,
            event.file_language,
            event.line_number,
        )
        self.display.show_context(context_map)
        self.context_maps.append(context_map)
        mttc = self._clock() - started_at
        self.metrics.append(MetricLogged(label=MTTC_LABEL, value=float(mttc)))
        logger.info("[MTTC Metric] %dms (Target: <%dms)", mttc, self.config.mttc_target_ms)
        return context_map

    def on_display_message(self, message: Mapping[str, Any]) -> None:
        event = parse_inbound(message)
        if isinstance(event, LinkNavigated):
            self.navigations.append(event)
            logger.info("User opened nugget %s (%s): %s", event.nugget_id, event.source, event.url)
        elif isinstance(event, MetricLogged):
            self.metrics.append(event)
            logger.info("[Metric] %s: %s", event.label, event.value)

    def clear(self) -> None:
        self.state_machine.clear_session_cache()
        self.display.clear()

    def report_text(self) -> str:
        return activity_report(
            self.context_maps,
            self.metrics,
            self.navigations,
            mttc_target_ms=self.config.mttc_target_ms,
        ).render_text()

