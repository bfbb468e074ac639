"""Rule-based gate deciding which selection events start a pipeline run."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List

from .models import SelectionEvent

logger = logging.getLogger(__name__)

Trigger = Callable[[SelectionEvent], bool]


class TriggerEngine:
    """Evaluates selection events against a rule set; every rule must pass."""

    def __init__(self, rules: Iterable[Trigger]) -> None:
        self.rules = list(rules)

    def qualifies(self, event: SelectionEvent) -> bool:
        for rule in self.rules:
            if not rule(event):
                logger.debug("Selection in %s rejected by %s", event.file_name, getattr(rule, "__name__", rule))
                return False
        return True


def non_blank_selection_rule(event: SelectionEvent) -> bool:
    return bool(event.selected_text.strip())


def positive_line_rule(event: SelectionEvent) -> bool:
    return event.line_number >= 1


DEFAULT_RULES: List[Trigger] = [
    non_blank_selection_rule,
    positive_line_rule,
]
