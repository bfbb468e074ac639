"""Reporting utilities for Context Bridge activity."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List

from .models import ContextMap, LinkNavigated, MetricLogged

MTTC_LABEL = "mttc_ms"


@dataclass(slots=True)
class Report:
    title: str
    summary_lines: List[str]

    def render_text(self) -> str:
        return "\n".join([self.title, "-" * len(self.title), *self.summary_lines])


def activity_report(
    context_maps: Iterable[ContextMap],
    metrics: Iterable[MetricLogged],
    navigations: Iterable[LinkNavigated],
    *,
    mttc_target_ms: int = 30_000,
) -> Report:
    title = "Context Bridge Activity"
    runs = list(context_maps)
    if not runs:
        return Report(title=title, summary_lines=["No activity recorded."])
    with_results = [run for run in runs if run.nuggets]
    hit_rate = len(with_results) / len(runs)
    mttc_samples = [metric.value for metric in metrics if metric.label == MTTC_LABEL]
    lines = [
        f"Total runs: {len(runs)}",
        f"Runs with context: {len(with_results)} ({hit_rate:.0%})",
        f"Nuggets shown: {sum(len(run.nuggets) for run in runs)}",
    ]
    if mttc_samples:
        mean_mttc = sum(mttc_samples) / len(mttc_samples)
        over_target = sum(1 for sample in mttc_samples if sample > mttc_target_ms)
        lines.append(f"Mean time to context: {mean_mttc:.0f}ms (target <{mttc_target_ms}ms)")
        lines.append(f"Runs over target: {over_target}")
    breakdown = Counter(navigation.source for navigation in navigations)
    if breakdown:
        lines.append(f"Links opened: {sum(breakdown.values())}")
        for source, count in breakdown.most_common():
            lines.append(f"- {source}: {count}")
    return Report(title=title, summary_lines=lines)
