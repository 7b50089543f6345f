from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionSegment

IDLE_LABEL = "idle"


def render_gantt(timeline: Sequence[ExecutionSegment]) -> str:
    """
    Plain-text Gantt chart. One character per time unit; idle time is drawn
    with dots.
    """
    if not timeline:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"

    for seg in timeline:
        width = max(1, seg.duration)
        if seg.is_idle:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += seg.pid[:width].ljust(width)
        time_marks += f"{seg.end:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(timeline: Sequence[ExecutionSegment]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not timeline:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    bars = Text()
    labels = Text()
    time_marks = "0"

    for seg in timeline:
        width = max(1, seg.duration)
        if seg.is_idle:
            bars.append(" " * width)
            labels.append(IDLE_LABEL[:width].ljust(width), style="dim")
        else:
            bars.append(" " * width, style=f"on {pid_color(seg.pid)}")
            labels.append(seg.pid[:width].ljust(width), style="bold")
        time_marks += f"{seg.end:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
