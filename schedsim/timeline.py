from __future__ import annotations

from typing import Iterable, List

from .models import ExecutionSegment, TickEvent


def segments_from_ticks(ticks: Iterable[TickEvent]) -> List[ExecutionSegment]:
    """
    Coalesce per-tick events into segments.

    Two ticks join only if they belong to the same process and are adjacent
    in time; a process resumed after an idle gap or after another process
    starts a new segment.
    """
    return coalesce(ExecutionSegment(pid=t.pid, start=t.tick, end=t.tick + 1) for t in ticks)


def coalesce(segments: Iterable[ExecutionSegment]) -> List[ExecutionSegment]:
    """
    Merge neighbouring segments of the same process that touch in time.
    """
    merged: List[ExecutionSegment] = []

    for seg in sorted(segments, key=lambda s: s.start):
        if merged:
            prev = merged[-1]
            if prev.pid == seg.pid and prev.end == seg.start:
                merged[-1] = ExecutionSegment(pid=prev.pid, start=prev.start, end=seg.end)
                continue
        merged.append(seg)

    return merged


def with_idle_gaps(segments: Iterable[ExecutionSegment]) -> List[ExecutionSegment]:
    """
    Make CPU idle time explicit as segments with ``pid=None``, starting from
    time 0, so that widths in a rendered chart add up.
    """
    out: List[ExecutionSegment] = []
    last_end = 0

    for seg in segments:
        if seg.is_idle:
            continue
        if seg.start > last_end:
            out.append(ExecutionSegment(pid=None, start=last_end, end=seg.start))
        out.append(seg)
        last_end = max(last_end, seg.end)

    return out


def build_timeline(segments: Iterable[ExecutionSegment]) -> List[ExecutionSegment]:
    return with_idle_gaps(coalesce(segments))
