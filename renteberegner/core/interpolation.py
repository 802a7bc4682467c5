"""Timed interpolation for animated counters."""

from __future__ import annotations

from typing import Iterator


def ease_out_expo(progress: float) -> float:
    progress = min(max(progress, 0.0), 1.0)
    if progress == 1.0:
        return 1.0
    return 1 - 2 ** (-10 * progress)


def counter_value(
    target: float,
    elapsed: float,
    duration: float = 1.0,
    delay: float = 0.0,
    easing: bool = True,
) -> float:
    """Value an animated counter shows `elapsed` seconds after it started counting from 0."""
    running = elapsed - delay
    if running < 0:
        return 0.0
    if duration <= 0:
        return target
    progress = min(running / duration, 1.0)
    if easing:
        progress = ease_out_expo(progress)
    return progress * target


def counter_frames(
    target: float,
    duration: float = 1.0,
    fps: int = 60,
    easing: bool = True,
) -> Iterator[float]:
    """Displayed values frame by frame; the last frame is exactly `target`."""
    frame_count = max(int(round(duration * fps)), 1)
    for frame in range(1, frame_count + 1):
        elapsed = duration * frame / frame_count
        yield counter_value(target, elapsed, duration=duration, easing=easing)
