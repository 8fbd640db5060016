from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from src.editor.frame_store import Animation, AnimationSet, Frame


@dataclass
class PlaybackState:
    animation_name: str
    active: bool = True
    frame_index: int = 0
    accumulated_time_ms: float = 0.0
    last_timestamp_ms: float = 0.0


class PlaybackStepper:
    """Fixed-interval frame stepper, independent of how often it is ticked.

    The stepper only reads the animation set. Time comes in from the caller as
    millisecond timestamps, which keeps it deterministic under test.
    """

    def __init__(self, animations: AnimationSet) -> None:
        self.animations = animations
        self.state: PlaybackState | None = None

    @property
    def is_active(self) -> bool:
        return self.state is not None and self.state.active

    @property
    def frame_index(self) -> int:
        return self.state.frame_index if self.state else 0

    def _animation(self) -> Animation | None:
        if self.state is None:
            return None
        return self.animations.get(self.state.animation_name)

    def start(self, animation_name: str, now_ms: float) -> bool:
        animation = self.animations.get(animation_name)
        if animation is None or not animation.frames:
            return False
        self.state = PlaybackState(animation_name=animation_name, last_timestamp_ms=float(now_ms))
        return True

    def advance(self, now_ms: float) -> int:
        state = self.state
        if state is None or not state.active:
            return self.frame_index
        animation = self._animation()
        if animation is None or not animation.frames:
            return state.frame_index

        frame_count = len(animation.frames)
        dt = max(0.0, float(now_ms) - state.last_timestamp_ms)
        state.last_timestamp_ms = float(now_ms)
        state.accumulated_time_ms += dt
        state.frame_index %= frame_count
        interval = animation.interval_ms
        while state.accumulated_time_ms >= interval:
            state.frame_index = (state.frame_index + 1) % frame_count
            state.accumulated_time_ms -= interval
        return state.frame_index

    def stop(self) -> None:
        if self.state is not None:
            self.state.active = False
        self.state = None

    def current_frame(self) -> Frame | None:
        animation = self._animation()
        if animation is None or not animation.frames:
            return None
        return animation.frames[self.state.frame_index % len(animation.frames)]

    def frame_indices(self, timestamps: Iterable[float]) -> Iterator[int]:
        """Lazily advance through ``timestamps``, yielding the index after each."""
        for now_ms in timestamps:
            if not self.is_active:
                return
            yield self.advance(now_ms)


class PlaybackDriver:
    """Timer-callback contract around a stepper.

    ``tick`` is what a recurring scheduler calls; it returns False once
    playback has stopped so the scheduler does not reschedule.
    """

    def __init__(self, stepper: PlaybackStepper, on_frame: Callable[[int], None] | None = None) -> None:
        self.stepper = stepper
        self.on_frame = on_frame
        self._last_index: int | None = None

    def tick(self, now_ms: float) -> bool:
        if not self.stepper.is_active:
            self._last_index = None
            return False
        index = self.stepper.advance(now_ms)
        if self.on_frame is not None and index != self._last_index:
            self.on_frame(index)
        self._last_index = index
        return True


def preview_offset(frame: Frame, pivot: tuple[float, float], scale: float = 1.0) -> tuple[float, float]:
    """Top-left draw position that puts the frame's anchor on ``pivot``."""
    return pivot[0] - frame.anchor.x * scale, pivot[1] - frame.anchor.y * scale
