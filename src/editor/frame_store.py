from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator

from src.core import config

CORNER_ORDER = ("nw", "ne", "sw", "se")


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(parsed):
        return default
    return parsed


def _as_fps(value: Any, default: int = config.DEFAULT_FPS) -> int:
    if isinstance(value, bool):
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if parsed <= 0:
        return default
    return parsed


def _clamp_size(value: Any) -> float:
    return max(config.MIN_FRAME_SIZE, _as_float(value, config.MIN_FRAME_SIZE))


@dataclass
class Anchor:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class FrameSnapshot:
    """Immutable copy of a frame taken when a drag or resize gesture starts."""

    x: float
    y: float
    w: float
    h: float
    anchor_x: float
    anchor_y: float


@dataclass
class Frame:
    """A rectangle on the sprite sheet plus a pivot relative to its top-left.

    Width and height never drop below ``config.MIN_FRAME_SIZE``: every
    assignment is clamped, so resize code can write raw deltas through.
    """

    x: float = 0.0
    y: float = 0.0
    w: float = config.MIN_FRAME_SIZE
    h: float = config.MIN_FRAME_SIZE
    anchor: Anchor = field(default_factory=Anchor)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("w", "h"):
            value = _clamp_size(value)
        elif name in ("x", "y"):
            value = _as_float(value)
        super().__setattr__(name, value)

    @classmethod
    def with_default_anchor(cls, x: float, y: float, w: float, h: float) -> "Frame":
        frame = cls(x=x, y=y, w=w, h=h)
        frame.anchor = Anchor(frame.w / 2, frame.h)
        return frame

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Frame":
        payload = payload if isinstance(payload, dict) else {}
        frame = cls(
            x=payload.get("x"),
            y=payload.get("y"),
            w=payload.get("w"),
            h=payload.get("h"),
        )
        anchor_payload = payload.get("anchor")
        if isinstance(anchor_payload, dict):
            frame.anchor = Anchor(_as_float(anchor_payload.get("x")), _as_float(anchor_payload.get("y")))
        else:
            frame.anchor = Anchor(frame.w / 2, frame.h)
        return frame

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "anchor": self.anchor.to_dict(),
        }

    def clone(self) -> "Frame":
        return Frame(x=self.x, y=self.y, w=self.w, h=self.h, anchor=Anchor(self.anchor.x, self.anchor.y))

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(self.x, self.y, self.w, self.h, self.anchor.x, self.anchor.y)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h

    def corners(self) -> list[tuple[str, float, float]]:
        right = self.x + self.w
        bottom = self.y + self.h
        positions = {
            "nw": (self.x, self.y),
            "ne": (right, self.y),
            "sw": (self.x, bottom),
            "se": (right, bottom),
        }
        return [(name, *positions[name]) for name in CORNER_ORDER]

    def anchor_point(self) -> tuple[float, float]:
        """Anchor in image space."""
        return self.x + self.anchor.x, self.y + self.anchor.y


@dataclass
class Animation:
    fps: int = config.DEFAULT_FPS
    frames: list[Frame] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        # Playback divides by fps; zero or negative rates fall back to the default.
        if name == "fps":
            value = _as_fps(value)
        super().__setattr__(name, value)

    @classmethod
    def from_document(cls, payload: Any) -> "Animation":
        # Older documents stored an animation as a bare list of frames.
        if isinstance(payload, list):
            return cls(fps=config.DEFAULT_FPS, frames=[Frame.from_dict(item) for item in payload])
        payload = payload if isinstance(payload, dict) else {}
        raw_frames = payload.get("frames") if isinstance(payload.get("frames"), list) else []
        return cls(fps=_as_fps(payload.get("fps")), frames=[Frame.from_dict(item) for item in raw_frames])

    def to_document(self) -> dict[str, Any]:
        return {"fps": int(self.fps), "frames": [frame.to_dict() for frame in self.frames]}

    def clone(self) -> "Animation":
        return Animation(fps=self.fps, frames=[frame.clone() for frame in self.frames])

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.fps

    def set_fps(self, fps: Any) -> int:
        self.fps = _as_fps(fps, default=self.fps)
        return self.fps

    def append_frame(self, frame: Frame) -> int:
        self.frames.append(frame)
        return len(self.frames) - 1

    def remove_frame(self, index: int) -> Frame:
        if not 0 <= index < len(self.frames):
            raise IndexError(f"Frame index {index} out of range for {len(self.frames)} frame(s).")
        return self.frames.pop(index)

    def swap_frames(self, first: int, second: int) -> None:
        count = len(self.frames)
        if not (0 <= first < count and 0 <= second < count):
            raise IndexError(f"Cannot swap frames {first} and {second} in {count} frame(s).")
        self.frames[first], self.frames[second] = self.frames[second], self.frames[first]

    def move_frame(self, old_index: int, new_index: int) -> int:
        if not self.frames:
            return 0
        old_index = max(0, min(int(old_index), len(self.frames) - 1))
        new_index = max(0, min(int(new_index), len(self.frames) - 1))
        if old_index == new_index:
            return old_index
        frame = self.frames.pop(old_index)
        self.frames.insert(new_index, frame)
        return new_index

    def duplicate_frame(self, index: int) -> int:
        if not 0 <= index < len(self.frames):
            raise IndexError(f"Frame index {index} out of range for {len(self.frames)} frame(s).")
        self.frames.insert(index + 1, self.frames[index].clone())
        return index + 1


class AnimationSet:
    """Named animations plus the name of the one being edited.

    ``get_or_create`` is the only accessor that materialises missing entries.
    """

    def __init__(
        self,
        animations: dict[str, Animation] | None = None,
        current_name: str = config.DEFAULT_ANIMATION_NAME,
        *,
        default_fps: int = config.DEFAULT_FPS,
    ) -> None:
        self.animations: dict[str, Animation] = dict(animations or {})
        self.default_fps = _as_fps(default_fps)
        self.current_name = str(current_name)

    # Construction helpers -------------------------------------------------
    @classmethod
    def from_document(
        cls,
        payload: Any,
        *,
        current_name: str | None = None,
        default_fps: int = config.DEFAULT_FPS,
    ) -> "AnimationSet":
        payload = payload if isinstance(payload, dict) else {}
        animations = {str(name): Animation.from_document(value) for name, value in payload.items()}
        if current_name is None:
            current_name = next(iter(animations), config.DEFAULT_ANIMATION_NAME)
        return cls(animations, current_name, default_fps=default_fps)

    def to_document(self) -> dict[str, Any]:
        return {name: animation.to_document() for name, animation in self.animations.items()}

    def clone(self) -> "AnimationSet":
        return AnimationSet(
            {name: animation.clone() for name, animation in self.animations.items()},
            self.current_name,
            default_fps=self.default_fps,
        )

    # Accessors ------------------------------------------------------------
    def __contains__(self, name: object) -> bool:
        return name in self.animations

    def __iter__(self) -> Iterator[str]:
        return iter(self.animations)

    def __len__(self) -> int:
        return len(self.animations)

    def names(self) -> list[str]:
        return list(self.animations)

    def get(self, name: str) -> Animation | None:
        return self.animations.get(name)

    def get_or_create(self, name: str) -> Animation:
        """Return the named animation, creating an empty one at the default fps."""
        animation = self.animations.get(name)
        if animation is None:
            animation = Animation(fps=self.default_fps)
            self.animations[name] = animation
        return animation

    @property
    def current(self) -> Animation:
        return self.get_or_create(self.current_name)

    # Mutators -------------------------------------------------------------
    def set_current(self, name: str) -> Animation:
        self.current_name = str(name)
        return self.current

    def set_fps(self, name: str, fps: Any) -> int:
        return self.get_or_create(name).set_fps(fps)

    def rename(self, old_name: str, new_name: str) -> bool:
        new_name = str(new_name).strip()
        if not new_name or old_name not in self.animations or new_name in self.animations:
            return False
        # Rebuild to keep the renamed entry in place.
        self.animations = {
            (new_name if name == old_name else name): animation
            for name, animation in self.animations.items()
        }
        if self.current_name == old_name:
            self.current_name = new_name
        return True

    def remove(self, name: str) -> bool:
        if name not in self.animations:
            return False
        del self.animations[name]
        if self.current_name == name:
            self.current_name = next(iter(self.animations), config.DEFAULT_ANIMATION_NAME)
        return True
