from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from src.editor.frame_store import Frame, FrameSnapshot


class InteractionMode(str, Enum):
    IDLE = "idle"
    PANNING = "panning"
    DRAWING = "drawing"
    DRAGGING_FRAME = "dragging_frame"
    DRAGGING_ANCHOR = "dragging_anchor"
    RESIZING_FRAME = "resizing_frame"
    PAINTING = "painting"


class ResizeHandle(str, Enum):
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"

    @property
    def moves_west_edge(self) -> bool:
        return self in (ResizeHandle.NW, ResizeHandle.SW)

    @property
    def moves_north_edge(self) -> bool:
        return self in (ResizeHandle.NW, ResizeHandle.NE)


@dataclass
class PendingRect:
    """Rectangle being drawn. Width/height may be negative mid-drag."""

    x: float
    y: float
    w: float = 0.0
    h: float = 0.0

    def normalized(self) -> Tuple[float, float, float, float]:
        x, w = (self.x + self.w, -self.w) if self.w < 0 else (self.x, self.w)
        y, h = (self.y + self.h, -self.h) if self.h < 0 else (self.y, self.h)
        return x, y, w, h

    def to_frame(self) -> Frame:
        return Frame.with_default_anchor(*self.normalized())


@dataclass
class InteractionState:
    """Container for transient pointer-gesture state."""

    mode: InteractionMode = InteractionMode.IDLE
    pointer_anchor_screen: Optional[Tuple[float, float]] = None
    drag_start_image: Optional[Tuple[float, float]] = None
    frame_snapshot: Optional[FrameSnapshot] = None
    active_handle: Optional[ResizeHandle] = None
    pending_rect: Optional[PendingRect] = None
    selected_frame_index: int = -1

    def set_mode(self, mode: InteractionMode) -> None:
        self.mode = mode

    def select(self, index: int) -> None:
        self.selected_frame_index = index

    def deselect(self) -> None:
        self.selected_frame_index = -1

    def reset_gesture(self) -> None:
        """Back to idle; selection is kept."""
        self.mode = InteractionMode.IDLE
        self.pointer_anchor_screen = None
        self.drag_start_image = None
        self.frame_snapshot = None
        self.active_handle = None
        self.pending_rect = None
