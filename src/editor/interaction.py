"""Pointer-driven editing: turns down/move/up events into frame and tile edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from src.core import config
from src.core.config import EditorConfig
from src.editor import hit_testing
from src.editor.camera import Camera, Tool
from src.editor.editor_state import InteractionMode, InteractionState, PendingRect, ResizeHandle
from src.editor.frame_store import AnimationSet, Frame, FrameSnapshot
from src.editor.tool_manager import ToolManager
from src.level.tile_grid import TileGrid

POINTER_KINDS = ("down", "move", "up")


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    kind: str
    wheel_delta: Optional[float] = None

    @property
    def pos(self) -> Tuple[float, float]:
        return self.x, self.y


def resize_from_snapshot(snapshot: FrameSnapshot, handle: ResizeHandle, dx: float, dy: float) -> Tuple[float, float, float, float]:
    """Apply a corner drag to the rectangle captured at gesture start.

    West/north edges move the origin while the opposite edge stays put, and
    the origin can never pass the opposite edge, so the rectangle never
    inverts.
    """
    x, y, w, h = snapshot.x, snapshot.y, snapshot.w, snapshot.h
    min_size = config.MIN_FRAME_SIZE
    if handle.moves_west_edge:
        x = min(snapshot.x + snapshot.w - min_size, snapshot.x + dx)
        w = max(min_size, snapshot.w - dx)
    else:
        w = max(min_size, snapshot.w + dx)
    if handle.moves_north_edge:
        y = min(snapshot.y + snapshot.h - min_size, snapshot.y + dy)
        h = max(min_size, snapshot.h - dy)
    else:
        h = max(min_size, snapshot.h + dy)
    return x, y, w, h


class InteractionController:
    def __init__(
        self,
        camera: Camera,
        animations: AnimationSet,
        tile_grid: TileGrid,
        tools: ToolManager,
        state: Optional[InteractionState] = None,
        settings: Optional[EditorConfig] = None,
    ) -> None:
        self.camera = camera
        self.animations = animations
        self.tile_grid = tile_grid
        self.tools = tools
        self.state = state or InteractionState()
        self.settings = settings or EditorConfig()
        self.status_message = ""
        self._move_handlers: Dict[InteractionMode, Callable[[Tuple[float, float]], bool]] = {
            InteractionMode.IDLE: self._move_idle,
            InteractionMode.PANNING: self._move_panning,
            InteractionMode.DRAWING: self._move_drawing,
            InteractionMode.DRAGGING_FRAME: self._move_dragging_frame,
            InteractionMode.DRAGGING_ANCHOR: self._move_dragging_anchor,
            InteractionMode.RESIZING_FRAME: self._move_resizing_frame,
            InteractionMode.PAINTING: self._move_painting,
        }

    # Helpers --------------------------------------------------------------
    @property
    def level_mode(self) -> bool:
        return self.tools.level_mode

    @property
    def frames(self):
        return self.animations.current.frames

    def selected_frame(self) -> Optional[Frame]:
        index = self.state.selected_frame_index
        frames = self.frames
        if 0 <= index < len(frames):
            return frames[index]
        return None

    def _begin_gesture(self, mode: InteractionMode, screen_pos, image_pos, frame: Optional[Frame] = None) -> None:
        self.state.set_mode(mode)
        self.state.pointer_anchor_screen = screen_pos
        self.state.drag_start_image = image_pos
        self.state.frame_snapshot = frame.snapshot() if frame is not None else None

    def _drag_delta(self, image_pos) -> Tuple[float, float]:
        start_x, start_y = self.state.drag_start_image
        return image_pos[0] - start_x, image_pos[1] - start_y

    # Dispatch -------------------------------------------------------------
    def handle_pointer(self, event: PointerEvent) -> bool:
        """Process one normalised pointer event. Returns True if anything changed."""
        changed = False
        if event.wheel_delta:
            changed = self.zoom_by_wheel(event.wheel_delta)
        if event.kind == "down":
            return self.pointer_down(event.pos) or changed
        if event.kind == "move":
            return self.pointer_move(event.pos) or changed
        if event.kind == "up":
            return self.pointer_up(event.pos) or changed
        return changed

    def zoom_by_wheel(self, wheel_delta: float) -> bool:
        before = self.camera.zoom
        step = self.settings.zoom_step if wheel_delta > 0 else -self.settings.zoom_step
        return self.camera.zoom_by(step) != before

    def pointer_down(self, screen_pos: Tuple[float, float]) -> bool:
        image_pos = self.camera.screen_to_image(*screen_pos)
        tool = self.camera.active_tool

        if tool == Tool.PAN:
            self._begin_gesture(InteractionMode.PANNING, screen_pos, image_pos)
            return False

        if tool in (Tool.BRUSH, Tool.ERASER):
            self._begin_gesture(InteractionMode.PAINTING, screen_pos, image_pos)
            return self.tools.apply_cell(self.tile_grid, image_pos)

        # Frame editing needs a loaded image to measure against.
        if self.level_mode or not self.camera.has_image:
            return False

        selected = self.selected_frame()
        if selected is not None:
            if hit_testing.anchor_at(self.camera, screen_pos, selected, self.settings.anchor_hit_radius):
                self._begin_gesture(InteractionMode.DRAGGING_ANCHOR, screen_pos, image_pos, selected)
                return False
            handle = hit_testing.resize_handle_at(
                self.camera, screen_pos, selected, self.settings.resize_handle_radius
            )
            if handle is not None:
                self._begin_gesture(InteractionMode.RESIZING_FRAME, screen_pos, image_pos, selected)
                self.state.active_handle = ResizeHandle(handle)
                return False

        index = hit_testing.frame_at(self.frames, image_pos)
        if index != -1:
            changed = index != self.state.selected_frame_index
            self.state.select(index)
            self._begin_gesture(InteractionMode.DRAGGING_FRAME, screen_pos, image_pos, self.frames[index])
            return changed

        self.state.deselect()
        self._begin_gesture(InteractionMode.DRAWING, screen_pos, image_pos)
        self.state.pending_rect = PendingRect(image_pos[0], image_pos[1])
        return True

    def pointer_move(self, screen_pos: Tuple[float, float]) -> bool:
        return self._move_handlers[self.state.mode](screen_pos)

    def pointer_up(self, screen_pos: Tuple[float, float]) -> bool:
        changed = False
        if self.state.mode == InteractionMode.DRAWING:
            self._move_drawing(screen_pos)
            changed = self._commit_pending_rect()
        elif self.state.mode != InteractionMode.IDLE:
            changed = True
        self.state.reset_gesture()
        return changed

    # Move handlers --------------------------------------------------------
    def _move_idle(self, screen_pos) -> bool:
        return False

    def _move_panning(self, screen_pos) -> bool:
        last_x, last_y = self.state.pointer_anchor_screen
        dx, dy = screen_pos[0] - last_x, screen_pos[1] - last_y
        self.state.pointer_anchor_screen = screen_pos
        if dx == 0 and dy == 0:
            return False
        self.camera.pan(dx, dy)
        return True

    def _move_drawing(self, screen_pos) -> bool:
        rect = self.state.pending_rect
        if rect is None:
            return False
        dx, dy = self._drag_delta(self.camera.screen_to_image(*screen_pos))
        rect.w, rect.h = dx, dy
        return True

    def _move_dragging_frame(self, screen_pos) -> bool:
        frame, snapshot = self.selected_frame(), self.state.frame_snapshot
        if frame is None or snapshot is None:
            return False
        dx, dy = self._drag_delta(self.camera.screen_to_image(*screen_pos))
        frame.x = snapshot.x + dx
        frame.y = snapshot.y + dy
        return True

    def _move_dragging_anchor(self, screen_pos) -> bool:
        frame, snapshot = self.selected_frame(), self.state.frame_snapshot
        if frame is None or snapshot is None:
            return False
        dx, dy = self._drag_delta(self.camera.screen_to_image(*screen_pos))
        frame.anchor.x = snapshot.anchor_x + dx
        frame.anchor.y = snapshot.anchor_y + dy
        return True

    def _move_resizing_frame(self, screen_pos) -> bool:
        frame, snapshot = self.selected_frame(), self.state.frame_snapshot
        handle = self.state.active_handle
        if frame is None or snapshot is None or handle is None:
            return False
        dx, dy = self._drag_delta(self.camera.screen_to_image(*screen_pos))
        frame.x, frame.y, frame.w, frame.h = resize_from_snapshot(snapshot, handle, dx, dy)
        return True

    def _move_painting(self, screen_pos) -> bool:
        return self.tools.apply_cell(self.tile_grid, self.camera.screen_to_image(*screen_pos))

    # Commit ---------------------------------------------------------------
    def _commit_pending_rect(self) -> bool:
        rect = self.state.pending_rect
        if rect is None:
            return False
        x, y, w, h = rect.normalized()
        threshold = self.settings.min_draw_size
        if not (w > threshold and h > threshold):
            # Too small to be intentional; the preview rectangle just disappears.
            return True
        animation = self.animations.current
        index = animation.append_frame(rect.to_frame())
        self.state.select(index)
        self.status_message = f"Created frame {index} in '{self.animations.current_name}'."
        return True

    # Intents --------------------------------------------------------------
    def delete_selected(self) -> bool:
        index = self.state.selected_frame_index
        if self.selected_frame() is None:
            return False
        self.animations.current.remove_frame(index)
        self.state.deselect()
        self.status_message = f"Deleted frame {index} from '{self.animations.current_name}'."
        return True

    def hover(self, screen_pos: Tuple[float, float]) -> Optional[str]:
        if self.level_mode:
            return None
        return hit_testing.cursor_hint(
            self.camera,
            self.frames,
            self.state.selected_frame_index,
            screen_pos,
            handle_radius=self.settings.resize_handle_radius,
            anchor_radius=self.settings.anchor_hit_radius,
        )
