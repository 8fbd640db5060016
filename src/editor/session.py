"""Editor session: one open asset or level and everything the engine owns for it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from src.core.config import EditorConfig
from src.editor.camera import AssetProjection, Camera, LevelProjection, Tool
from src.editor.editor_state import InteractionMode, InteractionState
from src.editor.frame_store import AnimationSet, Frame
from src.editor.interaction import InteractionController, PointerEvent
from src.editor.playback import PlaybackDriver, PlaybackStepper
from src.editor.tool_manager import ToolManager
from src.level.tile_grid import Tile, TileGrid


@dataclass(frozen=True)
class RenderView:
    """Everything a renderer needs to draw one frame of the editor."""

    zoom: float
    pan: Tuple[float, float]
    origin: Tuple[float, float]
    active_tool: str
    background_color: Tuple[int, int, int]
    mode: str
    animation_name: str
    frames: Tuple[Frame, ...]
    selected_frame_index: int
    pending_rect: Optional[Tuple[float, float, float, float]]
    tiles: Tuple[Tile, ...]
    preview_frame_index: Optional[int]


class EditorSession:
    def __init__(
        self,
        *,
        level_mode: bool = False,
        animations: Optional[AnimationSet] = None,
        tile_grid: Optional[TileGrid] = None,
        image_size: Optional[Tuple[float, float]] = None,
        settings: Optional[EditorConfig] = None,
        on_change: Optional[Callable[["EditorSession"], None]] = None,
    ) -> None:
        self.settings = settings or EditorConfig()
        self.level_mode = level_mode
        self.camera = Camera(
            background_color=self.settings.background_color,
            viewport_width=self.settings.viewport_width,
            viewport_height=self.settings.viewport_height,
            min_zoom=self.settings.min_zoom,
            max_zoom=self.settings.max_zoom,
            projection=LevelProjection() if level_mode else AssetProjection(),
        )
        if image_size is not None:
            self.camera.set_image_size(*image_size)
        self.animations = animations or AnimationSet(
            current_name=self.settings.default_animation_name,
            default_fps=self.settings.default_fps,
        )
        self.tile_grid = tile_grid or TileGrid(cell_size=self.settings.tile_grid_size)
        self.interaction = InteractionState()
        self.tool_manager = ToolManager(self.camera, level_mode=level_mode)
        self.controller = InteractionController(
            self.camera,
            self.animations,
            self.tile_grid,
            self.tool_manager,
            state=self.interaction,
            settings=self.settings,
        )
        self.playback = PlaybackStepper(self.animations)
        self.on_change = on_change
        self.revision = 0
        self.status_message = ""

    @classmethod
    def for_asset(cls, image_size: Tuple[float, float], **kwargs: Any) -> "EditorSession":
        return cls(level_mode=False, image_size=image_size, **kwargs)

    @classmethod
    def for_level(cls, tile_grid: Optional[TileGrid] = None, **kwargs: Any) -> "EditorSession":
        return cls(level_mode=True, tile_grid=tile_grid, **kwargs)

    # Change tracking ------------------------------------------------------
    def _changed(self, changed: bool = True) -> bool:
        if self.controller.status_message:
            self.status_message = self.controller.status_message
            self.controller.status_message = ""
        if changed:
            self.revision += 1
            if self.on_change is not None:
                self.on_change(self)
        return changed

    # Pointer / keyboard ---------------------------------------------------
    def handle_pointer(self, event: PointerEvent) -> bool:
        return self._changed(self.controller.handle_pointer(event))

    def hover(self, screen_pos: Tuple[float, float]) -> Optional[str]:
        return self.controller.hover(screen_pos)

    def handle_intent(self, intent: str) -> bool:
        if intent == "zoom_in":
            before = self.camera.zoom
            return self._changed(self.camera.zoom_by(self.settings.zoom_step) != before)
        if intent == "zoom_out":
            before = self.camera.zoom
            return self._changed(self.camera.zoom_by(-self.settings.zoom_step) != before)
        if intent == "delete_selected":
            if self.interaction.mode != InteractionMode.IDLE:
                return False
            return self._changed(self.controller.delete_selected())
        if intent == "toggle_tool":
            if self.interaction.mode != InteractionMode.IDLE:
                return False
            tool = self.tool_manager.cycle_tool()
            self.status_message = f"Tool: {tool.value}"
            return self._changed()
        raise ValueError(f"Unknown intent '{intent}'.")

    def set_tool(self, tool: Tool | str) -> bool:
        return self._changed(self.tool_manager.set_active_tool(tool))

    def select_brush(self, brush_ref: Optional[Any]) -> None:
        self.tool_manager.select_brush(brush_ref)

    # Asset / animation management ----------------------------------------
    def set_image_size(self, width: float, height: float) -> bool:
        self.camera.set_image_size(width, height)
        return self._changed()

    def set_viewport(self, width: float, height: float) -> bool:
        self.camera.set_viewport(width, height)
        return self._changed()

    @property
    def current_frames(self) -> list[Frame]:
        return self.animations.current.frames

    def switch_animation(self, name: str) -> bool:
        """Make ``name`` current, creating it if needed, and clear the selection."""
        self.interaction.reset_gesture()
        self.animations.set_current(name)
        self.interaction.deselect()
        self.status_message = f"Animation: {self.animations.current_name}"
        return self._changed()

    def select_frame(self, index: int) -> bool:
        if not -1 <= index < len(self.current_frames):
            raise IndexError(f"Frame index {index} out of range for {len(self.current_frames)} frame(s).")
        self.interaction.select(index)
        return self._changed()

    def swap_frames(self, first: int, second: int) -> bool:
        self.animations.current.swap_frames(first, second)
        selected = self.interaction.selected_frame_index
        if selected == first:
            self.interaction.select(second)
        elif selected == second:
            self.interaction.select(first)
        return self._changed()

    def remove_frame(self, index: int) -> bool:
        self.animations.current.remove_frame(index)
        selected = self.interaction.selected_frame_index
        if selected == index:
            self.interaction.deselect()
        elif selected > index:
            self.interaction.select(selected - 1)
        return self._changed()

    def set_fps(self, fps: Any, name: Optional[str] = None) -> int:
        value = self.animations.set_fps(name or self.animations.current_name, fps)
        self._changed()
        return value

    def rename_animation(self, old_name: str, new_name: str) -> bool:
        if self.playback.state is not None and self.playback.state.animation_name == old_name:
            self.stop_preview()
        return self._changed(self.animations.rename(old_name, new_name))

    def remove_animation(self, name: str) -> bool:
        if self.playback.state is not None and self.playback.state.animation_name == name:
            self.stop_preview()
        was_current = name == self.animations.current_name
        removed = self.animations.remove(name)
        if removed and was_current:
            self.interaction.deselect()
        return self._changed(removed)

    # Preview --------------------------------------------------------------
    def start_preview(self, now_ms: float, name: Optional[str] = None) -> bool:
        target = name or self.animations.current_name
        started = self.playback.start(target, now_ms)
        if not started:
            self.status_message = f"Nothing to preview in '{target}'."
        return started

    def advance_preview(self, now_ms: float) -> int:
        return self.playback.advance(now_ms)

    def stop_preview(self) -> None:
        self.playback.stop()

    def preview_driver(self, on_frame: Optional[Callable[[int], None]] = None) -> PlaybackDriver:
        return PlaybackDriver(self.playback, on_frame)

    # Persistence boundary -------------------------------------------------
    def to_document(self) -> dict:
        return self.animations.to_document()

    def load_document(self, payload: Any) -> None:
        """Replace animations from a persisted document (legacy shapes migrate)."""
        self.stop_preview()
        loaded = AnimationSet.from_document(payload, default_fps=self.settings.default_fps)
        self.animations.animations = loaded.animations
        self.animations.current_name = loaded.current_name
        self.interaction.reset_gesture()
        self.interaction.deselect()
        self._changed()

    def tile_document(self) -> dict:
        return self.tile_grid.to_document()

    def load_tile_document(self, payload: Any) -> None:
        loaded = TileGrid.from_document(payload, cell_size=self.tile_grid.cell_size)
        self.tile_grid.tiles = loaded.tiles
        self.interaction.reset_gesture()
        self._changed()

    # Render consumer ------------------------------------------------------
    def render_view(self) -> RenderView:
        pending = self.interaction.pending_rect
        return RenderView(
            zoom=self.camera.zoom,
            pan=(self.camera.pan_x, self.camera.pan_y),
            origin=self.camera.origin(),
            active_tool=self.camera.active_tool.value,
            background_color=self.camera.background_color,
            mode=self.interaction.mode.value,
            animation_name=self.animations.current_name,
            frames=tuple(frame.clone() for frame in self.current_frames),
            selected_frame_index=self.interaction.selected_frame_index,
            pending_rect=pending.normalized() if pending is not None else None,
            tiles=tuple(self.tile_grid),
            preview_frame_index=self.playback.frame_index if self.playback.is_active else None,
        )
