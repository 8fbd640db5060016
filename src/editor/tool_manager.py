# tool_manager.py

"""Manages the camera tools (Select, Pan, Brush, Eraser) for the editor."""

from typing import Any, Optional, Tuple

from src.editor.camera import Camera, Tool
from src.level.tile_grid import TileGrid

ASSET_TOOLS = (Tool.SELECT, Tool.PAN)
LEVEL_TOOLS = (Tool.BRUSH, Tool.ERASER, Tool.PAN)


# --- Base Tool ---
class BaseTool:
    tool = None

    def __init__(self, name):
        self.name = name

    def apply_cell(self, manager, grid: TileGrid, point: Tuple[float, float]) -> bool:
        """Applies the tool to the grid cell under ``point`` (image space).

        Returns True if the grid changed.
        """
        return False

    def activate(self, manager):
        """Called when the tool becomes active."""
        print(f"{self.name} tool activated.")

    def deactivate(self, manager):
        """Called when the tool is deactivated."""
        print(f"{self.name} tool deactivated.")


class SelectTool(BaseTool):
    tool = Tool.SELECT

    def __init__(self):
        super().__init__("Select")


class PanTool(BaseTool):
    tool = Tool.PAN

    def __init__(self):
        super().__init__("Pan")


# --- Brush/Eraser Tools ---
class BrushTool(BaseTool):
    tool = Tool.BRUSH

    def __init__(self):
        super().__init__("Brush")

    def apply_cell(self, manager, grid, point):
        # Painting with no brush asset picked is a reachable state, not an error.
        if manager.brush_ref is None:
            return False
        existing = grid.tile_at(*grid.cell_for(point))
        if existing is not None and existing.image_ref == manager.brush_ref:
            return False
        grid.paint(point, manager.brush_ref)
        return True


class EraserTool(BaseTool):
    tool = Tool.ERASER

    def __init__(self):
        super().__init__("Eraser")

    def apply_cell(self, manager, grid, point):
        return grid.erase(point)


# --- Tool Manager ---
class ToolManager:
    def __init__(self, camera: Camera, *, level_mode: bool = False):
        self.camera = camera
        self.level_mode = level_mode
        self.brush_ref: Optional[Any] = None
        self.tools = {
            Tool.SELECT: SelectTool(),
            Tool.PAN: PanTool(),
            Tool.BRUSH: BrushTool(),
            Tool.ERASER: EraserTool(),
        }
        if self.camera.active_tool not in self.available_tools:
            self.camera.active_tool = self.available_tools[0]

    @property
    def available_tools(self) -> Tuple[Tool, ...]:
        return LEVEL_TOOLS if self.level_mode else ASSET_TOOLS

    @property
    def active_tool_name(self) -> Tool:
        return self.camera.active_tool

    @property
    def active_tool(self) -> BaseTool:
        return self.tools[self.camera.active_tool]

    def set_active_tool(self, tool_name) -> bool:
        tool = Tool(tool_name)
        if tool not in self.available_tools:
            raise ValueError(
                f"Tool '{tool.value}' is not available in {'level' if self.level_mode else 'asset'} mode."
            )
        if tool == self.camera.active_tool:
            return False
        self.active_tool.deactivate(self)
        self.camera.active_tool = tool
        self.active_tool.activate(self)
        return True

    def cycle_tool(self) -> Tool:
        tools = self.available_tools
        current = self.camera.active_tool
        next_index = (tools.index(current) + 1) % len(tools) if current in tools else 0
        self.set_active_tool(tools[next_index])
        return self.camera.active_tool

    def select_brush(self, brush_ref: Optional[Any]) -> None:
        self.brush_ref = brush_ref

    def apply_cell(self, grid: TileGrid, point: Tuple[float, float]) -> bool:
        return self.active_tool.apply_cell(self, grid, point)
