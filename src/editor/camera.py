from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from src.core import config

Point = Tuple[float, float]


class Tool(str, Enum):
    SELECT = "select"
    PAN = "pan"
    BRUSH = "brush"
    ERASER = "eraser"


class AssetProjection:
    """Image-centred projection used when editing a sprite sheet.

    The image is centred on the camera's pan point, so image-space (0, 0) sits
    half an image (scaled by zoom) up and left of the viewport centre.
    """

    name = "asset"

    def origin(self, camera: "Camera") -> Point:
        cx, cy = camera.viewport_center()
        return (
            cx + camera.pan_x - camera.image_width / 2 * camera.zoom,
            cy + camera.pan_y - camera.image_height / 2 * camera.zoom,
        )


class LevelProjection:
    """Viewport-centred projection used in level mode (no backing image)."""

    name = "level"

    def origin(self, camera: "Camera") -> Point:
        cx, cy = camera.viewport_center()
        return cx + camera.pan_x, cy + camera.pan_y


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class Camera:
    zoom: float = config.DEFAULT_ZOOM
    pan_x: float = 0.0
    pan_y: float = 0.0
    active_tool: Tool = Tool.SELECT
    background_color: Tuple[int, int, int] = config.DEFAULT_BACKGROUND_COLOR
    viewport_width: float = config.DEFAULT_VIEWPORT_WIDTH
    viewport_height: float = config.DEFAULT_VIEWPORT_HEIGHT
    image_width: float = 0.0
    image_height: float = 0.0
    min_zoom: float = config.MIN_ZOOM
    max_zoom: float = config.MAX_ZOOM
    projection: AssetProjection | LevelProjection | None = None

    def __post_init__(self) -> None:
        if self.projection is None:
            self.projection = AssetProjection()
        self.zoom = clamp(round(self.zoom * 10) / 10, self.min_zoom, self.max_zoom)

    # Coordinate helpers ---------------------------------------------------
    def viewport_center(self) -> Point:
        return self.viewport_width / 2, self.viewport_height / 2

    def origin(self) -> Point:
        return self.projection.origin(self)

    def screen_to_image(self, sx: float, sy: float) -> Point:
        origin_x, origin_y = self.origin()
        return (sx - origin_x) / self.zoom, (sy - origin_y) / self.zoom

    def image_to_screen(self, ix: float, iy: float) -> Point:
        origin_x, origin_y = self.origin()
        return ix * self.zoom + origin_x, iy * self.zoom + origin_y

    # Mutators -------------------------------------------------------------
    def zoom_by(self, delta: float) -> float:
        self.zoom = clamp(round((self.zoom + delta) * 10) / 10, self.min_zoom, self.max_zoom)
        return self.zoom

    def pan(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def reset_view(self) -> None:
        self.zoom = config.DEFAULT_ZOOM
        self.pan_x = 0.0
        self.pan_y = 0.0

    def set_viewport(self, width: float, height: float) -> None:
        self.viewport_width = max(0.0, float(width))
        self.viewport_height = max(0.0, float(height))

    def set_image_size(self, width: float, height: float) -> None:
        self.image_width = max(0.0, float(width))
        self.image_height = max(0.0, float(height))

    @property
    def has_image(self) -> bool:
        return self.image_width > 0 and self.image_height > 0

    @property
    def is_level_mode(self) -> bool:
        return isinstance(self.projection, LevelProjection)
