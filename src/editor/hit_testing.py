"""Stateless hit-testing shared by pointer-down handling and hover feedback."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from src.core import config
from src.editor.camera import Camera
from src.editor.frame_store import Frame

Point = Tuple[float, float]


def frame_at(frames: Sequence[Frame], point: Point) -> int:
    """Index of the topmost frame containing ``point`` (image space), or -1.

    Frames are tested newest first so the most recently added one wins on
    overlap. Bounds are inclusive on all four edges.
    """
    px, py = point
    for index in range(len(frames) - 1, -1, -1):
        if frames[index].contains(px, py):
            return index
    return -1


def resize_handle_at(
    camera: Camera,
    screen_point: Point,
    frame: Frame,
    radius: float = config.RESIZE_HANDLE_RADIUS,
) -> Optional[str]:
    sx, sy = screen_point
    for name, ix, iy in frame.corners():
        cx, cy = camera.image_to_screen(ix, iy)
        if math.hypot(sx - cx, sy - cy) <= radius:
            return name
    return None


def anchor_at(
    camera: Camera,
    screen_point: Point,
    frame: Frame,
    radius: float = config.ANCHOR_HIT_RADIUS,
) -> bool:
    ax, ay = camera.image_to_screen(*frame.anchor_point())
    return math.hypot(screen_point[0] - ax, screen_point[1] - ay) <= radius


def cursor_hint(
    camera: Camera,
    frames: Sequence[Frame],
    selected_index: int,
    screen_point: Point,
    *,
    handle_radius: float = config.RESIZE_HANDLE_RADIUS,
    anchor_radius: float = config.ANCHOR_HIT_RADIUS,
) -> Optional[str]:
    """What a pointer-down at ``screen_point`` would grab in asset mode.

    Returns ``"anchor"``, a corner name, ``"frame"`` or None, following the
    same priority as the interaction controller.
    """
    if not camera.has_image:
        return None
    if 0 <= selected_index < len(frames):
        selected = frames[selected_index]
        if anchor_at(camera, screen_point, selected, anchor_radius):
            return "anchor"
        handle = resize_handle_at(camera, screen_point, selected, handle_radius)
        if handle is not None:
            return handle
    if frame_at(frames, camera.screen_to_image(*screen_point)) != -1:
        return "frame"
    return None
