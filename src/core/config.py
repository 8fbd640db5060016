# config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional, Tuple

# Viewport
DEFAULT_VIEWPORT_WIDTH = 1300
DEFAULT_VIEWPORT_HEIGHT = 800
FPS = 60

# Camera
MIN_ZOOM = 0.1
MAX_ZOOM = 10.0
ZOOM_STEP = 0.1
DEFAULT_ZOOM = 1.0

# Hit-testing radii, in screen pixels
RESIZE_HANDLE_RADIUS = 8.0
ANCHOR_HIT_RADIUS = 10.0

# Frames smaller than this (in image pixels, either axis) are discarded on commit
MIN_DRAW_SIZE = 2.0
MIN_FRAME_SIZE = 1.0

# Animations
DEFAULT_FPS = 8
DEFAULT_ANIMATION_NAME = "idle"

# Level mode
TILE_GRID_SIZE = 32

# Colors
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GRAY_DARK = (51, 51, 51)
DEFAULT_BACKGROUND_COLOR = GRAY_DARK

# Directory Paths (relative to project root)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.path.join(PROJECT_ROOT, "data")
ANIMATION_DATA_DIR = os.path.join(DATA_DIR, "animations")
LEVEL_DATA_DIR = os.path.join(DATA_DIR, "levels")
EDITOR_CONFIG_PATH = os.path.join(DATA_DIR, "editor_config.json")


@dataclass(frozen=True)
class EditorConfig:
    """Tunable editor settings. Defaults mirror the module constants."""

    viewport_width: int = DEFAULT_VIEWPORT_WIDTH
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    zoom_step: float = ZOOM_STEP
    resize_handle_radius: float = RESIZE_HANDLE_RADIUS
    anchor_hit_radius: float = ANCHOR_HIT_RADIUS
    min_draw_size: float = MIN_DRAW_SIZE
    default_fps: int = DEFAULT_FPS
    default_animation_name: str = DEFAULT_ANIMATION_NAME
    tile_grid_size: int = TILE_GRID_SIZE
    background_color: Tuple[int, int, int] = DEFAULT_BACKGROUND_COLOR


def _coerce_override(current: Any, raw: Any) -> Optional[Any]:
    if isinstance(current, bool):
        return raw if isinstance(raw, bool) else None
    if isinstance(current, int):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return None
        if int(raw) != raw or raw <= 0:
            return None
        return int(raw)
    if isinstance(current, float):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw <= 0:
            return None
        return float(raw)
    if isinstance(current, str):
        stripped = raw.strip() if isinstance(raw, str) else ""
        return stripped or None
    if isinstance(current, tuple):
        if not isinstance(raw, list) or len(raw) != len(current):
            return None
        if not all(isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255 for v in raw):
            return None
        return tuple(raw)
    return None


def load_editor_config(path: Optional[str] = None) -> EditorConfig:
    """Load editor settings, applying JSON overrides on top of the defaults.

    Missing files, unreadable JSON, unknown keys and values of the wrong type
    are ignored so a broken override file never prevents the editor from
    starting.
    """
    config_path = path or EDITOR_CONFIG_PATH
    defaults = EditorConfig()
    if not os.path.exists(config_path):
        return defaults
    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Warning: could not read editor config {config_path}: {e}")
        return defaults
    if not isinstance(data, dict):
        return defaults

    overrides = {}
    for setting in fields(EditorConfig):
        if setting.name not in data:
            continue
        value = _coerce_override(getattr(defaults, setting.name), data[setting.name])
        if value is not None and setting.name in ("min_zoom", "max_zoom"):
            if not MIN_ZOOM <= value <= MAX_ZOOM:
                value = None
        if value is None:
            print(f"Warning: ignoring invalid editor config value for '{setting.name}'.")
            continue
        overrides[setting.name] = value

    result = replace(defaults, **overrides)
    if result.min_zoom > result.max_zoom:
        print("Warning: min_zoom exceeds max_zoom; using default zoom limits.")
        result = replace(result, min_zoom=MIN_ZOOM, max_zoom=MAX_ZOOM)
    return result
