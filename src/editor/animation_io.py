from __future__ import annotations

import json
import os
from typing import Optional

import pygame

from src.core import config
from src.core.runtime_data_validation import (
    load_validated_animation_document,
    load_validated_tile_grid,
)
from src.editor.frame_store import AnimationSet
from src.level.tile_grid import TileGrid


def animation_json_path(document_id: str, *, data_dir: str = config.ANIMATION_DATA_DIR) -> str:
    return os.path.join(data_dir, f"{document_id}.json")


def level_json_path(level_id: str, *, data_dir: str = config.LEVEL_DATA_DIR) -> str:
    return os.path.join(data_dir, f"{level_id}.json")


def list_document_ids(*, data_dir: str = config.ANIMATION_DATA_DIR) -> list[str]:
    if not os.path.exists(data_dir):
        return []
    return sorted(
        os.path.splitext(name)[0]
        for name in os.listdir(data_dir)
        if name.endswith(".json") and os.path.isfile(os.path.join(data_dir, name))
    )


def _resolve_json_path(ref: str, *, data_dir: str) -> str:
    if ref.endswith(".json") or os.path.sep in ref or os.path.isabs(ref):
        return ref
    return os.path.join(data_dir, f"{ref}.json")


def _ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def _write_json(path: str, payload: dict) -> str:
    _ensure_dir(os.path.dirname(path))
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
    os.replace(tmp_path, path)
    return path


def load_animation_set(
    ref: str,
    *,
    data_dir: str = config.ANIMATION_DATA_DIR,
    current_name: Optional[str] = None,
    default_fps: int = config.DEFAULT_FPS,
) -> AnimationSet:
    """Load and migrate an animation document by id or path."""
    json_path = _resolve_json_path(ref, data_dir=data_dir)
    document = load_validated_animation_document(json_path)
    return AnimationSet.from_document(document, current_name=current_name, default_fps=default_fps)


def save_animation_set(
    animations: AnimationSet,
    ref: str,
    *,
    data_dir: str = config.ANIMATION_DATA_DIR,
) -> str:
    json_path = _resolve_json_path(ref, data_dir=data_dir)
    return _write_json(json_path, animations.to_document())


def load_tile_grid(
    ref: str,
    *,
    data_dir: str = config.LEVEL_DATA_DIR,
    cell_size: int = config.TILE_GRID_SIZE,
) -> TileGrid:
    json_path = _resolve_json_path(ref, data_dir=data_dir)
    return TileGrid.from_document(load_validated_tile_grid(json_path), cell_size=cell_size)


def save_tile_grid(grid: TileGrid, ref: str, *, data_dir: str = config.LEVEL_DATA_DIR) -> str:
    json_path = _resolve_json_path(ref, data_dir=data_dir)
    return _write_json(json_path, grid.to_document())


def load_image_size(path: str) -> Optional[tuple[int, int]]:
    """Pixel dimensions of an image on disk, or None if it cannot be read."""
    if not path:
        return None
    try:
        return pygame.image.load(path).get_size()
    except (pygame.error, FileNotFoundError) as e:
        print(f"Error loading image {path}: {e}")
        return None
