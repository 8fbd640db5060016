"""Replay a recorded input script against a headless editor session.

A script is a JSON object::

    {
      "mode": "asset",
      "image": {"width": 256, "height": 128},
      "viewport": {"width": 800, "height": 600},
      "steps": [
        {"pointer": "down", "x": 400, "y": 300},
        {"pointer": "up", "x": 420, "y": 330},
        {"intent": "zoom_in"},
        {"tool": "pan"},
        {"animation": "walk"},
        {"fps": 12},
        {"brush": "grass.png"},
        {"preview": "start", "at": 0},
        {"preview": "advance", "at": 250},
        {"preview": "stop"}
      ]
    }

``image`` may be replaced by ``imagePath`` to read the dimensions from disk.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional

from src.core.config import load_editor_config
from src.editor.animation_io import (
    load_animation_set,
    load_image_size,
    load_tile_grid,
    save_animation_set,
    save_tile_grid,
)
from src.editor.interaction import POINTER_KINDS, PointerEvent
from src.editor.session import EditorSession


class ReplayError(ValueError):
    """Raised when a replay script is malformed."""


def _number(step: dict[str, Any], key: str, index: int) -> float:
    value = step.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ReplayError(f"Step {index}: '{key}' must be a number.")
    return float(value)


def build_session(script: dict[str, Any], *, config_path: Optional[str] = None) -> EditorSession:
    settings = load_editor_config(config_path)
    mode = script.get("mode", "asset")
    if mode not in ("asset", "level"):
        raise ReplayError(f"Unknown mode '{mode}'. Expected 'asset' or 'level'.")

    session = EditorSession(level_mode=mode == "level", settings=settings)
    viewport = script.get("viewport")
    if isinstance(viewport, dict):
        session.set_viewport(viewport.get("width", 0), viewport.get("height", 0))

    if mode == "asset":
        image = script.get("image")
        if isinstance(image, dict):
            session.set_image_size(image.get("width", 0), image.get("height", 0))
        elif script.get("imagePath"):
            size = load_image_size(script["imagePath"])
            if size is None:
                raise ReplayError(f"Could not read image '{script['imagePath']}'.")
            session.set_image_size(*size)
    return session


def apply_step(session: EditorSession, step: Any, index: int) -> bool:
    if not isinstance(step, dict):
        raise ReplayError(f"Step {index}: expected an object.")
    if "pointer" in step:
        kind = step["pointer"]
        if kind not in POINTER_KINDS:
            raise ReplayError(f"Step {index}: pointer kind must be one of {', '.join(POINTER_KINDS)}.")
        wheel = step.get("wheelDelta")
        event = PointerEvent(
            _number(step, "x", index),
            _number(step, "y", index),
            kind,
            wheel_delta=float(wheel) if isinstance(wheel, (int, float)) and not isinstance(wheel, bool) else None,
        )
        return session.handle_pointer(event)
    if "intent" in step:
        try:
            return session.handle_intent(step["intent"])
        except ValueError as exc:
            raise ReplayError(f"Step {index}: {exc}") from exc
    if "tool" in step:
        try:
            return session.set_tool(step["tool"])
        except ValueError as exc:
            raise ReplayError(f"Step {index}: {exc}") from exc
    if "animation" in step:
        return session.switch_animation(str(step["animation"]))
    if "fps" in step:
        session.set_fps(step["fps"])
        return True
    if "brush" in step:
        session.select_brush(step["brush"])
        return False
    if "preview" in step:
        action = step["preview"]
        if action == "start":
            return session.start_preview(_number(step, "at", index))
        if action == "advance":
            session.advance_preview(_number(step, "at", index))
            return True
        if action == "stop":
            session.stop_preview()
            return True
        raise ReplayError(f"Step {index}: preview action must be start, advance or stop.")
    raise ReplayError(f"Step {index}: unrecognised step {sorted(step)}.")


def replay(session: EditorSession, steps: list[Any]) -> EditorSession:
    for index, step in enumerate(steps):
        apply_step(session, step, index)
    return session


def summarize(session: EditorSession) -> dict[str, Any]:
    view = session.render_view()
    summary: dict[str, Any] = {
        "camera": {"zoom": view.zoom, "panX": view.pan[0], "panY": view.pan[1], "tool": view.active_tool},
        "currentAnimation": view.animation_name,
        "selectedFrameIndex": view.selected_frame_index,
        "previewFrameIndex": view.preview_frame_index,
        "status": session.status_message,
    }
    if session.level_mode:
        summary["tiles"] = session.tile_document()
    else:
        summary["animations"] = session.to_document()
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay an editor input script without a display.")
    parser.add_argument("script", help="JSON replay script.")
    parser.add_argument("--document", help="Animation document (or level document in level mode) to start from.")
    parser.add_argument("--save", help="Write the resulting document to this path.")
    parser.add_argument("--config", help="Editor config JSON overrides.")
    args = parser.parse_args(argv)

    try:
        with open(args.script, "r", encoding="utf-8") as handle:
            script = json.load(handle)
        if not isinstance(script, dict):
            raise ReplayError("Replay script must be a JSON object.")
        session = build_session(script, config_path=args.config)
        if args.document:
            if session.level_mode:
                session.load_tile_document(load_tile_grid(args.document).to_document())
            else:
                session.load_document(load_animation_set(args.document).to_document())
        steps = script.get("steps", [])
        if not isinstance(steps, list):
            raise ReplayError("'steps' must be a list.")
        replay(session, steps)
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.save:
        if session.level_mode:
            save_tile_grid(session.tile_grid, args.save)
        else:
            save_animation_set(session.animations, args.save)
        print(f"Saved document to {args.save}")
    print(json.dumps(summarize(session), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
