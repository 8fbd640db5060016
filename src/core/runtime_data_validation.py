from __future__ import annotations

import json
import re
from typing import Any, Dict, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationError,
    field_validator,
)

from src.core import config

CELL_KEY_RE = re.compile(r"^-?\d+,-?\d+$")

# pydantic names the union member that failed; those names are not document keys.
_UNION_MEMBER_TAGS = frozenset({"_AnimationModel", "list[_FrameModel]"})


def format_location(loc: Sequence[Any]) -> str:
    """Render an error location as a document path, e.g. ``walk.frames[2].w``."""
    path = ""
    for item in loc:
        if isinstance(item, int):
            path += f"[{item}]"
        elif item not in _UNION_MEMBER_TAGS:
            path += f".{item}" if path else str(item)
    return path or "<root>"


class RuntimeDataValidationError(ValueError):
    """Raised when a persisted editor document fails schema validation.

    ``errors`` holds ``{"loc": tuple, "msg": str}`` entries, one per problem.
    """

    def __init__(self, source: str, errors: Sequence[Dict[str, Any]]) -> None:
        self.source = source
        self.errors = [
            {"loc": tuple(error.get("loc") or ()), "msg": str(error.get("msg", "Unknown validation error."))}
            for error in errors
        ]
        details = "".join(f"\n- {format_location(error['loc'])}: {error['msg']}" for error in self.errors)
        super().__init__(f"{source} failed validation with {len(self.errors)} error(s).{details}")

    @classmethod
    def from_pydantic(cls, source: str, exc: ValidationError) -> "RuntimeDataValidationError":
        return cls(source=source, errors=exc.errors())


class _SchemaModel(BaseModel):
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)


class _AnchorModel(_SchemaModel):
    x: float = 0.0
    y: float = 0.0


class _FrameModel(_SchemaModel):
    x: float
    y: float
    # Sizes below 1 are clamped when the frame is built, not rejected here.
    w: float
    h: float
    anchor: _AnchorModel | None = None


class _AnimationModel(_SchemaModel):
    fps: int | None = None
    frames: list[_FrameModel] = Field(default_factory=list)


class _AnimationDocumentModel(RootModel[Dict[str, Union[_AnimationModel, list[_FrameModel]]]]):
    @field_validator("root")
    @classmethod
    def _validate_names(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        for name in value:
            if not name.strip():
                raise ValueError("Animation names must be non-empty strings.")
        return value


class _TileModel(_SchemaModel):
    imageRef: Any

    @field_validator("imageRef")
    @classmethod
    def _require_image_ref(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("imageRef must be provided.")
        return value


class _TileGridModel(RootModel[Dict[str, _TileModel]]):
    @field_validator("root")
    @classmethod
    def _validate_cell_keys(cls, value: Dict[str, _TileModel]) -> Dict[str, _TileModel]:
        for key in value:
            if not CELL_KEY_RE.match(key):
                raise ValueError(f"Tile key '{key}' must look like 'gx,gy'.")
        return value


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _validate_model(model: Any, payload: Any, *, source: str) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RuntimeDataValidationError.from_pydantic(source, exc) from exc


def _frame_payload(frame: _FrameModel) -> dict[str, Any]:
    payload = frame.model_dump(exclude_none=True)
    if frame.anchor is None:
        payload["anchor"] = {"x": frame.w / 2, "y": frame.h}
    return payload


def validate_animation_document(payload: Any, *, source: str = "animations.json") -> dict[str, Any]:
    """Validate an animation document and return it in canonical form.

    Legacy entries stored as a bare frame list come back as
    ``{"fps": DEFAULT_FPS, "frames": [...]}``; frames without an anchor get
    the bottom-centre default.
    """
    validated = _validate_model(_AnimationDocumentModel, payload, source=source)
    document: dict[str, Any] = {}
    for name, entry in validated.root.items():
        if isinstance(entry, list):
            fps = config.DEFAULT_FPS
            frames = entry
        else:
            fps = entry.fps if entry.fps is not None and entry.fps > 0 else config.DEFAULT_FPS
            frames = entry.frames
        document[name] = {"fps": fps, "frames": [_frame_payload(frame) for frame in frames]}
    return document


def load_validated_animation_document(path: str) -> dict[str, Any]:
    payload = _read_json(path)
    return validate_animation_document(payload, source=path)


def validate_tile_grid_payload(payload: Any, *, source: str = "level.json") -> dict[str, Any]:
    validated = _validate_model(_TileGridModel, payload, source=source)
    return {key: {"imageRef": tile.imageRef} for key, tile in validated.root.items()}


def load_validated_tile_grid(path: str) -> dict[str, Any]:
    payload = _read_json(path)
    return validate_tile_grid_payload(payload, source=path)
