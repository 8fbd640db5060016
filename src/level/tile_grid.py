import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from src.core import config


@dataclass(frozen=True)
class Tile:
    gx: int
    gy: int
    image_ref: Any


def cell_key(gx: int, gy: int) -> str:
    return f"{gx},{gy}"


def parse_cell_key(key: str) -> Optional[Tuple[int, int]]:
    try:
        x_str, y_str = str(key).split(",")
        return int(x_str), int(y_str)
    except ValueError:
        return None


class TileGrid:
    """Sparse level grid keyed by ``"gx,gy"``; a missing key is an empty cell."""

    def __init__(self, cell_size: int = config.TILE_GRID_SIZE) -> None:
        self.cell_size = cell_size
        self.tiles: Dict[str, Tile] = {}

    # Construction helpers -------------------------------------------------
    @classmethod
    def from_document(cls, raw: Any, cell_size: int = config.TILE_GRID_SIZE) -> "TileGrid":
        grid = cls(cell_size=cell_size)
        raw = raw if isinstance(raw, dict) else {}
        for key, value in raw.items():
            coord = parse_cell_key(key)
            if coord is None or not isinstance(value, dict):
                continue
            gx, gy = coord
            grid.tiles[cell_key(gx, gy)] = Tile(gx, gy, value.get("imageRef"))
        return grid

    def to_document(self) -> Dict[str, Dict[str, Any]]:
        return {key: {"imageRef": tile.image_ref} for key, tile in self.tiles.items()}

    # Queries --------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles.values())

    def cell_for(self, point: Tuple[float, float]) -> Tuple[int, int]:
        return math.floor(point[0] / self.cell_size), math.floor(point[1] / self.cell_size)

    def tile_at(self, gx: int, gy: int) -> Optional[Tile]:
        return self.tiles.get(cell_key(gx, gy))

    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Inclusive (min_gx, min_gy, max_gx, max_gy) of painted cells."""
        if not self.tiles:
            return None
        xs = [tile.gx for tile in self.tiles.values()]
        ys = [tile.gy for tile in self.tiles.values()]
        return min(xs), min(ys), max(xs), max(ys)

    # Mutators -------------------------------------------------------------
    def paint(self, point: Tuple[float, float], brush_ref: Any) -> Tile:
        gx, gy = self.cell_for(point)
        tile = Tile(gx, gy, brush_ref)
        self.tiles[cell_key(gx, gy)] = tile
        return tile

    def erase(self, point: Tuple[float, float]) -> bool:
        gx, gy = self.cell_for(point)
        return self.tiles.pop(cell_key(gx, gy), None) is not None

    def clear(self) -> None:
        self.tiles.clear()
