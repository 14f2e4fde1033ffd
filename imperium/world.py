"""World grid: tile storage with a horizontally wrapping, vertically clamped topology."""
from __future__ import annotations
from dataclasses import dataclass, field

from .types import Position, Tile, TerrainKind
from .terrain import describe

# Neighbour enumeration order. AI tie-breaks depend on it.
DIRECTIONS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]


@dataclass
class WorldGrid:
    width: int
    height: int
    tiles: list[list[Tile]] = field(default_factory=list)  # tiles[y][x]

    @classmethod
    def filled(cls, width: int, height: int, terrain: TerrainKind = TerrainKind.GRASSLAND) -> WorldGrid:
        tiles = [[Tile(Position(x, y), terrain) for x in range(width)] for y in range(height)]
        return cls(width=width, height=height, tiles=tiles)

    @classmethod
    def from_rows(cls, rows: list[list[TerrainKind | str]]) -> WorldGrid:
        """Build a grid from rows of terrain kinds (row index is y)."""
        height = len(rows)
        width = len(rows[0])
        tiles = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} tiles, expected {width}")
            tiles.append([Tile(Position(x, y), TerrainKind(kind)) for x, kind in enumerate(row)])
        return cls(width=width, height=height, tiles=tiles)

    # ── Topology ─────────────────────────────────────────────────────────

    def normalize(self, pos: Position) -> Position:
        return Position(pos.x % self.width, min(max(pos.y, 0), self.height - 1))

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.y < self.height

    def neighbors8(self, pos: Position) -> list[Position]:
        pos = self.normalize(pos)
        out = []
        for dx, dy in DIRECTIONS:
            ny = pos.y + dy
            if 0 <= ny < self.height:
                out.append(Position((pos.x + dx) % self.width, ny))
        return out

    def wrapped_distance(self, a: Position, b: Position) -> int:
        a, b = self.normalize(a), self.normalize(b)
        dx = abs(a.x - b.x)
        return min(dx, self.width - dx) + abs(a.y - b.y)

    def is_adjacent(self, a: Position, b: Position) -> bool:
        return self.normalize(b) in self.neighbors8(a)

    def within(self, center: Position, radius: int) -> list[Position]:
        """Distinct normalized positions in the square of the given radius, x-major order."""
        seen: dict[Position, None] = {}
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                p = center.offset(dx, dy)
                if self.in_bounds(p):
                    seen.setdefault(self.normalize(p), None)
        return list(seen)

    # ── Tiles ────────────────────────────────────────────────────────────

    def tile(self, pos: Position) -> Tile:
        pos = self.normalize(pos)
        return self.tiles[pos.y][pos.x]

    def terrain(self, pos: Position) -> TerrainKind:
        return self.tile(pos).terrain

    def is_passable(self, pos: Position) -> bool:
        return describe(self.terrain(pos)).passable

    def can_found_city(self, pos: Position) -> bool:
        return describe(self.terrain(pos)).can_found_city

    def is_near(self, pos: Position, kind: TerrainKind) -> bool:
        return any(self.terrain(n) == kind for n in self.neighbors8(pos))

    def all_positions(self):
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)
