"""Unit creation and state rules (movement, fortification, sleep, roads)."""
from __future__ import annotations

from .types import (
    Unit, UnitType, UnitCategory, Position, GameState, FortificationState,
    ImprovementKind, TerrainKind, UNIT_STATS,
)
from .world import WorldGrid
from .terrain import describe

FS = FortificationState


def new_unit(state: GameState, utype: UnitType, position: Position, owner_id: str,
             unit_id: str | None = None, veteran: bool = False) -> Unit:
    """Build a unit at full movement. The caller adds it to the state."""
    stats = UNIT_STATS[UnitType(utype)]
    return Unit(
        id=unit_id or state.next_id("unit"),
        owner_id=owner_id,
        type=UnitType(utype),
        position=position,
        movement_points=stats.movement,
        max_movement_points=stats.movement,
        is_veteran=veteran,
    )


def can_enter(unit: Unit, grid: WorldGrid, pos: Position) -> bool:
    if unit.stats.category == UnitCategory.NAVAL:
        return grid.terrain(pos) == TerrainKind.OCEAN
    return describe(grid.terrain(pos)).passable


def spend_movement(unit: Unit, amount: int) -> None:
    unit.movement_points = max(0, unit.movement_points - amount)


def is_queueable(unit: Unit) -> bool:
    """Whether a unit takes part in its owner's command queue this turn."""
    return unit.movement_points > 0 and unit.fortification == FS.ACTIVE


def start_fortifying(unit: Unit) -> bool:
    if not unit.stats.can_fortify:
        return False
    if unit.fortification not in (FS.FORTIFYING, FS.FORTIFIED):
        unit.fortification = FS.FORTIFYING
    unit.movement_points = 0
    return True


def put_to_sleep(unit: Unit) -> None:
    unit.fortification = FS.SLEEPING
    unit.movement_points = 0


def wake(unit: Unit) -> bool:
    """Clear fortify/sleep. Returns True if the state changed."""
    if unit.fortification in (FS.FORTIFYING, FS.FORTIFIED, FS.SLEEPING):
        unit.fortification = FS.ACTIVE
        return True
    return False


def start_road(unit: Unit, grid: WorldGrid) -> bool:
    if unit.type != UnitType.SETTLERS or unit.movement_points <= 0:
        return False
    tile = grid.tile(unit.position)
    if tile.has(ImprovementKind.ROAD) or not describe(tile.terrain).passable:
        return False
    unit.fortification = FS.BUILDING_ROAD
    unit.road_progress = 0
    unit.movement_points = 0
    return True


def advance_road(unit: Unit, grid: WorldGrid, turns_needed: int) -> bool:
    """One turn of road work. Returns True when the road is finished."""
    unit.road_progress += 1
    if unit.road_progress < turns_needed:
        return False
    tile = grid.tile(unit.position)
    if not tile.has(ImprovementKind.ROAD):
        tile.improvements.append(ImprovementKind.ROAD)
    unit.fortification = FS.ACTIVE
    unit.road_progress = 0
    return True


def refresh(unit: Unit) -> None:
    """Turn-start movement refresh. Fortifying units finish fortifying instead."""
    if unit.fortification == FS.FORTIFYING:
        unit.fortification = FS.FORTIFIED
    elif unit.fortification == FS.ACTIVE:
        unit.movement_points = unit.max_movement_points


def heal(unit: Unit, amount: int) -> None:
    unit.health = min(unit.max_health, unit.health + amount)
