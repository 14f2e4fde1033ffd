"""Core data types for Imperium."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .world import WorldGrid


class TerrainKind(str, Enum):
    GRASSLAND = "grassland"
    PLAINS = "plains"
    DESERT = "desert"
    FOREST = "forest"
    HILLS = "hills"
    MOUNTAINS = "mountains"
    OCEAN = "ocean"
    RIVER = "river"
    JUNGLE = "jungle"
    SWAMP = "swamp"
    ARCTIC = "arctic"
    TUNDRA = "tundra"


class ResourceKind(str, Enum):
    WHEAT = "wheat"
    GOLD = "gold"
    IRON = "iron"
    HORSES = "horses"
    FISH = "fish"
    SEAL = "seal"
    OASIS = "oasis"
    GAME = "game"
    COAL = "coal"
    GEM = "gem"
    OIL = "oil"


class ImprovementKind(str, Enum):
    ROAD = "road"
    IRRIGATION = "irrigation"
    MINE = "mine"
    FARM = "farm"
    FORTRESS = "fortress"


class TechId(str, Enum):
    POTTERY = "pottery"
    WARRIOR_CODE = "warrior_code"
    ALPHABET = "alphabet"
    CEREMONIAL_BURIAL = "ceremonial_burial"
    BRONZE_WORKING = "bronze_working"
    MASONRY = "masonry"
    HORSEBACK_RIDING = "horseback_riding"
    THE_WHEEL = "the_wheel"
    MYSTICISM = "mysticism"
    POLYTHEISM = "polytheism"
    MONARCHY = "monarchy"
    IRON_WORKING = "iron_working"
    WRITING = "writing"
    MAP_MAKING = "map_making"
    MATHEMATICS = "mathematics"
    CURRENCY = "currency"
    TRADE = "trade"
    CONSTRUCTION = "construction"
    THE_REPUBLIC = "the_republic"
    LITERACY = "literacy"
    SEAFARING = "seafaring"
    FEUDALISM = "feudalism"
    MONOTHEISM = "monotheism"
    CHIVALRY = "chivalry"
    ASTRONOMY = "astronomy"
    NAVIGATION = "navigation"
    PHILOSOPHY = "philosophy"
    INVENTION = "invention"
    UNIVERSITY = "university"
    GUNPOWDER = "gunpowder"
    COMMUNISM = "communism"
    DEMOCRACY = "democracy"


class GamePhase(str, Enum):
    SETUP = "setup"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class GovernmentType(str, Enum):
    DESPOTISM = "despotism"
    ANARCHY = "anarchy"
    MONARCHY = "monarchy"
    COMMUNISM = "communism"
    REPUBLIC = "republic"
    DEMOCRACY = "democracy"


class FortificationState(str, Enum):
    ACTIVE = "active"
    FORTIFYING = "fortifying"
    FORTIFIED = "fortified"
    SLEEPING = "sleeping"
    BUILDING_ROAD = "building_road"


class UnitCategory(str, Enum):
    LAND = "land"
    NAVAL = "naval"


class UnitRole(str, Enum):
    SETTLER = "settler"
    MILITARY = "military"
    DEFAULT = "default"


class UnitType(str, Enum):
    SETTLERS = "settlers"
    WARRIOR = "warrior"
    PHALANX = "phalanx"
    ARCHER = "archer"
    LEGION = "legion"
    CAVALRY = "cavalry"
    CHARIOT = "chariot"
    CATAPULT = "catapult"
    KNIGHTS = "knights"
    MUSKETEERS = "musketeers"
    SCOUT = "scout"
    DIPLOMAT = "diplomat"
    CARAVAN = "caravan"
    TRIREME = "trireme"


@dataclass(frozen=True)
class UnitStats:
    attack: int
    defense: int
    movement: int
    cost: int
    category: UnitCategory = UnitCategory.LAND
    tech: TechId | None = None
    can_attack: bool = True
    can_fortify: bool = True

    @property
    def role(self) -> UnitRole:
        if self.category == UnitCategory.LAND and self.can_attack:
            return UnitRole.MILITARY
        return UnitRole.DEFAULT


UNIT_STATS: dict[UnitType, UnitStats] = {
    #                      att def mov cost
    UnitType.SETTLERS:   UnitStats(0, 1, 1, 4, can_attack=False, can_fortify=False),
    UnitType.WARRIOR:    UnitStats(1, 1, 1, 2),
    UnitType.PHALANX:    UnitStats(1, 2, 1, 3, tech=TechId.BRONZE_WORKING),
    UnitType.ARCHER:     UnitStats(2, 1, 1, 3, tech=TechId.WARRIOR_CODE),
    UnitType.LEGION:     UnitStats(3, 1, 1, 4, tech=TechId.IRON_WORKING),
    UnitType.CAVALRY:    UnitStats(2, 1, 2, 2, tech=TechId.HORSEBACK_RIDING),
    UnitType.CHARIOT:    UnitStats(4, 1, 2, 4, tech=TechId.THE_WHEEL),
    UnitType.CATAPULT:   UnitStats(6, 1, 1, 4, tech=TechId.MATHEMATICS),
    UnitType.KNIGHTS:    UnitStats(4, 2, 2, 4, tech=TechId.CHIVALRY),
    UnitType.MUSKETEERS: UnitStats(2, 3, 1, 3, tech=TechId.GUNPOWDER),
    UnitType.SCOUT:      UnitStats(0, 1, 2, 2, can_attack=False),
    UnitType.DIPLOMAT:   UnitStats(0, 0, 2, 3, tech=TechId.WRITING, can_attack=False, can_fortify=False),
    UnitType.CARAVAN:    UnitStats(0, 1, 1, 5, tech=TechId.TRADE, can_attack=False, can_fortify=False),
    UnitType.TRIREME:    UnitStats(1, 0, 3, 4, category=UnitCategory.NAVAL, tech=TechId.MAP_MAKING,
                                   can_fortify=False),
}


def unit_role(utype: UnitType) -> UnitRole:
    if utype == UnitType.SETTLERS:
        return UnitRole.SETTLER
    return UNIT_STATS[utype].role


class BuildingType(str, Enum):
    BARRACKS = "barracks"
    GRANARY = "granary"
    TEMPLE = "temple"
    LIBRARY = "library"
    MARKETPLACE = "marketplace"
    CITY_WALLS = "city_walls"
    AQUEDUCT = "aqueduct"
    PALACE = "palace"
    PYRAMIDS = "pyramids"
    HANGING_GARDENS = "hanging_gardens"
    GREAT_LIBRARY = "great_library"
    COLOSSUS = "colossus"


@dataclass(frozen=True)
class BuildingStats:
    cost: int
    maintenance: int = 0
    tech: TechId | None = None
    production: int = 0
    food: int = 0
    gold: int = 0
    culture: int = 0
    science_pct: int = 0
    gold_pct: int = 0
    defense: float = 1.0
    veteran_units: bool = False
    wonder: bool = False


BUILDING_STATS: dict[BuildingType, BuildingStats] = {
    BuildingType.BARRACKS:        BuildingStats(4, 1, production=1, veteran_units=True),
    BuildingType.GRANARY:         BuildingStats(6, 1, TechId.POTTERY, food=1),
    BuildingType.TEMPLE:          BuildingStats(6, 1, TechId.CEREMONIAL_BURIAL, gold=2, culture=2),
    BuildingType.LIBRARY:         BuildingStats(8, 1, TechId.WRITING, science_pct=50),
    BuildingType.MARKETPLACE:     BuildingStats(8, 1, TechId.CURRENCY, gold_pct=50),
    BuildingType.CITY_WALLS:      BuildingStats(10, 2, TechId.MASONRY, defense=3.0),
    BuildingType.AQUEDUCT:        BuildingStats(12, 2, TechId.CONSTRUCTION),
    BuildingType.PALACE:          BuildingStats(20, 0, TechId.MASONRY, culture=1),
    BuildingType.PYRAMIDS:        BuildingStats(20, 0, TechId.BRONZE_WORKING, production=2, wonder=True),
    BuildingType.HANGING_GARDENS: BuildingStats(24, 0, TechId.POTTERY, food=2, wonder=True),
    BuildingType.GREAT_LIBRARY:   BuildingStats(30, 0, TechId.LITERACY, science_pct=50, wonder=True),
    BuildingType.COLOSSUS:        BuildingStats(20, 0, TechId.BRONZE_WORKING, gold_pct=50, wonder=True),
}


@dataclass(frozen=True)
class GovernmentStats:
    tech: TechId | None
    tax_collection: bool = True
    maintenance: bool = True
    research: bool = True
    tile_penalty: bool = False  # yields of 3+ lose one point
    trade_bonus: int = 0


GOVERNMENTS: dict[GovernmentType, GovernmentStats] = {
    GovernmentType.DESPOTISM: GovernmentStats(None, tile_penalty=True),
    GovernmentType.ANARCHY:   GovernmentStats(None, tax_collection=False, maintenance=False,
                                              research=False, tile_penalty=True),
    GovernmentType.MONARCHY:  GovernmentStats(TechId.MONARCHY),
    GovernmentType.COMMUNISM: GovernmentStats(TechId.COMMUNISM),
    GovernmentType.REPUBLIC:  GovernmentStats(TechId.THE_REPUBLIC, trade_bonus=1),
    GovernmentType.DEMOCRACY: GovernmentStats(TechId.DEMOCRACY, trade_bonus=1),
}


class ProductionKind(str, Enum):
    UNIT = "unit"
    BUILDING = "building"
    WONDER = "wonder"


# ── Entities ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Position:
        return Position(self.x + dx, self.y + dy)


@dataclass
class Tile:
    position: Position
    terrain: TerrainKind
    resources: set[ResourceKind] = field(default_factory=set)
    improvements: list[ImprovementKind] = field(default_factory=list)

    def has(self, improvement: ImprovementKind) -> bool:
        return improvement in self.improvements


@dataclass
class Unit:
    id: str
    owner_id: str
    type: UnitType
    position: Position
    movement_points: int
    max_movement_points: int
    health: int = 100
    max_health: int = 100
    experience: int = 0
    is_veteran: bool = False
    fortification: FortificationState = FortificationState.ACTIVE
    road_progress: int = 0

    @property
    def stats(self) -> UnitStats:
        return UNIT_STATS[self.type]

    @property
    def is_active(self) -> bool:
        return self.fortification == FortificationState.ACTIVE


@dataclass
class ProductionOrder:
    kind: ProductionKind
    item: UnitType | BuildingType
    turns_remaining: int

    @property
    def cost(self) -> int:
        if self.kind == ProductionKind.UNIT:
            return UNIT_STATS[self.item].cost
        return BUILDING_STATS[self.item].cost


@dataclass
class City:
    id: str
    owner_id: str
    name: str
    position: Position
    population: int = 1
    food: int = 0
    production_points: int = 0
    science: int = 0
    culture: int = 0
    buildings: list[BuildingType] = field(default_factory=list)
    current_production: ProductionOrder | None = None
    worked_tiles: set[tuple[int, int]] = field(default_factory=set)

    def has_building(self, btype: BuildingType) -> bool:
        return btype in self.buildings


@dataclass
class Player:
    id: str
    name: str
    is_human: bool
    color: str
    civilization: str
    government: GovernmentType = GovernmentType.DESPOTISM
    technologies: set[TechId] = field(default_factory=set)
    science: int = 0
    gold: int = 0
    culture: int = 0
    current_research: TechId | None = None
    current_research_progress: int | None = None
    revolution_turns_remaining: int | None = None
    target_government: GovernmentType | None = None
    used_city_names: set[str] = field(default_factory=set)

    @property
    def in_anarchy(self) -> bool:
        return self.government == GovernmentType.ANARCHY


@dataclass
class CombatResult:
    attacker_id: str
    defender_id: str
    attacker_survived: bool
    defender_survived: bool
    attacker_health_delta: int
    defender_health_delta: int
    rounds: int = 0


@dataclass
class GameState:
    turn: int = 1
    current_player_id: str = ""
    players: list[Player] = field(default_factory=list)
    grid: WorldGrid | None = None
    units: list[Unit] = field(default_factory=list)
    cities: list[City] = field(default_factory=list)
    phase: GamePhase = GamePhase.SETUP
    wonders: dict[BuildingType, str] = field(default_factory=dict)  # wonder -> city id
    _uid: int = 0

    def next_id(self, prefix: str) -> str:
        self._uid += 1
        return f"{prefix}-{self._uid}"

    # ── Queries ──────────────────────────────────────────────────────────

    def player(self, pid: str) -> Player | None:
        return next((p for p in self.players if p.id == pid), None)

    def player_index(self, pid: str) -> int:
        for i, p in enumerate(self.players):
            if p.id == pid:
                return i
        return -1

    @property
    def current_player(self) -> Player | None:
        return self.player(self.current_player_id)

    def unit(self, uid: str) -> Unit | None:
        return next((u for u in self.units if u.id == uid), None)

    def city(self, cid: str) -> City | None:
        return next((c for c in self.cities if c.id == cid), None)

    def player_units(self, pid: str) -> list[Unit]:
        return [u for u in self.units if u.owner_id == pid]

    def player_cities(self, pid: str) -> list[City]:
        return [c for c in self.cities if c.owner_id == pid]

    def units_at(self, pos: Position) -> list[Unit]:
        return [u for u in self.units if u.position == pos]

    def city_at(self, pos: Position) -> City | None:
        return next((c for c in self.cities if c.position == pos), None)

