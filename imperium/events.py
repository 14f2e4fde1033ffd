"""Typed, synchronous event bus for engine notifications."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, TypeVar

from .types import (
    GameState, Unit, City, Position, CombatResult, GamePhase, TechId, GovernmentType,
    ProductionOrder, BuildingType, UnitType,
)

log = logging.getLogger(__name__)


@dataclass
class Event:
    name: ClassVar[str] = "event"


@dataclass
class GameInitialized(Event):
    name: ClassVar[str] = "gameInitialized"
    state: GameState


@dataclass
class TurnEnded(Event):
    name: ClassVar[str] = "turnEnded"
    state: GameState


@dataclass
class UnitMoved(Event):
    name: ClassVar[str] = "unitMoved"
    unit: Unit
    new_position: Position


@dataclass
class UnitCreated(Event):
    name: ClassVar[str] = "unitCreated"
    unit: Unit


@dataclass
class UnitDestroyed(Event):
    name: ClassVar[str] = "unitDestroyed"
    unit: Unit


@dataclass
class UnitFortified(Event):
    name: ClassVar[str] = "unitFortified"
    unit: Unit


@dataclass
class UnitWoken(Event):
    name: ClassVar[str] = "unitWoken"
    unit: Unit


@dataclass
class CityFounded(Event):
    name: ClassVar[str] = "cityFounded"
    city: City


@dataclass
class CityGrew(Event):
    name: ClassVar[str] = "cityGrew"
    city: City
    population: int


@dataclass
class CityRenamed(Event):
    name: ClassVar[str] = "cityRenamed"
    city: City
    old_name: str


@dataclass
class CityProductionChanged(Event):
    name: ClassVar[str] = "cityProductionChanged"
    city: City
    order: ProductionOrder


@dataclass
class ProductionCompleted(Event):
    name: ClassVar[str] = "productionCompleted"
    city: City
    item: UnitType | BuildingType


@dataclass
class CombatResolved(Event):
    name: ClassVar[str] = "combatResolved"
    result: CombatResult


@dataclass
class UnitSelected(Event):
    name: ClassVar[str] = "unitSelected"
    unit: Unit
    index: int
    total: int


@dataclass
class UnitDeselected(Event):
    name: ClassVar[str] = "unitDeselected"


@dataclass
class UnitBlink(Event):
    name: ClassVar[str] = "unitBlink"
    unit: Unit


@dataclass
class EndOfTurn(Event):
    name: ClassVar[str] = "endOfTurn"
    player_id: str


@dataclass
class GamePhaseChanged(Event):
    name: ClassVar[str] = "gamePhaseChanged"
    phase: GamePhase


@dataclass
class ResearchTargetSet(Event):
    name: ClassVar[str] = "researchTargetSet"
    player_id: str
    tech: TechId


@dataclass
class TechnologyResearched(Event):
    name: ClassVar[str] = "technologyResearched"
    player_id: str
    tech: TechId


@dataclass
class RevolutionStarted(Event):
    name: ClassVar[str] = "revolutionStarted"
    player_id: str
    turns: int


@dataclass
class GovernmentChanged(Event):
    name: ClassVar[str] = "governmentChanged"
    player_id: str
    government: GovernmentType


E = TypeVar("E", bound=Event)
Handler = Callable[[E], None]


class EventBus:
    """Dispatches each event to handlers registered for its exact type, then to catch-alls."""

    def __init__(self):
        self._handlers: dict[type[Event], list[Callable]] = {}
        self._any: list[Callable[[Event], None]] = []

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        self._handlers.setdefault(event_type, []).append(handler)
        return lambda: self._handlers[event_type].remove(handler)

    def subscribe_all(self, handler: Callable[[Event], None]) -> Callable[[], None]:
        self._any.append(handler)
        return lambda: self._any.remove(handler)

    def publish(self, event: Event) -> None:
        log.debug("event %s", event.name)
        for handler in list(self._handlers.get(type(event), ())):
            handler(event)
        for handler in list(self._any):
            handler(event)
