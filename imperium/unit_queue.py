"""Per-turn queue of units still able to act, navigated with a cursor."""
from __future__ import annotations

from .types import GameState, Unit
from .units import is_queueable


class UnitQueue:
    def __init__(self):
        self.player_id: str | None = None
        self.unit_ids: list[str] = []
        self.index: int = -1

    def rebuild(self, state: GameState, player_id: str) -> None:
        self.player_id = player_id
        self.unit_ids = [u.id for u in state.player_units(player_id) if is_queueable(u)]
        self.index = 0 if self.unit_ids else -1

    def clear(self) -> None:
        self.unit_ids = []
        self.index = -1

    def __len__(self) -> int:
        return len(self.unit_ids)

    def __contains__(self, unit_id: str) -> bool:
        return unit_id in self.unit_ids

    @property
    def current_id(self) -> str | None:
        if 0 <= self.index < len(self.unit_ids):
            return self.unit_ids[self.index]
        return None

    def current(self, state: GameState) -> Unit | None:
        uid = self.current_id
        return state.unit(uid) if uid else None

    def next(self) -> str | None:
        if not self.unit_ids:
            return None
        self.index = (self.index + 1) % len(self.unit_ids)
        return self.unit_ids[self.index]

    def previous(self) -> str | None:
        if not self.unit_ids:
            return None
        self.index = (self.index - 1) % len(self.unit_ids)
        return self.unit_ids[self.index]

    def remove(self, unit_id: str) -> bool:
        """Drop a unit. The cursor keeps pointing at the unit that followed it."""
        if unit_id not in self.unit_ids:
            return False
        pos = self.unit_ids.index(unit_id)
        self.unit_ids.pop(pos)
        if not self.unit_ids:
            self.index = -1
        elif pos < self.index:
            self.index -= 1
        elif self.index >= len(self.unit_ids):
            self.index = 0
        return True
