"""
Enemy roster for a single combat.

The roster is an arena of slots plus an id index. Removing an enemy leaves a
tombstone in its slot, so removal never rebuilds the list and iteration keeps
insertion order for deterministic message ordering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Optional

if TYPE_CHECKING:
    from .enemy import Enemy


class EnemyRoster:
    """Owned, indexed collection of the enemies still in a combat."""

    def __init__(self, enemies: Optional[Iterable[Enemy]] = None):
        self._slots: list[Optional[Enemy]] = []
        self._index: dict[str, int] = {}
        self._tombstones = 0
        for enemy in enemies or ():
            self.add(enemy)

    def add(self, enemy: Enemy) -> None:
        """Append an enemy.

        Raises:
            ValueError: If an enemy with the same id is already present
        """
        if enemy.enemy_id in self._index:
            raise ValueError(f"Enemy '{enemy.enemy_id}' is already in the roster")
        self._index[enemy.enemy_id] = len(self._slots)
        self._slots.append(enemy)

    def remove(self, enemy_id: str) -> Optional[Enemy]:
        """Tombstone an enemy's slot.

        Returns:
            The removed enemy, or None if it was not present
        """
        slot = self._index.pop(enemy_id, None)
        if slot is None:
            return None
        enemy = self._slots[slot]
        self._slots[slot] = None
        self._tombstones += 1
        if self._tombstones > len(self._index):
            self._compact()
        return enemy

    def replace(self, enemy_id: str, new_enemy: Enemy) -> bool:
        """Put new_enemy in the slot held by enemy_id, keeping its position."""
        slot = self._index.get(enemy_id)
        if slot is None or (new_enemy.enemy_id != enemy_id and new_enemy.enemy_id in self._index):
            return False
        del self._index[enemy_id]
        self._index[new_enemy.enemy_id] = slot
        self._slots[slot] = new_enemy
        return True

    def get(self, enemy_id: str) -> Optional[Enemy]:
        slot = self._index.get(enemy_id)
        return None if slot is None else self._slots[slot]

    def contains(self, enemy: Enemy) -> bool:
        """True if this exact enemy is still in the roster."""
        return self.get(enemy.enemy_id) is enemy

    def clear(self) -> None:
        self._slots.clear()
        self._index.clear()
        self._tombstones = 0

    def to_list(self) -> list[Enemy]:
        return list(self)

    def _compact(self) -> None:
        """Drop tombstones once they outnumber live slots."""
        live = [enemy for enemy in self._slots if enemy is not None]
        self._slots = live
        self._index = {enemy.enemy_id: slot for slot, enemy in enumerate(live)}
        self._tombstones = 0

    def __iter__(self) -> Iterator[Enemy]:
        return (enemy for enemy in list(self._slots) if enemy is not None)

    def __len__(self) -> int:
        return len(self._index)

    def __bool__(self) -> bool:
        return bool(self._index)

    def __contains__(self, enemy_id: object) -> bool:
        return enemy_id in self._index
