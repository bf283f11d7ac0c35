from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

Side = Literal["player", "enemy"]
Rarity = Literal["common", "rare", "epic", "legendary"]

SIDES: tuple[Side, Side] = ("player", "enemy")

# Facing stat indices
TOP = 0
BOTTOM = 1
LEFT = 2
RIGHT = 3

# Raw stat values may be numeric strings straight from content files.
StatValue = int | float | str | None


def opponent_of(side: Side) -> Side:
    return "enemy" if side == "player" else "player"


@dataclass
class Card:
    """A card on the grid or in a hand.

    `owner` is mutable: flip resolution re-owns cards in place.
    """

    owner: Side
    stats: Sequence[StatValue] | None
    card_id: str | None = None
    name: str | None = None


Grid = list[Card | None]


@dataclass(frozen=True)
class NeighborDescriptor:
    target_index: int
    attacker_stat_index: int
    defender_stat_index: int


@dataclass(frozen=True)
class Move:
    target_slot: int
    hand_idx: int


@dataclass(frozen=True)
class Score:
    player: int
    enemy: int

    def as_dict(self) -> dict[str, int]:
        return {"player": self.player, "enemy": self.enemy}


@dataclass(frozen=True)
class CardDefinition:
    id: str
    name: str
    rarity: Rarity
    stats: tuple[StatValue, StatValue, StatValue, StatValue]
    art_path: str

    def instantiate(self, owner: Side) -> Card:
        return Card(owner=owner, stats=self.stats, card_id=self.id, name=self.name)


@dataclass(frozen=True)
class CardDatabase:
    """Immutable card catalog used by the battle host."""

    cards: dict[str, CardDefinition]

    def get(self, card_id: str) -> CardDefinition:
        return self.cards[card_id]

    def all_ids(self) -> Sequence[str]:
        return list(self.cards.keys())
