from __future__ import annotations

from dataclasses import dataclass

from .types import Side


@dataclass(frozen=True)
class PlaceCardAction:
    side: Side
    hand_index: int
    slot: int


Action = PlaceCardAction
