from __future__ import annotations

import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from .board import beats, empty_slots, neighbors_of, stat_value
from .types import Card, Move, Side, opponent_of


CORNER_SLOTS = frozenset({0, 2, 6, 8})


class Tier(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


@dataclass(frozen=True)
class AISpec:
    """AI tuning parameters.

    normal_from_stage / hard_from_stage:
      first stage (inclusive) at which each tier takes over.
    corner_bonus:
      added by the hard tier for placements on a grid corner.
    mistake_rate:
      chance that the normal tier throws away its best move for a random one.
    """

    normal_from_stage: int = 4
    hard_from_stage: int = 8
    corner_bonus: float = 0.2
    mistake_rate: float = 0.3
    corner_slots: frozenset[int] = CORNER_SLOTS


def tier_for_stage(stage: object, spec: AISpec | None = None) -> Tier:
    """Resolve the AI tier for a stage number.

    Fractional stages behave like their floor (7.5 is still normal);
    anything below 1 or non-numeric is easy.
    """
    spec = spec or AISpec()
    value = stat_value(stage)
    if math.isnan(value):
        return Tier.EASY
    # boundaries are whole stages, so comparing the raw value equals flooring
    if value >= spec.hard_from_stage:
        return Tier.HARD
    if value >= spec.normal_from_stage:
        return Tier.NORMAL
    return Tier.EASY


def score_placement(
    grid: Sequence[Card | None],
    card: Card,
    slot: int,
    side: Side = "enemy",
    corner_bonus: float = 0.0,
    corner_slots: frozenset[int] = CORNER_SLOTS,
) -> float:
    """One point per opposing neighbour `card` would capture at `slot`."""
    target = opponent_of(side)
    score = 0.0
    for n in neighbors_of(slot):
        if n.target_index >= len(grid):
            continue
        defender = grid[n.target_index]
        if defender is not None and defender.owner == target and beats(card, defender, n):
            score += 1.0
    if corner_bonus and slot in corner_slots:
        score += corner_bonus
    return score


def random_move(rng: random.Random, slots: Sequence[int], hand: Sequence[Card]) -> Move:
    return Move(target_slot=rng.choice(slots), hand_idx=rng.randrange(len(hand)))


def best_move(
    grid: Sequence[Card | None],
    hand: Sequence[Card],
    slots: Sequence[int],
    side: Side,
    corner_bonus: float = 0.0,
    corner_slots: frozenset[int] = CORNER_SLOTS,
) -> Move:
    best: Move | None = None
    max_score = -1.0
    for hand_idx, card in enumerate(hand):
        for slot in slots:
            score = score_placement(grid, card, slot, side, corner_bonus, corner_slots)
            # first candidate wins ties
            if score > max_score:
                max_score = score
                best = Move(target_slot=slot, hand_idx=hand_idx)
    if best is None:
        return Move(target_slot=slots[0], hand_idx=0)
    return best


@dataclass(frozen=True)
class _Turn:
    grid: Sequence[Card | None]
    hand: Sequence[Card]
    slots: list[int]
    side: Side
    rng: random.Random
    spec: AISpec


def _easy(turn: _Turn) -> Move:
    return random_move(turn.rng, turn.slots, turn.hand)


def _normal(turn: _Turn) -> Move:
    move = best_move(turn.grid, turn.hand, turn.slots, turn.side)
    if turn.rng.random() < turn.spec.mistake_rate:
        return random_move(turn.rng, turn.slots, turn.hand)
    return move


def _hard(turn: _Turn) -> Move:
    return best_move(
        turn.grid,
        turn.hand,
        turn.slots,
        turn.side,
        corner_bonus=turn.spec.corner_bonus,
        corner_slots=turn.spec.corner_slots,
    )


STRATEGIES: dict[Tier, Callable[[_Turn], Move]] = {
    Tier.EASY: _easy,
    Tier.NORMAL: _normal,
    Tier.HARD: _hard,
}


def select_ai_move(
    grid: Sequence[Card | None],
    hand: Sequence[Card],
    stage: object = 1,
    *,
    rng: random.Random | None = None,
    spec: AISpec | None = None,
    side: Side = "enemy",
) -> Move | None:
    """Pick a (hand card, empty slot) placement for the AI side.

    Returns None when the grid is full or the hand is empty. Pass a seeded
    `rng` for deterministic play; only the easy and normal tiers consume it.
    """
    slots = empty_slots(grid)
    if not slots or not hand:
        return None
    spec = spec or AISpec()
    turn = _Turn(
        grid=grid,
        hand=hand,
        slots=slots,
        side=side,
        rng=rng if rng is not None else random.Random(),
        spec=spec,
    )
    return STRATEGIES[tier_for_stage(stage, spec)](turn)
