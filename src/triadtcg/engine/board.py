from __future__ import annotations

import math
import numbers
import re
from collections.abc import Sequence
from decimal import Decimal

from .types import (
    BOTTOM,
    LEFT,
    RIGHT,
    TOP,
    Card,
    NeighborDescriptor,
    Score,
)

GRID_SIZE = 3
CELL_COUNT = GRID_SIZE * GRID_SIZE


def neighbors_of(index: int) -> tuple[NeighborDescriptor, ...]:
    """Orthogonal neighbours of `index` in up, down, left, right order.

    Each descriptor names the attacker's facing stat and the neighbour's
    opposite face. Off-grid directions are omitted (no wraparound).
    """
    if index < 0 or index >= CELL_COUNT:
        return ()
    col = index % GRID_SIZE
    row = index // GRID_SIZE
    res: list[NeighborDescriptor] = []
    if row > 0:
        res.append(NeighborDescriptor(index - GRID_SIZE, TOP, BOTTOM))
    if row < GRID_SIZE - 1:
        res.append(NeighborDescriptor(index + GRID_SIZE, BOTTOM, TOP))
    if col > 0:
        res.append(NeighborDescriptor(index - 1, LEFT, RIGHT))
    if col < GRID_SIZE - 1:
        res.append(NeighborDescriptor(index + 1, RIGHT, LEFT))
    return tuple(res)


# trimmed strings accepted by JavaScript Number(); anything else is NaN
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INFINITY = re.compile(r"([+-]?)Infinity")
_PREFIXED = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def _parse_stat_string(raw: str) -> float:
    s = raw.strip()
    if not s:
        return 0.0
    if _DECIMAL.fullmatch(s):
        return float(s)
    m = _INFINITY.fullmatch(s)
    if m:
        return -math.inf if m.group(1) == "-" else math.inf
    if _PREFIXED.fullmatch(s):
        return float(int(s, 0))
    return math.nan


def stat_value(raw: object) -> float:
    """Coerce a raw facing stat to a number.

    Strings follow JavaScript ``Number()``, so ``"inf"``, ``"nan"`` and ``"1_0"``
    are not numbers. Real numbers of any type (``Decimal`` and ``Fraction``
    included) keep their value. Unparseable values become NaN, which never
    compares greater than anything.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        return _parse_stat_string(raw)
    if isinstance(raw, Decimal) and raw.is_nan():
        return math.nan
    if isinstance(raw, (numbers.Real, Decimal)):
        return float(raw)
    return math.nan


def card_stat(card: Card, stat_index: int) -> float:
    stats = card.stats
    if stats is None or stat_index >= len(stats):
        return math.nan
    return stat_value(stats[stat_index])


def beats(attacker: Card, defender: Card, n: NeighborDescriptor) -> bool:
    # strict: ties never flip
    return card_stat(attacker, n.attacker_stat_index) > card_stat(defender, n.defender_stat_index)


def _placed_card(grid: Sequence[Card | None], placed_index: int) -> Card | None:
    if placed_index < 0 or placed_index >= len(grid):
        return None
    card = grid[placed_index]
    if card is None or card.stats is None:
        return None
    return card


def preview_flips(grid: Sequence[Card | None], placed_index: int) -> list[int]:
    """Indices that placing at `placed_index` would capture. Does not mutate."""
    attacker = _placed_card(grid, placed_index)
    if attacker is None:
        return []
    flipped: list[int] = []
    for n in neighbors_of(placed_index):
        if n.target_index >= len(grid):
            continue
        defender = grid[n.target_index]
        if defender is None or defender.owner == attacker.owner:
            continue
        if beats(attacker, defender, n):
            flipped.append(n.target_index)
    return flipped


def resolve_flips(grid: Sequence[Card | None], placed_index: int) -> list[int]:
    """Capture beaten opposing neighbours of a freshly placed card.

    Captured cards are re-owned in place on the shared grid; the returned
    indices are in neighbour scan order. An empty or malformed placed slot
    is a no-op.
    """
    flipped = preview_flips(grid, placed_index)
    if not flipped:
        return flipped
    attacker = grid[placed_index]
    assert attacker is not None
    for idx in flipped:
        defender = grid[idx]
        assert defender is not None
        defender.owner = attacker.owner
    return flipped


def empty_slots(grid: Sequence[Card | None]) -> list[int]:
    return [i for i, c in enumerate(grid) if c is None]


def tally_score(grid: Sequence[Card | None]) -> Score:
    player = 0
    enemy = 0
    for card in grid:
        if card is None:
            continue
        if card.owner == "player":
            player += 1
        elif card.owner == "enemy":
            enemy += 1
    return Score(player=player, enemy=enemy)
