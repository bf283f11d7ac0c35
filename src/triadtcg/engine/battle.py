from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Literal, Sequence

from .actions import Action, PlaceCardAction
from .ai import AISpec, select_ai_move
from .board import CELL_COUNT, empty_slots, resolve_flips, tally_score
from .types import SIDES, Card, CardDatabase, Grid, Side, opponent_of

Event = dict[str, object]
Winner = Literal["player", "enemy"]


@dataclass(frozen=True)
class BattleConfig:
    hand_size: int = 5
    first_side: Side = "player"


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    flipped: list[int] = field(default_factory=list)
    error: str | None = None


@dataclass
class BattleState:
    cards: CardDatabase
    config: BattleConfig
    seed: int
    stage: int
    rng: random.Random
    grid: Grid
    hands: dict[Side, list[Card]]
    current_side: Side = "player"
    winner: Winner | None = None
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)


def _reject(msg: str) -> StepResult:
    return StepResult(ok=False, events=[], error=msg)


def _check_end(state: BattleState) -> None:
    if state.winner is not None or empty_slots(state.grid):
        return
    score = tally_score(state.grid)
    # nine cells split between two sides never tie
    state.winner = "player" if score.player > score.enemy else "enemy"
    state.event_log.append({"type": "BATTLE_ENDED", "winner": state.winner, "score": score.as_dict()})


def _place(state: BattleState, action: PlaceCardAction) -> StepResult:
    if action.side != state.current_side:
        return _reject("Not your turn.")
    hand = state.hands[action.side]
    if action.hand_index < 0 or action.hand_index >= len(hand):
        return _reject("Invalid hand index.")
    if action.slot < 0 or action.slot >= CELL_COUNT:
        return _reject("Invalid slot.")
    if state.grid[action.slot] is not None:
        return _reject("Slot is occupied.")

    before = len(state.event_log)
    card = hand.pop(action.hand_index)
    card.owner = action.side
    state.grid[action.slot] = card
    state.event_log.append(
        {"type": "CARD_PLACED", "side": action.side, "slot": action.slot, "card_id": card.card_id}
    )

    flipped = resolve_flips(state.grid, action.slot)
    for idx in flipped:
        state.event_log.append({"type": "CARD_FLIPPED", "slot": idx, "owner": action.side})

    state.current_side = opponent_of(state.current_side)
    _check_end(state)
    return StepResult(ok=True, events=state.event_log[before:], flipped=flipped)


def step(state: BattleState, action: Action) -> StepResult:
    """Apply a single placement to the battle.

    This mutates `state` in-place but remains deterministic for a given
    (seed, hands, stage, action sequence).
    """
    if state.winner is not None:
        return _reject("Battle already ended.")

    # Log first so replay has a full record of attempted actions
    state.action_log.append(action)

    if isinstance(action, PlaceCardAction):
        return _place(state, action)
    return _reject("Unknown action.")


def ai_take_turn(
    state: BattleState,
    side: Side = "enemy",
    spec: AISpec | None = None,
    stage: int | None = None,
) -> StepResult | None:
    """Let the AI place one card for `side`.

    Uses the battle RNG (`state.rng`) so the AI stays deterministic for a seed.
    `stage` overrides the battle stage for this turn only.
    Returns None when it is not `side`'s turn or there is nothing to play.
    """
    if state.winner is not None or state.current_side != side:
        return None
    move = select_ai_move(
        state.grid,
        state.hands[side],
        state.stage if stage is None else stage,
        rng=state.rng,
        spec=spec,
        side=side,
    )
    if move is None:
        return None
    return step(state, PlaceCardAction(side=side, hand_index=move.hand_idx, slot=move.target_slot))


def _build_hand(cards: CardDatabase, ids: Sequence[str], owner: Side) -> list[Card]:
    return [cards.get(cid).instantiate(owner) for cid in ids]


def new_battle(
    cards: CardDatabase,
    player_hand: Sequence[str],
    enemy_hand: Sequence[str],
    seed: int,
    stage: int = 1,
    config: BattleConfig | None = None,
) -> BattleState:
    cfg = config or BattleConfig()
    if cfg.hand_size < (CELL_COUNT + 1) // 2:
        raise ValueError(f"Hand size must be at least {(CELL_COUNT + 1) // 2} to fill the grid.")
    if len(player_hand) != cfg.hand_size or len(enemy_hand) != cfg.hand_size:
        raise ValueError(f"Hands must be exactly {cfg.hand_size} cards.")
    if cfg.first_side not in SIDES:
        raise ValueError(f"Unknown side: {cfg.first_side}")
    if isinstance(stage, bool) or not isinstance(stage, int) or stage < 1:
        raise ValueError("Stage must be a positive integer.")

    state = BattleState(
        cards=cards,
        config=cfg,
        seed=seed,
        stage=stage,
        rng=random.Random(seed),
        grid=[None for _ in range(CELL_COUNT)],
        hands={
            "player": _build_hand(cards, player_hand, "player"),
            "enemy": _build_hand(cards, enemy_hand, "enemy"),
        },
        current_side=cfg.first_side,
    )
    state.event_log.append(
        {"type": "BATTLE_STARTED", "stage": stage, "seed": seed, "first_side": cfg.first_side}
    )
    return state


def replay(
    cards: CardDatabase,
    player_hand: Sequence[str],
    enemy_hand: Sequence[str],
    seed: int,
    actions: Iterable[Action],
    stage: int = 1,
    config: BattleConfig | None = None,
) -> BattleState:
    state = new_battle(cards, player_hand, enemy_hand, seed=seed, stage=stage, config=config)
    for a in actions:
        step(state, a)
        if state.winner is not None:
            break
    return state
