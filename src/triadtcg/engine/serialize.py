from __future__ import annotations


from .actions import Action, PlaceCardAction
from .battle import BattleState
from .board import tally_score
from .types import Card


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlaceCardAction):
        return {
            "type": "place",
            "side": a.side,
            "hand_index": a.hand_index,
            "slot": a.slot,
        }
    # should be unreachable
    return {"type": "unknown"}


def _card_to_dict(c: Card | None) -> dict[str, object] | None:
    if c is None:
        return None
    return {
        "card_id": c.card_id,
        "owner": c.owner,
        "stats": list(c.stats) if c.stats is not None else None,
    }


def snapshot(state: BattleState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current battle state."""
    return {
        "seed": state.seed,
        "stage": state.stage,
        "current_side": state.current_side,
        "winner": state.winner,
        "grid": [_card_to_dict(c) for c in state.grid],
        "hands": {side: [_card_to_dict(c) for c in hand] for side, hand in state.hands.items()},
        "score": tally_score(state.grid).as_dict(),
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
