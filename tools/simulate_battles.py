from __future__ import annotations

import argparse
import random
from collections import Counter

from triadtcg.engine.ai import AISpec, tier_for_stage
from triadtcg.engine.battle import BattleConfig, BattleState, ai_take_turn, new_battle
from triadtcg.engine.board import tally_score
from triadtcg.paths import get_paths
from triadtcg.services.content import ContentService, starter_hands


def play_out(state: BattleState, player_stage: int, spec: AISpec) -> None:
    """Drive both sides with the AI until the battle ends.

    The enemy plays at the battle stage; the player side plays at `player_stage`.
    """
    while state.winner is None:
        if state.current_side == "player":
            res = ai_take_turn(state, side="player", spec=spec, stage=player_stage)
        else:
            res = ai_take_turn(state, side="enemy", spec=spec)
        if res is None or not res.ok:
            return


def main() -> int:
    parser = argparse.ArgumentParser(prog="simulate_battles")
    parser.add_argument("--games", type=int, default=200)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--stage-a", type=int, default=1, help="stage played by the player side")
    parser.add_argument("--stage-b", type=int, default=8, help="stage played by the enemy side")
    args = parser.parse_args()

    paths = get_paths()
    cards = ContentService(paths.data_dir, paths.schema_dir).load_cards_db()
    cfg = BattleConfig()
    spec = AISpec()
    deal_rng = random.Random(args.seed)

    results: Counter[str] = Counter()
    captured = 0
    for game in range(args.games):
        player_hand, enemy_hand = starter_hands(cards, deal_rng, cfg.hand_size)
        state = new_battle(
            cards, player_hand, enemy_hand, seed=args.seed + game, stage=args.stage_b, config=cfg
        )
        play_out(state, args.stage_a, spec)
        results[str(state.winner)] += 1
        captured += tally_score(state.grid).enemy

    tier_a = tier_for_stage(args.stage_a, spec).value
    tier_b = tier_for_stage(args.stage_b, spec).value
    print(f"{args.games} battles: player stage {args.stage_a} ({tier_a}) vs enemy stage {args.stage_b} ({tier_b})")
    for key in ("player", "enemy"):
        print(f"  {key:>6}: {results[key]}")
    if args.games:
        print(f"  mean enemy cells: {captured / args.games:.2f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
