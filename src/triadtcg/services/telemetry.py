from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from triadtcg.engine.battle import BattleState
from triadtcg.engine.board import tally_score


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class TelemetryService:
    """Append-only JSONL sink; every record carries the id of the run that wrote it."""

    path: Path
    session_id: str = field(default_factory=_new_session_id)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "session": self.session_id,
            "type": event_type,
            "payload": dict(payload),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def log_battle(self, state: BattleState) -> None:
        self.log(
            "battle_ended",
            {
                "stage": state.stage,
                "seed": state.seed,
                "winner": state.winner,
                "score": tally_score(state.grid).as_dict(),
                "placements": len(state.action_log),
            },
        )

