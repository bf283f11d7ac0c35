from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

from triadtcg.client.pygame_app.scene_base import WINDOW_TITLE, to_battle, to_stage_select
from triadtcg.client.pygame_app.scenes.battle import BattleScene
from triadtcg.client.pygame_app.scenes.boot import BootScene
from triadtcg.engine.ai import AISpec
from triadtcg.engine.battle import BattleState, ai_take_turn, new_battle
from triadtcg.engine.types import CardDatabase, CardDefinition
from triadtcg.paths import get_paths
from triadtcg.services.content import ContentService
from triadtcg.services.telemetry import TelemetryService


def _finished_battle() -> BattleState:
    stone = CardDefinition(id="stone", name="Stone", rarity="common", stats=(3, 3, 3, 3), art_path="stone.png")
    state = new_battle(CardDatabase(cards={"stone": stone}), ["stone"] * 5, ["stone"] * 5, seed=4, stage=2)
    while state.winner is None:
        ai_take_turn(state, side=state.current_side)
    return state


def _scene(telemetry: TelemetryService) -> BattleScene:
    ctx = SimpleNamespace(telemetry=telemetry)
    return BattleScene(ctx, _finished_battle(), AISpec())  # type: ignore[arg-type]


def test_finished_battle_is_logged_once(tmp_path: Path) -> None:
    path = tmp_path / "telemetry.jsonl"
    scene = _scene(TelemetryService(path))

    assert scene.update(0.016) is None
    assert scene.update(0.016) is None

    recs = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [r["type"] for r in recs] == ["battle_ended"]
    assert recs[0]["payload"]["stage"] == 2


def test_unwritable_telemetry_does_not_stop_the_scene(tmp_path: Path) -> None:
    blocker = tmp_path / "userdata"
    blocker.write_text("not a directory", encoding="utf-8")
    scene = _scene(TelemetryService(blocker / "telemetry.jsonl"))

    assert scene.update(0.016) is None
    assert scene._message.startswith("Result not saved")
    # the failed write is not retried every frame
    scene._message = ""
    assert scene.update(0.016) is None
    assert scene._message == ""


def test_transitions_set_window_title() -> None:
    scene = object()
    assert to_stage_select(scene).caption == WINDOW_TITLE  # type: ignore[arg-type]
    tr = to_battle(scene, 8, "hard")  # type: ignore[arg-type]
    assert tr.next_scene is scene
    assert tr.caption == f"{WINDOW_TITLE} - Stage 8 (hard)"


def test_boot_error_screen_survives_unwritable_userdata(tmp_path: Path) -> None:
    blocker = tmp_path / "userdata"
    blocker.write_text("not a directory", encoding="utf-8")
    paths = get_paths(blocker)
    ctx = SimpleNamespace(
        cards=None,
        paths=paths,
        content=ContentService(paths.data_dir, paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_file),
    )
    scene = BootScene(ctx)  # type: ignore[arg-type]

    assert scene.update(0.016) is None
    assert scene._error is not None
    assert ctx.cards is not None  # content loaded; only the userdata dir failed
