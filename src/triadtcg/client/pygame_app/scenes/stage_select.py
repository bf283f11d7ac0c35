from __future__ import annotations

import random

import pygame  # type: ignore[import-not-found]

from triadtcg.engine.ai import tier_for_stage
from triadtcg.engine.battle import BattleConfig, new_battle
from triadtcg.services.content import starter_hands

from ..app import GameContext
from ..scene_base import SceneTransition, to_battle
from ..ui import Button, draw_text
from .battle import BattleScene

MAX_STAGE = 10


class StageSelectScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._buttons: list[Button] = []
        self._build_ui()

    def _build_ui(self) -> None:
        x0, y0 = 60, 160
        w, h = 180, 56
        gap = 14
        for i in range(MAX_STAGE):
            stage = i + 1
            col, row = i % 2, i // 2
            self._buttons.append(
                Button(
                    rect=pygame.Rect(x0 + col * (w + gap), y0 + row * (h + gap), w, h),
                    text=f"Stage {stage} ({tier_for_stage(stage, self.ctx.ai_spec).value})",
                    on_click=lambda s=stage: self._on_stage(s),
                )
            )
        self._buttons.append(
            Button(
                rect=pygame.Rect(x0, y0 + 5 * (h + gap), w * 2 + gap, h),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
        )

    def _on_stage(self, stage: int) -> None:
        cards_db = self.ctx.cards
        if cards_db is None:
            return
        seed = self.ctx.seed if self.ctx.seed is not None else random.randrange(1, 2**31 - 1)
        cfg = BattleConfig()
        player_hand, enemy_hand = starter_hands(cards_db, random.Random(seed), cfg.hand_size)
        state = new_battle(cards_db, player_hand, enemy_hand, seed=seed, stage=stage, config=cfg)
        tier = tier_for_stage(stage, self.ctx.ai_spec)
        self._next = to_battle(BattleScene(self.ctx, state, self.ctx.ai_spec), stage, tier.value)

    def handle_event(self, event: pygame.event.Event) -> None:
        for b in self._buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.fonts
        draw_text(screen, fonts.big, "TriadTCG", (60, 40))
        draw_text(screen, fonts.ui, "Choose a stage. Higher stages face a sharper opponent.", (60, 100))
        for b in self._buttons:
            b.draw(screen, fonts.ui)
