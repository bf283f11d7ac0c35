from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from triadtcg.services.content import ContentError

from ..app import GameContext
from ..scene_base import SceneTransition, to_stage_select
from ..ui import Button, draw_text
from .stage_select import StageSelectScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.cards = self.ctx.content.load_cards_db()
            self.ctx.paths.userdata_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.telemetry.log("boot", {"ok": True, "cards": len(self.ctx.cards.cards)})
            return to_stage_select(StageSelectScene(self.ctx))
        except (ContentError, OSError) as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            try:
                self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            except OSError:
                pass  # shown on the error screen either way
            self._quit_button = Button(
                rect=pygame.Rect(20, 700, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 10, 10))
        fonts = self.ctx.fonts
        draw_text(screen, fonts.big, "TriadTCG", (20, 20))

        if self._error is None:
            draw_text(screen, fonts.ui, "Booting... validating card data.", (20, 80))
        else:
            draw_text(screen, fonts.ui, "BOOT ERROR", (20, 80), color=(240, 80, 80))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, fonts.small, line[:120], (20, y), color=(230, 230, 230))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, fonts.ui)
