from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pygame  # type: ignore[import-not-found]

from triadtcg.engine.ai import AISpec
from triadtcg.engine.types import CardDatabase
from triadtcg.paths import Paths
from triadtcg.services.content import ContentService
from triadtcg.services.telemetry import TelemetryService

from .scene_base import Scene
from .ui import Fonts


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    fonts: Fonts
    content: ContentService
    telemetry: TelemetryService
    seed: int | None = None
    # opponent tuning shared by the stage list labels and every battle
    ai_spec: AISpec = field(default_factory=AISpec)

    # Loaded at boot
    cards: Optional[CardDatabase] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene = tr.next_scene
                if tr.caption is not None:
                    pygame.display.set_caption(tr.caption)

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        return 0
