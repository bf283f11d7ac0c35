from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import pygame  # type: ignore[import-not-found]

WINDOW_TITLE = "TriadTCG"


@dataclass(frozen=True)
class SceneTransition:
    next_scene: "Scene"
    # window title for the next scene; None keeps the current one
    caption: str | None = None


def to_stage_select(scene: "Scene") -> SceneTransition:
    return SceneTransition(scene, caption=WINDOW_TITLE)


def to_battle(scene: "Scene", stage: int, tier: str) -> SceneTransition:
    return SceneTransition(scene, caption=f"{WINDOW_TITLE} - Stage {stage} ({tier})")


class Scene(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...
