from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from triadtcg.engine.actions import PlaceCardAction
from triadtcg.engine.ai import AISpec, tier_for_stage
from triadtcg.engine.battle import BattleState, ai_take_turn, step
from triadtcg.engine.board import CELL_COUNT, GRID_SIZE, tally_score
from triadtcg.engine.types import Card

from ..app import GameContext
from ..scene_base import SceneTransition, to_stage_select
from ..ui import SIDE_COLORS, Button, draw_centered, draw_text

CELL = 150
GRID_X = 287
GRID_Y = 120
HAND_W, HAND_H = 120, 120

# delay before the AI answers, so the player sees their own flips first
AI_DELAY = 0.6


class BattleScene:
    def __init__(self, ctx: GameContext, state: BattleState, ai_spec: AISpec | None = None) -> None:
        self.ctx = ctx
        self.state = state
        self.ai_spec = ai_spec or AISpec()

        self._next: SceneTransition | None = None
        self._message: str = ""
        self._selected_hand: int | None = None
        self._ai_wait = 0.0
        self._last_flipped: list[int] = []
        self._did_log_result = False

        self.btn_menu = Button(rect=pygame.Rect(860, 20, 140, 40), text="Stages", on_click=self._on_menu)
        self.btn_continue = Button(
            rect=pygame.Rect(362, 420, 300, 56),
            text="Continue",
            on_click=self._on_menu,
        )

    def _on_menu(self) -> None:
        from .stage_select import StageSelectScene

        self._next = to_stage_select(StageSelectScene(self.ctx))

    def _run_ai_turn(self) -> None:
        res = ai_take_turn(self.state, side="enemy", spec=self.ai_spec)
        if res is not None and res.ok:
            self._last_flipped = res.flipped

    def handle_event(self, event: pygame.event.Event) -> None:
        self.btn_menu.handle_event(event)
        if self.state.winner is not None:
            self.btn_continue.handle_event(event)
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._handle_click(event.pos)

        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self._selected_hand = None

    def _handle_click(self, pos: tuple[int, int]) -> None:
        if self.state.current_side != "player":
            return

        hit_hand = self._hit_test_hand(pos)
        if hit_hand is not None:
            self._selected_hand = hit_hand
            self._message = "Choose an empty cell..."
            return

        slot = self._hit_test_cell(pos)
        if slot is None or self._selected_hand is None:
            return
        res = step(self.state, PlaceCardAction(side="player", hand_index=self._selected_hand, slot=slot))
        if not res.ok:
            self._message = res.error or "Invalid placement."
            return
        self._selected_hand = None
        self._last_flipped = res.flipped
        self._message = f"Captured {len(res.flipped)}!" if res.flipped else ""
        self._ai_wait = AI_DELAY

    def _hit_test_hand(self, pos: tuple[int, int]) -> int | None:
        for i in range(len(self.state.hands["player"])):
            if self._hand_rect(i).collidepoint(pos):
                return i
        return None

    def _hit_test_cell(self, pos: tuple[int, int]) -> int | None:
        for idx in range(CELL_COUNT):
            if self._cell_rect(idx).collidepoint(pos):
                return idx
        return None

    def _cell_rect(self, idx: int) -> pygame.Rect:
        row, col = divmod(idx, GRID_SIZE)
        return pygame.Rect(GRID_X + col * CELL, GRID_Y + row * CELL, CELL - 6, CELL - 6)

    def _hand_rect(self, i: int) -> pygame.Rect:
        return pygame.Rect(40, 120 + i * (HAND_H + 8), HAND_W, HAND_H)

    def _enemy_hand_rect(self, i: int) -> pygame.Rect:
        return pygame.Rect(864, 120 + i * (HAND_H + 8), HAND_W, HAND_H)

    def update(self, dt: float) -> SceneTransition | None:
        if self.state.winner is None and self.state.current_side == "enemy":
            self._ai_wait -= dt
            if self._ai_wait <= 0:
                self._run_ai_turn()

        if self.state.winner is not None and not self._did_log_result:
            self._did_log_result = True
            try:
                self.ctx.telemetry.log_battle(self.state)
            except OSError as e:
                self._message = f"Result not saved: {e}"

        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((8, 10, 14))
        fonts = self.ctx.fonts

        self.btn_menu.draw(screen, fonts.ui)
        tier = tier_for_stage(self.state.stage, self.ai_spec)
        draw_text(screen, fonts.ui, f"Stage {self.state.stage} - {tier.value}", (40, 30))
        score = tally_score(self.state.grid)
        draw_text(screen, fonts.big, f"{score.player} : {score.enemy}", (470, 40))

        for idx in range(CELL_COUNT):
            self._draw_cell(screen, idx)

        for i, card in enumerate(self.state.hands["player"]):
            self._draw_card(screen, self._hand_rect(i), card, selected=i == self._selected_hand)
        for i, _card in enumerate(self.state.hands["enemy"]):
            rect = self._enemy_hand_rect(i)
            pygame.draw.rect(screen, (40, 20, 24), rect, border_radius=8)
            pygame.draw.rect(screen, (0, 0, 0), rect, width=2, border_radius=8)

        if self._message:
            draw_text(screen, fonts.ui, self._message, (287, 590), color=(240, 200, 120))

        if self.state.winner is not None:
            self._draw_battle_over(screen)

    def _draw_cell(self, screen: pygame.Surface, idx: int) -> None:
        rect = self._cell_rect(idx)
        card = self.state.grid[idx]
        if card is None:
            pygame.draw.rect(screen, (18, 18, 24), rect, border_radius=8)
            pygame.draw.rect(screen, (0, 0, 0), rect, width=2, border_radius=8)
            return
        self._draw_card(screen, rect, card)
        if idx in self._last_flipped:
            pygame.draw.rect(screen, (240, 240, 120), rect, width=3, border_radius=8)

    def _draw_card(self, screen: pygame.Surface, rect: pygame.Rect, card: Card, selected: bool = False) -> None:
        fonts = self.ctx.fonts
        pygame.draw.rect(screen, SIDE_COLORS.get(card.owner, (60, 60, 60)), rect, border_radius=8)
        pygame.draw.rect(screen, (240, 240, 120) if selected else (0, 0, 0), rect, width=2, border_radius=8)
        stats = [*(card.stats or ()), "?", "?", "?", "?"][:4]
        top, bottom, left, right = (str(s) for s in stats)
        draw_centered(screen, fonts.ui, top, (rect.centerx, rect.y + 16))
        draw_centered(screen, fonts.ui, bottom, (rect.centerx, rect.bottom - 16))
        draw_centered(screen, fonts.ui, left, (rect.x + 14, rect.centery))
        draw_centered(screen, fonts.ui, right, (rect.right - 14, rect.centery))
        if card.name:
            draw_centered(screen, fonts.small, card.name[:14], rect.center, color=(220, 220, 220))

    def _draw_battle_over(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        screen.blit(overlay, (0, 0))

        winner = self.state.winner
        title = "YOU WIN!" if winner == "player" else "YOU LOSE"
        draw_centered(screen, self.ctx.fonts.big, title, (512, 340))
        self.btn_continue.draw(screen, self.ctx.fonts.ui)
