from __future__ import annotations

import math

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.board import Event
from pairmatch.engine.types import DIFFICULTIES, Difficulty
from pairmatch.services.game import GameController, GameView
from pairmatch.services.notify import Tone, notice_for

from ..app import GameContext, Scene, SceneTransition
from ..ui import Button, Color, Toast, draw_text, draw_text_centered

_TONE_COLORS: dict[Tone, Color] = {
    "info": (49, 46, 129),
    "warning": (127, 29, 29),
    "success": (88, 28, 135),
    "reward": (113, 63, 18),
}

GRID_TOP = 150
GRID_SIDE = 560
CARD_GAP = 10


class BoardScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._toasts: list[Toast] = []

        self.btn_hint = Button(rect=pygame.Rect(620, 90, 170, 40), text="Hint", on_click=self._on_hint)
        self.btn_records = Button(rect=pygame.Rect(800, 90, 170, 40), text="Records", on_click=self._on_records)
        self.difficulty_buttons = [
            Button(
                rect=pygame.Rect(40 + i * 130, 90, 120, 40),
                text=d.capitalize(),
                on_click=lambda d=d: self._on_difficulty(d),
            )
            for i, d in enumerate(DIFFICULTIES)
        ]
        self.btn_new = Button(rect=pygame.Rect(440, 90, 170, 40), text="New Game", on_click=self._on_new_game)

    @property
    def controller(self) -> GameController:
        assert self.ctx.controller is not None
        return self.ctx.controller

    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _announce(self, events: list[Event]) -> None:
        for ev in events:
            notice = notice_for(ev)
            if notice is None:
                continue
            self._toasts.append(Toast(notice.title, notice.description, _TONE_COLORS[notice.tone]))
        self._toasts = self._toasts[-4:]

    def _on_hint(self) -> None:
        self._announce(self.controller.hint(self.ctx.now()))

    def _on_records(self) -> None:
        from .records import RecordsScene

        self._go(RecordsScene(self.ctx, back_to=self))

    def _on_difficulty(self, difficulty: Difficulty) -> None:
        self._toasts = []
        self._announce(self.controller.reset(difficulty, self.ctx.now()))

    def _on_new_game(self) -> None:
        view = self.controller.view()
        difficulty: Difficulty = view.difficulty if view is not None else "easy"
        self._on_difficulty(difficulty)

    def _card_rects(self, view: GameView) -> list[pygame.Rect]:
        cols = view.grid_size
        rows = math.ceil(len(view.cards) / cols)
        size = min((GRID_SIDE - CARD_GAP * (cols - 1)) // cols, (GRID_SIDE - CARD_GAP * (rows - 1)) // rows)
        x0 = 40 + (GRID_SIDE - (size * cols + CARD_GAP * (cols - 1))) // 2
        rects = []
        for i in range(len(view.cards)):
            r, c = divmod(i, cols)
            rects.append(pygame.Rect(x0 + c * (size + CARD_GAP), GRID_TOP + r * (size + CARD_GAP), size, size))
        return rects

    def handle_event(self, event: pygame.event.Event) -> None:
        self.btn_hint.handle_event(event)
        self.btn_records.handle_event(event)
        self.btn_new.handle_event(event)
        for b in self.difficulty_buttons:
            b.handle_event(event)

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            view = self.controller.view()
            if view is None:
                return
            for i, rect in enumerate(self._card_rects(view)):
                if rect.collidepoint(event.pos):
                    self._announce(self.controller.flip(i, self.ctx.now()))
                    return

    def update(self, dt: float) -> SceneTransition | None:
        self._announce(self.controller.update(self.ctx.now()))
        self._toasts = [t for t in self._toasts if t.update(dt)]
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((17, 14, 45))
        fonts = self.ctx.fonts
        view = self.controller.view()
        draw_text(screen, fonts.big, "Memory Match", (40, 20))
        if view is None:
            return

        for b, d in zip(self.difficulty_buttons, DIFFICULTIES):
            b.selected = d == view.difficulty
            b.draw(screen, fonts.ui)
        self.btn_new.draw(screen, fonts.ui)
        self.btn_hint.enabled = view.is_active
        self.btn_hint.text = f"Hint (-{self.controller.scoring.hint_penalty} pts)"
        self.btn_hint.draw(screen, fonts.ui)
        self.btn_records.draw(screen, fonts.ui)

        best = "-" if not view.best.is_set else f"{int(view.best.moves)} moves / {int(view.best.time)}s"
        draw_text(
            screen,
            fonts.ui,
            f"Moves: {view.moves}   Time: {view.time}s   Pairs: {view.matched_pairs}/{view.total_pairs}"
            f"   Score: {view.score}   Best: {best}",
            (40, 60),
        )

        catalog = self.ctx.catalog
        for rect, card in zip(self._card_rects(view), view.cards):
            if card.is_matched:
                bg: Color = (30, 27, 75)
            elif card.face_up:
                bg = (67, 56, 202)
            else:
                bg = (49, 46, 129)
            pygame.draw.rect(screen, bg, rect, border_radius=10)
            pygame.draw.rect(screen, (99, 102, 241), rect, width=2, border_radius=10)
            if card.face_up and catalog is not None:
                icon = catalog.icon(card.pair_key)
                draw_text_centered(screen, fonts.ui, icon.label, rect, color=icon.color)

        self._render_toasts(screen)

    def _render_toasts(self, screen: pygame.Surface) -> None:
        fonts = self.ctx.fonts
        y = 150
        for t in self._toasts:
            rect = pygame.Rect(620, y, 360, 60)
            pygame.draw.rect(screen, t.color, rect, border_radius=8)
            draw_text(screen, fonts.ui, t.title, (rect.x + 10, rect.y + 8))
            draw_text(screen, fonts.small, t.description[:54], (rect.x + 10, rect.y + 36))
            y += 70
