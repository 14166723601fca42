from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.types import DIFFICULTIES

from ..app import GameContext, Scene, SceneTransition
from ..ui import Button, draw_text


class RecordsScene:
    """Best scores, lifetime stats, achievements and recent games."""

    def __init__(self, ctx: GameContext, back_to: Scene) -> None:
        self.ctx = ctx
        self._back_to = back_to
        self._next: SceneTransition | None = None
        self.btn_back = Button(rect=pygame.Rect(20, 20, 120, 40), text="Back", on_click=self._on_back)

    def _on_back(self) -> None:
        self._next = SceneTransition(self._back_to)

    def handle_event(self, event: pygame.event.Event) -> None:
        self.btn_back.handle_event(event)
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self._on_back()

    def update(self, dt: float) -> SceneTransition | None:
        # Missed timer ticks are caught up when the board scene polls again.
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((17, 14, 45))
        fonts = self.ctx.fonts
        self.btn_back.draw(screen, fonts.ui)
        controller = self.ctx.controller
        catalog = self.ctx.catalog
        if controller is None or catalog is None:
            return
        progress = controller.progress

        draw_text(screen, fonts.big, "Best Scores", (40, 80))
        y = 120
        for d in DIFFICULTIES:
            best = progress.best_for(d)
            text = "no record yet" if not best.is_set else f"{int(best.moves)} moves, {int(best.time)}s"
            draw_text(screen, fonts.ui, f"{d.capitalize()}: {text}", (40, y))
            y += 26

        s = progress.stats
        draw_text(screen, fonts.big, "Statistics", (40, 220))
        lines = [
            f"Games played: {s.games_played}",
            f"Total moves: {s.total_moves}",
            f"Total time: {s.total_time}s",
            f"Pairs found: {s.matches_found}",
            f"Hints used: {s.hints_used}",
            f"Perfect games: {s.perfect_games}",
        ]
        for i, line in enumerate(lines):
            draw_text(screen, fonts.ui, line, (40, 260 + i * 26))

        draw_text(screen, fonts.big, "Achievements", (520, 80))
        unlocked = set(progress.unlocked)
        for i, ach in enumerate(catalog.achievements):
            got = ach.id in unlocked
            color = (250, 204, 21) if got else (120, 120, 160)
            draw_text(screen, fonts.ui, f"{ach.name} (+{ach.points})", (520, 120 + i * 44), color=color)
            draw_text(screen, fonts.small, ach.description, (520, 142 + i * 44), color=color)

        draw_text(screen, fonts.big, "Recent Games", (40, 440))
        for i, entry in enumerate(reversed(progress.history)):
            draw_text(
                screen,
                fonts.small,
                f"{entry.timestamp[:19].replace('T', ' ')}  {entry.difficulty:<6}  "
                f"{entry.moves} moves  {entry.time}s  score {entry.score}",
                (40, 480 + i * 22),
            )
