from __future__ import annotations

import logging
import traceback

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.types import Difficulty
from pairmatch.services.game import GameController
from pairmatch.services.progress import ProgressService
from pairmatch.services.storage import FileKeyValueStore

from ..app import GameContext, SceneTransition
from ..ui import Button, draw_text
from .board import BoardScene

logger = logging.getLogger(__name__)


class BootScene:
    def __init__(self, ctx: GameContext, difficulty: Difficulty = "easy") -> None:
        self.ctx = ctx
        self.difficulty = difficulty
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
            self.ctx.content.validate_all()
            self.ctx.catalog = self.ctx.content.load_catalog()

            progress = ProgressService(
                FileKeyValueStore(self.ctx.paths.userdata_dir),
                schema=self.ctx.content.load_progress_schema(),
            )
            self.ctx.controller = GameController(self.ctx.catalog, progress, telemetry=self.ctx.telemetry)
            self.ctx.controller.reset(self.difficulty, self.ctx.now())

            self.ctx.telemetry.log("boot", {"ok": True})
            return SceneTransition(BoardScene(self.ctx))
        except Exception as e:
            logger.exception("Boot failed")
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            self._quit_button = Button(
                rect=pygame.Rect(20, 700, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((17, 14, 45))
        fonts = self.ctx.fonts
        draw_text(screen, fonts.big, "Memory Match", (20, 20))

        if self._error is None:
            draw_text(screen, fonts.ui, "Loading catalog and saved progress...", (20, 80))
        else:
            draw_text(screen, fonts.ui, "BOOT ERROR", (20, 80), color=(240, 80, 80))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, fonts.small, line[:120], (20, y), color=(230, 230, 230))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, fonts.ui)
