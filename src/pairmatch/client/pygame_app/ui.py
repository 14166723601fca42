from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


def load_fonts() -> Fonts:
    pygame.font.init()
    return Fonts(
        ui=pygame.font.SysFont(None, 24),
        small=pygame.font.SysFont(None, 18),
        big=pygame.font.SysFont(None, 34),
    )


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (224, 231, 255),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def draw_text_centered(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    rect: pygame.Rect,
    color: Color = (224, 231, 255),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, img.get_rect(center=rect.center).topleft)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True
    selected: bool = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        if not self.enabled:
            bg: Color = (30, 27, 75)
        elif self.selected:
            bg = (79, 70, 229)
        else:
            bg = (49, 46, 129)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        pygame.draw.rect(screen, (67, 56, 202), self.rect, width=2, border_radius=8)
        fg: Color = (224, 231, 255) if self.enabled else (120, 120, 160)
        draw_text_centered(screen, font, self.text, self.rect, color=fg)


@dataclass
class Toast:
    title: str
    description: str
    color: Color
    remaining: float = 2.5

    def update(self, dt: float) -> bool:
        self.remaining -= dt
        return self.remaining > 0
