"""Deterministic, headless game engine for PairMatch.

IMPORTANT: This package must never import pygame.
"""

from .actions import FlipAction, HintAction
from .board import BoardConfig, BoardState, new_board, step
from .session import Session, complete_session, start_session
from .types import Catalog, Difficulty, Progress

__all__ = [
    "BoardConfig",
    "BoardState",
    "Catalog",
    "Difficulty",
    "FlipAction",
    "HintAction",
    "Progress",
    "Session",
    "complete_session",
    "new_board",
    "start_session",
    "step",
]
