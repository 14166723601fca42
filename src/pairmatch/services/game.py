from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from pairmatch.engine.actions import FlipAction, HintAction
from pairmatch.engine.board import BoardConfig, Event, StepResult
from pairmatch.engine.scoring import ScoringConfig
from pairmatch.engine.session import Session, complete_session, start_session
from pairmatch.engine.timer import SessionTimer
from pairmatch.engine.types import (
    AchievementDef,
    BestScore,
    Catalog,
    Difficulty,
    GameStats,
    HistoryEntry,
    Progress,
)

from .progress import ProgressService
from .telemetry import TelemetryService

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class CardView:
    id: str
    pair_key: str
    is_matched: bool
    face_up: bool


@dataclass(frozen=True)
class GameView:
    """Read-only picture of everything the rendering layer may show."""

    difficulty: Difficulty
    grid_size: int
    cards: tuple[CardView, ...]
    moves: int
    time: int
    score: int
    matched_pairs: int
    total_pairs: int
    is_active: bool
    best: BestScore
    stats: GameStats
    history: tuple[HistoryEntry, ...]
    unlocked: tuple[AchievementDef, ...]


class GameController:
    """Owns the active session and the process-wide progress.

    All commands run on the caller's single thread; the caller passes its
    clock reading (seconds) into every command and into `update`.
    """

    def __init__(
        self,
        catalog: Catalog,
        progress: ProgressService,
        *,
        rng: random.Random | None = None,
        board_config: BoardConfig | None = None,
        scoring: ScoringConfig | None = None,
        telemetry: TelemetryService | None = None,
        timestamp: Callable[[], str] = _utc_now_iso,
    ) -> None:
        self.catalog = catalog
        self._progress_service = progress
        self._rng = rng or random.Random()
        self._board_config = board_config or BoardConfig()
        self.scoring = scoring or ScoringConfig()
        self._telemetry = telemetry
        self._timestamp = timestamp

        self.progress: Progress = progress.load()
        self.session: Session | None = None
        self.timer = SessionTimer()

    # -------- Commands --------
    def reset(self, difficulty: Difficulty, now: float) -> list[Event]:
        """Replace every session-scoped object; nothing from the old board fires afterwards."""
        seed = self._rng.randrange(1, 2**31 - 1)
        # Build first: a failed deal leaves the running session and its clock untouched.
        session = start_session(self.catalog, difficulty, seed, board_config=self._board_config, scoring=self.scoring)
        self.timer.cancel()
        self.session = session
        self.timer = SessionTimer()
        self.timer.start(now)
        events: list[Event] = [{"type": "SESSION_STARTED", "difficulty": difficulty, "seed": seed}]
        self._log(events)
        return events

    def flip(self, index: int, now: float) -> list[Event]:
        return self._act(FlipAction(index=index), now)

    def hint(self, now: float) -> list[Event]:
        return self._act(HintAction(), now)

    def update(self, now: float) -> list[Event]:
        """Deliver timer ticks and due continuations, then check for completion."""
        session = self.session
        if session is None or session.finished:
            return []
        for _ in range(self.timer.poll(now)):
            session.tick()
        events = session.advance(now)
        events.extend(self._check_complete())
        self._log(events)
        return events

    def _act(self, action: FlipAction | HintAction, now: float) -> list[Event]:
        session = self.session
        if session is None:
            return []
        for _ in range(self.timer.poll(now)):
            session.tick()
        result: StepResult = session.act(action, now)
        events = list(result.events)
        events.extend(self._check_complete())
        self._log(events)
        return events

    def _check_complete(self) -> list[Event]:
        session = self.session
        if session is None or session.finished or not session.board.is_complete:
            return []
        self.timer.cancel()
        events = complete_session(self.progress, session, self.catalog, self._timestamp())
        logger.info(
            "Session complete: %s in %d moves, %ds, score %d",
            session.difficulty,
            session.moves,
            session.time,
            session.score,
        )
        self._progress_service.save(self.progress)
        return events

    def _log(self, events: list[Event]) -> None:
        if self._telemetry is not None and events:
            self._telemetry.log_events(events)

    # -------- Views --------
    def unlocked_achievements(self) -> list[AchievementDef]:
        unlocked = set(self.progress.unlocked)
        return [a for a in self.catalog.achievements if a.id in unlocked]

    def view(self) -> GameView | None:
        session = self.session
        if session is None:
            return None
        board = session.board
        visible = set(board.turn.visible_indexes())
        cards = tuple(
            CardView(id=c.id, pair_key=c.pair_key, is_matched=c.is_matched, face_up=c.is_matched or i in visible)
            for i, c in enumerate(board.cards)
        )
        return GameView(
            difficulty=session.difficulty,
            grid_size=self.catalog.difficulty(session.difficulty).grid_size,
            cards=cards,
            moves=session.moves,
            time=session.time,
            score=session.score,
            matched_pairs=board.matched_pairs,
            total_pairs=board.total_pairs,
            is_active=not session.finished,
            best=self.progress.best_for(session.difficulty),
            stats=self.progress.stats,
            history=tuple(self.progress.history),
            unlocked=tuple(self.unlocked_achievements()),
        )
