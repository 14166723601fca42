from __future__ import annotations

from dataclasses import dataclass, field

from .achievements import evaluate
from .actions import Action
from .board import BoardConfig, BoardState, Event, StepResult, advance, new_board, step
from .recorder import record_history, record_stats
from .scoring import ScoringConfig, score_delta, update_best
from .types import Catalog, Difficulty, HistoryEntry, Progress


@dataclass
class Session:
    """Session-scoped state: one board plus its running score and clock."""

    board: BoardState
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    score: int = 0
    time: int = 0
    hints_used: int = 0
    finished: bool = False

    @property
    def difficulty(self) -> Difficulty:
        return self.board.difficulty

    @property
    def moves(self) -> int:
        return self.board.moves

    def _absorb(self, events: list[Event]) -> None:
        for ev in events:
            self.score += score_delta(ev, self.scoring)
            if ev.get("type") == "HINT_USED":
                self.hints_used += 1

    def act(self, action: Action, now: float) -> StepResult:
        if self.finished:
            return StepResult(ok=False, events=[], error="Session already finished.")
        result = step(self.board, action, now)
        self._absorb(result.events)
        return result

    def advance(self, now: float) -> list[Event]:
        if self.finished:
            return []
        events = advance(self.board, now)
        self._absorb(events)
        return events

    def tick(self) -> None:
        if not self.finished:
            self.time += 1


def start_session(
    catalog: Catalog,
    difficulty: Difficulty,
    seed: int,
    board_config: BoardConfig | None = None,
    scoring: ScoringConfig | None = None,
) -> Session:
    board = new_board(catalog, difficulty, seed, config=board_config)
    return Session(board=board, scoring=scoring or ScoringConfig())


def complete_session(progress: Progress, session: Session, catalog: Catalog, timestamp: str) -> list[Event]:
    """Fold a finished board into `progress` and return the resulting events.

    Order: best score (with bonus), stats, achievements (with points), then the
    history entry carrying the final score.
    """
    if session.finished:
        return []
    session.finished = True
    events: list[Event] = []
    difficulty = session.difficulty
    moves, time = session.moves, session.time

    best = update_best(progress.best_for(difficulty), moves, time, session.scoring)
    if best.improved:
        progress.best_scores[difficulty] = best.best
        session.score += best.bonus
        events.append(
            {"type": "NEW_BEST_SCORE", "difficulty": difficulty, "moves": moves, "time": time, "bonus": best.bonus}
        )

    stats = record_stats(
        progress,
        moves=moves,
        time=time,
        pairs=session.board.total_pairs,
        hints=session.hints_used,
    )

    for ach in evaluate(stats, progress.unlocked, catalog.achievements):
        progress.unlocked.append(ach.id)
        session.score += ach.points
        events.append(
            {
                "type": "ACHIEVEMENT_UNLOCKED",
                "id": ach.id,
                "name": ach.name,
                "description": ach.description,
                "points": ach.points,
            }
        )

    entry = HistoryEntry(timestamp=timestamp, difficulty=difficulty, moves=moves, time=time, score=session.score)
    record_history(progress, entry)
    events.append(
        {"type": "SESSION_COMPLETE", "difficulty": difficulty, "moves": moves, "time": time, "score": session.score}
    )
    return events
