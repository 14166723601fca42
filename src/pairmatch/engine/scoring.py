from __future__ import annotations

from dataclasses import dataclass

from .board import Event
from .types import BestScore


@dataclass(frozen=True)
class ScoringConfig:
    match_bonus: int = 100
    hint_penalty: int = 50
    per_move_saved: int = 20
    per_second_saved: int = 10


@dataclass(frozen=True)
class BestScoreUpdate:
    improved: bool
    best: BestScore
    bonus: int = 0


def score_delta(event: Event, config: ScoringConfig) -> int:
    t = event.get("type")
    if t == "MATCH":
        return config.match_bonus
    if t == "HINT_USED":
        return -config.hint_penalty
    return 0


def is_better(moves: int, time: int, best: BestScore) -> bool:
    """Lexicographic comparison: fewer moves wins, time breaks ties."""
    if moves < best.moves:
        return True
    return moves == best.moves and time < best.time


def update_best(best: BestScore, moves: int, time: int, config: ScoringConfig) -> BestScoreUpdate:
    if not is_better(moves, time, best):
        return BestScoreUpdate(improved=False, best=best)

    new_best = BestScore(moves=moves, time=time)
    if not best.is_set:
        # First record for this difficulty: nothing was saved.
        return BestScoreUpdate(improved=True, best=new_best, bonus=0)

    moves_saved = int(best.moves) - moves
    seconds_saved = int(best.time) - time
    bonus = max(0, moves_saved * config.per_move_saved) + max(0, seconds_saved * config.per_second_saved)
    return BestScoreUpdate(improved=True, best=new_best, bonus=bonus)
