from __future__ import annotations

import math
from typing import Mapping

from .actions import Action, FlipAction, HintAction
from .board import BoardState
from .recorder import HISTORY_LIMIT
from .types import DIFFICULTIES, BestScore, GameStats, HistoryEntry, Progress

PROGRESS_VERSION = 1


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, FlipAction):
        return {"type": "flip", "index": a.index}
    if isinstance(a, HintAction):
        return {"type": "hint"}
    # should be unreachable
    return {"type": "unknown"}


def snapshot(state: BoardState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current board."""
    return {
        "seed": state.seed,
        "difficulty": state.difficulty,
        "moves": state.moves,
        "cards": [{"id": c.id, "pair_key": c.pair_key, "is_matched": c.is_matched} for c in state.cards],
        "flipped": list(state.turn.flipped_indexes),
        "hinted": list(state.turn.hinted_indexes),
        "is_resolving": state.turn.is_resolving,
        "action_log": [{"at": at, **action_to_dict(a)} for at, a in state.action_log],
    }


def _finite_or_none(v: float) -> int | None:
    return None if math.isinf(v) else int(v)


def _count(d: Mapping[str, object], key: str) -> int:
    v = d.get(key, 0)
    return v if isinstance(v, int) and v >= 0 else 0


def best_to_dict(best: BestScore) -> dict[str, object]:
    return {"moves": _finite_or_none(best.moves), "time": _finite_or_none(best.time)}


def best_from_dict(d: Mapping[str, object]) -> BestScore:
    moves = d.get("moves")
    time = d.get("time")
    if not isinstance(moves, int) or not isinstance(time, int):
        return BestScore()
    return BestScore(moves=moves, time=time)


def stats_to_dict(stats: GameStats) -> dict[str, object]:
    return {
        "games_played": stats.games_played,
        "total_moves": stats.total_moves,
        "total_time": stats.total_time,
        "matches_found": stats.matches_found,
        "hints_used": stats.hints_used,
        "perfect_games": stats.perfect_games,
    }


def stats_from_dict(d: Mapping[str, object]) -> GameStats:
    return GameStats(
        games_played=_count(d, "games_played"),
        total_moves=_count(d, "total_moves"),
        total_time=_count(d, "total_time"),
        matches_found=_count(d, "matches_found"),
        hints_used=_count(d, "hints_used"),
        perfect_games=_count(d, "perfect_games"),
    )


def history_entry_to_dict(e: HistoryEntry) -> dict[str, object]:
    return {
        "timestamp": e.timestamp,
        "difficulty": e.difficulty,
        "moves": e.moves,
        "time": e.time,
        "score": e.score,
    }


def history_entry_from_dict(d: Mapping[str, object]) -> HistoryEntry | None:
    difficulty = d.get("difficulty")
    score = d.get("score")
    if difficulty not in DIFFICULTIES or not isinstance(score, int):
        return None
    return HistoryEntry(
        timestamp=str(d.get("timestamp", "")),
        difficulty=difficulty,  # type: ignore[arg-type]
        moves=_count(d, "moves"),
        time=_count(d, "time"),
        score=score,
    )


def progress_to_dict(p: Progress) -> dict[str, object]:
    return {
        "version": PROGRESS_VERSION,
        "best_scores": {k: best_to_dict(v) for k, v in p.best_scores.items()},
        "game_stats": stats_to_dict(p.stats),
        "history": [history_entry_to_dict(e) for e in p.history],
        "unlocked_achievements": list(p.unlocked),
    }


def progress_from_dict(d: Mapping[str, object]) -> Progress:
    """Build a Progress from stored data; absent fields fall back to defaults."""
    progress = Progress()

    best_raw = d.get("best_scores", {})
    if isinstance(best_raw, dict):
        for difficulty in DIFFICULTIES:
            b = best_raw.get(difficulty)
            if isinstance(b, dict):
                progress.best_scores[difficulty] = best_from_dict(b)

    stats_raw = d.get("game_stats", {})
    if isinstance(stats_raw, dict):
        progress.stats = stats_from_dict(stats_raw)

    history_raw = d.get("history", [])
    if isinstance(history_raw, list):
        for item in history_raw:
            if not isinstance(item, dict):
                continue
            entry = history_entry_from_dict(item)
            if entry is not None:
                progress.history.append(entry)
        progress.history = progress.history[-HISTORY_LIMIT:]

    unlocked_raw = d.get("unlocked_achievements", [])
    if isinstance(unlocked_raw, list):
        for x in unlocked_raw:
            if isinstance(x, str) and x not in progress.unlocked:
                progress.unlocked.append(x)

    return progress
