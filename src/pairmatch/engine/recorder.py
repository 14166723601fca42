from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .types import GameStats, HistoryEntry, Progress

HISTORY_LIMIT = 10


def updated_stats(stats: GameStats, *, moves: int, time: int, pairs: int, hints: int) -> GameStats:
    return replace(
        stats,
        games_played=stats.games_played + 1,
        total_moves=stats.total_moves + moves,
        total_time=stats.total_time + time,
        matches_found=stats.matches_found + pairs,
        hints_used=stats.hints_used + hints,
        perfect_games=stats.perfect_games + (1 if hints == 0 else 0),
    )


def append_history(
    history: Sequence[HistoryEntry], entry: HistoryEntry, limit: int = HISTORY_LIMIT
) -> list[HistoryEntry]:
    """Append `entry` and keep only the most recent `limit` entries."""
    out = list(history)
    out.append(entry)
    return out[-limit:]


def record_stats(progress: Progress, *, moves: int, time: int, pairs: int, hints: int) -> GameStats:
    progress.stats = updated_stats(progress.stats, moves=moves, time=time, pairs=pairs, hints=hints)
    return progress.stats


def record_history(progress: Progress, entry: HistoryEntry) -> None:
    progress.history = append_history(progress.history, entry)
