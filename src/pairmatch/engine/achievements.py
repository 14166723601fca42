from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Callable

from .types import AchievementDef, AchievementKind, GameStats


def _games_played(stats: GameStats, threshold: float) -> bool:
    return stats.games_played >= threshold


def _perfect_games(stats: GameStats, threshold: float) -> bool:
    return stats.perfect_games >= threshold


def _average_time_below(stats: GameStats, threshold: float) -> bool:
    if stats.games_played <= 0:
        return False
    return stats.total_time / stats.games_played < threshold


def _moves_per_match_at_most(stats: GameStats, threshold: float) -> bool:
    if stats.matches_found <= 0:
        return False
    return stats.total_moves / stats.matches_found <= threshold


def _total_time_at_least(stats: GameStats, threshold: float) -> bool:
    return stats.total_time >= threshold


PREDICATES: dict[AchievementKind, Callable[[GameStats, float], bool]] = {
    "games_played": _games_played,
    "perfect_games": _perfect_games,
    "average_time_below": _average_time_below,
    "moves_per_match_at_most": _moves_per_match_at_most,
    "total_time_at_least": _total_time_at_least,
}


def is_earned(achievement: AchievementDef, stats: GameStats) -> bool:
    return PREDICATES[achievement.kind](stats, achievement.threshold)


def evaluate(
    stats: GameStats,
    unlocked: Collection[str],
    achievements: Sequence[AchievementDef],
) -> list[AchievementDef]:
    """Return the achievements newly earned by `stats`, in catalog order.

    Already unlocked ids are never returned again, so calling this twice with
    the result merged into `unlocked` yields nothing the second time.
    """
    newly: list[AchievementDef] = []
    seen = set(unlocked)
    for ach in achievements:
        if ach.id in seen:
            continue
        if is_earned(ach, stats):
            newly.append(ach)
            seen.add(ach.id)
    return newly
