from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

Difficulty = Literal["easy", "medium", "hard"]
DIFFICULTIES: tuple[Difficulty, ...] = ("easy", "medium", "hard")

AchievementKind = Literal[
    "games_played",
    "perfect_games",
    "average_time_below",
    "moves_per_match_at_most",
    "total_time_at_least",
]

Color = tuple[int, int, int]


@dataclass(frozen=True)
class DifficultySpec:
    pairs: int
    grid_size: int


@dataclass(frozen=True)
class IconDef:
    id: str
    label: str
    color: Color


@dataclass(frozen=True)
class AchievementDef:
    id: str
    name: str
    description: str
    kind: AchievementKind
    threshold: float
    points: int


@dataclass(frozen=True)
class Catalog:
    """Immutable static data used by the engine."""

    difficulties: dict[Difficulty, DifficultySpec]
    icons: tuple[IconDef, ...]
    achievements: tuple[AchievementDef, ...]

    def difficulty(self, difficulty: Difficulty) -> DifficultySpec:
        return self.difficulties[difficulty]

    def icon(self, icon_id: str) -> IconDef:
        for icon in self.icons:
            if icon.id == icon_id:
                return icon
        raise KeyError(icon_id)

    def icon_ids(self) -> Sequence[str]:
        return [icon.id for icon in self.icons]


@dataclass
class GameStats:
    games_played: int = 0
    total_moves: int = 0
    total_time: int = 0
    matches_found: int = 0
    hints_used: int = 0
    perfect_games: int = 0


@dataclass(frozen=True)
class BestScore:
    # math.inf on both fields means "no record yet"
    moves: float = math.inf
    time: float = math.inf

    @property
    def is_set(self) -> bool:
        return not math.isinf(self.moves)


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: str
    difficulty: Difficulty
    moves: int
    time: int
    score: int


@dataclass
class Progress:
    """Process-wide aggregate that survives sessions."""

    best_scores: dict[Difficulty, BestScore] = field(
        default_factory=lambda: {d: BestScore() for d in DIFFICULTIES}
    )
    stats: GameStats = field(default_factory=GameStats)
    history: list[HistoryEntry] = field(default_factory=list)
    unlocked: list[str] = field(default_factory=list)

    def best_for(self, difficulty: Difficulty) -> BestScore:
        return self.best_scores.get(difficulty, BestScore())
