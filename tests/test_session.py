from __future__ import annotations

from pairmatch.engine.actions import FlipAction, HintAction
from pairmatch.engine.recorder import HISTORY_LIMIT, append_history, updated_stats
from pairmatch.engine.session import Session, complete_session, start_session
from pairmatch.engine.types import BestScore, Catalog, GameStats, HistoryEntry, Progress
from pairmatch.paths import get_paths
from pairmatch.services.content import ContentService

TS = "2026-01-01T00:00:00+00:00"


def _load_catalog() -> Catalog:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir).load_catalog()


def _pairs(session: Session) -> list[tuple[int, int]]:
    by_key: dict[str, list[int]] = {}
    for i, c in enumerate(session.board.cards):
        by_key.setdefault(c.pair_key, []).append(i)
    return [(a, b) for a, b in by_key.values()]


def _solve(session: Session, t: float = 10.0) -> float:
    for a, b in _pairs(session):
        assert session.act(FlipAction(a), t).ok
        t += 1.0
        assert session.act(FlipAction(b), t).ok
        t += 1.0
    session.advance(t)
    return t


def _entry(n: int) -> HistoryEntry:
    return HistoryEntry(timestamp=f"t{n}", difficulty="easy", moves=n, time=n, score=n)


def test_playing_a_board_scores_matches() -> None:
    catalog = _load_catalog()
    session = start_session(catalog, "easy", seed=5)
    _solve(session)
    assert session.board.is_complete
    assert session.moves == 8
    assert session.score == 4 * 100


def test_hint_costs_points_and_a_move() -> None:
    catalog = _load_catalog()
    session = start_session(catalog, "easy", seed=5)
    res = session.act(HintAction(), 10.0)
    assert res.ok
    assert session.score == -50
    assert session.moves == 1
    assert session.hints_used == 1


def test_first_completion_records_everything() -> None:
    catalog = _load_catalog()
    progress = Progress()
    session = start_session(catalog, "easy", seed=5)
    _solve(session)
    session.time = 20

    events = complete_session(progress, session, catalog, TS)

    types = [e["type"] for e in events]
    assert types == [
        "NEW_BEST_SCORE",
        "ACHIEVEMENT_UNLOCKED",
        "ACHIEVEMENT_UNLOCKED",
        "ACHIEVEMENT_UNLOCKED",
        "ACHIEVEMENT_UNLOCKED",
        "SESSION_COMPLETE",
    ]
    assert events[0]["bonus"] == 0
    assert progress.best_scores["easy"] == BestScore(moves=8, time=20)
    assert progress.best_scores["hard"] == BestScore()
    assert progress.stats == GameStats(
        games_played=1, total_moves=8, total_time=20, matches_found=4, hints_used=0, perfect_games=1
    )
    assert progress.unlocked == ["first-win", "fast-fingers", "perfect-memory", "efficiency"]
    assert session.score == 400 + 1000
    assert progress.history == [HistoryEntry(timestamp=TS, difficulty="easy", moves=8, time=20, score=1400)]
    assert events[-1]["score"] == 1400


def test_completion_happens_once() -> None:
    catalog = _load_catalog()
    progress = Progress()
    session = start_session(catalog, "easy", seed=5)
    _solve(session)
    complete_session(progress, session, catalog, TS)

    assert complete_session(progress, session, catalog, TS) == []
    assert progress.stats.games_played == 1
    assert len(progress.history) == 1
    assert not session.act(FlipAction(0), 100.0).ok


def test_second_game_with_worse_time_keeps_best_and_awards_nothing_twice() -> None:
    catalog = _load_catalog()
    progress = Progress()
    first = start_session(catalog, "easy", seed=5)
    _solve(first)
    first.time = 20
    complete_session(progress, first, catalog, TS)

    second = start_session(catalog, "easy", seed=6)
    _solve(second)
    second.time = 25
    events = complete_session(progress, second, catalog, TS)

    assert [e["type"] for e in events] == ["SESSION_COMPLETE"]
    assert progress.best_scores["easy"] == BestScore(moves=8, time=20)
    assert second.score == 400
    assert progress.unlocked == ["first-win", "fast-fingers", "perfect-memory", "efficiency"]


def test_improved_best_pays_bonus() -> None:
    catalog = _load_catalog()
    progress = Progress()
    progress.best_scores["easy"] = BestScore(moves=10, time=30)
    progress.unlocked = [a.id for a in catalog.achievements]
    session = start_session(catalog, "easy", seed=5)
    _solve(session)
    session.time = 25

    events = complete_session(progress, session, catalog, TS)

    assert events[0] == {"type": "NEW_BEST_SCORE", "difficulty": "easy", "moves": 8, "time": 25, "bonus": 2 * 20 + 5 * 10}
    assert session.score == 400 + 90


def test_hinted_game_is_not_perfect() -> None:
    catalog = _load_catalog()
    progress = Progress()
    session = start_session(catalog, "easy", seed=5)
    session.act(HintAction(), 1.0)
    _solve(session, t=5.0)

    complete_session(progress, session, catalog, TS)

    assert progress.stats.perfect_games == 0
    assert progress.stats.hints_used == 1
    assert progress.stats.total_moves == 9
    assert "perfect-memory" not in progress.unlocked


def test_history_keeps_last_ten() -> None:
    history = [_entry(n) for n in range(HISTORY_LIMIT)]
    out = append_history(history, _entry(99))
    assert len(out) == HISTORY_LIMIT
    assert out[0] == _entry(1)
    assert out[-1] == _entry(99)
    assert len(history) == HISTORY_LIMIT


def test_completion_evicts_oldest_history() -> None:
    catalog = _load_catalog()
    progress = Progress(history=[_entry(n) for n in range(HISTORY_LIMIT)])
    session = start_session(catalog, "easy", seed=5)
    _solve(session)
    complete_session(progress, session, catalog, TS)

    assert len(progress.history) == HISTORY_LIMIT
    assert progress.history[0] == _entry(1)
    assert progress.history[-1].timestamp == TS


def test_updated_stats_is_a_new_value() -> None:
    before = GameStats(games_played=2, total_moves=30, total_time=90, matches_found=8, hints_used=1, perfect_games=1)
    after = updated_stats(before, moves=10, time=15, pairs=4, hints=2)
    assert after == GameStats(
        games_played=3, total_moves=40, total_time=105, matches_found=12, hints_used=3, perfect_games=1
    )
    assert before.games_played == 2
