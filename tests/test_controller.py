from __future__ import annotations

import json
import random
from dataclasses import replace
from pathlib import Path

import pytest

from pairmatch.engine.deck import DeckBuildError
from pairmatch.engine.types import Catalog, DifficultySpec
from pairmatch.paths import get_paths
from pairmatch.services.content import ContentService
from pairmatch.services.game import GameController, GameView
from pairmatch.services.progress import ProgressService
from pairmatch.services.storage import STORAGE_KEY, MemoryKeyValueStore
from pairmatch.services.telemetry import TelemetryService

TS = "2026-02-03T04:05:06+00:00"


def _load_catalog() -> Catalog:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir).load_catalog()


def _controller(store: MemoryKeyValueStore | None = None, **kwargs: object) -> GameController:
    service = ProgressService(store if store is not None else MemoryKeyValueStore())
    return GameController(_load_catalog(), service, rng=random.Random(7), timestamp=lambda: TS, **kwargs)  # type: ignore[arg-type]


def _pairs(view: GameView) -> list[tuple[int, int]]:
    by_key: dict[str, list[int]] = {}
    for i, c in enumerate(view.cards):
        by_key.setdefault(c.pair_key, []).append(i)
    return [(a, b) for a, b in by_key.values()]


def _mismatch(view: GameView) -> tuple[int, int]:
    first = view.cards[0].pair_key
    other = next(i for i, c in enumerate(view.cards) if c.pair_key != first)
    return 0, other


def _types(events: list[dict[str, object]]) -> list[object]:
    return [e["type"] for e in events]


def test_full_game_is_recorded_and_saved() -> None:
    store = MemoryKeyValueStore()
    ctl = _controller(store)
    ctl.reset("easy", 0.0)
    view = ctl.view()
    assert view is not None

    t = 1.0
    for a, b in _pairs(view):
        ctl.flip(a, t)
        ctl.flip(b, t + 1.0)
        t += 2.0
    events = ctl.update(9.0)

    assert "SESSION_COMPLETE" in _types(events)
    assert not ctl.timer.running
    assert ctl.session is not None and ctl.session.time == 9
    assert ctl.progress.stats.games_played == 1
    assert ctl.progress.history[0].moves == 8
    assert ctl.progress.history[0].time == 9
    assert ctl.progress.history[0].timestamp == TS

    saved = json.loads(store.data[STORAGE_KEY])
    assert saved["game_stats"]["games_played"] == 1
    assert saved["best_scores"]["easy"] == {"moves": 8, "time": 9}
    assert "first-win" in saved["unlocked_achievements"]

    final = ctl.view()
    assert final is not None and not final.is_active
    assert all(c.face_up for c in final.cards)
    assert ctl.update(60.0) == []


def test_progress_is_loaded_at_startup() -> None:
    store = MemoryKeyValueStore()
    first = _controller(store)
    first.reset("easy", 0.0)
    view = first.view()
    assert view is not None
    t = 1.0
    for a, b in _pairs(view):
        first.flip(a, t)
        first.flip(b, t + 1.0)
        t += 2.0
    first.update(t)

    second = _controller(store)
    assert second.progress.stats.games_played == 1
    assert [a.id for a in second.unlocked_achievements()][0] == "first-win"


def test_reset_discards_pending_resolution_and_timer() -> None:
    ctl = _controller()
    ctl.reset("easy", 0.0)
    view = ctl.view()
    assert view is not None
    a, b = _mismatch(view)
    ctl.flip(a, 1.0)
    ctl.flip(b, 2.0)
    old_timer = ctl.timer

    ctl.reset("medium", 2.5)
    assert not old_timer.running
    events = ctl.update(10.0)
    assert "MISMATCH" not in _types(events)

    view = ctl.view()
    assert view is not None
    assert view.difficulty == "medium"
    assert len(view.cards) == 16
    assert view.moves == 0
    assert view.score == 0
    assert view.time == 7
    assert not any(c.face_up for c in view.cards)


def test_mismatch_then_view_shows_cards_face_down() -> None:
    ctl = _controller()
    ctl.reset("easy", 0.0)
    view = ctl.view()
    assert view is not None
    a, b = _mismatch(view)
    ctl.flip(a, 1.0)
    ctl.flip(b, 2.0)

    view = ctl.view()
    assert view is not None
    assert view.cards[a].face_up and view.cards[b].face_up

    assert _types(ctl.update(3.0)) == ["MISMATCH"]
    view = ctl.view()
    assert view is not None
    assert not view.cards[a].face_up and not view.cards[b].face_up
    assert view.moves == 2
    assert view.score == 0


def test_commands_before_reset_are_ignored() -> None:
    ctl = _controller()
    assert ctl.view() is None
    assert ctl.flip(0, 1.0) == []
    assert ctl.hint(1.0) == []
    assert ctl.update(1.0) == []


def test_hint_through_controller() -> None:
    ctl = _controller()
    ctl.reset("easy", 0.0)
    events = ctl.hint(1.0)
    assert _types(events) == ["HINT_USED"]
    view = ctl.view()
    assert view is not None
    assert view.score == -50
    assert view.moves == 1
    assert sum(1 for c in view.cards if c.face_up) == 2

    ctl.update(2.0)
    view = ctl.view()
    assert view is not None
    assert not any(c.face_up for c in view.cards)


def test_failed_save_does_not_break_completion() -> None:
    class _ReadOnlyStore(MemoryKeyValueStore):
        def set(self, key: str, value: str) -> None:
            raise PermissionError("read-only")

    ctl = _controller(_ReadOnlyStore())
    ctl.reset("easy", 0.0)
    view = ctl.view()
    assert view is not None
    t = 1.0
    for a, b in _pairs(view):
        ctl.flip(a, t)
        ctl.flip(b, t + 1.0)
        t += 2.0
    events = ctl.update(t)

    assert "SESSION_COMPLETE" in _types(events)
    assert ctl.progress.stats.games_played == 1


def test_events_are_written_to_telemetry(tmp_path: Path) -> None:
    log_path = tmp_path / "telemetry.jsonl"
    ctl = _controller(telemetry=TelemetryService(log_path))
    ctl.reset("easy", 0.0)
    ctl.flip(0, 1.0)

    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [rec["type"] for rec in lines] == ["SESSION_STARTED", "CARD_FLIPPED"]
    assert lines[1]["payload"]["index"] == 0


def test_failed_reset_keeps_current_session_running() -> None:
    catalog = _load_catalog()
    oversized = DifficultySpec(pairs=len(catalog.icons) + 1, grid_size=5)
    broken = replace(catalog, difficulties={**catalog.difficulties, "hard": oversized})
    ctl = GameController(broken, ProgressService(MemoryKeyValueStore()), rng=random.Random(7), timestamp=lambda: TS)
    ctl.reset("easy", 0.0)
    session = ctl.session

    with pytest.raises(DeckBuildError):
        ctl.reset("hard", 1.0)

    assert ctl.session is session
    assert ctl.timer.running
    ctl.update(3.0)
    view = ctl.view()
    assert view is not None
    assert view.difficulty == "easy"
    assert view.time == 3
