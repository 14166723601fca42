from __future__ import annotations

import pytest

from pairmatch.services.notify import notice_for


def test_too_fast_warns() -> None:
    notice = notice_for({"type": "TOO_FAST", "index": 3})
    assert notice is not None
    assert notice.title == "Operation too fast!"
    assert notice.tone == "warning"


def test_rejected_flip_explains_reason() -> None:
    notice = notice_for({"type": "FLIP_REJECTED", "index": 2, "reason": "matched"})
    assert notice is not None
    assert notice.description == "That pair is already found."

    fallback = notice_for({"type": "FLIP_REJECTED", "index": 2, "reason": "something-new"})
    assert fallback is not None
    assert fallback.description == "That card can't be flipped now."


def test_new_best_mentions_bonus_only_when_paid() -> None:
    first = notice_for({"type": "NEW_BEST_SCORE", "difficulty": "easy", "moves": 8, "time": 20, "bonus": 0})
    assert first is not None
    assert first.description == "Moves: 8, Time: 20s"

    better = notice_for({"type": "NEW_BEST_SCORE", "difficulty": "easy", "moves": 8, "time": 15, "bonus": 50})
    assert better is not None
    assert better.description.endswith("bonus +50")
    assert better.tone == "reward"


def test_session_complete_summary() -> None:
    notice = notice_for({"type": "SESSION_COMPLETE", "difficulty": "easy", "moves": 8, "time": 9, "score": 700})
    assert notice is not None
    assert notice.description == "Moves: 8, Time: 9s, Score: 700"


@pytest.mark.parametrize("event_type", ["CARD_FLIPPED", "HINT_HIDDEN", "SESSION_STARTED"])
def test_quiet_events_have_no_notice(event_type: str) -> None:
    assert notice_for({"type": event_type}) is None
