from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping

Tone = Literal["info", "warning", "success", "reward"]


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    tone: Tone = "info"


_REJECT_REASONS = {
    "out_of_range": "There is no card there.",
    "matched": "That pair is already found.",
    "flipped": "That card is already face up.",
    "two_flipped": "Two cards are already face up.",
    "resolving": "Wait for the cards to settle.",
}


def _fmt_time(seconds: object) -> str:
    return f"{seconds}s"


def notice_for(event: Mapping[str, object]) -> Notice | None:
    """Human-readable notice for an event, or None for events nobody announces."""
    t = event.get("type")
    if t == "TOO_FAST":
        return Notice("Operation too fast!", "Please wait a moment before continuing.", "warning")
    if t == "FLIP_REJECTED":
        reason = _REJECT_REASONS.get(str(event.get("reason")), "That card can't be flipped now.")
        return Notice("Not now", reason, "warning")
    if t == "MATCH":
        return Notice("Match!", f"Pairs found: {event.get('matched_pairs')}/{event.get('total_pairs')}", "success")
    if t == "MISMATCH":
        return Notice("No match", "Try to remember where those were.")
    if t == "HINT_USED":
        return Notice("Hint", "A matching pair is shown for a moment.")
    if t == "NO_HINT_AVAILABLE":
        return Notice("No more pairs to hint!", "All remaining cards are matched.")
    if t == "NEW_BEST_SCORE":
        bonus = event.get("bonus", 0)
        extra = f", bonus +{bonus}" if bonus else ""
        return Notice(
            "New Best Score!",
            f"Moves: {event.get('moves')}, Time: {_fmt_time(event.get('time'))}{extra}",
            "reward",
        )
    if t == "ACHIEVEMENT_UNLOCKED":
        return Notice(
            "Achievement unlocked!",
            f"{event.get('name')}: {event.get('description')} (+{event.get('points')})",
            "reward",
        )
    if t == "SESSION_COMPLETE":
        return Notice(
            "Congratulations! You found all pairs!",
            f"Moves: {event.get('moves')}, Time: {_fmt_time(event.get('time'))}, Score: {event.get('score')}",
            "success",
        )
    return None
