from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Literal

from .actions import Action, FlipAction, HintAction
from .deck import Card, build_deck
from .types import Catalog, Difficulty

Event = dict[str, object]

PendingKind = Literal["match", "mismatch", "hide_hint"]


@dataclass(frozen=True)
class BoardConfig:
    # seconds
    action_cooldown: float = 0.3
    match_delay: float = 0.5
    mismatch_delay: float = 1.0
    hint_duration: float = 1.0


@dataclass
class TurnState:
    flipped_indexes: list[int] = field(default_factory=list)
    is_resolving: bool = False
    hinted_indexes: list[int] = field(default_factory=list)

    def visible_indexes(self) -> list[int]:
        visible = list(self.flipped_indexes)
        for i in self.hinted_indexes:
            if i not in visible:
                visible.append(i)
        return visible


@dataclass(frozen=True)
class Pending:
    due: float
    seq: int
    kind: PendingKind
    indexes: tuple[int, ...]


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None


@dataclass
class BoardState:
    difficulty: Difficulty
    config: BoardConfig
    seed: int
    rng: random.Random
    cards: list[Card]
    turn: TurnState = field(default_factory=TurnState)
    moves: int = 0
    last_action_at: float | None = None
    pending: list[Pending] = field(default_factory=list)
    action_log: list[tuple[float, Action]] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)
    _seq: int = 0

    @property
    def total_pairs(self) -> int:
        return len(self.cards) // 2

    @property
    def matched_pairs(self) -> int:
        return sum(1 for c in self.cards if c.is_matched) // 2

    @property
    def is_complete(self) -> bool:
        return self.matched_pairs == self.total_pairs

    def unmatched_indexes(self) -> list[int]:
        return [i for i, c in enumerate(self.cards) if not c.is_matched]


def _emit(state: BoardState, events: list[Event], event: Event) -> None:
    state.event_log.append(event)
    events.append(event)


def _schedule(state: BoardState, due: float, kind: PendingKind, indexes: Iterable[int]) -> None:
    state._seq += 1
    state.pending.append(Pending(due=due, seq=state._seq, kind=kind, indexes=tuple(indexes)))


def _run_pending(state: BoardState, job: Pending, events: list[Event]) -> None:
    turn = state.turn
    if job.kind == "match":
        for i in job.indexes:
            state.cards[i].is_matched = True
        turn.flipped_indexes = []
        turn.is_resolving = False
        _emit(
            state,
            events,
            {
                "type": "MATCH",
                "indexes": list(job.indexes),
                "pair_key": state.cards[job.indexes[0]].pair_key,
                "matched_pairs": state.matched_pairs,
                "total_pairs": state.total_pairs,
            },
        )
    elif job.kind == "mismatch":
        turn.flipped_indexes = []
        turn.is_resolving = False
        _emit(state, events, {"type": "MISMATCH", "indexes": list(job.indexes)})
    elif job.kind == "hide_hint":
        # An index revealed by a later, still pending hint stays visible.
        still_shown = {i for p in state.pending if p.kind == "hide_hint" for i in p.indexes}
        turn.hinted_indexes = [
            i for i in turn.hinted_indexes if i not in job.indexes or i in still_shown
        ]
        _emit(state, events, {"type": "HINT_HIDDEN", "indexes": list(job.indexes)})


def advance(state: BoardState, now: float) -> list[Event]:
    """Run every scheduled continuation that is due at `now`, oldest first."""
    events: list[Event] = []
    while True:
        due = [p for p in state.pending if p.due <= now]
        if not due:
            return events
        job = min(due, key=lambda p: (p.due, p.seq))
        state.pending.remove(job)
        _run_pending(state, job, events)


def _too_fast(state: BoardState, now: float) -> bool:
    if state.last_action_at is None:
        return False
    return now - state.last_action_at < state.config.action_cooldown


def _reject(state: BoardState, events: list[Event], index: int, reason: str, error: str) -> StepResult:
    _emit(state, events, {"type": "FLIP_REJECTED", "index": index, "reason": reason})
    return StepResult(ok=False, events=events, error=error)


def _flip(state: BoardState, action: FlipAction, now: float, events: list[Event]) -> StepResult:
    turn = state.turn
    index = action.index
    if index < 0 or index >= len(state.cards):
        return _reject(state, events, index, "out_of_range", "No card at that position.")
    if state.cards[index].is_matched:
        return _reject(state, events, index, "matched", "Card already matched.")
    if index in turn.flipped_indexes:
        return _reject(state, events, index, "flipped", "Card already flipped.")
    if len(turn.flipped_indexes) >= 2:
        return _reject(state, events, index, "two_flipped", "Two cards are already flipped.")
    if turn.is_resolving:
        return _reject(state, events, index, "resolving", "Wait for the cards to settle.")
    if _too_fast(state, now):
        _emit(state, events, {"type": "TOO_FAST", "index": index})
        return StepResult(ok=False, events=events, error="Too fast.")

    turn.flipped_indexes.append(index)
    state.moves += 1
    state.last_action_at = now
    _emit(
        state,
        events,
        {"type": "CARD_FLIPPED", "index": index, "card_id": state.cards[index].id, "moves": state.moves},
    )

    if len(turn.flipped_indexes) == 2:
        turn.is_resolving = True
        first, second = turn.flipped_indexes
        if state.cards[first].pair_key == state.cards[second].pair_key:
            _schedule(state, now + state.config.match_delay, "match", (first, second))
        else:
            _schedule(state, now + state.config.mismatch_delay, "mismatch", (first, second))
    return StepResult(ok=True, events=events)


def _hint(state: BoardState, now: float, events: list[Event]) -> StepResult:
    # A pair waiting on its match continuation is already found.
    settling = {i for p in state.pending if p.kind == "match" for i in p.indexes}
    unmatched = [i for i in state.unmatched_indexes() if i not in settling]
    if len(unmatched) < 2:
        _emit(state, events, {"type": "NO_HINT_AVAILABLE"})
        return StepResult(ok=False, events=events, error="No pairs left to hint.")
    if _too_fast(state, now):
        _emit(state, events, {"type": "TOO_FAST", "index": None})
        return StepResult(ok=False, events=events, error="Too fast.")

    chosen = state.rng.choice(unmatched)
    key = state.cards[chosen].pair_key
    pair = [i for i in unmatched if state.cards[i].pair_key == key]

    turn = state.turn
    for i in pair:
        if i not in turn.hinted_indexes:
            turn.hinted_indexes.append(i)
    state.moves += 1
    state.last_action_at = now
    _schedule(state, now + state.config.hint_duration, "hide_hint", pair)
    _emit(state, events, {"type": "HINT_USED", "indexes": list(pair), "pair_key": key, "moves": state.moves})
    return StepResult(ok=True, events=events)


def step(state: BoardState, action: Action, now: float) -> StepResult:
    """Apply a single player action at time `now` (seconds).

    Continuations due at `now` run first, so their events lead the result.
    The state is mutated in place and stays deterministic for a given
    (seed, timed action sequence).
    """
    events = advance(state, now)
    state.action_log.append((now, action))

    if isinstance(action, FlipAction):
        return _flip(state, action, now, events)
    if isinstance(action, HintAction):
        return _hint(state, now, events)
    return StepResult(ok=False, events=events, error="Unknown action.")


def new_board(
    catalog: Catalog,
    difficulty: Difficulty,
    seed: int,
    config: BoardConfig | None = None,
) -> BoardState:
    cfg = config or BoardConfig()
    rng = random.Random(seed)
    cards = build_deck(catalog, difficulty, rng)
    return BoardState(difficulty=difficulty, config=cfg, seed=seed, rng=rng, cards=cards)


def replay(
    catalog: Catalog,
    difficulty: Difficulty,
    seed: int,
    actions: Iterable[tuple[float, Action]],
    config: BoardConfig | None = None,
) -> BoardState:
    state = new_board(catalog, difficulty, seed, config=config)
    for now, a in actions:
        step(state, a, now)
    return state
