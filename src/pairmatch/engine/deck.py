from __future__ import annotations

import random
from dataclasses import dataclass

from .types import Catalog, Difficulty


class DeckBuildError(RuntimeError):
    pass


@dataclass
class Card:
    id: str
    pair_key: str
    is_matched: bool = False


def build_deck(catalog: Catalog, difficulty: Difficulty, rng: random.Random) -> list[Card]:
    """Return a shuffled deck holding exactly two cards per selected icon."""
    spec = catalog.difficulties.get(difficulty)
    if spec is None:
        raise DeckBuildError(f"Unknown difficulty: {difficulty}")

    icon_ids = list(dict.fromkeys(catalog.icon_ids()))
    if len(icon_ids) < spec.pairs:
        raise DeckBuildError(
            f"Difficulty {difficulty} needs {spec.pairs} icons, catalog has {len(icon_ids)}."
        )

    selected = rng.sample(icon_ids, spec.pairs)
    cards: list[Card] = []
    for i, icon_id in enumerate(selected):
        cards.append(Card(id=f"{icon_id}-{i * 2}", pair_key=icon_id))
        cards.append(Card(id=f"{icon_id}-{i * 2 + 1}", pair_key=icon_id))

    rng.shuffle(cards)
    return cards
