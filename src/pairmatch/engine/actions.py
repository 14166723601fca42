from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FlipAction:
    index: int


@dataclass(frozen=True)
class HintAction:
    pass


Action = FlipAction | HintAction
