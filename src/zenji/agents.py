"""
Seat policies for ``ZenjiEnv``.

A policy sees one seat's flat observation (``zenji.env.encode_observation``)
and the legal mask over the ten Zenji actions: draw-and-discard, exchange
into slot 0-3, knock out slot 0-3, call Zenji. It answers with one index.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence

from .deal import MONKEY_MIND_SIZE
from .env import ACTION_CALL_ZENJI, ACTION_DRAW_DISCARD, ACTION_EXCHANGE_BASE


class Policy(Protocol):
    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """Index into the Zenji action layout; must be marked legal in the mask."""


def _legal_indices(legal_actions_mask: Iterable[bool]) -> List[int]:
    legal = [i for i, ok in enumerate(legal_actions_mask) if ok]
    if not legal:
        # Call Zenji is open whenever the seat holds the turn
        raise ValueError("Empty legal mask: the seat is not on turn")
    return legal


@dataclass
class RandomAgent:
    """Picks any legal Zenji action with equal odds (Call Zenji included)."""

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        return self._rng.choice(_legal_indices(legal_actions_mask))


@dataclass
class ThresholdAgent:
    """
    Observation-only heuristic: call Zenji once the known part of the Monkey
    Mind is low enough, otherwise swap out the highest known card.

    Only reads the face-up slot features at the start of the observation, so
    it never uses information the seat cannot see.
    """

    zenji_below: float = 5.0
    keep_at_most: float = 4.0
    value_scale: float = 13.0

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        mask = list(legal_actions_mask)
        legal = set(_legal_indices(mask))

        known = []
        for slot in range(MONKEY_MIND_SIZE):
            if obs[2 * slot] > 0.5:
                known.append((obs[2 * slot + 1] * self.value_scale, slot))
        total = sum(v for v, _ in known)
        if len(known) == MONKEY_MIND_SIZE and total <= self.zenji_below and ACTION_CALL_ZENJI in legal:
            return ACTION_CALL_ZENJI

        # Unknown slots are assumed worse than any known card
        unknown = [s for s in range(MONKEY_MIND_SIZE) if obs[2 * s] <= 0.5]
        worst_known = [slot for v, slot in sorted(known, reverse=True) if v > self.keep_at_most]
        for slot in unknown + worst_known:
            if ACTION_EXCHANGE_BASE + slot in legal:
                return ACTION_EXCHANGE_BASE + slot
        if ACTION_DRAW_DISCARD in legal:
            return ACTION_DRAW_DISCARD
        return min(legal)


__all__ = ["Policy", "RandomAgent", "ThresholdAgent"]
