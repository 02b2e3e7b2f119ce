"""
Environment wrapper around the Zenji engine.

Design:
- Single-agent view: one learning seat per env instance.
- Episode = one match, until a player reaches 15 points or ``max_rounds``
  rounds have been played.
- At each step the env exposes the learning seat's turn: draw and discard,
  draw and exchange into a slot, knock out a slot (once per turn), or call Zenji.
- Other seats are the scripted greedy AI from ``zenji.ai``.
- Reward is given only at the end: learning seat's score minus the best
  opponent score.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import List, Optional

import numpy as np

from .actions import exchange_from_future
from .ai import DEFAULT_ZENJI_THRESHOLD, ai_step
from .env import (
    ACTION_CALL_ZENJI,
    ACTION_DRAW_DISCARD,
    ACTION_EXCHANGE_BASE,
    ACTION_KNOCK_OUT_BASE,
    NUM_ACTIONS,
    OBS_SIZE,
    ROUND_SCALE,
    decode_slot,
    describe_action,
    encode_observation,
    legal_action_mask,
)
from .state import ACTIVE, GAME_END, ROUND_END, MatchState, initialize_match, start_match
from .turn import call_zenji, discard_to_past, draw_from_future, end_round, end_turn, knock_out_card

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Container returned by ZenjiEnv.step/reset."""

    obs: np.ndarray
    reward: float
    done: bool
    info: dict
    legal_actions_mask: np.ndarray


class ZenjiEnv:
    """
    Zenji environment (single learning seat, full match episodes).

    Public API (minimal, Gym-like but without external dependency):
      - reset() -> StepResult
      - step(action: int) -> StepResult
    """

    def __init__(
        self,
        num_players: int = 3,
        learning_player: int = 0,
        max_rounds: int = ROUND_SCALE,
        zenji_threshold: int = DEFAULT_ZENJI_THRESHOLD,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 2 <= num_players <= 4:
            raise ValueError(f"Unsupported num_players {num_players}; expected 2..4.")
        if not 0 <= learning_player < num_players:
            raise ValueError(f"learning_player {learning_player} out of range")
        self.num_players = num_players
        self.learning_player = learning_player
        self.max_rounds = max_rounds
        self.zenji_threshold = zenji_threshold
        self.rng = rng or random.Random()

        self._state: Optional[MatchState] = None
        self._knocked_this_turn = False

    @property
    def state(self) -> MatchState:
        assert self._state is not None, "call reset() first"
        return self._state

    # ---- Public API ----

    def reset(self) -> StepResult:
        """Start a new match and return the first decision for the learning seat."""
        names = [f"Seat {i + 1}" for i in range(self.num_players)]
        state = initialize_match(names, rng=self.rng)
        players = tuple(
            replace(p, is_ai=i != self.learning_player) for i, p in enumerate(state.players)
        )
        self._state = start_match(replace(state, players=players))
        self._knocked_this_turn = False
        return self._advance_until_learning_turn()

    def step(self, action: int) -> StepResult:
        """Apply ``action`` for the learning seat; invalid or illegal actions raise ValueError."""
        state = self.state
        if state.status == GAME_END or self._out_of_rounds():
            return self._terminal()
        if not 0 <= action < NUM_ACTIONS:
            raise ValueError(f"Invalid action {action}")
        if not self._mask()[action]:
            raise ValueError(f"Illegal action {describe_action(action)}")

        me = state.players[self.learning_player].id
        if action == ACTION_DRAW_DISCARD:
            state, card = draw_from_future(state, me, rng=self.rng)
            state = end_turn(discard_to_past(state, card))
        elif ACTION_EXCHANGE_BASE <= action < ACTION_KNOCK_OUT_BASE:
            state = end_turn(exchange_from_future(state, me, decode_slot(action), rng=self.rng))
        elif ACTION_KNOCK_OUT_BASE <= action < ACTION_CALL_ZENJI:
            self._state = knock_out_card(state, me, decode_slot(action), rng=self.rng)
            self._knocked_this_turn = True
            return self._advance_until_learning_turn()
        else:
            state = call_zenji(state, me)

        self._state = state
        self._knocked_this_turn = False
        return self._advance_until_learning_turn()

    # ---- Internal helpers ----

    def _mask(self) -> np.ndarray:
        return legal_action_mask(
            self.state, self.learning_player, allow_knock_out=not self._knocked_this_turn
        )

    def _out_of_rounds(self) -> bool:
        return self.state.round_number > self.max_rounds

    def _advance_until_learning_turn(self) -> StepResult:
        """Play AI seats and round ends until the learning seat must act, or the match ends."""
        while True:
            state = self.state
            if state.status == GAME_END or self._out_of_rounds():
                return self._terminal()
            if state.status == ROUND_END:
                self._state = end_round(state, rng=self.rng)
                self._knocked_this_turn = False
                continue
            if state.status != ACTIVE:
                raise RuntimeError(f"Unexpected match status {state.status}")
            if state.current_turn == self.learning_player:
                return StepResult(
                    obs=encode_observation(state, self.learning_player),
                    reward=0.0,
                    done=False,
                    info={"round_number": state.round_number},
                    legal_actions_mask=self._mask(),
                )
            self._state = ai_step(state, zenji_threshold=self.zenji_threshold, rng=self.rng)

    def _terminal(self) -> StepResult:
        state = self.state
        scores: List[int] = [p.score for p in state.players]
        mine = scores[self.learning_player]
        others = [s for i, s in enumerate(scores) if i != self.learning_player]
        logger.debug("Episode over: scores=%s winner=%s", scores, state.winner)
        return StepResult(
            obs=np.zeros(OBS_SIZE, dtype=np.float32),
            reward=float(mine - max(others)),
            done=True,
            info={
                "scores": tuple(scores),
                "winner": state.winner,
                "rounds_played": state.round_number,
            },
            legal_actions_mask=np.zeros(NUM_ACTIONS, dtype=bool),
        )
