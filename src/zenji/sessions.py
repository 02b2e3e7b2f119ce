"""
In-memory registry of matches keyed by an opaque session id.

The engine itself holds no global match; a collaborating server keeps one
MatchState per session here. ``apply`` runs one action at a time per registry
so each action is fully applied before the next begins.
"""
from __future__ import annotations

import logging
import random
import secrets
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .actions import Action, ActionResult, apply_action
from .persistence import match_from_json, match_to_json
from .state import MatchState, initialize_match, start_match

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 9  # 12 url-safe characters


class SessionNotFound(KeyError):
    """No match is registered under the given session id."""


def new_session_id() -> str:
    return secrets.token_urlsafe(SESSION_ID_BYTES)


@dataclass
class SessionRegistry:
    """Session id -> current MatchState."""

    sessions: Dict[str, MatchState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def create(
        self,
        player_names: Sequence[str],
        include_ai: bool = False,
        start: bool = True,
        rng: random.Random | None = None,
    ) -> str:
        """Initialise (and by default start) a match; returns its session id."""
        state = initialize_match(player_names, include_ai=include_ai, rng=rng)
        if start:
            state = start_match(state)
        with self._lock:
            session_id = new_session_id()
            while session_id in self.sessions:
                session_id = new_session_id()
            self.sessions[session_id] = state
        logger.info("Created session %s with %d players", session_id, len(state.players))
        return session_id

    def get(self, session_id: str) -> MatchState:
        try:
            return self.sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None

    def replace(self, session_id: str, state: MatchState) -> None:
        with self._lock:
            self.get(session_id)
            self.sessions[session_id] = state

    def apply(
        self,
        session_id: str,
        action: Action,
        player_id: str | None = None,
        rng: random.Random | None = None,
    ) -> ActionResult:
        """
        Apply ``action`` to the session's match and store the new state.
        A rejected action leaves the stored state as it was.
        """
        with self._lock:
            state = self.get(session_id)
            result = apply_action(state, action, player_id=player_id, rng=rng)
            self.sessions[session_id] = result.state
        return result

    def remove(self, session_id: str) -> None:
        with self._lock:
            self.get(session_id)
            del self.sessions[session_id]

    def ids(self) -> List[str]:
        return list(self.sessions.keys())

    def export_json(self, session_id: str) -> str:
        return match_to_json(self.get(session_id))

    def import_json(self, s: str, session_id: str | None = None) -> str:
        """
        Register a match restored from JSON; returns its session id. An explicit
        ``session_id`` that is already registered raises ValueError.
        """
        state = match_from_json(s)
        with self._lock:
            if session_id is None:
                session_id = new_session_id()
                while session_id in self.sessions:
                    session_id = new_session_id()
            elif session_id in self.sessions:
                raise ValueError(f"Session {session_id} already exists")
            self.sessions[session_id] = state
        return session_id


__all__ = ["SessionRegistry", "SessionNotFound", "new_session_id"]
