"""Zenji card game engine."""

__version__ = "0.1.0"

from .deck import Card, create_deck, shuffle_cards, DECK_SIZE
from .deal import deal_hands, Deal, MONKEY_MIND_SIZE, MAX_PLAYERS
from .errors import (
    ZenjiError,
    PlayerNotFound,
    NotYourTurn,
    InvalidCardIndex,
    IneligibleCard,
    HigherMindFull,
    AlreadyChecked,
    EmptyPastPile,
    EmptyFuturePile,
    CardProtected,
    NoZenjiCaller,
    NotAIPlayer,
)
from .state import MatchState, Player, initialize_match, start_match, HIGHER_MIND_CAPACITY
from .scoring import (
    effective_value,
    monkey_mind_score,
    one_per_value,
    highest_ep_card,
    score_round,
    score_satori,
    find_winner,
    WINNING_SCORE,
)
from .visibility import check_cards, update_card_visibility, player_view
from .turn import (
    draw_from_future,
    discard_to_past,
    exchange_monkey_mind_card,
    add_to_higher_mind,
    end_turn,
    call_zenji,
    knock_out_card,
    end_round,
)
from .ai import make_ai_move, take_ai_turn, run_ai_match
from .actions import apply_action, ActionResult
