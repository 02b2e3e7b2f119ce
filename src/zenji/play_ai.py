"""
Tiny CLI to run Zenji matches between scripted players.

Usage (from project root, after installing in editable mode):
    python -m zenji.play_ai --players 3 --matches 5
    python -m zenji.play_ai --mode env --agent threshold
"""
from __future__ import annotations

import argparse
import logging
import random
from dataclasses import replace

from .agents import Policy, RandomAgent, ThresholdAgent
from .ai import DEFAULT_ZENJI_THRESHOLD, run_ai_match
from .env_game import StepResult, ZenjiEnv
from .state import GAME_END, MatchState, initialize_match, start_match

logger = logging.getLogger(__name__)


def all_ai_match(num_players: int, rng: random.Random) -> MatchState:
    """Started match with every seat controlled by the scripted AI."""
    state = initialize_match([f"AI Player {i + 1}" for i in range(num_players)], rng=rng)
    players = tuple(replace(p, is_ai=True) for p in state.players)
    return start_match(replace(state, players=players))


def run_scripted_matches(num_players: int, matches: int, threshold: int, seed: int) -> None:
    rng = random.Random(seed)
    for m in range(matches):
        final = run_ai_match(all_ai_match(num_players, rng), zenji_threshold=threshold, rng=rng)
        scores = ", ".join(f"{p.name}={p.score}" for p in final.players)
        if final.status == GAME_END:
            print(f"match {m + 1}: winner={final.winner} rounds={final.round_number} [{scores}]")
        else:
            print(f"match {m + 1}: unfinished after turn cap, round={final.round_number} [{scores}]")


def run_env_matches(num_players: int, matches: int, agent: Policy, seed: int) -> None:
    rng = random.Random(seed)
    env = ZenjiEnv(num_players=num_players, learning_player=0, rng=rng)
    for m in range(matches):
        step: StepResult = env.reset()
        steps = 0
        while not step.done and steps < 100_000:
            step = env.step(agent.act(step.obs, step.legal_actions_mask))
            steps += 1
        print(
            f"match {m + 1}: steps={steps}, reward={step.reward}, "
            f"scores={step.info.get('scores')}, winner={step.info.get('winner')}"
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run Zenji matches between scripted players.")
    parser.add_argument(
        "--mode",
        choices=["scripted", "env"],
        default="scripted",
        help="scripted: all seats use the greedy AI; env: seat 0 is driven by --agent.",
    )
    parser.add_argument(
        "--agent",
        choices=["random", "threshold"],
        default="random",
        help="Policy for the learning seat in env mode.",
    )
    parser.add_argument(
        "--players",
        type=int,
        default=3,
        help="Number of seats (2..4).",
    )
    parser.add_argument(
        "--matches",
        type=int,
        default=3,
        help="Number of matches to play.",
    )
    parser.add_argument(
        "--zenji-threshold",
        type=int,
        default=DEFAULT_ZENJI_THRESHOLD,
        help="Monkey Mind total at or below which the scripted AI calls Zenji.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not 2 <= args.players <= 4:
        parser.error("--players must be between 2 and 4")

    if args.mode == "scripted":
        run_scripted_matches(args.players, args.matches, args.zenji_threshold, args.seed)
    else:
        agent: Policy = RandomAgent(seed=args.seed) if args.agent == "random" else ThresholdAgent()
        run_env_matches(args.players, args.matches, agent, args.seed)


if __name__ == "__main__":
    main()
