from types import MappingProxyType
from typing import Dict

from config import XP_SCORING_MODE
from memory import store
from memory.models import GameRoundOutcome, GameSession, SessionAnswer, SKILL_CATEGORIES
from utils.logging_utils import get_logger

logger = get_logger(__name__)

# Primary skill first; "split" scoring gives the second entry half XP.
GAME_SKILLS = MappingProxyType({
    "spot-ai": ("Media Literacy", "Critical Thinking"),
    "puzzle-duel": ("Logic", "Problem-Solving"),
    "story-battle": ("Creativity", "Communication"),
    "fact-check": ("Research", "Critical Reasoning"),
    "teaching": ("Communication", "Knowledge Depth"),
    "pattern": ("Analytical Thinking", "Intro to ML"),
    "prompt-battle": ("Prompt Engineering", "Creativity"),
    "case-simulation": ("Applied AI", "Problem-Solving"),
    "coordination-lab": ("Multi-Tool Adaptability", "Evaluation"),
    "ethical-scenarios": ("Ethical Decision-Making",),
})

BASE_XP = MappingProxyType({
    "win": 25,
    "draw": 15,
    "lose": 10,
})

SCORE_PER_BONUS_XP = 10

SCORING_MODES = ["uniform", "split"]


def get_skills_for_game(game_id: str) -> tuple:
    return GAME_SKILLS.get(game_id, ())


def compute_round_xp(outcome: str, score: int = 0) -> int:
    return BASE_XP[outcome] + score // SCORE_PER_BONUS_XP


def resolve_game_xp(round_outcome: GameRoundOutcome, mode: str = "uniform") -> Dict[str, int]:
    """
    Turn a finished round into an XP delta for the skills the game trains.

    Unknown games resolve to an empty delta instead of raising, so a new
    mini-game that is missing from GAME_SKILLS still completes its round.
    """
    if mode not in SCORING_MODES:
        raise ValueError(
            f"Invalid scoring mode '{mode}'. Choose from: {', '.join(SCORING_MODES)}"
        )

    skills = get_skills_for_game(round_outcome.game_id)
    if not skills:
        logger.warning(f"No skills mapped for game '{round_outcome.game_id}'; no XP awarded")
        return {}

    total = compute_round_xp(round_outcome.outcome, round_outcome.score)

    if mode == "split":
        delta = {skills[0]: total}
        for secondary in skills[1:]:
            delta[secondary] = delta.get(secondary, 0) + total // 2
        return delta

    return {skill: total for skill in skills}


def merge_ledger(current: Dict[str, int], delta: Dict[str, int]) -> Dict[str, int]:
    merged = dict(current)
    for skill, xp in delta.items():
        merged[skill] = merged.get(skill, 0) + xp
    return merged


def record_round(user_id: str, round_outcome: GameRoundOutcome, mode: str = None) -> dict:
    """Resolve a round's XP and add it to the user's persisted ledger."""
    delta = resolve_game_xp(round_outcome, mode or XP_SCORING_MODE)

    if delta:
        ledger = store.merge_ledger(user_id, delta)
    else:
        ledger = store.get_ledger(user_id)

    logger.info(
        f"User {user_id} finished {round_outcome.game_id} ({round_outcome.outcome}): {delta}"
    )
    return {
        "skills_gained": list(delta.keys()),
        "xp_gained": delta,
        "ledger": {k: v for k, v in ledger.items() if k in SKILL_CATEGORIES},
    }


def start_session(user_id: str, game_id: str, user_type: str = "student") -> str:
    return store.start_session(user_id, game_id, user_type)


def record_answer(session_id: str, answer: SessionAnswer) -> GameSession:
    if answer.response_time_ms < 0:
        raise ValueError("response_time_ms must be non-negative")
    return store.append_answer(session_id, answer)


def end_session(session_id: str) -> GameSession:
    return store.complete_session(session_id)
