from dataclasses import asdict

from fastapi import FastAPI
from mcp.server.fastmcp import FastMCP

from advisor.career_matcher import earned_skill_names, match_careers
from advisor.insight_composer import build_career_report, compose_insights
from advisor.prompt_loader import get_system_prompt
from config import TOP_SKILLS_LIMIT
from memory import store, tracker
from memory.models import (
    SKILL_CATEGORY_NAMES,
    GameRoundOutcome,
    SessionAnswer,
    build_skills,
    skills_by_category,
    top_skills,
)
from tools.insights_api import InsightsClient
from utils.logging_utils import get_logger

logger = get_logger(__name__)

app = FastAPI()

mcp = FastMCP(
    name="Skill Arena Career Mentor",
    instructions=get_system_prompt(),
)


def _load_skills(user_id: str):
    return build_skills(store.get_ledger(user_id))


def _dashboard(user_id: str):
    skills = _load_skills(user_id)
    careers = match_careers(earned_skill_names(skills))
    return skills, careers


@mcp.tool(
    name="record_game_round",
    description="Award skill XP for a finished mini-game round (outcome: win, lose, draw)",
)
def record_game_round(
    user_id: str,
    game_id: str,
    outcome: str,
    score: int = 0,
    response_time_ms: int = 0,
):
    try:
        round_outcome = GameRoundOutcome(game_id, outcome, score, response_time_ms)
        return tracker.record_round(user_id, round_outcome)
    except (ValueError, store.StoreError) as e:
        logger.warning(f"Round not recorded for user {user_id}: {e}")
        return {"error": str(e)}


@mcp.tool(
    name="get_skill_profile",
    description="View a user's skills with XP, levels, and strongest areas",
)
def get_skill_profile(user_id: str):
    try:
        skills = _load_skills(user_id)
    except store.StoreError as e:
        return {"error": str(e)}

    return {
        "skills": [s.to_dict() for s in skills],
        "top_skills": [s.to_dict() for s in top_skills(skills, TOP_SKILLS_LIMIT)],
        "by_category": {
            category: [s.name for s in skills_by_category(skills, category)]
            for category in SKILL_CATEGORY_NAMES
        },
    }


@mcp.tool(
    name="get_career_matches",
    description="Rank career paths by how many of their required skills the user has trained",
)
def get_career_matches(user_id: str):
    try:
        _, careers = _dashboard(user_id)
    except store.StoreError as e:
        return {"error": str(e)}
    return {"careers": [m.to_dict() for m in careers]}


@mcp.tool(
    name="get_career_insights",
    description="Get career insights from the user's top skills and best career matches",
)
def get_career_insights(user_id: str, use_ai: bool = True):
    try:
        skills, careers = _dashboard(user_id)
    except store.StoreError as e:
        return {"error": str(e)}

    client = InsightsClient() if use_ai else None
    insights = compose_insights(top_skills(skills, TOP_SKILLS_LIMIT), careers, client)
    return {"insights": [i.to_dict() for i in insights]}


@mcp.tool(
    name="get_career_report",
    description="Export a JSON career report with skills, top careers, insights and next skills",
)
def get_career_report(user_id: str, use_ai: bool = False):
    try:
        skills, careers = _dashboard(user_id)
    except store.StoreError as e:
        return {"error": str(e)}

    client = InsightsClient() if use_ai else None
    insights = compose_insights(top_skills(skills, TOP_SKILLS_LIMIT), careers, client)
    return build_career_report(skills, careers, insights)


@mcp.tool(
    name="start_game_session",
    description="Open a game session to record per-question answers",
)
def start_game_session(user_id: str, game_id: str, user_type: str = "student"):
    try:
        return {"session_id": tracker.start_session(user_id, game_id, user_type)}
    except store.StoreError as e:
        return {"error": str(e)}


@mcp.tool(
    name="record_session_answer",
    description="Append one answer to an open game session",
)
def record_session_answer(
    session_id: str,
    question_id: int,
    user_answer: str,
    correct: bool,
    response_time_ms: int = 0,
):
    answer = SessionAnswer(question_id, user_answer, correct, response_time_ms)
    try:
        return asdict(tracker.record_answer(session_id, answer))
    except (ValueError, store.StoreError) as e:
        return {"error": str(e)}


@mcp.tool(
    name="end_game_session",
    description="Mark a game session as completed",
)
def end_game_session(session_id: str):
    try:
        return asdict(tracker.end_session(session_id))
    except store.StoreError as e:
        return {"error": str(e)}


app.mount("/", mcp.sse_app())
