"""
Turns a user's top skills and career matches into dashboard insights.

Templated insights are always produced locally. Generated insights from the
text-generation service are appended after them when the call succeeds; when
it fails a static fallback insight is appended instead, so the dashboard
never shows an empty list.
"""

from datetime import datetime, timezone
from typing import List, Optional

from advisor.career_matcher import CareerMatch
from config import TOP_CAREERS_FOR_INSIGHTS
from memory.models import CareerInsight, Skill
from tools.insights_api import InsightServiceError
from utils.logging_utils import get_logger

logger = get_logger(__name__)

FALLBACK_INSIGHT = CareerInsight(
    text="Your strongest skill area shows great potential for AI-related careers.",
    type="strength",
    priority="high",
)


def template_insights(top_skills: List[Skill], careers: List[CareerMatch]) -> List[CareerInsight]:
    insights = []
    if top_skills and careers:
        skill = top_skills[0]
        insights.append(CareerInsight(
            text=(
                f"Your strongest skill is {skill.name} with {skill.xp} XP. "
                f"This makes you well-suited for {careers[0].career.title} roles."
            ),
            type="strength",
            priority="high",
        ))

    if careers and careers[0].career.next_skills:
        best = careers[0].career
        insights.append(CareerInsight(
            text=(
                f"Consider developing {best.next_skills[0]} to increase your match "
                f"for {best.title} positions."
            ),
            type="improvement",
            priority="medium",
        ))

    if len(careers) > 1:
        runner_up = careers[1]
        insights.append(CareerInsight(
            text=(
                f"The {runner_up.career.title} field is growing by "
                f"{runner_up.career.growth_projection}. Your current skills show "
                f"{runner_up.match_percentage}% alignment."
            ),
            type="opportunity",
            priority="medium",
        ))

    return insights


def insight_request(top_skills: List[Skill], careers: List[CareerMatch]) -> dict:
    return {
        "skills": [{"name": s.name, "xp": s.xp, "level": s.level} for s in top_skills],
        "topCareers": [
            {"title": m.career.title, "matchPercentage": m.match_percentage}
            for m in careers[:TOP_CAREERS_FOR_INSIGHTS]
        ],
    }


def compose_insights(
    top_skills: List[Skill],
    careers: List[CareerMatch],
    client=None,
) -> List[CareerInsight]:
    """
    Build the ordered insight list for the dashboard.

    Args:
        top_skills: Skills sorted by xp, strongest first.
        careers: Career matches sorted by match percentage.
        client: Optional object with generate_insights(skills, top_careers).

    Returns:
        Templated insights, then generated ones (or the fallback insight if
        generation failed). Never empty.
    """
    insights = template_insights(top_skills, careers)

    if client is not None:
        request = insight_request(top_skills, careers)
        try:
            insights.extend(client.generate_insights(request["skills"], request["topCareers"]))
        except InsightServiceError as e:
            logger.warning(f"Falling back to static insight: {e}")
            insights.append(FALLBACK_INSIGHT)

    if not insights:
        insights.append(FALLBACK_INSIGHT)
    return insights


def build_career_report(
    skills: List[Skill],
    careers: List[CareerMatch],
    insights: List[CareerInsight],
    generated_at: Optional[datetime] = None,
) -> dict:
    """JSON-ready snapshot of the user's skills, best careers and insights."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        "generated_at": generated_at.isoformat(),
        "skills": [
            {"name": s.name, "level": s.level, "xp": s.xp, "category": s.category}
            for s in skills
        ],
        "top_careers": [m.to_dict() for m in careers[:3]],
        "insights": [i.to_dict() for i in insights],
        "recommendations": list(careers[0].career.next_skills) if careers else [],
    }
