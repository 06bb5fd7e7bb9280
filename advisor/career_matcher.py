"""
Static career catalog and skill-overlap matching.

A career's match percentage is the share of its required skills the user
has earned XP in, rounded half up to a whole percent.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from memory.models import Skill


@dataclass(frozen=True)
class CareerResource:
    title: str
    url: str
    type: str  # course | article | tool | certification


@dataclass(frozen=True)
class CareerRecord:
    id: str
    title: str
    description: str
    required_skills: Tuple[str, ...]
    average_salary: str
    growth_projection: str
    next_skills: Tuple[str, ...]
    resources: Tuple[CareerResource, ...] = ()


@dataclass(frozen=True)
class CareerMatch:
    career: CareerRecord
    match_percentage: int

    def to_dict(self) -> dict:
        career = self.career
        return {
            "id": career.id,
            "title": career.title,
            "description": career.description,
            "required_skills": list(career.required_skills),
            "average_salary": career.average_salary,
            "growth_projection": career.growth_projection,
            "match_percentage": self.match_percentage,
            "next_skills": list(career.next_skills),
            "resources": [vars(r) for r in career.resources],
        }


CAREER_CATALOG = (
    CareerRecord(
        id="ai-engineer",
        title="AI/ML Engineer",
        description="Design and develop AI systems, machine learning models, and intelligent applications.",
        required_skills=("Logic", "Problem-Solving", "Analytical Thinking", "Intro to ML", "Applied AI"),
        average_salary="$120k - $200k",
        growth_projection="+40% by 2030",
        next_skills=("Deep Learning", "Python Programming", "Statistics", "Computer Vision"),
        resources=(
            CareerResource("Machine Learning Course", "https://coursera.org/ml", "course"),
            CareerResource("TensorFlow Certification", "https://tensorflow.org/certificate", "certification"),
        ),
    ),
    CareerRecord(
        id="content-creator",
        title="AI Content Creator",
        description="Create engaging content using AI tools, focusing on education and entertainment.",
        required_skills=("Creativity", "Communication", "Media Literacy", "Prompt Engineering"),
        average_salary="$50k - $150k",
        growth_projection="+30% by 2030",
        next_skills=("Video Production", "Social Media Marketing", "Brand Strategy"),
        resources=(
            CareerResource("Content Strategy Guide", "https://example.com/content", "article"),
            CareerResource("AI Content Tools", "https://example.com/tools", "tool"),
        ),
    ),
    CareerRecord(
        id="ai-ethicist",
        title="AI Ethics Specialist",
        description="Ensure responsible AI development and deployment, addressing bias and ethical concerns.",
        required_skills=("Ethical Decision-Making", "Critical Thinking", "Communication", "Research"),
        average_salary="$90k - $160k",
        growth_projection="+50% by 2030",
        next_skills=("Policy Analysis", "Legal Knowledge", "Philosophy", "Risk Assessment"),
        resources=(
            CareerResource("AI Ethics Certificate", "https://example.com/ethics", "certification"),
            CareerResource("Ethics in AI Research", "https://example.com/research", "article"),
        ),
    ),
    CareerRecord(
        id="data-scientist",
        title="Data Scientist",
        description="Analyze complex data to extract insights and drive business decisions.",
        required_skills=("Analytical Thinking", "Logic", "Research", "Problem-Solving"),
        average_salary="$100k - $180k",
        growth_projection="+35% by 2030",
        next_skills=("Statistics", "R/Python", "Data Visualization", "SQL"),
        resources=(
            CareerResource("Data Science Bootcamp", "https://example.com/ds", "course"),
            CareerResource("Tableau Certification", "https://example.com/tableau", "certification"),
        ),
    ),
)


def earned_skill_names(skills: Iterable[Skill]) -> List[str]:
    """Names of the skills the user has any XP in."""
    return [s.name for s in skills if s.xp > 0]


def match_percentage(required_skills: Iterable[str], user_skill_names: Iterable[str]) -> int:
    required = set(required_skills)
    if not required:
        return 0
    matched = len(required & set(user_skill_names))
    # round(100 * matched / total) with halves rounded up, in integers
    return (200 * matched + len(required)) // (2 * len(required))


def match_careers(user_skill_names: Iterable[str], catalog=CAREER_CATALOG) -> List[CareerMatch]:
    names = set(user_skill_names)
    matches = [
        CareerMatch(career=career, match_percentage=match_percentage(career.required_skills, names))
        for career in catalog
    ]
    return sorted(matches, key=lambda m: m.match_percentage, reverse=True)
