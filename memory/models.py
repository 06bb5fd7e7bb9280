from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional


SKILL_CATEGORY_NAMES = ["cognitive", "analytical", "creative", "social", "technical"]

# Insertion order is the catalog order used to break ties.
SKILL_CATEGORIES = MappingProxyType({
    "Media Literacy": "cognitive",
    "Critical Thinking": "cognitive",
    "Logic": "analytical",
    "Problem-Solving": "analytical",
    "Creativity": "creative",
    "Communication": "social",
    "Research": "cognitive",
    "Critical Reasoning": "cognitive",
    "Knowledge Depth": "cognitive",
    "Analytical Thinking": "analytical",
    "Intro to ML": "technical",
    "Prompt Engineering": "technical",
    "Applied AI": "technical",
    "Multi-Tool Adaptability": "technical",
    "Evaluation": "analytical",
    "Ethical Decision-Making": "social",
})

XP_PER_LEVEL = 100

OUTCOMES = ["win", "lose", "draw"]


@dataclass(frozen=True)
class Skill:
    name: str
    category: str
    xp: int = 0

    @property
    def id(self) -> str:
        return "-".join(self.name.lower().split())

    @property
    def level(self) -> int:
        return self.xp // XP_PER_LEVEL + 1

    @property
    def max_xp(self) -> int:
        return self.level * XP_PER_LEVEL

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "xp": self.xp,
            "level": self.level,
            "max_xp": self.max_xp,
        }


@dataclass(frozen=True)
class GameRoundOutcome:
    game_id: str
    outcome: str
    score: int = 0
    response_time_ms: int = 0

    def __post_init__(self):
        if self.outcome not in OUTCOMES:
            raise ValueError(
                f"Invalid outcome '{self.outcome}'. Choose from: {', '.join(OUTCOMES)}"
            )
        if self.score < 0:
            raise ValueError("score must be non-negative")
        if self.response_time_ms < 0:
            raise ValueError("response_time_ms must be non-negative")


@dataclass
class SessionAnswer:
    question_id: int
    user_answer: str
    correct: bool
    response_time_ms: int = 0


@dataclass
class GameSession:
    id: str
    user_id: str
    game_id: str
    user_type: str = "student"
    started_at: str = ""
    responses: List[SessionAnswer] = field(default_factory=list)
    score: int = 0
    completed: bool = False
    completed_at: Optional[str] = None


def build_skills(ledger: Dict[str, int]) -> List[Skill]:
    """Expand a ledger into the full skill list, in catalog order."""
    return [
        Skill(name=name, category=category, xp=int(ledger.get(name, 0)))
        for name, category in SKILL_CATEGORIES.items()
    ]


def skills_by_category(skills: List[Skill], category: str) -> List[Skill]:
    return [s for s in skills if s.category == category]


def top_skills(skills: List[Skill], limit: int = 5) -> List[Skill]:
    # sorted() is stable, so equal xp keeps catalog order
    return sorted(skills, key=lambda s: s.xp, reverse=True)[:limit]


INSIGHT_TYPES = ["strength", "improvement", "opportunity"]
INSIGHT_PRIORITIES = ["high", "medium", "low"]


@dataclass(frozen=True)
class CareerInsight:
    text: str
    type: str
    priority: str

    def __post_init__(self):
        if self.type not in INSIGHT_TYPES:
            raise ValueError(f"Invalid insight type '{self.type}'")
        if self.priority not in INSIGHT_PRIORITIES:
            raise ValueError(f"Invalid insight priority '{self.priority}'")

    def to_dict(self) -> dict:
        return {"insight": self.text, "type": self.type, "priority": self.priority}
