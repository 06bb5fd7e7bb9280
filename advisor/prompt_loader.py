from pathlib import Path

PROMPT_PATH = Path(__file__).parent / "prompts"


def load_prompt(name: str) -> str:
    file = PROMPT_PATH / f"{name}.txt"
    if not file.exists():
        return ""
    return file.read_text()


def get_system_prompt() -> str:
    return load_prompt("system_prompt").strip()


def build_insights_prompt(skills: list, top_careers: list) -> str:
    """Fill the insights request template with skill and career summaries."""
    template = load_prompt("insights_request")
    skill_lines = "\n".join(
        f"- {s['name']}: Level {s['level']} ({s['xp']} XP)" for s in skills
    )
    career_lines = "\n".join(
        f"- {c['title']}: {c['matchPercentage']}% match" for c in top_careers
    )
    return template.format(skills=skill_lines, careers=career_lines).strip()
