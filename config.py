"""Configuration constants for the skill arena career mentor."""
import os
from dotenv import load_dotenv

load_dotenv()

# Persistence
DB_PATH = os.getenv("SKILL_ARENA_DB_PATH", "skill_arena.db")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# XP scoring: "uniform" gives every trained skill the full round XP,
# "split" gives the secondary skill half of it.
XP_SCORING_MODE = os.getenv("XP_SCORING_MODE", "uniform")

# Text generation (OpenAI-compatible chat completions endpoint)
INSIGHTS_API_URL = os.getenv(
    "INSIGHTS_API_URL", "https://api.openai.com/v1/chat/completions"
)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
INSIGHTS_MODEL = os.getenv("INSIGHTS_MODEL", "gpt-4o-mini")
INSIGHTS_MAX_TOKENS = 500
INSIGHTS_TEMPERATURE = 0.7
INSIGHTS_TIMEOUT_SECONDS = int(os.getenv("INSIGHTS_TIMEOUT_SECONDS", "30"))

# Dashboard
TOP_SKILLS_LIMIT = 5
TOP_CAREERS_FOR_INSIGHTS = 3
