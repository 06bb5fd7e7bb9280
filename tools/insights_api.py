"""Client for the chat-completion service that writes career insights."""
import json
from typing import List, Optional

import requests

from advisor.prompt_loader import build_insights_prompt, get_system_prompt
from config import (
    INSIGHTS_API_URL,
    INSIGHTS_MAX_TOKENS,
    INSIGHTS_MODEL,
    INSIGHTS_TEMPERATURE,
    INSIGHTS_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
)
from memory.models import CareerInsight
from utils.logging_utils import get_logger

logger = get_logger(__name__)


class InsightServiceError(Exception):
    """The text-generation call failed or returned something unusable."""


def parse_insights(content: str) -> List[CareerInsight]:
    """
    Parse the model's reply into insight records.

    The reply must be a JSON object with an "insights" list whose entries
    carry insight/type/priority. Anything else is treated as malformed.
    """
    try:
        payload = json.loads(content)
    except (TypeError, ValueError) as e:
        raise InsightServiceError(f"Insight response is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("insights"), list):
        raise InsightServiceError("Insight response has no 'insights' list")

    insights = []
    for item in payload["insights"]:
        try:
            insights.append(
                CareerInsight(
                    text=str(item["insight"]),
                    type=item["type"],
                    priority=item["priority"],
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InsightServiceError(f"Malformed insight entry {item!r}: {e}") from e
    return insights


class InsightsClient:
    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.api_url = api_url or INSIGHTS_API_URL
        self.api_key = api_key or OPENAI_API_KEY
        self.model = model or INSIGHTS_MODEL
        self.timeout = timeout or INSIGHTS_TIMEOUT_SECONDS

    def generate_insights(self, skills: list, top_careers: list) -> List[CareerInsight]:
        """
        Ask the model for insights.

        Args:
            skills: [{"name", "xp", "level"}] for the user's top skills.
            top_careers: [{"title", "matchPercentage"}] for the best matches.

        Raises:
            InsightServiceError: on missing key, transport error, non-200
                status or an unparseable reply.
        """
        if not self.api_key:
            raise InsightServiceError("Text-generation API key not configured.")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": get_system_prompt()},
                {"role": "user", "content": build_insights_prompt(skills, top_careers)},
            ],
            "max_tokens": INSIGHTS_MAX_TOKENS,
            "temperature": INSIGHTS_TEMPERATURE,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.api_url, headers=headers, json=body, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise InsightServiceError(f"Text-generation request failed: {e}") from e

        if response.status_code != 200:
            raise InsightServiceError(
                f"Text-generation API error: {response.status_code} {response.text[:200]}"
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InsightServiceError(f"Unexpected completion payload: {e}") from e

        insights = parse_insights(content)
        logger.info(f"Received {len(insights)} generated insights from {self.model}")
        return insights
