import json

import pytest
import requests

from tools.insights_api import InsightServiceError, InsightsClient, parse_insights

SKILLS = [{"name": "Logic", "xp": 240, "level": 3}]
CAREERS = [{"title": "Data Scientist", "matchPercentage": 100}]

VALID_CONTENT = json.dumps({
    "insights": [
        {"insight": "Logic underpins data work.", "type": "strength", "priority": "high"},
        {"insight": "Learn SQL next.", "type": "improvement", "priority": "medium"},
    ]
})


def test_parse_insights_valid():
    insights = parse_insights(VALID_CONTENT)
    assert [i.type for i in insights] == ["strength", "improvement"]
    assert insights[0].text == "Logic underpins data work."


def test_parse_insights_not_json():
    with pytest.raises(InsightServiceError):
        parse_insights("Sure! Here are some insights: ...")


def test_parse_insights_missing_list():
    with pytest.raises(InsightServiceError):
        parse_insights(json.dumps({"advice": []}))


def test_parse_insights_bad_enum():
    content = json.dumps({"insights": [{"insight": "x", "type": "warning", "priority": "high"}]})
    with pytest.raises(InsightServiceError):
        parse_insights(content)


def test_parse_insights_missing_field():
    content = json.dumps({"insights": [{"insight": "x", "type": "strength"}]})
    with pytest.raises(InsightServiceError):
        parse_insights(content)


def test_missing_api_key():
    client = InsightsClient()
    client.api_key = None
    with pytest.raises(InsightServiceError):
        client.generate_insights(SKILLS, CAREERS)


def test_generate_insights_success(monkeypatch, completion_response):
    captured = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        captured.update(url=url, headers=headers, body=json, timeout=timeout)
        return completion_response(VALID_CONTENT)

    monkeypatch.setattr("tools.insights_api.requests.post", fake_post)
    client = InsightsClient(api_url="https://llm.test/v1/chat", api_key="sk-test", model="tiny", timeout=5)

    insights = client.generate_insights(SKILLS, CAREERS)

    assert len(insights) == 2
    assert captured["url"] == "https://llm.test/v1/chat"
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["timeout"] == 5
    assert captured["body"]["model"] == "tiny"
    system, user = captured["body"]["messages"]
    assert system["role"] == "system"
    assert "Logic: Level 3 (240 XP)" in user["content"]
    assert "Data Scientist: 100% match" in user["content"]


def test_generate_insights_network_error(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr("tools.insights_api.requests.post", fake_post)
    with pytest.raises(InsightServiceError):
        InsightsClient(api_key="sk-test").generate_insights(SKILLS, CAREERS)


def test_generate_insights_http_error(monkeypatch, completion_response):
    monkeypatch.setattr(
        "tools.insights_api.requests.post",
        lambda *a, **kw: completion_response("rate limited", status_code=429),
    )
    with pytest.raises(InsightServiceError) as excinfo:
        InsightsClient(api_key="sk-test").generate_insights(SKILLS, CAREERS)
    assert "429" in str(excinfo.value)


def test_generate_insights_malformed_content(monkeypatch, completion_response):
    monkeypatch.setattr(
        "tools.insights_api.requests.post",
        lambda *a, **kw: completion_response("not json at all"),
    )
    with pytest.raises(InsightServiceError):
        InsightsClient(api_key="sk-test").generate_insights(SKILLS, CAREERS)
