import logging
from datetime import datetime, timezone

from advisor.career_matcher import earned_skill_names, match_careers
from advisor.insight_composer import (
    FALLBACK_INSIGHT,
    build_career_report,
    compose_insights,
    insight_request,
    template_insights,
)
from memory.models import CareerInsight, top_skills
from tools.insights_api import InsightServiceError


def _inputs(skills):
    return top_skills(skills), match_careers(earned_skill_names(skills))


def test_template_insights_reference_top_skill_and_careers(analyst_skills):
    top, careers = _inputs(analyst_skills)
    insights = template_insights(top, careers)

    assert [i.type for i in insights] == ["strength", "improvement", "opportunity"]
    assert [i.priority for i in insights] == ["high", "medium", "medium"]
    assert "Logic with 240 XP" in insights[0].text
    assert careers[0].career.title in insights[0].text
    assert careers[0].career.next_skills[0] in insights[1].text
    assert careers[1].career.title in insights[2].text
    assert f"{careers[1].match_percentage}% alignment" in insights[2].text


def test_template_insights_with_no_careers(analyst_skills):
    assert template_insights(top_skills(analyst_skills), []) == []


def test_compose_without_client_is_templated(analyst_skills):
    top, careers = _inputs(analyst_skills)
    assert compose_insights(top, careers) == template_insights(top, careers)


def test_compose_appends_generated_insights(analyst_skills, fake_client_factory):
    top, careers = _inputs(analyst_skills)
    generated = [CareerInsight("Try a Kaggle project", "opportunity", "low")]
    client = fake_client_factory(insights=generated)

    insights = compose_insights(top, careers, client)

    assert len(insights) == 4
    assert insights[-1] == generated[0]
    skills_sent, careers_sent = client.calls[0]
    assert skills_sent[0] == {"name": "Logic", "xp": 240, "level": 3}
    assert len(careers_sent) == 3
    assert set(careers_sent[0]) == {"title", "matchPercentage"}


def test_compose_falls_back_on_service_error(analyst_skills, fake_client_factory, caplog):
    top, careers = _inputs(analyst_skills)
    client = fake_client_factory(error=InsightServiceError("connection refused"))

    with caplog.at_level(logging.WARNING):
        insights = compose_insights(top, careers, client)

    assert insights
    assert insights[-1] == FALLBACK_INSIGHT
    assert any(i.type == "strength" for i in insights)
    assert "connection refused" in caplog.text


def test_compose_never_empty(fake_client_factory):
    client = fake_client_factory(error=InsightServiceError("timeout"))
    assert compose_insights([], [], client) == [FALLBACK_INSIGHT]
    assert compose_insights([], []) == [FALLBACK_INSIGHT]


def test_fresh_user_still_gets_insights(fresh_skills):
    top, careers = _inputs(fresh_skills)
    insights = compose_insights(top, careers)
    assert len(insights) == 3
    assert "Media Literacy with 0 XP" in insights[0].text


def test_insight_request_shape(analyst_skills):
    top, careers = _inputs(analyst_skills)
    request = insight_request(top, careers)
    assert len(request["skills"]) == 5
    assert len(request["topCareers"]) == 3


def test_career_report(analyst_skills):
    top, careers = _inputs(analyst_skills)
    insights = compose_insights(top, careers)
    generated_at = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    report = build_career_report(analyst_skills, careers, insights, generated_at)

    assert report["generated_at"] == "2026-01-02T03:04:05+00:00"
    assert len(report["skills"]) == len(analyst_skills)
    assert set(report["skills"][0]) == {"name", "level", "xp", "category"}
    assert len(report["top_careers"]) == 3
    assert report["insights"][0]["type"] == "strength"
    assert report["recommendations"] == list(careers[0].career.next_skills)


def test_career_report_without_careers():
    report = build_career_report([], [], [FALLBACK_INSIGHT])
    assert report["recommendations"] == []
    assert report["top_careers"] == []
