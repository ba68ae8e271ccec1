import pytest

from src.briefdesk.core.brief_generator import (
    analyze_confidence,
    confidence_grade,
    designer_insights,
    generate_brief,
)
from src.briefdesk.domain.brief_models import BriefSection


def _brief(responses, **kw):
    params = dict(
        project_id="PRJ-2026-0001",
        project_type="web_design",
        client_name="Acme Corp",
        client_email="client@acme.example",
        responses=responses,
    )
    params.update(kw)
    return generate_brief(**params)


def test_has_every_section_and_readable_summary():
    brief = _brief({})
    assert list(brief.sections) == [
        "business",
        "scope",
        "style",
        "colors",
        "typography",
        "inspiration",
        "timeline",
        "additional",
    ]
    assert brief.summary.startswith("Acme Corp has submitted a web design brief.")
    assert brief.version == 1


def test_missing_answers_read_not_provided():
    brief = _brief({})
    assert brief.sections["business"].summary == (
        "Not provided in the Not provided industry, targeting Not provided."
    )
    assert brief.sections["inspiration"].summary == "No inspiration references uploaded."
    assert brief.sections["additional"].summary == "No additional notes."
    assert brief.confidence_score == "B"


def test_sections_read_their_steps():
    brief = _brief(
        {
            "business_info": {
                "company_name": "Acme Corp",
                "industry": "Technology",
                "target_audience": ["Developers", "Designers"],
            },
            "color_preferences": {"palette": "Warm earth tones"},
            "typography_feel": {"style": "Geometric sans"},
            "inspiration_upload": {"urls": ["https://a.example", "https://b.example"]},
            "timeline_budget": {"timeline": "6 weeks", "budget": "$10k"},
            "final_thoughts": {"additional_notes": "Keep it friendly."},
            "pages_functionality": {"pages": ["Home", "Pricing"]},
        }
    )
    s = brief.sections
    assert s["business"].summary == "Acme Corp in the Technology industry, targeting Developers, Designers."
    assert s["business"].data["company_name"] == "Acme Corp"
    assert s["colors"].summary == "Color direction: Warm earth tones."
    assert s["typography"].summary == "Typography preference: Geometric sans."
    assert s["inspiration"].summary == "2 inspiration reference(s) provided."
    assert s["timeline"].summary == "Timeline: 6 weeks. Budget: $10k."
    assert s["additional"].summary == "Keep it friendly."
    assert s["scope"].data["pages_functionality"] == {"pages": ["Home", "Pricing"]}


def test_raw_responses_are_preserved():
    responses = {"business_info": {"company_name": "Test"}}
    assert _brief(responses).raw_responses == responses


def test_confidence_uses_reported_score_and_completeness():
    confidence, flags, highlights = analyze_confidence({"averageConfidence": 0.9, "styles": ["Bold"]})
    assert confidence == pytest.approx(0.9)
    assert "Client feels strongly about their preferences" in highlights
    assert "Comprehensive information provided" in highlights
    assert flags == []

    sparse = {"averageConfidence": 0.4, "a": "", "b": None, "c": [], "d": "", "e": None, "f": ""}
    confidence, flags, _ = analyze_confidence(sparse)
    assert confidence == pytest.approx(0.4 * (0.7 + (1 / 7) * 0.3))
    assert any("unsure" in f for f in flags)
    assert any("Limited information" in f for f in flags)


def test_empty_step_keeps_default_confidence():
    assert analyze_confidence({}) == (0.7, [], [])


def test_grades():
    assert confidence_grade(0.85) == "A"
    assert confidence_grade(0.6) == "B"
    assert confidence_grade(0.59) == "C"


def test_insights_recommend_options_for_unsure_clients():
    sections = {
        "style": BriefSection(title="Creative Direction", summary="", confidence=0.3),
        "colors": BriefSection(title="Color Preferences", summary="", confidence=0.2),
        "typography": BriefSection(title="Typography", summary="", confidence=0.4),
        "business": BriefSection(title="Business Context", summary="", confidence=0.9),
    }
    insights = designer_insights(sections)
    assert insights.strong_areas == ["Business Context"]
    assert insights.uncertain_areas == ["Creative Direction", "Color Preferences", "Typography"]
    assert len(insights.recommendations) == 3
    assert insights.recommendations[-1].startswith("Schedule a discovery call")


def test_missing_project_type_and_versioning():
    brief = _brief({}, project_type=None, version=3)
    assert brief.project_type == "design"
    assert brief.version == 3
