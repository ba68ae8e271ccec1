from __future__ import annotations

"""Turn raw questionnaire answers into a structured brief.

Each questionnaire step feeds one named section. Steps that collect opinions
(business, style, colors, typography) also carry a confidence score derived
from how completely the client answered and, when the style picker reports
one, from the client's own ``averageConfidence``.
"""

from datetime import UTC, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..domain.brief_models import BriefSection, DesignerInsights, StructuredBrief


NOT_PROVIDED = "Not provided"
DEFAULT_CONFIDENCE = 0.7


def _as_text(value: Any, fallback: str = NOT_PROVIDED) -> str:
    if value is None or value == "":
        return fallback
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else fallback
    return str(value)


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _step(responses: Mapping[str, Any], step_key: str) -> Dict[str, Any]:
    data = responses.get(step_key)
    return dict(data) if isinstance(data, Mapping) else {}


def _is_filled(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, (list, tuple, dict)) and not value:
        return False
    return True


def analyze_confidence(data: Mapping[str, Any]) -> Tuple[float, List[str], List[str]]:
    """Return ``(confidence, flags, highlights)`` for one step's answers."""
    flags: List[str] = []
    highlights: List[str] = []
    confidence = DEFAULT_CONFIDENCE
    if not data:
        return confidence, flags, highlights

    reported = data.get("averageConfidence")
    if isinstance(reported, (int, float)) and not isinstance(reported, bool) and reported:
        confidence = float(reported)
        if confidence >= 0.8:
            highlights.append("Client feels strongly about their preferences")
        elif confidence < 0.5:
            flags.append("Client was unsure about these choices; consider presenting 2-3 options")

    completeness = sum(1 for v in data.values() if _is_filled(v)) / len(data)
    if completeness < 0.3:
        flags.append("Limited information provided; follow up for more details")
    elif completeness > 0.8:
        highlights.append("Comprehensive information provided")

    return confidence * (0.7 + completeness * 0.3), flags, highlights


def _scored(title: str, summary: str, data: Dict[str, Any]) -> BriefSection:
    confidence, flags, highlights = analyze_confidence(data)
    return BriefSection(
        title=title,
        summary=summary,
        data=data,
        confidence=confidence,
        flags=flags,
        highlights=highlights,
    )


def build_sections(responses: Mapping[str, Any]) -> Dict[str, BriefSection]:
    business = _step(responses, "business_info")
    scope = _step(responses, "project_scope")
    style = _step(responses, "style_direction")
    colors = _step(responses, "color_preferences")
    typography = _step(responses, "typography_feel")
    inspiration = _step(responses, "inspiration_upload")
    timeline = _step(responses, "timeline_budget")
    final = _step(responses, "final_thoughts")

    refs = _first(inspiration, "urls", "images") or []
    ref_count = len(refs) if isinstance(refs, (list, tuple)) else 0
    notes = _as_text(_first(final, "notes", "additional_notes"))

    return {
        "business": _scored(
            "Business Context",
            f"{_as_text(business.get('company_name'))} in the {_as_text(business.get('industry'))} industry, "
            f"targeting {_as_text(business.get('target_audience'))}.",
            business,
        ),
        "scope": BriefSection(
            title="Project Scope",
            summary=f"Deliverables: {_as_text(scope.get('deliverables'))}.",
            data={
                **scope,
                "pages_functionality": _step(responses, "pages_functionality"),
                "platforms_content": _step(responses, "platforms_content"),
            },
        ),
        "style": _scored(
            "Creative Direction",
            f"Preferred styles: {_as_text(_first(style, 'selected_styles', 'styles'))}.",
            style,
        ),
        "colors": _scored(
            "Color Preferences",
            f"Color direction: {_as_text(_first(colors, 'selected_palette', 'palette'))}.",
            colors,
        ),
        "typography": _scored(
            "Typography",
            f"Typography preference: {_as_text(_first(typography, 'preference', 'style'))}.",
            typography,
        ),
        "inspiration": BriefSection(
            title="Inspiration & References",
            summary=(
                f"{ref_count} inspiration reference(s) provided."
                if ref_count
                else "No inspiration references uploaded."
            ),
            data=inspiration,
        ),
        "timeline": BriefSection(
            title="Timeline & Budget",
            summary=f"Timeline: {_as_text(timeline.get('timeline'))}. Budget: {_as_text(timeline.get('budget'))}.",
            data=timeline,
        ),
        "additional": BriefSection(
            title="Additional Notes",
            summary="No additional notes." if notes == NOT_PROVIDED else notes,
            data=final,
        ),
    }


def overall_confidence(sections: Mapping[str, BriefSection]) -> float:
    values = [s.confidence or DEFAULT_CONFIDENCE for s in sections.values()]
    return sum(values) / len(values) if values else DEFAULT_CONFIDENCE


def confidence_grade(confidence: float) -> str:
    if confidence >= 0.8:
        return "A"
    if confidence >= 0.6:
        return "B"
    return "C"


def designer_insights(sections: Mapping[str, BriefSection]) -> DesignerInsights:
    strong: List[str] = []
    uncertain: List[str] = []
    for section in sections.values():
        confidence = section.confidence or DEFAULT_CONFIDENCE
        if confidence >= 0.8:
            strong.append(section.title)
        elif confidence < 0.5:
            uncertain.append(section.title)

    recommendations: List[str] = []
    if "Creative Direction" in uncertain:
        recommendations.append("Consider creating 2-3 initial concept directions for client review")
    if "Color Preferences" in uncertain:
        recommendations.append("Present a diverse color palette with different moods for client feedback")
    if len(strong) >= 5:
        recommendations.append("Client has clear vision; focus on precise execution of their preferences")
    if len(uncertain) >= 3:
        recommendations.append("Schedule a discovery call to clarify unclear areas before starting design work")
    return DesignerInsights(strong_areas=strong, uncertain_areas=uncertain, recommendations=recommendations)


def generate_brief(
    project_id: str,
    project_type: Optional[str],
    client_name: str,
    client_email: str,
    responses: Mapping[str, Any],
    version: int = 1,
) -> StructuredBrief:
    ptype = project_type or "design"
    sections = build_sections(responses)
    confidence = overall_confidence(sections)
    summary = " ".join(
        [
            f"{client_name} has submitted a {ptype.replace('_', ' ')} brief.",
            sections["business"].summary,
            sections["scope"].summary,
            sections["style"].summary,
            sections["colors"].summary,
            sections["timeline"].summary,
        ]
    )
    return StructuredBrief(
        project_id=project_id,
        version=version,
        generated_at=datetime.now(UTC),
        summary=summary,
        project_type=ptype,
        client_name=client_name,
        client_email=client_email,
        overall_confidence=confidence,
        confidence_score=confidence_grade(confidence),
        sections=sections,
        raw_responses=dict(responses),
        designer_insights=designer_insights(sections),
    )
