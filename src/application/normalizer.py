"""Turns the vision model's raw answer into a DiagnosticRecord.

The model is told to answer with a JSON document but does not always comply,
so normalization runs in two tiers:

1. ``StructuredMatch``: the answer parsed as JSON and fits ``ModelAnalysis``.
   Fields the model left out are filled from the fallback entry whose
   category best matches the colour description.
2. ``FallbackMatch``: the answer could not be parsed. The fallback entry is
   picked by scanning the raw text for colour hints, and a location phrase
   is pulled out of the prose when one is present.

``normalize`` never raises. Any input yields a fully populated record.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import ValidationError

from src.application.schemas import ModelAnalysis, TcmAnalysis
from src.domain.models import DiagnosticRecord, Presence
from src.domain.rules import FALLBACK_ENTRIES, extract_location, match_category


logger = logging.getLogger(__name__)


RECOMMENDATION_DELIMITER = "、"
TCM_RECOMMENDATION_DELIMITER = "；"
TCM_RECOMMENDATION_LABEL = "推荐："
TCM_PART_SEPARATOR = "，"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class StructuredMatch:
    analysis: ModelAnalysis
    category: str


@dataclass(frozen=True)
class FallbackMatch:
    raw_text: str
    category: str
    location: Optional[str] = None
    reason: str = ""


ParseResult = Union[StructuredMatch, FallbackMatch]


def extract_json_text(raw: str) -> str:
    """Strip a markdown code fence wrapped around the answer."""
    return _CODE_FENCE.sub("", raw.strip()).strip()


def _fallback(text: str, reason: str) -> FallbackMatch:
    return FallbackMatch(
        raw_text=text,
        category=match_category(text),
        location=extract_location(text),
        reason=reason,
    )


def parse_response(raw_text: Optional[str]) -> ParseResult:
    text = raw_text if isinstance(raw_text, str) else ""
    if not text.strip():
        return _fallback(text, "empty response")

    try:
        data = json.loads(extract_json_text(text))
        if not isinstance(data, dict):
            return _fallback(text, f"expected a JSON object, got {type(data).__name__}")
        analysis = ModelAnalysis(**data)
    except (ValueError, ValidationError, RecursionError) as e:
        # ValueError also covers JSONDecodeError and oversized integer literals
        logger.warning("Model response is not valid analysis JSON: %s. Raw: %s", e, text[:200])
        return _fallback(text, str(e))

    description = analysis.color_analysis.description if analysis.color_analysis else None
    return StructuredMatch(analysis=analysis, category=match_category(description))


def compose_traditional_assessment(tcm: Optional[TcmAnalysis]) -> str:
    if tcm is None:
        return ""
    parts = []
    if tcm.syndrome:
        parts.append(tcm.syndrome)
    if tcm.differentiation:
        parts.append(tcm.differentiation)
    if tcm.recommendations:
        parts.append(TCM_RECOMMENDATION_LABEL + TCM_RECOMMENDATION_DELIMITER.join(tcm.recommendations))
    return TCM_PART_SEPARATOR.join(parts)


def resolve_structured(match: StructuredMatch) -> DiagnosticRecord:
    template = FALLBACK_ENTRIES[match.category]
    analysis = match.analysis
    color = analysis.color_analysis
    western = analysis.western_medicine

    recommendations = RECOMMENDATION_DELIMITER.join(western.recommendations) if western else ""

    return DiagnosticRecord(
        presence=analysis.presence,
        location=analysis.location if analysis.presence == Presence.FOUND else None,
        color_description=(color.description if color else None) or template.color_description,
        condition=(western.condition if western else None) or template.condition,
        primary_recommendation=recommendations or template.primary_recommendation,
        pathology_basis=(western.pathology_basis if western else None) or template.pathology_basis,
        traditional_assessment=compose_traditional_assessment(analysis.tcm) or template.traditional_assessment,
        physical_care_note=recommendations or template.physical_care_note,
    )


def resolve_fallback(match: FallbackMatch) -> DiagnosticRecord:
    template = FALLBACK_ENTRIES[match.category]
    if not match.location:
        return template
    fields = template.model_dump()
    fields.update(presence=Presence.FOUND, location=match.location)
    return DiagnosticRecord(**fields)


def normalize(raw_text: Optional[str]) -> DiagnosticRecord:
    match = parse_response(raw_text)
    if isinstance(match, StructuredMatch):
        logger.debug("Structured analysis parsed (category=%s)", match.category)
        return resolve_structured(match)
    logger.debug("Using fallback entry %s (location=%s)", match.category, match.location)
    return resolve_fallback(match)
