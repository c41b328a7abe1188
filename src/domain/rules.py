import re
from types import MappingProxyType
from typing import Mapping, Optional

from .models import DiagnosticRecord, Presence


DEFAULT_CATEGORY = "clear"

_MUCOSA_RESPONSE = "鼻腔黏膜的炎症反应，纤毛摆动频率从正常8-12Hz降至4-6Hz，黏液清除效率降低60%"
_PHYSICAL_CARE = "移走鼻涕，减轻堵塞，通气"


FALLBACK_ENTRIES: Mapping[str, DiagnosticRecord] = MappingProxyType({
    "clear": DiagnosticRecord(
        presence=Presence.NOT_FOUND,
        color_description="清澈透明",
        condition="过敏性鼻炎",
        primary_recommendation="佩戴口罩、避免过敏源、定期冲洗",
        pathology_basis=_MUCOSA_RESPONSE,
        traditional_assessment="鼻渊，肺气虚弱，脾虚湿阻，肾阳不足",
        physical_care_note=_PHYSICAL_CARE,
    ),
    "yellow": DiagnosticRecord(
        presence=Presence.NOT_FOUND,
        color_description="黄色",
        condition="轻度感染",
        primary_recommendation="补充水分、定期护理、观察症状变化",
        pathology_basis=_MUCOSA_RESPONSE,
        traditional_assessment="风热犯肺，湿浊壅塞",
        physical_care_note=_PHYSICAL_CARE,
    ),
    "green": DiagnosticRecord(
        presence=Presence.NOT_FOUND,
        color_description="绿色",
        condition="细菌感染",
        primary_recommendation="建议就医，可能需要抗生素",
        pathology_basis=_MUCOSA_RESPONSE,
        traditional_assessment="风热犯肺，湿浊壅塞",
        physical_care_note=_PHYSICAL_CARE,
    ),
    "red": DiagnosticRecord(
        presence=Presence.NOT_FOUND,
        color_description="带血",
        condition="毛细血管破裂",
        primary_recommendation="减少冲洗频率、避免鼻腔干燥",
        pathology_basis=_MUCOSA_RESPONSE,
        traditional_assessment="风热犯肺，肺经热盛",
        physical_care_note=_PHYSICAL_CARE,
    ),
})


# Checked in order, first hit wins.
# TODO: confirm with product whether the English terms are still wanted.
CATEGORY_HINTS = (
    ("yellow", ("黄", "yellow")),
    ("green", ("绿", "green")),
    ("red", ("血", "red", "blood")),
)


LOCATION_PATTERNS = (
    re.compile(r"位置[：:](.*?)(?=[。\n]|$)"),
    re.compile(r"location[：:](.*?)(?=[.\n]|$)", re.IGNORECASE),
    re.compile(r"鼻涕.*?在(.*?)(?=[。\n]|$)"),
)


def match_category(text: Optional[str]) -> str:
    lowered = (text or "").lower()
    for key, terms in CATEGORY_HINTS:
        if any(term in lowered for term in terms):
            return key
    return DEFAULT_CATEGORY


def extract_location(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    for pattern in LOCATION_PATTERNS:
        m = pattern.search(text)
        if m and m.group(1).strip():
            return m.group(1).strip()
    return None
