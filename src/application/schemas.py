from typing import List, Optional

from pydantic import BaseModel, field_validator

from src.domain.models import Presence


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        if len(v) == 0:
            return None
    return v


def _clean_items(v):
    if v is None:
        return []
    if isinstance(v, list):
        return [item.strip() if isinstance(item, str) else item for item in v if item is not None and item != ""]
    return v


class ColorAnalysis(BaseModel):
    hex: Optional[str] = None
    rgb: Optional[str] = None
    description: Optional[str] = None
    transparency: Optional[str] = None
    viscosity: Optional[str] = None
    volume: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _blank_to_none(v)


class WesternMedicine(BaseModel):
    condition: Optional[str] = None
    pathology_basis: Optional[str] = None
    recommendations: List[str] = []

    @field_validator("condition", "pathology_basis", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _blank_to_none(v)

    @field_validator("recommendations", mode="before")
    @classmethod
    def clean_recommendations(cls, v):
        return _clean_items(v)

    @field_validator("recommendations")
    @classmethod
    def drop_blank_recommendations(cls, v: List[str]):
        return [item for item in v if item]


class TcmAnalysis(BaseModel):
    syndrome: Optional[str] = None
    differentiation: Optional[str] = None
    recommendations: List[str] = []

    @field_validator("syndrome", "differentiation", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _blank_to_none(v)

    @field_validator("recommendations", mode="before")
    @classmethod
    def clean_recommendations(cls, v):
        return _clean_items(v)

    @field_validator("recommendations")
    @classmethod
    def drop_blank_recommendations(cls, v: List[str]):
        return [item for item in v if item]


class ModelAnalysis(BaseModel):
    """JSON document the analysis prompt asks the model to return."""

    presence: Presence = Presence.NOT_FOUND
    location: Optional[str] = None
    color_analysis: Optional[ColorAnalysis] = None
    western_medicine: Optional[WesternMedicine] = None
    tcm: Optional[TcmAnalysis] = None

    @field_validator("presence", mode="before")
    @classmethod
    def parse_presence(cls, v):
        return Presence.parse(v)

    @field_validator("location", mode="before")
    @classmethod
    def strip_location(cls, v):
        return _blank_to_none(v)
