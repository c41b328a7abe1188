import base64
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Presence(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"

    @classmethod
    def parse(cls, value) -> "Presence":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.FOUND.value:
            return cls.FOUND
        return cls.NOT_FOUND


class DiagnosticRecord(BaseModel):
    """Structured result shown to the user for one analysed image.

    Every text field except ``location`` is always populated. ``location`` is
    only kept when secretion was found.
    """

    model_config = ConfigDict(frozen=True)

    presence: Presence = Presence.NOT_FOUND
    location: Optional[str] = None
    color_description: str
    condition: str
    primary_recommendation: str
    pathology_basis: str
    traditional_assessment: str
    physical_care_note: str

    @field_validator("presence", mode="before")
    @classmethod
    def parse_presence(cls, v):
        return Presence.parse(v)

    @field_validator("location")
    @classmethod
    def location_only_when_found(cls, v: Optional[str], info):
        if v is not None:
            v = v.strip()
            if len(v) == 0:
                return None
        if info.data.get("presence") != Presence.FOUND:
            return None
        return v

    @property
    def found(self) -> bool:
        return self.presence == Presence.FOUND


class UploadedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str
    filename: Optional[str] = None

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"
