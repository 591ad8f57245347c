"""
Report Models
Typed shapes for the structured (JSON) responses: chart data and the two site-audit reports.
"""

from enum import Enum
from typing import List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # Wire format is camelCase, Python attributes are snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Market / chart data ---

class ChartDataPoint(_CamelModel):
    name: str
    value: float
    category: Optional[str] = None


class MarketData(_CamelModel):
    summary: str
    data: List[ChartDataPoint]

    def to_frame(self):
        """
        One row per chart point, in insertion order.
        """
        rows = [p.model_dump() for p in self.data]
        return pd.DataFrame(rows, columns=["name", "value", "category"])


# --- Generic site audit (twelve resources) ---

ResourceStatus = Literal["Excellent", "Good", "Fair", "Poor"]


class ResourceAudit(_CamelModel):
    title: str
    score: float
    status: ResourceStatus
    details: str
    recommendation: str


class SiteAuditReport(_CamelModel):
    domain: str
    overall_score: float
    summary: str
    resources: List[ResourceAudit]


# --- Clinical (medical-metaphor) site audit ---

class Triage(_CamelModel):
    score: float
    status: Literal["CRITICAL", "STABLE", "HEALTHY"]
    diagnosis: str
    details: str


class Imaging(_CamelModel):
    score: float
    status: Literal["AMATEUR", "PROFESSIONAL", "AUTHORITY"]
    observation: str
    detected_tags: List[str]


class MarketXray(_CamelModel):
    competitor_comparison: str
    lost_territory: str


class Prescription(_CamelModel):
    immediate_action: str
    ad_headlines: List[str]
    prognosis: str


class ClinicalAuditReport(_CamelModel):
    doctor_name: str
    specialty: str
    overall_health: float
    clinical_summary: str
    triage: Triage
    imaging: Imaging
    market_xray: MarketXray
    prescription: Prescription


class AuditKind(str, Enum):
    GENERIC = "generic"
    CLINICAL = "clinical"

    @property
    def schema(self):
        return SiteAuditReport if self is AuditKind.GENERIC else ClinicalAuditReport


_TONES = {
    "HEALTHY": "good",
    "AUTHORITY": "good",
    "EXCELLENT": "good",
    "GOOD": "good",
    "STABLE": "neutral",
    "PROFESSIONAL": "neutral",
    "FAIR": "neutral",
    "CRITICAL": "bad",
    "AMATEUR": "bad",
    "POOR": "bad",
}


def status_tone(status):
    """
    Maps a report status (either audit vocabulary) to a display tone.
    """
    if not status:
        return "unknown"
    return _TONES.get(str(status).strip().upper(), "unknown")
