from dataclasses import dataclass
from enum import Enum
from typing import Protocol, List, Dict, Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from core.config import Settings


@dataclass
class PatientData:
    name: Optional[str]
    sex: Optional[str]  # "M"/"F"
    age: Optional[float]
    labs: Dict[str, float]
    flags: Dict[str, Any]


class PatientRecord(BaseModel):
    """Validated clinical parameters for a single heart failure evaluation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    age: int = Field(..., ge=18, le=120)
    anaemia: bool
    creatinine_phosphokinase: float = Field(..., ge=0)
    diabetes: bool
    ejection_fraction: int = Field(..., ge=10, le=80)
    high_blood_pressure: bool
    platelets: int = Field(..., ge=0)
    serum_creatinine: float = Field(..., ge=0)
    serum_sodium: int = Field(..., ge=120, le=160)
    sex: bool  # True = male
    smoking: bool
    time: int = Field(..., ge=1, le=365)  # follow-up days
    death_event: bool


class RiskCategory(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class FeatureImportance:
    label: str
    importance: int  # 0-100


@dataclass(frozen=True)
class RiskAssessment:
    risk_score: int
    risk_category: RiskCategory
    confidence: int
    top_features: Tuple[FeatureImportance, ...]
    recommendations: Tuple[str, ...]
    tree_count: int


class HealthModule(Protocol):
    id: str
    title: str
    def inputs(self, data: PatientData, disabled: bool = False) -> Optional[PatientData]: ...
    def compute(self, data: PatientData, settings: Settings) -> RiskAssessment: ...
    def render(self, result: RiskAssessment) -> None: ...
    def to_pdf(self, result: RiskAssessment) -> List[list[str]]: ...
    def pdf_sections(self, result: RiskAssessment) -> Dict[str, List[str]]: ...
