import logging
import math
import random
import re
import time
from typing import Callable, Dict, List, Optional, Tuple

from core.types import FeatureImportance, PatientRecord, RiskAssessment, RiskCategory

logger = logging.getLogger(__name__)

Vote = Tuple[float, Dict[str, float]]

NOISE_SPAN = 0.1
CONFIDENCE_BASE = 0.82
CONFIDENCE_SPAN = 0.15
TOP_N = 3
SUM_PRECISION = 10

RECOMMENDATIONS: Dict[RiskCategory, Tuple[str, ...]] = {
    RiskCategory.LOW: (
        "Continue regular monitoring",
        "Maintain healthy lifestyle",
        "Follow up in 6 months",
        "Focus on preventive care",
    ),
    RiskCategory.MODERATE: (
        "Increase monitoring frequency",
        "Consider lifestyle modifications",
        "Follow up in 3 months",
        "Monitor blood pressure regularly",
        "Optimize medication adherence",
    ),
    RiskCategory.HIGH: (
        "Immediate medical attention required",
        "Consider hospitalization",
        "Optimize heart failure medications",
        "Weekly monitoring recommended",
        "Cardiology consultation needed",
    ),
    RiskCategory.CRITICAL: (
        "Emergency medical evaluation needed",
        "Consider ICU admission",
        "Aggressive treatment protocol",
        "Daily monitoring essential",
        "Advanced heart failure team consultation",
    ),
}


# --- helpers ---

def _clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, x))


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def feature_label(name: str) -> str:
    """'serum_creatinine' -> 'Serum Creatinine'."""
    spaced = re.sub(r"[_\-]+", " ", name)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


# ----- group votes (vote, importance side-channel) -----

def demographic_vote(r: PatientRecord) -> Vote:
    vote = 0.0
    if r.age > 65: vote += 0.3
    if r.age > 75: vote += 0.2
    if r.sex: vote += 0.1  # male
    return vote, {"age": 0.25 if r.age > 65 else 0.15}


def comorbidity_vote(r: PatientRecord) -> Vote:
    vote = 0.0
    if r.anaemia: vote += 0.25
    if r.diabetes: vote += 0.2
    if r.high_blood_pressure: vote += 0.15
    if r.smoking: vote += 0.2
    return vote, {
        "anaemia": 0.2 if r.anaemia else 0.05,
        "diabetes": 0.15 if r.diabetes else 0.05,
    }


def cardiac_vote(r: PatientRecord) -> Vote:
    ef = r.ejection_fraction
    vote = 0.0
    if ef < 30: vote += 0.4
    elif ef < 40: vote += 0.25
    elif ef < 50: vote += 0.1
    return vote, {"ejection_fraction": 0.3 if ef < 40 else 0.1}


def renal_vote(r: PatientRecord) -> Vote:
    vote = 0.0
    if r.serum_creatinine > 2.0: vote += 0.3
    elif r.serum_creatinine > 1.4: vote += 0.2
    if r.serum_sodium < 135: vote += 0.15
    return vote, {"serum_creatinine": 0.25 if r.serum_creatinine > 1.4 else 0.1}


def laboratory_vote(r: PatientRecord) -> Vote:
    vote = 0.0
    if r.creatinine_phosphokinase > 1000: vote += 0.2
    elif r.creatinine_phosphokinase > 500: vote += 0.1
    if r.platelets < 150000: vote += 0.15
    elif r.platelets < 200000: vote += 0.05
    return vote, {"creatinine_phosphokinase": 0.15 if r.creatinine_phosphokinase > 500 else 0.05}


def follow_up_vote(r: PatientRecord) -> Vote:
    vote = 0.0
    if r.time < 30: vote += 0.25
    elif r.time < 60: vote += 0.15
    if r.death_event: vote += 0.4
    return vote, {
        "time": 0.2 if r.time < 30 else 0.1,
        "death_event": 0.35 if r.death_event else 0.05,
    }


# (name, weight, vote function) in ensemble order; weights sum to 1.0
GROUPS: List[Tuple[str, float, Callable[[PatientRecord], Vote]]] = [
    ("demographic", 0.15, demographic_vote),
    ("comorbidity", 0.18, comorbidity_vote),
    ("cardiac", 0.25, cardiac_vote),
    ("renal", 0.20, renal_vote),
    ("laboratory", 0.12, laboratory_vote),
    ("follow_up", 0.10, follow_up_vote),
]
TREE_COUNT = len(GROUPS)


# ----- ensemble -----

def group_votes(record: PatientRecord) -> Tuple[List[float], Dict[str, float]]:
    votes: List[float] = []
    importance: Dict[str, float] = {}
    for _, _, fn in GROUPS:
        vote, imp = fn(record)
        votes.append(vote)
        importance.update(imp)
    return votes, importance


def weighted_sum(votes: List[float]) -> float:
    total = 0.0
    for vote, (_, weight, _) in zip(votes, GROUPS):
        total += vote * weight
    # each product has at most four decimal places; drop float accumulation error
    # before the category thresholds see it
    return round(total, SUM_PRECISION)


def categorize(score: float) -> RiskCategory:
    if score < 0.25: return RiskCategory.LOW
    if score < 0.45: return RiskCategory.MODERATE
    if score < 0.70: return RiskCategory.HIGH
    return RiskCategory.CRITICAL


def rank_features(importance: Dict[str, float], top_n: int = TOP_N) -> Tuple[FeatureImportance, ...]:
    # sorted() is stable, so ties keep insertion order
    ranked = sorted(importance.items(), key=lambda kv: kv[1], reverse=True)[:top_n]
    return tuple(FeatureImportance(feature_label(k), _round_half_up(v * 100)) for k, v in ranked)


def score_patient(record: PatientRecord, rng: Optional[random.Random] = None, noise: bool = True) -> RiskAssessment:
    """Score one PatientRecord.

    ``rng`` is any object with a ``random()`` method returning floats in
    [0, 1); pass a seeded ``random.Random`` for reproducible results.
    With ``noise=False`` the score is deterministic; confidence still
    draws from ``rng``.
    """
    rng = rng or random.Random()

    votes, importance = group_votes(record)
    raw = weighted_sum(votes)
    variance = (rng.random() - 0.5) * NOISE_SPAN if noise else 0.0
    score = _clamp(raw + variance)
    category = categorize(score)
    confidence = _round_half_up((CONFIDENCE_BASE + rng.random() * CONFIDENCE_SPAN) * 100)

    logger.debug(f"votes={votes} weighted={raw:.4f} variance={variance:+.4f} -> {score:.4f} ({category.value})")

    return RiskAssessment(
        risk_score=max(0, min(100, _round_half_up(score * 100))),
        risk_category=category,
        confidence=max(0, min(100, confidence)),
        top_features=rank_features(importance),
        recommendations=RECOMMENDATIONS[category],
        tree_count=TREE_COUNT,
    )


def predict(record: PatientRecord, rng: Optional[random.Random] = None, noise: bool = True,
            delay_seconds: float = 0.0) -> RiskAssessment:
    # Stand-in for a remote model-serving call
    if delay_seconds > 0:
        time.sleep(delay_seconds)
    result = score_patient(record, rng=rng, noise=noise)
    logger.info(f"risk_score={result.risk_score} category={result.risk_category.value} confidence={result.confidence}")
    return result
