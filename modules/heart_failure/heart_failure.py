import logging
import random
from typing import Dict, List, Optional, Union
import streamlit as st
from core.config import Settings
from core.types import PatientData, PatientRecord, RiskAssessment
from core.utils import color_box
from .scores import _clamp, predict

id = "heart_failure"
title = "Heart Failure Risk Predictor (Random Forest simulation)"

logger = logging.getLogger(__name__)

DEFAULTS = {
    "age": 65,
    "anaemia": False,
    "creatinine_phosphokinase": 582.0,
    "diabetes": False,
    "ejection_fraction": 38,
    "high_blood_pressure": False,
    "platelets": 265000,
    "serum_creatinine": 1.9,
    "serum_sodium": 136,
    "sex": "M",
    "smoking": False,
    "time": 4,
    "death_event": False,
}

CONDITIONS = [
    ("anaemia", "Anaemia"),
    ("diabetes", "Diabetes"),
    ("high_blood_pressure", "High Blood Pressure"),
    ("smoking", "Smoking"),
    ("death_event", "Death Event"),
]

Number = Union[int, float]


# ---------- helpers ----------
def _num(label: str, key: str, default: Optional[Number], fallback: Number, lo: Number, hi: Number, step: Number, help: Optional[str] = None):
    val = fallback if default is None else type(fallback)(default)
    return st.number_input(label, min_value=lo, max_value=hi, value=_clamp(val, lo, hi), step=step, key=key, help=help)

def _flag(flags: dict, key: str) -> bool:
    return str(flags.get(key, DEFAULTS[key])) in ["1", "True", "Yes"]


# ---------- UI inputs ----------
def inputs(data: PatientData, disabled: bool = False) -> Optional[PatientData]:
    labs = data.labs
    flags = data.flags
    big = 10_000_000

    with st.form(key="heart_failure_form"):
        st.markdown("**Demographic Information**")
        c1, c2, c3, c4 = st.columns(4)
        with c1:
            age = _num("Age (years)", "hf_age", data.age, DEFAULTS["age"], 18, 120, 1)
        with c2:
            sex = st.selectbox("Sex", ["Male", "Female"], index=0 if (data.sex or DEFAULTS["sex"]) == "M" else 1, key="hf_sex")
        with c3:
            ef = _num("Ejection Fraction (%)", "hf_ef", labs.get("ejection_fraction"), DEFAULTS["ejection_fraction"], 10, 80, 1)
        with c4:
            follow_up = _num("Follow-up Period (days)", "hf_time", labs.get("time"), DEFAULTS["time"], 1, 365, 1)

        st.markdown("**Medical Conditions**")
        cols = st.columns(len(CONDITIONS))
        checked = {}
        for col, (key, label) in zip(cols, CONDITIONS):
            with col:
                checked[key] = st.checkbox(label, value=_flag(flags, key), key=f"hf_{key}")

        st.markdown("**Laboratory Values**")
        l1, l2, l3, l4 = st.columns(4)
        with l1:
            creat = _num("Serum Creatinine (mg/dL)", "hf_creat", labs.get("serum_creatinine"), DEFAULTS["serum_creatinine"], 0.0, 20.0, 0.1)
        with l2:
            cpk = _num("CPK Enzyme (mcg/L)", "hf_cpk", labs.get("creatinine_phosphokinase"), DEFAULTS["creatinine_phosphokinase"], 0.0, float(big), 1.0,
                       help="Creatinine phosphokinase")
        with l3:
            plt = _num("Platelets (kiloplatelets/mL)", "hf_plt", labs.get("platelets"), DEFAULTS["platelets"], 0, big, 1000)
        with l4:
            sodium = _num("Serum Sodium (mEq/L)", "hf_na", labs.get("serum_sodium"), DEFAULTS["serum_sodium"], 120, 160, 1)

        label = "Analyzing..." if disabled else "Predict Heart Failure Risk"
        submitted = st.form_submit_button(label, disabled=disabled)

    # write back to shared state
    data.age = age
    data.sex = "M" if sex == "Male" else "F"
    labs.update({
        "ejection_fraction": ef, "time": follow_up, "serum_creatinine": creat,
        "creatinine_phosphokinase": cpk, "platelets": plt, "serum_sodium": sodium,
    })
    flags.update({k: 1 if v else 0 for k, v in checked.items()})
    return data if submitted else None


def to_record(data: PatientData) -> PatientRecord:
    """Build a validated record; raises pydantic.ValidationError on bad input."""
    L = data.labs
    F = data.flags
    return PatientRecord(
        age=data.age,
        anaemia=F.get("anaemia"),
        creatinine_phosphokinase=L.get("creatinine_phosphokinase"),
        diabetes=F.get("diabetes"),
        ejection_fraction=L.get("ejection_fraction"),
        high_blood_pressure=F.get("high_blood_pressure"),
        platelets=L.get("platelets"),
        serum_creatinine=L.get("serum_creatinine"),
        serum_sodium=L.get("serum_sodium"),
        sex=data.sex == "M",
        smoking=F.get("smoking"),
        time=L.get("time"),
        death_event=F.get("death_event"),
    )


# ---------- compute ----------
def compute(data: PatientData, settings: Settings) -> RiskAssessment:
    record = to_record(data)
    rng = random.Random(settings.seed)
    return predict(record, rng=rng, noise=settings.noise, delay_seconds=settings.simulated_delay_seconds)


# ---------- render ----------
def render(result: RiskAssessment) -> None:
    category = result.risk_category.value
    st.subheader("Prediction Results")
    color_box(f"{category} Risk • Risk Score: {result.risk_score}%", level=category)

    m1, m2, m3 = st.columns(3)
    m1.metric("Risk Score", f"{result.risk_score}%")
    m2.metric("Confidence", f"{result.confidence}%")
    m3.metric("Trees Evaluated", result.tree_count)

    st.markdown("**Top Contributing Features**")
    for f in result.top_features:
        st.progress(f.importance, text=f"{f.label}: {f.importance}%")

    st.markdown("**Recommendations**")
    st.markdown("\n".join(f"- {r}" for r in result.recommendations))


# ---------- pdf rows ----------
def to_pdf(result: RiskAssessment) -> List[list[str]]:
    category = result.risk_category.value
    rows = [
        ["Risk Score (0–100)", str(result.risk_score), f"{category} risk"],
        ["Confidence", f"{result.confidence}%", "Simulated ensemble confidence"],
        ["Trees Evaluated", str(result.tree_count), "Scoring groups in the ensemble"],
    ]
    return rows


def pdf_sections(result: RiskAssessment) -> Dict[str, List[str]]:
    return {
        "Top Contributing Features": [f"{f.label}: {f.importance}%" for f in result.top_features],
        "Recommendations": list(result.recommendations),
    }
