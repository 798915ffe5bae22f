import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional
import streamlit as st

try:
    import pdfplumber
    PDF_ENABLED = True
except Exception:
    PDF_ENABLED = False

logger = logging.getLogger(__name__)


@dataclass
class Parsed:
    name: Optional[str]
    sex: Optional[str]
    age: Optional[float]
    labs: Dict[str, float]
    flags: Dict[str, float]


# ----------------------------
# Patterns that extract values
# ----------------------------
STRICT: Dict[str, str] = {
    # Demographics
    "name": r"(?:Patient\s*Name|Name)\s*[:\-]\s*([A-Za-z][A-Za-z \.\-']{1,60}?)(?=\s+(?:barcode|id|patient\s*id|\d)|$)",
    "sex": r"(?:Sex|Gender)\s*[:\-]\s*(Male|Female|M|F)\b",
    "age": r"(?:Age)\s*[:\-]\s*(\d{1,3})",

    # Labs (value just before the unit)
    "creatinine_phosphokinase": r"(?:Creatinine\s*Phosphokinase|Creatine\s*(?:Phospho)?kinase|CPK|\bCK\b)[^\n]{0,80}?(\d+(?:\.\d+)?)(?=[^\n]{0,20}(?:U/?L|IU/?L|mcg/?L))",
    "serum_creatinine": r"(?:Serum\s+)?Creatinine(?!\s*Phospho)[^\n]{0,80}?(\d+(?:\.\d+)?)(?=[^\n]{0,20}mg/?dL)",
    "serum_sodium": r"(?:Sodium|\bNa\b\+?)[^\n]{0,80}?(\d+(?:\.\d+)?)(?=[^\n]{0,20}(?:mmol/?L|mEq/?L))",
    "platelets": r"(?:Platelets?|Platelet\s*count)[^\n]{0,80}?(\d+(?:\.\d+)?)(?=[^\n]{0,30}(?:10\^[39]/?[µμu]?L|/[µμu]L|/mm3|kiloplatelets/?mL))",

    # Echo
    "ejection_fraction": r"(?:Ejection\s*Fraction|LVEF|\bEF\b)[^\n]{0,40}?(\d{1,2}(?:\.\d+)?)\s*%",
}

# Fallback (looser) patterns for demographics
LOOSE = {
    "name": r"(?:Patient\s*Name|Name)[^\n]{0,20}?([A-Za-z][A-Za-z \.\-']{1,60}?)(?=\s+(?:barcode|id|patient\s*id|\d)|$)",
    "sex": r"(?:Sex|Gender)[^\n]{0,20}(Male|Female|M|F)\b",
    "age": r"(?:Age)[^\d\n]{0,20}(\d{1,3})",
}

# Platelet counts reported per µL x10^3 or per L x10^9 are scaled to per mL
PLATELET_SCALED_UNIT = r"Platelet[^\n]{0,80}?\d+(?:\.\d+)?\s*(10\^3/?[µμu]?L|10\^9/?L)"


def _find(pattern: str, text: str):
    m = re.search(pattern, text, flags=re.I | re.M)
    if m:
        value = m.group(1).strip()
        # Extra cleanup for name to drop trailing barcode/id
        if pattern in (STRICT["name"], LOOSE["name"]):
            value = re.sub(r"\s+(barcode|id|patient\s*id)\b.*$", "", value, flags=re.I).strip()
        return value
    return None


def extract_fields(raw_text: str) -> Parsed:
    """Pull demographics and heart failure labs out of lab-report text."""
    labs: Dict[str, float] = {}
    flags: Dict[str, float] = {}

    # normalise whitespace a bit
    t = re.sub(r"[^\S\r\n]+", " ", raw_text, flags=re.M)

    # --- Demographics ---
    name = _find(STRICT["name"], t) or _find(LOOSE["name"], t)
    sex = _find(STRICT["sex"], t) or _find(LOOSE["sex"], t)
    if sex:
        sex = sex[0].upper()
    a = _find(STRICT["age"], t) or _find(LOOSE["age"], t)
    try:
        age = float(a) if a else None
    except ValueError:
        age = None

    # --- Lab values ---
    for key in [k for k in STRICT.keys() if k not in ("name", "sex", "age")]:
        v = _find(STRICT[key], t)
        if v is not None:
            try:
                labs[key] = float(v)
            except ValueError:
                logger.warning(f"Could not read {key} value {v!r}")

    if "platelets" in labs and re.search(PLATELET_SCALED_UNIT, t, flags=re.I):
        labs["platelets"] = labs["platelets"] * 1000.0

    return Parsed(name, sex, age, labs, flags)


def parse_pdf() -> Parsed:
    with st.expander("Upload Lab PDF (optional)"):
        if not PDF_ENABLED:
            st.info("PDF parsing not available on this env.")
            return Parsed(None, None, None, {}, {})

        up = st.file_uploader("Upload lab PDF (text-based)", type=["pdf"])
        raw_text = ""
        if up is not None:
            try:
                with pdfplumber.open(up) as pdf:
                    texts = [page.extract_text() or "" for page in pdf.pages]
                    raw_text = "\n".join(texts)
            except Exception as e:
                logger.warning(f"Could not read uploaded PDF: {e}")
                st.warning("Could not read that PDF; fill the form manually.")
                raw_text = ""

        parsed = extract_fields(raw_text) if raw_text else Parsed(None, None, None, {}, {})

        # Show what we got
        if parsed.name or parsed.sex or parsed.age or parsed.labs:
            st.success("Parsed from PDF:")
            st.json({"name": parsed.name, "sex": parsed.sex, "age": parsed.age, **parsed.labs})

    return parsed
