from core.report import build_pdf
from core.types import PatientData


def test_build_pdf_with_rows():
    patient = PatientData(name="Jane Doe", sex="F", age=70.0, labs={}, flags={})
    rows = [
        ["Risk Score (0–100)", "42", "Moderate risk"],
        ["Confidence", "88%", "Simulated ensemble confidence"],
    ]
    pdf = build_pdf(patient, rows)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 500


def test_build_pdf_with_sections_is_larger():
    patient = PatientData(name="Jane <Doe>", sex="F", age=70.0, labs={}, flags={})
    rows = [["Risk Score (0–100)", "42", "Moderate risk"]]
    sections = {
        "Top Contributing Features": ["Ejection Fraction: 30%", "Serum Creatinine: 25%"],
        "Recommendations": ["Increase monitoring frequency", "Follow up in 3 months"],
        "Empty": [],
    }
    plain = build_pdf(patient, rows)
    with_sections = build_pdf(patient, rows, sections=sections)
    assert with_sections.startswith(b"%PDF")
    assert len(with_sections) > len(plain)


def test_build_pdf_without_patient_details():
    patient = PatientData(name=None, sex=None, age=None, labs={}, flags={})
    assert build_pdf(patient, []).startswith(b"%PDF")
