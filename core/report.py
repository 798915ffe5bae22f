import io
from typing import Dict, List, Optional
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, ListFlowable, ListItem
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors
from core.types import PatientData

HEADER = ["Metric", "Value", "Interpretation"]
ROW_STYLE = TableStyle([
    ('BACKGROUND', (0,0), (-1,0), colors.HexColor('#eeeeee')),
    ('GRID', (0,0), (-1,-1), 0.25, colors.grey),
    ('FONTNAME', (0,0), (-1,0), 'Helvetica-Bold'),
    ('ROWBACKGROUNDS', (0,1), (-1,-1), [colors.white, colors.HexColor('#fafafa')]),
])


def _patient_line(patient: PatientData) -> str:
    return (
        f"<b>Patient:</b> {escape(patient.name or '—')} &nbsp;&nbsp; "
        f"<b>Sex:</b> {patient.sex or '—'} &nbsp;&nbsp; "
        f"<b>Age:</b> {int(patient.age) if patient.age is not None else '—'}"
    )


def _section(title: str, lines: List[str], styles) -> list:
    bullets = ListFlowable(
        [ListItem(Paragraph(escape(line), styles["Normal"])) for line in lines],
        bulletType="bullet",
        leftIndent=12,
    )
    return [Spacer(1, 10), Paragraph(f"<b>{escape(title)}</b>", styles["Heading3"]), bullets]


def build_pdf(patient: PatientData, rows: list[list[str]], sections: Optional[Dict[str, List[str]]] = None) -> bytes:
    """Render the assessment summary table followed by titled bullet sections."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, title="Heart Failure Risk Report")
    styles = getSampleStyleSheet()

    story = [
        Paragraph("<b>Heart Failure Risk Report</b>", styles["Title"]),
        Paragraph(_patient_line(patient), styles["Normal"]),
        Spacer(1, 8),
    ]

    if rows:
        tbl = Table([HEADER] + rows, hAlign='LEFT', colWidths=[130, 80, 280])
        tbl.setStyle(ROW_STYLE)
        story.append(tbl)

    for title, lines in (sections or {}).items():
        if lines:
            story += _section(title, lines, styles)

    story.append(Spacer(1, 10))
    story.append(Paragraph(
        "<b>Disclaimer:</b> Heuristic risk simulation for education only; not a validated model and not medical advice.",
        styles['Italic']
    ))

    doc.build(story)
    return buf.getvalue()
