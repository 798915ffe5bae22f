import logging
import streamlit as st
from core import runner
from core.config import load_config, load_settings
from core.registry import load_enabled_modules
from core.types import PatientData
from core.pdf_parser import parse_pdf
from core.report import build_pdf

cfg = load_config()
settings = load_settings(cfg)

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("app")

st.set_page_config(page_title=settings.page_title, layout="wide")
st.title(settings.page_title)
st.caption("Advanced Random Forest Machine Learning Analysis")

# 1) Parse PDF once (optional)
parsed = parse_pdf()

# 2) Base patient data shared across modules
base = PatientData(
    name=parsed.name,
    sex=parsed.sex,
    age=parsed.age,
    labs=parsed.labs,
    flags=parsed.flags,
)

# 3) Load enabled modules
modules = load_enabled_modules(cfg)

all_rows = []
all_sections = {}
for mod in modules:
    with st.expander(mod.title, expanded=True):
        pending = runner.is_pending(st.session_state, mod.id)
        submitted = mod.inputs(base, disabled=pending)
        if submitted is not None and runner.queue(st.session_state, mod.id, submitted):
            # rerun so the form redraws with its submit button disabled
            st.rerun()
        if pending:
            with st.spinner("Analyzing patient data..."):
                runner.run_pending(st.session_state, mod, settings)
            st.rerun()
        error = st.session_state.get(runner.error_key(mod.id))
        if error:
            st.error(error)
        result = st.session_state.get(mod.id)
        if result is not None:
            mod.render(result)
            all_rows += mod.to_pdf(result)
            for title, lines in mod.pdf_sections(result).items():
                all_sections.setdefault(title, []).extend(lines)

# 4) Consolidated PDF
if all_rows:
    pdf_bytes = build_pdf(patient=base, rows=all_rows, sections=all_sections)
    st.download_button("Download PDF Report", data=pdf_bytes, file_name="heart_failure_report.pdf", mime="application/pdf")

st.caption("Disclaimer: Screening & education only. Not medical advice.")
