import html

import altair as alt
import streamlit as st
import streamlit.components.v1 as components
from contextlib import contextmanager

from assessment.charts import build_chart
from assessment.errors import IngestError
from assessment.records import DOMAIN_TITLES, Domain
from assessment.report import identity_chips_html, render_report_html
from assessment.session import AssessmentSession

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{html.escape(title)}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def get_session() -> AssessmentSession:
    if "assessment_session" not in st.session_state:
        st.session_state["assessment_session"] = AssessmentSession()
    return st.session_state["assessment_session"]


def render_domain(session: AssessmentSession, participant_id: str, domain: Domain):
    table = session.table_view(participant_id, domain)
    series = session.chart_series(participant_id, domain)
    with card(DOMAIN_TITLES[domain]):
        st.dataframe(table.to_frame(), hide_index=True, use_container_width=True)
        chart = build_chart(series)
        session.charts.render(domain.value, chart)
        if chart is not None:
            st.altair_chart(chart, use_container_width=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Kompetenzfeststellung", layout="wide")
inject_base_styles()
st.title("Kompetenzfeststellung – Auswertung")
st.caption("Excel-Export hochladen, Teilnehmer wählen, Ergebnisse ansehen und Bericht drucken.")

session = get_session()

with st.sidebar:
    st.markdown("### Datei")
    upload = st.file_uploader("Excel-Datei (.xlsx)", type=["xlsx", "xls"])
    if upload is not None and st.session_state.get("_ingested_file") != upload.file_id:
        with st.spinner("Datei wird verarbeitet …"):
            try:
                session.ingest_excel(upload.getvalue())
                st.session_state["_ingested_file"] = upload.file_id
            except IngestError as exc:
                st.error(str(exc))

if not session.loaded:
    st.info("Bitte eine Excel-Datei mit Teilnehmerliste hochladen.")
    st.stop()

participants = session.participants()
if not participants:
    st.error("Keine Teilnehmerdaten gefunden.")
    st.stop()

with st.sidebar:
    st.markdown("---")
    st.markdown("### Teilnehmer")
    labels = {p.id: f"{p.name or session.settings.unnamed_text} ({p.id})" for p in participants}
    selected_id = st.radio("Teilnehmer", options=list(labels.keys()), format_func=labels.get)

participant = session.select(selected_id)
st.markdown(
    f"<div class='app-top-bar'><div class='breadcrumb'>Teilnehmer</div>"
    f"<div class='page-title'>{html.escape(participant.name or session.settings.unnamed_text)}</div></div>",
    unsafe_allow_html=True,
)
st.markdown(f"<div class='chip-row'>{identity_chips_html(participant)}</div>", unsafe_allow_html=True)

tab_labels = [DOMAIN_TITLES[d] for d in Domain] + ["Bericht"]
tabs = st.tabs(tab_labels)
for tab, domain in zip(tabs, Domain):
    with tab:
        render_domain(session, participant.id, domain)

with tabs[-1]:
    report_html = render_report_html(session.report(participant.id))
    st.download_button(
        "Bericht herunterladen (HTML)",
        data=report_html.encode("utf-8"),
        file_name=f"bericht_{participant.id}.html",
        mime="text/html",
    )
    components.html(report_html, height=800, scrolling=True)
