import functools
from datetime import date

import streamlit as st

import cloudlab.ui as ui
from cloudlab.adapters import run_site_audit
from cloudlab.invocation import InvocationStatus
from cloudlab.pdf_generator import generate_audit_pdf
from cloudlab.report_export import audit_to_markdown
from cloudlab.reports import AuditKind, ClinicalAuditReport

BOARD_KEY = "site_auditor_board"
UNIT_ID = "audit"

_KIND_LABELS = {
    "🔍 Generic Site Audit": AuditKind.GENERIC,
    "🩺 OrtoAudit (Clinical)": AuditKind.CLINICAL,
}


def _render_generic(report):
    c_score, c_summary = st.columns([1, 3])
    with c_score:
        st.markdown(f'<p class="health-score">{report.overall_score:g}</p>', unsafe_allow_html=True)
        st.caption("Overall Score")
    with c_summary:
        st.subheader(report.domain)
        st.write(report.summary)

    for start in range(0, len(report.resources), 3):
        columns = st.columns(3)
        for column, resource in zip(columns, report.resources[start:start + 3]):
            with column:
                ui.render_score_card(resource.title, resource.score, resource.status, resource.details)
                st.caption(f"💡 {resource.recommendation}")


def _render_clinical(report):
    c_chart, c_score = st.columns([3, 1])
    with c_chart:
        st.caption(f"PRONTUÁRIO DIGITAL · {date.today().strftime('%d/%m/%Y')}")
        st.subheader(report.doctor_name)
        st.markdown(f"**{report.specialty}**")
        st.markdown(f"> *\"{report.clinical_summary}\"*")
    with c_score:
        st.markdown(f'<p class="health-score">{report.overall_health:g}</p>', unsafe_allow_html=True)
        st.caption("Saúde Digital")

    c_triage, c_imaging = st.columns(2)
    with c_triage:
        ui.render_score_card("1. Triagem", report.triage.score, report.triage.status, report.triage.diagnosis)
        st.write(report.triage.details)
    with c_imaging:
        ui.render_score_card("2. Exame de Imagem", report.imaging.score, report.imaging.status, report.imaging.observation)
        if report.imaging.detected_tags:
            st.caption(" · ".join(report.imaging.detected_tags))

    st.markdown("#### 3. Raio-X do Mercado")
    st.info(report.market_xray.competitor_comparison)
    st.warning(f"**Território perdido:** {report.market_xray.lost_territory}")

    st.markdown("#### 4. Prescrição")
    st.success(f"**Ação imediata:** {report.prescription.immediate_action}")
    for headline in report.prescription.ad_headlines:
        st.markdown(f"- {headline}")
    st.markdown(f"**Prognóstico:** {report.prescription.prognosis}")


def render_site_auditor(client):
    """
    Renders the Site Auditor: URL in, one of the two audit report types out.
    """
    st.header("🩻 Site Auditor")
    st.caption("Grounded website audits rendered as report cards.")

    board = ui.get_board(BOARD_KEY)
    board.register(UNIT_ID)
    state = board.state(UNIT_ID)

    kind_label = st.radio("Audit Type", list(_KIND_LABELS), horizontal=True, label_visibility="collapsed")
    kind = _KIND_LABELS[kind_label]

    c_input, c_button = st.columns([4, 1])
    with c_input:
        url = st.text_input("Website", value=board.input_for(UNIT_ID), placeholder="www.suaclinica.com.br",
                            label_visibility="collapsed")
        board.set_input(UNIT_ID, url)
    with c_button:
        run = st.button("Diagnosticar" if kind is AuditKind.CLINICAL else "Audit",
                        type="primary", disabled=state.is_loading or not url, width="stretch")

    if run:
        handler = functools.partial(run_site_audit, client, kind=kind)
        with st.spinner("Realizando Triagem Digital..." if kind is AuditKind.CLINICAL else "Auditing site..."):
            ui.run_invocations(board, {UNIT_ID: handler})
        st.rerun()

    if state.status is InvocationStatus.ERROR:
        st.error(f"❌ {state.output}")
        return
    if state.status is not InvocationStatus.SUCCESS:
        return

    report = state.output
    if isinstance(report, ClinicalAuditReport):
        _render_clinical(report)
    else:
        _render_generic(report)

    st.markdown("---")
    c_md, c_pdf = st.columns(2)
    with c_md:
        st.download_button("📄 Download Markdown", audit_to_markdown(report), file_name="site_audit.md",
                           mime="text/markdown", width="stretch")
    with c_pdf:
        st.download_button("📑 Download PDF", generate_audit_pdf(report), file_name="site_audit.pdf",
                           mime="application/pdf", width="stretch")
