"""
Audit Report Export
Renders either audit report type as a Markdown document.
"""

from datetime import date

from cloudlab.reports import ClinicalAuditReport, SiteAuditReport


def _generic_markdown(report, generated_on):
    md = f"# 🔍 Site Audit: {report.domain}\n\n"
    md += f"Generated on: {generated_on}\n\n"
    md += f"**Overall Score:** {report.overall_score:g}/100\n\n"
    md += f"{report.summary}\n\n"

    md += "## Resources\n\n"
    md += "| Resource | Score | Status |\n|---|---|---|\n"
    for r in report.resources:
        md += f"| {r.title} | {r.score:g} | {r.status} |\n"
    md += "\n"

    for r in report.resources:
        md += f"### {r.title} ({r.status})\n"
        md += f"{r.details}\n\n"
        md += f"**Recommendation:** {r.recommendation}\n\n"
    return md


def _clinical_markdown(report, generated_on):
    md = f"# 🩺 OrtoAudit: {report.doctor_name}\n\n"
    md += f"**{report.specialty}** · Prontuário Digital · {generated_on}\n\n"
    md += f"**Saúde Digital:** {report.overall_health:g}/100\n\n"
    md += f"> {report.clinical_summary}\n\n"

    md += "## 1. Triagem\n"
    md += f"**Score:** {report.triage.score:g} · **Status:** {report.triage.status}\n\n"
    md += f"**Diagnóstico:** {report.triage.diagnosis}\n\n"
    md += f"{report.triage.details}\n\n"

    md += "## 2. Exame de Imagem\n"
    md += f"**Score:** {report.imaging.score:g} · **Status:** {report.imaging.status}\n\n"
    md += f"{report.imaging.observation}\n\n"
    if report.imaging.detected_tags:
        md += f"**Tags:** {', '.join(report.imaging.detected_tags)}\n\n"

    md += "## 3. Raio-X do Mercado\n"
    md += f"{report.market_xray.competitor_comparison}\n\n"
    md += f"**Território perdido:** {report.market_xray.lost_territory}\n\n"

    md += "## 4. Prescrição\n"
    md += f"**Ação imediata:** {report.prescription.immediate_action}\n\n"
    md += "**Headlines:**\n"
    for headline in report.prescription.ad_headlines:
        md += f"- {headline}\n"
    md += f"\n**Prognóstico:** {report.prescription.prognosis}\n"
    return md


def audit_to_markdown(report, generated_on=None):
    generated_on = generated_on or date.today().isoformat()
    if isinstance(report, SiteAuditReport):
        return _generic_markdown(report, generated_on)
    if isinstance(report, ClinicalAuditReport):
        return _clinical_markdown(report, generated_on)
    raise TypeError(f"Unsupported report type: {type(report).__name__}")
