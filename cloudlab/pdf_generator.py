import io
import re
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from cloudlab.reports import ClinicalAuditReport, SiteAuditReport, status_tone

_TONE_COLORS = {
    "good": colors.HexColor('#059669'),
    "neutral": colors.HexColor('#2563eb'),
    "bad": colors.HexColor('#dc2626'),
    "unknown": colors.HexColor('#64748b'),
}


class PDFGenerator:
    def __init__(self):
        self.buffer = io.BytesIO()
        self.doc = SimpleDocTemplate(self.buffer, pagesize=LETTER, topMargin=0.5*inch, bottomMargin=0.5*inch)
        self.styles = getSampleStyleSheet()
        self.elements = []

        self.styles.add(ParagraphStyle(name='TitleCenter', parent=self.styles['Heading1'], alignment=TA_CENTER, spaceAfter=20, fontSize=22, textColor=colors.HexColor('#059669')))
        self.styles.add(ParagraphStyle(name='SectionHeader', parent=self.styles['Heading2'], spaceBefore=15, spaceAfter=10, fontSize=15, textColor=colors.HexColor('#1f2937')))
        self.styles.add(ParagraphStyle(name='NormalText', parent=self.styles['Normal'], fontSize=10, leading=14, spaceAfter=6))

    def add_title(self, text):
        self.elements.append(Paragraph(escape(text), self.styles['TitleCenter']))
        self.elements.append(Spacer(1, 0.2*inch))

    def add_section_header(self, text):
        self.elements.append(Paragraph(escape(text), self.styles['SectionHeader']))
        self.elements.append(Spacer(1, 0.1*inch))

    def add_paragraph(self, text, style='NormalText'):
        # Model text is untrusted: escape first, then turn **bold** into <b>
        formatted_text = re.sub(r'\*\*(.*?)\*\*', r'<b>\1</b>', escape(text))
        if text.strip().startswith('- '):
            formatted_text = '&bull; ' + formatted_text.strip()[2:]
        self.elements.append(Paragraph(formatted_text, self.styles[style]))

    def add_table(self, data, col_widths=None, status_column=None):
        if not data:
            return

        t = Table(data, colWidths=col_widths)
        style = [
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f3f4f6')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.HexColor('#111827')),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 10),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
            ('BACKGROUND', (0, 1), (-1, -1), colors.white),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -1), 9),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#e5e7eb')),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]
        if status_column is not None:
            for row_index, row in enumerate(data[1:], start=1):
                tone = status_tone(row[status_column])
                style.append(('TEXTCOLOR', (status_column, row_index), (status_column, row_index), _TONE_COLORS[tone]))
        t.setStyle(TableStyle(style))
        self.elements.append(t)
        self.elements.append(Spacer(1, 0.2*inch))

    def build(self):
        self.doc.build(self.elements)
        self.buffer.seek(0)
        return self.buffer


def _generic_pdf(pdf, report):
    pdf.add_title(f"Site Audit: {report.domain}")
    pdf.add_paragraph(f"**Overall Score:** {report.overall_score:g}/100")
    pdf.add_paragraph(report.summary)

    pdf.add_section_header("Resource Scores")
    rows = [["Resource", "Score", "Status"]]
    rows += [[r.title, f"{r.score:g}", r.status] for r in report.resources]
    pdf.add_table(rows, col_widths=[220, 80, 100], status_column=2)

    pdf.add_section_header("Findings & Recommendations")
    for r in report.resources:
        pdf.add_paragraph(f"**{r.title}:** {r.details}")
        pdf.add_paragraph(f"- {r.recommendation}")


def _clinical_pdf(pdf, report):
    pdf.add_title(f"OrtoAudit: {report.doctor_name}")
    pdf.add_paragraph(f"**{report.specialty}**")
    pdf.add_paragraph(f"**Saúde Digital:** {report.overall_health:g}/100")
    pdf.add_paragraph(report.clinical_summary)

    pdf.add_section_header("Sinais Vitais")
    pdf.add_table(
        [
            ["Seção", "Score", "Status"],
            ["Triagem", f"{report.triage.score:g}", report.triage.status],
            ["Exame de Imagem", f"{report.imaging.score:g}", report.imaging.status],
        ],
        col_widths=[200, 80, 120],
        status_column=2,
    )

    pdf.add_section_header("1. Triagem")
    pdf.add_paragraph(f"**Diagnóstico:** {report.triage.diagnosis}")
    pdf.add_paragraph(report.triage.details)

    pdf.add_section_header("2. Exame de Imagem")
    pdf.add_paragraph(report.imaging.observation)
    if report.imaging.detected_tags:
        pdf.add_paragraph(f"**Tags:** {', '.join(report.imaging.detected_tags)}")

    pdf.add_section_header("3. Raio-X do Mercado")
    pdf.add_paragraph(report.market_xray.competitor_comparison)
    pdf.add_paragraph(f"**Território perdido:** {report.market_xray.lost_territory}")

    pdf.add_section_header("4. Prescrição")
    pdf.add_paragraph(f"**Ação imediata:** {report.prescription.immediate_action}")
    for headline in report.prescription.ad_headlines:
        pdf.add_paragraph(f"- {headline}")
    pdf.add_paragraph(f"**Prognóstico:** {report.prescription.prognosis}")


def generate_audit_pdf(report):
    """
    Renders a SiteAuditReport or ClinicalAuditReport. Returns a BytesIO positioned at 0.
    """
    pdf = PDFGenerator()
    if isinstance(report, SiteAuditReport):
        _generic_pdf(pdf, report)
    elif isinstance(report, ClinicalAuditReport):
        _clinical_pdf(pdf, report)
    else:
        raise TypeError(f"Unsupported report type: {type(report).__name__}")
    return pdf.build()
