"""
Report rendering — one finished analysis → PDF (reportlab) or DOCX (python-docx).

Both renderers take the AnalysisResult plus the lead summary ({name, title,
company}) and return the document as bytes. Section order is the same in both:
header, lead identity, verdict banner, overall score + confidence, score
breakdown, reasons for / against, company profile, messaging angles, footer.
"""
import io
import logging
import re
from datetime import datetime
from typing import Dict, List, Tuple
from xml.sax.saxutils import escape

from docx import Document
from docx.shared import Pt, RGBColor
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from verifyit.config import REPORT_BRAND_NAME, REPORT_BRAND_URL
from verifyit.models.analysis import AnalysisResult, PITCH

logger = logging.getLogger('services.reports')

PITCH_COLOR = '#16a34a'
DONT_PITCH_COLOR = '#dc2626'
TEXT_COLOR = '#111827'
MUTED_COLOR = '#6b7280'
LINK_COLOR = '#2563eb'

# Characters lxml refuses in a text node (C0 controls other than tab, LF, CR)
_XML_ILLEGAL = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]')

PDF_MIMETYPE = 'application/pdf'
DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'


def verdict_label(analysis: AnalysisResult) -> str:
    return 'Pitch This Lead' if analysis.verdict == PITCH else 'Not Ready to Pitch'


def verdict_color(analysis: AnalysisResult) -> str:
    return PITCH_COLOR if analysis.verdict == PITCH else DONT_PITCH_COLOR


def breakdown_rows(analysis: AnalysisResult) -> List[Tuple[str, int]]:
    b = analysis.breakdown
    return [
        ('Company Growth', b.company_growth),
        ('Recent Social Activity', b.social_activity),
        ('Job Title / Seniority', b.job_title),
        ('Hiring Intent', b.hiring_intent),
        ('Industry / Market Fit', b.market_fit),
    ]


def report_title() -> str:
    return f'{REPORT_BRAND_NAME} — Lead Verification Report'


def footer_text() -> str:
    return f'Built by {REPORT_BRAND_NAME} — {REPORT_BRAND_URL}'


def export_filename(analysis_id: str, ext: str) -> str:
    return f'lead-verification-{analysis_id}.{ext}'


def _generated(analysis: AnalysisResult) -> str:
    try:
        created = datetime.fromisoformat(analysis.created_at)
    except (TypeError, ValueError):
        return f'Generated: {analysis.created_at}'
    return f"Generated: {created.strftime('%Y-%m-%d %H:%M %Z').strip()}"


def _employees(analysis: AnalysisResult) -> str:
    value = analysis.company_profile.estimated_employees
    return 'Unknown' if value is None else str(value)


# ── PDF ───────────────────────────────────────────────────────────────────────

def _pdf_styles():
    base = getSampleStyleSheet()
    text = colors.HexColor(TEXT_COLOR)
    return {
        'title': ParagraphStyle('ReportTitle', parent=base['Title'], fontSize=20, leading=24,
                                textColor=text, alignment=0),
        'muted': ParagraphStyle('Muted', parent=base['Normal'], fontSize=10,
                                textColor=colors.HexColor(MUTED_COLOR)),
        'body': ParagraphStyle('Body', parent=base['Normal'], fontSize=11, leading=15, textColor=text),
        'lead': ParagraphStyle('Lead', parent=base['Normal'], fontSize=12, leading=16, textColor=text),
        'heading': ParagraphStyle('Section', parent=base['Heading2'], fontSize=13, textColor=text,
                                  spaceBefore=10, spaceAfter=4),
        'score': ParagraphStyle('Score', parent=base['Normal'], fontSize=14, leading=18, textColor=text),
        'banner': ParagraphStyle('Banner', parent=base['Normal'], fontSize=16, leading=20,
                                 textColor=colors.white),
    }


def _bullets(items: List[str], style) -> List[Paragraph]:
    return [Paragraph(f'• {escape(item)}', style) for item in items]


def render_pdf(analysis: AnalysisResult, lead: Dict[str, str]) -> bytes:
    """Render the analysis as an A4 PDF."""
    styles = _pdf_styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4,
        leftMargin=18 * mm, rightMargin=18 * mm, topMargin=18 * mm, bottomMargin=18 * mm,
        title=report_title(), author=REPORT_BRAND_NAME,
    )

    banner = Table([[Paragraph(escape(verdict_label(analysis)), styles['banner'])]], colWidths=[doc.width])
    banner.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor(verdict_color(analysis))),
        ('LEFTPADDING', (0, 0), (-1, -1), 12),
        ('TOPPADDING', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 10),
    ]))

    profile = analysis.company_profile
    story = [
        Paragraph(escape(report_title()), styles['title']),
        Paragraph(escape(_generated(analysis)), styles['muted']),
        Spacer(1, 12),
        Paragraph(f"Lead: {escape(lead.get('name', ''))}", styles['lead']),
        Paragraph(f"Title: {escape(lead.get('title', ''))}", styles['lead']),
        Paragraph(f"Company: {escape(lead.get('company', ''))}", styles['lead']),
        Spacer(1, 12),
        banner,
        Spacer(1, 12),
        Paragraph(f'Overall Score: {analysis.overall_score}/100', styles['score']),
        Paragraph(f'Confidence: {analysis.confidence} ({analysis.confidence_percent}%)', styles['muted']),
        Paragraph('Score Breakdown', styles['heading']),
    ]
    story += [Paragraph(f'{label}: {value}/100', styles['body']) for label, value in breakdown_rows(analysis)]

    story.append(Paragraph('Reasons For Pitching', styles['heading']))
    story += _bullets(analysis.reasons_for_pitching, styles['body'])
    story.append(Paragraph('Reasons Against Pitching', styles['heading']))
    story += _bullets(analysis.reasons_against_pitching, styles['body'])

    story += [
        Paragraph('Company Profile', styles['heading']),
        Paragraph(f'Name: {escape(profile.name)}', styles['body']),
        Paragraph(f'Location/Industry: {escape(profile.location)}', styles['body']),
        Paragraph(f'Estimated Employees: {_employees(analysis)}', styles['body']),
        Paragraph(f'Primary Business: {escape(profile.primary_business)}', styles['body']),
        Paragraph('Recent Milestones:', styles['body']),
    ]
    story += _bullets(profile.recent_milestones[:5], styles['body'])

    story.append(Paragraph('Recommended Messaging Angles', styles['heading']))
    story += _bullets(analysis.recommended_messaging, styles['body'])

    story += [Spacer(1, 18), Paragraph(escape(footer_text()), styles['muted'])]

    doc.build(story)
    data = buffer.getvalue()
    logger.debug("Rendered PDF report (%d bytes)", len(data))
    return data


# ── DOCX ──────────────────────────────────────────────────────────────────────

def xml_safe(text: str) -> str:
    return _XML_ILLEGAL.sub('', text)


def _line(document, text: str):
    return document.add_paragraph(xml_safe(text))


def _muted_paragraph(document, text: str):
    run = document.add_paragraph().add_run(xml_safe(text))
    run.font.size = Pt(10)
    run.font.color.rgb = RGBColor.from_string(MUTED_COLOR.lstrip('#'))


def render_docx(analysis: AnalysisResult, lead: Dict[str, str]) -> bytes:
    """Render the analysis as a Word document."""
    document = Document()
    document.add_heading(report_title(), level=1)
    _muted_paragraph(document, _generated(analysis))

    _line(document, f"Lead: {lead.get('name', '')}")
    _line(document, f"Title: {lead.get('title', '')}")
    _line(document, f"Company: {lead.get('company', '')}")

    verdict = document.add_heading(level=2).add_run(f'Verdict: {verdict_label(analysis)}')
    verdict.font.color.rgb = RGBColor.from_string(verdict_color(analysis).lstrip('#'))
    _line(document, f'Overall Score: {analysis.overall_score}/100')
    _line(document, f'Confidence: {analysis.confidence} ({analysis.confidence_percent}%)')

    document.add_heading('Score Breakdown', level=2)
    rows = breakdown_rows(analysis)
    table = document.add_table(rows=len(rows) + 1, cols=2)
    table.style = 'Table Grid'
    header = table.rows[0].cells
    header[0].paragraphs[0].add_run('Category').bold = True
    header[1].paragraphs[0].add_run('Score (0-100)').bold = True
    for row, (label, value) in zip(table.rows[1:], rows):
        row.cells[0].text = label
        row.cells[1].text = str(value)

    document.add_heading('Reasons For Pitching', level=2)
    for reason in analysis.reasons_for_pitching:
        _line(document, f'• {reason}')

    document.add_heading('Reasons Against Pitching', level=2)
    for reason in analysis.reasons_against_pitching:
        _line(document, f'• {reason}')

    profile = analysis.company_profile
    document.add_heading('Company Profile', level=2)
    _line(document, f'Name: {profile.name}')
    _line(document, f'Location/Industry: {profile.location}')
    _line(document, f'Estimated Employees: {_employees(analysis)}')
    _line(document, f'Primary Business: {profile.primary_business}')
    document.add_paragraph('Recent Milestones:')
    for milestone in profile.recent_milestones[:5]:
        _line(document, f'• {milestone}')

    document.add_heading('Recommended Messaging Angles', level=2)
    for angle in analysis.recommended_messaging:
        _line(document, f'• {angle}')

    footer = document.add_paragraph()
    brand = footer.add_run(f'Built by {REPORT_BRAND_NAME} — ')
    brand.font.color.rgb = RGBColor.from_string(MUTED_COLOR.lstrip('#'))
    link = footer.add_run(REPORT_BRAND_URL)
    link.font.color.rgb = RGBColor.from_string(LINK_COLOR.lstrip('#'))

    buffer = io.BytesIO()
    document.save(buffer)
    data = buffer.getvalue()
    logger.debug("Rendered DOCX report (%d bytes)", len(data))
    return data
