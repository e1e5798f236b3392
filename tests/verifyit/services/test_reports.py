"""Tests for verifyit.services.reports — PDF and DOCX rendering."""
import io
from dataclasses import replace

import pytest
from docx import Document

from verifyit.models.analysis import DONT_PITCH, PITCH
from verifyit.services.reports import (
    breakdown_rows,
    export_filename,
    footer_text,
    render_docx,
    render_pdf,
    verdict_color,
    verdict_label,
    xml_safe,
)

LEAD = {'name': 'Dana Whitfield', 'title': 'VP of Engineering', 'company': 'Northwind Labs'}


def _docx_text(data):
    doc = Document(io.BytesIO(data))
    paragraphs = [p.text for p in doc.paragraphs]
    cells = [cell.text for table in doc.tables for row in table.rows for cell in row.cells]
    return paragraphs, cells


class TestHelpers:

    def test_verdict_label_and_color(self, sample_analysis):
        pitch = replace(sample_analysis, verdict=PITCH)
        dont = replace(sample_analysis, verdict=DONT_PITCH)
        assert (verdict_label(pitch), verdict_color(pitch)) == ('Pitch This Lead', '#16a34a')
        assert (verdict_label(dont), verdict_color(dont)) == ('Not Ready to Pitch', '#dc2626')

    def test_breakdown_rows(self, sample_analysis):
        labels = [label for label, _ in breakdown_rows(sample_analysis)]
        assert labels == [
            'Company Growth', 'Recent Social Activity', 'Job Title / Seniority',
            'Hiring Intent', 'Industry / Market Fit',
        ]

    def test_export_filename(self):
        assert export_filename('abc-123', 'pdf') == 'lead-verification-abc-123.pdf'

    def test_footer(self):
        assert footer_text() == 'Built by Taggle — https://taggle.ai'


class TestRenderPdf:

    def test_produces_pdf_bytes(self, sample_analysis):
        data = render_pdf(sample_analysis, LEAD)
        assert data.startswith(b'%PDF')
        assert len(data) > 1000

    def test_markup_in_text_is_escaped(self, sample_analysis):
        hostile = replace(sample_analysis, recommended_messaging=['<b>unclosed & <i>bad'])
        assert render_pdf(hostile, {**LEAD, 'company': 'A&B <Co>'}).startswith(b'%PDF')


class TestRenderDocx:

    def test_sections_present(self, sample_analysis):
        paragraphs, cells = _docx_text(render_docx(sample_analysis, LEAD))
        assert paragraphs[0] == 'Taggle — Lead Verification Report'
        assert 'Lead: Dana Whitfield' in paragraphs
        assert 'Company: Northwind Labs' in paragraphs
        assert f'Overall Score: {sample_analysis.overall_score}/100' in paragraphs
        for heading in ['Score Breakdown', 'Reasons For Pitching', 'Reasons Against Pitching',
                        'Company Profile', 'Recommended Messaging Angles']:
            assert heading in paragraphs
        assert paragraphs[-1] == 'Built by Taggle — https://taggle.ai'

    def test_breakdown_table(self, sample_analysis):
        _, cells = _docx_text(render_docx(sample_analysis, LEAD))
        assert cells[:2] == ['Category', 'Score (0-100)']
        assert cells[2:4] == ['Company Growth', str(sample_analysis.breakdown.company_growth)]

    def test_verdict_and_reasons(self, sample_analysis):
        paragraphs, _ = _docx_text(render_docx(sample_analysis, LEAD))
        assert f'Verdict: {verdict_label(sample_analysis)}' in paragraphs
        for reason in sample_analysis.reasons_for_pitching:
            assert f'• {reason}' in paragraphs

    def test_unknown_employees(self, sample_analysis):
        paragraphs, _ = _docx_text(render_docx(sample_analysis, LEAD))
        assert 'Estimated Employees: Unknown' in paragraphs

    def test_known_employees(self, sample_analysis):
        profile = replace(sample_analysis.company_profile, estimated_employees=120)
        paragraphs, _ = _docx_text(render_docx(replace(sample_analysis, company_profile=profile), LEAD))
        assert 'Estimated Employees: 120' in paragraphs

    def test_control_characters_stripped(self, sample_analysis):
        lead = {**LEAD, 'name': 'Dana\x0bWhitfield', 'company': 'North\x00wind Labs'}
        paragraphs, _ = _docx_text(render_docx(sample_analysis, lead))
        assert 'Lead: DanaWhitfield' in paragraphs
        assert 'Company: Northwind Labs' in paragraphs


class TestXmlSafe:

    @pytest.mark.parametrize('raw,expected', [
        ('plain', 'plain'),
        ('tab\tand\nnewline', 'tab\tand\nnewline'),
        ('bell\x07', 'bell'),
        ('\x1fesc\x0c', 'esc'),
    ])
    def test_strips_only_illegal(self, raw, expected):
        assert xml_safe(raw) == expected
