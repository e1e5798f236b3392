"""
Email delivery — send a stored analysis as a PDF attachment via SendGrid.

Without SENDGRID_API_KEY the service runs in demo mode: nothing is looked up or
sent and a deterministic demo token is returned, so the UI flow can be shown
end to end without credentials.
"""
import base64
import html
import logging
import uuid
from typing import Dict, Optional

import requests

from verifyit.config import REPORT_BRAND_NAME, REPORT_BRAND_URL, SENDGRID_API_KEY, SENDGRID_API_URL, SENDGRID_FROM_EMAIL
from verifyit.services.reports import PDF_MIMETYPE, export_filename, render_pdf
from verifyit.services.store import AnalysisNotFoundError

logger = logging.getLogger('services.delivery')

DEMO_MESSAGE = (
    'Demo Mode: Report would be sent to your email. '
    'Configure SendGrid in environment variables for real email delivery.'
)


def is_demo_mode() -> bool:
    return not SENDGRID_API_KEY


def _email_html(recipient_name: str, lead: Dict, token: str) -> str:
    name = html.escape(recipient_name)
    lead_name = html.escape(lead.get('name', ''))
    company = html.escape(lead.get('company', ''))
    brand = html.escape(REPORT_BRAND_NAME)
    url = html.escape(REPORT_BRAND_URL, quote=True)
    return f"""
      <div style="font-family: ui-sans-serif, system-ui; line-height: 1.5;">
        <h2 style="margin:0 0 8px 0;">{brand} — Lead Verification Report</h2>
        <p style="margin:0 0 16px 0;">Hi {name},</p>
        <p style="margin:0 0 16px 0;">Attached is your lead verification report for <strong>{lead_name}</strong> at <strong>{company}</strong>.</p>
        <p style="margin:0 0 16px 0;">This report is generated using best-effort real-time public signals and is automatically deleted within 24 hours.</p>
        <p style="margin:0;">Built by <a href="{url}">{brand}</a>.</p>
        <hr style="margin:16px 0; border:none; border-top:1px solid #e5e7eb;" />
        <p style="margin:0; color:#6b7280; font-size:12px;">Tracking token: {token}</p>
      </div>
    """


def build_sendgrid_payload(analysis_id: str, lead: Dict, email_address: str,
                           recipient_name: Optional[str], pdf: bytes, token: str) -> Dict:
    """SendGrid v3 mail/send request body."""
    return {
        'personalizations': [{'to': [{'email': email_address}]}],
        'from': {'email': SENDGRID_FROM_EMAIL},
        'subject': f"Lead Verification Report — {lead.get('company', '')}",
        'content': [{'type': 'text/html', 'value': _email_html(recipient_name or 'there', lead, token)}],
        'headers': {'X-Tracking-Token': token},
        'attachments': [{
            'content': base64.b64encode(pdf).decode('ascii'),
            'filename': export_filename(analysis_id, 'pdf'),
            'type': PDF_MIMETYPE,
            'disposition': 'attachment',
        }],
    }


def send_report(store, analysis_id: str, email_address: str,
                recipient_name: Optional[str] = None) -> Dict:
    """
    Email the stored analysis as a PDF.

    Returns the response body for the caller. Raises AnalysisNotFoundError when
    the id is unknown or expired, and requests.RequestException when SendGrid
    rejects or cannot be reached.
    """
    if is_demo_mode():
        logger.info("Demo mode: report %s would be emailed to %s", analysis_id, email_address)
        return {
            'success': True,
            'message': DEMO_MESSAGE,
            'token': f'demo-{analysis_id}',
            'demoMode': True,
        }

    entry = store.get(analysis_id)
    if entry is None:
        raise AnalysisNotFoundError(analysis_id)

    pdf = render_pdf(entry.analysis, entry.lead)
    token = str(uuid.uuid4())
    payload = build_sendgrid_payload(analysis_id, entry.lead, email_address, recipient_name, pdf, token)

    resp = requests.post(
        SENDGRID_API_URL,
        json=payload,
        headers={'Authorization': f'Bearer {SENDGRID_API_KEY}'},
        timeout=30,
    )
    resp.raise_for_status()
    logger.info("Report %s emailed to %s (token=%s)", analysis_id, email_address, token)
    return {'success': True, 'message': 'Email sent', 'token': token}
