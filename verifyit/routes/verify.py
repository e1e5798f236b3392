"""
Verify route — validate a lead, scrape every platform, score, store.
"""
import logging

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from verifyit.analysis.scorer import analyze_lead
from verifyit.config import SCRAPE_TIMEOUT_SECONDS
from verifyit.extensions import get_analysis_store
from verifyit.models.lead import VerifyRequest, validation_details
from verifyit.scraping.coordinator import scrape_all_platforms

logger = logging.getLogger('routes.verify')

bp = Blueprint('verify', __name__)


def invalid_request(details):
    return jsonify({'error': 'Invalid request', 'details': details}), 400


@bp.route('/api/verify', methods=['POST'])
def verify():
    """Run the full pipeline for one lead and return the stored analysis."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return invalid_request({'__root__': 'Expected a JSON object'})

    try:
        body = VerifyRequest.model_validate(data)
    except ValidationError as e:
        return invalid_request(validation_details(e))

    lead = body.lead
    try:
        signals = scrape_all_platforms(lead, timeout=SCRAPE_TIMEOUT_SECONDS)
        analysis = analyze_lead(lead, signals)
        entry = get_analysis_store().create(lead.to_dict(), analysis)
    except Exception as e:
        logger.error("Verification failed for %s @ %s", lead.name, lead.company, exc_info=True)
        return jsonify({'error': 'Verification failed', 'message': str(e)}), 500

    logger.info("Verified %s @ %s → %s (%d)", lead.name, lead.company, analysis.verdict, analysis.overall_score)
    return jsonify({
        'analysis_id': entry.id,
        'expires_at': entry.expires_at_iso,
        'analysis': analysis.to_dict(),
    })
