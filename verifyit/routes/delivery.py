"""
Delivery route — email a stored analysis as a PDF.
"""
import logging

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from verifyit.extensions import get_analysis_store
from verifyit.models.lead import SendEmailRequest, validation_details
from verifyit.services.delivery import send_report
from verifyit.services.store import AnalysisNotFoundError

logger = logging.getLogger('routes.delivery')

bp = Blueprint('delivery', __name__)


@bp.route('/api/send-email', methods=['POST'])
def send_email():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid request', 'details': {'__root__': 'Expected a JSON object'}}), 400

    try:
        body = SendEmailRequest.model_validate(data)
    except ValidationError as e:
        return jsonify({'error': 'Invalid request', 'details': validation_details(e)}), 400

    try:
        result = send_report(
            get_analysis_store(),
            body.analysis_id,
            str(body.email_address),
            recipient_name=body.recipient_name,
        )
    except AnalysisNotFoundError:
        return jsonify({'error': 'Analysis not found'}), 404
    except Exception as e:
        logger.error("Email delivery failed for %s: %s", body.analysis_id, e)
        return jsonify({'success': False, 'error': 'Email delivery failed', 'message': str(e)}), 500

    return jsonify(result)
