"""
Analysis routes — retrieve, delete and export stored analyses.
"""
import logging

from flask import Blueprint, Response, jsonify

from verifyit.extensions import get_analysis_store
from verifyit.services.reports import DOCX_MIMETYPE, PDF_MIMETYPE, export_filename, render_docx, render_pdf

logger = logging.getLogger('routes.analysis')

bp = Blueprint('analysis', __name__)

EXPORTS = {
    'pdf': (render_pdf, PDF_MIMETYPE),
    'docx': (render_docx, DOCX_MIMETYPE),
}


@bp.route('/api/analysis/<analysis_id>')
def get_analysis(analysis_id):
    entry = get_analysis_store().get(analysis_id)
    if entry is None:
        return jsonify({'error': 'Not found'}), 404
    return jsonify({
        'analysis_id': entry.id,
        'lead': entry.lead,
        'analysis': entry.analysis.to_dict(),
        'expires_at': entry.expires_at_iso,
    })


@bp.route('/api/analysis/<analysis_id>', methods=['DELETE'])
def delete_analysis(analysis_id):
    """Delete is idempotent: unknown ids succeed too."""
    try:
        get_analysis_store().delete(analysis_id)
    except Exception as e:
        logger.error("Delete failed for %s: %s", analysis_id, e)
        return jsonify({'error': 'Delete failed', 'message': str(e)}), 500
    return jsonify({'success': True})


@bp.route('/api/export/<fmt>/<analysis_id>')
def export_analysis(fmt, analysis_id):
    """Download the analysis as a PDF or DOCX attachment."""
    if fmt not in EXPORTS:
        return jsonify({'error': 'Not found'}), 404

    entry = get_analysis_store().get(analysis_id)
    if entry is None:
        return jsonify({'error': 'Not found'}), 404

    render, mimetype = EXPORTS[fmt]
    try:
        body = render(entry.analysis, entry.lead)
    except Exception as e:
        logger.error("%s export failed for %s", fmt.upper(), analysis_id, exc_info=True)
        return jsonify({'error': f'{fmt.upper()} export failed', 'message': str(e)}), 500

    return Response(body, mimetype=mimetype, headers={
        'Content-Disposition': f'attachment; filename="{export_filename(analysis_id, fmt)}"',
        'Cache-Control': 'no-store',
    })
