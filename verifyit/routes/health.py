"""
Health route.
"""
from flask import Blueprint, jsonify

from verifyit.config import MOCK_SCRAPING, PLATFORMS
from verifyit.extensions import get_analysis_store
from verifyit.scraping.base import get_platform_info
from verifyit.scraping.coordinator import default_registry

bp = Blueprint('health', __name__)


@bp.route('/health')
def health():
    """Liveness plus which adapters and store backend this process runs with."""
    return jsonify({
        'status': 'ok',
        'platforms': PLATFORMS,
        'adapters': get_platform_info(default_registry()),
        'mock_scraping': MOCK_SCRAPING,
        'store': get_analysis_store().backend,
    })
