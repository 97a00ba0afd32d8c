"""
Health Routes
"""

import logging

from flask import Blueprint, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import db, utcnow, isoformat
from services.storage import is_configured, check_connection
from utils.request_helpers import parse_bool

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__, url_prefix='/api')


@health_bp.route('/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
        database = 'connected'
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('Health check database query failed: %s', e)
        database = 'disconnected'

    healthy = database == 'connected'
    body = {
        'success': healthy,
        'status': 'ok' if healthy else 'degraded',
        'database': database,
        'storageConfigured': is_configured(),
        'timestamp': isoformat(utcnow()),
    }

    # ?deep=true also round-trips to the storage bucket
    if parse_bool(request.args.get('deep')):
        body['storage'] = 'connected' if check_connection() else 'disconnected'

    return jsonify(body), 200 if healthy else 503
