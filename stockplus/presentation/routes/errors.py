"""
Application-wide error pages. API paths get JSON bodies instead.
"""

from flask import jsonify, render_template, request

from stockplus import db
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.routes.errors")


def _wants_json():
    return request.path.startswith('/api/')


def register_error_handlers(app):

    @app.errorhandler(404)
    def not_found(error):
        if _wants_json():
            return jsonify({'success': False, 'error': 'Not found'}), 404
        return render_template('errors/error.html', code=404, message='Page not found'), 404

    @app.errorhandler(429)
    def rate_limited(error):
        logger.warning(f"Rate limit hit on {request.path}")
        if _wants_json():
            return jsonify({'success': False, 'error': 'Too many requests'}), 429
        return render_template('errors/error.html', code=429, message='Too many requests, try again shortly'), 429

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        logger.error(f"Unhandled error on {request.path}: {error}")
        if _wants_json():
            return jsonify({'success': False, 'error': 'Internal server error'}), 500
        return render_template('errors/error.html', code=500, message='Something went wrong'), 500
