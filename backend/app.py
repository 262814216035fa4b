"""Flask application entry point."""
import logging
import os

from flask import Flask
from flask.logging import default_handler
from flask_cors import CORS
from flask_migrate import Migrate

from backend.config import config
from backend.models import db
from backend.docs_loader import get_docs_loader


def configure_logging(app):
    """Route backend module loggers through Flask's handler."""
    logger = logging.getLogger('backend')
    logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if default_handler not in logger.handlers:
        logger.addHandler(default_handler)


def create_app(config_name=None):
    """Create and configure Flask application."""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    app.config.from_object(config.get(config_name, config['default']))

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    CORS(app)
    Migrate(app, db)

    # Check bundled documentation
    docs_loader = get_docs_loader(app.config.get('DOCS_DIR'))
    errors = docs_loader.validate_data()
    if errors:
        app.logger.warning(f"Docs data validation warnings: {errors}")

    if not app.config.get('OPENAI_API_KEY'):
        app.logger.info("OPENAI_API_KEY not set, AI assistant will answer with fallback replies")

    # Register blueprints
    from backend.api import ai_bp, docs_bp, scripts_bp
    app.register_blueprint(scripts_bp, url_prefix='/api/scripts')
    app.register_blueprint(docs_bp, url_prefix='/api/docs')
    app.register_blueprint(ai_bp, url_prefix='/api/ai')

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        return {'success': False, 'error': 'Not found'}, 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return {'success': False, 'error': 'Method not allowed'}, 405

    @app.errorhandler(413)
    def too_large(error):
        return {'success': False, 'error': 'Request body too large'}, 413

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return {'success': False, 'error': 'Internal server error'}, 500

    return app


if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5001))
    app.run(debug=True, host='0.0.0.0', port=port)
