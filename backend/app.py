import os
import logging
from flask import Flask, jsonify, request
from flask_migrate import Migrate
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from config import Config
from models import db
from routes import register_routes
from services.errors import RecipeStoreError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(RecipeStoreError)
    def handle_store_error(error):
        # Storage detail was logged by the store, clients only get the generic message
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Let Flask render its own 404/405 etc.
        if isinstance(error, HTTPException):
            return error
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({'error': 'Something went very wrong on the server!'}), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app.json.ensure_ascii = False

    db.init_app(app)
    Migrate(app, db)
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
        send_wildcard=True
    )

    with app.app_context():
        db.create_all()  # creates tables if they don't exist, never alters them
        logger.info(f"Database schema ensured at {db.engine.url!r}")

    register_routes(app)
    register_error_handlers(app)

    @app.route('/health')
    def health():
        logger.debug("Health check ping received")
        return 'OK', 200, {'Content-Type': 'text/plain; charset=utf-8'}

    return app

if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 3000))

    # Get debug mode from environment variable, default to False for production
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'

    logger.info(f"Starting recipe API on port {port} with debug={debug_mode}")
    logger.info(f"API available at http://localhost:{port}/api")
    app.run(host='0.0.0.0', debug=debug_mode, port=port, use_reloader=debug_mode)
