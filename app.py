"""
Main Flask application entry point for the messaging catalog API
"""
import logging
import os

from flask import Flask
from config import Config
from models import db
from utils.mail import mail
from utils.responses import ResponseCode, api_response


def create_app(config_class=Config):
    """Application factory pattern. DB init runs inside app_context; non-fatal on failure."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    mail.init_app(app)

    register_error_handlers(app)

    # Create tables only inside app context; do not crash if DB temporarily unavailable
    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            logging.getLogger(__name__).warning("Database init skipped (non-fatal): %s", e)

    try:
        os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)
    except OSError as e:
        app.logger.warning("Upload folder unavailable: %s", e)

    from routes import api_bp
    app.register_blueprint(api_bp, url_prefix=app.config["API_PREFIX"])

    return app


def register_error_handlers(app):
    """JSON envelopes for errors raised outside the route handlers"""

    @app.errorhandler(404)
    def handle_404_error(e):
        return api_response("Resource not found", 404, success=False, code=ResponseCode.NOT_FOUND)

    @app.errorhandler(405)
    def handle_405_error(e):
        return api_response("Method not allowed", 405, success=False, code=ResponseCode.FAILED)

    @app.errorhandler(413)
    def handle_413_error(e):
        return api_response("Uploaded file is too large (max 2 MB)", 413, success=False,
                            code=ResponseCode.VALIDATION_ERROR)

    @app.errorhandler(500)
    def handle_500_error(e):
        db.session.rollback()
        app.logger.error("Unhandled server error: %s", e, exc_info=True)
        return api_response("Internal server error. Please try again later.", 500, success=False,
                            code=ResponseCode.FAILED)


# WSGI entry point (Railway/Render/cPanel): gunicorn app:app
app = create_app()
application = app

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "false").lower() in ("true", "1"))
