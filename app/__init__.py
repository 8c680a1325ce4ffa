"""Flask application factory."""
from datetime import date, datetime
from decimal import Decimal
import os
import traceback

from flask import Flask, jsonify
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from app.database import init_db


class ApiJSONProvider(DefaultJSONProvider):
    """JSON provider that renders money as numbers and dates as ISO 8601."""

    @staticmethod
    def default(o):
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json = ApiJSONProvider(app)
    app.json.ensure_ascii = False

    # Initialize Sentry for error tracking in production
    if app.config.get('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Initialize Redis Cache (tariff table)
    from app.services.cache_service import init_cache
    init_cache(app)

    # Setup Prometheus metrics instrumentation
    from app.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: Enable ProxyFix for HTTPS behind Nginx reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database
    init_db(app)

    # Load the authenticated principal before each request
    from app.middleware import load_current_principal

    @app.before_request
    def before_request_handler():
        """Load principal context for each request."""
        load_current_principal()

    # Error Handlers
    from app.exceptions import CotizadorError

    @app.errorhandler(CotizadorError)
    def handle_cotizador_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"CotizadorError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"CotizadorError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")
        return jsonify({'status': 'error', 'message': 'Error interno del servidor'}), 500

    # Register blueprints
    from app.blueprints.auth import auth_bp
    from app.blueprints.pricing import pricing_bp
    from app.blueprints.quotes import quotes_bp
    from app.blueprints.catalog import catalog_bp
    from app.blueprints.metrics import metrics_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(pricing_bp)
    app.register_blueprint(quotes_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from app.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"Tarifas en cache: {'si' if app.config.get('CACHE_ENABLED') else 'no'}")

    return app
