"""Flask application factory for the Purifai zakat service."""
import logging
import os
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


logger = logging.getLogger('purifai')


def create_app(config: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Trust X-Forwarded-For from reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # Default configuration
    app.config.update(
        SECRET_KEY=os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production'),
        JSON_SORT_KEYS=False,
        DATA_DIR=os.environ.get('DATA_DIR', os.path.join(os.path.dirname(__file__), '..', 'data')),
    )

    # Override with provided config
    if config:
        app.config.update(config)

    # Initialize database
    from purifai import db
    db.init_app(app)

    # Seed nisab and the self member on first start
    from purifai.services.config import get_default_self_name
    from purifai.services.repository import seed_nisab, load_household, save_household
    with app.app_context():
        conn = db.get_db()
        seed_nisab(conn)
        household = load_household(conn)
        if household.get_self_member() is None:
            household.ensure_self(get_default_self_name())
            save_household(conn, household)
            logger.info('Initialized household with self member')

    # Register CLI commands
    from purifai import cli
    cli.register_cli(app)

    # Register blueprints
    from purifai.routes.health import health_bp
    from purifai.routes.api import api_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')

    return app
