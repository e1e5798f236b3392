"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints and owns the
analysis store's lifecycle.
"""
from flask import Flask


def create_app(store=None, start_sweep=True):
    """Create and configure the Flask application.

    `store` defaults to the backend named by ANALYSIS_STORE. The memory store's
    background sweep starts here; stop it with
    app.extensions['analysis_store'].stop_sweep().
    """
    from verifyit.config import SECRET_KEY
    from verifyit.logging_config import configure_logging
    from verifyit.services.store import create_store

    app = Flask(__name__)

    configure_logging(app)

    app.secret_key = SECRET_KEY

    if store is None:
        store = create_store()
    app.extensions['analysis_store'] = store
    if start_sweep:
        store.start_sweep()

    # Register blueprints
    from verifyit.routes.analysis import bp as analysis_bp
    from verifyit.routes.delivery import bp as delivery_bp
    from verifyit.routes.health import bp as health_bp
    from verifyit.routes.verify import bp as verify_bp

    app.register_blueprint(verify_bp)
    app.register_blueprint(analysis_bp)
    app.register_blueprint(delivery_bp)
    app.register_blueprint(health_bp)

    return app
