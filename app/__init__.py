from dotenv import load_dotenv
load_dotenv()

from flask import Flask, request
from werkzeug.middleware.proxy_fix import ProxyFix
from loguru import logger
import click
import redis
from .config import Config
from .errors import TokenCollision
from .log import setup_logging


def create_app(overrides: dict | None = None):
    app = Flask(__name__)
    app.config.from_object(Config())
    if overrides:
        app.config.update(overrides)
    setup_logging(app.config['LOG_LEVEL'], app.config.get('AUDIT_LOG_PATH'))
    # Trust reverse proxy headers (Render/Vercel/Heroku)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    from .routes_public import bp as public_bp
    from .routes_api import bp as api_bp
    from .routes_admin import bp as admin_bp
    app.register_blueprint(public_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(TokenCollision)
    def token_collision(e):
        logger.error("token collision on {}", e)
        return {'error': 'token_collision'}, 409

    @app.errorhandler(redis.exceptions.RedisError)
    def infrastructure_error(e):
        logger.opt(exception=e).error("{} {} failed: {}", request.method, request.path, e)
        return {'error': 'server_error', 'detail': str(e)}, 500

    @app.cli.command('prune-pending')
    def prune_pending_cmd():
        """Drop expired and confirmed pending deliveries."""
        from .services.deliveries import prune_pending
        removed = prune_pending()
        click.echo(f"removed {removed} pending deliveries")

    @app.get('/health')
    def health():
        return {'ok': True}

    return app
