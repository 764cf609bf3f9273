from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException
import click
from lasertag.config import Config, origin_allowed

db = SQLAlchemy()
migrate = Migrate()

# Imported after db so the services can bind to it
from lasertag.services.status import GameStatusManager  # noqa: E402

game_status = GameStatusManager()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(
        flask_app,
        origins=flask_app.config.get('CORS_ORIGINS', []),
        methods=['GET', 'POST', 'OPTIONS'],
        supports_credentials=False,
    )
    game_status.init_app(flask_app)

    @flask_app.before_request
    def reject_foreign_origin():
        origin = request.headers.get('Origin')
        if origin and not origin_allowed(origin, flask_app.config.get('CORS_ORIGINS', [])):
            flask_app.logger.warning(f"[cors] rejected origin={origin} path={request.path}")
            return jsonify({'error': 'Not allowed by CORS'}), 403

    # Import and register blueprints here
    from lasertag.main import main
    flask_app.register_blueprint(main)

    from lasertag.api.game import game
    flask_app.register_blueprint(game, url_prefix='/game')

    _register_error_handlers(flask_app)

    if flask_app.config.get('LOG_REQUESTS', True):
        @flask_app.after_request
        def log_request(response):
            flask_app.logger.info(f"{request.method} {request.full_path.rstrip('?')} {response.status_code}")
            return response

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database."""
        import lasertag.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


def _register_error_handlers(flask_app):
    from lasertag.errors import LaserTagError

    @flask_app.errorhandler(LaserTagError)
    def handle_lasertag_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        messages = {404: 'Not found', 405: 'Method not allowed'}
        return jsonify({'error': messages.get(exc.code, exc.name)}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        flask_app.logger.exception(f"[error] unhandled {type(exc).__name__}")
        return jsonify({'error': 'Internal server error'}), 500
