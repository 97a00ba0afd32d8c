import logging
import sqlite3

import click
from flask import Flask, jsonify
from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException

from config import get_config
from models import db, User
from routes import register_blueprints
from services.achievements import seed_achievements
from utils.errors import APIError

logger = logging.getLogger(__name__)

migrate = Migrate()
login_manager = LoginManager()


# ============================================
# DATABASE
# ============================================

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # Enable SQLite foreign key enforcement so ON DELETE rules apply
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(app):
    """Create any missing tables and seed the achievement catalogue."""
    with app.app_context():
        db.create_all()
        seed_achievements()


# ============================================
# AUTH
# ============================================

@login_manager.user_loader
def load_user(user_id):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'success': False, 'error': 'Authentication required'}), 401


# ============================================
# ERROR HANDLERS
# ============================================

def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error('%s: %s', type(error).__name__, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'error': error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception('Unhandled error')
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


# ============================================
# CLI
# ============================================

def register_commands(app):
    @app.cli.command('seed-achievements')
    def seed_achievements_command():
        """Insert or update the built-in achievement definitions."""
        created, updated = seed_achievements()
        click.echo(f'Achievements seeded: {created} created, {updated} updated')


# ============================================
# APPLICATION FACTORY
# ============================================

def create_app(config_class=None):
    app = Flask(__name__)
    app.config.from_object(config_class or get_config())

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    register_blueprints(app)
    register_error_handlers(app)
    register_commands(app)

    return app


app = create_app()


if __name__ == '__main__':
    init_db(app)
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
