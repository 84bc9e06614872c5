import os
import sqlite3
from dotenv import load_dotenv

# Load environment variables from .env before config reads them
load_dotenv()

from flask import Flask  # noqa: E402
from flask_login import LoginManager  # noqa: E402
from flask_sqlalchemy import SQLAlchemy  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from config import Config, DevelopmentConfig, ProductionConfig, TestingConfig  # noqa: E402

# Initialize extensions without app
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = "info"

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is on for the connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


CONFIG_MAP = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": Config,
}


def create_app(config_name=None):
    app = Flask(__name__)

    # Pick config based on FLASK_ENV unless one is given
    config_type = (config_name or os.getenv("FLASK_ENV", "development")).lower()
    app.config.from_object(CONFIG_MAP.get(config_type, DevelopmentConfig))
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    login_manager.init_app(app)
    db.init_app(app)

    from .user import load_shop_session
    login_manager.user_loader(load_shop_session)

    from .store import UpsellStore
    app.extensions["upsell_store"] = UpsellStore(db.session)

    # Import and register blueprints
    from .routes import main
    from .routes.auth import auth_bp
    app.register_blueprint(main)
    app.register_blueprint(auth_bp)

    from .commands import upsell_cli
    app.cli.add_command(upsell_cli)

    # Initialize database tables
    with app.app_context():
        db.create_all()

    app.logger.info("[App] Started with %s config", config_type)
    return app
