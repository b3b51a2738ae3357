from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from phom.routes import main
    flask_app.register_blueprint(main)

    from phom.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from phom.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Session store lives on app.extensions; load it from the database once
    from phom.services.store import SessionStore
    store = SessionStore(flask_app)
    with flask_app.app_context():
        import phom.models  # noqa: F401
        if flask_app.config.get('CREATE_TABLES_ON_START'):
            db.create_all()
        store.load()

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database with one blank session."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            store.clear()
            session = store.create()
            print(f'Database has been reset; created {session.name}.')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
