from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, scheduler=None):
    """Build the Flask app and its match service.

    ``scheduler`` defaults to Socket.IO background tasks; tests pass a
    virtual clock instead.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS')
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from shadowbox.services.matches import (
        MatchService,
        MatchSettings,
        SocketIONotifier,
        SocketIOScheduler,
    )
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    # One registry and lock per app; nothing is shared between app instances
    flask_app.extensions['shadowbox'] = MatchService(
        notifier=SocketIONotifier(socketio, namespace),
        scheduler=scheduler or SocketIOScheduler(socketio),
        settings=MatchSettings.from_config(flask_app.config),
        logger=flask_app.logger,
    )

    from shadowbox.main import main
    flask_app.register_blueprint(main)

    from shadowbox.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from shadowbox.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    return flask_app
