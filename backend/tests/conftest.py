import os
import sys
import pytest

# Ensure the backend root (containing the `shadowbox` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)
if CURRENT_DIR not in sys.path:
    sys.path.insert(0, CURRENT_DIR)

from shadowbox import create_app, socketio
from shadowbox.services.matches import MatchService, MatchSettings
from support import ManualScheduler, RecordingNotifier


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def service(notifier, scheduler):
    return MatchService(notifier=notifier, scheduler=scheduler, settings=MatchSettings())


@pytest.fixture()
def reactive_match(service):
    code = service.create_match('alice', 'reactive')
    return service.join_match('bob', code)


@pytest.fixture()
def guessing_match(service):
    code = service.create_match('alice', 'guessing')
    return service.join_match('bob', code)


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, namespace='/')
    yield test_client
    if test_client.is_connected('/'):
        test_client.disconnect(namespace='/')
