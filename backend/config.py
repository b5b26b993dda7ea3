import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ALLOWED_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ALLOWED_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',') if o.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Round structure used when createMatch does not name one: reactive | guessing
    DEFAULT_ROUND_POLICY = os.environ.get('DEFAULT_ROUND_POLICY', 'reactive')
    REACTIVE_TOTAL_ROUNDS = int(os.environ.get('REACTIVE_TOTAL_ROUNDS', '4'))
    GUESSING_TOTAL_ROUNDS = int(os.environ.get('GUESSING_TOTAL_ROUNDS', '3'))
    COMBINATION_LENGTH = int(os.environ.get('COMBINATION_LENGTH', '4'))
    # Phase timers (seconds)
    COUNTDOWN_SECONDS = int(os.environ.get('COUNTDOWN_SECONDS', '3'))
    REACTIVE_ROUND_DURATION_SEC = int(os.environ.get('REACTIVE_ROUND_DURATION_SEC', '30'))
    GUESSING_ROUND_DURATION_SEC = int(os.environ.get('GUESSING_ROUND_DURATION_SEC', '8'))
    NEXT_ROUND_DELAY_SEC = float(os.environ.get('NEXT_ROUND_DELAY_SEC', '3'))
    MATCH_END_DELAY_SEC = float(os.environ.get('MATCH_END_DELAY_SEC', '2'))
    REMATCH_DELAY_SEC = float(os.environ.get('REMATCH_DELAY_SEC', '1'))
    # Defender reaction window (ms)
    REACTION_WINDOW_MS = int(os.environ.get('REACTION_WINDOW_MS', '2000'))
