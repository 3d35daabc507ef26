import os


def _optional_int(name):
    raw = os.environ.get(name)
    return int(raw) if raw not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',')
        if origin.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Room sizing
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '4'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Bot pacing (seconds)
    BOT_THINK_DELAY_SEC = float(os.environ.get('BOT_THINK_DELAY_SEC', '1.5'))
    BOT_MOVE_DELAY_SEC = float(os.environ.get('BOT_MOVE_DELAY_SEC', '1.0'))
    # random | greedy
    BOT_STRATEGY = os.environ.get('BOT_STRATEGY', 'random')
    BOT_SEED = _optional_int('BOT_SEED')
    DICE_SEED = _optional_int('DICE_SEED')
    # overlap | entry
    SAFE_CELL_RULE = os.environ.get('SAFE_CELL_RULE', 'overlap')
    # Run bot steps inline instead of on background timers. Always on under TESTING.
    BOT_EAGER = os.environ.get('BOT_EAGER', '0') == '1'
