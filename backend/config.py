import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Seconds a backgrounded player survives before eviction
    PLAYER_EVICTION_TIMEOUT_SEC = float(os.environ.get('PLAYER_EVICTION_TIMEOUT_SEC', '15'))
    # Attack-set size for pets outside the catalog
    DEFAULT_ATTACK_SET_SIZE = int(os.environ.get('DEFAULT_ATTACK_SET_SIZE', '5'))
    # Comma separated; '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
