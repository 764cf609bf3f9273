import os
import re


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _cors_origins():
    # CORS_ORIGINS replaces the defaults entirely; entries are literal origins
    raw = os.environ.get('CORS_ORIGINS')
    if raw:
        return [o.strip() for o in raw.split(',') if o.strip()]
    return [
        'http://localhost:5173',
        'http://localhost:3000',
        re.compile(r'^https://.*\.vercel\.app$'),  # preview deployments
    ]


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///lasertag.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = _cors_origins()
    # Reject a second control start for a different game while one is running
    STRICT_GAME_CONTROL = _env_flag('STRICT_GAME_CONTROL')
    # Freeze finished matches against score updates and repeated ends
    STRICT_MATCH_LIFECYCLE = _env_flag('STRICT_MATCH_LIFECYCLE')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    # One access-log line per request. Off in tests to keep output quiet.
    LOG_REQUESTS = _env_flag('LOG_REQUESTS', default=True)


def origin_allowed(origin, allowed):
    """Match an Origin header against literal origins and compiled patterns."""
    for entry in allowed:
        if isinstance(entry, re.Pattern):
            if entry.match(origin):
                return True
        elif origin == entry:
            return True
    return False
