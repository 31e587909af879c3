"""Fixed-window rate limiting per client address (Flask-Limiter).

Limits, strategy and storage come from the RATELIMIT_* config keys.
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
