"""Rate limiter shared by main.py and the routers.

Kept out of main.py so routers can decorate endpoints without importing the
application module.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Login and registration limits, per client address
REGISTER_RATE_LIMIT = "10/minute"
LOGIN_RATE_LIMIT = "20/minute"

limiter = Limiter(key_func=get_remote_address)
