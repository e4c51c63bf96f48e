"""Rate limiting configuration using slowapi.

Provides a module-level Limiter instance imported by the write routers
(declarations, session events) and wired into the FastAPI app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from attendance_ledger.config import settings

# Only decorated routes are limited; reads stay unthrottled.
limiter = Limiter(key_func=get_remote_address)

write_limit = settings.WRITE_RATE_LIMIT
