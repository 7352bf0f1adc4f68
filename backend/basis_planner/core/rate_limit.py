"""Fixed-window request limits per client address.

Limits run as router dependencies. Each app owns its ``Limiter``
(``app.state.limiter``); limit strings are read from ``app.state.settings``.
"""

import logging

from fastapi import Request
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from basis_planner.core.config import Settings
from basis_planner.core.errors import RateLimitError

logger = logging.getLogger(__name__)


def create_limiter(app_settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        strategy="fixed-window",
        enabled=app_settings.RATE_LIMIT_ENABLED,
    )


class RateLimit:
    """Dependency: count the request against one configured limit."""

    def __init__(self, scope: str, setting_name: str, message: str):
        self.scope = scope
        self.setting_name = setting_name
        self.message = message

    async def __call__(self, request: Request) -> None:
        limiter: Limiter = request.app.state.limiter
        if not limiter.enabled:
            return

        item = parse(getattr(request.app.state.settings, self.setting_name))
        client = get_remote_address(request)
        if not limiter.limiter.hit(item, self.scope, client):
            logger.warning("Rate limit %s exceeded for %s on %s", item, client, request.url.path)
            raise RateLimitError(self.message)


api_rate_limit = RateLimit(
    "api", "RATE_LIMIT_DEFAULT", "Zu viele Anfragen. Bitte versuchen Sie es später erneut."
)
login_rate_limit = RateLimit(
    "login", "RATE_LIMIT_LOGIN", "Zu viele Anmeldeversuche. Bitte versuchen Sie es in 15 Minuten erneut."
)
