"""Sliding-window request limits on top of DRF throttling.

Request histories live in the Django cache named by
``PORTFOLIO_RATE_LIMIT['CACHE_ALIAS']`` (``'ratelimit'``). That cache is
process-local memory unless ``RATE_LIMIT_REDIS_URL`` points it at Redis,
which lets several instances share counts. Entries expire with the window.

Routes tagged PUBLIC never authenticate, so they are always keyed by
client address; every other route is keyed by the principal when one is
attached.

Increments are not locked; concurrent requests for one key may both pass.
"""

import re

from django.conf import settings
from django.core.cache import caches
from rest_framework.settings import api_settings
from rest_framework.throttling import SimpleRateThrottle

_UNITS = {'s': 1, 'm': 60, 'h': 3600, 'd': 86400}


def get_counter_store():
    return caches[settings.PORTFOLIO_RATE_LIMIT['CACHE_ALIAS']]


def parse_rate(rate):
    """'100/15m' -> (100, 900). Plain DRF forms like '5/hour' work too."""
    if rate is None:
        return (None, None)
    num, period = rate.split('/')
    match = re.fullmatch(r'(\d*)([smhd])[a-z]*', period.strip())
    if not match:
        raise ValueError(f'Bad rate: {rate!r}')
    multiplier = int(match.group(1) or 1)
    return (int(num), multiplier * _UNITS[match.group(2)])


class PortfolioRateThrottle(SimpleRateThrottle):
    """Keyed by attached principal, else by client address."""

    scope = 'api'

    def __init__(self):
        self.cache = get_counter_store()
        super().__init__()

    def get_rate(self):
        return api_settings.DEFAULT_THROTTLE_RATES.get(self.scope)

    def parse_rate(self, rate):
        return parse_rate(rate)

    def get_cache_key(self, request, view):
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            ident = f'user-{user.pk}'
        else:
            ident = self.get_ident(request)
        return self.cache_format % {'scope': self.scope, 'ident': ident}


class ContactRateThrottle(PortfolioRateThrottle):
    scope = 'contact'


class LoginRateThrottle(PortfolioRateThrottle):
    scope = 'login'
