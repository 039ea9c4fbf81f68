"""
Per-client request budgets.

Counters live in process memory, one fixed window per client address, so
every worker process enforces its own budget.
"""

import math
import time

from limits import RateLimitItem, parse
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter
from starlette.requests import HTTPConnection

API_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
LOGIN_LIMIT_MESSAGE = "Too many login attempts, please try again later."


def client_address(conn: HTTPConnection) -> str:
    return conn.client.host if conn.client else "unknown"


class RateLimiter:
    """
    A named budget such as ``"5/15 minutes"``.

    >>> limiter = RateLimiter("5/15 minutes", namespace="login")
    >>> limiter.hit("203.0.113.7")
    True
    """

    def __init__(self, limit: str, *, namespace: str):
        self.item: RateLimitItem = parse(limit)
        self.namespace = namespace
        self._storage = MemoryStorage()
        self._window = FixedWindowRateLimiter(self._storage)

    def hit(self, key: str) -> bool:
        """Spend one unit; False once the budget is exhausted."""
        return self._window.hit(self.item, self.namespace, key)

    def allows(self, key: str) -> bool:
        """Whether one more unit fits, without spending it."""
        return self._window.test(self.item, self.namespace, key)

    def retry_after(self, key: str) -> int:
        """Whole seconds until the client's window resets."""
        stats = self._window.get_window_stats(self.item, self.namespace, key)
        return max(1, math.ceil(stats.reset_time - time.time()))
