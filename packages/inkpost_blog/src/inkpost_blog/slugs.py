"""
URL slugs for posts.

A generated slug is the slugified title plus a millisecond stamp, e.g.
``my-first-post-1718035200123``. Stamps come from a process-wide source that
never hands out the same value twice, so identical titles submitted in the
same millisecond still get distinct slugs inside one process. Across
processes the unique index on ``posts.slug`` remains the final guard.
"""

import re
import threading
import time

FALLBACK_SLUG_BASE = "post"
# Width of the posts.slug column
SLUG_MAX_LENGTH = 255

_UNSAFE_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")
_URL_SAFE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


class MonotonicStamp:
    """
    Millisecond wall-clock stamps that strictly increase.

    >>> stamps = MonotonicStamp(clock=lambda: 1000)
    >>> stamps.next(), stamps.next()
    (1000, 1001)
    """

    def __init__(self, clock=None):
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            stamp = max(self._clock(), self._last + 1)
            self._last = stamp
            return stamp


_stamps = MonotonicStamp()


def slugify(title: str) -> str:
    """
    >>> slugify("  Hello,   World! -- Again ")
    'hello-world-again'
    """
    slug = title.lower()
    slug = _UNSAFE_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def unique_slug(title: str, *, stamps: MonotonicStamp | None = None) -> str:
    """
    The result never exceeds ``SLUG_MAX_LENGTH``; long titles lose their tail.

    >>> unique_slug("My First Post")  # doctest: +SKIP
    'my-first-post-1718035200123'
    """
    suffix = f"-{(stamps or _stamps).next()}"
    base = slugify(title)[: SLUG_MAX_LENGTH - len(suffix)].rstrip("-")
    return f"{base or FALLBACK_SLUG_BASE}{suffix}"


def is_url_safe(slug: str) -> bool:
    return _URL_SAFE.fullmatch(slug) is not None
