import re
import threading

import pytest
from inkpost_blog.models import Post
from inkpost_blog.slugs import (
    SLUG_MAX_LENGTH,
    MonotonicStamp,
    is_url_safe,
    slugify,
    unique_slug,
)


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("My First Post", "my-first-post"),
        ("  Hello,   World! -- Again ", "hello-world-again"),
        ("C++ & Rust: 2024", "c-rust-2024"),
        ("already-a-slug", "already-a-slug"),
        ("!!!", ""),
    ],
)
def test_slugify(title, expected):
    assert slugify(title) == expected


def test_unique_slug_shape():
    assert re.fullmatch(r"my-first-post-\d+", unique_slug("My First Post"))


def test_unique_slug_falls_back_for_symbol_titles():
    assert re.fullmatch(r"post-\d+", unique_slug("???"))


def test_identical_titles_get_distinct_slugs():
    stamps = MonotonicStamp(clock=lambda: 1_700_000_000_000)

    first = unique_slug("Same Title", stamps=stamps)
    second = unique_slug("Same Title", stamps=stamps)

    assert first == "same-title-1700000000000"
    assert second == "same-title-1700000000001"


def test_generated_slugs_are_url_safe():
    for title in ["Hello World", "  spaced  out  ", "Ünïcödé title", "***"]:
        assert is_url_safe(unique_slug(title))


class TestMonotonicStamp:
    def test_follows_clock_when_it_advances(self):
        ticks = iter([10, 20, 30])
        stamps = MonotonicStamp(clock=lambda: next(ticks))

        assert [stamps.next() for _ in range(3)] == [10, 20, 30]

    def test_never_goes_backwards(self):
        ticks = iter([100, 50, 100, 101])
        stamps = MonotonicStamp(clock=lambda: next(ticks))

        assert [stamps.next() for _ in range(4)] == [100, 101, 102, 103]

    def test_unique_across_threads(self):
        stamps = MonotonicStamp(clock=lambda: 5)
        seen: list[int] = []

        def worker():
            for _ in range(200):
                seen.append(stamps.next())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(seen)) == 800


@pytest.mark.parametrize(
    ("slug", "ok"),
    [
        ("hello-world", True),
        ("post-123", True),
        ("a", True),
        ("Hello", False),
        ("hello--world", False),
        ("-hello", False),
        ("hello world", False),
        ("hello/world", False),
        ("", False),
    ],
)
def test_is_url_safe(slug, ok):
    assert is_url_safe(slug) is ok


@pytest.mark.parametrize("title", ["a" * 255, "word " * 60, "x" * 241 + " tail"])
def test_long_titles_fit_the_slug_column(title):
    column_length = Post.__table__.c.slug.type.length

    slug = unique_slug(title)

    assert len(slug) <= column_length
    assert is_url_safe(slug)


def test_truncation_keeps_the_stamp():
    stamps = MonotonicStamp(clock=lambda: 1_700_000_000_000)

    slug = unique_slug("b" * 300, stamps=stamps)

    assert slug.endswith("-1700000000000")
    assert len(slug) == SLUG_MAX_LENGTH


@pytest.mark.parametrize("slug", ["abc\n", "abc\r\n", "\nabc"])
def test_is_url_safe_rejects_surrounding_newlines(slug):
    assert is_url_safe(slug) is False
