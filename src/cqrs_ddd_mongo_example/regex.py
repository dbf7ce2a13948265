"""String matcher -> MongoDB ``$regex`` pattern."""

from __future__ import annotations

import re

from .example import StringMatcher


def quote(source: str) -> str:
    """Escape special regex characters in a literal string."""
    return re.escape(source)


def to_regular_expression(source: str, matcher: StringMatcher) -> str:
    """Build the ``$regex`` pattern matching ``source`` under ``matcher``.

    Literal text is escaped for every mode except ``REGEX``, which passes the
    source through as a user-supplied pattern.
    """
    if matcher == StringMatcher.REGEX:
        return source
    pattern = quote(source)
    if matcher in (StringMatcher.DEFAULT, StringMatcher.EXACT):
        return f"^{pattern}$"
    if matcher == StringMatcher.STARTING:
        return f"^{pattern}"
    if matcher == StringMatcher.ENDING:
        return f"{pattern}$"
    if matcher == StringMatcher.CONTAINING:
        return pattern
    raise ValueError(f"Unsupported string matcher: {matcher!r}")


class MongoRegexCreator:
    """Pattern factory handed to ``MongoExampleMapper``; swap to customise."""

    def to_regular_expression(self, source: str, matcher: StringMatcher) -> str:
        return to_regular_expression(source, matcher)

    def quote(self, source: str) -> str:
        return quote(source)
