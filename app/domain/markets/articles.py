"""
Article rules: slug generation and full-content detection.

Pure functions, no IO.
"""

import re

from app.domain.markets.entities import Article

SLUG_MAX_LENGTH = 100
FULL_CONTENT_MIN_LENGTH = 1000
MIN_SCRAPED_CONTENT_LENGTH = 200

# NewsAPI truncates content with a "[+1234 chars]" suffix.
TRUNCATION_MARKERS = ("[+", "chars]")

_NON_WORD_RE = re.compile(r"[^\w ]+", re.ASCII)
_SPACES_RE = re.compile(r" +")


def generate_slug(title: str) -> str:
    """Build a URL slug from an article title.

    Lowercases, strips every character that is not a word character or a
    space, joins words with hyphens and truncates to 100 characters.

    Example:
        >>> generate_slug("Stocks Rally: S&P 500 Hits Record!")
        'stocks-rally-sp-500-hits-record'
    """
    slug = _NON_WORD_RE.sub("", title.lower())
    slug = _SPACES_RE.sub("-", slug)
    return slug[:SLUG_MAX_LENGTH]


def has_full_content(article: Article) -> bool:
    """Return True when the stored article needs no scraping."""
    content = article.content or ""
    if len(content) <= FULL_CONTENT_MIN_LENGTH:
        return False
    if any(marker in content for marker in TRUNCATION_MARKERS):
        return False
    return article.full_content_available
