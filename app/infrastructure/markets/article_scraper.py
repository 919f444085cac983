"""
Adapter: Article scraper.

Implements ArticleScraperPort with httpx and BeautifulSoup.
Tries a list of known article-body selectors used by common news sites and
falls back to the page's <article>/<main> element.
"""

import logging
import re
from typing import Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from app.domain.markets.entities import ScrapedContent
from app.domain.markets.errors import ScrapeError
from app.domain.markets.ports import ArticleScraperPort

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "no-cache",
}
MAX_REDIRECTS = 10

CONTENT_SELECTORS = (
    "article .entry-content",
    "article .post-content",
    ".article-content",
    ".story-body",
    ".article-body",
    '[data-module="ArticleBody"]',
    ".article-wrap .content",
    ".post-entry",
    ".entry-content",
    ".content-body",
    'div[data-testid="article-content"]',
    ".ArticleBody-articleBody",
    ".RichTextStoryBody",
    ".ArticleBodyWrapper",
    ".story-content",
    ".post-body",
    ".article-text",
    ".content-wrapper",
    "main article",
    ".article-container .content",
    ".article-body-content",
    ".article-body__content",
    ".content-body__content",
)

TITLE_SELECTORS = (
    "h1.entry-title",
    "h1.post-title",
    "h1.article-title",
    ".headline",
    'h1[data-testid="headline"]',
    ".ArticleHeader-headline",
    "h1.article-headline",
    "h1",
)

AUTHOR_SELECTORS = (
    ".author-name",
    ".byline-author",
    '[data-testid="author-name"]',
    ".ArticleHeader-author",
    ".article-author",
    ".byline .author",
)

NOISE_SELECTORS = (
    "script, style, .advertisement, .ad, .social-share, .related-articles, "
    ".comments, .newsletter-signup, .promo-box"
)
LAYOUT_SELECTORS = (
    "nav, aside, .sidebar, .navigation, .menu, .header, .footer, "
    ".comments, .related, .social"
)
HTML_NOISE_SELECTORS = (
    "script, style, .advertisement, .ad, .social-share, .related-articles, "
    ".comments, .sidebar, nav, footer, header"
)

TEXT_TAGS = ["p", "h2", "h3", "h4", "h5", "h6"]
MIN_PARAGRAPH_CHARS = 30
MIN_SELECTOR_TEXT_CHARS = 200
MIN_SELECTOR_PARAGRAPHS = 2
FALLBACK_BELOW_CHARS = 500
FALLBACK_MAX_PARAGRAPHS = 20
MIN_CONTENT_CHARS = 100
MIN_IMAGE_SIDE = 200

_WHITESPACE_RE = re.compile(r"\s+")
_BETWEEN_TAGS_RE = re.compile(r">\s+<")
_BYLINE_PREFIX_RE = re.compile(r"^by\s+", re.IGNORECASE)


def clean_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _remove(element: Tag, selectors: str) -> None:
    for node in element.select(selectors):
        node.decompose()


def _paragraphs(element: Tag) -> list[str]:
    """Text blocks of an element; headings are prefixed with '## '."""
    blocks = []
    for node in element.find_all(TEXT_TAGS):
        text = clean_text(node.get_text(" "))
        if node.name != "p" and text:
            text = f"## {text}"
        if len(text) > MIN_PARAGRAPH_CHARS:
            blocks.append(text)
    return blocks


def _readable_html(soup: BeautifulSoup, element: Tag) -> str:
    """Strip page chrome and wrap images in captioned figures."""
    _remove(element, HTML_NOISE_SELECTORS)
    for img in element.find_all("img"):
        if not img.get("src"):
            continue
        figure = soup.new_tag("figure", attrs={"class": "article-image"})
        img.wrap(figure)
        caption = soup.new_tag("figcaption")
        caption.string = img.get("alt") or "Article image"
        img.insert_after(caption)
    html = element.decode_contents()
    return _BETWEEN_TAGS_RE.sub("><", _WHITESPACE_RE.sub(" ", html)).strip()


def _int_attr(value: Optional[str]) -> int:
    try:
        return int(str(value).strip().rstrip("px"))
    except (TypeError, ValueError):
        return 0


def extract_images(soup: BeautifulSoup, base_url: str) -> list[str]:
    """Absolute URLs of page images, skipping ones sized as icons or ads."""
    images = []
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        width, height = img.get("width"), img.get("height")
        if width and height and not (
            _int_attr(width) > MIN_IMAGE_SIDE and _int_attr(height) > MIN_IMAGE_SIDE
        ):
            continue
        images.append(urljoin(base_url, src))
    return images


def _first_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        node = soup.select_one(selector)
        if node is not None:
            text = clean_text(node.get_text(" "))
            if text:
                return text
    return ""


def extract_article(html: str, url: str) -> ScrapedContent:
    """Extract title, body text, readable HTML, author and images from a page."""
    soup = BeautifulSoup(html, "html.parser")
    title = _first_text(soup, TITLE_SELECTORS)
    author = _BYLINE_PREFIX_RE.sub("", _first_text(soup, AUTHOR_SELECTORS)) or None
    images = extract_images(soup, url)

    content = ""
    html_content = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        _remove(element, NOISE_SELECTORS)
        text = element.get_text(" ").strip()
        substantial = (
            len(text) > MIN_SELECTOR_TEXT_CHARS
            or len(element.find_all("p")) > MIN_SELECTOR_PARAGRAPHS
            or element.find("img") is not None
        )
        if substantial:
            content = "\n\n".join(_paragraphs(element))
            html_content = _readable_html(soup, element)
            break

    if len(content) < FALLBACK_BELOW_CHARS:
        main = soup.select_one("article, main, .main-content, .content-main")
        if main is not None:
            _remove(main, LAYOUT_SELECTORS)
            fallback = "\n\n".join(_paragraphs(main)[:FALLBACK_MAX_PARAGRAPHS])
            if len(fallback) > len(content):
                content = fallback
                html_content = _readable_html(soup, main)

    return ScrapedContent(
        title=title,
        content=content.strip(),
        html_content=html_content,
        author=author,
        images=images,
    )


class ArticleScraperAdapter(ArticleScraperPort):
    """Fetches an article page with browser-like headers and extracts its body."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    async def scrape(self, url: str) -> ScrapedContent:
        """Scrape an article page.

        Client errors (4xx) still get parsed; paywalls often serve the body
        with a 403.

        Raises:
            ScrapeError: On network failures, 5xx answers or when fewer than
                100 characters of text could be extracted.
        """
        try:
            response = await self._client.get(
                url,
                headers=BROWSER_HEADERS,
                timeout=self._timeout,
                follow_redirects=True,
            )
        except httpx.TooManyRedirects as exc:
            raise ScrapeError(url, f"more than {MAX_REDIRECTS} redirects") from exc
        except httpx.HTTPError as exc:
            logger.error("Scraping error for %s: %s", url, type(exc).__name__)
            raise ScrapeError(url, type(exc).__name__) from exc

        if response.status_code >= 500:
            logger.error("Scraping error for %s: HTTP %d", url, response.status_code)
            raise ScrapeError(url, f"HTTP {response.status_code}")

        scraped = extract_article(response.text, url)
        if len(scraped.content) < MIN_CONTENT_CHARS:
            raise ScrapeError(url, "Insufficient content extracted from article")

        logger.info("Scraped %d chars from %s", len(scraped.content), url)
        return scraped
