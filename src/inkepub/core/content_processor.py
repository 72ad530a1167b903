"""Sanitize chapter HTML and compute reading statistics."""

import math
import re
import warnings

import bleach
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

# Chapter documents are XHTML; parsing them as HTML is intended
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

CJK_RE = re.compile(r"[\u4e00-\u9fa5]")
LATIN_RE = re.compile(r"[a-zA-Z]")

# Dropped with their content; any other disallowed tag keeps its text
REMOVED_TAGS = [
    "script", "style", "meta", "link", "base", "noscript",
    "iframe", "frame", "frameset", "object", "embed", "applet",
]

ALLOWED_TAGS = frozenset([
    "a", "abbr", "article", "aside", "b", "blockquote", "br", "caption", "cite",
    "code", "col", "colgroup", "dd", "div", "dl", "dt", "em", "figcaption",
    "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "i",
    "img", "li", "mark", "nav", "ol", "p", "pre", "q", "section", "small", "span",
    "strike", "strong", "sub", "sup", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr", "u", "ul",
])

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title"],
    "blockquote": ["cite"],
    "col": ["span"],
    "colgroup": ["span"],
    "img": ["src", "alt", "title"],
    "ol": ["start", "type"],
    "q": ["cite"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan", "scope"],
    "ul": ["type"],
    "*": ["id", "class", "lang", "dir", "epub:type", "role"],
}

ALLOWED_PROTOCOLS = frozenset(["http", "https", "mailto"])

IMAGE_STYLE = "max-width:100%;height:auto"
TITLE_TAGS = ["h1", "h2", "h3", "title"]


class ContentProcessor:
    """Clean chapter HTML for format-stable rendering."""

    def sanitize(self, html_content: bytes | str) -> str:
        """Return the body of ``html_content`` reduced to safe markup.

        Only allowlisted tags and attributes survive; scripts, embedded
        objects, event handlers, inline styles and links with other URL
        schemes (``javascript:``, ``data:``) are removed. Images are forced
        to scale with the viewport. Sanitizing already-sanitized output
        returns it unchanged.
        """
        soup = BeautifulSoup(html_content, "lxml")
        for tag in soup(REMOVED_TAGS):
            tag.decompose()
        if soup.body is None:
            return ""

        cleaned = bleach.clean(
            "".join(str(node) for node in soup.body.contents),
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            protocols=ALLOWED_PROTOCOLS,
            strip=True,
            strip_comments=True,
        )

        soup = BeautifulSoup(cleaned, "lxml")
        if soup.body is None:
            return ""
        for img in soup.find_all("img"):
            img["style"] = IMAGE_STYLE
        return "".join(str(node) for node in soup.body.contents).strip()

    def extract_title(self, html_content: bytes | str) -> str | None:
        """First non-blank h1, h2, h3 or <title> text."""
        soup = BeautifulSoup(html_content, "lxml")
        for name in TITLE_TAGS:
            for element in soup.find_all(name):
                text = " ".join(element.get_text(" ", strip=True).split())
                if text:
                    return text
        return None

    def count_words(self, html_content: bytes | str) -> int:
        """Count words for both Chinese and Latin-script text.

        Each CJK ideograph counts as one word, plus every whitespace-separated
        token containing a Latin letter.
        """
        if not html_content:
            return 0
        text = BeautifulSoup(html_content, "lxml").get_text(" ")
        chinese_chars = len(CJK_RE.findall(text))
        latin_words = sum(1 for token in text.split() if LATIN_RE.search(token))
        return chinese_chars + latin_words

    def reading_time(self, word_count: int, words_per_minute: int) -> int:
        """Estimated reading time in whole minutes."""
        if word_count <= 0 or words_per_minute <= 0:
            return 0
        return math.ceil(word_count / words_per_minute)

    def get_stats(self, html_content: bytes | str, words_per_minute: int) -> dict[str, int]:
        """Calculate content statistics."""
        word_count = self.count_words(html_content)
        return {
            "word_count": word_count,
            "reading_time": self.reading_time(word_count, words_per_minute),
        }
