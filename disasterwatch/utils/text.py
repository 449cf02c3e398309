import re
from bs4 import BeautifulSoup

ELLIPSIS = "..."
LAST_UPDATED_RE = re.compile(r"Last Updated [^\n]*")
_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")


def truncate(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    """Cut text to limit characters, appending marker only when something was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def collapse_ws(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def strip_tags(html: str) -> str:
    return _TAG_RE.sub("", html)


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    for el in soup(["script", "style", "noscript"]):
        el.decompose()
    return collapse_ws(soup.get_text(" "))


def find_last_updated(text: str) -> str:
    m = LAST_UPDATED_RE.search(text)
    return m.group(0).strip() if m else ""
