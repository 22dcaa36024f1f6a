import re

from bs4 import BeautifulSoup, Comment


IMAGE_TAG = re.compile(r"<img[^>]+>", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")
BLOCK_TAGS = [
    "address", "blockquote", "br", "dd", "div", "dl", "dt", "h1", "h2", "h3", "h4",
    "h5", "h6", "hr", "li", "ol", "p", "pre", "table", "td", "th", "tr", "ul",
]
SHORTEN_LIMIT = 97


def html_to_text(html: str) -> str:
    """Plain text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    # Inline tags join their text directly; block tags separate words.
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before(" ")
        tag.insert_after(" ")
    return WHITESPACE.sub(" ", soup.get_text()).strip()


def strip_label(modtext: str) -> str:
    """Remove every tag except ``<img>``, keeping the text content."""
    soup = BeautifulSoup(modtext, "html.parser")
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for tag in soup.find_all(True):
        if tag.name != "img":
            tag.unwrap()
    return str(soup)


def replace_image_with_string(modtext: str, replacement: str) -> str:
    if "<img" not in modtext.lower():
        return modtext
    return IMAGE_TAG.sub(lambda _: replacement, modtext)


def shorten(text: str, limit: int = SHORTEN_LIMIT) -> str:
    # Counted in code points, so multi-byte scripts are not cut short.
    if len(text) >= limit:
        return text[:limit].rstrip() + "..."
    return text
