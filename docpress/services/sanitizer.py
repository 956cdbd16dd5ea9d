import re

from bs4 import BeautifulSoup, Comment, Tag

# Tags whose entire subtree should be removed (non-content / binary / scripting)
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "applet",
    "link",
    "meta",
    "template",
}

# HTML attributes that contain CSS or JavaScript and should be stripped
# from every element that survives the tree pruning step.
_JUNK_ATTRS = re.compile(r"^(style|on\w+)$", re.IGNORECASE)

# Block elements dropped when they hold no text and no image, e.g. the
# "<p><strong></strong></p>" left behind by an empty bold paragraph.
_PRUNE_WHEN_EMPTY = {"p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "ul", "ol", "strong", "em"}

# Links pointing at scripts never survive; the text is kept.
_UNSAFE_HREF_RE = re.compile(r"^\s*(javascript|vbscript|data):", re.IGNORECASE)


def _is_empty(tag: Tag) -> bool:
    return not tag.get_text(strip=True) and tag.find(["img", "br", "table"]) is None


def sanitize_body(html: str) -> str:
    """Clean an article-body fragment and return it as well-formed HTML.

    The fragment is cut out of a larger document by string offsets, so it may
    open or close tags it does not own; parsing and re-serialising it balances
    the markup.
    """
    soup = BeautifulSoup(html, "lxml")
    root = soup.body
    if root is None:
        return ""

    for tag in root.find_all(_REMOVE_TAGS):
        tag.decompose()

    for comment in root.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in root.find_all(True):
        junk = [attr for attr in tag.attrs if _JUNK_ATTRS.match(attr)]
        for attr in junk:
            del tag[attr]
        if tag.name == "a" and _UNSAFE_HREF_RE.match(str(tag.get("href", ""))):
            tag.unwrap()

    # Innermost first so a <ul> whose only <li> was empty goes too
    for tag in reversed(root.find_all(_PRUNE_WHEN_EMPTY)):
        if _is_empty(tag):
            tag.decompose()

    return root.decode_contents().strip()
