"""Locates the article body inside the rendered HTML of a draft.

The raw text and the HTML of a document do not share character offsets, so
the body is delimited here independently of the line classifier:

* **start** - just after the element that holds the post title;
* **end** - just before the element holding the first end-of-content marker
  (disclaimer, boilerplate, SEO-block label) that follows the start.
"""

import html as html_lib
import re
from typing import List, Optional, Pattern, Sequence, Tuple

from docpress.errors import BoundaryError
from docpress.services.classifier import seo_labels

# Markers grouped in priority tiers.  Within a tier the earliest of the
# markers' last occurrences wins, so "Slug: ..." above "Meta Title: ..." still
# cuts the whole SEO block.
END_MARKER_TIERS: Tuple[Tuple[str, ...], ...] = (
    ("Always consult your healthcare provider for personal medical concerns.",),
    ("Okay, I have the full, updated blog post content.",),
    ("[Discover All Medicly Telehealth Services Here!]",),
    seo_labels(),
)

# SEO labels are short enough to turn up in prose ("in this blog post: ..."),
# so they only count when they open the text of an element or line.
_LINE_START_TIERS = frozenset({len(END_MARKER_TIERS) - 1})

# Last resort when no tier matches after the start
FALLBACK_MARKER = "Meta Title:"

_CLOSING_TAG_RE = re.compile(r"\s*</[^<>]+>")
_TRAILING_OPENING_TAG_RE = re.compile(r"<[a-zA-Z][^<>]*>\s*$")

# Text before a marker that still counts as "start of the element": a tag end,
# optional opening tags, optional decoration such as "✅ " or "• "
_ELEMENT_TEXT_START_RE = re.compile(r"(?:^|>)\s*(?:<[a-zA-Z][^<>]*>\s*)*[^\w\s<>]*\s*\Z")


def _literal_forms(text: str) -> List[str]:
    """*text* as written and as the renderer escapes it (``&`` -> ``&amp;``)."""
    forms = [text]
    for escaped in (html_lib.escape(text, quote=False), html_lib.escape(text)):
        if escaped not in forms:
            forms.append(escaped)
    return forms


def _marker_pattern(marker: str) -> Pattern[str]:
    return re.compile(
        "|".join(re.escape(form) for form in _literal_forms(marker)), re.IGNORECASE
    )


_TIER_PATTERNS: Tuple[Tuple[Pattern[str], ...], ...] = tuple(
    tuple(_marker_pattern(marker) for marker in tier) for tier in END_MARKER_TIERS
)
_FALLBACK_PATTERN = _marker_pattern(FALLBACK_MARKER)


def _find_start(html: str, title: str) -> int:
    for form in _literal_forms(title):
        index = html.find(form)
        if index != -1:
            after_title = index + len(form)
            break
    else:
        raise BoundaryError("Could not find the start of the content after the title.")

    closing = html.find("</", after_title)
    if closing == -1:
        return after_title
    tag_end = html.find(">", closing)
    if tag_end == -1:
        return after_title

    position = tag_end + 1
    # "<h1><strong>Title</strong></h1>": consume every closing tag in the run
    while True:
        match = _CLOSING_TAG_RE.match(html, position)
        if not match:
            return position
        position = match.end()


def _starts_element_text(html: str, position: int) -> bool:
    return _ELEMENT_TEXT_START_RE.search(html, 0, position) is not None


def _last_occurrence(
    html: str, pattern: Pattern[str], start: int, at_element_start: bool = False
) -> int:
    last = -1
    for match in pattern.finditer(html, start):
        if match.start() <= start:
            continue
        if at_element_start and not _starts_element_text(html, match.start()):
            continue
        last = match.start()
    return last


def _tag_start_before(html: str, position: int, start: int) -> int:
    """Offset of the tag that opens the text at *position*.

    Adjacent opening tags are included, so ``<p><strong>Meta Title:`` ends the
    body before ``<p>`` rather than between the two tags.
    """
    opening = html.rfind("<", start, position)
    if opening == -1 or html.startswith("</", opening):
        end = position
    else:
        end = opening
    while True:
        match = _TRAILING_OPENING_TAG_RE.search(html, start, end)
        if not match:
            return end
        end = match.start()


def _find_end(html: str, start: int, tiers: Sequence[Sequence[Pattern[str]]]) -> Optional[int]:
    for index, tier in enumerate(tiers):
        at_element_start = index in _LINE_START_TIERS
        positions = [
            p
            for p in (_last_occurrence(html, pattern, start, at_element_start) for pattern in tier)
            if p > start
        ]
        if positions:
            return _tag_start_before(html, min(positions), start)

    fallback = _FALLBACK_PATTERN.search(html, start)
    if fallback and fallback.start() > start:
        return _tag_start_before(html, fallback.start(), start)
    return None


def resolve_body(html: str, title: str) -> str:
    """Return the HTML between the title element and the trailing SEO block.

    Raises:
        BoundaryError: if the title is not in *html*, no end marker follows
            it, or the delimited body is empty.
    """
    if not title:
        raise BoundaryError("Cannot locate the content without a title.")

    start = _find_start(html, title)
    end = _find_end(html, start, _TIER_PATTERNS)
    if end is None:
        raise BoundaryError(
            "Could not determine content boundaries. No known end pattern matched."
        )

    body = html[start:end].strip()
    if not body:
        raise BoundaryError("The content between the title and the SEO block is empty.")
    return body
