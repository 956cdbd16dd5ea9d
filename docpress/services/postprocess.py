"""Final rewrites of the article body: internal links and call-to-action links.

Both rewrites are idempotent.  Phrase linking only touches text that is not
already inside an ``<a>`` element, and call-to-action tagging only matches
anchors that do not carry a class yet.

Precedence: phrases are linked first, call-to-action tagging runs last, so a
phrase link that opens a bold paragraph is tagged as a call-to-action too.
"""

import html as html_lib
import re
from typing import Pattern, Sequence

from docpress.config import DEFAULT_CTA_CLASS, DEFAULT_SITE_BASE_URL
from docpress.models.link_rule import InternalLinkRule

# Splits markup into alternating text / tag chunks (tags at odd indices)
_TAG_SPLIT_RE = re.compile(r"(<[^<>]*>)")
_ANCHOR_OPEN_RE = re.compile(r"<a(?:\s[^<>]*)?>", re.IGNORECASE)
_ANCHOR_CLOSE_RE = re.compile(r"</a\s*>", re.IGNORECASE)


def _phrase_pattern(phrase: str) -> Pattern[str]:
    # Whole words only: "certificates" must not fire inside "recertificates"
    return re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)", re.IGNORECASE)


def _link_phrase(body_html: str, pattern: Pattern[str], target_url: str) -> str:
    href = html_lib.escape(target_url, quote=True)
    chunks = _TAG_SPLIT_RE.split(body_html)
    depth = 0
    for index, chunk in enumerate(chunks):
        if index % 2:
            if _ANCHOR_OPEN_RE.fullmatch(chunk):
                depth += 1
            elif _ANCHOR_CLOSE_RE.fullmatch(chunk):
                depth = max(0, depth - 1)
        elif chunk and depth == 0:
            chunks[index] = pattern.sub(
                lambda match: f'<a href="{href}">{match.group(0)}</a>', chunk
            )
    return "".join(chunks)


def apply_internal_links(body_html: str, rules: Sequence[InternalLinkRule]) -> str:
    """Wrap every unlinked occurrence of each rule's phrases, rules in order.

    Within one rule the longest phrase goes first, so "online doctor
    consultation" wins over "doctor consultation".
    """
    for rule in rules:
        for phrase in sorted(rule.match_phrases, key=len, reverse=True):
            body_html = _link_phrase(body_html, _phrase_pattern(phrase), rule.target_url)
    return body_html


def tag_call_to_actions(
    body_html: str,
    site_base_url: str = DEFAULT_SITE_BASE_URL,
    cta_class: str = DEFAULT_CTA_CLASS,
) -> str:
    """Add *cta_class* to site links that open a bold or italic paragraph.

    Matches ``<p><strong><a href="{site}...">`` (``<em>`` and the two nested
    together are accepted as well).
    """
    base = re.escape(html_lib.escape(site_base_url.rstrip("/"), quote=True))
    pattern = re.compile(
        r'(<p>(?:<strong>|<em>){1,2}<a href="' + base + r'(?:[/?#][^"]*)?")>'
    )
    return pattern.sub(lambda match: f'{match.group(1)} class="{cta_class}">', body_html)


def post_process(
    body_html: str,
    rules: Sequence[InternalLinkRule],
    site_base_url: str = DEFAULT_SITE_BASE_URL,
    cta_class: str = DEFAULT_CTA_CLASS,
) -> str:
    """Apply internal links, then call-to-action tagging, to *body_html*."""
    linked = apply_internal_links(body_html, rules)
    return tag_call_to_actions(linked, site_base_url, cta_class)
