"""Line classification for the raw text of a draft.

Drafts have no fixed schema: a title, an optional byline, the article and an
SEO block arrive in whatever order and spelling the author chose.  This module
makes one left-to-right pass over the text lines and tags each non-blank line
with a :class:`~docpress.models.document.LineRole`.

Regions
-------
``top``
    Everything before the first SEO-block marker.  The first ``By Dr.`` line is
    the byline, the first long line that is neither a byline nor a
    "Medically reviewed" note is the title, and every later line is content.
    Lines seen before the title (draft preambles, notes to the editor) are
    ignored.

``seo``
    From the first SEO-block marker to the end.  Lines are matched against the
    field labels in a fixed priority order; a meta description swallows the
    unlabelled lines that follow it until the next label.
"""

import re
from typing import List, Optional, Sequence, Tuple

from docpress.models.document import ClassifiedLine, LineRole, SeoField

# A title must be longer than this (after trimming)
_TITLE_MIN_LENGTH = 20

_BYLINE_RE = re.compile(r"^By Dr\.", re.IGNORECASE)
_REVIEWED_RE = re.compile(r"medically reviewed", re.IGNORECASE)

# Emoji, bullets and other glyphs authors put in front of a label,
# e.g. "✅ SEO & Meta Data for: ..." or "• Slug: ..."
_DECORATION_RE = re.compile(r"^[^\w\s]+\s*")

# Lines that open the SEO block (case-insensitive prefix match)
SEO_BLOCK_MARKERS: Tuple[str, ...] = (
    "SEO & Meta Details",
    "SEO & Meta Data",
    "Blog Post:",
    "1. Meta Data",
    "Meta Data",
    "Meta Title:",
    "Slug:",
    "URL Slug:",
)

# Accepted spellings per field; every spelling maps to the same field
FIELD_LABELS: Tuple[Tuple[SeoField, Tuple[str, ...]], ...] = (
    (SeoField.SLUG, ("Slug", "Slugx", "URL Slug", "Suggested URL Slug")),
    (SeoField.META_TITLE, ("Meta Title", "Optimized Meta Title")),
    (SeoField.META_DESCRIPTION, ("Meta Description", "Compelling Meta Description")),
    (SeoField.KEYWORDS, ("Primary Keywords",)),
)

_FIELD_PATTERNS: Tuple[Tuple[SeoField, "re.Pattern[str]"], ...] = tuple(
    (
        field,
        re.compile(
            r"^(?:" + "|".join(re.escape(label) for label in labels) + r")\s*:",
            re.IGNORECASE,
        ),
    )
    for field, labels in FIELD_LABELS
)


def seo_labels() -> Tuple[str, ...]:
    """Every literal that can only appear once the SEO block has started."""
    labels = list(SEO_BLOCK_MARKERS)
    for _field, spellings in FIELD_LABELS:
        for spelling in spellings:
            label = f"{spelling}:"
            if label not in labels:
                labels.append(label)
    return tuple(labels)


def _strip_decoration(text: str) -> str:
    return _DECORATION_RE.sub("", text)


def match_field(text: str) -> Tuple[Optional[SeoField], str]:
    """Return ``(field, value)`` for a labelled SEO line, ``(None, "")`` otherwise."""
    candidate = _strip_decoration(text.strip())
    for field, pattern in _FIELD_PATTERNS:
        match = pattern.match(candidate)
        if match:
            return field, candidate[match.end():].strip()
    return None, ""


def is_seo_block_start(text: str) -> bool:
    candidate = _strip_decoration(text.strip()).lower()
    if any(candidate.startswith(marker.lower()) for marker in SEO_BLOCK_MARKERS):
        return True
    field, _value = match_field(candidate)
    return field is not None


def find_seo_block_start(lines: Sequence[str]) -> Optional[int]:
    """Index of the first line that opens the SEO block, or *None*."""
    for index, line in enumerate(lines):
        if line.strip() and is_seo_block_start(line):
            return index
    return None


def _is_title_candidate(text: str) -> bool:
    return (
        len(text) > _TITLE_MIN_LENGTH
        and not _BYLINE_RE.match(text)
        and not _REVIEWED_RE.search(text)
    )


def classify(lines: Sequence[str]) -> List[ClassifiedLine]:
    """Tag every non-blank line of *lines* with its role, preserving order."""
    seo_start = find_seo_block_start(lines)

    classified: List[ClassifiedLine] = []
    byline_found = False
    title_found = False
    describing = False
    pending_field: Optional[SeoField] = None

    for index, raw_line in enumerate(lines):
        text = raw_line.strip()
        if not text:
            continue

        # ── Top region: title, byline, article ───────────────────────────────
        if seo_start is None or index < seo_start:
            if not byline_found and _BYLINE_RE.match(text):
                byline_found = True
                role = LineRole.BYLINE
            elif not title_found and _is_title_candidate(text):
                title_found = True
                role = LineRole.TITLE
            elif title_found:
                role = LineRole.CONTENT
            else:
                role = LineRole.IGNORED
            classified.append(ClassifiedLine(text=text, role=role))
            continue

        # ── SEO region ───────────────────────────────────────────────────────
        field, value = match_field(text)
        if field is not None:
            describing = field is SeoField.META_DESCRIPTION
            # "URL Slug:" alone on a line takes its value from the next line
            pending_field = field if not value and not describing else None
            classified.append(
                ClassifiedLine(text=text, role=LineRole.SEO_FIELD, field=field, value=value)
            )
        elif describing:
            classified.append(
                ClassifiedLine(text=text, role=LineRole.SEO_DESCRIPTION_CONTINUATION, value=text)
            )
        elif pending_field is not None:
            classified.append(
                ClassifiedLine(text=text, role=LineRole.SEO_FIELD, field=pending_field, value=text)
            )
            pending_field = None
        else:
            classified.append(ClassifiedLine(text=text, role=LineRole.IGNORED))

    return classified
