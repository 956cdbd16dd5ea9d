"""Builds :class:`ExtractedMetadata` from classified lines."""

import logging
from typing import Dict, Iterable, List, Optional

from docpress.errors import ValidationError
from docpress.models.document import ClassifiedLine, LineRole, SeoField
from docpress.models.post import ExtractedMetadata
from docpress.services.normalizer import normalize_slug

logger = logging.getLogger(__name__)

# Reported in this order when several fields are missing
_REQUIRED_MESSAGES = {
    "title": (
        "Could not determine the post title. "
        "Check the document for a clear title at the top."
    ),
    "slug": 'The SEO block is missing a "Slug".',
    "meta_title": 'The SEO block is missing a "Meta Title".',
}


def assemble(
    classified_lines: Iterable[ClassifiedLine],
    source_name: Optional[str] = None,
) -> ExtractedMetadata:
    """Collect title, byline and SEO fields into one metadata record.

    A repeated label overrides the earlier value; a repeated meta description
    starts the description over.  Continuation lines are joined to the
    description with single spaces.

    Raises:
        ValidationError: if the title, slug or meta title is missing or empty.
    """
    title: Optional[str] = None
    author: Optional[str] = None
    fields: Dict[SeoField, str] = {}
    description_parts: List[str] = []

    for line in classified_lines:
        if line.role is LineRole.TITLE and title is None:
            title = line.text
        elif line.role is LineRole.BYLINE and author is None:
            author = line.text
        elif line.role is LineRole.SEO_FIELD and line.field is not None:
            value = line.value or ""
            if line.field is SeoField.META_DESCRIPTION:
                description_parts = [value] if value else []
            else:
                fields[line.field] = value
        elif line.role is LineRole.SEO_DESCRIPTION_CONTINUATION and line.value:
            description_parts.append(line.value)

    slug = normalize_slug(fields.get(SeoField.SLUG, ""))
    meta_title = fields.get(SeoField.META_TITLE, "").strip()

    present = {"title": bool(title), "slug": bool(slug), "meta_title": bool(meta_title)}
    missing = [name for name in _REQUIRED_MESSAGES if not present[name]]
    if missing:
        message = " ".join(_REQUIRED_MESSAGES[name] for name in missing)
        logger.debug("Metadata incomplete for %s: missing %s", source_name, missing)
        raise ValidationError(message, missing=missing, file_name=source_name)

    return ExtractedMetadata(
        title=title,
        author=author,
        slug=slug,
        meta_title=meta_title,
        meta_description=" ".join(description_parts) or None,
        keywords=fields.get(SeoField.KEYWORDS) or None,
    )
