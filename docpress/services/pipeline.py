"""Draft-to-post extraction: the pure function at the centre of docpress."""

import logging
from typing import Optional, Sequence

from docpress.config import DEFAULT_CTA_CLASS, DEFAULT_SITE_BASE_URL
from docpress.errors import BoundaryError, DocpressError
from docpress.models.document import RawDocument
from docpress.models.link_rule import InternalLinkRule
from docpress.models.post import ExtractionResult
from docpress.services.assembler import assemble
from docpress.services.boundary import resolve_body
from docpress.services.classifier import classify
from docpress.services.postprocess import post_process
from docpress.services.renderer import DocumentSource, render_document
from docpress.services.sanitizer import sanitize_body

logger = logging.getLogger(__name__)


def extract(
    document: RawDocument,
    rules: Sequence[InternalLinkRule] = (),
    site_base_url: str = DEFAULT_SITE_BASE_URL,
    cta_class: str = DEFAULT_CTA_CLASS,
) -> ExtractionResult:
    """Turn one rendered draft into a publishable record.

    Metadata comes from the text lines, the body from the HTML; the two are
    delimited independently and merged at the end.

    Raises:
        ValidationError: a required metadata field is missing.
        BoundaryError: the body could not be delimited in the HTML.
    """
    metadata = assemble(classify(document.lines), source_name=document.name)

    try:
        body = sanitize_body(resolve_body(document.html, metadata.title))
        if not body:
            raise BoundaryError("The content between the title and the SEO block has no text.")
    except DocpressError as exc:
        exc.file_name = exc.file_name or document.name
        raise

    content = post_process(body, rules, site_base_url, cta_class)
    logger.debug("Extracted %s from %s", metadata.slug, document.name)
    return ExtractionResult(**metadata.model_dump(), content=content)


def extract_file(
    source: DocumentSource,
    rules: Sequence[InternalLinkRule] = (),
    site_base_url: str = DEFAULT_SITE_BASE_URL,
    cta_class: str = DEFAULT_CTA_CLASS,
    name: Optional[str] = None,
) -> ExtractionResult:
    """Render *source* and extract it; see :func:`extract`."""
    return extract(render_document(source, name=name), rules, site_base_url, cta_class)
