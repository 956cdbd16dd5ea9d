"""Extraction endpoint: turns an uploaded draft into a post record, stores nothing."""

import logging
from typing import Union

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from docpress.config import get_settings
from docpress.errors import (
    BoundaryError,
    DocpressError,
    PersistenceError,
    RenderError,
    ValidationError,
)
from docpress.models.post import ExtractionResult
from docpress.models.publish import MarkdownResponse
from docpress.services.normalizer import to_markdown
from docpress.services.pipeline import extract_file

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

_STATUS_BY_ERROR = (
    (RenderError, 400),
    (ValidationError, 422),
    (BoundaryError, 422),
    (PersistenceError, 503),
)


def error_status(exc: DocpressError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def extract_upload(upload: UploadFile) -> ExtractionResult:
    """Run the pipeline on *upload*, propagating failures as HTTP exceptions."""
    name = upload.filename or "<upload>"
    if not name.lower().endswith(".docx"):
        raise HTTPException(status_code=400, detail="Only .docx documents are supported.")

    settings = get_settings()
    try:
        return extract_file(
            upload.file,
            settings.INTERNAL_LINK_RULES,
            site_base_url=settings.SITE_BASE_URL,
            cta_class=settings.CTA_CLASS,
            name=name,
        )
    except DocpressError as exc:
        logger.warning("Extraction failed for %s: %s", name, exc.message)
        raise HTTPException(status_code=error_status(exc), detail=str(exc))


@router.post(
    "/extract",
    response_model=Union[ExtractionResult, MarkdownResponse],
    summary="Extract a post from a .docx draft",
    description=(
        "Reads the uploaded draft, recovers title, byline and SEO metadata, and "
        "returns the cleaned article body.  Nothing is stored.\n\n"
        "Pass `?format=markdown` to get a Markdown file with YAML frontmatter instead."
    ),
)
@limiter.limit(lambda: f"{get_settings().RATE_LIMIT_EXTRACT}/minute")
def extract_document(
    request: Request,
    file: UploadFile = File(..., description="The .docx draft."),
    format: str = Query(default="json", description="Output format: 'json' or 'markdown'."),
) -> Union[ExtractionResult, MarkdownResponse]:
    logger.info("Extract request received", extra={"file_name": file.filename})
    result = extract_upload(file)
    if format == "markdown":
        return MarkdownResponse(slug=result.slug, markdown=to_markdown(result))
    return result
