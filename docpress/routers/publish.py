"""Publishing endpoint: extracts an uploaded draft and stores it."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from docpress.config import get_settings
from docpress.errors import PersistenceError
from docpress.models.post import PostRecord
from docpress.models.publish import PublishResponse
from docpress.routers.extract import error_status, extract_upload, limiter
from docpress.services.publisher import PostStore
from docpress.services.repository import PostRepository

logger = logging.getLogger(__name__)

router = APIRouter()


def get_repository() -> PostStore:
    return PostRepository.from_settings(get_settings())


@router.post(
    "/publish",
    response_model=PublishResponse,
    summary="Extract a .docx draft and store it as a post",
)
@limiter.limit(lambda: f"{get_settings().RATE_LIMIT_PUBLISH}/minute")
def publish_document(
    request: Request,
    file: UploadFile = File(..., description="The .docx draft."),
    repository: PostStore = Depends(get_repository),
) -> PublishResponse:
    """Store the extracted post unless its slug is already published.

    A duplicate slug is not an error: the response has ``status="duplicate"``
    and no ``id``, and the caller should not resubmit.
    """
    result = extract_upload(file)
    try:
        inserted = repository.insert_post(PostRecord.from_result(result))
    except PersistenceError as exc:
        logger.error("Could not store %s: %s", result.slug, exc.message)
        raise HTTPException(status_code=error_status(exc), detail=exc.message)

    if inserted is None:
        logger.info("Slug %s already published", result.slug)
        return PublishResponse(status="duplicate", slug=result.slug)
    return PublishResponse(status="created", slug=inserted.slug, id=inserted.id)
