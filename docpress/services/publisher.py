"""Batch publishing of every draft waiting in the inbound directory.

Each file is handled on its own: a failure is reported and the run moves on.
Published files are moved to the sent directory; duplicates and failures stay
where they are so an operator can look at them.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from docpress.config import DEFAULT_CTA_CLASS, DEFAULT_SITE_BASE_URL
from docpress.errors import DocpressError
from docpress.models.link_rule import InternalLinkRule
from docpress.models.post import InsertedPost, PostRecord
from docpress.models.publish import BatchSummary, PublishOutcome
from docpress.services.failures import report_failure
from docpress.services.pipeline import extract_file

logger = logging.getLogger(__name__)

DOCX_SUFFIX = ".docx"


class PostStore(Protocol):
    def insert_post(self, record: PostRecord) -> Optional[InsertedPost]: ...


def find_drafts(docs_dir: Path) -> List[Path]:
    """Return the .docx files in *docs_dir*, skipping Word lock files (``~$x.docx``).

    Raises:
        FileNotFoundError: if *docs_dir* does not exist.
    """
    if not docs_dir.is_dir():
        raise FileNotFoundError(f'The directory "{docs_dir}" does not exist.')
    return sorted(
        path
        for path in docs_dir.iterdir()
        if path.is_file()
        and path.suffix.lower() == DOCX_SUFFIX
        and not path.name.startswith("~")
    )


def publish_file(
    path: Path,
    sent_dir: Path,
    store: PostStore,
    rules: Sequence[InternalLinkRule] = (),
    site_base_url: str = DEFAULT_SITE_BASE_URL,
    cta_class: str = DEFAULT_CTA_CLASS,
) -> PublishOutcome:
    """Extract, store and file away one draft."""
    logger.info("Processing file: %s", path.name)
    try:
        result = extract_file(path, rules, site_base_url, cta_class)
        inserted = store.insert_post(PostRecord.from_result(result))
    except DocpressError as exc:
        report_failure(path.name, exc.message)
        return PublishOutcome(file_name=path.name, status="failed", error=exc.message)
    except Exception as exc:
        logger.exception("Unexpected error while processing %s", path.name)
        message = f"An unexpected error occurred: {exc}"
        report_failure(path.name, message)
        return PublishOutcome(file_name=path.name, status="failed", error=message)

    if inserted is None:
        logger.warning(
            'Skipped: a post with slug "%s" already exists. File not moved.', result.slug
        )
        return PublishOutcome(file_name=path.name, status="duplicate", slug=result.slug)

    logger.info('Success: post "%s" saved with ID %s.', inserted.slug, inserted.id)
    try:
        shutil.move(str(path), str(sent_dir / path.name))
    except OSError as exc:
        # The row exists; re-running the batch reports the file as a duplicate
        message = f"Post saved with ID {inserted.id} but the file could not be moved: {exc}"
        report_failure(path.name, message)
        return PublishOutcome(
            file_name=path.name,
            status="failed",
            slug=inserted.slug,
            post_id=inserted.id,
            error=message,
        )
    logger.info('Moved "%s" to %s.', path.name, sent_dir)
    return PublishOutcome(
        file_name=path.name, status="created", slug=inserted.slug, post_id=inserted.id
    )


def publish_directory(
    docs_dir: Path,
    sent_dir: Path,
    store: PostStore,
    rules: Sequence[InternalLinkRule] = (),
    site_base_url: str = DEFAULT_SITE_BASE_URL,
    cta_class: str = DEFAULT_CTA_CLASS,
) -> BatchSummary:
    """Publish every draft in *docs_dir*.

    Raises:
        FileNotFoundError: if *docs_dir* does not exist.
        OSError: if *sent_dir* cannot be created.
    """
    sent_dir.mkdir(parents=True, exist_ok=True)
    drafts = find_drafts(docs_dir)
    summary = BatchSummary()

    if not drafts:
        logger.info("No .docx files found in %s.", docs_dir)
        return summary

    logger.info("Found %d .docx file(s) to process.", len(drafts))
    for path in drafts:
        summary.outcomes.append(
            publish_file(path, sent_dir, store, rules, site_base_url, cta_class)
        )

    logger.info(
        "Finished: %d created, %d duplicate, %d failed.",
        summary.created,
        summary.duplicates,
        summary.failed,
    )
    return summary
