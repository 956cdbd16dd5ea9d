from typing import Optional

from pydantic import BaseModel, ConfigDict


class ExtractedMetadata(BaseModel):
    """Post metadata recovered from the raw text of a draft."""

    model_config = ConfigDict(frozen=True)

    title: str
    slug: str
    meta_title: str
    author: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[str] = None


class ExtractionResult(ExtractedMetadata):
    content: str  # post-processed body HTML


class PostRecord(BaseModel):
    """One row of the ``blogs`` table."""

    title: str
    slug: str
    content: str
    meta_title: str
    category: Optional[str] = None
    excerpt: Optional[str] = None
    image: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[str] = None
    author: Optional[str] = None
    image_title: Optional[str] = None

    @classmethod
    def from_result(cls, result: ExtractionResult, **defaults) -> "PostRecord":
        """Build a record from *result*; *defaults* fill the fields drafts never carry."""
        return cls(**result.model_dump(), **defaults)


class InsertedPost(BaseModel):
    id: int
    slug: str
