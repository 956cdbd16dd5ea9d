from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class LineRole(str, Enum):
    TITLE = "title"
    BYLINE = "byline"
    SEO_FIELD = "seo_field"
    SEO_DESCRIPTION_CONTINUATION = "seo_description_continuation"
    CONTENT = "content"
    IGNORED = "ignored"


class SeoField(str, Enum):
    SLUG = "slug"
    META_TITLE = "meta_title"
    META_DESCRIPTION = "meta_description"
    KEYWORDS = "keywords"


class RawDocument(BaseModel):
    """Both renderings of one draft: its text lines and its HTML."""

    model_config = ConfigDict(frozen=True)

    name: str = ""  # originating file name, used in error messages
    lines: Tuple[str, ...]
    html: str


class ClassifiedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    role: LineRole
    field: Optional[SeoField] = None  # set only for SEO_FIELD lines
    value: Optional[str] = None
