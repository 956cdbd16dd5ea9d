from typing import List, Literal, Optional

from pydantic import BaseModel

PublishStatus = Literal["created", "duplicate", "failed"]


class PublishOutcome(BaseModel):
    file_name: str
    status: PublishStatus
    slug: Optional[str] = None
    post_id: Optional[int] = None
    error: Optional[str] = None


class BatchSummary(BaseModel):
    outcomes: List[PublishOutcome] = []

    @property
    def created(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "created")

    @property
    def duplicates(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "duplicate")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")


class PublishResponse(BaseModel):
    status: Literal["created", "duplicate"]
    slug: str
    id: Optional[int] = None
    """Identifier of the new row; absent when the slug was already published."""


class MarkdownResponse(BaseModel):
    slug: str
    markdown: str
