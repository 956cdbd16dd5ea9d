from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InternalLinkRule(BaseModel):
    """Phrases that should link to one internal page."""

    model_config = ConfigDict(frozen=True)

    match_phrases: List[str] = Field(min_length=1)
    target_url: str

    @field_validator("match_phrases")
    @classmethod
    def _dedupe_phrases(cls, phrases: List[str]) -> List[str]:
        # Phrases compare case-insensitively; keep the first spelling seen.
        seen: set = set()
        unique: List[str] = []
        for phrase in phrases:
            phrase = phrase.strip()
            if phrase and phrase.lower() not in seen:
                seen.add(phrase.lower())
                unique.append(phrase)
        if not unique:
            raise ValueError("an internal link rule needs at least one non-empty phrase")
        return unique
