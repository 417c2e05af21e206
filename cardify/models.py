import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cardify.utils.dates import ensure_aware

MIN_BOX_LEVEL = 1
MAX_BOX_LEVEL = 5


class Flashcard(BaseModel):
    """A study card and its Leitner scheduling state.

    Serialized with camelCase keys (``boxLevel``, ``nextReviewDate``...) so
    stored records and API payloads share one layout.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    box_level: int = Field(MIN_BOX_LEVEL, ge=MIN_BOX_LEVEL, le=MAX_BOX_LEVEL)
    next_review_date: datetime
    created_at: datetime
    last_reviewed_at: Optional[datetime] = None
    source_content_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator('next_review_date', 'created_at', 'last_reviewed_at')
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # naive timestamps are treated as UTC so comparisons never mix naive/aware
        return ensure_aware(v) if v is not None else v


def new_flashcard(question: str, answer: str, now: datetime, source_content_id: Optional[str] = None, tags: Optional[List[str]] = None, card_id: Optional[str] = None) -> Flashcard:
    """Build a card in the initial state: box 1, due immediately."""
    data = {
        'question': question,
        'answer': answer,
        'box_level': MIN_BOX_LEVEL,
        'next_review_date': now,
        'created_at': now,
        'source_content_id': source_content_id,
        'tags': list(tags or []),
    }
    if card_id:
        data['id'] = card_id
    return Flashcard(**data)
