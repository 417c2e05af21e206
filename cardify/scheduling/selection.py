from datetime import datetime, timedelta
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cardify.models import Flashcard, MAX_BOX_LEVEL, MIN_BOX_LEVEL
from cardify.utils.dates import ensure_aware

RECENT_REVIEW_WINDOW_DAYS = 7
# boxes counted as mastered in the stats
MASTERED_BOX_LEVELS = (4, 5)


class FlashcardStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    total_cards: int = 0
    by_box: List[int] = Field(default_factory=lambda: [0] * MAX_BOX_LEVEL)
    total_due: int = 0
    total_reviewed: int = 0
    reviewed_last_seven_days: int = 0
    mastery_percentage: int = 0


def is_due(card: Flashcard, now: datetime) -> bool:
    return card.next_review_date <= ensure_aware(now)


def due_cards(cards: Iterable[Flashcard], now: datetime) -> List[Flashcard]:
    """Cards whose next review date has been reached, in input order."""
    now = ensure_aware(now)
    return [c for c in cards if is_due(c, now)]


def cards_in_box(cards: Iterable[Flashcard], box_level: int) -> List[Flashcard]:
    return [c for c in cards if c.box_level == box_level]


def compute_stats(cards: Iterable[Flashcard], now: datetime) -> FlashcardStats:
    cards = list(cards)
    now = ensure_aware(now)
    by_box = [0] * MAX_BOX_LEVEL
    total_due = 0
    total_reviewed = 0
    recent = 0
    window_start = now - timedelta(days=RECENT_REVIEW_WINDOW_DAYS)

    for card in cards:
        if MIN_BOX_LEVEL <= card.box_level <= MAX_BOX_LEVEL:
            by_box[card.box_level - 1] += 1
        if is_due(card, now):
            total_due += 1
        if card.last_reviewed_at is not None:
            total_reviewed += 1
            if card.last_reviewed_at >= window_start:
                recent += 1

    mastery = 0
    if cards:
        mastered = sum(by_box[level - 1] for level in MASTERED_BOX_LEVELS)
        # round half up, not to even
        mastery = int(mastered * 100 / len(cards) + 0.5)

    return FlashcardStats(
        total_cards=len(cards),
        by_box=by_box,
        total_due=total_due,
        total_reviewed=total_reviewed,
        reviewed_last_seven_days=recent,
        mastery_percentage=mastery,
    )
