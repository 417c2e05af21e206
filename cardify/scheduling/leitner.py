"""
Leitner box scheduler.

Five boxes; a correct answer promotes a card one box (capped at the last
box), any wrong answer sends it back to box 1. The box decides how many days
pass before the card is due again. Every function here is pure: the caller
passes ``now`` and persists whatever comes back.
"""
from datetime import datetime
from typing import Sequence

from cardify.models import Flashcard, MAX_BOX_LEVEL, MIN_BOX_LEVEL
from cardify.utils.dates import add_days, ensure_aware
from .intervals import LEITNER_BOX_INTERVALS, interval_for_box


def next_review_date(box_level: int, now: datetime, intervals: Sequence[int] = LEITNER_BOX_INTERVALS) -> datetime:
    return add_days(ensure_aware(now), interval_for_box(box_level, intervals))


def next_box_level(box_level: int, was_correct: bool) -> int:
    if was_correct:
        # a level that is not even an int promotes as if it were box 0
        current = box_level if isinstance(box_level, int) and not isinstance(box_level, bool) else MIN_BOX_LEVEL - 1
        return min(current + 1, MAX_BOX_LEVEL)
    return MIN_BOX_LEVEL


def apply_review_outcome(card: Flashcard, was_correct: bool, now: datetime, intervals: Sequence[int] = LEITNER_BOX_INTERVALS) -> Flashcard:
    """Return ``card`` after one review answered correctly or not.

    Box level, next review date and last review time are replaced together
    in a fresh copy; ``card`` itself is left untouched.
    """
    now = ensure_aware(now)
    new_level = next_box_level(card.box_level, was_correct)
    return card.model_copy(update={
        'box_level': new_level,
        'next_review_date': next_review_date(new_level, now, intervals),
        'last_reviewed_at': now,
    })
