"""
Leitner spaced-repetition scheduling: interval table, review transitions,
due-queue selection and study statistics.
"""

from .clock import Clock, SystemClock, FixedClock
from .intervals import LEITNER_BOX_INTERVALS, FALLBACK_INTERVAL_DAYS, interval_for_box
from .leitner import next_review_date, next_box_level, apply_review_outcome
from .selection import FlashcardStats, is_due, due_cards, cards_in_box, compute_stats

__all__ = [
    'Clock',
    'SystemClock',
    'FixedClock',
    'LEITNER_BOX_INTERVALS',
    'FALLBACK_INTERVAL_DAYS',
    'interval_for_box',
    'next_review_date',
    'next_box_level',
    'apply_review_outcome',
    'FlashcardStats',
    'is_due',
    'due_cards',
    'cards_in_box',
    'compute_stats',
]
