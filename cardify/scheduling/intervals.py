from typing import Sequence

# days to wait before the next review, indexed by box level - 1
LEITNER_BOX_INTERVALS = (1, 2, 5, 8, 14)

FALLBACK_INTERVAL_DAYS = 1


def interval_for_box(level, intervals: Sequence[int] = LEITNER_BOX_INTERVALS) -> int:
    """Days until the next review for a card sitting in box ``level``.

    Levels outside the table (0, negatives, beyond the last box, or anything
    that is not an int) get a 1-day interval instead of an error so a corrupted
    record never breaks the review flow.
    """
    if isinstance(level, bool) or not isinstance(level, int):
        return FALLBACK_INTERVAL_DAYS
    if 1 <= level <= len(intervals):
        return intervals[level - 1]
    return FALLBACK_INTERVAL_DAYS
