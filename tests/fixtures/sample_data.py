from datetime import datetime, timedelta, timezone

from cardify.models import Flashcard

T0 = datetime(2024, 3, 4, 9, 30, tzinfo=timezone.utc)


def make_card(card_id='c1', box_level=1, next_review_date=None, created_at=None, last_reviewed_at=None, **kwargs):
    return Flashcard(
        id=card_id,
        question=kwargs.pop('question', f'What is {card_id}?'),
        answer=kwargs.pop('answer', f'{card_id} is a card'),
        box_level=box_level,
        next_review_date=next_review_date or T0,
        created_at=created_at or T0 - timedelta(days=30),
        last_reviewed_at=last_reviewed_at,
        **kwargs,
    )


def small_deck():
    # one card per relation to T0: overdue, exactly due, not yet due
    return [
        make_card('overdue', box_level=2, next_review_date=T0 - timedelta(days=3), created_at=T0 - timedelta(days=10)),
        make_card('due-now', box_level=1, next_review_date=T0, created_at=T0 - timedelta(days=9)),
        make_card('future', box_level=4, next_review_date=T0 + timedelta(days=2), created_at=T0 - timedelta(days=8)),
    ]


def raw_record(card_id='raw1', box_level=1):
    return (
        '{"id": "%s", "question": "What is photosynthesis?", "answer": "Light to chemical energy", '
        '"boxLevel": %d, "nextReviewDate": "2024-03-04T09:30:00+00:00", "createdAt": "2024-02-01T08:00:00+00:00", '
        '"lastReviewedAt": null, "sourceContentId": "note-1", "tags": ["biology"]}'
    ) % (card_id, box_level)
