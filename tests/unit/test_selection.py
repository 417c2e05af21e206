from datetime import timedelta

from cardify.scheduling import cards_in_box, compute_stats, due_cards, is_due
from tests.fixtures.sample_data import T0, make_card, small_deck


def test_due_cards_before_at_and_after_now():
    deck = small_deck()
    due = due_cards(deck, T0)
    assert [c.id for c in due] == ['overdue', 'due-now']


def test_due_cards_preserves_input_order():
    deck = list(reversed(small_deck()))
    assert [c.id for c in due_cards(deck, T0)] == ['due-now', 'overdue']


def test_due_cards_empty_and_all_future():
    assert due_cards([], T0) == []
    future = [make_card('a', next_review_date=T0 + timedelta(seconds=1)), make_card('b', next_review_date=T0 + timedelta(days=3))]
    assert due_cards(future, T0) == []


def test_due_cards_accepts_any_iterable_and_does_not_mutate():
    deck = small_deck()
    snapshot = [c.model_dump() for c in deck]
    due_cards(iter(deck), T0)
    assert [c.model_dump() for c in deck] == snapshot


def test_is_due_boundary():
    card = make_card(next_review_date=T0)
    assert is_due(card, T0)
    assert not is_due(card, T0 - timedelta(microseconds=1))


def test_cards_in_box():
    deck = small_deck() + [make_card('second-box', box_level=2)]
    assert [c.id for c in cards_in_box(deck, 2)] == ['overdue', 'second-box']
    assert cards_in_box(deck, 5) == []


def test_stats_for_empty_deck():
    stats = compute_stats([], T0)
    assert stats.total_cards == 0
    assert stats.by_box == [0, 0, 0, 0, 0]
    assert stats.mastery_percentage == 0


def test_stats_counts():
    deck = [
        make_card('a', box_level=1, next_review_date=T0 - timedelta(days=1)),
        make_card('b', box_level=4, next_review_date=T0 + timedelta(days=4), last_reviewed_at=T0 - timedelta(days=2)),
        make_card('c', box_level=5, next_review_date=T0, last_reviewed_at=T0 - timedelta(days=14)),
        make_card('d', box_level=2, next_review_date=T0 + timedelta(days=1), last_reviewed_at=T0 - timedelta(days=7)),
    ]
    stats = compute_stats(deck, T0)
    assert stats.total_cards == 4
    assert stats.by_box == [1, 1, 0, 1, 1]
    assert stats.total_due == 2
    assert stats.total_reviewed == 3
    # exactly seven days ago still counts as recent
    assert stats.reviewed_last_seven_days == 2
    assert stats.mastery_percentage == 50


def test_mastery_rounds_half_up():
    # 1 of 8 mastered -> 12.5% -> 13
    deck = [make_card(f'c{i}', box_level=1) for i in range(7)] + [make_card('m', box_level=5)]
    assert compute_stats(deck, T0).mastery_percentage == 13


def test_stats_serialize_camel_case():
    payload = compute_stats(small_deck(), T0).model_dump(by_alias=True)
    assert set(payload) == {'totalCards', 'byBox', 'totalDue', 'totalReviewed', 'reviewedLastSevenDays', 'masteryPercentage'}


def test_naive_now_is_compared_as_utc():
    deck = small_deck()
    naive_now = T0.replace(tzinfo=None)
    assert [c.id for c in due_cards(deck, naive_now)] == ['overdue', 'due-now']
    assert is_due(deck[1], naive_now)
    assert compute_stats(deck, naive_now).total_due == 2
