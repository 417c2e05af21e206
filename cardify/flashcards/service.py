import threading
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from cardify.models import Flashcard, new_flashcard
from cardify.scheduling import (
    Clock,
    SystemClock,
    FlashcardStats,
    LEITNER_BOX_INTERVALS,
    apply_review_outcome,
    cards_in_box,
    compute_stats,
    due_cards,
)
from cardify.utils import get_logger, log_review_outcome
from .store import FlashcardError, FlashcardStore

LOG = get_logger()


class FlashcardNotFoundError(FlashcardError):
    pass


class FlashcardValidationError(FlashcardError):
    pass


class FlashcardService:
    """Review pipeline host: store <-> scheduler, one review at a time."""

    _instance = None

    def __init__(self, store: Optional[FlashcardStore] = None, clock: Optional[Clock] = None, intervals: Sequence[int] = LEITNER_BOX_INTERVALS):
        self.store = store or FlashcardStore.get_instance()
        self.clock = clock or SystemClock()
        self.intervals = tuple(intervals)
        self._review_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> 'FlashcardService':
        if cls._instance is None:
            cls._instance = FlashcardService()
        return cls._instance

    def list_cards(self, box_level: Optional[int] = None) -> List[Flashcard]:
        cards = self.store.load_all()
        if box_level is not None:
            return cards_in_box(cards, box_level)
        return cards

    def get_card(self, card_id: str) -> Flashcard:
        card = self.store.get(card_id)
        if card is None:
            raise FlashcardNotFoundError(f'flashcard {card_id} not found')
        return card

    def add_card(self, question: str, answer: str, source_content_id: Optional[str] = None, tags: Optional[List[str]] = None) -> Flashcard:
        try:
            card = new_flashcard(_clean(question), _clean(answer), self.clock.now(), source_content_id=source_content_id, tags=tags)
        except ValidationError as e:
            raise FlashcardValidationError(str(e)) from e
        self.store.save(card)
        LOG.info('flashcard_created', extra={'card_id': card.id, 'source_content_id': source_content_id})
        return card

    def update_card(self, card_id: str, question: Optional[str] = None, answer: Optional[str] = None, tags: Optional[List[str]] = None) -> Flashcard:
        """Edit the text of a card. Scheduling fields only change on review."""
        with self._review_lock:
            card = self.get_card(card_id)
            changes = card.model_dump()
            if question is not None:
                changes['question'] = _clean(question)
            if answer is not None:
                changes['answer'] = _clean(answer)
            if tags is not None:
                changes['tags'] = list(tags)
            try:
                updated = Flashcard(**changes)
            except ValidationError as e:
                raise FlashcardValidationError(str(e)) from e
            self.store.save(updated)
        LOG.info('flashcard_updated', extra={'card_id': card_id})
        return updated

    def delete_card(self, card_id: str):
        if not self.store.delete(card_id):
            raise FlashcardNotFoundError(f'flashcard {card_id} not found')

    def review(self, card_id: str, was_correct: bool) -> Tuple[Flashcard, Flashcard]:
        """Apply one review and return the card as it was before and after it."""
        with self._review_lock:
            card = self.get_card(card_id)
            updated = apply_review_outcome(card, was_correct, self.clock.now(), self.intervals)
            self.store.save(updated)
        log_review_outcome(card_id, was_correct, card.box_level, updated.box_level, updated.next_review_date.isoformat())
        return card, updated

    def review_card(self, card_id: str, was_correct: bool) -> Flashcard:
        return self.review(card_id, was_correct)[1]

    def due_cards(self) -> List[Flashcard]:
        return due_cards(self.store.load_all(), self.clock.now())

    def cards_in_box(self, box_level: int) -> List[Flashcard]:
        return self.list_cards(box_level=box_level)

    def stats(self) -> FlashcardStats:
        return compute_stats(self.store.load_all(), self.clock.now())


def _clean(text: Optional[str]) -> str:
    return (text or '').strip()
