"""
Flashcard persistence and the review service built on the Leitner scheduler.
"""

from .store import (
    FlashcardStore,
    FlashcardError,
    FlashcardStoreError,
)
from .service import (
    FlashcardService,
    FlashcardNotFoundError,
    FlashcardValidationError,
)

__all__ = [
    'FlashcardStore',
    'FlashcardError',
    'FlashcardStoreError',
    'FlashcardService',
    'FlashcardNotFoundError',
    'FlashcardValidationError',
]
