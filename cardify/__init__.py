"""Cardify study service: Leitner scheduling for captured course-note flashcards."""

from .models import Flashcard, new_flashcard, MIN_BOX_LEVEL, MAX_BOX_LEVEL

__all__ = ['Flashcard', 'new_flashcard', 'MIN_BOX_LEVEL', 'MAX_BOX_LEVEL']

__version__ = '1.0.0'
