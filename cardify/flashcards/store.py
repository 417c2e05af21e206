import os
import time
import threading
from typing import Dict, Iterable, List, Optional

import redis
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from cardify.models import Flashcard
from cardify.utils import get_logger, log_store_operation

LOG = get_logger()

FLASHCARD_STORE_BACKEND = os.getenv('FLASHCARD_STORE_BACKEND', 'redis')
FLASHCARD_STORE_KEY = os.getenv('FLASHCARD_STORE_KEY', 'flashcards')
REDIS_URL = os.getenv('REDIS_URL', None)
STORE_RETRY_ATTEMPTS = int(os.getenv('STORE_RETRY_ATTEMPTS', '3'))
STORE_RETRY_MULTIPLIER = float(os.getenv('STORE_RETRY_MULTIPLIER', '0.5'))
STORE_RETRY_MAX_WAIT = float(os.getenv('STORE_RETRY_MAX_WAIT', '5'))


class FlashcardError(Exception):
    pass


class FlashcardStoreError(FlashcardError):
    pass


class FlashcardStore:
    """Persists flashcards as JSON records, one hash field per card id.

    Backed by Redis when reachable; otherwise keeps the same JSON records in
    process memory.
    """

    _instance = None

    def __init__(self, client=None, backend: Optional[str] = None, key: str = None):
        self.key = key or FLASHCARD_STORE_KEY
        self._client = None
        self._use_redis = False
        self._in_memory: Dict[str, str] = {}
        self._mem_lock = threading.Lock()
        backend = (backend or FLASHCARD_STORE_BACKEND).lower()

        if client is not None:
            self._client = client
            self._use_redis = True
        elif backend == 'redis':
            try:
                self._client = self._connect()
                self._client.ping()
                self._use_redis = True
                LOG.info('FlashcardStore using Redis', extra={'key': self.key})
            except redis.RedisError as e:
                LOG.warning('Redis not available for FlashcardStore, using in-memory store', extra={'error': str(e)})
                self._client = None
        else:
            LOG.info('FlashcardStore using in-memory store')

    @staticmethod
    def _connect():
        if REDIS_URL:
            return redis.from_url(REDIS_URL, decode_responses=True)
        return redis.Redis(host=os.getenv('REDIS_HOST', 'redis'), port=int(os.getenv('REDIS_PORT', '6379')), password=os.getenv('REDIS_PASSWORD') or None, decode_responses=True, socket_timeout=3)

    @classmethod
    def get_instance(cls) -> 'FlashcardStore':
        if cls._instance is None:
            cls._instance = FlashcardStore()
        return cls._instance

    @property
    def backend(self) -> str:
        return 'redis' if self._use_redis else 'memory'

    @retry(stop=stop_after_attempt(STORE_RETRY_ATTEMPTS), wait=wait_exponential(multiplier=STORE_RETRY_MULTIPLIER, max=STORE_RETRY_MAX_WAIT), retry=retry_if_exception_type((redis.ConnectionError, redis.TimeoutError)), reraise=True)
    def _redis_call(self, fn, *args, **kwargs):
        return fn(*args, **kwargs)

    def _run(self, operation: str, fn, *args, **kwargs):
        try:
            return self._redis_call(fn, *args, **kwargs)
        except redis.RedisError as e:
            LOG.exception('flashcard_store_error', extra={'operation': operation, 'key': self.key})
            raise FlashcardStoreError(f'{operation} failed: {e}') from e

    def _decode(self, raw: str) -> Optional[Flashcard]:
        try:
            return Flashcard.model_validate_json(raw)
        except ValidationError as e:
            LOG.warning('flashcard_record_invalid', extra={'key': self.key, 'error': str(e)})
            return None

    @staticmethod
    def _encode(card: Flashcard) -> str:
        return card.model_dump_json(by_alias=True)

    def ping(self) -> bool:
        if not self._use_redis:
            return True
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def load_all(self) -> List[Flashcard]:
        start = time.time()
        if self._use_redis:
            raw_records = self._run('load_all', self._client.hgetall, self.key) or {}
        else:
            with self._mem_lock:
                raw_records = dict(self._in_memory)
        cards = [c for c in (self._decode(raw) for raw in raw_records.values()) if c is not None]
        cards.sort(key=lambda c: (c.created_at, c.id))
        log_store_operation('load_all', self.backend, len(cards), int((time.time() - start) * 1000))
        return cards

    def get(self, card_id: str) -> Optional[Flashcard]:
        if self._use_redis:
            raw = self._run('get', self._client.hget, self.key, card_id)
        else:
            with self._mem_lock:
                raw = self._in_memory.get(card_id)
        if raw is None:
            return None
        return self._decode(raw)

    def save(self, card: Flashcard) -> Flashcard:
        start = time.time()
        payload = self._encode(card)
        if self._use_redis:
            self._run('save', self._client.hset, self.key, card.id, payload)
        else:
            with self._mem_lock:
                self._in_memory[card.id] = payload
        log_store_operation('save', self.backend, 1, int((time.time() - start) * 1000), card_id=card.id)
        return card

    def save_all(self, cards: Iterable[Flashcard]) -> int:
        """Replace the whole collection with ``cards``."""
        start = time.time()
        mapping = {c.id: self._encode(c) for c in cards}
        if self._use_redis:
            def _replace():
                pipe = self._client.pipeline(transaction=True)
                pipe.delete(self.key)
                if mapping:
                    pipe.hset(self.key, mapping=mapping)
                return pipe.execute()

            self._run('save_all', _replace)
        else:
            with self._mem_lock:
                self._in_memory = dict(mapping)
        log_store_operation('save_all', self.backend, len(mapping), int((time.time() - start) * 1000))
        return len(mapping)

    def delete(self, card_id: str) -> bool:
        if self._use_redis:
            removed = self._run('delete', self._client.hdel, self.key, card_id)
        else:
            with self._mem_lock:
                removed = 1 if self._in_memory.pop(card_id, None) is not None else 0
        LOG.info('flashcard_deleted' if removed else 'flashcard_delete_missing', extra={'card_id': card_id, 'backend': self.backend})
        return bool(removed)
