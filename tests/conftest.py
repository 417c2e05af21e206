import os
import pytest
from pathlib import Path

from dotenv import load_dotenv

# load test env first
env_path = Path(__file__).resolve().parents[1] / '.env.test'
if env_path.exists():
    load_dotenv(env_path)

os.environ.setdefault('TESTING', '1')
os.environ.setdefault('LOG_FILE_PATH', '')
os.environ.setdefault('FLASHCARD_STORE_BACKEND', 'memory')


@pytest.fixture
def fixed_clock():
    from cardify.scheduling import FixedClock
    from tests.fixtures.sample_data import T0
    return FixedClock(T0)


@pytest.fixture
def mock_redis_client():
    from tests.fixtures.mock_redis import MockRedisClient
    return MockRedisClient()


@pytest.fixture
def memory_store():
    from cardify.flashcards import FlashcardStore
    return FlashcardStore(backend='memory')


@pytest.fixture
def service(memory_store, fixed_clock):
    from cardify.flashcards import FlashcardService
    return FlashcardService(store=memory_store, clock=fixed_clock)


@pytest.fixture
def app_service(monkeypatch, service):
    # route every endpoint to the in-memory, fixed-clock service
    from cardify.flashcards import FlashcardService
    monkeypatch.setattr(FlashcardService, '_instance', service)
    return service
