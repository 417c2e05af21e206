import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# the cardify modules read their settings from os.environ at import time
ENV_FILE = Path(os.getenv('CARDIFY_ENV_FILE', Path(__file__).resolve().parent / '.env'))
load_dotenv(ENV_FILE)

from cardify.models import Flashcard, MAX_BOX_LEVEL, MIN_BOX_LEVEL
from cardify.flashcards import (
    FlashcardService,
    FlashcardStore,
    FlashcardNotFoundError,
    FlashcardValidationError,
    FlashcardStoreError,
)
from cardify.scheduling import FlashcardStats
from cardify.utils import get_logger, log_error, log_request, set_request_context, format_relative_date

LOG = get_logger()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra='ignore')

    HOST: str = '0.0.0.0'
    PORT: int = 8000
    ENVIRONMENT: str = 'development'
    LOG_LEVEL: str = 'INFO'
    CORS_ORIGIN: str = '*'
    STORE_REQUIRED_FOR_READY: bool = True


settings = Settings()

app = FastAPI(title='Cardify Study Service', version='1.0.0', description='Leitner flashcard review service for captured course notes')

origins = [o.strip() for o in settings.CORS_ORIGIN.split(',') if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware('http')
async def add_request_id_and_logging(request: Request, call_next):
    # prefer incoming X-Request-ID header for cross-service tracing
    request_id = request.headers.get('x-request-id') or os.urandom(8).hex()
    request.state.request_id = request_id
    set_request_context(request_id)
    start = time.time()
    try:
        response: Response = await call_next(request)
    except Exception as e:
        log_error(e, {'method': request.method, 'path': request.url.path})
        body = {'success': False, 'error': {'message': 'Internal server error', 'request_id': request_id}}
        return JSONResponse(status_code=500, content=body, headers={'X-Request-ID': request_id})
    duration = int((time.time() - start) * 1000)
    log_request(request_id, request.method, request.url.path, response.status_code, duration, request.client.host if request.client else None)
    response.headers['X-Request-ID'] = request_id
    return response


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', None) or os.urandom(8).hex()


def _error(status_code: int, message: str, request_id: str, details: Optional[str] = None) -> JSONResponse:
    body = {'success': False, 'error': message, 'request_id': request_id}
    if details:
        body['details'] = details
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(FlashcardNotFoundError)
async def not_found_handler(request: Request, exc: FlashcardNotFoundError):
    LOG.warning('flashcard_not_found', extra={'path': request.url.path})
    return _error(404, 'Flashcard not found', _request_id(request), str(exc))


@app.exception_handler(FlashcardValidationError)
async def validation_handler(request: Request, exc: FlashcardValidationError):
    LOG.warning('flashcard_validation_error', extra={'path': request.url.path})
    return _error(422, 'Invalid flashcard', _request_id(request), str(exc))


@app.exception_handler(FlashcardStoreError)
async def store_error_handler(request: Request, exc: FlashcardStoreError):
    log_error(exc, {'path': request.url.path})
    return _error(503, 'Flashcard store unavailable', _request_id(request), str(exc))


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class FlashcardCreateRequest(ApiModel):
    question: str = Field(..., min_length=1, description='Question shown on the front of the card')
    answer: str = Field(..., min_length=1, description='Answer shown on the back of the card')
    source_content_id: Optional[str] = Field(None, description='Captured note the card was generated from')
    tags: List[str] = Field(default_factory=list)


class FlashcardUpdateRequest(ApiModel):
    question: Optional[str] = Field(None, min_length=1)
    answer: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None


class ReviewRequest(ApiModel):
    was_correct: bool = Field(..., description='True when the card was answered correctly')


class FlashcardListResponse(BaseModel):
    success: bool
    flashcards: List[Flashcard]
    count: int
    request_id: str


class FlashcardResponse(BaseModel):
    success: bool
    flashcard: Flashcard
    request_id: str


class ReviewResponse(BaseModel):
    success: bool
    flashcard: Flashcard
    previous_box_level: int
    next_review_label: str
    request_id: str


class StatsResponse(BaseModel):
    success: bool
    stats: FlashcardStats
    request_id: str


@app.get('/health')
async def health():
    return {'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat(), 'service': 'cardify'}


@app.get('/ready')
async def ready():
    store = FlashcardService.get_instance().store
    store_status = 'ok' if store.ping() else 'error: store unreachable'
    ready_ok = not (settings.STORE_REQUIRED_FOR_READY and store_status.startswith('error'))
    status_code = 200 if ready_ok else 503
    return JSONResponse(status_code=status_code, content={'status': 'ready' if ready_ok else 'not ready', 'services': {'store': store_status, 'backend': store.backend}})


@app.get('/flashcards', response_model=FlashcardListResponse)
async def list_flashcards(fastapi_request: Request, box: Optional[int] = Query(None, ge=MIN_BOX_LEVEL, le=MAX_BOX_LEVEL)):
    cards = FlashcardService.get_instance().list_cards(box_level=box)
    return FlashcardListResponse(success=True, flashcards=cards, count=len(cards), request_id=_request_id(fastapi_request))


@app.post('/flashcards', response_model=FlashcardResponse, status_code=201)
async def create_flashcard(req: FlashcardCreateRequest, fastapi_request: Request):
    card = FlashcardService.get_instance().add_card(req.question, req.answer, source_content_id=req.source_content_id, tags=req.tags)
    return FlashcardResponse(success=True, flashcard=card, request_id=_request_id(fastapi_request))


@app.get('/flashcards/due', response_model=FlashcardListResponse)
async def due_flashcards(fastapi_request: Request):
    cards = FlashcardService.get_instance().due_cards()
    return FlashcardListResponse(success=True, flashcards=cards, count=len(cards), request_id=_request_id(fastapi_request))


@app.get('/flashcards/stats', response_model=StatsResponse)
async def flashcard_stats(fastapi_request: Request):
    stats = FlashcardService.get_instance().stats()
    return StatsResponse(success=True, stats=stats, request_id=_request_id(fastapi_request))


@app.get('/flashcards/{card_id}', response_model=FlashcardResponse)
async def get_flashcard(card_id: str, fastapi_request: Request):
    card = FlashcardService.get_instance().get_card(card_id)
    return FlashcardResponse(success=True, flashcard=card, request_id=_request_id(fastapi_request))


@app.patch('/flashcards/{card_id}', response_model=FlashcardResponse)
async def update_flashcard(card_id: str, req: FlashcardUpdateRequest, fastapi_request: Request):
    card = FlashcardService.get_instance().update_card(card_id, question=req.question, answer=req.answer, tags=req.tags)
    return FlashcardResponse(success=True, flashcard=card, request_id=_request_id(fastapi_request))


@app.delete('/flashcards/{card_id}')
async def delete_flashcard(card_id: str, fastapi_request: Request):
    FlashcardService.get_instance().delete_card(card_id)
    return {'success': True, 'id': card_id, 'request_id': _request_id(fastapi_request)}


@app.post('/flashcards/{card_id}/review', response_model=ReviewResponse)
async def review_flashcard(card_id: str, req: ReviewRequest, fastapi_request: Request):
    service = FlashcardService.get_instance()
    previous, card = service.review(card_id, req.was_correct)
    label = format_relative_date(card.next_review_date, service.clock.now())
    return ReviewResponse(success=True, flashcard=card, previous_box_level=previous.box_level, next_review_label=label, request_id=_request_id(fastapi_request))


@app.on_event('startup')
async def on_startup():
    LOG.info('Cardify service starting', extra={'env': settings.ENVIRONMENT})
    try:
        store = FlashcardStore.get_instance()
        LOG.info('FlashcardStore ready', extra={'backend': store.backend})
    except Exception:
        LOG.exception('flashcard_store_init_failed', exc_info=True)


@app.on_event('shutdown')
async def on_shutdown():
    LOG.info('Cardify service shutting down')


if __name__ == '__main__':
    import uvicorn

    workers = int(os.getenv('WORKERS', '1'))
    # uvicorn does not support reload with multiple workers
    if settings.ENVIRONMENT == 'development':
        workers = 1
    reload_enabled = (settings.ENVIRONMENT == 'development') and (workers == 1)

    uvicorn.run(
        'main:app',
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=reload_enabled,
        workers=workers,
    )
