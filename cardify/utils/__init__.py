"""Utility subpackage shared by the study service modules"""

from .logger import (
    get_logger,
    log_request,
    log_error,
    log_review_outcome,
    log_store_operation,
    set_request_context,
    get_request_context,
)
from .dates import add_days, ensure_aware, format_date, format_relative_date

__all__ = [
    'get_logger',
    'log_request',
    'log_error',
    'log_review_outcome',
    'log_store_operation',
    'set_request_context',
    'get_request_context',
    'add_days',
    'ensure_aware',
    'format_date',
    'format_relative_date',
]
