import os
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / '.env')

errors = []
warnings = []

import argparse

parser = argparse.ArgumentParser()
parser.add_argument('--strict', '-s', action='store_true', help='Convert warnings to failures')
args = parser.parse_args()
STRICT = args.strict

required = {
    'server': ['ENVIRONMENT', 'HOST', 'PORT'],
    'store': ['FLASHCARD_STORE_BACKEND'],
}


def check_presence(cat, keys):
    for k in keys:
        if not os.getenv(k):
            errors.append(f"{cat}: Missing {k}")


for cat, keys in required.items():
    check_presence(cat, keys)

# Format checks
try:
    port = int(os.getenv('PORT', '0'))
    if port < 1 or port > 65535:
        errors.append('PORT must be integer between 1 and 65535')
except ValueError:
    errors.append('PORT must be an integer')

log_format = os.getenv('LOG_FORMAT', 'json')
if log_format not in ('json', 'text'):
    errors.append("LOG_FORMAT must be 'json' or 'text'")

backend = os.getenv('FLASHCARD_STORE_BACKEND', 'redis').lower()
if backend not in ('redis', 'memory'):
    errors.append("FLASHCARD_STORE_BACKEND must be 'redis' or 'memory'")
if backend == 'memory' and os.getenv('ENVIRONMENT') == 'production':
    warnings.append('in-memory flashcard store loses every card on restart')

for name, cast in (('STORE_RETRY_ATTEMPTS', int), ('STORE_RETRY_MULTIPLIER', float), ('STORE_RETRY_MAX_WAIT', float)):
    raw = os.getenv(name)
    if raw is None:
        continue
    try:
        if cast(raw) < 0:
            errors.append(f'{name} must not be negative')
    except ValueError:
        errors.append(f'{name} must be a number')

# Redis check
if backend == 'redis':
    try:
        import redis
        if os.getenv('REDIS_URL'):
            r = redis.from_url(os.getenv('REDIS_URL'), socket_timeout=3)
        else:
            r = redis.Redis(host=os.getenv('REDIS_HOST', 'redis'), port=int(os.getenv('REDIS_PORT', '6379')), password=os.getenv('REDIS_PASSWORD') or None, socket_timeout=3)
        if r.ping():
            print('Redis: OK')
    except Exception as e:
        warnings.append(f'Redis check failed, service will fall back to the in-memory store: {e}')

# Log directory check
log_dir = os.getenv('LOG_FILE_PATH', 'logs')
if log_dir:
    log_path = Path(log_dir)
    try:
        log_path.mkdir(parents=True, exist_ok=True)
        if not os.access(log_path, os.W_OK):
            errors.append(f'Log path not writable: {log_path}')
        else:
            print(f'Log path: {log_path}')
    except OSError as e:
        errors.append(f'Failed to verify/create log dir: {e}')

if errors:
    print('\nENV validation failed:')
    for e in errors:
        print(' -', e)
    sys.exit(1)

if warnings:
    print('\nWarnings:')
    for w in warnings:
        print(' -', w)
    if STRICT:
        print('\nStrict mode enabled: treating warnings as errors')
        sys.exit(1)

print('\nAll critical validations passed')
sys.exit(0)
