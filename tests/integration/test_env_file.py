import importlib
import os

import pytest

import main as cardify_main

DOTENV_KEYS = ('FLASHCARD_STORE_KEY', 'CORS_ORIGIN', 'ENVIRONMENT')


@pytest.fixture
def dotenv_file(tmp_path, monkeypatch):
    env_file = tmp_path / '.env'
    env_file.write_text('FLASHCARD_STORE_KEY=from-dotenv\nCORS_ORIGIN=http://study.example\nENVIRONMENT=staging\n')
    saved = {k: os.environ.pop(k, None) for k in DOTENV_KEYS}
    monkeypatch.setenv('CARDIFY_ENV_FILE', str(env_file))
    yield env_file
    for key, value in saved.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
    monkeypatch.delenv('CARDIFY_ENV_FILE')
    importlib.reload(cardify_main)


@pytest.mark.integration
def test_env_file_reaches_settings_and_module_config(dotenv_file):
    importlib.reload(cardify_main)
    assert cardify_main.ENV_FILE == dotenv_file
    assert cardify_main.settings.CORS_ORIGIN == 'http://study.example'
    assert cardify_main.settings.ENVIRONMENT == 'staging'
    # the same file feeds the os.environ lookups of the store and logger
    assert os.environ['FLASHCARD_STORE_KEY'] == 'from-dotenv'


@pytest.mark.integration
def test_process_env_wins_over_env_file(dotenv_file, monkeypatch):
    monkeypatch.setenv('CORS_ORIGIN', 'http://from-process')
    importlib.reload(cardify_main)
    assert cardify_main.settings.CORS_ORIGIN == 'http://from-process'
    assert os.environ['FLASHCARD_STORE_KEY'] == 'from-dotenv'
