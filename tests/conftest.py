"""
Configurações e fixtures compartilhadas para pytest.
"""

from pathlib import Path

import pytest

from config.settings import Settings, get_settings
from src.core.models import ExtractionConfig
from tests.fixtures.pages import RecordingSink, SleepRecorder


# FIXTURES DE DIRETÓRIOS

@pytest.fixture
def temp_data_dir(tmp_path) -> Path:
    """Cria diretório temporário para dados de teste."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def temp_log_dir(tmp_path) -> Path:
    """Cria diretório temporário para logs de teste."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


# FIXTURES DE CONFIGURAÇÃO

@pytest.fixture(autouse=True)
def settings_override(temp_data_dir, temp_log_dir, monkeypatch):
    """Isola as settings de cada teste em diretórios temporários."""
    monkeypatch.setenv("DATA_PATH", str(temp_data_dir))
    monkeypatch.setenv("LOG_PATH", str(temp_log_dir))
    monkeypatch.setenv("ENV", "testing")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(temp_data_dir, temp_log_dir) -> Settings:
    """Settings de teste sem delay entre requisições."""
    return Settings(
        _env_file=None,
        env="testing",
        data_path=temp_data_dir,
        log_path=temp_log_dir,
        request_delay=0,
        progress_log_interval=0,
    )


# FIXTURES DO EXTRATOR

@pytest.fixture
def sink() -> RecordingSink:
    """Destino de checkpoint em memória."""
    return RecordingSink()


@pytest.fixture
def sleeper() -> SleepRecorder:
    """Substituto de asyncio.sleep."""
    return SleepRecorder()


@pytest.fixture
def make_config(sink):
    """Fábrica de ExtractionConfig com valores pequenos para testes."""

    def _make(**overrides) -> ExtractionConfig:
        values = {
            "page_size": 2,
            "inter_request_delay": 1.0,
            "max_consecutive_failures": 5,
            "checkpoint_every": 500,
            "checkpoint_sink": sink,
        }
        values.update(overrides)
        return ExtractionConfig(**values)

    return _make
