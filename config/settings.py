"""
Configurações globais do sistema usando Pydantic Settings.
Carrega variáveis de ambiente e define valores padrão.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações principais do sistema."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ambiente
    env: Literal["development", "production", "testing"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    # Paginação
    page_size: int = Field(default=100, ge=1, le=100)
    request_delay: float = Field(default=1.0, ge=0, le=60)
    max_consecutive_failures: int = Field(default=5, ge=1, le=50)
    checkpoint_every: int = Field(default=500, ge=1)
    expected_total: Optional[int] = Field(default=None, ge=0)

    # Intervalo mínimo entre linhas de progresso (segundos)
    progress_log_interval: float = Field(default=5.0, ge=0)

    # Timeouts
    request_timeout: int = Field(default=30, ge=5, le=120)

    # Paths
    base_path: Path = Field(default_factory=lambda: Path(__file__).parent.parent)
    data_path: Path = Field(default=Path("./data"))
    log_path: Path = Field(default=Path("./logs"))

    # Saída
    output_file: str = "output.json"
    output_format: Literal["json", "csv"] = "json"

    # User Agent
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        )
    )

    @field_validator("data_path", "log_path", mode="after")
    @classmethod
    def ensure_path_exists(cls, v: Path) -> Path:
        """Garante que os diretórios existam."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def output_path(self) -> Path:
        """Caminho completo do arquivo de saída."""
        return self.data_path / self.output_file


@lru_cache
def get_settings() -> Settings:
    """
    Retorna instância singleton das configurações.
    Usa cache para evitar recarregar .env múltiplas vezes.
    """
    return Settings()
