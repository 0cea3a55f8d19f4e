"""
Configurações da aplicação
"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Configurações da aplicação"""

    app_name: str = Field(default="FinAI Dashboard")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="logs", description="Diretório dos arquivos de log")

    openai_api_key: Optional[str] = Field(default=None, description="Chave da API OpenAI")
    openai_model: str = Field(default="gpt-4o-mini")

    advisor_history_limit: int = Field(default=10, ge=0, description="Transações recentes enviadas ao consultor")
    trend_window_days: int = Field(default=10, ge=0, description="Dias com movimento exibidos no gráfico")
    recent_transactions_limit: int = Field(default=5, ge=0)

    currency: str = Field(default="BRL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Obter configurações (cached)"""
    return Settings()
