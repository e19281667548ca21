"""
Configuração centralizada do extrator de artigos.

Usa variáveis de ambiente com fallback para valores padrão (localhost).
As regras de cada classificação (Ley, Reglamento, ...) NÃO vivem aqui:
ficam nos conjuntos de regras imutáveis de `articulos.parsing.rules`.

Uso:
    from articulos.config import settings

    print(settings.redis_url)             # redis://localhost:6379/0
    print(settings.max_text_chars)        # 10000000
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass
class Settings:
    """Configurações do sistema."""

    # Redis (broker e backend do Celery)
    redis_host: str = os.getenv("REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_db: int = int(os.getenv("REDIS_DB", "0"))

    # Limites de entrada (~10 MB de texto)
    max_text_chars: int = int(os.getenv("EXTRACTION_MAX_TEXT_CHARS", "10000000"))

    # Heurística de resultado degenerado (camada de jobs)
    min_segments: int = int(os.getenv("EXTRACTION_MIN_SEGMENTS", "1"))
    min_segments_per_kb: float = float(os.getenv("EXTRACTION_MIN_SEGMENTS_PER_KB", "0.0"))

    # Celery
    task_time_limit: int = int(os.getenv("EXTRACTION_TASK_TIME_LIMIT", "600"))
    result_expires: int = int(os.getenv("EXTRACTION_RESULT_EXPIRES", "86400"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8080"))

    @property
    def redis_url(self) -> str:
        """URL completa do Redis."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache()
def get_settings() -> Settings:
    """Retorna singleton das configurações."""
    return Settings()


# Singleton para acesso direto
settings = get_settings()


def override_settings(**kwargs) -> Settings:
    """
    Sobrescreve configurações (útil para testes).

    Os defaults do dataclass são avaliados na importação, então os valores
    novos são aplicados diretamente na instância retornada.
    """
    get_settings.cache_clear()
    for key, value in kwargs.items():
        os.environ[key.upper()] = str(value)
    fresh = get_settings()
    for key, value in kwargs.items():
        if hasattr(fresh, key):
            setattr(fresh, key, value)
    return fresh
