"""
Configuracao Celery para extracao de artigos em fila.

Requer Redis rodando:
    docker run -d --name redis -p 6379:6379 redis:alpine

Iniciar worker:
    celery -A articulos.jobs.celery_app worker --loglevel=info --concurrency=2
"""

from celery import Celery

from articulos.config import get_settings

config = get_settings()

app = Celery(
    "extract_articles",
    broker=config.redis_url,
    backend=config.redis_url,
    include=["articulos.jobs.tasks"],
)

app.conf.update(
    # Serialização
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="America/Mexico_City",
    enable_utc=True,

    # STARTED visivel no status (estado "active")
    task_track_started=True,

    # Tempo maximo por task
    task_time_limit=config.task_time_limit,

    # Uma tentativa; falha vira estado "failed"
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # 1 task por vez por worker (textos podem ter ~10 MB)
    worker_prefetch_multiplier=1,

    # Resultados expiram
    result_expires=config.result_expires,
)
