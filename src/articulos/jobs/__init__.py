"""
Jobs - Extracao em fila com Celery + Redis.

Uso:
    from articulos.jobs import enqueue_extraction, get_job_status, cancel_job

    job_id = enqueue_extraction(42, "Ley", raw_text)
    get_job_status(job_id)   # {"job_id", "state", "progress", "result", "error"}
    cancel_job(job_id)       # {"success": True}
"""

from .celery_app import app
from .policy import (
    ExtractionJobError,
    UnknownClassificationError,
    DegenerateResultError,
    DegeneracyPolicy,
)
from .tasks import extract_articles_task
from .status import (
    JobState,
    status_from_result,
    enqueue_extraction,
    get_job_status,
    cancel_job,
)

__all__ = [
    "app",
    "ExtractionJobError",
    "UnknownClassificationError",
    "DegenerateResultError",
    "DegeneracyPolicy",
    "extract_articles_task",
    "JobState",
    "status_from_result",
    "enqueue_extraction",
    "get_job_status",
    "cancel_job",
]
