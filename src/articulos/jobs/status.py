"""
Enfileiramento, status e cancelamento de jobs de extracao.

Estados Celery -> estados do job:

    PENDING, RETRY      -> pending
    STARTED, PROGRESS   -> active
    SUCCESS             -> completed
    FAILURE             -> failed
    REVOKED             -> cancelled

O backend Redis nao distingue um id desconhecido de um job na fila;
ambos aparecem como "pending".
"""

import logging
from enum import Enum
from typing import Optional

from celery import Celery
from celery.result import AsyncResult

from articulos.parsing import default_registry

from .policy import UnknownClassificationError
from .tasks import PROGRESS_STATE, extract_articles_task

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    """Estado de um job visto de fora."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


CELERY_STATE_MAP = {
    "PENDING": JobState.PENDING,
    "RETRY": JobState.PENDING,
    "RECEIVED": JobState.PENDING,
    "STARTED": JobState.ACTIVE,
    PROGRESS_STATE: JobState.ACTIVE,
    "SUCCESS": JobState.COMPLETED,
    "FAILURE": JobState.FAILED,
    "REVOKED": JobState.CANCELLED,
}

# Estados finais que nao podem ser cancelados
NOT_CANCELLABLE = (JobState.COMPLETED, JobState.FAILED)


def job_state(celery_state: str) -> JobState:
    return CELERY_STATE_MAP.get(celery_state, JobState.PENDING)


def status_from_result(async_result) -> dict:
    """
    Monta o status de um job a partir de um AsyncResult.

    So le `id`, `state` e `info`, entao aceita qualquer objeto com esses
    atributos.

    Returns:
        Dict com job_id, state, progress e result ou error
    """
    state = job_state(async_result.state)
    info = async_result.info

    status = {
        "job_id": async_result.id,
        "state": state.value,
        "progress": 0,
        "result": None,
        "error": None,
    }

    if state == JobState.COMPLETED:
        status["progress"] = 100
        status["result"] = info
    elif state == JobState.FAILED:
        status["error"] = str(info) if info is not None else "Unknown error"
    elif state == JobState.ACTIVE and isinstance(info, dict):
        status["progress"] = int(info.get("progress", 0))

    return status


def enqueue_extraction(
    legal_basis_id: int,
    classification: str,
    text: str,
) -> str:
    """
    Valida a classificacao e enfileira a extracao.

    Raises:
        UnknownClassificationError: classificacao sem regras registradas

    Returns:
        job_id do job criado
    """
    if classification not in default_registry:
        raise UnknownClassificationError.for_classification(classification)

    async_result = extract_articles_task.apply_async(
        args=[legal_basis_id, classification, text],
    )
    logger.info(
        f"Job {async_result.id} enfileirado: legal_basis={legal_basis_id} "
        f"classification={classification}"
    )
    return async_result.id


def _async_result(job_id: str, app: Optional[Celery] = None) -> AsyncResult:
    return AsyncResult(job_id, app=app or extract_articles_task.app)


def get_job_status(job_id: str, app: Optional[Celery] = None) -> dict:
    """Status atual do job (id desconhecido aparece como pending)."""
    return status_from_result(_async_result(job_id, app))


def cancel_job(job_id: str, app: Optional[Celery] = None) -> dict:
    """
    Cancela um job pendente ou ativo.

    Cancelar um job ja cancelado e sucesso. Jobs completed ou failed
    nao podem ser cancelados.

    Returns:
        {"success": bool, "state": estado antes do cancelamento}
    """
    async_result = _async_result(job_id, app)
    state = job_state(async_result.state)

    if state in NOT_CANCELLABLE:
        logger.warning(f"Job {job_id} is {state.value} and cannot be cancelled")
        return {"success": False, "state": state.value}

    if state == JobState.CANCELLED:
        logger.info(f"Job {job_id} ja estava cancelado")
        return {"success": True, "state": state.value}

    async_result.revoke(terminate=True)

    # O job pode ter terminado entre a leitura e o revoke: um SUCCESS ou
    # FAILURE gravado pelo worker nunca e sobrescrito. So jobs ainda na fila
    # sao marcados no backend; o worker marca os ativos ao terminar
    current = job_state(async_result.state)
    if current in NOT_CANCELLABLE:
        logger.warning(f"Job {job_id} terminou ({current.value}) antes do cancelamento")
        return {"success": False, "state": current.value}
    if current == JobState.PENDING:
        async_result.backend.mark_as_revoked(job_id, reason="cancelled")
    logger.info(f"Job {job_id} cancelado (estava {state.value})")

    return {"success": True, "state": state.value}
