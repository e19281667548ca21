"""
Tasks Celery para extracao de artigos.

O texto viaja na propria mensagem (json); o resultado volta pelo backend
Redis como lista de segmentos {kind, title, body, order}.
"""

import logging
import time

from articulos.parsing import get_extractor

from .celery_app import app
from .policy import DegeneracyPolicy, UnknownClassificationError

logger = logging.getLogger(__name__)

# Estado customizado para progresso (mapeado para "active")
PROGRESS_STATE = "PROGRESS"


def _report_progress(task, progress: int, stage: str):
    """Publica progresso 0..100 no backend."""
    if task.request.id is None:
        return
    task.update_state(state=PROGRESS_STATE, meta={"progress": progress, "stage": stage})


@app.task(bind=True, name="articulos.extract_articles")
def extract_articles_task(
    self,
    legal_basis_id: int,
    classification: str,
    text: str,
) -> dict:
    """
    Extrai os segmentos de um documento legal.

    Args:
        legal_basis_id: ID da base legal de origem
        classification: Classificacao do documento (Ley, Reglamento...)
        text: Texto bruto do documento

    Returns:
        Dict com legal_basis_id, classification, counts e segments
    """
    start = time.time()
    logger.info(
        f"[TASK] Extracting articles: legal_basis={legal_basis_id} "
        f"classification={classification} chars={len(text)}"
    )

    extractor = get_extractor(classification, text)
    if extractor is None:
        logger.warning(f"[TASK] Invalid classification for legal_basis={legal_basis_id}: {classification}")
        raise UnknownClassificationError.for_classification(classification)

    _report_progress(self, 10, "extracting")
    result = extractor.extract()

    _report_progress(self, 90, "validating")
    # Texto vazio da resultado vazio, nao erro
    if text.strip():
        DegeneracyPolicy.from_settings().check(result, len(text))

    elapsed = time.time() - start
    logger.info(f"[TASK] legal_basis={legal_basis_id}: {len(result)} segments em {elapsed:.2f}s")

    return {
        "legal_basis_id": legal_basis_id,
        "classification": classification,
        "counts": result.count_by_kind(),
        "segments": result.to_list(),
    }
