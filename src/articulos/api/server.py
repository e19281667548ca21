"""
Servidor FastAPI do extrator de artigos.

Expoe endpoints para:
1. Extracao sincrona - /extract
2. Jobs em fila (Celery) - /jobs

Uso:
    python -m articulos.api.server --port 8080

    # Ou com uvicorn
    uvicorn articulos.api.server:app --host 0.0.0.0 --port 8080
"""

import logging
import time
from typing import Optional, Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from articulos import __version__
from articulos.config import get_settings
from articulos.jobs import (
    UnknownClassificationError,
    cancel_job,
    enqueue_extraction,
    get_job_status,
)
from articulos.parsing import Extractor, default_registry

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================================
# Modelos Pydantic
# ============================================================================

# --- Extracao ---

class ExtractRequest(BaseModel):
    classification: str
    text: str
    keep_preamble: bool = False


class SegmentModel(BaseModel):
    kind: str
    title: str
    body: str
    order: int


class ExtractResponse(BaseModel):
    classification: str
    segment_count: int
    counts: dict[str, int]
    segments: list[SegmentModel]
    time_ms: float


# --- Jobs ---

class JobRequest(BaseModel):
    legal_basis_id: int
    classification: str
    text: str


class JobCreatedResponse(BaseModel):
    job_id: str
    state: str = "pending"


class JobStatusResponse(BaseModel):
    job_id: str
    state: str
    progress: int
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None


class CancelResponse(BaseModel):
    job_id: str
    success: bool


class HealthResponse(BaseModel):
    status: str
    version: str
    classifications: list[str]


# ============================================================================
# App
# ============================================================================

app = FastAPI(
    title="Article Extractor",
    description="Extracao de artigos de documentos legais mexicanos",
    version=__version__,
)


def _check_text_size(text: str):
    max_chars = get_settings().max_text_chars
    if len(text) > max_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text too large: {len(text)} chars (max {max_chars})",
        )


def _invalid_classification(classification: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=f"Invalid classification: '{classification}'",
    )


# ============================================================================
# Endpoints - Health
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Verifica saude do servidor."""
    return HealthResponse(
        status="ok",
        version=__version__,
        classifications=default_registry.classifications,
    )


@app.get("/classifications")
async def classifications():
    """Lista classificacoes suportadas."""
    return {"classifications": default_registry.classifications}


# ============================================================================
# Endpoints - Extracao
# ============================================================================

@app.post("/extract", response_model=ExtractResponse)
def extract_articles(request: ExtractRequest):
    """Extrai os segmentos de forma sincrona."""
    _check_text_size(request.text)

    rules = default_registry.get_rules(request.classification)
    if rules is None:
        logger.warning(f"Rejected /extract: unknown classification {request.classification!r}")
        raise _invalid_classification(request.classification)

    if request.keep_preamble:
        rules = rules.with_options(keep_preamble=True)

    start = time.time()
    result = Extractor(request.text, rules).extract()
    elapsed = (time.time() - start) * 1000

    return ExtractResponse(
        classification=rules.classification,
        segment_count=len(result),
        counts=result.count_by_kind(),
        segments=[SegmentModel(**item) for item in result.to_list()],
        time_ms=elapsed,
    )


# ============================================================================
# Endpoints - Jobs
# ============================================================================

@app.post("/jobs", response_model=JobCreatedResponse, status_code=202)
def create_job(request: JobRequest):
    """Enfileira uma extracao."""
    _check_text_size(request.text)

    try:
        job_id = enqueue_extraction(
            request.legal_basis_id,
            request.classification,
            request.text,
        )
    except UnknownClassificationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return JobCreatedResponse(job_id=job_id)


@app.get("/jobs/{job_id}", response_model=JobStatusResponse)
def job_status(job_id: str):
    """Status do job (id desconhecido aparece como pending)."""
    return JobStatusResponse(**get_job_status(job_id))


@app.delete("/jobs/{job_id}", response_model=CancelResponse)
def delete_job(job_id: str):
    """Cancela um job pendente ou ativo."""
    outcome = cancel_job(job_id)
    if not outcome["success"]:
        raise HTTPException(
            status_code=409,
            detail=f"Job {job_id} is {outcome['state']} and cannot be cancelled",
        )
    return CancelResponse(job_id=job_id, success=True)


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import argparse
    import uvicorn

    config = get_settings()

    parser = argparse.ArgumentParser(description="Article Extractor API")
    parser.add_argument("--port", type=int, default=config.api_port, help="Porta do servidor")
    parser.add_argument("--host", type=str, default=config.api_host, help="Host")
    args = parser.parse_args()

    uvicorn.run(
        "articulos.api.server:app",
        host=args.host,
        port=args.port,
        log_level="info",
    )
