"""
Testes da camada de jobs (sem broker).

Testa:
1. Heurística de resultado degenerado
2. Mapeamento de estados Celery -> estados do job
3. Task chamada diretamente (sem worker)
4. Enfileiramento e cancelamento com AsyncResult simulado
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from articulos.config import get_settings, override_settings
from articulos.jobs import (
    DegeneracyPolicy,
    DegenerateResultError,
    ExtractionJobError,
    JobState,
    UnknownClassificationError,
    cancel_job,
    enqueue_extraction,
    extract_articles_task,
    get_job_status,
    status_from_result,
)
from articulos.jobs import status as status_module
from articulos.parsing import ExtractionResult, extract


# Mock de AsyncResult do Celery
@dataclass
class MockBackend:
    revoked: list = field(default_factory=list)

    def mark_as_revoked(self, task_id, reason=""):
        self.revoked.append((task_id, reason))


@dataclass
class MockAsyncResult:
    id: str
    state: str
    info: Any = None
    backend: MockBackend = field(default_factory=MockBackend)
    revoke_calls: list = field(default_factory=list)
    # Estado gravado pelo worker enquanto o revoke acontece
    state_after_revoke: Any = None

    def revoke(self, terminate=False):
        self.revoke_calls.append(terminate)
        if self.state_after_revoke:
            self.state = self.state_after_revoke


# =============================================================================
# Política
# =============================================================================

def test_required_segments():
    assert DegeneracyPolicy().required_segments(0) == 1
    assert DegeneracyPolicy().required_segments(1_000_000) == 1

    policy = DegeneracyPolicy(min_segments=1, min_segments_per_kb=2.0)
    assert policy.required_segments(2048) == 4
    assert policy.required_segments(1500) == 3
    assert policy.required_segments(100) == 1


def test_degenerate_result():
    policy = DegeneracyPolicy()
    empty = ExtractionResult(classification="Ley")
    assert policy.is_degenerate(empty, 100)

    result = extract("Ley", "ARTÍCULO 1. Texto.")
    assert not policy.is_degenerate(result, 100)
    policy.check(result, 100)

    with pytest.raises(DegenerateResultError) as exc_info:
        policy.check(empty, 100)
    assert "0 segments" in str(exc_info.value)


def test_policy_from_settings():
    try:
        override_settings(min_segments=3, min_segments_per_kb=0.5)
        policy = DegeneracyPolicy.from_settings()
        assert policy.min_segments == 3
        assert policy.min_segments_per_kb == 0.5
    finally:
        get_settings.cache_clear()


def test_error_hierarchy():
    error = UnknownClassificationError.for_classification("Decreto")
    assert isinstance(error, ExtractionJobError)
    assert str(error) == "Invalid classification: 'Decreto'"
    assert issubclass(DegenerateResultError, ExtractionJobError)


# =============================================================================
# Status
# =============================================================================

def test_status_pending():
    status = status_from_result(MockAsyncResult("job-1", "PENDING"))
    assert status == {
        "job_id": "job-1",
        "state": "pending",
        "progress": 0,
        "result": None,
        "error": None,
    }
    assert status_from_result(MockAsyncResult("job-1", "RETRY"))["state"] == "pending"


def test_status_active_with_progress():
    status = status_from_result(
        MockAsyncResult("job-2", "PROGRESS", info={"progress": 10, "stage": "extracting"})
    )
    assert status["state"] == "active"
    assert status["progress"] == 10

    started = status_from_result(MockAsyncResult("job-2", "STARTED", info={"pid": 42}))
    assert started["state"] == "active"
    assert started["progress"] == 0


def test_status_completed():
    payload = {"legal_basis_id": 7, "segments": []}
    status = status_from_result(MockAsyncResult("job-3", "SUCCESS", info=payload))
    assert status["state"] == "completed"
    assert status["progress"] == 100
    assert status["result"] == payload


def test_status_failed():
    error = UnknownClassificationError.for_classification("Decreto")
    status = status_from_result(MockAsyncResult("job-4", "FAILURE", info=error))
    assert status["state"] == "failed"
    assert status["error"] == "Invalid classification: 'Decreto'"
    assert status["result"] is None


def test_status_cancelled():
    status = status_from_result(MockAsyncResult("job-5", "REVOKED"))
    assert status["state"] == JobState.CANCELLED.value


def test_get_job_status(monkeypatch):
    monkeypatch.setattr(
        status_module, "_async_result",
        lambda job_id, app=None: MockAsyncResult(job_id, "SUCCESS", info={"segments": []}),
    )
    status = get_job_status("job-6")
    assert status["job_id"] == "job-6"
    assert status["state"] == "completed"


# =============================================================================
# Task (chamada direta, sem worker)
# =============================================================================

def test_task_extracts_segments():
    payload = extract_articles_task(
        7, "Ley", "ARTÍCULO 1. El objeto de esta Ley. ARTÍCULO 2. Las definiciones."
    )
    assert payload["legal_basis_id"] == 7
    assert payload["classification"] == "Ley"
    assert payload["counts"] == {"article": 2}
    assert payload["segments"][0] == {
        "kind": "article",
        "title": "ARTÍCULO 1",
        "body": "El objeto de esta Ley.",
        "order": 1,
    }


def test_task_unknown_classification():
    with pytest.raises(UnknownClassificationError):
        extract_articles_task(7, "Decreto", "ARTÍCULO 1. Texto.")


def test_task_degenerate_result():
    """Texto sem cabeçalhos faz o job falhar."""
    with pytest.raises(DegenerateResultError):
        extract_articles_task(7, "Ley", "Texto sin estructura alguna.")


def test_task_empty_text():
    """Texto vazio completa o job com zero segmentos."""
    for text in ["", "   \n\t "]:
        payload = extract_articles_task(7, "Ley", text)
        assert payload["segments"] == []
        assert payload["counts"] == {}


# =============================================================================
# Enfileiramento e cancelamento
# =============================================================================

def test_enqueue_rejects_unknown_classification(monkeypatch):
    calls = []
    monkeypatch.setattr(extract_articles_task, "apply_async", lambda **kwargs: calls.append(kwargs))

    with pytest.raises(UnknownClassificationError):
        enqueue_extraction(7, "Decreto", "ARTÍCULO 1. Texto.")
    assert calls == []


def test_enqueue_returns_job_id(monkeypatch):
    calls = []

    def fake_apply_async(**kwargs):
        calls.append(kwargs)
        return MockAsyncResult("job-7", "PENDING")

    monkeypatch.setattr(extract_articles_task, "apply_async", fake_apply_async)

    assert enqueue_extraction(7, "Ley", "ARTÍCULO 1. Texto.") == "job-7"
    assert calls == [{"args": [7, "Ley", "ARTÍCULO 1. Texto."]}]


def _patch_result(monkeypatch, state: str) -> MockAsyncResult:
    result = MockAsyncResult("job-8", state)
    monkeypatch.setattr(status_module, "_async_result", lambda job_id, app=None: result)
    return result


def test_cancel_pending_job(monkeypatch):
    result = _patch_result(monkeypatch, "PENDING")

    outcome = cancel_job("job-8")
    assert outcome["success"] is True
    assert result.revoke_calls == [True]
    assert result.backend.revoked == [("job-8", "cancelled")]


def test_cancel_active_job(monkeypatch):
    result = _patch_result(monkeypatch, "PROGRESS")
    assert cancel_job("job-8")["success"] is True
    assert result.revoke_calls == [True]
    # O worker marca o job ativo ao terminar; o backend não é tocado aqui
    assert result.backend.revoked == []


def test_cancel_finished_job_forbidden(monkeypatch):
    for state in ["SUCCESS", "FAILURE"]:
        result = _patch_result(monkeypatch, state)
        outcome = cancel_job("job-8")
        assert outcome["success"] is False
        assert result.revoke_calls == []


def test_cancel_job_finishing_during_revoke(monkeypatch):
    """Resultado gravado durante o revoke não é sobrescrito."""
    for finished, expected in [("SUCCESS", "completed"), ("FAILURE", "failed")]:
        result = _patch_result(monkeypatch, "PROGRESS")
        result.state_after_revoke = finished

        outcome = cancel_job("job-8")
        assert outcome == {"success": False, "state": expected}
        assert result.revoke_calls == [True]
        assert result.backend.revoked == []
        assert result.state == finished


def test_cancel_pending_job_started_during_revoke(monkeypatch):
    result = _patch_result(monkeypatch, "PENDING")
    result.state_after_revoke = "STARTED"

    assert cancel_job("job-8") == {"success": True, "state": "pending"}
    assert result.backend.revoked == []


def test_cancel_already_cancelled(monkeypatch):
    result = _patch_result(monkeypatch, "REVOKED")
    assert cancel_job("job-8") == {"success": True, "state": "cancelled"}
    assert result.revoke_calls == []
