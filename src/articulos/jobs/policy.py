"""
Politica de falha da camada de jobs.

O nucleo nunca falha; quem decide se um resultado e ruim e o job. Um
resultado e degenerado quando tem menos segmentos que

    max(min_segments, ceil(kb_de_texto * min_segments_per_kb))

com os dois limiares vindos de `articulos.config.Settings`.

As excecoes carregam so a mensagem: o Celery as serializa em json e as
recria com `cls(mensagem)` ao ler o status.
"""

import math
from dataclasses import dataclass

from articulos.config import get_settings
from articulos.parsing import ExtractionResult


class ExtractionJobError(Exception):
    """Erro base de um job de extracao."""


class UnknownClassificationError(ExtractionJobError):
    """Classificacao sem conjunto de regras registrado."""

    @classmethod
    def for_classification(cls, classification: str) -> "UnknownClassificationError":
        return cls(f"Invalid classification: '{classification}'")


class DegenerateResultError(ExtractionJobError):
    """Poucos segmentos para o tamanho do texto."""


@dataclass
class DegeneracyPolicy:
    """Limiares da heuristica de resultado degenerado."""

    min_segments: int = 1
    min_segments_per_kb: float = 0.0

    @classmethod
    def from_settings(cls) -> "DegeneracyPolicy":
        config = get_settings()
        return cls(
            min_segments=config.min_segments,
            min_segments_per_kb=config.min_segments_per_kb,
        )

    def required_segments(self, text_chars: int) -> int:
        """Minimo de segmentos esperado para um texto deste tamanho."""
        kb = text_chars / 1024
        return max(self.min_segments, math.ceil(kb * self.min_segments_per_kb))

    def is_degenerate(self, result: ExtractionResult, text_chars: int) -> bool:
        return len(result) < self.required_segments(text_chars)

    def check(self, result: ExtractionResult, text_chars: int):
        """Levanta `DegenerateResultError` se o resultado e degenerado."""
        required = self.required_segments(text_chars)
        if len(result) < required:
            raise DegenerateResultError(
                f"Article Processing Error: {len(result)} segments extracted "
                f"from {text_chars} chars (expected at least {required})"
            )
