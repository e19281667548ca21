"""
Hierarchical Assembler - monta os segmentos ordenados.

Percorre a saída do scanner uma única vez, numa máquina de estados plana:

    START          --âncora-->  INSIDE_SEGMENT   (abre o primeiro segmento)
    INSIDE_SEGMENT --âncora-->  INSIDE_SEGMENT   (fecha o anterior, abre novo)
    INSIDE_SEGMENT --fim-->     DONE             (fecha o último)
    START          --fim-->     DONE             (resultado vazio)

A ordem é linear no documento: um CAPÍTULO não reinicia a contagem, todos os
tipos compartilham o mesmo contador. A árvore (capítulo > artigo) pode ser
reconstruída pelo consumidor a partir de `kind`.
"""

import logging
from enum import Enum
from typing import Optional

from .rules import ExtractionRules, LEY_RULES
from .scanner import ScanResult
from .segment_models import ExtractionResult, HeadingKind, Segment

logger = logging.getLogger(__name__)

PREAMBLE_TITLE = "PREÁMBULO"


class AssemblerState(str, Enum):
    """Estados do montador."""
    START = "start"
    INSIDE_SEGMENT = "inside_segment"
    DONE = "done"


class SegmentAssembler:
    """
    Monta `ExtractionResult` a partir de um `ScanResult`.

    Usage:
        assembler = SegmentAssembler(LEY_RULES)
        result = assembler.assemble(scan_result)
    """

    def __init__(self, rules: Optional[ExtractionRules] = None):
        self.rules = rules or LEY_RULES

    def assemble(self, scan: ScanResult) -> ExtractionResult:
        """Monta os segmentos (nunca falha; sem âncoras = lista vazia)."""
        result = ExtractionResult(classification=self.rules.classification)
        order = 1
        state = AssemblerState.START
        current: Optional[Segment] = None

        # Preâmbulo só é emitido quando a regra pede
        preamble = scan.preamble.strip()
        if self.rules.keep_preamble and preamble:
            result.segments.append(Segment(
                kind=HeadingKind.PREAMBLE,
                title=PREAMBLE_TITLE,
                body=preamble,
                order=order,
            ))
            order += 1

        for anchor, body in scan.entries:
            if state == AssemblerState.INSIDE_SEGMENT:
                result.segments.append(current)

            current = Segment(
                kind=anchor.kind,
                title=anchor.title.strip(),
                body=body.strip(),
                order=order,
            )
            order += 1
            state = AssemblerState.INSIDE_SEGMENT

        if state == AssemblerState.INSIDE_SEGMENT:
            result.segments.append(current)
        state = AssemblerState.DONE

        logger.debug(f"Assembler {state.value}: {len(result)} segments")
        return result


def assemble(scan: ScanResult, rules: Optional[ExtractionRules] = None) -> ExtractionResult:
    """Atalho: monta o resultado com as regras dadas (padrão: Ley)."""
    return SegmentAssembler(rules).assemble(scan)
