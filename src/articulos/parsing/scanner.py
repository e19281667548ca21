"""
Segment Scanner - divide o texto normalizado nos cabeçalhos.

Produz o preâmbulo (texto antes do primeiro cabeçalho) e a lista de pares
(âncora, corpo), onde o corpo vai até a próxima âncora:

    "Preâmbulo CAPÍTULO I Disposiciones. ARTÍCULO 1. Texto."
        preamble = "Preâmbulo"
        entries  = [(CAPÍTULO I, "Disposiciones."), (ARTÍCULO 1, "Texto.")]

Os corpos são fatias do texto normalizado, sem cópia além do slice.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .rules import ExtractionRules, LEY_RULES, compile_rules
from .segment_models import Anchor

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Saída do scanner."""

    preamble: str = ""
    entries: list[tuple[Anchor, str]] = field(default_factory=list)

    @property
    def anchors(self) -> list[Anchor]:
        return [anchor for anchor, _ in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


class SegmentScanner:
    """
    Scanner de cabeçalhos parametrizado por um conjunto de regras.

    Usage:
        scanner = SegmentScanner(LEY_RULES)
        scan = scanner.scan(normalized_text)

        for anchor, body in scan.entries:
            print(anchor.title, body[:40])
    """

    def __init__(self, rules: Optional[ExtractionRules] = None):
        self.rules = rules or LEY_RULES
        self._compiled = compile_rules(self.rules)

    def find_anchors(self, normalized: str) -> list[Anchor]:
        """Encontra todas as âncoras, em ordem de documento."""
        anchors = []
        for match in self._compiled.anchor_pattern.finditer(normalized):
            group = match.lastgroup
            anchors.append(Anchor(
                kind=self._compiled.kind_for_group(group),
                text=match.group(0),
                title=match.group(group),
                start=match.start(),
                end=match.end(),
            ))
        return anchors

    def scan(self, normalized: str) -> ScanResult:
        """Divide o texto em preâmbulo + pares (âncora, corpo)."""
        anchors = self.find_anchors(normalized)
        if not anchors:
            return ScanResult(preamble=normalized)

        entries = []
        for i, anchor in enumerate(anchors):
            end = anchors[i + 1].start if i + 1 < len(anchors) else len(normalized)
            entries.append((anchor, normalized[anchor.end:end]))

        logger.debug(f"Scanned {len(anchors)} anchors ({self.rules.classification})")
        return ScanResult(preamble=normalized[:anchors[0].start], entries=entries)


def scan(normalized: str, rules: Optional[ExtractionRules] = None) -> ScanResult:
    """Atalho: escaneia `normalized` com as regras dadas (padrão: Ley)."""
    return SegmentScanner(rules).scan(normalized)
