"""
Article Extractor - ponto de entrada do núcleo.

O dispatcher escolhe o conjunto de regras pela classificação do documento
e devolve um `Extractor` ligado ao texto. Não há subclasses por
classificação: Ley, Reglamento e Norma são o mesmo pipeline com registros
de regras diferentes.

    raw text -> Normalizer -> SegmentScanner -> SegmentAssembler -> segments

Usage:
    from articulos.parsing import extract, get_extractor

    result = extract("Ley", text)          # None se a classificação não existe
    for segment in result:
        print(segment.order, segment.title)

    extractor = get_extractor("Reglamento", text)
    if extractor is not None:
        result = extractor.extract()

O núcleo nunca levanta exceção: classificação desconhecida vira `None`,
texto vazio vira resultado vazio, e decidir se um resultado com poucos
segmentos é falha fica com quem chama.
"""

import logging
from typing import Iterable, Optional

from .assembler import SegmentAssembler
from .normalizer import Normalizer
from .rules import DEFAULT_RULES, ExtractionRules
from .scanner import SegmentScanner
from .segment_models import ExtractionResult

logger = logging.getLogger(__name__)


class Extractor:
    """Extrator ligado a um texto e a um conjunto de regras."""

    def __init__(self, text: str, rules: ExtractionRules):
        self.text = text
        self.rules = rules
        self.normalizer = Normalizer(rules)
        self.scanner = SegmentScanner(rules)
        self.assembler = SegmentAssembler(rules)

    @property
    def classification(self) -> str:
        return self.rules.classification

    def normalized_text(self) -> str:
        """Texto normalizado (útil para depuração)."""
        return self.normalizer.normalize(self.text)

    def extract(self) -> ExtractionResult:
        """Executa normalizer -> scanner -> assembler."""
        normalized = self.normalizer.normalize(self.text)
        scan = self.scanner.scan(normalized)
        result = self.assembler.assemble(scan)

        logger.info(
            f"Extracted {len(result)} segments from {len(self.text)} chars "
            f"({self.classification}): {result.count_by_kind()}"
        )
        return result


class ExtractorRegistry:
    """
    Registro classificação -> regras.

    Usage:
        registry = ExtractorRegistry()
        registry.register(LEY_RULES)
        extractor = registry.get_extractor("Ley", text)
    """

    def __init__(self, rules: Iterable[ExtractionRules] = ()):
        self._rules: dict[str, ExtractionRules] = {}
        for item in rules:
            self.register(item)

    def register(self, rules: ExtractionRules):
        """Registra (ou substitui) as regras de uma classificação."""
        if rules.classification in self._rules:
            logger.warning(f"Replacing rules for classification '{rules.classification}'")
        self._rules[rules.classification] = rules

    def get_rules(self, classification: str) -> Optional[ExtractionRules]:
        """Busca as regras de uma classificação."""
        return self._rules.get(classification)

    def __contains__(self, classification: str) -> bool:
        return classification in self._rules

    @property
    def classifications(self) -> list[str]:
        """Classificações registradas, em ordem de registro."""
        return list(self._rules)

    def get_extractor(self, classification: str, text: str) -> Optional[Extractor]:
        """Extrator para a classificação, ou None se ela não existe."""
        rules = self.get_rules(classification)
        if rules is None:
            logger.info(f"No extraction rules for classification '{classification}'")
            return None
        return Extractor(text, rules)

    def extract(self, classification: str, text: str) -> Optional[ExtractionResult]:
        """Extrai os segmentos, ou None se a classificação não existe."""
        extractor = self.get_extractor(classification, text)
        if extractor is None:
            return None
        return extractor.extract()


# Registro padrão do processo (Ley, Reglamento, Norma)
default_registry = ExtractorRegistry(DEFAULT_RULES)


def get_extractor(classification: str, text: str) -> Optional[Extractor]:
    """Extrator do registro padrão, ou None se a classificação não existe."""
    return default_registry.get_extractor(classification, text)


def extract(classification: str, text: str) -> Optional[ExtractionResult]:
    """Extrai com o registro padrão; None se a classificação não existe."""
    return default_registry.extract(classification, text)


def list_classifications() -> list[str]:
    """Classificações do registro padrão."""
    return default_registry.classifications
