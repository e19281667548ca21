"""
Normalizer - canonicaliza o texto bruto de um documento legal.

Texto copiado de PDF/OCR chega com letras espaçadas ("A R T Í C U L O"),
pontilhados de índice, quebras de linha no meio das frases e acentos
perdidos. Acentos decompostos (NFD, "I" + U+0301) são recompostos (NFC)
antes de tudo. As regras abaixo rodam NESTA ordem:

    1. Colapsa espaços em branco (inclui \\t, \\n, NBSP) em um espaço
    2. Apaga quebras de linha restantes (\\r solto, U+2028...)
    3. Canoniza palavras-chave (Artículo/ARTICULO/A R T Í C U L O -> ARTÍCULO)
    4. Remove entradas de índice ("Disposiciones ....... 5")
    5. Remove pontilhados soltos ("...")

Depois: colapsa espaços de novo, apara as pontas e canoniza as
palavras-chave uma segunda vez (remover "..." pode reunir as letras de uma
palavra-chave). O resultado é idempotente.
"""

import logging
import re
import unicodedata
from typing import Optional

from .rules import (
    TOC_ENTRY_MAX_CHARS,
    CompiledRules,
    ExtractionRules,
    LEY_RULES,
    compile_rules,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_BREAK_RE = re.compile(r"[\r\n\x0b\x0c\x85\u2028\u2029]+")
_ELLIPSIS_RE = re.compile(r"\s*\.{3,}\s*")
# Ponto final (não o de "1." ou "5.1")
_SENTENCE_END_RE = re.compile(r"(?<![\d.])\.(?!\.)")


def fold_whitespace(text: str) -> str:
    """Regra 1: toda sequência de espaços em branco vira um espaço."""
    return _WHITESPACE_RE.sub(" ", text)


def erase_line_breaks(text: str) -> str:
    """Regra 2: quebras de linha restantes viram espaço."""
    return _LINE_BREAK_RE.sub(" ", text)


def canonicalize_keywords(text: str, compiled: CompiledRules) -> str:
    """Regra 3: palavras-chave ruidosas viram a forma canônica."""
    for pattern, keyword in compiled.keyword_patterns:
        text = pattern.sub(keyword, text)
    return text


def strip_toc_entries(text: str, compiled: CompiledRules) -> str:
    """
    Regra 4: remove entradas de índice com pontilhado e número de página.

    Procura o pontilhado ("....... 5") e recorta a entrada para trás, numa
    janela de até TOC_ENTRY_MAX_CHARS caracteres: ela começa no último
    cabeçalho da janela ("CAPÍTULO II", "5.1") ou, sem cabeçalho, depois do
    último ponto final. Cada janela é lida uma vez: custo linear no texto.
    """
    if compiled.toc_pattern is None or "..." not in text:
        return text

    parts = []
    floor = 0
    for leader in compiled.toc_pattern.finditer(text):
        end = leader.start()
        lo = max(floor, end - TOC_ENTRY_MAX_CHARS)

        start = lo
        for stop in _SENTENCE_END_RE.finditer(text, lo, end):
            start = stop.end()
        if start == lo and lo > floor:
            # Janela cheia: começa numa palavra inteira
            start = text.find(" ", lo, end)
            if start < 0:
                continue
        for anchor in compiled.anchor_pattern.finditer(text, start, end):
            start = anchor.start()
        if start >= end:
            continue

        parts.append(text[floor:start])
        parts.append(" ")
        floor = leader.end()

    if not parts:
        return text
    parts.append(text[floor:])
    return "".join(parts)


def strip_ellipses(text: str) -> str:
    """Regra 5: remove sequências de três ou mais pontos."""
    return _ELLIPSIS_RE.sub(" ", text)


class Normalizer:
    """
    Normalizador de texto parametrizado por um conjunto de regras.

    Usage:
        normalizer = Normalizer(REGLAMENTO_RULES)
        text = normalizer.normalize(raw_text)
    """

    def __init__(self, rules: Optional[ExtractionRules] = None):
        self.rules = rules or LEY_RULES
        self._compiled = compile_rules(self.rules)

    def normalize(self, raw: str) -> str:
        """
        Normaliza o texto bruto.

        Nunca falha: no pior caso devolve a entrada com espaços colapsados.
        """
        if not raw:
            return ""

        text = unicodedata.normalize("NFC", raw)
        text = fold_whitespace(text)
        text = erase_line_breaks(text)
        text = canonicalize_keywords(text, self._compiled)
        text = strip_toc_entries(text, self._compiled)
        text = strip_ellipses(text)

        text = fold_whitespace(text).strip()
        text = canonicalize_keywords(text, self._compiled)

        logger.debug(f"Normalized {len(raw)} -> {len(text)} chars ({self.rules.classification})")
        return text


def normalize(raw: str, rules: Optional[ExtractionRules] = None) -> str:
    """Atalho: normaliza `raw` com as regras dadas (padrão: Ley)."""
    return Normalizer(rules).normalize(raw)
