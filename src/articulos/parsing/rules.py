"""
Extraction rules - Regex library for Mexican legal documents.

Each classification (Ley, Reglamento, Norma...) is a frozen `ExtractionRules`
record. The pipeline (normalizer -> scanner -> assembler) is always the same;
only the record changes. Adding a classification = registering a new record.

Estrutura (Mexican legal documents):
    TÍTULO > CAPÍTULO > SECCIÓN > ARTÍCULO ... TRANSITORIOS > ANEXO

Regex Patterns:
    - Capítulo:     CAPÍTULO I, CAPÍTULO 2, CAPÍTULO PRIMERO, CAPÍTULO ÚNICO
    - Sección:      SECCIÓN 1 (Reglamento: SECCIÓN I, SECCIÓN PRIMERA)
    - Artículo:     ARTÍCULO 1, ARTÍCULO 1o, ARTÍCULO 12 Bis, ARTÍCULO 84-E
    - Transitorios: TRANSITORIOS
    - Título:       TÍTULO I, TÍTULO PRIMERO
    - Anexo:        ANEXO I, ANEXO A, ANEXO ÚNICO
    - Apéndice:     APÉNDICE 1, APÉNDICE A
    - Cláusula:     1. Objetivo, 5.1 Requisitos (Norma, sem palavra-chave)
    - Norma:        CONSIDERANDO, CONTENIDO, ÍNDICE
"""

import re
import unicodedata
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Optional

from .segment_models import HeadingKind

# =============================================================================
# TOKENS - números que seguem a palavra-chave
# =============================================================================

# Arábico com indicador ordinal opcional: 1, 12, 1o, 2º
ARABIC = r"\d+(?:[oº°ª])?"

# Romano válido em maiúsculas: I, IV, XII ("CIVIL" não casa)
ROMAN = (
    r"(?=[IVXLCDM])M{0,3}(?:C[MD]|D?C{0,3})(?:X[CL]|L?X{0,3})(?:I[XV]|V?I{0,3})"
)

# Ordinal por extenso: PRIMERO, SEGUNDA, DÉCIMO PRIMERO, ÚNICO
_ORDINAL_BASE = (
    r"PRIMER[OA]?|SEGUND[OA]|TERCER[OA]?|CUART[OA]|QUINT[OA]|SEXT[OA]|"
    r"S[ÉE]PTIM[OA]|OCTAV[OA]|NOVEN[OA]|D[ÉE]CIM[OA]|UND[ÉE]CIM[OA]|"
    r"DUOD[ÉE]CIM[OA]|[ÚU]NIC[OA]"
)
ORDINAL = (
    rf"(?i:(?:(?:D[ÉE]CIM|VIG[ÉE]SIM|TRIG[ÉE]SIM)[OA]\s)?(?:{_ORDINAL_BASE})"
    r"|VIG[ÉE]SIM[OA]|TRIG[ÉE]SIM[OA])"
)

# Letra isolada (anexos): ANEXO A
LETTER = r"[A-Z]"

# Cláusula numerada de Norma: "1. Objetivo", "5.1 Requisitos". Só vale antes
# de texto com inicial maiúscula ("cumplir 5 requisitos" não é cláusula)
CLAUSE_NUMBER = r"\d{1,3}(?:\.\d{1,3})*(?=\.?\s+[A-ZÁÉÍÓÚÑ])"

# Sufixos de artigo: 12 Bis, 12-Ter, 4 Quáter, 84-E
ARTICLE_SUFFIX = (
    r"[\s\-–]?(?i:BIS|TER|QU[ÁA]TER|QUINQUIES|SEXIES|SEPTIES|OCTIES|NONIES|DECIES)"
    r"|-[A-Z]"
)

# Pontuação colada ao cabeçalho ("1.", "1o.-", "I:"); pertence à âncora
ANCHOR_DELIMITER = r"[.:\-–—]*"

# Entradas de índice com pontilhado são curtas
TOC_ENTRY_MAX_CHARS = 200


def strip_accents(text: str) -> str:
    """Remove acentos (Í -> I, ó -> o)."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


# =============================================================================
# MODELOS
# =============================================================================

@dataclass(frozen=True)
class HeadingSpec:
    """
    Padrão de reconhecimento de um tipo de cabeçalho.

    Attributes:
        kind: Tipo do cabeçalho
        keyword: Forma canônica da palavra-chave (maiúscula, acentuada);
            vazia para cabeçalhos só numéricos
        token: Regex do número que segue a palavra-chave (None = palavra isolada)
        suffix: Regex de sufixo opcional após o número (Bis, Ter...)
        token_optional: O número pode faltar ("TRANSITORIO" ou "TRANSITORIO PRIMERO")
    """

    kind: HeadingKind
    keyword: str
    token: Optional[str] = None
    suffix: Optional[str] = None
    token_optional: bool = False

    def anchor_regex(self) -> str:
        """Regex do título do cabeçalho (sem a pontuação colada)."""
        if not self.keyword:
            return rf"(?:{self.token})(?!\w)"

        pattern = re.escape(self.keyword)
        if self.token:
            number = rf"\s+(?:{self.token})"
            if self.suffix:
                number += rf"(?:{self.suffix})?"
            pattern += f"(?:{number})?" if self.token_optional else number
        return pattern + r"(?!\w)"

    def keyword_regex(self, allow_lowercase: bool = False) -> str:
        """
        Regex da palavra-chave com ruído de OCR.

        Aceita letras separadas por espaço ("A R T Í C U L O"), maiúsculas ou
        capitalizada ("Artículo") e perda do acento ("ARTICULO"). A forma toda
        minúscula só casa com `allow_lowercase`.
        """
        variants = [self.keyword, self.keyword[0] + self.keyword[1:].lower()]
        if allow_lowercase:
            variants.append(self.keyword.lower())

        alternatives = []
        for variant in variants:
            letters = [_letter_class(char) for char in variant]
            alternatives.append(r"\s?".join(letters))

        return r"(?<!\w)(?:" + "|".join(alternatives) + r")(?![^\W\d_])"


def _letter_class(char: str) -> str:
    """Classe de caracteres que tolera perda de acento."""
    plain = strip_accents(char)
    if plain != char:
        return f"[{char}{plain}]"
    return re.escape(char)


@dataclass(frozen=True)
class ExtractionRules:
    """
    Conjunto de regras de uma classificação.

    Attributes:
        classification: Etiqueta da classificação ("Ley", "Reglamento"...)
        headings: Padrões de cabeçalho, em ordem de precedência
        allow_lowercase_keywords: Aceita "artículo 5" todo minúsculo
        keep_preamble: Emite o preâmbulo como segmento PREAMBLE
        strip_toc_entries: Remove entradas de índice com pontilhado
    """

    classification: str
    headings: tuple[HeadingSpec, ...] = field(default_factory=tuple)
    allow_lowercase_keywords: bool = False
    keep_preamble: bool = False
    strip_toc_entries: bool = True

    @property
    def kinds(self) -> tuple[HeadingKind, ...]:
        return tuple(h.kind for h in self.headings)

    @property
    def keywords(self) -> tuple[str, ...]:
        """Palavras-chave distintas, na ordem dos cabeçalhos."""
        seen = []
        for heading in self.headings:
            if heading.keyword and heading.keyword not in seen:
                seen.append(heading.keyword)
        return tuple(seen)

    def get_heading(self, kind: HeadingKind) -> Optional[HeadingSpec]:
        """Busca o primeiro padrão de um tipo de cabeçalho."""
        for heading in self.headings:
            if heading.kind == kind:
                return heading
        return None

    def get_headings(self, kind: HeadingKind) -> tuple[HeadingSpec, ...]:
        """Todos os padrões de um tipo (ex: TRANSITORIOS, TRANSITORIAS, TRANSITORIO)."""
        return tuple(h for h in self.headings if h.kind == kind)

    def with_options(self, **changes) -> "ExtractionRules":
        """Cópia com opções alteradas (o registro original não muda)."""
        return replace(self, **changes)


@dataclass(frozen=True)
class CompiledRules:
    """Regex compiladas de um `ExtractionRules` (uma vez por conjunto)."""

    rules: ExtractionRules
    keyword_patterns: tuple[tuple[re.Pattern, str], ...]
    toc_pattern: Optional[re.Pattern]
    anchor_pattern: re.Pattern
    kinds_by_group: tuple[tuple[str, HeadingKind], ...]

    def kind_for_group(self, group: str) -> HeadingKind:
        for name, kind in self.kinds_by_group:
            if name == group:
                return kind
        raise KeyError(group)


@lru_cache(maxsize=None)
def compile_rules(rules: ExtractionRules) -> CompiledRules:
    """Compila as regex de um conjunto de regras (cacheado por conjunto)."""
    keyword_patterns = tuple(
        (re.compile(h.keyword_regex(rules.allow_lowercase_keywords)), h.keyword)
        for h in rules.headings
        if h.keyword
    )

    toc_pattern = None
    if rules.strip_toc_entries and rules.headings:
        # Pontilhado + número de página; a entrada é recortada para trás a
        # partir daqui (ver normalizer.strip_toc_entries)
        toc_pattern = re.compile(r"(?<!\.)\.{3,}\s*\d{1,4}(?![\w.])\s*")

    groups = []
    alternatives = []
    for heading in rules.headings:
        # Grupos únicos: o mesmo tipo pode ter vários padrões
        name = heading.kind.value
        repeated = sum(1 for group, _ in groups if group.split("_")[0] == name)
        if repeated:
            name = f"{name}_{repeated}"
        groups.append((name, heading.kind))
        alternatives.append(f"(?P<{name}>{heading.anchor_regex()})")

    if alternatives:
        anchor_regex = r"(?<!\S)(?:" + "|".join(alternatives) + ")" + ANCHOR_DELIMITER
    else:
        anchor_regex = r"(?!)"

    return CompiledRules(
        rules=rules,
        keyword_patterns=keyword_patterns,
        toc_pattern=toc_pattern,
        anchor_pattern=re.compile(anchor_regex),
        kinds_by_group=tuple(groups),
    )


# =============================================================================
# CONJUNTOS DE REGRAS PADRÃO
# =============================================================================

_CHAPTER = HeadingSpec(HeadingKind.CHAPTER, "CAPÍTULO", token=rf"{ROMAN}|{ARABIC}|{ORDINAL}")
_TRANSITORY = HeadingSpec(HeadingKind.TRANSITORY, "TRANSITORIOS")
_TITLE = HeadingSpec(HeadingKind.TITLE, "TÍTULO", token=rf"{ROMAN}|{ARABIC}|{ORDINAL}")
_ANNEX = HeadingSpec(HeadingKind.ANNEX, "ANEXO", token=rf"{ROMAN}|{ARABIC}|{ORDINAL}|{LETTER}")

# Ley: apenas numeração arábica em seções e artigos
LEY_RULES = ExtractionRules(
    classification="Ley",
    headings=(
        _CHAPTER,
        HeadingSpec(HeadingKind.SECTION, "SECCIÓN", token=ARABIC),
        HeadingSpec(HeadingKind.ARTICLE, "ARTÍCULO", token=ARABIC, suffix=ARTICLE_SUFFIX),
        _TRANSITORY,
    ),
)

# Reglamento: aceita "SECCIÓN PRIMERA", "ARTÍCULO PRIMERO", "ARTÍCULO IV";
# tem TÍTULO, ANEXO e as variantes de transitórios
REGLAMENTO_RULES = ExtractionRules(
    classification="Reglamento",
    headings=(
        _CHAPTER,
        HeadingSpec(HeadingKind.SECTION, "SECCIÓN", token=rf"{ARABIC}|{ROMAN}|{ORDINAL}"),
        HeadingSpec(
            HeadingKind.ARTICLE, "ARTÍCULO", token=rf"{ARABIC}|{ORDINAL}|{ROMAN}", suffix=ARTICLE_SUFFIX
        ),
        _TRANSITORY,
        HeadingSpec(HeadingKind.TRANSITORY, "TRANSITORIAS"),
        # TRANSITORIO PRIMERO, TRANSITORIO 2, TRANSITORIO ÚNICO ou só TRANSITORIO
        HeadingSpec(
            HeadingKind.TRANSITORY, "TRANSITORIO",
            token=rf"{ORDINAL}|{ARABIC}|{ROMAN}", token_optional=True,
        ),
        _TITLE,
        _ANNEX,
    ),
)

# Norma (NOM): como Reglamento, mais APÉNDICE, CONSIDERANDO, CONTENIDO, ÍNDICE
# e cláusulas numeradas. A cláusula fica por último: palavras-chave têm prioridade
NORMA_RULES = REGLAMENTO_RULES.with_options(
    classification="Norma",
    headings=REGLAMENTO_RULES.headings + (
        HeadingSpec(HeadingKind.APPENDIX, "APÉNDICE", token=rf"{ROMAN}|{ARABIC}|{ORDINAL}|{LETTER}"),
        HeadingSpec(HeadingKind.CONSIDERING, "CONSIDERANDO"),
        HeadingSpec(HeadingKind.CONTENTS, "CONTENIDO"),
        HeadingSpec(HeadingKind.INDEX, "ÍNDICE"),
        HeadingSpec(HeadingKind.CLAUSE, "", token=CLAUSE_NUMBER),
    ),
)

DEFAULT_RULES = (LEY_RULES, REGLAMENTO_RULES, NORMA_RULES)
