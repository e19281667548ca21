"""
Segment Models - Data structures for extracted legal document segments.

Each segment is one addressable heading of a Mexican legal instrument
(capítulo, sección, artículo, transitorios...) together with the text that
follows it up to the next heading.

Segment shape (JSON):
    {"kind": "article", "title": "ARTÍCULO 1", "body": "...", "order": 1}

Notas:
    - `order` é denso e começa em 1; é o único identificador de posição.
    - `title` é sempre não vazio e começa com a palavra-chave canônica
      (cláusulas numeradas de Norma não têm palavra-chave: "5.1").
    - `body` pode ser vazio (ex: TRANSITORIOS sem texto depois).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class HeadingKind(str, Enum):
    """Tipos de cabeçalho em documentos legais mexicanos."""

    # Núcleo (todas as classificações)
    CHAPTER = "chapter"         # CAPÍTULO I, CAPÍTULO PRIMERO...
    SECTION = "section"         # SECCIÓN 1, SECCIÓN PRIMERA...
    ARTICLE = "article"         # ARTÍCULO 1, ARTÍCULO 12 Bis...
    TRANSITORY = "transitory"   # TRANSITORIOS

    # Estruturas extras (Reglamento / Norma)
    TITLE = "title"             # TÍTULO I
    ANNEX = "annex"             # ANEXO I, ANEXO A
    APPENDIX = "appendix"       # APÉNDICE 1

    # Norma (NOM)
    CLAUSE = "clause"           # 1. Objetivo, 5.1 Requisitos
    CONSIDERING = "considering" # CONSIDERANDO
    CONTENTS = "contents"       # CONTENIDO
    INDEX = "index"             # ÍNDICE

    # Texto antes do primeiro cabeçalho (só quando a regra o retém)
    PREAMBLE = "preamble"


@dataclass(frozen=True)
class Anchor:
    """
    Cabeçalho reconhecido no texto normalizado.

    Attributes:
        kind: Tipo do cabeçalho
        text: Trecho casado, literal (inclui pontuação colada: "1.-")
        title: Título canônico (palavra-chave + número, sem pontuação final)
        start: Posição inicial no texto normalizado
        end: Posição final no texto normalizado
    """

    kind: HeadingKind
    text: str
    title: str
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Segment:
    """
    Unidade emitida pelo extrator.

    Attributes:
        kind: Tipo do cabeçalho que abre o segmento
        title: Título canônico (ex: "ARTÍCULO 12 Bis")
        body: Texto até o próximo cabeçalho (pode ser "")
        order: Posição no documento (1, 2, 3...)
    """

    kind: HeadingKind
    title: str
    body: str
    order: int

    @property
    def is_article(self) -> bool:
        return self.kind == HeadingKind.ARTICLE

    @property
    def is_empty(self) -> bool:
        return not self.body

    def to_dict(self) -> dict:
        """Converte para dicionário (formato de transporte JSON)."""
        return {
            "kind": self.kind.value,
            "title": self.title,
            "body": self.body,
            "order": self.order,
        }

    def __repr__(self) -> str:
        body_preview = self.body[:50] + "..." if len(self.body) > 50 else self.body
        return f"Segment({self.order}, {self.kind.value}, '{self.title}', '{body_preview}')"


@dataclass
class ExtractionResult:
    """
    Sequência ordenada de segmentos de um documento.

    Attributes:
        segments: Segmentos em ordem de documento
        classification: Classificação usada na extração (ex: "Ley")
    """

    segments: list[Segment] = field(default_factory=list)
    classification: Optional[str] = None

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    def get_segments_by_kind(self, kind: HeadingKind) -> list[Segment]:
        """Retorna todos os segmentos de um tipo, em ordem de documento."""
        return [s for s in self.segments if s.kind == kind]

    def count_by_kind(self) -> dict[str, int]:
        """Conta segmentos por tipo."""
        counts: dict[str, int] = {}
        for segment in self.segments:
            counts[segment.kind.value] = counts.get(segment.kind.value, 0) + 1
        return counts

    @property
    def articles(self) -> list[Segment]:
        """Retorna todos os artigos."""
        return self.get_segments_by_kind(HeadingKind.ARTICLE)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def to_text(self) -> str:
        """
        Reconstrói o texto a partir dos segmentos.

        Títulos e corpos não vazios unidos por um espaço: é o texto
        normalizado sem o preâmbulo (a menos da pontuação colada aos
        cabeçalhos, como o "." de "ARTÍCULO 1.").
        """
        parts = []
        for segment in self.segments:
            if segment.kind != HeadingKind.PREAMBLE:
                parts.append(segment.title)
            if segment.body:
                parts.append(segment.body)
        return " ".join(parts)

    def to_list(self) -> list[dict]:
        """Converte para lista de registros JSON."""
        return [s.to_dict() for s in self.segments]

    def to_dict(self) -> dict:
        """Converte para dicionário."""
        return {
            "classification": self.classification,
            "segment_count": len(self.segments),
            "counts": self.count_by_kind(),
            "segments": self.to_list(),
        }

    def __repr__(self) -> str:
        return (
            f"ExtractionResult("
            f"classification={self.classification!r}, "
            f"segments={len(self.segments)}, "
            f"articles={len(self.articles)})"
        )
