"""Testes do SegmentAssembler."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from articulos.parsing import (
    LEY_RULES,
    Anchor,
    HeadingKind,
    ScanResult,
    SegmentAssembler,
    assemble,
)
from articulos.parsing.assembler import PREAMBLE_TITLE


def _scan(preamble: str = "") -> ScanResult:
    return ScanResult(
        preamble=preamble,
        entries=[
            (Anchor(HeadingKind.CHAPTER, "CAPÍTULO I", "CAPÍTULO I"), " Disposiciones generales "),
            (Anchor(HeadingKind.ARTICLE, "ARTÍCULO 1.", "ARTÍCULO 1"), " Texto uno. "),
            (Anchor(HeadingKind.TRANSITORY, "TRANSITORIOS", "TRANSITORIOS"), " "),
            (Anchor(HeadingKind.ARTICLE, "ARTÍCULO 2.", "ARTÍCULO 2"), " Texto dos."),
        ],
    )


def test_assemble_orders_and_strips():
    result = assemble(_scan())

    assert len(result) == 4
    assert [s.order for s in result] == [1, 2, 3, 4]
    assert [s.kind for s in result] == [
        HeadingKind.CHAPTER,
        HeadingKind.ARTICLE,
        HeadingKind.TRANSITORY,
        HeadingKind.ARTICLE,
    ]
    assert result[0].body == "Disposiciones generales"
    assert result[1].title == "ARTÍCULO 1"
    assert result[2].body == ""
    assert result[2].is_empty
    assert result.classification == "Ley"


def test_empty_scan():
    """Sem âncoras: resultado vazio, mesmo com preâmbulo."""
    result = assemble(ScanResult(preamble="Solo texto."))
    assert result.is_empty
    assert len(result) == 0


def test_preamble_dropped_by_default():
    result = assemble(_scan(preamble="Decreto por el que se expide "))
    assert result[0].kind == HeadingKind.CHAPTER
    assert result[0].order == 1


def test_preamble_kept_when_asked():
    rules = LEY_RULES.with_options(keep_preamble=True)
    result = SegmentAssembler(rules).assemble(_scan(preamble="Decreto por el que se expide "))

    assert result[0].kind == HeadingKind.PREAMBLE
    assert result[0].title == PREAMBLE_TITLE
    assert result[0].body == "Decreto por el que se expide"
    assert [s.order for s in result] == [1, 2, 3, 4, 5]

    # O título do preâmbulo não entra no texto reconstruído
    assert result.to_text().startswith("Decreto por el que se expide CAPÍTULO I")


def test_blank_preamble_not_emitted():
    rules = LEY_RULES.with_options(keep_preamble=True)
    result = SegmentAssembler(rules).assemble(_scan(preamble="  "))
    assert result[0].kind == HeadingKind.CHAPTER


def test_result_helpers():
    result = assemble(_scan())

    assert result.count_by_kind() == {"chapter": 1, "article": 2, "transitory": 1}
    assert [s.title for s in result.articles] == ["ARTÍCULO 1", "ARTÍCULO 2"]
    assert result.to_text() == (
        "CAPÍTULO I Disposiciones generales ARTÍCULO 1 Texto uno. "
        "TRANSITORIOS ARTÍCULO 2 Texto dos."
    )
    assert result.to_list()[1] == {
        "kind": "article",
        "title": "ARTÍCULO 1",
        "body": "Texto uno.",
        "order": 2,
    }

    payload = result.to_dict()
    assert payload["classification"] == "Ley"
    assert payload["segment_count"] == 4


def test_segments_are_immutable():
    segment = assemble(_scan())[0]
    with pytest.raises(AttributeError):
        segment.body = "outro"
