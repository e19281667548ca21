"""
Parsing module - Regex-first extraction for Mexican legal documents.

This module recovers the heading structure of a legal instrument (Ley,
Reglamento, Norma...) as a flat, ordered list of typed segments, using
deterministic regex patterns over normalised text.

Usage:
    from articulos.parsing import extract, HeadingKind

    result = extract("Ley", raw_text)

    for segment in result:
        print(f"{segment.order}: {segment.title} -> {segment.body[:50]}...")

    # Pipeline stages, one by one
    from articulos.parsing import Normalizer, SegmentScanner, SegmentAssembler, REGLAMENTO_RULES

    text = Normalizer(REGLAMENTO_RULES).normalize(raw_text)
    scan = SegmentScanner(REGLAMENTO_RULES).scan(text)
    result = SegmentAssembler(REGLAMENTO_RULES).assemble(scan)
"""

from .segment_models import (
    HeadingKind,
    Anchor,
    Segment,
    ExtractionResult,
)
from .rules import (
    HeadingSpec,
    ExtractionRules,
    compile_rules,
    LEY_RULES,
    REGLAMENTO_RULES,
    NORMA_RULES,
    DEFAULT_RULES,
)
from .normalizer import Normalizer, normalize
from .scanner import SegmentScanner, ScanResult, scan
from .assembler import SegmentAssembler, assemble
from .extractor import (
    Extractor,
    ExtractorRegistry,
    default_registry,
    get_extractor,
    extract,
    list_classifications,
)

__all__ = [
    # Modelos
    "HeadingKind",
    "Anchor",
    "Segment",
    "ExtractionResult",
    # Regras
    "HeadingSpec",
    "ExtractionRules",
    "compile_rules",
    "LEY_RULES",
    "REGLAMENTO_RULES",
    "NORMA_RULES",
    "DEFAULT_RULES",
    # Pipeline
    "Normalizer",
    "normalize",
    "SegmentScanner",
    "ScanResult",
    "scan",
    "SegmentAssembler",
    "assemble",
    # Dispatcher
    "Extractor",
    "ExtractorRegistry",
    "default_registry",
    "get_extractor",
    "extract",
    "list_classifications",
]
