"""
Extrator de artigos de documentos legais mexicanos.

Subpacotes:
    parsing - núcleo (normalizer, scanner, assembler, dispatcher)
    jobs    - extração em fila (Celery + Redis)
    api     - superfície HTTP (FastAPI)
"""

__version__ = "0.1.0"
