"""
Extrai os segmentos de um documento legal em texto puro.

Uso:
    python scripts/extract_articles.py data/ley_federal.txt --classification Ley
    python scripts/extract_articles.py data/reglamento.txt --classification Reglamento --output out.json
    python scripts/extract_articles.py data/ley.txt --classification Ley --keep-preamble
"""

import json
import sys
import argparse
import logging
from pathlib import Path

# Adiciona src ao path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from articulos.parsing import Extractor, default_registry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_text(path: Path) -> str:
    """Carrega o texto bruto do documento."""
    logger.info(f"Carregando documento: {path}")
    with open(path, encoding="utf-8") as f:
        return f.read()


def main():
    parser = argparse.ArgumentParser(description="Extrai artigos de um documento legal")
    parser.add_argument("input", type=Path, help="Arquivo de texto do documento")
    parser.add_argument(
        "--classification",
        required=True,
        help=f"Classificacao do documento ({', '.join(default_registry.classifications)})",
    )
    parser.add_argument("--output", type=Path, help="Arquivo JSON de saida (padrao: stdout)")
    parser.add_argument("--keep-preamble", action="store_true", help="Mantem o texto antes da primeira ancora")
    args = parser.parse_args()

    rules = default_registry.get_rules(args.classification)
    if rules is None:
        logger.error(f"Classificacao invalida: {args.classification}")
        return 2

    if args.keep_preamble:
        rules = rules.with_options(keep_preamble=True)

    text = load_text(args.input)
    result = Extractor(text, rules).extract()

    if result.is_empty:
        logger.warning("Nenhum segmento encontrado")

    payload = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info(f"Salvo em {args.output}: {len(result)} segmentos")
    else:
        print(payload)

    return 0


if __name__ == "__main__":
    sys.exit(main())
