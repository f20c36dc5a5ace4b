#!/usr/bin/env python3
"""Export a saved document to .doc and/or .docx.

The input is a JSON file with a ``metadata`` object and a ``blocks`` list,
the same shape the editor keeps in memory. Keys may be camelCase
(``companyName``) or snake_case (``company_name``).

Usage:
    python run_export.py document.json                    # both formats into ./output
    python run_export.py document.json --format modern    # .docx only
    python run_export.py document.json --out-dir build/
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from settings import Settings, configure_logging
from models.blocks import Block, parse_blocks
from models.document import DocumentMetadata
from pipeline.errors import RenderFailure
from pipeline.export import Exporter

logger = logging.getLogger("run_export")

_FORMATS = ("legacy", "modern")


def load_document(path: Path) -> tuple[DocumentMetadata, tuple[Block, ...]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    metadata = DocumentMetadata.model_validate(data["metadata"])
    return metadata, parse_blocks(data.get("blocks", []))


async def _export_all(
    exporter: Exporter,
    formats: list[str],
    metadata: DocumentMetadata,
    blocks: tuple[Block, ...],
    out_dir: Path,
) -> list[Path]:
    written: list[Path] = []
    for export_format in formats:
        artifact = await exporter.export(export_format, metadata, blocks)
        path = out_dir / artifact.filename
        path.write_bytes(artifact.data)
        logger.info("Wrote %s (%s)", path, artifact.mime_type)
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("document", type=Path, help="JSON file with metadata and blocks")
    parser.add_argument("--format", choices=(*_FORMATS, "all"), default="all", dest="export_format",
                        help="Which format to write (default: both)")
    parser.add_argument("--out-dir", type=Path, default=Path("output"), dest="out_dir",
                        help="Directory the exported files are written to")
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings)

    metadata, blocks = load_document(args.document)
    formats = list(_FORMATS) if args.export_format == "all" else [args.export_format]
    args.out_dir.mkdir(parents=True, exist_ok=True)

    try:
        asyncio.run(_export_all(Exporter(settings), formats, metadata, blocks, args.out_dir))
    except RenderFailure as exc:
        logger.error("Export failed: %s", exc)
        return 1

    logger.info("=== Done → %s ===", args.out_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
