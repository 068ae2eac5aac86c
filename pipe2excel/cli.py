"""Command line interface for converting delimited text files to XLSX."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .config import ConverterConfig, load_config
from .converter import convert_documents, convert_multiple
from .errors import ConversionError
from .workbook import SourceDocument

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert pipe-delimited text files into one Excel workbook")
    parser.add_argument("inputs", nargs="+", type=Path, help="Delimited text files, one sheet each")
    parser.add_argument("-o", "--output", help="Output workbook name (defaults to a name derived from the input)")
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Directory for the generated workbook")
    parser.add_argument("--config", type=Path, help="Path to YAML configuration")
    parser.add_argument("-d", "--delimiter", help="Single-character cell delimiter (default '|')")
    parser.add_argument("--chunk-size", type=int, help="Number of lines processed per batch")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    parser.add_argument("--quiet", action="store_true", help="Suppress console summary output")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        config = _load_effective_config(args)
    except Exception as exc:  # pragma: no cover - CLI validation
        logger.error("Failed to load configuration: %s", exc)
        return 1

    try:
        documents = read_documents(args.inputs)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read input files: %s", exc)
        return 1

    try:
        if len(documents) == 1:
            artifact = convert_documents(documents, output_name=args.output, config=config)
        else:
            artifact = convert_multiple(documents, output_name=args.output, config=config)
    except ConversionError as exc:
        logger.error("Conversion failed: %s", exc)
        return 1

    output_dir = _resolve_override_path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / artifact.file_name
    output_path.write_bytes(artifact.payload)
    logger.info("Wrote %s", output_path)

    if not args.quiet:
        print(f"Created {output_path} with sheets: {', '.join(artifact.sheet_names)}")
        for warning in artifact.warnings:
            print(f"Warning: {warning}")

    return 0


def read_documents(paths: Iterable[Path]) -> List[SourceDocument]:
    """Read each file as UTF-8 text, tolerating a byte order mark."""

    documents: List[SourceDocument] = []
    for path in paths:
        path = Path(path)
        logger.debug("Reading %s", path)
        documents.append(SourceDocument(name=path.name, raw_text=path.read_text(encoding="utf-8-sig")))
    return documents


def _load_effective_config(args: argparse.Namespace) -> ConverterConfig:
    config = load_config(args.config) if args.config else ConverterConfig()
    return config.with_overrides(delimiter=args.delimiter, chunk_size=args.chunk_size)


def _resolve_override_path(path: Path) -> Path:
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


if __name__ == "__main__":  # pragma: no cover - manual execution entry point
    raise SystemExit(main())
