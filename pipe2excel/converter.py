"""Conversion pipeline from delimited text documents to one XLSX workbook."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from .chunking import process_lines, process_lines_async
from .config import ConverterConfig
from .errors import EmptyInputError, InvalidDocumentError, NoInputError
from .export import ConversionArtifact, encode_workbook
from .naming import derive_output_file_name, ensure_xlsx_suffix
from .parsing import Row, check_column_consistency, check_input_size, iter_lines
from .workbook import FileOutcome, SourceDocument, WorkbookAssembler

logger = logging.getLogger(__name__)

DocumentLike = Union[SourceDocument, Mapping[str, str]]


def as_document(item: DocumentLike) -> SourceDocument:
    """Accept :class:`SourceDocument` or a ``{"name", "content"}`` mapping."""

    if isinstance(item, SourceDocument):
        return item
    if isinstance(item, Mapping):
        content = item.get("content", item.get("raw_text"))
        if "name" not in item or content is None:
            raise InvalidDocumentError("Documents must provide 'name' and 'content'")
        return SourceDocument(name=str(item["name"]), raw_text=str(content))
    raise InvalidDocumentError(f"Unsupported document type: {type(item).__name__}")


def _normalise_documents(documents: Optional[Iterable[DocumentLike]]) -> List[SourceDocument]:
    resolved = [as_document(item) for item in (documents or [])]
    if not resolved:
        raise NoInputError()
    return resolved


def _size_warnings(document: SourceDocument, config: ConverterConfig) -> List[str]:
    warning = check_input_size(document.raw_text, config.large_input_warning, document.name)
    return [warning] if warning else []


def _structure_warnings(document: SourceDocument, rows: Sequence[Row], config: ConverterConfig) -> List[str]:
    if len(document.raw_text) <= config.column_check_threshold:
        return []
    warning = check_column_consistency(rows, config.column_sample_rows, document.name)
    return [warning] if warning else []


def _finish(document: SourceDocument, rows: List[Row], warnings: List[str], config: ConverterConfig) -> FileOutcome:
    if not rows:
        return FileOutcome(source_name=document.name, skip_reason=str(EmptyInputError(document.name)))
    warnings.extend(_structure_warnings(document, rows, config))
    return FileOutcome(source_name=document.name, rows=rows, warnings=warnings)


def prepare_document(document: SourceDocument, config: Optional[ConverterConfig] = None) -> FileOutcome:
    """Parse one document into rows.

    Lines are read lazily and split batch by batch. Empty documents are
    reported as a skipped :class:`FileOutcome` rather than raised, so one bad
    file never aborts a batch.
    """

    config = config or ConverterConfig()
    warnings = _size_warnings(document, config)
    rows = process_lines(iter_lines(document.raw_text), config.delimiter, config.chunk_size)
    return _finish(document, rows, warnings, config)


async def prepare_document_async(
    document: SourceDocument, config: Optional[ConverterConfig] = None
) -> FileOutcome:
    """Same as :func:`prepare_document`, yielding to the event loop between batches."""

    config = config or ConverterConfig()
    warnings = _size_warnings(document, config)
    rows = await process_lines_async(
        iter_lines(document.raw_text), config.delimiter, config.chunk_size, config.yield_every
    )
    return _finish(document, rows, warnings, config)


def _resolve_output_name(
    documents: Sequence[SourceDocument],
    output_name: Optional[str],
    config: ConverterConfig,
    batch: bool,
) -> str:
    if output_name and output_name.strip():
        return ensure_xlsx_suffix(output_name)
    if len(documents) == 1 and not batch:
        return derive_output_file_name(documents[0].name)
    return ensure_xlsx_suffix(config.default_output_name)


def _assemble(
    documents: Sequence[SourceDocument],
    outcomes: Sequence[FileOutcome],
    output_name: Optional[str],
    config: ConverterConfig,
    batch: bool = False,
) -> ConversionArtifact:
    if not batch and len(documents) == 1 and outcomes[0].skipped:
        raise EmptyInputError(documents[0].name)

    assembler = WorkbookAssembler()
    assembler.add_outcomes(outcomes)
    sheets = assembler.build()
    file_name = _resolve_output_name(documents, output_name, config, batch)
    return encode_workbook(sheets, file_name, assembler.warnings)


def convert_documents(
    documents: Iterable[DocumentLike],
    output_name: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
) -> ConversionArtifact:
    """Convert one or more documents into a single workbook.

    With a single document an empty input raises :class:`EmptyInputError`;
    with several, empty documents are skipped and
    :class:`NoValidDataError` is raised only when none is left. Without
    ``output_name`` a single document names the output after itself and a
    batch uses ``config.default_output_name``.
    """

    config = config or ConverterConfig()
    resolved = _normalise_documents(documents)
    logger.info("Converting %s document(s)", len(resolved))
    outcomes = [prepare_document(document, config) for document in resolved]
    return _assemble(resolved, outcomes, output_name, config)


async def convert_documents_async(
    documents: Iterable[DocumentLike],
    output_name: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
) -> ConversionArtifact:
    """Asynchronous variant of :func:`convert_documents`.

    Documents are processed one after another; encoding runs synchronously
    once all rows are ready.
    """

    config = config or ConverterConfig()
    resolved = _normalise_documents(documents)
    logger.info("Converting %s document(s)", len(resolved))
    outcomes = [await prepare_document_async(document, config) for document in resolved]
    return _assemble(resolved, outcomes, output_name, config)


def convert_single(
    content: str,
    file_name: str,
    config: Optional[ConverterConfig] = None,
) -> ConversionArtifact:
    """Convert one document; the output is named after ``file_name``."""

    return convert_documents([SourceDocument(name=file_name, raw_text=content)], config=config)


def convert_multiple(
    documents: Iterable[DocumentLike],
    output_name: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
) -> ConversionArtifact:
    """Convert a batch into one workbook, skipping empty documents.

    Unlike :func:`convert_documents`, a batch of one still skips rather than
    raising :class:`EmptyInputError`, and the output name defaults to
    ``config.default_output_name``.
    """

    config = config or ConverterConfig()
    resolved = _normalise_documents(documents)
    logger.info("Converting batch of %s document(s)", len(resolved))
    outcomes = [prepare_document(document, config) for document in resolved]
    return _assemble(resolved, outcomes, output_name, config, batch=True)


__all__ = [
    "as_document",
    "convert_documents",
    "convert_documents_async",
    "convert_multiple",
    "convert_single",
    "prepare_document",
    "prepare_document_async",
]
