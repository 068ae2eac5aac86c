"""pipe2excel conversion package.

Turns delimited text documents into a single XLSX workbook with one sheet per
document. The package holds the conversion engine only; user interfaces call
into :func:`convert_documents` (or its async and single/multi-file variants)
and receive a :class:`ConversionArtifact`.
"""

from .chunking import iter_batches, process_lines, process_lines_async
from .config import ConverterConfig, load_config
from .converter import (
    convert_documents,
    convert_documents_async,
    convert_multiple,
    convert_single,
    prepare_document,
)
from .errors import (
    ConversionError,
    EmptyInputError,
    EncodingError,
    InvalidDocumentError,
    NoInputError,
    NoValidDataError,
)
from .export import XLSX_MIME_TYPE, ConversionArtifact, encode_workbook
from .naming import derive_output_file_name, derive_sheet_name, make_unique_sheet_name
from .parsing import split_row, tokenize_lines
from .workbook import FileOutcome, SheetData, SourceDocument, WorkbookAssembler

__all__ = [
    "ConversionArtifact",
    "ConversionError",
    "ConverterConfig",
    "EmptyInputError",
    "EncodingError",
    "FileOutcome",
    "InvalidDocumentError",
    "NoInputError",
    "NoValidDataError",
    "SheetData",
    "SourceDocument",
    "WorkbookAssembler",
    "XLSX_MIME_TYPE",
    "convert_documents",
    "convert_documents_async",
    "convert_multiple",
    "convert_single",
    "derive_output_file_name",
    "derive_sheet_name",
    "encode_workbook",
    "iter_batches",
    "load_config",
    "make_unique_sheet_name",
    "prepare_document",
    "process_lines",
    "process_lines_async",
    "split_row",
    "tokenize_lines",
]
