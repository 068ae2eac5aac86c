"""XLSX serialisation of assembled workbooks."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, TYPE_FORMULA, TYPE_STRING

from .errors import EncodingError
from .workbook import SheetData

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ConversionArtifact:
    """Finished workbook bytes plus the suggested file name."""

    file_name: str
    payload: bytes
    sheet_names: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def mime_type(self) -> str:
        return XLSX_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.payload)


def _clean_cell(value: str) -> str:
    """Drop control characters that XML worksheets cannot hold."""

    return ILLEGAL_CHARACTERS_RE.sub("", value)


def sheet_to_frame(sheet: SheetData) -> pd.DataFrame:
    """Build an object-typed frame; short rows are padded with ``None``."""

    rows = [[_clean_cell(cell) for cell in row] for row in sheet.rows]
    return pd.DataFrame(rows, dtype=object)


def workbook_to_excel_bytes(sheets: Sequence[SheetData]) -> bytes:
    """Serialise ``sheets`` to XLSX, one worksheet each, values as plain text."""

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet in sheets:
            frame = sheet_to_frame(sheet)
            frame.to_excel(writer, index=False, header=False, sheet_name=sheet.name)
            _force_text_cells(writer.book[sheet.name])
    buffer.seek(0)
    return buffer.getvalue()


def _force_text_cells(worksheet) -> None:
    # openpyxl reads "=..." strings as formulas
    for row in worksheet.iter_rows():
        for cell in row:
            if cell.data_type == TYPE_FORMULA:
                cell.data_type = TYPE_STRING


def encode_workbook(sheets: Sequence[SheetData], file_name: str, warnings: Sequence[str] = ()) -> ConversionArtifact:
    """Encode ``sheets`` and wrap the bytes into a :class:`ConversionArtifact`.

    Any failure inside the writer is re-raised as :class:`EncodingError` with
    the original message.
    """

    logger.info("Encoding %s sheet(s) into %s", len(sheets), file_name)
    try:
        payload = workbook_to_excel_bytes(sheets)
    except Exception as exc:
        raise EncodingError(str(exc)) from exc

    names: List[str] = [sheet.name for sheet in sheets]
    logger.debug("Encoded %s bytes for %s", len(payload), file_name)
    return ConversionArtifact(
        file_name=file_name,
        payload=payload,
        sheet_names=tuple(names),
        warnings=tuple(warnings),
    )


__all__ = [
    "ConversionArtifact",
    "XLSX_MIME_TYPE",
    "encode_workbook",
    "sheet_to_frame",
    "workbook_to_excel_bytes",
]
