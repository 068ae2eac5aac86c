from __future__ import annotations

import io
from pathlib import Path
import sys
from typing import Dict, List, Optional

import pytest
from openpyxl import load_workbook

# Ensure project root is on sys.path for absolute imports
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from pipe2excel.config import ConverterConfig


def read_workbook_bytes(payload: bytes) -> Dict[str, List[List[Optional[str]]]]:
    """Return every sheet of an XLSX payload as a list of row values."""

    workbook = load_workbook(io.BytesIO(payload))
    return {
        worksheet.title: [list(row) for row in worksheet.iter_rows(values_only=True)]
        for worksheet in workbook.worksheets
    }


@pytest.fixture
def small_chunks() -> ConverterConfig:
    return ConverterConfig(chunk_size=3, yield_every=2)
