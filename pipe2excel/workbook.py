"""In-memory workbook model and sheet assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from .errors import NoValidDataError
from .naming import derive_sheet_name, make_unique_sheet_name
from .parsing import Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceDocument:
    """A named delimited text document supplied by the caller."""

    name: str
    raw_text: str


@dataclass
class SheetData:
    """Rows destined for one worksheet."""

    name: str
    rows: List[Row]
    source_name: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass
class FileOutcome:
    """Result of preparing one document: parsed rows or the reason it was skipped."""

    source_name: str
    rows: Optional[List[Row]] = None
    skip_reason: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.rows is None


class WorkbookAssembler:
    """Collects sheets for a single conversion and keeps their names unique.

    Names are compared casefolded, matching how spreadsheet applications treat
    sheet names.
    """

    def __init__(self) -> None:
        self._sheets: List[SheetData] = []
        self._used_names: Set[str] = set()
        self._warnings: List[str] = []

    @property
    def sheets(self) -> List[SheetData]:
        return list(self._sheets)

    @property
    def sheet_names(self) -> List[str]:
        return [sheet.name for sheet in self._sheets]

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)

    def add_sheet(self, source_name: str, rows: List[Row]) -> SheetData:
        """Append ``rows`` under a unique name derived from ``source_name``."""

        candidate = derive_sheet_name(source_name)
        name = make_unique_sheet_name(candidate, self._used_names)
        if name != candidate:
            logger.debug("Sheet name '%s' already used; renamed to '%s'", candidate, name)
        self._used_names.add(name.casefold())
        sheet = SheetData(name=name, rows=rows, source_name=source_name)
        self._sheets.append(sheet)
        logger.info("Added sheet '%s' (%s rows) from %s", name, sheet.row_count, source_name)
        return sheet

    def add_outcome(self, outcome: FileOutcome) -> Optional[SheetData]:
        """Commit a prepared document, or record why it was skipped."""

        self._warnings.extend(outcome.warnings)
        if outcome.skipped:
            message = f"Skipping '{outcome.source_name}': {outcome.skip_reason}"
            logger.warning(message)
            self._warnings.append(message)
            return None
        return self.add_sheet(outcome.source_name, outcome.rows)

    def add_outcomes(self, outcomes: Iterable[FileOutcome]) -> List[SheetData]:
        added = []
        for outcome in outcomes:
            sheet = self.add_outcome(outcome)
            if sheet is not None:
                added.append(sheet)
        return added

    def build(self) -> List[SheetData]:
        """Return the sheets in submission order, failing if there are none."""

        if not self._sheets:
            raise NoValidDataError()
        return self.sheets


__all__ = ["FileOutcome", "SheetData", "SourceDocument", "WorkbookAssembler"]
